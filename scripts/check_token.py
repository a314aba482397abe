#!/usr/bin/env python3
"""
Check a running JWKS server end to end.
Requests a token, fetches the JWK Set and verifies the token against the
published key with the matching kid.
"""
import sys
import asyncio
import argparse

import httpx
import jwt


async def check_token(base_url: str, expired: bool) -> int:
    print("=" * 60)
    print("JWKS Token Check")
    print("=" * 60)

    params = {"expired": "true"} if expired else None
    async with httpx.AsyncClient(base_url=base_url) as client:
        token_response = await client.post("/auth", params=params)
        jwks_response = await client.get("/.well-known/jwks.json")

    print(f"\n1. POST /auth -> {token_response.status_code}")
    if token_response.status_code != 200:
        print(f"   Response: {token_response.text[:200]}")
        return 1
    token = token_response.text
    print(f"   Has 3 parts: {len(token.split('.')) == 3}")

    header = jwt.get_unverified_header(token)
    kid = header.get("kid")
    print(f"   Header kid: {kid}")

    print(f"\n2. GET /.well-known/jwks.json -> {jwks_response.status_code}")
    published = {k["kid"]: k for k in jwks_response.json().get("keys", [])}
    print(f"   Published kids: {sorted(published)}")

    print("\n3. Verification:")
    if kid not in published:
        # Expected for expired tokens: their key is never published
        print(f"   kid {kid} is not published; token is unverifiable")
        return 0 if expired else 1

    public_key = jwt.PyJWK(published[kid]).key
    try:
        claims = jwt.decode(token, public_key, algorithms=["RS256"])
    except jwt.ExpiredSignatureError:
        print("   Signature valid, token expired")
        return 0 if expired else 1
    except jwt.PyJWTError as e:
        print(f"   Verification failed: {e}")
        return 1

    print(f"   Verified claims: {claims}")
    return 1 if expired else 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", default="http://localhost:8080")
    parser.add_argument("--expired", action="store_true", help="request an expired token")
    args = parser.parse_args()
    return asyncio.run(check_token(args.url, args.expired))


if __name__ == "__main__":
    sys.exit(main())
