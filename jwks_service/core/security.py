import base64
from typing import Any, Dict, Optional

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.backends import default_backend

RSA_PUBLIC_EXPONENT = 65537

def generate_rsa_private_key_pem(key_size: int = 2048) -> bytes:
    """
    Generates an RSA private key and returns it as unencrypted PKCS#8 PEM.
    CPU bound; async callers should run it in a worker thread.
    """
    key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=key_size,
        backend=default_backend()
    )

    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )

def load_rsa_private_key(pem: bytes) -> rsa.RSAPrivateKey:
    """
    Parses a PEM private key and checks that it is RSA.

    Raises:
        ValueError: If the material is not a parseable RSA private key.
    """
    if isinstance(pem, str):
        pem = pem.encode()
    try:
        key = serialization.load_pem_private_key(pem, password=None, backend=default_backend())
    except (TypeError, UnsupportedAlgorithm) as e:
        raise ValueError(f"Unsupported private key material: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError(f"Expected an RSA private key, got {type(key).__name__}")
    return key

def int_to_base64(value: int) -> str:
    """Convert an integer to a Base64URL-encoded string"""
    value_hex = format(value, 'x')
    if len(value_hex) % 2 == 1:
        value_hex = '0' + value_hex
    value_bytes = bytes.fromhex(value_hex)
    return base64.urlsafe_b64encode(value_bytes).rstrip(b'=').decode('ascii')

def public_jwk(private_key: rsa.RSAPrivateKey, kid: str, alg: str = "RS256", use: str = "sig") -> Dict[str, Any]:
    """Builds the public JWK for a private key under the given kid."""
    public_numbers = private_key.public_key().public_numbers()
    return {
        "kty": "RSA",
        "kid": kid,
        "alg": alg,
        "use": use,
        "n": int_to_base64(public_numbers.n),
        "e": int_to_base64(public_numbers.e),
    }

def sign_token(
    claims: Dict[str, Any],
    private_key: rsa.RSAPrivateKey,
    kid: str,
    algorithm: str = "RS256",
    headers: Optional[Dict[str, Any]] = None
) -> str:
    """
    Encodes a JWT with the given key, putting the kid in the header.
    """
    token_headers = {"typ": "JWT", "kid": kid}
    if headers:
        token_headers.update(headers)

    return jwt.encode(
        claims,
        private_key,
        algorithm=algorithm,
        headers=token_headers
    )
