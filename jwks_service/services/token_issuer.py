from typing import Any, Dict, Optional

import jwt

from jwks_service.core import security
from jwks_service.core.exceptions import SigningError
from jwks_service.models import KeyRecord
from jwks_service.services.key_store import current_timestamp

class TokenIssuer:
    """
    Signs placeholder identity tokens with a stored key.

    Expired tokens are expired by their own claims, whatever the expiry
    of the key that signs them.
    """

    def __init__(
        self,
        subject: str = "userABC",
        lifetime: int = 3600,
        expired_issued_ago: int = 3600,
        expired_age: int = 10,
        algorithm: str = "RS256"
    ):
        self.subject = subject
        self.lifetime = lifetime
        self.expired_issued_ago = expired_issued_ago
        self.expired_age = expired_age
        self.algorithm = algorithm

    def build_claims(self, want_expired: bool, now: Optional[int] = None) -> Dict[str, Any]:
        if now is None:
            now = current_timestamp()
        if want_expired:
            return {
                "user": self.subject,
                "iat": now - self.expired_issued_ago,
                "exp": now - self.expired_age,
            }
        return {
            "user": self.subject,
            "iat": now,
            "exp": now + self.lifetime,
        }

    def issue(self, record: KeyRecord, want_expired: bool, now: Optional[int] = None) -> str:
        claims = self.build_claims(want_expired, now)
        try:
            private_key = security.load_rsa_private_key(record.private_key_pem)
            return security.sign_token(
                claims,
                private_key,
                kid=str(record.kid),
                algorithm=self.algorithm
            )
        except (ValueError, TypeError, NotImplementedError, jwt.PyJWTError) as e:
            raise SigningError(f"Could not sign token with key {record.kid}: {e}") from e
