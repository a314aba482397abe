from typing import Any, Dict

from jwks_service.core import security
from jwks_service.core.exceptions import KeyDerivationError
from jwks_service.services.key_selector import KeySelector

class JWKSPublisher:
    def __init__(self, selector: KeySelector, algorithm: str = "RS256", use: str = "sig"):
        self.selector = selector
        self.algorithm = algorithm
        self.use = use

    async def build_jwks(self) -> Dict[str, Any]:
        """
        Returns the JWK Set of every valid key, each keyed by its store kid.
        One unreadable key fails the whole document.
        """
        records = await self.selector.select_all_for_publishing()

        keys = []
        for record in records:
            try:
                private_key = security.load_rsa_private_key(record.private_key_pem)
            except ValueError as e:
                raise KeyDerivationError(f"Could not derive public key for kid {record.kid}: {e}") from e
            keys.append(security.public_jwk(private_key, str(record.kid), self.algorithm, self.use))

        return {"keys": keys}
