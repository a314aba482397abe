import asyncio
import logging
from typing import List, Optional

from jwks_service.core.security import generate_rsa_private_key_pem
from jwks_service.services.key_store import KeyStore, current_timestamp

logger = logging.getLogger(__name__)

class KeyLifecycleManager:
    """
    Keeps at least one valid and one expired signing key in the store.

    Not synchronized: two concurrent calls against an empty class may both
    insert a key. The extra key is harmless.
    """

    def __init__(
        self,
        store: KeyStore,
        key_size: int = 2048,
        valid_lifetime: int = 3600,
        expired_age: int = 10
    ):
        self.store = store
        self.key_size = key_size
        self.valid_lifetime = valid_lifetime
        self.expired_age = expired_age

    async def generate_key(self, expires_at: int) -> int:
        """Generates an RSA key off the event loop and persists it. Returns its kid."""
        pem = await asyncio.to_thread(generate_rsa_private_key_pem, self.key_size)
        kid = await self.store.insert(pem, expires_at)
        logger.info(
            "Generated signing key",
            extra={"kid": kid, "expires_at": expires_at, "key_size": self.key_size}
        )
        return kid

    async def ensure_invariants(self, now: Optional[int] = None) -> List[int]:
        """
        Inserts a valid key and/or an expired key when either class is empty.
        Returns the kids inserted by this call.
        """
        if now is None:
            now = current_timestamp()

        valid_count = await self.store.count_by_expiry(False, now)
        expired_count = await self.store.count_by_expiry(True, now)

        inserted: List[int] = []
        if valid_count == 0:
            inserted.append(await self.generate_key(now + self.valid_lifetime))
        if expired_count == 0:
            inserted.append(await self.generate_key(now - self.expired_age))

        if not inserted:
            logger.debug(
                "Key invariants already hold",
                extra={"valid_keys": valid_count, "expired_keys": expired_count}
            )
        return inserted
