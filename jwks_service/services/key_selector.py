from typing import List

from jwks_service.core.exceptions import NoKeyAvailable
from jwks_service.models import KeyRecord
from jwks_service.services.key_store import KeyStore

class KeySelector:
    def __init__(self, store: KeyStore):
        self.store = store

    async def select_for_signing(self, want_expired: bool) -> KeyRecord:
        record = await self.store.query_one_by_expiry(want_expired)
        if record is None:
            label = "expired" if want_expired else "valid"
            raise NoKeyAvailable(f"No {label} signing key in store")
        return record

    async def select_all_for_publishing(self) -> List[KeyRecord]:
        # Expired keys are never published
        return await self.store.query_by_expiry(False)
