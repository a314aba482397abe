import asyncio
import logging
from typing import Optional

from jwks_service.core.config import Settings, settings as default_settings
from jwks_service.db.session import create_engine, create_session_factory
from jwks_service.services.jwks_publisher import JWKSPublisher
from jwks_service.services.key_lifecycle import KeyLifecycleManager
from jwks_service.services.key_selector import KeySelector
from jwks_service.services.key_store import KeyStore
from jwks_service.services.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)

class ServiceContext:
    """
    Owns the key database handle, the key components and the readiness gate.

    start() initializes the schema, then enforces key invariants, then opens
    the gate. Requests wait on the gate until then.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.settings = config or default_settings
        self.engine = create_engine(self.settings)
        self.store = KeyStore(self.engine, create_session_factory(self.engine))
        self.lifecycle = KeyLifecycleManager(
            self.store,
            key_size=self.settings.KEY_SIZE,
            valid_lifetime=self.settings.VALID_KEY_LIFETIME_SECONDS,
            expired_age=self.settings.EXPIRED_KEY_AGE_SECONDS,
        )
        self.selector = KeySelector(self.store)
        self.issuer = TokenIssuer(
            subject=self.settings.TOKEN_SUBJECT,
            lifetime=self.settings.TOKEN_LIFETIME_SECONDS,
            expired_issued_ago=self.settings.EXPIRED_TOKEN_ISSUED_AGO_SECONDS,
            expired_age=self.settings.EXPIRED_TOKEN_AGE_SECONDS,
            algorithm=self.settings.KEY_ALGORITHM,
        )
        self.publisher = JWKSPublisher(
            self.selector,
            algorithm=self.settings.KEY_ALGORITHM,
            use=self.settings.KEY_USE,
        )
        self._ready = asyncio.Event()

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    async def start(self) -> None:
        await self.store.initialize_schema()
        inserted = await self.lifecycle.ensure_invariants()
        self._ready.set()
        logger.info("Key store ready", extra={"generated_kids": inserted})

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    async def close(self) -> None:
        await self.engine.dispose()
