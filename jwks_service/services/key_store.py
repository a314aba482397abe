import time
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from jwks_service.core.exceptions import StorageError
from jwks_service.db.base import Base
from jwks_service.models import KeyRecord

def current_timestamp() -> int:
    return int(time.time())

def _expiry_clause(expired: bool, now: int):
    # A key expiring exactly at `now` counts as expired
    if expired:
        return KeyRecord.expires_at <= now
    return KeyRecord.expires_at > now

class KeyStore:
    """
    Durable storage for signing keys.

    Every call opens its own short-lived session, so results always reflect
    what is persisted at call time. Persistence failures surface as StorageError.
    """

    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker[AsyncSession]):
        self.engine = engine
        self.session_factory = session_factory

    async def initialize_schema(self) -> None:
        """Creates the keys table if it does not exist. Safe to call repeatedly."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not initialize key schema: {e}") from e

    async def insert(self, pem: bytes, expires_at: int) -> int:
        record = KeyRecord(private_key_pem=pem, expires_at=expires_at)
        try:
            async with self.session_factory() as session:
                session.add(record)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not persist key: {e}") from e
        return record.kid

    async def query_by_expiry(self, expired: bool, now: Optional[int] = None) -> List[KeyRecord]:
        """Returns all keys of the requested expiry class, oldest kid first."""
        if now is None:
            now = current_timestamp()
        stmt = select(KeyRecord).where(_expiry_clause(expired, now)).order_by(KeyRecord.kid)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read keys: {e}") from e

    async def query_one_by_expiry(self, expired: bool, now: Optional[int] = None) -> Optional[KeyRecord]:
        """Returns the lowest-kid key of the requested expiry class, or None."""
        if now is None:
            now = current_timestamp()
        stmt = (
            select(KeyRecord)
            .where(_expiry_clause(expired, now))
            .order_by(KeyRecord.kid)
            .limit(1)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return result.scalars().first()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read key: {e}") from e

    async def count_by_expiry(self, expired: bool, now: Optional[int] = None) -> int:
        if now is None:
            now = current_timestamp()
        stmt = select(func.count()).select_from(KeyRecord).where(_expiry_clause(expired, now))
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not count keys: {e}") from e
