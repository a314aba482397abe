from sqlalchemy import Integer, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from jwks_service.db.base import Base

class KeyRecord(Base):
    __tablename__ = "keys"

    # AUTOINCREMENT keeps kids from being reused after deletes
    kid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    private_key_pem: Mapped[bytes] = mapped_column("key", LargeBinary, nullable=False)
    expires_at: Mapped[int] = mapped_column("exp", Integer, nullable=False)

    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"KeyRecord(kid={self.kid!r}, expires_at={self.expires_at!r})"
