from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./totally_not_my_privateKeys.db"
    DATABASE_ECHO: bool = False

    # Signing keys
    KEY_SIZE: int = Field(default=2048, ge=1024)
    KEY_ALGORITHM: str = "RS256"
    KEY_USE: str = "sig"
    VALID_KEY_LIFETIME_SECONDS: int = Field(default=3600, gt=0)
    EXPIRED_KEY_AGE_SECONDS: int = Field(default=10, ge=0)

    # Tokens
    TOKEN_SUBJECT: str = "userABC"
    TOKEN_LIFETIME_SECONDS: int = Field(default=3600, gt=0)
    EXPIRED_TOKEN_ISSUED_AGO_SECONDS: int = 3600
    EXPIRED_TOKEN_AGE_SECONDS: int = Field(default=10, ge=0)

    # Application
    APP_NAME: str = "JWKS Server"
    HOST: str = "127.0.0.1"
    PORT: int = 8080
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

settings = Settings()
