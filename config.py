import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "supersecretkey"


def _split_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


@dataclass(frozen=True)
class Settings:
    mongo_url: str = "mongodb://localhost:27017"
    database_name: str = "siteguard"
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 7 * 24 * 60
    bcrypt_rounds: int = 12
    max_body_bytes: int = 10 * 1024
    cors_origins: tuple = ("*",)
    log_level: str = "INFO"
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            mongo_url=os.getenv("MONGO_URL", cls.mongo_url),
            database_name=os.getenv("DATABASE_NAME", cls.database_name),
            secret_key=os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(cls.access_token_expire_minutes))
            ),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", str(cls.bcrypt_rounds))),
            max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(cls.max_body_bytes))),
            cors_origins=tuple(_split_origins(os.getenv("API_CORS_ORIGINS", ""))),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            environment=os.getenv("ENVIRONMENT", cls.environment),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, read from the environment once."""
    settings = Settings.from_env()
    if settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY not set, using the insecure default. Set SECRET_KEY in production!")
    return settings
