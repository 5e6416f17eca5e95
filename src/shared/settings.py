"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from functools import lru_cache

_DEFAULT_SECRET = "change-me-in-production"


@dataclass(frozen=True)
class Settings:
    secret_key: str
    token_algorithm: str
    access_token_expire_minutes: int
    checkout_retry_attempts: int
    environment: str
    log_dir: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            secret_key=os.getenv("MARKETPLACE_SECRET_KEY", _DEFAULT_SECRET),
            token_algorithm="HS256",
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")),
            checkout_retry_attempts=max(1, int(os.getenv("CHECKOUT_RETRY_ATTEMPTS", "3"))),
            environment=(os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower(),
            log_dir=os.getenv("LOG_DIR", "logs"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings.from_env()
