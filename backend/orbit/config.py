from __future__ import annotations

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # .env may also carry ORBIT_* client settings
    )

    domain: str = "localhost"
    jwt_secret: str = ""  # Signs owner access tokens; shared with the identity provider only
    allow_insecure_jwt: bool = False

    @model_validator(mode="after")
    def _check_jwt_secret(self) -> Settings:
        self.jwt_secret = self.jwt_secret.strip()
        if not self.jwt_secret:
            if self.allow_insecure_jwt:
                warnings.warn(
                    "JWT_SECRET is empty but ALLOW_INSECURE_JWT is set. "
                    "Only use this for local development.",
                    stacklevel=2,
                )
            else:
                raise ValueError(
                    "JWT_SECRET is not set. Without it anyone can forge owner "
                    "tokens and read every reflection. Set JWT_SECRET in .env "
                    "or set ALLOW_INSECURE_JWT=1 for development."
                )
        return self

    jwt_access_token_expire_minutes: int = 60
    data_dir: Path = Path("/app/data")
    db_url: str = "sqlite:////app/data/orbit.db"
    # Window used by the mood-trend query when the caller gives no range
    mood_trend_default_days: int = 30


class ClientSettings(BaseSettings):
    """Settings for tools that talk to a running Orbit service."""

    model_config = SettingsConfigDict(
        env_prefix="ORBIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = "http://localhost:8000"
    api_token: str = ""
    request_timeout: float = 30.0


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
