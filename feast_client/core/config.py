"""
Client configuration backed by pydantic-settings.

Environment variables use the ``FEAST_SERVING_`` prefix with ``__`` as the
nested delimiter, e.g. ``FEAST_SERVING_HOST``, ``FEAST_SERVING_TLS__ENABLED``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TlsSettings(BaseModel):
    enabled: bool = False
    # PEM trust anchor; system trust store when unset
    certificate_path: Optional[str] = None

    @field_validator("certificate_path", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ClientSettings(BaseSettings):
    """Connection settings for a Feast serving endpoint."""

    host: str = "localhost"
    port: int = 6566
    project: str = ""
    tls: TlsSettings = Field(default_factory=TlsSettings)
    auth_token: Optional[str] = None
    shutdown_timeout_s: float = 5.0
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="FEAST_SERVING_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    @field_validator("port")
    @classmethod
    def _validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"port must be in 1..65535, got {v}")
        return v

    @field_validator("auth_token", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@lru_cache
def get_settings() -> ClientSettings:
    return ClientSettings()
