from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from lingstorage.constants import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)

ENV_FILE = Path(".env")
ENV_PREFIX = "LINGSTORAGE_"
DEFAULT_BASE_URL = "http://localhost:7075"


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


def _as_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for a LingStorage server.

    Unset fields (``None`` or empty) receive their defaults once, at
    construction. The instance is immutable afterwards.
    """

    base_url: str
    api_key: str = ""
    api_secret: str = ""
    timeout: float | None = None
    retry_count: int | None = None
    user_agent: str = ""

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must be set (e.g. http://localhost:7075).")
        # frozen dataclass: defaults are written through object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if not self.timeout:
            object.__setattr__(self, "timeout", DEFAULT_TIMEOUT_SECONDS)
        if self.retry_count is None:
            object.__setattr__(self, "retry_count", DEFAULT_RETRY_COUNT)
        elif self.retry_count < 0:
            raise ValueError("retry_count must not be negative.")
        if not self.user_agent:
            object.__setattr__(self, "user_agent", DEFAULT_USER_AGENT)

    @classmethod
    def from_environment(cls) -> "ClientConfig":
        _load_env_file()
        return cls(
            base_url=os.environ.get(f"{ENV_PREFIX}BASE_URL", DEFAULT_BASE_URL),
            api_key=os.environ.get(f"{ENV_PREFIX}API_KEY", ""),
            api_secret=os.environ.get(f"{ENV_PREFIX}API_SECRET", ""),
            timeout=_as_float(os.environ.get(f"{ENV_PREFIX}TIMEOUT")),
            retry_count=_as_int(os.environ.get(f"{ENV_PREFIX}RETRY_COUNT")),
            user_agent=os.environ.get(f"{ENV_PREFIX}USER_AGENT", ""),
        )


@lru_cache(maxsize=1)
def get_config() -> ClientConfig:
    return ClientConfig.from_environment()
