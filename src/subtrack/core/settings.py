import logging
import re
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_PART = re.compile(r"([0-9]+(?:\.[0-9]+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_duration(value) -> float:
    """
    "250ms", "5s", "1m30s", "1h" или просто число секунд -> секунды (float).
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    s = str(value).strip()
    try:
        return float(s)
    except ValueError:
        pass

    parts = _DURATION_PART.findall(s)
    if not s or "".join(n + u for n, u in parts) != s:
        raise ValueError(f"invalid duration: {value!r}")
    return sum(float(n) * _DURATION_UNITS[u] for n, u in parts)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DB_URL: str = Field(validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    # HTTP
    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = Field(default=8080, gt=0)
    HTTP_READ_TIMEOUT: float = 5.0
    HTTP_WRITE_TIMEOUT: float = 10.0
    HTTP_IDLE_TIMEOUT: float = 60.0

    # Runtime
    ENV: str = "dev"
    LOG_LEVEL: Optional[str] = None

    @field_validator("HTTP_READ_TIMEOUT", "HTTP_WRITE_TIMEOUT", "HTTP_IDLE_TIMEOUT", mode="before")
    @classmethod
    def _duration(cls, value):
        return parse_duration(value)

    @property
    def effective_log_level(self) -> int:
        lvl = _LOG_LEVELS.get((self.LOG_LEVEL or "").strip().lower())
        if lvl is not None:
            return lvl
        return logging.DEBUG if self.ENV == "dev" else logging.INFO


@lru_cache
def get_settings() -> Settings:
    return Settings()
