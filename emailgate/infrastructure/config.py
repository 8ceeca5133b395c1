"""
Configuration — reads all settings from environment variables.
Never hardcodes credentials. Uses python-dotenv for local dev.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from ..adapters.abstract_api_adapter import ABSTRACT_API_URL
from ..domain.errors import ConfigurationError

load_dotenv()

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_number(key: str, default: str, cast):
    raw = os.getenv(key, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Config:
    # Verification oracle
    abstract_api_key: str
    abstract_api_url: str = ABSTRACT_API_URL

    # Dispatch settings
    lookup_timeout: float = 30.0
    min_request_interval: float = 1.1
    rate_limit_penalty: float = 60.0
    max_batch_size: int = 100
    batch_concurrency: int = 1
    syntax_precheck: bool = True

    @classmethod
    def from_env(cls) -> "Config":
        missing = [key for key in ("ABSTRACT_API_KEY",) if not os.getenv(key, "").strip()]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}\n"
                f"Copy .env.example to .env and fill in the values."
            )

        config = cls(
            abstract_api_key=os.environ["ABSTRACT_API_KEY"].strip(),
            abstract_api_url=os.getenv("ABSTRACT_API_URL", ABSTRACT_API_URL),
            lookup_timeout=_env_number("EMAIL_LOOKUP_TIMEOUT", "30", float),
            min_request_interval=_env_number("EMAIL_MIN_REQUEST_INTERVAL", "1.1", float),
            rate_limit_penalty=_env_number("EMAIL_RATE_LIMIT_PENALTY", "60", float),
            max_batch_size=_env_number("EMAIL_MAX_BATCH_SIZE", "100", int),
            batch_concurrency=_env_number("EMAIL_BATCH_CONCURRENCY", "1", int),
            syntax_precheck=_env_bool("EMAIL_SYNTAX_PRECHECK", True),
        )

        if config.max_batch_size < 1 or config.batch_concurrency < 1:
            raise ConfigurationError(
                "EMAIL_MAX_BATCH_SIZE and EMAIL_BATCH_CONCURRENCY must be at least 1"
            )
        if config.lookup_timeout <= 0:
            raise ConfigurationError("EMAIL_LOOKUP_TIMEOUT must be positive")
        return config
