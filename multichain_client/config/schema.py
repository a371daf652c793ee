"""Configuration schema using Pydantic.

Persisted as camelCase JSON at ~/.multichain_client/config.json; every field can also be
overridden through MULTICHAIN_* environment variables.
"""

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class ClientConfig(BaseSettings):
    """Transport and client tuning. Durations are milliseconds; -1 disables a timer."""
    default_timeout_ms: int = -1  # Per-request deadline when the caller passes none
    warmup_timeout_ms: int = 1000  # Deadline of each wallet_getSession warm-up attempt
    warmup_max_retries: int = Field(default=10, ge=0)
    warmup_retry_delay_ms: int = Field(default=200, ge=0)
    # Wait after opening an extension port before trusting it; the remote may reject right away.
    connect_grace_ms: int = Field(default=10, ge=0)
    extension_id: str | None = None  # Skip auto-detection when set
    extension_detect_timeout_ms: int = 10000

    @field_validator("default_timeout_ms", "warmup_timeout_ms", "extension_detect_timeout_ms")
    @classmethod
    def _check_timeout(cls, value: int) -> int:
        if value < -1:
            raise ValueError("timeout must be -1 (disabled) or a non-negative number of milliseconds")
        return value

    model_config = ConfigDict(
        env_prefix="MULTICHAIN_",
        env_nested_delimiter="__",
    )
