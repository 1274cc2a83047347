"""
Client configuration and default constants.

All constants used across the engine and endpoint modules are centralized
here so that config is separated from logic.  A ``ClientConfig`` is built
once per client and never mutated afterwards; several clients with
different configs may coexist.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL = "https://djd-agent-score.fly.dev"
DEFAULT_TIMEOUT_MS: int = 10_000      # per-attempt request timeout
DEFAULT_MAX_RETRIES: int = 3          # retries after the initial attempt
INITIAL_BACKOFF_SECONDS: float = 1.0  # doubled on every further retry

# Recommendation string that approves a transaction outright
PROCEED_RECOMMENDATION = "proceed"

# ---------------------------------------------------------------------------
# Environment overrides (all optional)
# ---------------------------------------------------------------------------

ENV_BASE_URL = "AGENT_SCORE_BASE_URL"
ENV_TIMEOUT_MS = "AGENT_SCORE_TIMEOUT_MS"
ENV_MAX_RETRIES = "AGENT_SCORE_MAX_RETRIES"


def _int_from_env(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            f"Environment variable '{env_var}' must be an integer, got {raw!r}."
        ) from None


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable transport settings for one client instance.

    Attributes:
        base_url: Service origin; trailing slashes are stripped.
        timeout_ms: Per-attempt timeout in milliseconds.
        max_retries: Retries after the first attempt (total = max_retries + 1).
        initial_backoff_s: Delay before the first retry, in seconds.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_backoff_s: float = INITIAL_BACKOFF_SECONDS

    def __post_init__(self) -> None:
        base_url = (self.base_url or "").rstrip("/")
        if not base_url:
            raise ValueError("base_url must be a non-empty URL")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_backoff_s < 0:
            raise ValueError("initial_backoff_s must be >= 0")
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "base_url", base_url)

    @property
    def timeout_s(self) -> float:
        """Timeout in seconds, as ``requests`` expects it."""
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls) -> ClientConfig:
        """
        Build a config from ``AGENT_SCORE_*`` environment variables.

        Unset variables fall back to the module defaults.

        Raises:
            ValueError: A numeric variable is not an integer, or a value
                        fails validation.
        """
        return cls(
            base_url=os.getenv(ENV_BASE_URL) or DEFAULT_BASE_URL,
            timeout_ms=_int_from_env(ENV_TIMEOUT_MS, DEFAULT_TIMEOUT_MS),
            max_retries=_int_from_env(ENV_MAX_RETRIES, DEFAULT_MAX_RETRIES),
        )
