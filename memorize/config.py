"""
Environment configuration.

Variables:
    MEMORIZE_ENV               development | production (default development)
    MEMORIZE_MISMATCH_DELAY    seconds before a mismatched pair flips back (1.0)
    MEMORIZE_TRANSITION_DELAY  seconds before a cleared board changes phase (1.0)
    MEMORIZE_LEVEL_SET         built-in level set for new sessions (classic)
    MEMORIZE_SESSION_MAX_AGE   seconds of inactivity before cleanup (3600)
    MEMORIZE_LOG_LEVEL         logging level name (INFO)
    ALLOWED_ORIGINS            comma-separated CORS origins (*)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping
import os

from .engine_core.controller import DEFAULT_MISMATCH_DELAY, DEFAULT_TRANSITION_DELAY


def _float_var(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass
class Settings:
    """Runtime settings for the API server and CLI."""
    env: str = "development"
    mismatch_delay: float = DEFAULT_MISMATCH_DELAY
    transition_delay: float = DEFAULT_TRANSITION_DELAY
    level_set: str = "classic"
    session_max_age: float = 3600.0
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Read settings from `env` (os.environ by default)."""
        env = os.environ if env is None else env
        origins = env.get("ALLOWED_ORIGINS", "*")
        return cls(
            env=env.get("MEMORIZE_ENV", "development"),
            mismatch_delay=_float_var(env, "MEMORIZE_MISMATCH_DELAY", DEFAULT_MISMATCH_DELAY),
            transition_delay=_float_var(env, "MEMORIZE_TRANSITION_DELAY", DEFAULT_TRANSITION_DELAY),
            level_set=env.get("MEMORIZE_LEVEL_SET", "classic"),
            session_max_age=_float_var(env, "MEMORIZE_SESSION_MAX_AGE", 3600.0),
            log_level=env.get("MEMORIZE_LOG_LEVEL", "INFO").upper(),
            allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )
