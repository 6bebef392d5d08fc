"""Runtime configuration for CineMatch.

Settings are read from the environment once at startup and passed
explicitly into the app factory; nothing else in the package reads
``os.environ``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

PORT = 7171
HOST = "0.0.0.0"

DEFAULT_MINIMUM_VOTE_COUNT = 50
DEFAULT_MAX_RECOMMENDATIONS = 30
DEFAULT_TIMEOUT = 10.0

# Used when TMDB_API_KEY is unset. Leave empty to force an explicit key.
DEV_FALLBACK_API_KEY = ""

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ConfigError(RuntimeError):
    """Raised when the process cannot start with the given environment."""


@dataclass(frozen=True)
class Settings:
    tmdb_api_key: str
    minimum_vote_count: int = DEFAULT_MINIMUM_VOTE_COUNT
    max_recommendations: int = DEFAULT_MAX_RECOMMENDATIONS
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        fallback_api_key: str = DEV_FALLBACK_API_KEY,
    ) -> "Settings":
        """Build settings from environment variables.

        :param environ: Mapping to read from; defaults to ``os.environ``.
        :param fallback_api_key: Key used when ``TMDB_API_KEY`` is unset.
        :raises ConfigError: If no API key is available.
        """
        env = os.environ if environ is None else environ
        api_key = (env.get("TMDB_API_KEY") or fallback_api_key or "").strip()
        if not api_key:
            raise ConfigError("TMDB_API_KEY is required. Please set it in your environment variables.")
        return cls(
            tmdb_api_key=api_key,
            minimum_vote_count=_int_env(env, "MINIMUM_VOTE_COUNT", DEFAULT_MINIMUM_VOTE_COUNT, minimum=1),
            max_recommendations=_int_env(env, "MAX_RECOMMENDATIONS", DEFAULT_MAX_RECOMMENDATIONS, minimum=1),
            timeout=_float_env(env, "TMDB_TIMEOUT", DEFAULT_TIMEOUT),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


def _int_env(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default
    if value < minimum:
        logger.warning("Ignoring %s=%d below %d, using %d", name, value, minimum, default)
        return default
    return value


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def configure_logging(level: str = "INFO") -> None:
    """Install the log format once and set the root level.

    Safe to call again after settings are loaded; only the level changes.
    """
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
