"""Package-wide defaults, overridable from the environment or a ``.env`` file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class LearnetConfig:
    """Defaults applied when a pipeline or machine does not say otherwise.

    ``cache`` is the default for ``Pipeline(..., cache=None)`` and
    ``Machine(..., cache=None)``; set it to ``False`` to keep training data
    out of memory between calls. ``verbosity`` is the default passed to
    ``Machine.fit``.
    """

    cache: bool = True
    verbosity: int = 1

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "LearnetConfig":
        """Read ``LEARNET_CACHE`` and ``LEARNET_VERBOSITY``.

        A ``.env`` file is loaded first (without overriding variables already
        set in the process environment). Without ``dotenv_path`` it is looked
        up from the current working directory upwards.
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        config = cls()
        raw_cache = os.environ.get("LEARNET_CACHE")
        if raw_cache is not None:
            config.cache = _parse_bool("LEARNET_CACHE", raw_cache)
        raw_verbosity = os.environ.get("LEARNET_VERBOSITY")
        if raw_verbosity is not None:
            try:
                config.verbosity = int(raw_verbosity)
            except ValueError:
                raise ValueError(
                    f"LEARNET_VERBOSITY must be an integer, got {raw_verbosity!r}"
                ) from None
        logger.debug("Loaded %s", config)
        return config


@lru_cache(maxsize=1)
def get_config() -> LearnetConfig:
    """Process-wide config, read from the environment on first use."""
    return LearnetConfig.from_env()
