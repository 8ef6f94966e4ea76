from __future__ import annotations

import logging
import os

from ..errors import InvalidConfiguration

LOG_LEVEL_ENV = "SIMDUP_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(level: int | str | None = None) -> int:
    """Numeric level from an int, a level name or ``SIMDUP_LOG_LEVEL`` (default INFO)."""
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name.isdigit():
        return int(name)
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise InvalidConfiguration(f"Unknown log level {level!r}")
    return value


def get_logger(name: str = "simdup", level: int | str | None = None) -> logging.Logger:
    resolved = resolve_level(level)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    # simdup loggers follow the requested level even under an existing root setup
    logging.getLogger("simdup").setLevel(resolved)
    return logging.getLogger(name)
