"""Logger factory for :mod:`flowlog_tool`.

Every module logs through ``get_logger(__name__)``. Records go to stdout as
one JSON-shaped line each; the level comes from ``FLOWLOG_TOOL_LOG_LEVEL``.
"""

import json
import logging
import sys

from .core.config import settings

_FORMAT = json.dumps(
    {
        "ts": "%(asctime)s",
        "lvl": "%(levelname)s",
        "mod": "%(name)s",
        "msg": "%(message)s",
    }
)


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        level = settings.log_level
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(name: str = "flowlog_tool", level: str | int | None = None) -> logging.Logger:
    """Return a logger writing JSON-shaped lines to stdout.

    Handlers are attached once per logger name; later calls return the
    configured logger unchanged. Unknown level names fall back to INFO.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))
    return logger
