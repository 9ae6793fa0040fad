from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_STROMME_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Configure the ``stromme`` logger for CLI use.

    Writes to ``log_path`` when given, otherwise to stderr, so stdout stays
    reserved for rendered output and JSON. Calling it again replaces the
    handler installed by the previous call.
    """
    global _STROMME_HANDLER

    logger = logging.getLogger("stromme")
    logger.setLevel(_level_from_name(level))

    if _STROMME_HANDLER is not None:
        logger.removeHandler(_STROMME_HANDLER)
        _STROMME_HANDLER.close()
        _STROMME_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        resolved = Path(log_path).resolve()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(resolved, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _STROMME_HANDLER = handler


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the handler installed by configure_stdlib_logging."""
    global _STROMME_HANDLER
    logger = logging.getLogger("stromme")
    if _STROMME_HANDLER is not None:
        logger.removeHandler(_STROMME_HANDLER)
        _STROMME_HANDLER.close()
    _STROMME_HANDLER = None
    logger.setLevel(logging.NOTSET)


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
