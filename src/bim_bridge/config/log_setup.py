"""Logging setup for the bridge process."""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Handlers installed by configure_logging, replaced on reconfiguration
_installed: list[logging.Handler] = []


def configure_logging(settings: dict, log_dir: Path | None = None) -> logging.Logger:
    """Configure the ``bim_bridge`` logger from the ``logging`` config section.

    Console output goes to stderr; stdout is reserved for the MCP stdio stream.
    """
    logger = logging.getLogger("bim_bridge")
    level = logging.getLevelName(str(settings.get("level", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    for handler in _installed:
        logger.removeHandler(handler)
        handler.close()
    _installed.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    _installed.append(console)

    if settings.get("to_file") and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_dir / "bim_bridge.log",
            when="midnight",
            backupCount=int(settings.get("retained_days", 7)),
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        _installed.append(file_handler)

    for handler in _installed:
        logger.addHandler(handler)

    return logger
