from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .infra.settings import SettingsLoader

LOGGER_NAME = "exchange_cli"


def _file_handler(settings: SettingsLoader, log_file: Path) -> logging.Handler | None:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            log_file,
            maxBytes=int(settings.get("log_rotation_bytes", 1_048_576)),
            backupCount=int(settings.get("log_backup_count", 5)),
            encoding="utf-8",
        )
    except OSError:
        return None


def configure_logging() -> None:
    """Attach a rotating file handler and a console handler to the CLI logger.

    Level, file path and rotation come from SettingsLoader. Calling it again
    only updates the level. The console shows warnings and up so log lines
    don't interleave with REPL output. A log file that can't be opened is
    reported on the console; the CLI keeps running without it.
    """
    settings = SettingsLoader()
    log_file = Path(settings.get("log_file")).expanduser()
    level_name = str(settings.get("log_level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return

    fmt = logging.Formatter(
        fmt="%(levelname)s %(asctime)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    stream = logging.StreamHandler()
    stream.setLevel(max(level, logging.WARNING))
    stream.setFormatter(fmt)
    logger.addHandler(stream)
    logger.propagate = False

    handler = _file_handler(settings, log_file)
    if handler is None:
        logger.warning("Cannot write log file %s; logging to console only", log_file)
        return
    handler.setFormatter(fmt)
    logger.addHandler(handler)
