# setup_logging.py
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from .config import LOG_BACKUP_COUNT, LOG_DATE_FORMAT, LOG_FORMAT, LOG_MAX_BYTES


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """Configure console logging, plus a rotating log file when requested."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError("Unknown log level")

    handlers = [logging.StreamHandler()]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    logger = logging.getLogger("bmpfilter")
    if log_file is not None:
        logger.info(f"Logging initialized. Log file: {log_file}")
    return logger
