from __future__ import annotations
import json
import logging
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import Settings

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(settings: "Settings") -> None:
    """Configure the ``layercfg`` logger hierarchy: console always, rotating file if configured."""
    level = settings.log_level.upper()
    logger = logging.getLogger("layercfg")
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False  # prevent duplicate output via root

    fmt = _JsonFormatter() if settings.log_json else logging.Formatter(
        fmt=_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(settings.log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    logger.debug("Logging initialized (level=%s, json=%s, file=%s)", level, settings.log_json, settings.log_file)


def get_logger(name: str = "layercfg") -> logging.Logger:
    return logging.getLogger(name)
