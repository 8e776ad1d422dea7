import json
import logging
from datetime import datetime, timezone

from stockdash.config import Settings, get_settings

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
PLAIN_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Record attributes set through ``extra=`` that JSON output carries as fields.
STRUCTURED_FIELDS = ("error_code", "product_id", "movement_state")

# Third-party loggers that stay at WARNING unless LOG_LEVEL is DEBUG.
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with the ledger's structured fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True, default=str)


def build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return JsonFormatter()
    return logging.Formatter(fmt=PLAIN_FORMAT, datefmt=PLAIN_DATEFMT)


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _install_root_handler(level: int, formatter: logging.Formatter) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def setup_logging(settings: Settings | None = None) -> None:
    """Route all logging through a single stderr handler.

    Safe to call repeatedly; each call replaces the previous handler.
    """
    settings = settings or get_settings()
    level = _resolve_level(settings.LOG_LEVEL)
    _install_root_handler(level, build_formatter(settings.LOG_JSON))

    quiet_level = level if level <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


__all__ = ["JsonFormatter", "STRUCTURED_FIELDS", "build_formatter", "setup_logging"]
