"""Root logger setup shared by the API server and the admin console."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from pragatibook.settings import settings

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that are only worth hearing about at WARNING.
QUIET_LOGGERS = ("uvicorn.access", "urllib3")


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _formatter(as_json: bool) -> logging.Formatter:
    if as_json:
        return JsonFormatter(
            JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
            static_fields={"app": settings.app_name},
        )
    return logging.Formatter(TEXT_FORMAT)


def configure_logging(level: str | None = None, as_json: bool | None = None) -> None:
    """Send all records to stderr through a single root handler.

    ``level`` and ``as_json`` override PRAGATIBOOK_LOG_LEVEL and
    PRAGATIBOOK_LOG_JSON. Calling it again replaces the earlier handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(settings.log_json if as_json is None else as_json))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_level(level or settings.log_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
