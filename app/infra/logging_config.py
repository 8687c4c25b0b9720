"""Process-wide logging setup.

``LoggingConfig()`` is idempotent: the first call installs a single stdout
handler on the root logger, later calls are no-ops. JSON lines are emitted when
``LOG_JSON`` is on so log shippers can parse them; local runs get plain text.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from app.config import get_settings

APP_LOGGER_NAME = "travelbuddy"
PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


class LoggingConfig:
    def __init__(
        self, level: Optional[str] = None, json_output: Optional[bool] = None
    ) -> None:
        global _configured
        if _configured:
            return
        settings = get_settings()
        level = (level or settings.log_level or "INFO").upper()
        json_output = settings.log_json if json_output is None else json_output

        handler = logging.StreamHandler(sys.stdout)
        if json_output:
            handler.setFormatter(
                jsonlogger.JsonFormatter(
                    JSON_FORMAT,
                    rename_fields={"asctime": "ts", "levelname": "level"},
                )
            )
        else:
            handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(level)

        # Uvicorn installs its own handlers; route them through ours.
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            uvicorn_logger = logging.getLogger(name)
            uvicorn_logger.handlers = []
            uvicorn_logger.propagate = True

        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger namespaced under the application logger."""
    if not name:
        return logging.getLogger(APP_LOGGER_NAME)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
