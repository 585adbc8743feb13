import logging
import json
import os
from logging.handlers import RotatingFileHandler

# Request-scoped attributes that callers pass through ``extra=``.
CONTEXT_FIELDS = ("session_id", "thread_id")


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt or "%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "module": record.module,
            "funcName": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def setup_json_file_logger(log_file: str, level: int = logging.INFO) -> RotatingFileHandler:
    """Attach a RotatingFileHandler with :class:`JsonFormatter` to the root logger.

    Parameters
    ----------
    log_file:
        Path to the JSON log file. Its directory is created if missing.
    level:
        Logging level for the handler and root logger (default: ``logging.INFO``).

    Returns
    -------
    RotatingFileHandler
        The handler that was added. Call ``root_logger.removeHandler`` on it when done.
    """

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        filename=log_file,
        maxBytes=10_485_760,
        backupCount=5,
        encoding="utf8",
    )
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    return handler
