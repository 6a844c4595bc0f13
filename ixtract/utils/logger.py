import json
import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

_RECORD_FIELDS = {
    "args", "msg", "levelname", "levelno",
    "pathname", "filename", "exc_info",
    "exc_text", "stack_info", "created",
    "msecs", "relativeCreated", "thread",
    "threadName", "processName", "process",
    "name", "module", "lineno", "funcName",
    "taskName", "message", "asctime",
}


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    Event-style calls (`logger.info("event | %s", {...})`) also get their
    dict argument under "data", so log files can be filtered by field.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        if isinstance(record.args, Mapping):
            payload["data"] = _jsonable(dict(record.args))

        for key, value in record.__dict__.items():
            if key.startswith("_") or key in payload or key in _RECORD_FIELDS:
                continue
            payload[key] = _jsonable(value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value, ensure_ascii=False)
        return value
    except (TypeError, ValueError):
        return str(value)


def setup_logger(
    log_dir: Optional[Path] = None,
    debug: bool = False,
    name: str = "ixtract",
) -> logging.Logger:
    """
    Structured JSON file log plus a readable console log.

    The default name is the package root, so module loggers created with
    logging.getLogger(__name__) write through these handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    # Clear existing handlers (important in notebooks / reruns)
    if logger.handlers:
        logger.handlers.clear()

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{name}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-5s | %(message)s",
            "%H:%M:%S",
        )
    )
    logger.addHandler(console_handler)

    logger.info(
        "Logger initialized",
        extra={
            "debug": debug,
            "log_file": str(log_file) if log_file else None,
        },
    )

    return logger
