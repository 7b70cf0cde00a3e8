import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from datetime import datetime, timezone
import json

# Dashboard session of the request being served, "-" outside of one
session_context: ContextVar[str] = ContextVar("session_id", default="-")

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | session=%(session_id)s | %(message)s"


class SessionContextFilter(logging.Filter):
    """Stamp each record with the current dashboard session id"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = session_context.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for prod consoles and log files"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "session_id": getattr(record, "session_id", "-"),
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Colored level names for the dev console"""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # copy so the file handler never sees escape codes
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _handler(handler: logging.Handler, formatter: logging.Formatter, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(SessionContextFilter())
    return handler


def setup_logging(
    level: str = "INFO",
    app_name: str = "CMS Dashboard",
    enable_json: bool = False,
    log_file: str | None = None
) -> None:
    """
    Configure the root logger for the dashboard backend

    Args:
        level: Logging level name
        app_name: Name of the application logger
        enable_json: JSON lines on the console instead of colored text
        log_file: Optional path of an extra JSON log file
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(numeric_level)

    console_formatter = JSONFormatter() if enable_json else ColoredFormatter(
        fmt=CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
    )
    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), console_formatter, numeric_level))

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        root_logger.addHandler(_handler(file_handler, JSONFormatter(), numeric_level))

    quiet_third_party_loggers()

    logging.getLogger(app_name).info(f"Logging configured at {level} ({'json' if enable_json else 'console'})")


def quiet_third_party_loggers() -> None:
    """Keep request logs from uvicorn, silence chatty client libraries"""
    for name in ("uvicorn.access", "uvicorn.error", "fastapi"):
        logging.getLogger(name).setLevel(logging.INFO)

    # httpx logs every Orchard call at INFO, minio and redis their retries
    for name in ("httpx", "httpcore", "urllib3", "minio", "redis", "sentry_sdk"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
