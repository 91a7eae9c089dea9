"""
Logging setup for the SkillMatch API.

Everything logs under the ``skillmatch.`` namespace. The handler set and format
depend on ENVIRONMENT (production / development / testing), see
configure_for_environment().
"""
import functools
import inspect
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

LOG_FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-36s | %(funcName)-20s:%(lineno)-4d | %(message)s",
    "json": (
        '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
        '"function": "%(funcName)s", "line": %(lineno)d, "message": "%(message)s"}'
    ),
}
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# keyword arguments for setup_logging, per ENVIRONMENT
ENVIRONMENT_PROFILES: Dict[str, Dict[str, Any]] = {
    "production": {"enable_file": True, "format_style": "json"},
    "development": {"level": "DEBUG", "enable_file": True, "format_style": "detailed"},
    "testing": {"level": "WARNING", "enable_file": False, "format_style": "simple"},
}


def _rotating_file(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "main",
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
        "encoding": "utf8",
    }


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed"
) -> None:
    """
    Configure the root, uvicorn and uvicorn.access loggers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Main log file, defaults to $LOG_DIR/skillmatch_<date>.log
        enable_console: Log to stdout
        enable_file: Log to a rotating main file plus a rotating errors-only file
        format_style: 'simple', 'detailed' or 'json'
    """
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    stamp = datetime.now().strftime('%Y%m%d')
    log_file = Path(log_file) if log_file else log_dir / f"skillmatch_{stamp}.log"

    handlers: Dict[str, Dict[str, Any]] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "main",
            "stream": "ext://sys.stdout",
        }
    if enable_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = _rotating_file(log_file, level)
        handlers["error_file"] = _rotating_file(log_dir / f"skillmatch_errors_{stamp}.log", "ERROR")

    root_handlers: List[str] = list(handlers)
    server_handlers = [h for h in root_handlers if h != "error_file"]

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "main": {
                "format": LOG_FORMATS.get(format_style, LOG_FORMATS["detailed"]),
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {"level": level, "handlers": root_handlers, "propagate": False},
            "uvicorn": {"level": "INFO", "handlers": server_handlers, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": [h for h in server_handlers if h == "console"],
                               "propagate": False},
            # pdfminer is very chatty on malformed PDFs
            "pdfminer": {"level": "ERROR"},
        },
    })

    logger = get_logger("logging")
    logger.info(f"Logging configured - level {level}, console {enable_console}, file {enable_file}")
    if enable_file:
        logger.info(f"Log file: {log_file}")


def get_logger(name: str) -> logging.Logger:
    """Logger namespaced under ``skillmatch.`` (module __name__ values already are)."""
    if name.startswith("skillmatch."):
        return logging.getLogger(name)
    return logging.getLogger(f"skillmatch.{name}")


def log_function_call(func):
    """Debug-log entry and duration of a call; failures are logged and re-raised."""
    logger = get_logger(func.__module__)

    def started():
        logger.debug(f"Entering {func.__name__}")
        return time.time()

    def failed(start, exc):
        logger.error(f"Error in {func.__name__} after {time.time() - start:.3f}s: {exc}")

    def finished(start):
        logger.debug(f"Completed {func.__name__} in {time.time() - start:.3f}s")

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = started()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                failed(start, e)
                raise
            finished(start)
            return result
        return async_wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        start = started()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            failed(start, e)
            raise
        finished(start)
        return result
    return sync_wrapper


def configure_for_environment():
    """Apply the ENVIRONMENT profile; LOG_LEVEL sets the level where the profile does not."""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    options = {"level": os.getenv("LOG_LEVEL", "INFO").upper()}
    options.update(ENVIRONMENT_PROFILES.get(environment, {}))
    setup_logging(**options)


class PerformanceMonitor:
    """Times a block and logs it; over threshold_ms is a warning"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.elapsed_ms = None
        self._start = None

    def __enter__(self):
        self._start = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.time() - self._start) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(
                f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)"
            )
        else:
            self.logger.debug(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
