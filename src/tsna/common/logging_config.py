"""
Logging configuration for the temporal network analysis library.

All module loggers live under the ``tsna`` hierarchy (``get_logger(__name__)``
inside the package), so a single call to :func:`setup_logging` controls the
output of the solvers, the windowed metrics and the snapshot measures.
Configuration is taken from explicit arguments first, then from ``TSNA_*``
environment variables, then from the defaults below.
"""

import json
import logging
import logging.handlers
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any


DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s.%(funcName)s:%(lineno)d | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5

ROOT_LOGGER_NAME = "tsna"

ENV_LOG_LEVEL = "TSNA_LOG_LEVEL"
ENV_LOG_FILE = "TSNA_LOG_FILE"
ENV_LOG_DIR = "TSNA_LOG_DIR"
ENV_LOG_FORMAT = "TSNA_LOG_FORMAT"
ENV_LOG_CONSOLE = "TSNA_LOG_CONSOLE"
ENV_LOG_JSON = "TSNA_LOG_JSON"
ENV_LOG_PERFORMANCE = "TSNA_LOG_PERFORMANCE"

_RESERVED_RECORD_KEYS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "taskName",
    "processName", "process", "getMessage", "exc_info", "exc_text",
    "stack_info", "message"
}


class PerformanceFilter(logging.Filter):
    """Pass only records that carry timing information."""

    keywords = ("performance", "elapsed", "duration", "timing")

    def filter(self, record: logging.LogRecord) -> bool:
        if hasattr(record, "elapsed"):
            return True
        message = record.getMessage().lower()
        return any(keyword in message for keyword in self.keywords)


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON objects.

    Fields passed through ``extra=`` (for example the operation name and
    elapsed seconds emitted by :class:`LoggingTimer`) are copied into the
    object next to the standard fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS and key not in log_obj:
                log_obj[key] = value

        return json.dumps(log_obj, default=str)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Parameters
    ----------
    name : str
        The name for the logger (typically ``__name__``)

    Returns
    -------
    logging.Logger
        Logger that inherits the handlers installed by setup_logging()
    """
    return logging.getLogger(name)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console: Optional[bool] = None,
    json_format: Optional[bool] = None,
    performance_logging: Optional[bool] = None,
    format_string: Optional[str] = None,
    force_setup: bool = False
) -> logging.Logger:
    """
    Configure the ``tsna`` root logger.

    Parameters
    ----------
    level : str, optional
        Logging level name. Falls back to TSNA_LOG_LEVEL, then INFO.
    log_file : str, optional
        Path of a rotating log file. Falls back to TSNA_LOG_FILE, then to
        ``tsna.log`` inside ``log_dir`` when a directory is configured.
    log_dir : str, optional
        Directory for the log file. Falls back to TSNA_LOG_DIR.
    console : bool, optional
        Log to stdout. Falls back to TSNA_LOG_CONSOLE, then True.
    json_format : bool, optional
        Emit JSON lines. Falls back to TSNA_LOG_JSON, then False.
    performance_logging : bool, optional
        Attach a PerformanceFilter to the ``tsna.performance`` logger.
        Falls back to TSNA_LOG_PERFORMANCE, then False.
    format_string : str, optional
        Format for plain-text records. Falls back to TSNA_LOG_FORMAT.
    force_setup : bool, default False
        Replace existing handlers instead of returning the configured logger.

    Returns
    -------
    logging.Logger
        The configured ``tsna`` logger

    Raises
    ------
    ValueError
        If the logging level name is unknown

    Examples
    --------
    >>> logger = setup_logging(level="DEBUG")
    >>> logger = setup_logging(log_dir="/tmp/tsna", json_format=True, console=False)
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    if not force_setup and root_logger.handlers:
        return root_logger

    if force_setup:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

    config = _resolve_logging_config(
        level=level,
        log_file=log_file,
        log_dir=log_dir,
        console=console,
        json_format=json_format,
        performance_logging=performance_logging,
        format_string=format_string,
    )

    log_level = logging.getLevelName(config["level"].upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Invalid logging level: {config['level']}")
    root_logger.setLevel(log_level)

    if config["json_format"]:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(fmt=config["format_string"], datefmt=DEFAULT_DATE_FORMAT)

    if config["console"]:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if config["log_file"]:
        log_path = Path(config["log_file"])
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=DEFAULT_MAX_FILE_SIZE,
            backupCount=DEFAULT_BACKUP_COUNT,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if config["performance_logging"]:
        perf_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.performance")
        perf_logger.addFilter(PerformanceFilter())

    root_logger.propagate = False

    root_logger.info(
        "Logging configured: level=%s, console=%s, file=%s, json=%s",
        config["level"], config["console"],
        config["log_file"] or "None", config["json_format"]
    )

    return root_logger


def _resolve_logging_config(**kwargs) -> Dict[str, Any]:
    """Merge explicit arguments, environment variables and defaults."""

    def _get_bool_env(env_var: str, default: bool) -> bool:
        value = os.getenv(env_var, "").lower()
        if value in ("true", "yes", "1", "on"):
            return True
        if value in ("false", "no", "0", "off"):
            return False
        return default

    level = kwargs.get("level") or os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)

    log_file = kwargs.get("log_file") or os.getenv(ENV_LOG_FILE)
    log_dir = kwargs.get("log_dir") or os.getenv(ENV_LOG_DIR)
    if not log_file and log_dir:
        log_file = os.path.join(log_dir, "tsna.log")

    console = kwargs.get("console")
    if console is None:
        console = _get_bool_env(ENV_LOG_CONSOLE, True)

    json_format = kwargs.get("json_format")
    if json_format is None:
        json_format = _get_bool_env(ENV_LOG_JSON, False)

    performance_logging = kwargs.get("performance_logging")
    if performance_logging is None:
        performance_logging = _get_bool_env(ENV_LOG_PERFORMANCE, False)

    format_string = kwargs.get("format_string") or os.getenv(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)

    return {
        "level": level,
        "log_file": log_file,
        "console": console,
        "json_format": json_format,
        "performance_logging": performance_logging,
        "format_string": format_string,
    }


def log_function_entry(func_name: str, **kwargs) -> None:
    """
    Log function entry with its arguments at DEBUG level.

    Examples
    --------
    >>> log_function_entry("temporal_distance", source=1, target=5, start_time=0)
    """
    logger = get_logger(f"{ROOT_LOGGER_NAME}.debug")
    if logger.isEnabledFor(logging.DEBUG):
        param_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        logger.debug("Entering %s(%s)", func_name, param_str)


def log_performance_metric(
    operation: str,
    elapsed: float,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log how long an operation took on the ``tsna.performance`` logger.

    Parameters
    ----------
    operation : str
        Name of the operation that was timed
    elapsed : float
        Elapsed wall-clock seconds
    details : Dict[str, Any], optional
        Sizes of the inputs (vertices, events, windows)
    """
    logger = get_logger(f"{ROOT_LOGGER_NAME}.performance")

    message = f"Performance: {operation} completed in {elapsed:.3f}s"
    if details:
        message += " (" + ", ".join(f"{k}={v}" for k, v in details.items()) + ")"

    logger.info(message, extra={"operation": operation, "elapsed": elapsed})


class LoggingTimer:
    """
    Context manager that times a block and logs the elapsed time.

    Examples
    --------
    >>> with LoggingTimer("earliest_arrival", {"events": 1200}):
    ...     pass
    """

    def __init__(self, operation: str, details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        self.details = details or {}
        self.start_time: Optional[float] = None
        self.elapsed: Optional[float] = None

    def __enter__(self) -> "LoggingTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is not None:
            self.elapsed = time.perf_counter() - self.start_time
            log_performance_metric(self.operation, self.elapsed, self.details)
