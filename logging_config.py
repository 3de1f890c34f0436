"""
Centralized logging configuration for PackingListWeb.

Every record carries the name of the thread that produced it, so requests
served concurrently by the Flask development server (or a threaded WSGI
server) can be told apart.

Features:
    - Thread name in all log messages
    - Console output (always enabled)
    - Rotating file logs and a separate error log (production)
    - Per-print loggers keyed by packing list code

Log Format:
    2026-10-19 10:15:30 [INFO    ] [MainThread] packing_list_web.app - Starting application
    2026-10-19 10:15:31 [INFO    ] [Thread-3] packing_list_web.print.LOMPL191026101531 - Manifest rendered

Usage:
    # At application startup
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)

    # For one print invocation
    print_logger = get_print_logger(packing_list.code)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


APP_NAMESPACE = "packing_list_web"


class ThreadContextFilter(logging.Filter):
    """
    Logging filter that adds the current thread name to each record.

    Adds `thread_name` (used by the format string) and `thread_id`.
    Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        current_thread = threading.current_thread()
        record.thread_name = current_thread.name
        record.thread_id = threading.get_ident()
        return True


def setup_logging(
    app_name: str = APP_NAMESPACE,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure application logging with thread context.

    This sets up:
    1. Console handler (always enabled)
    2. Rotating file handler (optional) - all levels
    3. Error file handler (optional) - ERROR/CRITICAL only

    Args:
        app_name: Name of the application root logger
        log_level: Minimum log level (default: INFO)
        log_dir: Directory for log files (default: ./logs next to this file)
        enable_file_logging: Whether to write to log files

    Returns:
        Configured application root logger
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allow re-configuration (tests create several apps)
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB per file
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f"{app_name}_error.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the application namespace.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance, e.g. "packing_list_web.services.print_service"
    """
    if not name.startswith(APP_NAMESPACE):
        name = f"{APP_NAMESPACE}.{name}"
    return logging.getLogger(name)


def get_print_logger(code: str) -> logging.Logger:
    """
    Get a logger for a single print invocation.

    Args:
        code: Packing list code being printed (blank codes log as "unknown")

    Returns:
        Logger named "packing_list_web.print.<code>"
    """
    return logging.getLogger(f"{APP_NAMESPACE}.print.{code or 'unknown'}")
