"""
Centralized logging configuration.

Every module logs through the standard library logging package with one
shared format. Output goes to stdout and to a daily file under logs/.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


# Module-level flag to prevent duplicate handler registration
_logging_configured = False

# Third-party loggers that are too chatty below WARNING
_QUIET_LOGGERS = ("urllib3", "requests", "httpx", "httpcore", "sqlalchemy.engine")


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure application-wide logging.

    Call once at application startup; repeated calls are no-ops.

    Args:
        log_level: Console logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files. Defaults to 'logs/' in project root.

    Returns:
        Configured root logger instance
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger()

    if log_dir is None:
        log_dir = Path(__file__).parent.parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Format: timestamp | level | module:line | message
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # File captures everything, one file per day
    log_file = log_dir / f"app_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True

    root_logger.debug(f"Logging configured: level={log_level}, file={log_file}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Consultant resolved")
        2024-01-15 10:30:45 | INFO     | symposium.consultants.factory:42 | Consultant resolved
    """
    return logging.getLogger(name)


class LoggerMixin:
    """
    Mixin that gives a class a self.logger named after the class.

    Example:
        >>> class AirtableConsultant(LoggerMixin):
        ...     def execute_api_call(self, action):
        ...         self.logger.info("Querying table")
    """

    @property
    def logger(self) -> logging.Logger:
        """Get logger named after this class."""
        return get_logger(self.__class__.__name__)
