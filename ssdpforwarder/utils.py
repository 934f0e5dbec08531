"""
Utility functions for the ssdp-forwarder package
"""
import logging
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional, Union

from .exceptions import InvalidPortError, ForwarderConfigError


class LogConst:
    LOGGER_NAME = "ssdpforwarder"
    LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT = 5
    CONSOLE_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
    CONSOLE_DATEFMT = "%Y/%m/%d %H:%M:%S"
    FILE_FORMAT = "%(asctime)s\t%(levelname)s\t%(message)s"
    FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def parse_comma_separated(value: Union[str, Iterable, None]) -> list[str]:
    """
    Split a comma-separated string into trimmed, non-empty entries.

    Lists (as loaded from YAML) are accepted too; each entry is stringified and trimmed.
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (int, float)):
        parts = [value]
    else:
        parts = list(value)
    return [str(part).strip() for part in parts if str(part).strip()]


def parse_port(value) -> int:
    """Convert a single port to an int in the range 1-65535"""
    if isinstance(value, bool):
        raise InvalidPortError(f"invalid port {value!r}")
    try:
        port = int(str(value).strip())
    except ValueError as e:
        raise InvalidPortError(f"invalid port {value!r}: {e}") from e
    if port <= 0 or port > 65535:
        raise InvalidPortError(f"port {port} out of valid range (1-65535)")
    return port


def parse_ports(values: Union[str, Iterable, None]) -> list[int]:
    return [parse_port(v) for v in parse_comma_separated(values)]


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger with a console handler and an optional rotating file handler.

    Args:
        verbose: Log at DEBUG instead of INFO
        log_file: Path of a log file to rotate at 5MB, or None for console only
    """
    logger = logging.getLogger(LogConst.LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Repeated calls shouldn't stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LogConst.CONSOLE_FORMAT, datefmt=LogConst.CONSOLE_DATEFMT))
    logger.addHandler(console_handler)

    # File handler
    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LogConst.LOG_MAX_BYTES,
                backupCount=LogConst.LOG_BACKUP_COUNT
            )
        except OSError as e:
            raise ForwarderConfigError(f"Can't open log file {log_file}: {e}") from e
        file_handler.setFormatter(logging.Formatter(fmt=LogConst.FILE_FORMAT, datefmt=LogConst.FILE_DATEFMT))
        logger.addHandler(file_handler)

    return logger
