"""Package logger and log-safe formatting of device identifiers"""
import logging
import os
import re
import sys
from typing import Callable, Union

from intake_pricer.core.config import settings


LOGGER_NAME = "intake_pricer"

# DEBUG output is suppressed in production
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"

_FORMATS = {
    True: "%(asctime)s - %(levelname)s - %(message)s",
    False: "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
}

# (pattern, replacement) applied in order. IMEI / serial digit runs keep
# their last four digits; credential values are blanked.
_MASKS: tuple[tuple[re.Pattern[str], Union[str, Callable[[re.Match[str]], str]]], ...] = (
    (
        re.compile(r"\b(password|token|api_key|secret)(\s*[=:]\s*)\S+", re.IGNORECASE),
        r"\1\2***",
    ),
    (
        re.compile(r"\b(\d{4,})(\d{4})\b"),
        lambda m: "*" * len(m.group(1)) + m.group(2),
    ),
)


def _effective_level() -> int:
    level = settings.log_level.upper()
    if IS_PRODUCTION and level == "DEBUG":
        level = "INFO"
    return getattr(logging, level)


def setup_logging() -> logging.Logger:
    """Configure the ``intake_pricer`` logger (stdout, one handler)."""
    logger = logging.getLogger(LOGGER_NAME)
    level = _effective_level()
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(fmt=_FORMATS[IS_PRODUCTION], datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(handler)

    return logger


logger = setup_logging()


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """Log-safe rendering of a raw identifier or payload fragment.

    "imei=356789123456789" -> "imei=***********6789"
    "api_key=abc" -> "api_key=***"
    """
    if not value:
        return "[empty]"

    result = str(value)
    for pattern, replacement in _MASKS:
        result = pattern.sub(replacement, result)

    if len(result) > max_length:
        result = result[:max_length] + "..."
    return result
