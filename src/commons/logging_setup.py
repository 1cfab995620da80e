"""Loguru sink setup. Library modules only call `logger`; the CLI calls configure_logging once."""

import sys

from loguru import logger

from commons.config import config, get_section

_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def configure_logging(level: str | None = None, sink=sys.stderr) -> int:
    """Replace loguru's default handler. Level: argument, then config logging.level, then INFO."""
    level = (level or get_section(config, "logging").get("level") or "INFO").upper()
    logger.remove()
    return logger.add(sink, level=level, format=_FORMAT)
