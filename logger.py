import logging
import os
import sys

# Get log level from environment variable (default to INFO)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
if LOG_LEVEL not in VALID_LOG_LEVELS:
    LOG_LEVEL = "INFO"

# stdout carries the inline graph, so diagnostics go to stderr
console_handler = logging.StreamHandler(sys.stderr)
console_handler.setFormatter(
    logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    handlers=[console_handler],
)


def set_level(level: str) -> None:
    """Override the root log level, ignoring unknown level names."""
    level = level.upper()
    if level in VALID_LOG_LEVELS:
        logging.getLogger().setLevel(getattr(logging, level))


def get_logger(name: str):
    """Return a configured logger for the given module."""
    return logging.getLogger(name.split(".")[-1])
