"""
Command-line entry point: ``python -m hue_scheduler``.

Reads configuration from the environment (and a .env file), configures
logging and runs the poll loop until interrupted.
"""

import logging
import os
import sys

from hue_scheduler.config import ConfigError, SchedulerConfig
from hue_scheduler.scheduler import HueScheduler

logger = logging.getLogger("hue_scheduler")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: SchedulerConfig, level_name: str = "INFO") -> None:
    """Log to stderr, and at DEBUG level to the configured debug file."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        handler.setLevel(level)

    if config.debug_file:
        file_handler = logging.FileHandler(config.debug_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)


def main() -> int:
    try:
        config = SchedulerConfig.from_env()
    except ConfigError as e:
        logging.basicConfig(format=LOG_FORMAT)
        logger.error(f"Invalid configuration: {e}")
        return 2

    configure_logging(config, os.environ.get("LOG_LEVEL", "INFO"))

    scheduler = HueScheduler.from_config(config)
    scheduler.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
