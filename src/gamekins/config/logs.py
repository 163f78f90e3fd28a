"""
Logging setup for hosts and the CLI.
"""

import logging

from gamekins.config.models import LoggingConfig

ROOT_LOGGER = "gamekins"


def configure_logging(config: LoggingConfig | None = None, verbose: bool = False) -> None:
    """Apply the logging configuration.

    Args:
        config: Level and format, defaults to LoggingConfig()
        verbose: Force DEBUG level
    """
    config = config or LoggingConfig()
    level = logging.DEBUG if verbose else getattr(logging, config.level.value)
    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger(ROOT_LOGGER).setLevel(level)
