"""Logging setup driven by ReviewRosterConfig."""
import logging
from typing import Optional

from .settings import ReviewRosterConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(config: ReviewRosterConfig, force: bool = False) -> None:
    """Configure the root logger from the log level and optional log file.

    Args:
        config: Application configuration
        force: Replace handlers installed by an earlier call
    """
    level: Optional[int] = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.log_level}")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=force)
