"""Logging setup for processes embedding the engine."""

import logging

from riskfirst.config.settings import LoggingSettings


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Configure root logging from settings.

    Args:
        settings: Logging configuration. Defaults to LoggingSettings().
    """
    settings = settings or LoggingSettings()
    logging.basicConfig(
        level=settings.level.upper(),
        format=settings.format,
        datefmt=settings.datefmt,
    )
