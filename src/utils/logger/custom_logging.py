"""
Custom Logging - Class-level access to the logging system
=========================================================

Usage:
    from src.utils.logger.custom_logging import LoggerMixin

    class Researcher(LoggerMixin):
        def run(self):
            self.logger.info("[RESEARCHER] Starting enrichment")

Module-level code uses logging.getLogger(__name__) directly; the category
routing in src.core.logging picks the right file from the logger name.
"""

import logging
from typing import Optional

from src.core.logging import get_logger as _get_production_logger
from src.utils.config import settings


class LogHandler(object):
    """Resolves loggers through the production logging system."""

    def get_logger(self, logger_name: str, category: Optional[str] = None) -> logging.Logger:
        """
        Get a logger by name.

        Args:
            logger_name: Name of the logger (usually __name__)
            category: Force a specific category (pipeline, agent, alert, performance)
        """
        logger = _get_production_logger(logger_name, category=category)
        if not logging.getLogger().handlers:
            # setup_logging() not called yet: honour LOG_LEVEL from settings
            logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
        return logger


class LoggerMixin:
    """
    Mixin class that provides a logger attribute.

    Example:
        class SEMAgent(LoggerMixin):
            def __init__(self):
                super().__init__()
                self.logger.info("Agent initialized")
    """

    def __init__(self) -> None:
        logger_name = f"{self.__class__.__module__}.{self.__class__.__name__}"
        self.logger = LogHandler().get_logger(logger_name)


def get_logger(name: str, category: Optional[str] = None) -> logging.Logger:
    """Quick function to get a configured logger."""
    return LogHandler().get_logger(name, category)
