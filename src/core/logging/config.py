"""
Logging Configuration
====================

Environment Variables:
---------------------
- LOG_LEVEL: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- LOG_FORMAT: "json" for production, "text" for development (default)
- LOG_DIR: Base directory for log files (default: ./logs)
- LOG_TO_FILE: "true" to write category files under LOG_DIR (default: false)
- LOG_RETENTION_DAYS: Days to keep log files (default: 15)
- LOG_CONSOLE: "true" to enable console output (default: true)

Usage:
------
```python
from src.core.logging import setup_logging, get_logger

setup_logging()
logger = get_logger("orchestrator", category="pipeline")
```
"""

import os
import sys
import logging
from typing import Dict, Optional

from src.core.logging.formatters import DevFormatter, JsonFormatter
from src.core.logging.handlers import (
    CategoryRoutingHandler,
    cleanup_old_logs,
    create_error_handler,
    ensure_log_directories,
)


_configured_loggers: Dict[str, logging.Logger] = {}
_logging_initialized = False


def get_config() -> dict:
    """Get logging configuration from environment."""
    return {
        "level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "format": os.environ.get("LOG_FORMAT", "text").lower(),
        "log_dir": os.environ.get("LOG_DIR", "logs"),
        "to_file": os.environ.get("LOG_TO_FILE", "false").lower() == "true",
        "retention_days": int(os.environ.get("LOG_RETENTION_DAYS", "15")),
        "console_enabled": os.environ.get("LOG_CONSOLE", "true").lower() == "true",
        "is_production": os.environ.get("ENV", "development").lower() == "production",
    }


def setup_logging(
    level: Optional[str] = None,
    use_json: Optional[bool] = None,
    console: Optional[bool] = None,
) -> None:
    """
    Initialize the logging system. Call once at process start.

    Args:
        level: Override log level
        use_json: Override format (True for JSON, False for text)
        console: Override console output
    """
    global _logging_initialized

    if _logging_initialized:
        return

    config = get_config()
    if level:
        config["level"] = level.upper()
    if use_json is not None:
        config["format"] = "json" if use_json else "text"
    if console is not None:
        config["console_enabled"] = console

    log_level = getattr(logging, config["level"], logging.INFO)
    use_json_format = config["format"] == "json" or config["is_production"]

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    if config["console_enabled"]:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            JsonFormatter() if use_json_format else DevFormatter(use_colors=sys.stdout.isatty())
        )
        root_logger.addHandler(console_handler)

    if config["to_file"]:
        ensure_log_directories()
        root_logger.addHandler(
            CategoryRoutingHandler(
                use_json=use_json_format,
                retention_days=config["retention_days"],
                level=log_level,
            )
        )
        root_logger.addHandler(
            create_error_handler(
                use_json=use_json_format,
                retention_days=config["retention_days"],
            )
        )
        cleanup_old_logs(config["retention_days"])

    _configure_third_party_loggers(log_level)

    _logging_initialized = True

    root_logger.info(
        f"Logging initialized: level={config['level']}, "
        f"format={'json' if use_json_format else 'text'}, "
        f"files={'on' if config['to_file'] else 'off'}"
    )


def _configure_third_party_loggers(level: int) -> None:
    """Keep HTTP and SDK chatter out of pipeline logs."""
    for name in ["httpx", "httpcore", "openai", "asyncio"]:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(
    name: Optional[str] = None,
    category: Optional[str] = None,
) -> logging.Logger:
    """
    Get a configured logger.

    Args:
        name: Logger name (e.g., module name). If None, uses "app"
        category: Force a category prefix so file routing picks it up

    Examples:
        get_logger("scout", category="pipeline")  -> pipeline.scout
        get_logger("alerts")                     -> alerts (routed to alert/)
    """
    if name is None:
        name = "app"

    if category and category not in name.lower():
        name = f"{category}.{name}"

    if name not in _configured_loggers:
        _configured_loggers[name] = logging.getLogger(name)
    return _configured_loggers[name]


def shutdown_logging() -> None:
    """Flush and close all handlers."""
    global _logging_initialized

    logging.shutdown()
    _configured_loggers.clear()
    _logging_initialized = False
