"""
Logging System
==============

- Console output (colored text in development, JSON in production)
- Optional category files (pipeline, agent, alert, performance, app) with
  an error/ mirror and daily rotation
- Report-run id tracing via contextvars

Usage:
------
```python
from src.core.logging import setup_logging, get_logger, RunContext

setup_logging()
logger = get_logger("orchestrator", category="pipeline")

async with RunContext(run_id=report_id):
    logger.info("Processing run")  # Includes [report-id] in log
```
"""

from src.core.logging.config import setup_logging, get_logger, shutdown_logging
from src.core.logging.context import (
    RunContext,
    get_run_id,
    set_run_id,
    clear_run_id,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    "RunContext",
    "get_run_id",
    "set_run_id",
    "clear_run_id",
]
