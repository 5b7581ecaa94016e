"""
Run Context Management
======================

Provides report-run tracing across all log messages using contextvars.
Every log line emitted while a pipeline run is active carries the run id,
including lines written from concurrently scheduled SEM/SEO tasks (asyncio
copies the context into each task).

Usage:
------
```python
from src.core.logging.context import RunContext, get_run_id

async with RunContext(run_id=report.id):
    logger.info("Scout started")      # [3f9c1a2b] Scout started
    await researcher.run(...)
```
"""

import uuid
from contextvars import ContextVar
from typing import Optional

_run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def get_run_id() -> Optional[str]:
    """Get the current report-run id from context."""
    return _run_id_var.get()


def set_run_id(run_id: Optional[str] = None) -> str:
    """
    Set run id in context.

    Args:
        run_id: Custom run id. If None, generates a short UUID.

    Returns:
        The run id that was set.
    """
    if run_id is None:
        run_id = str(uuid.uuid4())[:8]
    _run_id_var.set(run_id)
    return run_id


def clear_run_id() -> None:
    """Clear the run id from context."""
    _run_id_var.set(None)


class RunContext:
    """
    Context manager scoping a report-run id.

    Restores the previous value on exit, even if the run raised.
    """

    def __init__(self, run_id: Optional[str] = None):
        self.run_id = run_id
        self._token = None

    def __enter__(self):
        self._token = _run_id_var.set(
            self.run_id[:8] if self.run_id else str(uuid.uuid4())[:8]
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _run_id_var.reset(self._token)
        return False

    async def __aenter__(self):
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return self.__exit__(exc_type, exc_val, exc_tb)
