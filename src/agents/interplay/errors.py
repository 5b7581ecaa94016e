"""
Interplay pipeline error taxonomy.

Configuration errors are deployment defects; insufficient data stops the run
before any reasoning call; agent errors are external-dependency failures and
fail the owning stage. Best-effort failures (page fetches, competitive
lookups) are never raised.
"""

from typing import Any, Dict, Optional


class InterplayError(Exception):
    """Base class for interplay pipeline errors."""


class SkillConfigurationError(InterplayError):
    """No skill bundle for a business category, or a bundle is invalid."""


class InsufficientDataError(InterplayError):
    """No usable metrics for the requested date range."""

    def __init__(self, message: str = "Insufficient data: no query metrics found for the date range"):
        super().__init__(message)


class AgentExecutionError(InterplayError):
    """A reasoning stage failed while calling the external service."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f"{stage} agent failed: {message}")


class AgentResponseError(AgentExecutionError):
    """The reasoning service answered with malformed or non-conforming output."""

    retryable = True

    def __init__(self, stage: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(stage, message)


class PromptTooLargeError(InterplayError):
    """A serialized prompt exceeded the hard token ceiling."""

    def __init__(self, label: str, estimated_tokens: int, limit: int):
        self.label = label
        self.estimated_tokens = estimated_tokens
        self.limit = limit
        super().__init__(
            f"{label} prompt too large: ~{estimated_tokens} tokens exceeds limit of {limit}"
        )


class InvalidStatusTransitionError(InterplayError):
    """Illegal Report Run status transition or snapshot overwrite."""
