"""
Interplay Report - business-type-aware recommendation pipeline

Pipeline:
    QueryRecords -> Scout (rule triage)
                 -> Researcher (competitive metrics + page content)
                 -> SEM Agent || SEO Agent (skill-shaped prompts)
                 -> Director (synthesis, constraint enforcement, ranking)
                 -> Output analysis + alerts -> ReportRun (completed)

Usage:
    from src.agents.interplay.orchestrator import InterplayOrchestrator

    orchestrator = InterplayOrchestrator(repository, query_source, competitive_source)
    report = await orchestrator.generate_report("acct-1", "lead-gen", date_range)

Only the leaf modules are re-exported here; the skill registry imports this
package's errors, so stage modules are imported from their own paths.
"""

from src.agents.interplay.errors import (
    AgentExecutionError,
    AgentResponseError,
    InsufficientDataError,
    InterplayError,
    InvalidStatusTransitionError,
    PromptTooLargeError,
    SkillConfigurationError,
)
from src.agents.interplay.models import (
    ClientContext,
    DateRange,
    QueryRecord,
    ReportRun,
    ReportStatus,
)
from src.agents.interplay.schemas import (
    DirectorOutput,
    SEMAgentOutput,
    SEOAgentOutput,
)

__all__ = [
    "AgentExecutionError",
    "AgentResponseError",
    "InsufficientDataError",
    "InterplayError",
    "InvalidStatusTransitionError",
    "PromptTooLargeError",
    "SkillConfigurationError",
    "ClientContext",
    "DateRange",
    "QueryRecord",
    "ReportRun",
    "ReportStatus",
    "DirectorOutput",
    "SEMAgentOutput",
    "SEOAgentOutput",
]
