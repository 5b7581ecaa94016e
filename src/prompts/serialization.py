"""
Prompt Serialization Layer

Renders skill definitions and enriched data into prompt text for the SEM,
SEO and Director stages, and manages the token budget:

- estimate_tokens: ~4 characters per token (approximation, not a tokenizer)
- determine_serialization_mode: full vs compact rendering by data volume
- prioritize_and_truncate: keep the highest-scoring items up to the mode cap
- validate_prompt_size: hard ceiling checked after final assembly
"""

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Mapping, Sequence, Tuple, TypeVar

from src.agents.interplay.errors import PromptTooLargeError
from src.agents.interplay.models import EnrichedKeyword, EnrichedPage
from src.agents.skills.skill_base import (
    AnalysisPattern,
    ConflictRule,
    ContentPattern,
    KPIConfig,
    KPIDefinition,
    PrioritizationRule,
    SEMExample,
    SEOExample,
    SEOSchemaConfig,
    SynergyRule,
    ThresholdSet,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# TOKEN BUDGET CONSTANTS
# ============================================================================

class TOKEN_LIMITS:
    MAX_PROMPT_TOKENS = 30000
    MAX_DATA_TOKENS = 15000

    MAX_KEYWORDS_FULL = 20
    MAX_KEYWORDS_COMPACT = 10
    MAX_PAGES_FULL = 10
    MAX_PAGES_COMPACT = 5

    MAX_CONTENT_PREVIEW_CHARS = 500
    MAX_PAGE_TITLE_CHARS = 100


class SerializationMode(str, Enum):
    FULL = "full"
    COMPACT = "compact"


@dataclass(frozen=True)
class TokenBudget:
    mode: SerializationMode
    keywords_included: int
    keywords_dropped: int
    pages_included: int
    pages_dropped: int

    @property
    def truncation_applied(self) -> bool:
        return self.keywords_dropped > 0 or self.pages_dropped > 0

    def to_dict(self):
        return {
            "mode": self.mode.value,
            "keywordsIncluded": self.keywords_included,
            "keywordsDropped": self.keywords_dropped,
            "pagesIncluded": self.pages_included,
            "pagesDropped": self.pages_dropped,
            "truncationApplied": self.truncation_applied,
        }


def estimate_tokens(text: str) -> int:
    """Rough token estimate: 1 token per 4 characters, rounded up."""
    return math.ceil(len(text) / 4)


def _payload_size(items: Sequence) -> int:
    return len(json.dumps([item.to_dict() for item in items], default=str))


def determine_serialization_mode(
    keywords: Sequence[EnrichedKeyword],
    pages: Sequence[EnrichedPage],
) -> Tuple[SerializationMode, TokenBudget]:
    """
    Pick the render mode from item counts and estimated payload size.

    Compact mode caps keywords and pages to the smaller compact limits.
    """
    keyword_count = len(keywords)
    page_count = len(pages)
    estimated_data_tokens = math.ceil((_payload_size(keywords) + _payload_size(pages)) / 4)

    mode = SerializationMode.FULL
    keywords_included = keyword_count
    pages_included = page_count

    if (
        keyword_count > TOKEN_LIMITS.MAX_KEYWORDS_FULL
        or page_count > TOKEN_LIMITS.MAX_PAGES_FULL
        or estimated_data_tokens > TOKEN_LIMITS.MAX_DATA_TOKENS
    ):
        mode = SerializationMode.COMPACT
        keywords_included = min(keyword_count, TOKEN_LIMITS.MAX_KEYWORDS_COMPACT)
        pages_included = min(page_count, TOKEN_LIMITS.MAX_PAGES_COMPACT)

    budget = TokenBudget(
        mode=mode,
        keywords_included=keywords_included,
        keywords_dropped=keyword_count - keywords_included,
        pages_included=pages_included,
        pages_dropped=page_count - pages_included,
    )

    if budget.truncation_applied:
        logger.warning(
            f"[SERIALIZER] Data truncated for token budget: "
            f"keywords {keywords_included}/{keyword_count}, pages {pages_included}/{page_count}, "
            f"estimated_data_tokens={estimated_data_tokens}"
        )

    return mode, budget


# ============================================================================
# PRIORITY SCORING FOR TRUNCATION
# ============================================================================

KEYWORD_PRIORITY_WEIGHTS = {
    "high_spend_low_roas": 100,
    "cannibalization_risk": 90,
    "growth_potential": 70,
    "competitive_pressure": 60,
}
DEFAULT_KEYWORD_WEIGHT = 50

PAGE_PRIORITY_WEIGHTS = {
    "high_spend_low_organic": 100,
    "high_traffic_high_bounce": 80,
    "high_impressions_low_ctr": 70,
}
DEFAULT_PAGE_WEIGHT = 50


def _reason_key(reason: str) -> str:
    return reason.replace("-", "_")


def calculate_keyword_priority(keyword: EnrichedKeyword) -> int:
    """Truncation score for a keyword (higher = keep first)."""
    score = KEYWORD_PRIORITY_WEIGHTS.get(_reason_key(keyword.reason), DEFAULT_KEYWORD_WEIGHT)

    if keyword.spend > 500:
        score += 30
    elif keyword.spend > 200:
        score += 20
    elif keyword.spend > 100:
        score += 10

    if keyword.conversions > 0:
        score += 15

    if keyword.competitive_metrics is not None:
        score += 10

    return score


def calculate_page_priority(page: EnrichedPage) -> int:
    """Truncation score for a page (higher = keep first)."""
    score = PAGE_PRIORITY_WEIGHTS.get(_reason_key(page.reason), DEFAULT_PAGE_WEIGHT)

    if page.paid_spend > 300:
        score += 25
    elif page.paid_spend > 100:
        score += 15

    if page.content is not None:
        score += 10

    if page.impressions > 1000:
        score += 10

    return score


def prioritize_and_truncate(
    items: Sequence[T],
    limit: int,
    scorer: Callable[[T], float],
) -> Tuple[List[T], int]:
    """
    Keep the ``limit`` highest-scoring items (stable for equal scores).

    Returns:
        (included items, number dropped); included + dropped == len(items)
    """
    if len(items) <= limit:
        return list(items), 0

    ranked = sorted(items, key=scorer, reverse=True)
    included = ranked[:limit]
    return included, len(items) - len(included)


def validate_prompt_size(prompt: str, label: str) -> int:
    """Raise PromptTooLargeError when the assembled prompt exceeds the hard ceiling."""
    estimated = estimate_tokens(prompt)
    if estimated > TOKEN_LIMITS.MAX_PROMPT_TOKENS:
        logger.error(
            f"[SERIALIZER] {label} prompt exceeds token limit even after truncation: "
            f"~{estimated} > {TOKEN_LIMITS.MAX_PROMPT_TOKENS}"
        )
        raise PromptTooLargeError(label, estimated, TOKEN_LIMITS.MAX_PROMPT_TOKENS)
    return estimated


# ============================================================================
# KPI / BENCHMARK FORMATTING
# ============================================================================

def _format_kpi(kpi: KPIDefinition) -> str:
    benchmark = f" | Benchmark: {kpi.benchmark}" if kpi.benchmark is not None else ""
    return (
        f"- **{kpi.metric}** ({kpi.importance}): {kpi.description}\n"
        f"  Target: {kpi.target_direction}{benchmark}\n"
        f"  Why it matters: {kpi.business_context}"
    )


def format_kpis(kpis: KPIConfig) -> Mapping[str, str]:
    """Full KPI sections: primary, secondary, irrelevant."""
    return {
        "primary": "\n\n".join(_format_kpi(k) for k in kpis.primary),
        "secondary": "\n\n".join(_format_kpi(k) for k in kpis.secondary),
        "irrelevant": "\n".join(f"- {m}" for m in kpis.irrelevant),
    }


def format_kpis_compact(kpis: KPIConfig) -> Mapping[str, str]:
    """Compact KPI sections (secondary KPIs are omitted)."""
    return {
        "primary": "\n".join(
            f"- **{k.metric}**: {k.description} ({k.target_direction})" for k in kpis.primary
        ),
        "irrelevant": "\n".join(f"- {m}" for m in kpis.irrelevant),
    }


def format_benchmarks(benchmarks: Mapping[str, ThresholdSet]) -> str:
    rows = [
        f"| {metric} | {t.excellent} | {t.good} | {t.average} | {t.poor} |"
        for metric, t in benchmarks.items()
        if t is not None
    ]
    if not rows:
        return "No benchmarks defined."
    header = (
        "| Metric | Excellent | Good | Average | Poor |\n"
        "|--------|-----------|------|---------|------|"
    )
    return header + "\n" + "\n".join(rows)


def format_benchmarks_compact(benchmarks: Mapping[str, ThresholdSet]) -> str:
    lines = [f"- {metric}: Good = {t.good}" for metric, t in benchmarks.items() if t is not None]
    return "\n".join(lines) if lines else "No benchmarks defined."


# ============================================================================
# PATTERN / EXAMPLE / CONSTRAINT FORMATTING
# ============================================================================

def format_patterns(patterns: Sequence[AnalysisPattern]) -> str:
    if not patterns:
        return "No patterns defined."
    return "\n\n".join(
        f"### {p.name}\n"
        f"{p.description}\n"
        f"- **Indicators:** {', '.join(p.indicators)}\n"
        f"- **Recommended Action:** {p.recommendation}"
        for p in patterns
    )


def format_patterns_compact(patterns: Sequence[AnalysisPattern], limit: int = 3) -> str:
    if not patterns:
        return "No patterns defined."
    return "\n".join(f"- **{p.name}**: {p.description}" for p in patterns[:limit])


def format_sem_examples(examples: Sequence[SEMExample]) -> str:
    if not examples:
        return "No examples provided."
    return "\n\n".join(
        f"### Example {i}: {ex.scenario}\n"
        f"**Data:** {ex.data}\n"
        f"**Recommendation:** {ex.recommendation}\n"
        f"**Reasoning:** {ex.reasoning}"
        for i, ex in enumerate(examples, start=1)
    )


def format_sem_examples_compact(examples: Sequence[SEMExample]) -> str:
    if not examples:
        return ""
    ex = examples[0]
    return (
        f"### Example: {ex.scenario}\n"
        f"**Data:** {ex.data}\n"
        f"**Recommendation:** {ex.recommendation}"
    )


def format_seo_examples(examples: Sequence[SEOExample]) -> str:
    if not examples:
        return "No examples provided."
    return "\n\n".join(
        f"### Example {i}: {ex.scenario}\n"
        f"**Page Data:** {ex.page_data}\n"
        f"**Recommendation:** {ex.recommendation}\n"
        f"**Reasoning:** {ex.reasoning}"
        for i, ex in enumerate(examples, start=1)
    )


def format_seo_examples_compact(examples: Sequence[SEOExample]) -> str:
    if not examples:
        return ""
    ex = examples[0]
    return (
        f"### Example: {ex.scenario}\n"
        f"**Page Data:** {ex.page_data}\n"
        f"**Recommendation:** {ex.recommendation}"
    )


def format_constraints(constraints: Sequence[str]) -> str:
    if not constraints:
        return "No constraints defined."
    return "\n".join(f"{i}. {c}" for i, c in enumerate(constraints, start=1))


# ============================================================================
# SEO-SPECIFIC FORMATTING
# ============================================================================

def format_schema_rules(schema: SEOSchemaConfig) -> str:
    sections: List[str] = []

    if schema.required:
        lines = "\n".join(f"- **{r.type}**: {r.description} ({r.validation_notes})" for r in schema.required)
        sections.append(f"### Required Schema\n{lines}")

    if schema.recommended:
        lines = "\n".join(f"- **{r.type}**: {r.description}" for r in schema.recommended)
        sections.append(f"### Recommended Schema\n{lines}")

    if schema.invalid:
        lines = "\n".join(f"- **{r.type}**: {r.description} - {r.validation_notes}" for r in schema.invalid)
        sections.append(f"### INVALID Schema (Flag as Error)\n{lines}")

    return "\n\n".join(sections) if sections else "No schema rules defined."


def format_content_patterns(patterns: Sequence[ContentPattern]) -> str:
    if not patterns:
        return "No content patterns defined."
    return "\n\n".join(
        f"### {p.name}\n"
        f"- **Good:** {p.good_pattern}\n"
        f"- **Bad:** {p.bad_pattern}\n"
        f"- **Recommendation:** {p.recommendation}"
        for p in patterns
    )


def format_content_patterns_compact(patterns: Sequence[ContentPattern], limit: int = 3) -> str:
    if not patterns:
        return "No content patterns defined."
    return "\n".join(
        f'- **{p.name}**: Good = "{p.good_pattern}" | Bad = "{p.bad_pattern}"'
        for p in patterns[:limit]
    )


# ============================================================================
# DIRECTOR-SPECIFIC FORMATTING
# ============================================================================

def format_conflict_rules(rules: Sequence[ConflictRule]) -> str:
    if not rules:
        return "No conflict resolution rules defined."
    return "\n".join(
        f'- **{r.id}**: When SEM says "{r.sem_signal}" and SEO says "{r.seo_signal}" '
        f"→ {r.resolution} (Result: {r.resulting_type})"
        for r in rules
    )


def format_synergy_rules(rules: Sequence[SynergyRule]) -> str:
    if not rules:
        return "No synergy rules defined."
    return "\n".join(
        f'- **{r.id}**: When SEM has "{r.sem_condition}" AND SEO has "{r.seo_condition}" '
        f"→ {r.combined_recommendation}"
        for r in rules
    )


def format_prioritization_rules(rules: Sequence[PrioritizationRule]) -> str:
    if not rules:
        return "No prioritization rules defined."
    return "\n".join(f"- {r.condition}: {r.adjustment} by {r.factor}x ({r.reason})" for r in rules)
