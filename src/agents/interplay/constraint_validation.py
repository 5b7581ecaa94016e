"""
Constraint Validation

Deterministic safety net applied by the Director: every SEM/SEO action (and
every unified recommendation) is normalized into a NormalizedAction and
checked against the skill's must_exclude patterns.

Pattern syntax:
    metric:roas       action mentions the metric (see METRIC_PATTERNS)
    schema:Product    action recommends adding that schema type
    type:shopping-campaign
                      action text contains "shopping campaign"
    anything else     plain case-insensitive substring match

Rules are checked in declaration order; the first match drops the action.
Any violation means an upstream prompt was not strict enough, so every drop
is logged as a warning.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from src.agents.interplay.models import ConstraintViolation, NormalizedAction
from src.agents.interplay.schemas import SEMAction, SEOAction, UnifiedRecommendation

logger = logging.getLogger(__name__)

MATCHED_CONTENT_CHARS = 200
LOG_PREVIEW_CHARS = 100


# ============================================================================
# ACTION TYPE INFERENCE
# ============================================================================

# Checked in order; the first family with a matching pattern wins
ACTION_TYPE_PATTERNS: Dict[str, Tuple[re.Pattern, ...]] = {
    "bid-adjustment": (
        re.compile(r"\b(reduce|increase|adjust|lower|raise)\s+(bids?|bidding)", re.I),
        re.compile(r"\bbid\s+(strategy|adjustment|modifier)", re.I),
        re.compile(r"\btarget\s+(roas|cpa)", re.I),
        re.compile(r"\bsmart\s+bidding", re.I),
    ),
    "budget-change": (
        re.compile(r"\b(increase|decrease|reallocate|shift)\s+budget", re.I),
        re.compile(r"\bbudget\s+(allocation|reallocation)", re.I),
        re.compile(r"\bspend\s+(more|less)", re.I),
    ),
    "campaign-structure": (
        re.compile(r"\b(create|restructure|consolidate|split)\s+(campaign|ad\s*group)", re.I),
        re.compile(r"\bcampaign\s+structure", re.I),
        re.compile(r"\bshopping\s+campaign", re.I),
        re.compile(r"\bperformance\s+max", re.I),
        re.compile(r"\bpmax", re.I),
    ),
    "keyword-targeting": (
        re.compile(r"\b(add|remove|pause)\s+(keyword|negative)", re.I),
        re.compile(r"\bmatch\s+type", re.I),
        re.compile(r"\bkeyword\s+(targeting|expansion)", re.I),
        re.compile(r"\bnegative\s+keyword", re.I),
    ),
    "schema-implementation": (
        re.compile(r"\b(add|implement|create)\s+\w*\s*schema", re.I),
        re.compile(r"\bschema\s+(markup|implementation)", re.I),
        re.compile(r"\bstructured\s+data", re.I),
        re.compile(r"\bjson-?ld", re.I),
    ),
    "schema-removal": (
        re.compile(r"\b(remove|delete|fix)\s+\w*\s*schema", re.I),
        re.compile(r"\bincorrect\s+schema", re.I),
        re.compile(r"\binvalid\s+schema", re.I),
    ),
    "content-change": (
        re.compile(r"\b(update|rewrite|improve|optimize)\s+(title|meta|h1|content|copy)", re.I),
        re.compile(r"\bcontent\s+(optimization|improvement)", re.I),
        re.compile(r"\btitle\s+tag", re.I),
        re.compile(r"\bmeta\s+description", re.I),
    ),
    "technical-fix": (
        re.compile(r"\b(fix|resolve|address)\s+(page\s*speed|mobile|ssl|redirect|404)", re.I),
        re.compile(r"\btechnical\s+(seo|issue|fix)", re.I),
        re.compile(r"\bcore\s+web\s+vitals", re.I),
        re.compile(r"\bpage\s+speed", re.I),
    ),
}

SCHEMA_IMPLEMENTATION = "schema-implementation"

DEFAULT_ACTION_TYPES = {
    "sem": "keyword-targeting",
    "seo": "content-change",
    "director": "content-change",
}


def infer_action_type(text: str, source: str) -> str:
    for action_type, patterns in ACTION_TYPE_PATTERNS.items():
        if any(pattern.search(text) for pattern in patterns):
            return action_type
    return DEFAULT_ACTION_TYPES.get(source, "content-change")


# ============================================================================
# EXTRACTION
# ============================================================================

_QUOTED_PATTERNS = (
    re.compile(r'"([^"]+)"'),
    re.compile(r"'([^']+)'"),
    re.compile(r"\[([^\]]+)\]"),
)

METRIC_PATTERNS: Dict[str, re.Pattern] = {
    "roas": re.compile(r"\broas\b|return on ad spend", re.I),
    "revenue": re.compile(r"\brevenue\b|\bearnings\b|\bsales\b", re.I),
    "aov": re.compile(r"\baov\b|average order value", re.I),
    "cpl": re.compile(r"\bcpl\b|cost per lead", re.I),
    "cpc": re.compile(r"\bcpc\b|cost per click", re.I),
    "ctr": re.compile(r"\bctr\b|click.through rate", re.I),
    "cpa": re.compile(r"\bcpa\b|cost per acquisition", re.I),
    "ltv": re.compile(r"\bltv\b|lifetime value", re.I),
    "mrr": re.compile(r"\bmrr\b|monthly recurring revenue", re.I),
    "arr": re.compile(r"\barr\b|annual recurring revenue", re.I),
    "churn": re.compile(r"\bchurn\b|churn rate", re.I),
}

SCHEMA_TYPES = (
    "Product",
    "Offer",
    "AggregateOffer",
    "Service",
    "ProfessionalService",
    "LocalBusiness",
    "Organization",
    "FAQPage",
    "Article",
    "BreadcrumbList",
    "HowTo",
    "Review",
    "AggregateRating",
    "Event",
    "SoftwareApplication",
    "WebApplication",
    "VideoObject",
    "ImageObject",
)

_SCHEMA_TYPE_PATTERNS = tuple(
    (schema, re.compile(rf"\b{schema}\b", re.I)) for schema in SCHEMA_TYPES
)


def extract_keywords(text: str) -> List[str]:
    """Quoted ("..." / '...') and bracketed ([...]) terms, de-duplicated in order."""
    found: List[str] = []
    for pattern in _QUOTED_PATTERNS:
        for term in pattern.findall(text):
            if term not in found:
                found.append(term)
    return found


def extract_metrics(text: str) -> List[str]:
    return [metric for metric, pattern in METRIC_PATTERNS.items() if pattern.search(text)]


def extract_schema_types(text: str) -> List[str]:
    return [schema for schema, pattern in _SCHEMA_TYPE_PATTERNS if pattern.search(text)]


# ============================================================================
# NORMALIZATION
# ============================================================================

def normalize_sem_action(action: SEMAction, index: int = 0) -> NormalizedAction:
    text = f"{action.action} {action.reasoning}".lower()
    return NormalizedAction(
        id=f"sem-{index}",
        source="sem",
        action_type=infer_action_type(text, "sem"),
        text=text,
        keywords=tuple(extract_keywords(text)),
        metrics=tuple(extract_metrics(text)),
        schemas=(),
        original=action,
    )


def normalize_seo_action(action: SEOAction, index: int = 0) -> NormalizedAction:
    text = f"{action.recommendation} {' '.join(action.specific_actions)}".lower()
    return NormalizedAction(
        id=f"seo-{index}",
        source="seo",
        action_type=infer_action_type(text, "seo"),
        text=text,
        keywords=tuple(extract_keywords(text)),
        metrics=tuple(extract_metrics(text)),
        schemas=tuple(extract_schema_types(text)),
        original=action,
    )


def normalize_unified_recommendation(recommendation: UnifiedRecommendation, index: int = 0) -> NormalizedAction:
    text = " ".join(
        [recommendation.title, recommendation.description, *recommendation.action_items]
    ).lower()
    return NormalizedAction(
        id=f"director-{index}",
        source="director",
        action_type=infer_action_type(text, "director"),
        text=text,
        keywords=tuple(extract_keywords(text)),
        metrics=tuple(extract_metrics(text)),
        schemas=tuple(extract_schema_types(text)),
        original=recommendation,
    )


# ============================================================================
# EXCLUSION RULES
# ============================================================================

@dataclass(frozen=True)
class ExclusionRule:
    id: str
    description: str
    match: Callable[[NormalizedAction], bool]


def build_exclusion_rule(pattern: str) -> ExclusionRule:
    if pattern.startswith("metric:"):
        metric = pattern[len("metric:"):].strip().lower()
        return ExclusionRule(
            id=pattern,
            description=f"Excludes actions mentioning {metric}",
            match=lambda action: metric in action.metrics,
        )

    if pattern.startswith("schema:"):
        schema = pattern[len("schema:"):].strip().lower()
        return ExclusionRule(
            id=pattern,
            description=f"Excludes actions recommending {schema} schema",
            match=lambda action: (
                action.action_type == SCHEMA_IMPLEMENTATION
                and any(s.lower() == schema for s in action.schemas)
            ),
        )

    if pattern.startswith("type:"):
        phrase = pattern[len("type:"):].replace("-", " ").strip().lower()
        return ExclusionRule(
            id=pattern,
            description=f'Excludes actions containing "{phrase}"',
            match=lambda action: phrase in action.text,
        )

    phrase = pattern.lower()
    return ExclusionRule(
        id=pattern,
        description=f'Excludes actions containing "{pattern}"',
        match=lambda action: phrase in action.text,
    )


def build_exclusion_rules(must_exclude: Sequence[str]) -> List[ExclusionRule]:
    return [build_exclusion_rule(pattern) for pattern in must_exclude]


def first_matching_rule(action: NormalizedAction, rules: Sequence[ExclusionRule]) -> Optional[ExclusionRule]:
    for rule in rules:
        if rule.match(action):
            return rule
    return None


# ============================================================================
# VALIDATION
# ============================================================================

@dataclass(frozen=True)
class ConstraintValidationResult:
    violations: Tuple[ConstraintViolation, ...]
    filtered: Tuple[NormalizedAction, ...]
    original_count: int

    @property
    def filtered_count(self) -> int:
        return len(self.filtered)


def _apply_rules(
    actions: Sequence[NormalizedAction],
    rules: Sequence[ExclusionRule],
) -> Tuple[List[NormalizedAction], List[ConstraintViolation]]:
    kept: List[NormalizedAction] = []
    violations: List[ConstraintViolation] = []

    for action in actions:
        rule = first_matching_rule(action, rules)
        if rule is None:
            kept.append(action)
            continue
        violations.append(ConstraintViolation(
            source=action.source,
            action_id=action.id,
            rule_id=rule.id,
            rule_description=rule.description,
            matched_content=action.text[:MATCHED_CONTENT_CHARS],
        ))

    return kept, violations


def _log_violations(violations: Sequence[ConstraintViolation], skill_version: Optional[str], stage: str) -> None:
    if not violations:
        return
    previews = "; ".join(
        f"{v.source}/{v.rule_id}: {v.matched_content[:LOG_PREVIEW_CHARS]!r}" for v in violations
    )
    logger.warning(
        f"[CONSTRAINTS] {len(violations)} {stage} constraint violation(s) filtered "
        f"(skill={skill_version}): {previews}"
    )


def validate_upstream_constraints(
    sem_actions: Sequence[SEMAction],
    seo_actions: Sequence[SEOAction],
    must_exclude: Sequence[str],
    skill_version: Optional[str] = None,
) -> ConstraintValidationResult:
    """Normalize SEM + SEO actions and drop every action matching an exclusion rule."""
    rules = build_exclusion_rules(must_exclude)
    actions = (
        [normalize_sem_action(a, i) for i, a in enumerate(sem_actions)]
        + [normalize_seo_action(a, i) for i, a in enumerate(seo_actions)]
    )

    kept, violations = _apply_rules(actions, rules)
    _log_violations(violations, skill_version, "upstream")

    return ConstraintValidationResult(
        violations=tuple(violations),
        filtered=tuple(kept),
        original_count=len(actions),
    )


def validate_recommendations(
    recommendations: Sequence[UnifiedRecommendation],
    must_exclude: Sequence[str],
    skill_version: Optional[str] = None,
) -> Tuple[List[UnifiedRecommendation], List[ConstraintViolation]]:
    """Apply the same exclusion rules to the Director's unified recommendations."""
    rules = build_exclusion_rules(must_exclude)
    actions = [normalize_unified_recommendation(r, i) for i, r in enumerate(recommendations)]

    kept, violations = _apply_rules(actions, rules)
    _log_violations(violations, skill_version, "director")

    return [a.original for a in kept], violations


def extract_filtered_sem_actions(validated: Sequence[NormalizedAction]) -> List[SEMAction]:
    return [a.original for a in validated if a.source == "sem"]


def extract_filtered_seo_actions(validated: Sequence[NormalizedAction]) -> List[SEOAction]:
    return [a.original for a in validated if a.source == "seo"]
