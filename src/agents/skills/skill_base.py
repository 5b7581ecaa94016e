"""
Skill Base Module - Business-Type Skill Definitions

A skill bundle is the complete configuration that specializes every stage of
the interplay pipeline for one business category:

    Scout       -> thresholds, declarative priority rules, limits
    Researcher  -> competitive-metric boosts, page extraction, classification
    SEM / SEO   -> KPI framing, benchmarks, patterns, prompt text, output filters
    Director    -> synthesis guidance, filtering weights, exclusion patterns

Design Principles:
    1. Bundles are frozen dataclasses built once at import time and never mutated
    2. Rules are data (field, operator, threshold) rather than code keyed by string id
    3. Every stage reads only its own sub-configuration
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


# ============================================================================
# Enumerations
# ============================================================================


class BusinessType(str, Enum):
    """Business categories with a dedicated skill bundle."""
    ECOMMERCE = "ecommerce"
    LEAD_GEN = "lead-gen"
    SAAS = "saas"
    LOCAL = "local"

    @classmethod
    def list(cls):
        return [c.value for c in cls]

    @classmethod
    def from_value(cls, value: Any) -> Optional["BusinessType"]:
        """Parse a category string leniently ("Lead_Gen" -> LEAD_GEN); None if unknown."""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        return None


class RulePriority(str, Enum):
    """Priority declared on a Scout rule. CRITICAL is reported as high."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ComparisonOperator(str, Enum):
    """Operators usable in rule conditions and priority boosts."""
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQ = "=="
    NEQ = "!="
    IS_NULL = "is_null"
    NOT_NULL = "not_null"

    def compare(self, left: Optional[float], right: Optional[float]) -> bool:
        """Apply the operator. Missing values never satisfy a numeric comparison."""
        if self is ComparisonOperator.IS_NULL:
            return left is None
        if self is ComparisonOperator.NOT_NULL:
            return left is not None
        if left is None or right is None:
            return False
        if self is ComparisonOperator.GT:
            return left > right
        if self is ComparisonOperator.LT:
            return left < right
        if self is ComparisonOperator.GTE:
            return left >= right
        if self is ComparisonOperator.LTE:
            return left <= right
        if self is ComparisonOperator.EQ:
            return left == right
        return left != right


# ============================================================================
# Scout Skill
# ============================================================================


@dataclass(frozen=True)
class ScoutThresholds:
    """Numeric thresholds shared by rule conditions.

    Rates are fractions (0.7 = 70% bounce rate, 0.02 = 2% CTR).
    """
    high_spend_threshold: float = 100.0
    low_roas_threshold: float = 2.0
    cannibalization_position: float = 3.0
    high_bounce_rate_threshold: float = 0.7
    low_ctr_threshold: float = 0.02
    min_impressions_for_analysis: int = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            "highSpendThreshold": self.high_spend_threshold,
            "lowRoasThreshold": self.low_roas_threshold,
            "cannibalizationPosition": self.cannibalization_position,
            "highBounceRateThreshold": self.high_bounce_rate_threshold,
            "lowCtrThreshold": self.low_ctr_threshold,
            "minImpressionsForAnalysis": self.min_impressions_for_analysis,
        }


@dataclass(frozen=True)
class RuleCondition:
    """One comparison inside a priority rule.

    The right-hand side is either a literal ``value`` or a reference to a
    ScoutThresholds attribute scaled by ``multiplier``.

    Attributes:
        field: Metric name on the candidate (spend, roas, organic_position, ...)
        operator: Comparison to apply
        value: Literal right-hand side
        threshold: Name of a ScoutThresholds attribute
        multiplier: Scale applied to the referenced threshold
    """
    field: str
    operator: ComparisonOperator
    value: Optional[float] = None
    threshold: Optional[str] = None
    multiplier: float = 1.0

    def __post_init__(self):
        if not self.field:
            raise ValueError("RuleCondition field cannot be empty")
        needs_rhs = self.operator not in (ComparisonOperator.IS_NULL, ComparisonOperator.NOT_NULL)
        if needs_rhs and (self.value is None) == (self.threshold is None):
            raise ValueError(
                f"RuleCondition on '{self.field}' needs exactly one of value or threshold"
            )
        if self.threshold is not None and not hasattr(ScoutThresholds, self.threshold):
            raise ValueError(f"Unknown threshold reference: {self.threshold}")

    def resolve_value(self, thresholds: ScoutThresholds) -> Optional[float]:
        if self.threshold is not None:
            return getattr(thresholds, self.threshold) * self.multiplier
        return self.value

    def evaluate(self, metrics: Mapping[str, Optional[float]], thresholds: ScoutThresholds) -> bool:
        return self.operator.compare(metrics.get(self.field), self.resolve_value(thresholds))

    def describe(self) -> str:
        if self.threshold is None:
            rhs = "" if self.value is None else f" {self.value:g}"
        elif self.multiplier != 1.0:
            rhs = f" {self.threshold}*{self.multiplier:g}"
        else:
            rhs = f" {self.threshold}"
        return f"{self.field} {self.operator.value}{rhs}"


def when(field: str, operator: str, value: Optional[float] = None, *,
         threshold: Optional[str] = None, multiplier: float = 1.0) -> RuleCondition:
    """Shorthand used by skill data modules: when("spend", ">", threshold="high_spend_threshold")."""
    return RuleCondition(
        field=field,
        operator=ComparisonOperator(operator),
        value=value,
        threshold=threshold,
        multiplier=multiplier,
    )


# Reason codes a Scout rule may attach to a candidate
KEYWORD_REASON_CODES = (
    "high_spend_low_roas",
    "cannibalization_risk",
    "growth_potential",
    "competitive_pressure",
)

PAGE_REASON_CODES = (
    "high_spend_low_organic",
    "high_traffic_high_bounce",
    "high_impressions_low_ctr",
)


@dataclass(frozen=True)
class PriorityRule:
    """A named Scout rule: all conditions must hold for the rule to match.

    Attributes:
        id: Stable identifier (kebab-case)
        name: Human-readable name
        description: What the rule detects
        priority: Declared priority (critical reports as high)
        conditions: AND-ed conditions; a rule without conditions never matches
        reason: Reason code attached to matching items (defaults to id in snake_case)
        enabled: Disabled rules are skipped
    """
    id: str
    name: str
    description: str
    priority: RulePriority
    conditions: Tuple[RuleCondition, ...] = ()
    reason: Optional[str] = None
    enabled: bool = True

    @property
    def reason_code(self) -> str:
        return self.reason or self.id.replace("-", "_")

    @property
    def condition(self) -> str:
        return " AND ".join(c.describe() for c in self.conditions)

    def matches(self, metrics: Mapping[str, Optional[float]], thresholds: ScoutThresholds) -> bool:
        if not self.enabled or not self.conditions:
            return False
        return all(c.evaluate(metrics, thresholds) for c in self.conditions)


@dataclass(frozen=True)
class ScoutPriorityRules:
    battleground_keywords: Tuple[PriorityRule, ...] = ()
    critical_pages: Tuple[PriorityRule, ...] = ()


@dataclass(frozen=True)
class ScoutMetricsConfig:
    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()
    primary: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoutLimits:
    max_battleground_keywords: int = 20
    max_critical_pages: int = 10


@dataclass(frozen=True)
class ScoutSkillDefinition:
    version: str
    thresholds: ScoutThresholds = field(default_factory=ScoutThresholds)
    priority_rules: ScoutPriorityRules = field(default_factory=ScoutPriorityRules)
    metrics: ScoutMetricsConfig = field(default_factory=ScoutMetricsConfig)
    limits: ScoutLimits = field(default_factory=ScoutLimits)


# ============================================================================
# Researcher Skill
# ============================================================================

_BOOST_CONDITION_RE = re.compile(r"^([<>=!]+)\s*(\d+(?:\.\d+)?)$")


@dataclass(frozen=True)
class PriorityBoost:
    """Adjusts a keyword's priority when a competitive metric crosses a value.

    Positive boosts promote, negative boosts demote (one tier at most).
    """
    metric: str
    operator: ComparisonOperator
    value: float
    boost: float
    reason: str

    @classmethod
    def from_condition(cls, metric: str, condition: str, boost: float, reason: str) -> "PriorityBoost":
        """Build from a compact condition string such as "> 40" or "<=0.5"."""
        match = _BOOST_CONDITION_RE.match(condition.strip())
        if not match:
            raise ValueError(f"Unparseable boost condition: {condition!r}")
        return cls(
            metric=metric,
            operator=ComparisonOperator(match.group(1)),
            value=float(match.group(2)),
            boost=boost,
            reason=reason,
        )

    def applies(self, metric_value: Optional[float]) -> bool:
        return self.operator.compare(metric_value, self.value)


@dataclass(frozen=True)
class CompetitiveMetricsConfig:
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    irrelevant: Tuple[str, ...] = ()


@dataclass(frozen=True)
class KeywordEnrichmentConfig:
    competitive_metrics: CompetitiveMetricsConfig = field(default_factory=CompetitiveMetricsConfig)
    priority_boosts: Tuple[PriorityBoost, ...] = ()


@dataclass(frozen=True)
class StandardExtractions:
    title: bool = True
    h1: bool = True
    meta_description: bool = True
    canonical_url: bool = True
    word_count: bool = True


@dataclass(frozen=True)
class SchemaExtractionConfig:
    look_for: Tuple[str, ...] = ()
    flag_if_present: Tuple[str, ...] = ()
    flag_if_missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentSignal:
    id: str
    name: str
    selector: str
    importance: str
    description: str
    business_context: str = ""


@dataclass(frozen=True)
class PageClassificationPattern:
    pattern: str
    page_type: str
    description: str
    confidence: float


@dataclass(frozen=True)
class PageClassificationConfig:
    patterns: Tuple[PageClassificationPattern, ...] = ()
    default_type: str = "unknown"
    confidence_threshold: float = 0.7


@dataclass(frozen=True)
class PageEnrichmentConfig:
    standard_extractions: StandardExtractions = field(default_factory=StandardExtractions)
    schema_extraction: SchemaExtractionConfig = field(default_factory=SchemaExtractionConfig)
    content_signals: Tuple[ContentSignal, ...] = ()
    page_classification: PageClassificationConfig = field(default_factory=PageClassificationConfig)


@dataclass(frozen=True)
class DataQualityConfig:
    min_keywords_with_competitive_data: int = 0
    min_pages_with_content: int = 0
    max_fetch_timeout_ms: int = 10000
    max_concurrent_fetches: int = 3


@dataclass(frozen=True)
class ResearcherSkillDefinition:
    version: str
    keyword_enrichment: KeywordEnrichmentConfig = field(default_factory=KeywordEnrichmentConfig)
    page_enrichment: PageEnrichmentConfig = field(default_factory=PageEnrichmentConfig)
    data_quality: DataQualityConfig = field(default_factory=DataQualityConfig)


# ============================================================================
# Shared Agent Skill Parts (SEM / SEO)
# ============================================================================


@dataclass(frozen=True)
class KPIDefinition:
    metric: str
    importance: str
    description: str
    target_direction: str
    business_context: str
    benchmark: Optional[float] = None


@dataclass(frozen=True)
class KPIConfig:
    primary: Tuple[KPIDefinition, ...] = ()
    secondary: Tuple[KPIDefinition, ...] = ()
    irrelevant: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ThresholdSet:
    excellent: float
    good: float
    average: float
    poor: float


@dataclass(frozen=True)
class AnalysisPattern:
    id: str
    name: str
    description: str
    indicators: Tuple[str, ...]
    recommendation: str


@dataclass(frozen=True)
class Opportunity:
    type: str
    description: str
    signals: Tuple[str, ...]
    typical_action: str


@dataclass(frozen=True)
class SEMExample:
    scenario: str
    data: str
    recommendation: str
    reasoning: str


@dataclass(frozen=True)
class SEOExample:
    scenario: str
    page_data: str
    recommendation: str
    reasoning: str


@dataclass(frozen=True)
class AgentPromptConfig:
    """Prompt text for a reasoning agent. ``examples`` holds SEMExample or SEOExample."""
    role_context: str
    analysis_instructions: str
    output_guidance: str
    examples: Tuple[Any, ...] = ()
    constraints: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RecommendationTypes:
    prioritize: Tuple[str, ...] = ()
    deprioritize: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AgentOutputConfig:
    recommendation_types: RecommendationTypes = field(default_factory=RecommendationTypes)
    max_recommendations: int = 10
    require_quantified_impact: bool = False


# ============================================================================
# SEM Skill
# ============================================================================


@dataclass(frozen=True)
class SEMContext:
    business_model: str
    conversion_definition: str
    typical_customer_journey: str


@dataclass(frozen=True)
class SEMAnalysisConfig:
    key_patterns: Tuple[AnalysisPattern, ...] = ()
    anti_patterns: Tuple[AnalysisPattern, ...] = ()
    opportunities: Tuple[Opportunity, ...] = ()


@dataclass(frozen=True)
class SEMSkillDefinition:
    """SEM agent skill.

    ``benchmarks`` keys: ctr, conversionRate, cpc and optionally roas,
    costPerConversion (insertion order is the rendering order).
    """
    version: str
    context: SEMContext
    kpis: KPIConfig
    benchmarks: Mapping[str, ThresholdSet]
    analysis: SEMAnalysisConfig
    prompt: AgentPromptConfig
    output: AgentOutputConfig = field(default_factory=AgentOutputConfig)


# ============================================================================
# SEO Skill
# ============================================================================


@dataclass(frozen=True)
class SEOContext:
    site_type: str
    primary_goal: str
    content_strategy: str


@dataclass(frozen=True)
class SchemaRule:
    type: str
    description: str
    importance: str
    validation_notes: str = ""


@dataclass(frozen=True)
class PageTypeSchemaRule:
    page_type: str
    required_schema: Tuple[str, ...] = ()
    recommended_schema: Tuple[str, ...] = ()
    invalid_schema: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SEOSchemaConfig:
    required: Tuple[SchemaRule, ...] = ()
    recommended: Tuple[SchemaRule, ...] = ()
    invalid: Tuple[SchemaRule, ...] = ()
    page_type_rules: Tuple[PageTypeSchemaRule, ...] = ()


@dataclass(frozen=True)
class ContentPattern:
    id: str
    name: str
    good_pattern: str
    bad_pattern: str
    recommendation: str


@dataclass(frozen=True)
class TechnicalCheck:
    id: str
    name: str
    importance: str
    description: str


@dataclass(frozen=True)
class OnPageFactor:
    factor: str
    importance: str
    guidance: str


@dataclass(frozen=True)
class SEOAnalysisConfig:
    content_patterns: Tuple[ContentPattern, ...] = ()
    technical_checks: Tuple[TechnicalCheck, ...] = ()
    on_page_factors: Tuple[OnPageFactor, ...] = ()


@dataclass(frozen=True)
class CommonIssue:
    id: str
    pattern: str
    description: str
    recommendation: str


@dataclass(frozen=True)
class CommonIssues:
    critical: Tuple[CommonIssue, ...] = ()
    warnings: Tuple[CommonIssue, ...] = ()
    false_positives: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SEOSkillDefinition:
    """SEO agent skill.

    ``benchmarks`` keys: organicCtr, bounceRate, avgPosition and optionally
    pageLoadTime.
    """
    version: str
    context: SEOContext
    schema: SEOSchemaConfig
    kpis: KPIConfig
    benchmarks: Mapping[str, ThresholdSet]
    analysis: SEOAnalysisConfig
    prompt: AgentPromptConfig
    common_issues: CommonIssues = field(default_factory=CommonIssues)
    output: AgentOutputConfig = field(default_factory=AgentOutputConfig)


# ============================================================================
# Director Skill
# ============================================================================


@dataclass(frozen=True)
class DirectorContext:
    business_priorities: Tuple[str, ...]
    success_metrics: Tuple[str, ...]
    executive_framing: str


@dataclass(frozen=True)
class ConflictRule:
    id: str
    sem_signal: str
    seo_signal: str
    resolution: str
    resulting_type: str


@dataclass(frozen=True)
class SynergyRule:
    id: str
    sem_condition: str
    seo_condition: str
    combined_recommendation: str


@dataclass(frozen=True)
class PrioritizationRule:
    condition: str
    adjustment: str  # boost | reduce | require | exclude
    factor: float
    reason: str


@dataclass(frozen=True)
class SynthesisConfig:
    conflict_resolution: Tuple[ConflictRule, ...] = ()
    synergy_identification: Tuple[SynergyRule, ...] = ()
    prioritization: Tuple[PrioritizationRule, ...] = ()


# Allowed values for FilteringConfig.min_impact_threshold, lowest first
IMPACT_THRESHOLDS = ("low", "medium", "high")


@dataclass(frozen=True)
class ImpactWeights:
    revenue: float = 0.35
    cost: float = 0.25
    effort: float = 0.20
    risk: float = 0.20

    def total(self) -> float:
        return self.revenue + self.cost + self.effort + self.risk


@dataclass(frozen=True)
class FilteringConfig:
    """Director post-processing.

    ``must_exclude`` entries use the prefixes metric:, schema:, type: or a
    plain phrase. ``must_include`` uses the same syntax; matching
    recommendations bypass the impact cutoff and rank first.
    """
    max_recommendations: int = 10
    min_impact_threshold: str = "low"
    impact_weights: ImpactWeights = field(default_factory=ImpactWeights)
    must_include: Tuple[str, ...] = ()
    must_exclude: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExecutiveSummaryConfig:
    focus_areas: Tuple[str, ...] = ()
    metrics_to_quantify: Tuple[str, ...] = ()
    framing_guidance: str = ""
    max_highlights: int = 5


@dataclass(frozen=True)
class DirectorPromptConfig:
    role_context: str
    synthesis_instructions: str
    prioritization_guidance: str
    output_format: str
    constraints: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RecommendationFormat:
    require_title: bool = True
    require_description: bool = True
    require_impact: bool = True
    require_effort: bool = True
    require_action_items: bool = True
    max_action_items: int = 5


@dataclass(frozen=True)
class CategoryLabels:
    sem: str = "Paid Search"
    seo: str = "Organic Search"
    hybrid: str = "Cross-Channel"


@dataclass(frozen=True)
class DirectorOutputConfig:
    recommendation_format: RecommendationFormat = field(default_factory=RecommendationFormat)
    category_labels: CategoryLabels = field(default_factory=CategoryLabels)


@dataclass(frozen=True)
class DirectorSkillDefinition:
    version: str
    context: DirectorContext
    synthesis: SynthesisConfig
    filtering: FilteringConfig
    executive_summary: ExecutiveSummaryConfig
    prompt: DirectorPromptConfig
    output: DirectorOutputConfig = field(default_factory=DirectorOutputConfig)


# ============================================================================
# Bundle
# ============================================================================


@dataclass(frozen=True)
class AgentSkillBundle:
    """Complete, versioned configuration for one business category."""
    business_type: BusinessType
    version: str
    scout: ScoutSkillDefinition
    researcher: ResearcherSkillDefinition
    sem: SEMSkillDefinition
    seo: SEOSkillDefinition
    director: DirectorSkillDefinition

    def __post_init__(self):
        if not self.version:
            raise ValueError("Skill bundle version cannot be empty")

    def describe(self) -> Dict[str, Any]:
        return {
            "business_type": self.business_type.value,
            "version": self.version,
            "stage_versions": {
                "scout": self.scout.version,
                "researcher": self.researcher.version,
                "sem": self.sem.version,
                "seo": self.seo.version,
                "director": self.director.version,
            },
            "keyword_rules": len(self.scout.priority_rules.battleground_keywords),
            "page_rules": len(self.scout.priority_rules.critical_pages),
            "must_exclude": list(self.director.filtering.must_exclude),
        }
