"""
Interplay Report - Data Models

Defines the data structures that flow between pipeline stages:
- Raw input: QueryRecord with optional Google Ads / Search Console / GA4 metrics
- Scout output: BattlegroundKeyword, CriticalPage, ScoutOutput
- Researcher output: CompetitiveMetrics, PageContent, EnrichedKeyword,
  EnrichedPage, ResearcherOutput
- Constraint records: NormalizedAction, ConstraintViolation
- Aggregate root: ReportRun with its status state machine

Design principles:
- Stage outputs are frozen dataclasses; downstream stages never mutate them
- ReportRun is the only mutable record and is owned by the orchestrator
- Every model serializes to plain dicts (camelCase keys) for persistence
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from src.agents.interplay.errors import InvalidStatusTransitionError
from src.agents.skills.skill_base import DataQualityConfig, RulePriority


# ============================================================================
# ENUMS
# ============================================================================

class Priority(str, Enum):
    """Priority tag carried by every candidate item."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def from_rule_priority(cls, level: RulePriority) -> "Priority":
        """Rule priority "critical" reports as high."""
        if level in (RulePriority.CRITICAL, RulePriority.HIGH):
            return cls.HIGH
        if level is RulePriority.MEDIUM:
            return cls.MEDIUM
        return cls.LOW


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class DataLevel(str, Enum):
    """Granularity of the competitive metrics attached to a keyword."""
    KEYWORD = "keyword"
    ACCOUNT = "account"
    NONE = "none"


class ReportStatus(str, Enum):
    """Lifecycle of a report run."""
    PENDING = "pending"
    RESEARCHING = "researching"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"


VALID_REPORT_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
    ReportStatus.PENDING: [
        ReportStatus.RESEARCHING,
        ReportStatus.FAILED,
    ],
    ReportStatus.RESEARCHING: [
        ReportStatus.ANALYZING,
        ReportStatus.FAILED,
    ],
    ReportStatus.ANALYZING: [
        ReportStatus.COMPLETED,
        ReportStatus.FAILED,
    ],
    ReportStatus.COMPLETED: [],  # Terminal state
    ReportStatus.FAILED: [],     # Terminal state
}


def validate_report_transition(current: ReportStatus, target: ReportStatus) -> bool:
    """Check if a report status transition is valid."""
    return target in VALID_REPORT_TRANSITIONS.get(current, [])


# ============================================================================
# RAW INPUT
# ============================================================================

@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"DateRange end {self.end} is before start {self.start}")

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class ClientContext:
    """Optional client facts woven into the reasoning prompts."""
    client_name: Optional[str] = None
    industry: Optional[str] = None
    target_market: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ClientContext":
        data = data or {}
        return cls(
            client_name=data.get("clientName", data.get("client_name")),
            industry=data.get("industry"),
            target_market=data.get("targetMarket", data.get("target_market")),
        )


@dataclass(frozen=True)
class GoogleAdsMetrics:
    spend: float = 0.0
    clicks: int = 0
    impressions: int = 0
    cpc: float = 0.0
    conversions: float = 0.0
    conversion_value: float = 0.0
    roas: float = 0.0


@dataclass(frozen=True)
class SearchConsoleMetrics:
    position: float
    clicks: int = 0
    impressions: int = 0
    ctr: float = 0.0
    url: Optional[str] = None


@dataclass(frozen=True)
class GA4Metrics:
    sessions: int = 0
    revenue: float = 0.0
    conversions: float = 0.0
    engagement_rate: float = 0.0
    bounce_rate: float = 0.0
    average_session_duration: float = 0.0


@dataclass(frozen=True)
class QueryRecord:
    """One search query with whichever channel metrics exist for it."""
    query: str
    google_ads: Optional[GoogleAdsMetrics] = None
    search_console: Optional[SearchConsoleMetrics] = None
    ga4: Optional[GA4Metrics] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QueryRecord":
        """Build from the camelCase shape produced by the data connectors."""
        ads = data.get("googleAds")
        gsc = data.get("searchConsole")
        ga4 = data.get("ga4Metrics")
        return cls(
            query=data["query"],
            google_ads=GoogleAdsMetrics(
                spend=ads.get("spend", 0.0),
                clicks=ads.get("clicks", 0),
                impressions=ads.get("impressions", 0),
                cpc=ads.get("cpc", 0.0),
                conversions=ads.get("conversions", 0.0),
                conversion_value=ads.get("conversionValue", 0.0),
                roas=ads.get("roas", 0.0),
            ) if ads else None,
            search_console=SearchConsoleMetrics(
                position=gsc["position"],
                clicks=gsc.get("clicks", 0),
                impressions=gsc.get("impressions", 0),
                ctr=gsc.get("ctr", 0.0),
                url=gsc.get("url"),
            ) if gsc else None,
            ga4=GA4Metrics(
                sessions=ga4.get("sessions", 0),
                revenue=ga4.get("revenue", 0.0),
                conversions=ga4.get("conversions", 0.0),
                engagement_rate=ga4.get("engagementRate", 0.0),
                bounce_rate=ga4.get("bounceRate", 0.0),
                average_session_duration=ga4.get("averageSessionDuration", 0.0),
            ) if ga4 else None,
        )


# ============================================================================
# SCOUT OUTPUT
# ============================================================================

@dataclass(frozen=True)
class BattlegroundKeyword:
    """Paid-search candidate selected by the Scout."""
    query: str
    priority: Priority
    reason: str
    spend: float
    roas: float
    organic_position: Optional[float]
    conversions: float
    clicks: int = 0
    impressions: int = 0
    impression_share: Optional[float] = None  # Filled by the Researcher
    rule_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "priority": self.priority.value,
            "reason": self.reason,
            "spend": self.spend,
            "roas": self.roas,
            "organicPosition": self.organic_position,
            "impressionShare": self.impression_share,
            "conversions": self.conversions,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "ruleId": self.rule_id,
        }


@dataclass(frozen=True)
class CriticalPage:
    """Organic landing page selected by the Scout."""
    url: str
    priority: Priority
    reason: str
    paid_spend: float
    organic_position: Optional[float]
    bounce_rate: Optional[float]
    impressions: int
    ctr: Optional[float]
    sessions: Optional[int] = None
    rule_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "priority": self.priority.value,
            "reason": self.reason,
            "paidSpend": self.paid_spend,
            "organicPosition": self.organic_position,
            "bounceRate": self.bounce_rate,
            "impressions": self.impressions,
            "ctr": self.ctr,
            "sessions": self.sessions,
            "ruleId": self.rule_id,
        }


@dataclass(frozen=True)
class ScoutSummary:
    total_keywords_analyzed: int
    total_pages_analyzed: int
    high_priority_count: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalKeywordsAnalyzed": self.total_keywords_analyzed,
            "totalPagesAnalyzed": self.total_pages_analyzed,
            "highPriorityCount": self.high_priority_count,
        }


@dataclass(frozen=True)
class ScoutOutput:
    battleground_keywords: Tuple[BattlegroundKeyword, ...]
    critical_pages: Tuple[CriticalPage, ...]
    summary: ScoutSummary
    thresholds_applied: Dict[str, float]
    skill_version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "battlegroundKeywords": [k.to_dict() for k in self.battleground_keywords],
            "criticalPages": [p.to_dict() for p in self.critical_pages],
            "summary": self.summary.to_dict(),
            "thresholdsApplied": dict(self.thresholds_applied),
            "skillVersion": self.skill_version,
        }


# ============================================================================
# RESEARCHER OUTPUT
# ============================================================================

@dataclass(frozen=True)
class CompetitiveMetrics:
    """Auction insights for a keyword or, as a fallback, the whole account.

    Share values are percentages (0-100), as reported by Google Ads.
    """
    data_level: DataLevel
    impression_share: Optional[float] = None
    lost_impression_share_rank: Optional[float] = None
    lost_impression_share_budget: Optional[float] = None
    outranking_share: Optional[float] = None
    overlap_rate: Optional[float] = None
    top_of_page_rate: Optional[float] = None
    position_above_rate: Optional[float] = None
    abs_top_of_page_rate: Optional[float] = None

    _METRIC_NAMES = {
        "impressionShare": "impression_share",
        "lostImpressionShareRank": "lost_impression_share_rank",
        "lostImpressionShareBudget": "lost_impression_share_budget",
        "outrankingShare": "outranking_share",
        "overlapRate": "overlap_rate",
        "topOfPageRate": "top_of_page_rate",
        "positionAboveRate": "position_above_rate",
        "absTopOfPageRate": "abs_top_of_page_rate",
    }

    def get(self, metric: str) -> Optional[float]:
        """Look up a metric by its camelCase or snake_case name."""
        attr = self._METRIC_NAMES.get(metric, metric)
        if attr not in self._METRIC_NAMES.values():
            return None
        return getattr(self, attr)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], data_level: DataLevel) -> "CompetitiveMetrics":
        values = {
            attr: data.get(name, data.get(attr))
            for name, attr in cls._METRIC_NAMES.items()
        }
        return cls(data_level=data_level, **values)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {name: getattr(self, attr) for name, attr in self._METRIC_NAMES.items()}
        result["dataLevel"] = self.data_level.value
        return result


@dataclass(frozen=True)
class PageContent:
    """Facts extracted from a fetched landing page."""
    word_count: int = 0
    title: Optional[str] = None
    h1: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    content_preview: str = ""
    schema_types: Tuple[str, ...] = ()
    schema_errors: Tuple[str, ...] = ()
    content_signals: Mapping[str, bool] = field(default_factory=dict)
    page_type: str = "unknown"
    page_type_confidence: float = 0.0

    @property
    def has_schema(self) -> bool:
        return bool(self.schema_types)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordCount": self.word_count,
            "title": self.title,
            "h1": self.h1,
            "metaDescription": self.meta_description,
            "canonicalUrl": self.canonical_url,
            "contentPreview": self.content_preview,
            "schemaTypes": list(self.schema_types),
            "schemaErrors": list(self.schema_errors),
            "contentSignals": dict(self.content_signals),
            "pageType": self.page_type,
            "pageTypeConfidence": self.page_type_confidence,
        }


@dataclass(frozen=True)
class EnrichedKeyword:
    """A battleground keyword plus competitive data and boost outcome.

    ``priority`` is the post-boost priority; the Scout's original tag stays
    on ``keyword.priority``.
    """
    keyword: BattlegroundKeyword
    priority: Priority
    competitive_metrics: Optional[CompetitiveMetrics] = None
    boost_total: float = 0.0
    boost_reasons: Tuple[str, ...] = ()

    @property
    def query(self) -> str:
        return self.keyword.query

    @property
    def reason(self) -> str:
        return self.keyword.reason

    @property
    def spend(self) -> float:
        return self.keyword.spend

    @property
    def roas(self) -> float:
        return self.keyword.roas

    @property
    def conversions(self) -> float:
        return self.keyword.conversions

    @property
    def organic_position(self) -> Optional[float]:
        return self.keyword.organic_position

    @property
    def impression_share(self) -> Optional[float]:
        if self.competitive_metrics is None:
            return None
        return self.competitive_metrics.impression_share

    @property
    def data_level(self) -> DataLevel:
        if self.competitive_metrics is None:
            return DataLevel.NONE
        return self.competitive_metrics.data_level

    def to_dict(self) -> Dict[str, Any]:
        result = self.keyword.to_dict()
        result["priority"] = self.priority.value
        result["impressionShare"] = self.impression_share
        result["competitiveMetrics"] = (
            self.competitive_metrics.to_dict() if self.competitive_metrics else None
        )
        result["boostTotal"] = self.boost_total
        result["boostReasons"] = list(self.boost_reasons)
        return result


@dataclass(frozen=True)
class EnrichedPage:
    """A critical page plus fetched content (None when the fetch failed)."""
    page: CriticalPage
    content: Optional[PageContent] = None

    @property
    def url(self) -> str:
        return self.page.url

    @property
    def priority(self) -> Priority:
        return self.page.priority

    @property
    def reason(self) -> str:
        return self.page.reason

    @property
    def paid_spend(self) -> float:
        return self.page.paid_spend

    @property
    def impressions(self) -> int:
        return self.page.impressions

    def to_dict(self) -> Dict[str, Any]:
        result = self.page.to_dict()
        result["content"] = self.content.to_dict() if self.content else None
        return result


@dataclass(frozen=True)
class DataQualityMetrics:
    keywords_with_competitive_data: int = 0
    keywords_with_keyword_level_data: int = 0
    pages_with_content: int = 0
    pages_with_schema: int = 0
    pages_fetch_failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "keywordsWithCompetitiveData": self.keywords_with_competitive_data,
            "keywordsWithKeywordLevelData": self.keywords_with_keyword_level_data,
            "pagesWithContent": self.pages_with_content,
            "pagesWithSchema": self.pages_with_schema,
            "pagesFetchFailed": self.pages_fetch_failed,
        }


@dataclass(frozen=True)
class ResearcherOutput:
    enriched_keywords: Tuple[EnrichedKeyword, ...]
    enriched_pages: Tuple[EnrichedPage, ...]
    data_quality: DataQualityMetrics
    skill_version: Optional[str] = None

    def meets_quality_thresholds(self, config: DataQualityConfig) -> bool:
        """Compare the collected data against the skill's minimums (reported, not enforced)."""
        return (
            self.data_quality.keywords_with_competitive_data >= config.min_keywords_with_competitive_data
            and self.data_quality.pages_with_content >= config.min_pages_with_content
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enrichedKeywords": [k.to_dict() for k in self.enriched_keywords],
            "enrichedPages": [p.to_dict() for p in self.enriched_pages],
            "dataQuality": self.data_quality.to_dict(),
            "skillVersion": self.skill_version,
        }


# ============================================================================
# CONSTRAINT RECORDS
# ============================================================================

@dataclass(frozen=True)
class NormalizedAction:
    """Canonical view of one recommendation, used for exclusion matching."""
    id: str
    source: str                     # sem | seo | director
    action_type: str
    text: str                       # lower-cased searchable text
    keywords: Tuple[str, ...] = ()
    metrics: Tuple[str, ...] = ()
    schemas: Tuple[str, ...] = ()
    original: Any = None


@dataclass(frozen=True)
class ConstraintViolation:
    source: str
    action_id: str
    rule_id: str
    rule_description: str
    matched_content: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "source": self.source,
            "actionId": self.action_id,
            "ruleId": self.rule_id,
            "ruleDescription": self.rule_description,
            "matchedContent": self.matched_content,
        }


# ============================================================================
# REPORT RUN (aggregate root)
# ============================================================================

SNAPSHOT_FIELDS = (
    "scout_findings",
    "researcher_data",
    "sem_output",
    "seo_output",
    "director_output",
)


@dataclass
class ReportRun:
    """
    One execution of the pipeline for a client and date range.

    Stage snapshots are attach-once: a re-run creates a new ReportRun.
    """
    client_account_id: str
    business_type: str
    date_range: DateRange
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: ReportStatus = ReportStatus.PENDING
    trigger: str = "manual"
    skill_version: Optional[str] = None
    using_fallback: bool = False
    fallback_from: Optional[str] = None
    scout_findings: Optional[Dict[str, Any]] = None
    researcher_data: Optional[Dict[str, Any]] = None
    sem_output: Optional[Dict[str, Any]] = None
    seo_output: Optional[Dict[str, Any]] = None
    director_output: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (ReportStatus.COMPLETED, ReportStatus.FAILED)

    def transition_to(self, target: ReportStatus) -> None:
        if not validate_report_transition(self.status, target):
            raise InvalidStatusTransitionError(
                f"Report {self.id}: cannot transition {self.status.value} -> {target.value}"
            )
        self.status = target
        if self.is_terminal:
            self.completed_at = datetime.utcnow()

    def attach_snapshot(self, name: str, value: Dict[str, Any]) -> None:
        if name not in SNAPSHOT_FIELDS:
            raise ValueError(f"Unknown snapshot field: {name}")
        if self.is_terminal:
            raise InvalidStatusTransitionError(
                f"Report {self.id} is {self.status.value}; snapshots are frozen"
            )
        if getattr(self, name) is not None:
            raise InvalidStatusTransitionError(
                f"Report {self.id}: snapshot '{name}' is already attached"
            )
        setattr(self, name, value)

    def mark_failed(self, message: str) -> None:
        self.error_message = message or "Unknown error"
        self.transition_to(ReportStatus.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "clientAccountId": self.client_account_id,
            "businessType": self.business_type,
            "dateRange": self.date_range.to_dict(),
            "status": self.status.value,
            "trigger": self.trigger,
            "skillVersion": self.skill_version,
            "usingFallback": self.using_fallback,
            "fallbackFrom": self.fallback_from,
            "scoutFindings": self.scout_findings,
            "researcherData": self.researcher_data,
            "semOutput": self.sem_output,
            "seoOutput": self.seo_output,
            "directorOutput": self.director_output,
            "errorMessage": self.error_message,
            "createdAt": self.created_at.isoformat(),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }
