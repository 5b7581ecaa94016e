"""
Interplay Report - Persistence and Data-Source Interfaces

The pipeline talks to storage and to the metrics warehouse only through the
abstract classes below. Production deployments plug in database-backed
implementations; tests and local runs use the in-memory versions.

Interfaces:
- ReportRepository: report runs, recommendation records, constraint
  violations, run metrics
- QueryDataSource: per-query raw metrics for a client and date range
- CompetitiveMetricsSource: auction insights, keyword- or account-level
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from src.agents.interplay.models import (
    CompetitiveMetrics,
    ConstraintViolation,
    DataLevel,
    DateRange,
    QueryRecord,
    ReportRun,
)
from src.agents.interplay.schemas import UnifiedRecommendation
from src.utils.logger.custom_logging import LoggerMixin

# Stored violation content is capped; the validator itself keeps 200 chars
MAX_STORED_VIOLATION_CONTENT = 1000

# Recommendation category -> stored recommendation action
RECOMMENDATION_ACTIONS = {
    "sem": "reduce",
    "seo": "maintain",
    "hybrid": "increase",
}


def build_recommendation_record(
    report_id: str,
    client_account_id: str,
    recommendation: UnifiedRecommendation,
) -> Dict[str, Any]:
    """
    Flatten one unified recommendation into a standalone recommendation row.

    Rows from a report always start as pending with high confidence.
    """
    category = getattr(recommendation.type, "value", recommendation.type)
    return {
        "clientAccountId": client_account_id,
        "reportId": report_id,
        "source": "interplay_report",
        "recommendationType": RECOMMENDATION_ACTIONS.get(category, "maintain"),
        "recommendationCategory": category,
        "confidenceLevel": "high",
        "title": recommendation.title,
        "reasoning": recommendation.description,
        "impactLevel": getattr(recommendation.impact, "value", recommendation.impact),
        "effortLevel": getattr(recommendation.effort, "value", recommendation.effort),
        "actionItems": list(recommendation.action_items),
        "status": "pending",
    }


# ============================================================================
# INTERFACES
# ============================================================================

class ReportRepository(ABC):
    """Storage for report runs and their side records."""

    @abstractmethod
    async def save_report(self, report: ReportRun) -> None:
        """Insert or update a report run (snapshots, status, timestamps)."""
        pass

    @abstractmethod
    async def get_report(self, report_id: str) -> Optional[ReportRun]:
        pass

    @abstractmethod
    async def get_latest_report(self, client_account_id: str) -> Optional[ReportRun]:
        """Most recently created report for the client, in any status."""
        pass

    async def has_existing_reports(self, client_account_id: str) -> bool:
        return await self.get_latest_report(client_account_id) is not None

    @abstractmethod
    async def save_recommendations(
        self,
        report_id: str,
        client_account_id: str,
        recommendations: Sequence[UnifiedRecommendation],
    ) -> None:
        """Store each unified recommendation of a finished report as its own record."""
        pass

    @abstractmethod
    async def save_constraint_violations(
        self,
        report_id: str,
        violations: Sequence[ConstraintViolation],
        skill_version: Optional[str],
    ) -> None:
        pass

    @abstractmethod
    async def save_report_metrics(self, report_id: str, metrics: Dict[str, Any]) -> None:
        pass


class QueryDataSource(ABC):
    """Read access to the unified per-query metrics."""

    @abstractmethod
    async def get_query_records(self, client_account_id: str, date_range: DateRange) -> List[QueryRecord]:
        pass


class CompetitiveMetricsSource(ABC):
    """Read access to auction insights rows for the client's own account."""

    @abstractmethod
    async def get_keyword_metrics(
        self,
        client_account_id: str,
        keyword: str,
        date_range: DateRange,
    ) -> Optional[CompetitiveMetrics]:
        """Keyword-level insights fully inside the date range, or None."""
        pass

    @abstractmethod
    async def get_account_metrics(
        self,
        client_account_id: str,
        date_range: DateRange,
    ) -> Optional[CompetitiveMetrics]:
        """Account-level (keyword-less) insights fully inside the date range, or None."""
        pass


# ============================================================================
# IN-MEMORY IMPLEMENTATIONS
# ============================================================================

class InMemoryReportRepository(ReportRepository, LoggerMixin):
    """Dict-backed repository. Stores deep copies so callers cannot mutate saved state."""

    def __init__(self):
        super().__init__()
        self.reports: Dict[str, ReportRun] = {}
        self.recommendations: Dict[str, List[Dict[str, Any]]] = {}
        self.violations: Dict[str, List[Dict[str, Any]]] = {}
        self.metrics: Dict[str, Dict[str, Any]] = {}
        self.save_count = 0

    async def save_report(self, report: ReportRun) -> None:
        self.reports[report.id] = copy.deepcopy(report)
        self.save_count += 1
        self.logger.debug(f"[REPOSITORY] Saved report {report.id} status={report.status.value}")

    async def get_report(self, report_id: str) -> Optional[ReportRun]:
        report = self.reports.get(report_id)
        return copy.deepcopy(report) if report else None

    async def get_latest_report(self, client_account_id: str) -> Optional[ReportRun]:
        latest: Optional[ReportRun] = None
        for report in self.reports.values():
            if report.client_account_id != client_account_id:
                continue
            # Ties on created_at go to the later save
            if latest is None or report.created_at >= latest.created_at:
                latest = report
        return copy.deepcopy(latest) if latest else None

    async def has_existing_reports(self, client_account_id: str) -> bool:
        return any(r.client_account_id == client_account_id for r in self.reports.values())

    async def save_recommendations(
        self,
        report_id: str,
        client_account_id: str,
        recommendations: Sequence[UnifiedRecommendation],
    ) -> None:
        rows = self.recommendations.setdefault(report_id, [])
        rows.extend(build_recommendation_record(report_id, client_account_id, rec) for rec in recommendations)
        self.logger.debug(f"[REPOSITORY] Saved {len(recommendations)} recommendations for report {report_id}")

    async def save_constraint_violations(
        self,
        report_id: str,
        violations: Sequence[ConstraintViolation],
        skill_version: Optional[str],
    ) -> None:
        rows = self.violations.setdefault(report_id, [])
        for violation in violations:
            row = violation.to_dict()
            row["matchedContent"] = row["matchedContent"][:MAX_STORED_VIOLATION_CONTENT]
            row["skillVersion"] = skill_version
            rows.append(row)

    async def save_report_metrics(self, report_id: str, metrics: Dict[str, Any]) -> None:
        self.metrics[report_id] = dict(metrics)


class InMemoryQueryDataSource(QueryDataSource):
    """Serves fixed records keyed by client id (date range is not filtered)."""

    def __init__(self, records: Optional[Mapping[str, Sequence[QueryRecord]]] = None):
        self._records: Dict[str, List[QueryRecord]] = {
            client: list(items) for client, items in (records or {}).items()
        }

    def add_records(self, client_account_id: str, records: Sequence[QueryRecord]) -> None:
        self._records.setdefault(client_account_id, []).extend(records)

    async def get_query_records(self, client_account_id: str, date_range: DateRange) -> List[QueryRecord]:
        return list(self._records.get(client_account_id, []))


class InMemoryCompetitiveMetricsSource(CompetitiveMetricsSource):
    """
    Auction insights rows held in memory.

    Each row is stored with the date range it covers; a lookup only returns
    rows whose range lies inside the requested report range.
    """

    def __init__(self):
        # (client, keyword or None, row range) -> metrics
        self._rows: List[Tuple[str, Optional[str], DateRange, CompetitiveMetrics]] = []

    def add_keyword_metrics(
        self,
        client_account_id: str,
        keyword: str,
        date_range: DateRange,
        metrics: Mapping[str, Any],
    ) -> None:
        self._rows.append((
            client_account_id,
            keyword,
            date_range,
            CompetitiveMetrics.from_dict(metrics, DataLevel.KEYWORD),
        ))

    def add_account_metrics(
        self,
        client_account_id: str,
        date_range: DateRange,
        metrics: Mapping[str, Any],
    ) -> None:
        self._rows.append((
            client_account_id,
            None,
            date_range,
            CompetitiveMetrics.from_dict(metrics, DataLevel.ACCOUNT),
        ))

    @staticmethod
    def _within(row_range: DateRange, date_range: DateRange) -> bool:
        return row_range.start >= date_range.start and row_range.end <= date_range.end

    async def get_keyword_metrics(
        self,
        client_account_id: str,
        keyword: str,
        date_range: DateRange,
    ) -> Optional[CompetitiveMetrics]:
        for client, row_keyword, row_range, metrics in self._rows:
            if (
                client == client_account_id
                and row_keyword == keyword
                and self._within(row_range, date_range)
            ):
                return metrics
        return None

    async def get_account_metrics(
        self,
        client_account_id: str,
        date_range: DateRange,
    ) -> Optional[CompetitiveMetrics]:
        for client, row_keyword, row_range, metrics in self._rows:
            if client == client_account_id and row_keyword is None and self._within(row_range, date_range):
                return metrics
        return None
