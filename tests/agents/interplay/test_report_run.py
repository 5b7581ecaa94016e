"""
Unit tests for the Report Run aggregate and its stored side records

Status machine, attach-once snapshots, frozen terminal states and the
recommendation rows built from a finished report.
"""

from datetime import datetime

import pytest

from src.agents.interplay.errors import InvalidStatusTransitionError
from src.agents.interplay.models import ReportRun, ReportStatus
from src.agents.interplay.repository import InMemoryReportRepository, build_recommendation_record
from src.agents.interplay.schemas import UnifiedRecommendation

from .conftest import CLIENT_ID


@pytest.fixture
def report(date_range):
    return ReportRun(client_account_id=CLIENT_ID, business_type="lead-gen", date_range=date_range)


# ============================================================================
# STATUS MACHINE
# ============================================================================

class TestTransitions:
    """pending -> researching -> analyzing -> completed, failed from any live state"""

    def test_happy_path(self, report):
        for status in (ReportStatus.RESEARCHING, ReportStatus.ANALYZING, ReportStatus.COMPLETED):
            report.transition_to(status)

        assert report.status is ReportStatus.COMPLETED
        assert report.is_terminal
        assert report.completed_at is not None

    def test_skipping_a_stage_raises(self, report):
        with pytest.raises(InvalidStatusTransitionError):
            report.transition_to(ReportStatus.ANALYZING)
        assert report.status is ReportStatus.PENDING

    @pytest.mark.parametrize("terminal", [ReportStatus.COMPLETED, ReportStatus.FAILED])
    def test_terminal_states_are_final(self, report, terminal):
        if terminal is ReportStatus.COMPLETED:
            for status in (ReportStatus.RESEARCHING, ReportStatus.ANALYZING, ReportStatus.COMPLETED):
                report.transition_to(status)
        else:
            report.mark_failed("boom")

        with pytest.raises(InvalidStatusTransitionError):
            report.transition_to(ReportStatus.FAILED)
        with pytest.raises(InvalidStatusTransitionError):
            report.transition_to(ReportStatus.RESEARCHING)

    def test_mark_failed_keeps_message(self, report):
        report.transition_to(ReportStatus.RESEARCHING)
        report.mark_failed("SEM agent failed: Invalid JSON")

        assert report.status is ReportStatus.FAILED
        assert report.error_message == "SEM agent failed: Invalid JSON"

    def test_mark_failed_without_message(self, report):
        report.mark_failed("")
        assert report.error_message == "Unknown error"


# ============================================================================
# SNAPSHOTS
# ============================================================================

class TestSnapshots:
    """Stage snapshots attach once and freeze with the run"""

    def test_attach_once(self, report):
        report.attach_snapshot("scout_findings", {"summary": {"highPriorityCount": 1}})

        with pytest.raises(InvalidStatusTransitionError, match="already attached"):
            report.attach_snapshot("scout_findings", {"summary": {"highPriorityCount": 2}})
        assert report.scout_findings == {"summary": {"highPriorityCount": 1}}

    def test_attach_after_completed(self, report):
        for status in (ReportStatus.RESEARCHING, ReportStatus.ANALYZING, ReportStatus.COMPLETED):
            report.transition_to(status)

        with pytest.raises(InvalidStatusTransitionError, match="frozen"):
            report.attach_snapshot("director_output", {"unifiedRecommendations": []})
        assert report.director_output is None

    def test_attach_after_failed(self, report):
        report.mark_failed("boom")
        with pytest.raises(InvalidStatusTransitionError):
            report.attach_snapshot("sem_output", {"semActions": []})

    def test_unknown_snapshot_name(self, report):
        with pytest.raises(ValueError):
            report.attach_snapshot("raw_records", {})


# ============================================================================
# STORED RECORDS
# ============================================================================

class TestStoredRecords:
    """Recommendation rows and per-client lookups in the in-memory repository"""

    @pytest.mark.parametrize("category,action", [
        ("sem", "reduce"),
        ("seo", "maintain"),
        ("hybrid", "increase"),
    ])
    def test_recommendation_record(self, category, action):
        recommendation = UnifiedRecommendation(
            title="Align landing page and ad copy",
            description="Match the paid headline promise on the landing page.",
            type=category,
            impact="high",
            effort="low",
            action_items=["Rewrite the hero headline"],
        )

        row = build_recommendation_record("report-1", CLIENT_ID, recommendation)

        assert row["recommendationType"] == action
        assert row["recommendationCategory"] == category
        assert row["reasoning"] == "Match the paid headline promise on the landing page."
        assert row["impactLevel"] == "high"
        assert row["effortLevel"] == "low"
        assert row["reportId"] == "report-1"

    @pytest.mark.asyncio
    async def test_latest_report_by_creation_time(self, date_range):
        repository = InMemoryReportRepository()
        newer = ReportRun(CLIENT_ID, "saas", date_range, created_at=datetime(2026, 10, 2))
        older = ReportRun(CLIENT_ID, "saas", date_range, created_at=datetime(2026, 10, 1))
        other = ReportRun("other-client", "saas", date_range, created_at=datetime(2026, 10, 3))
        for run in (newer, older, other):
            await repository.save_report(run)

        latest = await repository.get_latest_report(CLIENT_ID)

        assert latest.id == newer.id
        assert await repository.get_latest_report("missing-client") is None
