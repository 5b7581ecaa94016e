"""
End-to-end tests for InterplayOrchestrator

All external services are replaced: in-memory repository and data sources,
a canned page fetcher and a mocked model provider.
"""

import asyncio

import pytest

from src.agents.interplay.errors import AgentResponseError, InsufficientDataError
from src.agents.interplay.models import ClientContext, ReportStatus
from src.agents.interplay.orchestrator import InterplayOrchestrator
from src.agents.interplay.repository import InMemoryQueryDataSource, InMemoryReportRepository
from src.agents.skills import get_skill_bundle
from src.prompts.interplay_prompts import (
    DIRECTOR_SYSTEM_PROMPT,
    SEM_SYSTEM_PROMPT,
    SEO_SYSTEM_PROMPT,
)

from .conftest import CLIENT_ID


class RecordingRepository(InMemoryReportRepository):
    """Remembers the status of every save."""

    def __init__(self):
        super().__init__()
        self.statuses = []

    async def save_report(self, report):
        self.statuses.append(report.status)
        await super().save_report(report)


class FailedStatusUnsavableRepository(RecordingRepository):
    """Storage that goes away exactly when the failed status is written."""

    async def save_report(self, report):
        if report.status is ReportStatus.FAILED:
            raise ConnectionError("database unavailable")
        await super().save_report(report)


@pytest.fixture
def recording_repository():
    return RecordingRepository()


@pytest.fixture
def build_orchestrator(recording_repository, query_source, competitive_source, page_fetcher):
    def build(provider, query_source_override=None):
        return InterplayOrchestrator(
            repository=recording_repository,
            query_source=query_source_override or query_source,
            competitive_source=competitive_source,
            provider=provider,
            page_fetcher=page_fetcher,
        )
    return build


# ============================================================================
# SUCCESS PATH
# ============================================================================

class TestSuccessfulRun:
    """Lead-gen report from raw records to persisted output"""

    @pytest.mark.asyncio
    async def test_lead_gen_report(self, build_orchestrator, recording_repository, provider_factory,
                                   sem_response, seo_response, director_response, date_range,
                                   count_stage_calls):
        provider = provider_factory(sem=sem_response, seo=seo_response, director=director_response)
        orchestrator = build_orchestrator(provider)

        report = await orchestrator.generate_report(
            CLIENT_ID, "lead-gen", date_range, context=ClientContext(industry="Plumbing")
        )

        assert report.status is ReportStatus.COMPLETED
        assert report.completed_at is not None
        assert report.error_message is None
        assert report.skill_version == get_skill_bundle("lead-gen").version
        assert report.using_fallback is False

        titles = [r["title"] for r in report.director_output["unifiedRecommendations"]]
        assert titles == ["Speed up the emergency landing page", "Cut wasted clicks on emergency terms"]
        assert len(report.sem_output["semActions"]) == 2
        assert report.scout_findings["summary"]["highPriorityCount"] >= 1
        assert report.researcher_data["dataQuality"]["pagesWithContent"] == 1

        assert count_stage_calls(provider, SEM_SYSTEM_PROMPT) == 1
        assert count_stage_calls(provider, SEO_SYSTEM_PROMPT) == 1
        assert count_stage_calls(provider, DIRECTOR_SYSTEM_PROMPT) == 1

    @pytest.mark.asyncio
    async def test_status_progression(self, build_orchestrator, recording_repository, provider_factory,
                                      sem_response, seo_response, director_response, date_range):
        provider = provider_factory(sem=sem_response, seo=seo_response, director=director_response)

        await build_orchestrator(provider).generate_report(CLIENT_ID, "lead-gen", date_range)

        assert recording_repository.statuses == [
            ReportStatus.PENDING,
            ReportStatus.RESEARCHING,
            ReportStatus.ANALYZING,
            ReportStatus.COMPLETED,
        ]

    @pytest.mark.asyncio
    async def test_violations_and_metrics_persisted(self, build_orchestrator, recording_repository,
                                                    provider_factory, sem_response, seo_response,
                                                    director_response, date_range):
        provider = provider_factory(sem=sem_response, seo=seo_response, director=director_response)

        report = await build_orchestrator(provider).generate_report(CLIENT_ID, "lead-gen", date_range)

        rows = recording_repository.violations[report.id]
        assert [(r["actionId"], r["ruleId"]) for r in rows] == [
            ("sem-1", "metric:roas"),
            ("director-1", "schema:Product"),
        ]
        assert all(r["skillVersion"] == report.skill_version for r in rows)

        metrics = recording_repository.metrics[report.id]
        assert metrics["constraintViolations"] == 2
        assert metrics["violationsByRule"] == {"metric:roas": 1, "schema:Product": 1}
        assert metrics["alerts"] == []
        assert metrics["roasMentions"] == 0
        assert metrics["serializationMode"] == "full"
        assert metrics["totalDurationMs"] is not None
        assert metrics["directorDurationMs"] is not None

    @pytest.mark.asyncio
    async def test_saved_report_matches_returned(self, build_orchestrator, recording_repository,
                                                 provider_factory, sem_response, seo_response,
                                                 director_response, date_range):
        provider = provider_factory(sem=sem_response, seo=seo_response, director=director_response)

        report = await build_orchestrator(provider).generate_report(CLIENT_ID, "lead-gen", date_range)
        saved = await recording_repository.get_report(report.id)

        assert saved.to_dict() == report.to_dict()

    @pytest.mark.asyncio
    async def test_unknown_business_type_uses_fallback(self, build_orchestrator, provider_factory,
                                                       sem_response, seo_response, director_response,
                                                       date_range):
        provider = provider_factory(sem=sem_response, seo=seo_response, director=director_response)

        report = await build_orchestrator(provider).generate_report(CLIENT_ID, "pet-grooming", date_range)

        assert report.status is ReportStatus.COMPLETED
        assert report.business_type == "pet-grooming"
        assert report.using_fallback is True
        assert report.fallback_from == "pet-grooming"
        assert report.skill_version == get_skill_bundle("ecommerce").version

    @pytest.mark.asyncio
    async def test_recommendation_records_saved(self, build_orchestrator, recording_repository,
                                                provider_factory, sem_response, seo_response,
                                                director_response, date_range):
        """Every unified recommendation becomes its own pending record"""
        provider = provider_factory(sem=sem_response, seo=seo_response, director=director_response)

        report = await build_orchestrator(provider).generate_report(CLIENT_ID, "lead-gen", date_range)

        rows = recording_repository.recommendations[report.id]
        assert [(r["title"], r["recommendationType"]) for r in rows] == [
            ("Speed up the emergency landing page", "maintain"),
            ("Cut wasted clicks on emergency terms", "reduce"),
        ]
        assert all(r["clientAccountId"] == CLIENT_ID for r in rows)
        assert all(r["status"] == "pending" and r["confidenceLevel"] == "high" for r in rows)
        assert all(r["source"] == "interplay_report" for r in rows)
        assert rows[1]["actionItems"] == ["Add 'jobs' and 'careers' as negatives"]


# ============================================================================
# FAILURE PATHS
# ============================================================================

class TestFailedRun:
    """Failures are persisted, then re-raised"""

    @pytest.mark.asyncio
    async def test_no_records(self, build_orchestrator, recording_repository, provider_factory, date_range):
        """No metrics for the range fails before any model call"""
        provider = provider_factory()
        orchestrator = build_orchestrator(provider, InMemoryQueryDataSource())

        with pytest.raises(InsufficientDataError):
            await orchestrator.generate_report(CLIENT_ID, "lead-gen", date_range)

        [report] = recording_repository.reports.values()
        assert report.status is ReportStatus.FAILED
        assert "Insufficient data" in report.error_message
        assert ReportStatus.ANALYZING not in recording_repository.statuses
        assert report.scout_findings is None
        provider.generate.assert_not_awaited()
        assert report.id in recording_repository.metrics

    @pytest.mark.asyncio
    async def test_malformed_sem_output(self, build_orchestrator, recording_repository, provider_factory,
                                        seo_response, director_response, date_range, count_stage_calls):
        """A schema-violating SEM answer fails the run and the Director never runs"""
        provider = provider_factory(
            sem={"semActions": ["cut costs", "raise bids"]},
            seo=seo_response,
            director=director_response,
        )

        with pytest.raises(AgentResponseError):
            await build_orchestrator(provider).generate_report(CLIENT_ID, "lead-gen", date_range)

        [report] = recording_repository.reports.values()
        assert report.status is ReportStatus.FAILED
        assert report.error_message.startswith("SEM agent failed")
        assert report.sem_output is None
        assert report.director_output is None
        assert count_stage_calls(provider, DIRECTOR_SYSTEM_PROMPT) == 0

    @pytest.mark.asyncio
    async def test_director_provider_failure(self, build_orchestrator, recording_repository,
                                             provider_factory, sem_response, seo_response, date_range):
        provider = provider_factory(
            sem=sem_response,
            seo=seo_response,
            director=ConnectionError("service unavailable"),
        )

        with pytest.raises(Exception, match="service unavailable"):
            await build_orchestrator(provider).generate_report(CLIENT_ID, "lead-gen", date_range)

        [report] = recording_repository.reports.values()
        assert report.status is ReportStatus.FAILED
        assert report.sem_output is not None
        assert report.director_output is None
        assert recording_repository.statuses[-1] is ReportStatus.FAILED

    @pytest.mark.asyncio
    async def test_failed_agent_cancels_sibling(self, build_orchestrator, recording_repository,
                                                provider_factory, seo_response, director_response,
                                                date_range):
        """A failing SEM stage stops the SEO call instead of leaving it running"""
        provider = provider_factory(sem={"semActions": ["bad"]}, seo=seo_response, director=director_response)
        answer = provider.generate.side_effect
        seo_finished = []

        async def slow_seo(messages, **kwargs):
            if messages[0]["content"] == SEO_SYSTEM_PROMPT:
                await asyncio.sleep(0.3)
                seo_finished.append(True)
            return await answer(messages, **kwargs)

        provider.generate.side_effect = slow_seo

        with pytest.raises(AgentResponseError):
            await build_orchestrator(provider).generate_report(CLIENT_ID, "lead-gen", date_range)

        still_running = [t for t in asyncio.all_tasks() if t is not asyncio.current_task() and not t.done()]
        assert still_running == []

        await asyncio.sleep(0.4)
        assert seo_finished == []
        [report] = recording_repository.reports.values()
        assert report.status is ReportStatus.FAILED
        assert report.seo_output is None
        assert report.id not in recording_repository.recommendations

    @pytest.mark.asyncio
    async def test_unsavable_failed_status_keeps_original_error(self, competitive_source,
                                                                page_fetcher, provider_factory, date_range):
        """The pipeline error is re-raised even when persisting the failure fails"""
        repository = FailedStatusUnsavableRepository()
        orchestrator = InterplayOrchestrator(
            repository=repository,
            query_source=InMemoryQueryDataSource(),
            competitive_source=competitive_source,
            provider=provider_factory(),
            page_fetcher=page_fetcher,
        )

        with pytest.raises(InsufficientDataError):
            await orchestrator.generate_report(CLIENT_ID, "lead-gen", date_range)

        assert repository.statuses == [ReportStatus.PENDING]
        [report_id] = repository.metrics
        assert repository.metrics[report_id]["reportId"] == report_id


# ============================================================================
# REPORT LOOKUP
# ============================================================================

class TestReportLookup:
    """Latest report and existence checks per client"""

    @pytest.mark.asyncio
    async def test_latest_report_is_most_recent_run(self, build_orchestrator, recording_repository,
                                                    provider_factory, sem_response, seo_response,
                                                    director_response, date_range):
        provider = provider_factory(sem=sem_response, seo=seo_response, director=director_response)
        orchestrator = build_orchestrator(provider)

        assert await recording_repository.has_existing_reports(CLIENT_ID) is False
        assert await recording_repository.get_latest_report(CLIENT_ID) is None

        await orchestrator.generate_report(CLIENT_ID, "lead-gen", date_range)
        second = await orchestrator.generate_report(CLIENT_ID, "lead-gen", date_range)

        latest = await recording_repository.get_latest_report(CLIENT_ID)
        assert latest.id == second.id
        assert await recording_repository.has_existing_reports(CLIENT_ID) is True
        assert await recording_repository.has_existing_reports("another-client") is False

    @pytest.mark.asyncio
    async def test_failed_runs_count_as_existing(self, build_orchestrator, recording_repository,
                                                 provider_factory, date_range):
        orchestrator = build_orchestrator(provider_factory(), InMemoryQueryDataSource())

        with pytest.raises(InsufficientDataError):
            await orchestrator.generate_report(CLIENT_ID, "saas", date_range)

        latest = await recording_repository.get_latest_report(CLIENT_ID)
        assert latest.status is ReportStatus.FAILED
        assert await recording_repository.has_existing_reports(CLIENT_ID) is True
