"""
Interplay Report Orchestrator

Runs one report end to end:

    resolve skill -> load query records -> Scout -> Researcher
        -> (SEM || SEO) -> Director -> output analysis + alerts -> persist

The Report Run moves pending -> researching -> analyzing -> completed, with
each stage snapshot attached once. Any exception marks the run failed with
the original message, is persisted, and is re-raised to the caller.
"""

import asyncio
import time
from typing import Any, Awaitable, Optional, TypeVar

from src.agents.interplay.alerts import check_and_alert_critical_violations, log_constraint_violation_summary
from src.agents.interplay.director_agent import DirectorAgent, DirectorResult
from src.agents.interplay.errors import InsufficientDataError
from src.agents.interplay.metrics import ReportMetricsBuilder
from src.agents.interplay.models import ClientContext, DateRange, ReportRun, ReportStatus
from src.agents.interplay.output_analysis import analyze_output_for_violations
from src.agents.interplay.repository import CompetitiveMetricsSource, QueryDataSource, ReportRepository
from src.agents.interplay.researcher import HttpPageFetcher, PageFetcher, Researcher
from src.agents.interplay.scout import run_scout
from src.agents.interplay.sem_agent import SEMAgent
from src.agents.interplay.seo_agent import SEOAgent
from src.agents.skills.skill_registry import SkillRegistry, get_skill_registry
from src.core.logging import RunContext
from src.providers.base_provider import ModelProvider
from src.providers.provider_factory import ModelProviderFactory
from src.utils.config import settings
from src.utils.http_client_pool import HTTPClientManager
from src.utils.logger.custom_logging import LoggerMixin

T = TypeVar("T")


class InterplayOrchestrator(LoggerMixin):
    """
    Entry point for generating an interplay report.

    Usage:
        orchestrator = InterplayOrchestrator(
            repository=InMemoryReportRepository(),
            query_source=my_query_source,
            competitive_source=my_competitive_source,
        )
        report = await orchestrator.generate_report(
            client_account_id="acct-1",
            business_type="lead-gen",
            date_range=DateRange(date(2026, 9, 1), date(2026, 9, 30)),
        )
    """

    def __init__(
        self,
        repository: ReportRepository,
        query_source: QueryDataSource,
        competitive_source: Optional[CompetitiveMetricsSource] = None,
        provider: Optional[ModelProvider] = None,
        page_fetcher: Optional[PageFetcher] = None,
        registry: Optional[SkillRegistry] = None,
    ):
        super().__init__()
        self.repository = repository
        self.query_source = query_source
        self.competitive_source = competitive_source
        self.page_fetcher = page_fetcher
        self.registry = registry or get_skill_registry()
        self._provider = provider

    @property
    def provider(self) -> ModelProvider:
        """Provider from PROVIDER_DEFAULT / MODEL_DEFAULT unless one was injected."""
        if self._provider is None:
            self._provider = ModelProviderFactory.create_default_provider()
        return self._provider

    # ========================================================================
    # MAIN ENTRY POINT
    # ========================================================================

    async def generate_report(
        self,
        client_account_id: str,
        business_type: Any,
        date_range: DateRange,
        context: Optional[ClientContext] = None,
        trigger: str = "manual",
    ) -> ReportRun:
        requested_type = getattr(business_type, "value", None) or str(business_type)
        report = ReportRun(
            client_account_id=client_account_id,
            business_type=requested_type,
            date_range=date_range,
            trigger=trigger,
        )
        metrics = ReportMetricsBuilder(report.id, client_account_id, requested_type)

        async with RunContext(run_id=report.id):
            self.logger.info(
                f"[ORCHESTRATOR] Report {report.id} started: client={client_account_id} "
                f"business_type={requested_type} range={date_range.start}..{date_range.end}"
            )
            await self.repository.save_report(report)

            owned_client: Optional[HTTPClientManager] = None
            page_fetcher = self.page_fetcher
            if page_fetcher is None:
                owned_client = HTTPClientManager()
                page_fetcher = HttpPageFetcher(owned_client)

            start = time.perf_counter()
            try:
                await self._run_pipeline(report, metrics, date_range, context, page_fetcher)
            except Exception as e:
                self.logger.error(f"[ORCHESTRATOR] Report {report.id} failed: {e}", exc_info=True)
                if not report.is_terminal:
                    report.mark_failed(str(e))
                await self._save_failed_report(report)
                raise
            finally:
                metrics.record_duration("total", int((time.perf_counter() - start) * 1000))
                await self._save_metrics(report.id, metrics)
                if owned_client is not None:
                    await owned_client.close()

            self.logger.info(
                f"[ORCHESTRATOR] Report {report.id} completed: durations={dict(metrics.durations)}"
            )
            return report

    # ========================================================================
    # PIPELINE
    # ========================================================================

    async def _run_pipeline(
        self,
        report: ReportRun,
        metrics: ReportMetricsBuilder,
        date_range: DateRange,
        context: Optional[ClientContext],
        page_fetcher: PageFetcher,
    ) -> None:
        with metrics.time_stage("skill_load"):
            resolution = self.registry.resolve(report.business_type)
        bundle = resolution.bundle
        report.skill_version = bundle.version
        report.using_fallback = resolution.using_fallback
        report.fallback_from = resolution.fallback_from
        metrics.set_skill_info(bundle.version, resolution.using_fallback)
        self.logger.info(
            f"[ORCHESTRATOR] Skill {bundle.business_type.value} v{bundle.version} "
            f"(fallback={resolution.using_fallback})"
        )

        records = await self.query_source.get_query_records(report.client_account_id, date_range)
        if not records:
            raise InsufficientDataError()

        # Scout
        with metrics.time_stage("scout"):
            scout_output = run_scout(records, bundle.scout)
        report.attach_snapshot("scout_findings", scout_output.to_dict())
        report.transition_to(ReportStatus.RESEARCHING)
        await self.repository.save_report(report)

        # Researcher
        researcher = Researcher(self.competitive_source, page_fetcher)
        with metrics.time_stage("researcher"):
            researcher_output = await researcher.run(
                scout_output, bundle.researcher, date_range, report.client_account_id
            )
        report.attach_snapshot("researcher_data", researcher_output.to_dict())
        report.transition_to(ReportStatus.ANALYZING)
        await self.repository.save_report(report)

        # SEM || SEO
        sem_agent = SEMAgent(self.provider)
        seo_agent = SEOAgent(self.provider)
        sem_task = asyncio.create_task(
            self._timed(metrics, "sem", sem_agent.run(researcher_output.enriched_keywords, bundle.sem, context))
        )
        seo_task = asyncio.create_task(
            self._timed(metrics, "seo", seo_agent.run(researcher_output.enriched_pages, bundle.seo, context))
        )
        try:
            sem_output, seo_output = await asyncio.gather(sem_task, seo_task)
        except BaseException:
            # First failure wins; the sibling is cancelled before re-raising
            await self._cancel_tasks(sem_task, seo_task)
            raise
        metrics.set_token_budget(
            sem_agent.last_prompt.budget if sem_agent.last_prompt else None,
            seo_agent.last_prompt.budget if seo_agent.last_prompt else None,
        )
        report.attach_snapshot("sem_output", sem_output.to_dict())
        report.attach_snapshot("seo_output", seo_output.to_dict())

        # Director
        director = DirectorAgent(self.provider)
        with metrics.time_stage("director"):
            result = await director.run(sem_output, seo_output, bundle.director, context)

        await self._analyze_output(report, metrics, result)

        report.attach_snapshot("director_output", result.output.to_dict())
        await self.repository.save_recommendations(
            report.id, report.client_account_id, result.output.unified_recommendations
        )
        report.transition_to(ReportStatus.COMPLETED)
        await self.repository.save_report(report)

    @staticmethod
    async def _timed(metrics: ReportMetricsBuilder, stage: str, awaitable: Awaitable[T]) -> T:
        with metrics.time_stage(stage):
            return await awaitable

    async def _analyze_output(
        self,
        report: ReportRun,
        metrics: ReportMetricsBuilder,
        result: DirectorResult,
    ) -> None:
        violations = result.violations
        metrics.add_constraint_violations(violations)
        if violations:
            log_constraint_violation_summary(violations, report.id)
            await self.repository.save_constraint_violations(report.id, violations, report.skill_version)

        analysis = analyze_output_for_violations(result.output, report.business_type)
        metrics.set_content_analysis(analysis)

        if settings.ALERTS_ENABLED:
            alerts = check_and_alert_critical_violations(analysis, report.business_type, report.id)
            metrics.set_alerts([alert.code for alert in alerts])

    async def _save_metrics(self, report_id: str, metrics: ReportMetricsBuilder) -> None:
        try:
            await self.repository.save_report_metrics(report_id, metrics.build())
        except Exception as e:
            self.logger.warning(f"[ORCHESTRATOR] Failed to save metrics for report {report_id}: {e}")

    async def _save_failed_report(self, report: ReportRun) -> None:
        try:
            await self.repository.save_report(report)
        except Exception as e:
            self.logger.error(f"[ORCHESTRATOR] Failed to persist failed status for report {report.id}: {e}")

    async def _cancel_tasks(self, *tasks: "asyncio.Task[Any]") -> None:
        for task in tasks:
            if not task.done():
                task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                self.logger.debug(f"[ORCHESTRATOR] Agent task ended with {type(e).__name__}: {e}")
