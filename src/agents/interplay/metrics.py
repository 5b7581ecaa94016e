"""
Report Metrics

Per-run observability record: skill resolution, stage durations, token
budget outcome, constraint violations and output-analysis counts. Built
incrementally by the orchestrator and saved through the repository; a failed
save is logged and never fails the report.
"""

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from src.agents.interplay.errors import InterplayError
from src.agents.interplay.models import ConstraintViolation
from src.agents.interplay.output_analysis import OutputAnalysis
from src.prompts.serialization import TokenBudget
from src.utils.logger.custom_logging import LoggerMixin

STAGES = ("skill_load", "scout", "researcher", "sem", "seo", "director", "total")


class ReportMetricsBuilder(LoggerMixin):
    """
    Collects metrics while a report runs.

    Usage:
        metrics = ReportMetricsBuilder(report.id, client_id, "lead-gen")
        with metrics.time_stage("scout"):
            run_scout(...)
        data = metrics.build()
    """

    def __init__(self, report_id: str, client_account_id: str, business_type: str):
        super().__init__()
        self._data: Dict[str, Any] = {
            "reportId": report_id,
            "clientAccountId": client_account_id,
            "businessType": business_type,
            "skillVersion": None,
            "usingFallback": False,
            "constraintViolations": 0,
            "violationsByRule": {},
            "roasMentions": 0,
            "productSchemaRecommended": False,
            "invalidMetricsDetected": [],
            "alerts": [],
            "serializationMode": None,
            "truncationApplied": False,
            "keywordsDropped": 0,
            "pagesDropped": 0,
        }
        self._durations: Dict[str, int] = {}

    # ------------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------------

    def set_skill_info(self, skill_version: str, using_fallback: bool) -> "ReportMetricsBuilder":
        self._data["skillVersion"] = skill_version
        self._data["usingFallback"] = using_fallback
        return self

    def record_duration(self, stage: str, duration_ms: int) -> "ReportMetricsBuilder":
        if stage not in STAGES:
            raise ValueError(f"Unknown stage: {stage}")
        self._durations[stage] = duration_ms
        return self

    @contextmanager
    def time_stage(self, stage: str) -> Iterator[None]:
        """Record the wall-clock duration of the wrapped block, even when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record_duration(stage, int((time.perf_counter() - start) * 1000))

    def set_token_budget(self, *budgets: Optional[TokenBudget]) -> "ReportMetricsBuilder":
        """Merge the SEM and SEO budgets: compact wins, drops are summed."""
        present = [b for b in budgets if b is not None]
        if not present:
            return self
        modes = {b.mode.value for b in present}
        self._data["serializationMode"] = "compact" if "compact" in modes else "full"
        self._data["keywordsDropped"] = sum(b.keywords_dropped for b in present)
        self._data["pagesDropped"] = sum(b.pages_dropped for b in present)
        self._data["truncationApplied"] = any(b.truncation_applied for b in present)
        return self

    def add_constraint_violations(self, violations: Sequence[ConstraintViolation]) -> "ReportMetricsBuilder":
        by_rule: Dict[str, int] = self._data["violationsByRule"]
        for violation in violations:
            by_rule[violation.rule_id] = by_rule.get(violation.rule_id, 0) + 1
        self._data["constraintViolations"] += len(violations)
        return self

    def set_content_analysis(self, analysis: OutputAnalysis) -> "ReportMetricsBuilder":
        self._data["roasMentions"] = analysis.roas_mentions
        self._data["productSchemaRecommended"] = analysis.product_schema_recommended
        self._data["invalidMetricsDetected"] = list(analysis.invalid_metrics)
        return self

    def set_alerts(self, alert_codes: List[str]) -> "ReportMetricsBuilder":
        self._data["alerts"] = list(alert_codes)
        return self

    # ------------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------------

    @property
    def durations(self) -> Mapping[str, int]:
        return dict(self._durations)

    def build(self) -> Dict[str, Any]:
        if not self._data["skillVersion"]:
            raise InterplayError("skillVersion is required to build report metrics")

        data = dict(self._data)
        data["violationsByRule"] = dict(self._data["violationsByRule"])
        for stage in STAGES:
            key = "".join(part.capitalize() if i else part for i, part in enumerate(stage.split("_")))
            data[f"{key}DurationMs"] = self._durations.get(stage)
        return data
