"""
Unit tests for output analysis, alerts and report metrics
"""

import pytest

from src.agents.interplay.alerts import (
    AlertSeverity,
    check_and_alert_critical_violations,
    log_constraint_violation_summary,
)
from src.agents.interplay.errors import InterplayError
from src.agents.interplay.metrics import ReportMetricsBuilder
from src.agents.interplay.models import ConstraintViolation
from src.agents.interplay.output_analysis import (
    OutputAnalysis,
    analyze_output_for_violations,
    count_metric_mentions,
)
from src.agents.interplay.schemas import DirectorOutput
from src.prompts.serialization import SerializationMode, TokenBudget


def director_output(summary, *descriptions):
    return DirectorOutput.model_validate({
        "executiveSummary": {"summary": summary, "keyHighlights": ["Highlight one"]},
        "unifiedRecommendations": [
            {
                "title": f"Recommendation {i}",
                "description": description,
                "type": "hybrid",
                "impact": "high",
                "effort": "low",
                "actionItems": ["Do the first thing"],
            }
            for i, description in enumerate(descriptions)
        ],
    })


def violation(rule_id, action_id="sem-0"):
    return ConstraintViolation(
        source=action_id.split("-")[0],
        action_id=action_id,
        rule_id=rule_id,
        rule_description="",
        matched_content="",
    )


# ============================================================================
# OUTPUT ANALYSIS
# ============================================================================

class TestOutputAnalysis:
    """Whole-output sweep for forbidden metrics and schema"""

    def test_clean_lead_gen_output(self, director_response):
        director_response["unifiedRecommendations"].pop(1)
        output = DirectorOutput.model_validate(director_response)

        analysis = analyze_output_for_violations(output, "lead-gen")

        assert not analysis.has_violations
        assert analysis.to_dict() == {"roasMentions": 0, "productSchemaRecommended": False, "invalidMetrics": []}

    def test_roas_and_revenue_counted(self):
        output = director_output(
            "Improve ROAS across campaigns and grow revenue this quarter.",
            "Shift budget to the campaigns with the best return on ad spend.",
        )

        analysis = analyze_output_for_violations(output, "lead-gen")

        assert analysis.roas_mentions == 2
        assert analysis.invalid_metrics == ["roas", "revenue"]

    def test_product_schema_phrases(self):
        output = director_output(
            "The service pages need better search presentation overall.",
            "Add detailed Product schema to every service page.",
        )
        assert analyze_output_for_violations(output, "lead-gen").product_schema_recommended

    def test_ecommerce_has_no_invalid_metrics(self):
        output = director_output("Improve ROAS on shopping campaigns this month.")
        analysis = analyze_output_for_violations(output, "ecommerce")
        assert analysis.roas_mentions == 1
        assert analysis.invalid_metrics == []

    def test_unknown_business_type_generic_only(self):
        output = director_output("Improve ROAS and revenue for the account.")
        analysis = analyze_output_for_violations(output, "pet-grooming")
        assert analysis.roas_mentions == 1
        assert analysis.invalid_metrics == []

    def test_count_metric_mentions(self):
        counts = count_metric_mentions("CPL fell while cost per lead targets and MRR held")
        assert counts["cpl"] == 2
        assert counts["mrr"] == 1
        assert counts["roas"] == 0


# ============================================================================
# ALERTS
# ============================================================================

class TestAlerts:
    """Business-type specific alert codes and severities"""

    def test_lead_gen_leaks_are_critical(self):
        analysis = OutputAnalysis(roas_mentions=2, product_schema_recommended=True, invalid_metrics=["roas", "aov"])

        alerts = check_and_alert_critical_violations(analysis, "lead-gen", "report-1")

        assert [a.code for a in alerts] == [
            "LEADGEN_ROAS_LEAK",
            "LEADGEN_PRODUCT_SCHEMA_LEAK",
            "LEADGEN_INVALID_METRICS",
        ]
        assert [a.severity for a in alerts] == [
            AlertSeverity.CRITICAL, AlertSeverity.CRITICAL, AlertSeverity.WARNING,
        ]
        assert alerts[0].context["reportId"] == "report-1"
        assert alerts[2].context["invalidMetrics"] == ["aov"]

    def test_saas_warnings(self):
        analysis = OutputAnalysis(roas_mentions=1, product_schema_recommended=True, invalid_metrics=["roas"])
        alerts = check_and_alert_critical_violations(analysis, "saas", "report-2")

        assert [a.code for a in alerts] == ["SAAS_ROAS_WARNING", "SAAS_PRODUCT_SCHEMA_WARNING"]
        assert all(a.severity is AlertSeverity.WARNING for a in alerts)

    def test_local_invalid_metrics(self):
        analysis = OutputAnalysis(invalid_metrics=["mrr"])
        alerts = check_and_alert_critical_violations(analysis, "local", "report-3")
        assert [a.code for a in alerts] == ["LOCAL_INVALID_METRICS"]

    def test_generic_fallback_when_nothing_specific_fired(self):
        analysis = OutputAnalysis(invalid_metrics=["ltv"])
        alerts = check_and_alert_critical_violations(analysis, "ecommerce", "report-4")
        assert [a.code for a in alerts] == ["INVALID_METRICS_DETECTED"]

    def test_clean_analysis_no_alerts(self):
        assert check_and_alert_critical_violations(OutputAnalysis(), "lead-gen", "report-5") == []

    def test_violation_summary_groups_by_rule(self):
        violations = [violation("metric:roas"), violation("metric:roas", "seo-1"), violation("schema:Product")]
        assert log_constraint_violation_summary(violations, "report-6") == {"metric:roas": 2, "schema:Product": 1}
        assert log_constraint_violation_summary([], "report-6") == {}


# ============================================================================
# METRICS
# ============================================================================

class TestReportMetrics:
    """Incremental metrics record"""

    def test_build_requires_skill_version(self):
        with pytest.raises(InterplayError):
            ReportMetricsBuilder("r1", "acct", "lead-gen").build()

    def test_full_record(self):
        builder = ReportMetricsBuilder("r1", "acct", "lead-gen")
        builder.set_skill_info("1.0.0", using_fallback=False)
        builder.record_duration("skill_load", 3).record_duration("scout", 12)
        builder.add_constraint_violations([violation("metric:roas"), violation("schema:Product")])
        builder.add_constraint_violations([violation("metric:roas", "director-0")])
        builder.set_content_analysis(OutputAnalysis(roas_mentions=1, invalid_metrics=["roas"]))
        builder.set_alerts(["LEADGEN_ROAS_LEAK"])

        data = builder.build()

        assert data["reportId"] == "r1"
        assert data["skillVersion"] == "1.0.0"
        assert data["constraintViolations"] == 3
        assert data["violationsByRule"] == {"metric:roas": 2, "schema:Product": 1}
        assert data["skillLoadDurationMs"] == 3
        assert data["scoutDurationMs"] == 12
        assert data["directorDurationMs"] is None
        assert data["roasMentions"] == 1
        assert data["alerts"] == ["LEADGEN_ROAS_LEAK"]

    def test_token_budget_merge(self):
        sem_budget = TokenBudget(SerializationMode.COMPACT, 10, 15, 0, 0)
        seo_budget = TokenBudget(SerializationMode.FULL, 0, 0, 4, 0)

        data = (
            ReportMetricsBuilder("r1", "acct", "ecommerce")
            .set_skill_info("1.0.0", False)
            .set_token_budget(sem_budget, seo_budget, None)
            .build()
        )

        assert data["serializationMode"] == "compact"
        assert data["keywordsDropped"] == 15
        assert data["pagesDropped"] == 0
        assert data["truncationApplied"] is True

    def test_time_stage_records_on_error(self):
        builder = ReportMetricsBuilder("r1", "acct", "saas")
        with pytest.raises(RuntimeError):
            with builder.time_stage("sem"):
                raise RuntimeError("boom")
        assert "sem" in builder.durations

    def test_unknown_stage_rejected(self):
        with pytest.raises(ValueError):
            ReportMetricsBuilder("r1", "acct", "saas").record_duration("publish", 1)
