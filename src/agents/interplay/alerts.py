"""
Skill Alerts

Turns an OutputAnalysis into alerts for the business type. An alert means a
skill constraint failed to keep inappropriate content out of the final
report, so each one should trigger a review of the upstream prompts.
Alerts are logged on the "alert" category and returned to the caller.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence, Union

from src.agents.interplay.models import ConstraintViolation
from src.agents.interplay.output_analysis import OutputAnalysis
from src.agents.skills.skill_base import BusinessType
from src.utils.logger.custom_logging import get_logger

alert_logger = get_logger("interplay.alerts", category="alert")


class AlertSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Alert:
    code: str
    severity: AlertSeverity
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "context": dict(self.context),
        }


def _emit(alerts: List[Alert], alert: Alert) -> None:
    alerts.append(alert)
    if alert.severity is AlertSeverity.CRITICAL:
        alert_logger.error(f"[ALERT] {alert.code}: {alert.message} {alert.context}")
    else:
        alert_logger.warning(f"[ALERT] {alert.code}: {alert.message} {alert.context}")


def check_and_alert_critical_violations(
    analysis: OutputAnalysis,
    business_type: Union[BusinessType, str],
    report_id: str,
) -> List[Alert]:
    """Raise alerts for the violations that matter to this business type."""
    alerts: List[Alert] = []
    resolved = BusinessType.from_value(business_type)
    base_context = {"reportId": report_id, "businessType": str(getattr(business_type, "value", business_type))}

    if resolved is BusinessType.LEAD_GEN:
        if analysis.roas_mentions > 0:
            _emit(alerts, Alert(
                code="LEADGEN_ROAS_LEAK",
                severity=AlertSeverity.CRITICAL,
                message="ROAS mentioned in lead-gen report - skill constraints failed",
                context={**base_context, "roasMentions": analysis.roas_mentions},
            ))
        if analysis.product_schema_recommended:
            _emit(alerts, Alert(
                code="LEADGEN_PRODUCT_SCHEMA_LEAK",
                severity=AlertSeverity.CRITICAL,
                message="Product schema recommended in lead-gen report - skill constraints failed",
                context=dict(base_context),
            ))
        other_metrics = [m for m in analysis.invalid_metrics if m != "roas"]
        if other_metrics:
            _emit(alerts, Alert(
                code="LEADGEN_INVALID_METRICS",
                severity=AlertSeverity.WARNING,
                message="Invalid metrics detected in lead-gen report",
                context={**base_context, "invalidMetrics": other_metrics},
            ))

    elif resolved is BusinessType.SAAS:
        if analysis.roas_mentions > 0:
            _emit(alerts, Alert(
                code="SAAS_ROAS_WARNING",
                severity=AlertSeverity.WARNING,
                message="ROAS mentioned in SaaS report - may not be applicable",
                context={**base_context, "roasMentions": analysis.roas_mentions},
            ))
        if analysis.product_schema_recommended:
            _emit(alerts, Alert(
                code="SAAS_PRODUCT_SCHEMA_WARNING",
                severity=AlertSeverity.WARNING,
                message="Product schema recommended in SaaS report - verify appropriateness",
                context=dict(base_context),
            ))

    elif resolved is BusinessType.LOCAL:
        if analysis.invalid_metrics:
            _emit(alerts, Alert(
                code="LOCAL_INVALID_METRICS",
                severity=AlertSeverity.WARNING,
                message="SaaS-specific metrics detected in local business report",
                context={**base_context, "invalidMetrics": list(analysis.invalid_metrics)},
            ))

    # Generic fallback when no business-specific alert fired
    if analysis.invalid_metrics and not alerts:
        _emit(alerts, Alert(
            code="INVALID_METRICS_DETECTED",
            severity=AlertSeverity.WARNING,
            message="Invalid metrics detected in report output",
            context={**base_context, "invalidMetrics": list(analysis.invalid_metrics)},
        ))

    if alerts:
        critical = sum(1 for a in alerts if a.severity is AlertSeverity.CRITICAL)
        alert_logger.info(
            f"[ALERT] Check complete for report {report_id}: {len(alerts)} alert(s), {critical} critical"
        )

    return alerts


def log_constraint_violation_summary(
    violations: Sequence[ConstraintViolation],
    report_id: str,
) -> Dict[str, int]:
    """Log violation counts grouped by rule id; returns the grouping."""
    by_rule = dict(Counter(v.rule_id for v in violations))
    if by_rule:
        alert_logger.info(
            f"[ALERT] Constraint violation summary for report {report_id}: "
            f"total={len(violations)} by_rule={by_rule}"
        )
    return by_rule
