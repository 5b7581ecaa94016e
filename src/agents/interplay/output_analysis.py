"""
Output Analysis - final sweep over the Director output

Independent of per-action constraint validation: the whole serialized output
(executive summary plus every recommendation) is scanned for forbidden
metrics and Product schema phrasing. Observability only; the output is never
modified.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Union

from src.agents.interplay.schemas import DirectorOutput
from src.agents.skills.skill_base import BusinessType

logger = logging.getLogger(__name__)

METRIC_PATTERNS: Dict[str, re.Pattern] = {
    "roas": re.compile(r"\broas\b|return on ad spend", re.I),
    "revenue": re.compile(r"\brevenue\b|\bearnings\b|\bsales\s+revenue\b", re.I),
    "aov": re.compile(r"\baov\b|average order value", re.I),
    "ltv": re.compile(r"\bltv\b|lifetime value|customer lifetime", re.I),
    "mrr": re.compile(r"\bmrr\b|monthly recurring revenue", re.I),
    "arr": re.compile(r"\barr\b|annual recurring revenue", re.I),
    "cpl": re.compile(r"\bcpl\b|cost per lead", re.I),
}

PRODUCT_SCHEMA_PATTERNS = (
    re.compile(r"\badd\s+(?:\w+\s+)*product\s+schema", re.I),
    re.compile(r"\bimplement\s+(?:\w+\s+)*product\s+schema", re.I),
    re.compile(r"\bmissing\s+(?:\w+\s+)*product\s+schema", re.I),
    re.compile(r"\brecommend\s+(?:\w+\s+)*product\s+schema", re.I),
    re.compile(r"\bproduct\s+structured\s+data", re.I),
    re.compile(r"\bschema\.org/product", re.I),
)

INVALID_METRICS_BY_BUSINESS_TYPE: Dict[BusinessType, List[str]] = {
    BusinessType.LEAD_GEN: ["roas", "revenue", "aov", "ltv"],
    BusinessType.SAAS: ["roas", "aov"],
    BusinessType.ECOMMERCE: [],
    BusinessType.LOCAL: ["mrr", "arr"],
}


@dataclass(frozen=True)
class OutputAnalysis:
    roas_mentions: int = 0
    product_schema_recommended: bool = False
    invalid_metrics: List[str] = field(default_factory=list)

    @property
    def has_violations(self) -> bool:
        return self.roas_mentions > 0 or self.product_schema_recommended or bool(self.invalid_metrics)

    def to_dict(self) -> Dict[str, object]:
        return {
            "roasMentions": self.roas_mentions,
            "productSchemaRecommended": self.product_schema_recommended,
            "invalidMetrics": list(self.invalid_metrics),
        }


def serialize_output_to_text(output: DirectorOutput) -> str:
    parts: List[str] = [output.executive_summary.summary, *output.executive_summary.key_highlights]
    for rec in output.unified_recommendations:
        parts.append(rec.title)
        parts.append(rec.description)
        parts.extend(rec.action_items)
    return " ".join(parts).lower()


def count_metric_mentions(text_or_output: Union[str, DirectorOutput]) -> Dict[str, int]:
    """Occurrences of each tracked metric in a text or a Director output."""
    if isinstance(text_or_output, DirectorOutput):
        text = serialize_output_to_text(text_or_output)
    else:
        text = text_or_output.lower()
    return {metric: len(pattern.findall(text)) for metric, pattern in METRIC_PATTERNS.items()}


def detect_invalid_metrics(text: str, business_type: BusinessType) -> List[str]:
    return [
        metric
        for metric in INVALID_METRICS_BY_BUSINESS_TYPE.get(business_type, [])
        if METRIC_PATTERNS[metric].search(text)
    ]


def analyze_output_for_violations(
    output: DirectorOutput,
    business_type: Union[BusinessType, str],
) -> OutputAnalysis:
    """Scan the final Director output. Unknown business types only get the generic checks."""
    text = serialize_output_to_text(output)
    resolved = BusinessType.from_value(business_type)

    analysis = OutputAnalysis(
        roas_mentions=len(METRIC_PATTERNS["roas"].findall(text)),
        product_schema_recommended=any(p.search(text) for p in PRODUCT_SCHEMA_PATTERNS),
        invalid_metrics=detect_invalid_metrics(text, resolved) if resolved else [],
    )

    if analysis.has_violations:
        logger.info(
            f"[OUTPUT_ANALYSIS] business_type={business_type} roas_mentions={analysis.roas_mentions} "
            f"product_schema={analysis.product_schema_recommended} invalid_metrics={analysis.invalid_metrics}"
        )
    return analysis
