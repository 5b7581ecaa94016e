"""
Scout - Rule-Based Data Triage (no LLM calls)

Classifies raw per-query records into priority-tagged candidates:
- SEM track: battleground keywords (records with Google Ads data)
- SEO track: critical pages (records with a Search Console landing URL)

Rule-driven mode evaluates the skill's declarative PriorityRules in order
(first enabled match wins). When a skill declares no rules for a track, the
fixed default predicates below apply, using the same thresholds.

The Scout is a pure function: identical records and skill produce identical
output.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.agents.interplay.models import (
    BattlegroundKeyword,
    CriticalPage,
    Priority,
    QueryRecord,
    ScoutOutput,
    ScoutSummary,
)
from src.agents.skills.skill_base import (
    PriorityRule,
    ScoutLimits,
    ScoutSkillDefinition,
    ScoutThresholds,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS = ScoutThresholds()
DEFAULT_LIMITS = ScoutLimits()

# Fixed values used by the default (rule-less) predicates
LOW_ORGANIC_POSITION = 10
HIGH_TRAFFIC_IMPRESSIONS = 1000
VERY_HIGH_IMPRESSIONS = 5000
VERY_HIGH_BOUNCE_RATE = 0.8
VERY_LOW_CTR = 0.01
MEANINGFUL_PAID_SPEND = 50
GROWTH_MIN_CONVERSIONS = 5

_WHITESPACE_RE = re.compile(r"\s+")

# (priority, reason code, matching rule id)
Classification = Tuple[Priority, str, Optional[str]]


def normalize_query(query: str) -> str:
    """Dedup key for keyword candidates."""
    return _WHITESPACE_RE.sub(" ", query.strip().lower())


# ============================================================================
# METRIC VIEWS
# ============================================================================

def keyword_metrics(record: QueryRecord) -> Dict[str, Optional[float]]:
    """Fields available to keyword rule conditions."""
    ads = record.google_ads
    gsc = record.search_console
    return {
        "spend": ads.spend,
        "roas": ads.roas,
        "conversions": ads.conversions,
        "clicks": ads.clicks,
        "impressions": ads.impressions,
        "cpc": ads.cpc,
        "conversion_value": ads.conversion_value,
        "cost_per_conversion": ads.spend / ads.conversions if ads.conversions > 0 else None,
        "ctr": ads.clicks / ads.impressions if ads.impressions > 0 else None,
        "organic_position": gsc.position if gsc else None,
    }


def page_metrics(record: QueryRecord) -> Dict[str, Optional[float]]:
    """Fields available to page rule conditions."""
    gsc = record.search_console
    ga4 = record.ga4
    return {
        "paid_spend": record.google_ads.spend if record.google_ads else 0.0,
        "organic_position": gsc.position,
        "impressions": gsc.impressions,
        "ctr": gsc.ctr,
        "bounce_rate": ga4.bounce_rate if ga4 else None,
        "sessions": ga4.sessions if ga4 else None,
        "engagement_rate": ga4.engagement_rate if ga4 else None,
    }


# ============================================================================
# RULE EVALUATION
# ============================================================================

def evaluate_rules(
    rules: Sequence[PriorityRule],
    metrics: Dict[str, Optional[float]],
    thresholds: ScoutThresholds,
) -> Optional[Classification]:
    """First enabled rule whose conditions all hold, as (priority, reason, rule_id)."""
    for rule in rules:
        if rule.matches(metrics, thresholds):
            return Priority.from_rule_priority(rule.priority), rule.reason_code, rule.id
    return None


def _tiered_priority(is_very_bad: bool, has_high_impact: bool) -> Priority:
    if is_very_bad and has_high_impact:
        return Priority.HIGH
    if is_very_bad or has_high_impact:
        return Priority.MEDIUM
    return Priority.LOW


def default_keyword_rules(
    metrics: Dict[str, Optional[float]],
    thresholds: ScoutThresholds,
) -> Optional[Classification]:
    spend = metrics["spend"]
    roas = metrics["roas"]
    conversions = metrics["conversions"]
    position = metrics["organic_position"]

    if spend > thresholds.high_spend_threshold and roas < thresholds.low_roas_threshold:
        return Priority.HIGH, "high_spend_low_roas", None

    if (
        position is not None
        and position <= thresholds.cannibalization_position
        and spend > thresholds.high_spend_threshold * 0.5
    ):
        return Priority.HIGH, "cannibalization_risk", None

    if conversions > GROWTH_MIN_CONVERSIONS and spend > 0 and roas >= thresholds.low_roas_threshold:
        return Priority.MEDIUM, "growth_potential", None

    if spend > thresholds.high_spend_threshold * 0.75:
        return Priority.LOW, "competitive_pressure", None

    return None


def default_page_rules(
    metrics: Dict[str, Optional[float]],
    thresholds: ScoutThresholds,
) -> Optional[Classification]:
    paid_spend = metrics["paid_spend"]
    position = metrics["organic_position"]
    bounce_rate = metrics["bounce_rate"]
    impressions = metrics["impressions"]
    ctr = metrics["ctr"]

    if paid_spend > thresholds.high_spend_threshold and (position is None or position > LOW_ORGANIC_POSITION):
        return Priority.HIGH, "high_spend_low_organic", None

    if (
        impressions > HIGH_TRAFFIC_IMPRESSIONS
        and bounce_rate is not None
        and bounce_rate > thresholds.high_bounce_rate_threshold
    ):
        priority = _tiered_priority(bounce_rate > VERY_HIGH_BOUNCE_RATE, paid_spend > MEANINGFUL_PAID_SPEND)
        return priority, "high_traffic_high_bounce", None

    if impressions > HIGH_TRAFFIC_IMPRESSIONS and ctr is not None and ctr < thresholds.low_ctr_threshold:
        priority = _tiered_priority(ctr < VERY_LOW_CTR, impressions > VERY_HIGH_IMPRESSIONS)
        return priority, "high_impressions_low_ctr", None

    return None


# ============================================================================
# TRACKS
# ============================================================================

def identify_battleground_keywords(
    records: Iterable[QueryRecord],
    thresholds: ScoutThresholds,
    rules: Sequence[PriorityRule],
) -> List[BattlegroundKeyword]:
    keywords: List[BattlegroundKeyword] = []

    for record in records:
        ads = record.google_ads
        if ads is None:
            continue
        min_impressions = thresholds.min_impressions_for_analysis
        if min_impressions > 0 and ads.impressions < min_impressions:
            continue

        metrics = keyword_metrics(record)
        if rules:
            result = evaluate_rules(rules, metrics, thresholds)
        else:
            result = default_keyword_rules(metrics, thresholds)
        if result is None:
            continue

        priority, reason, rule_id = result
        keywords.append(BattlegroundKeyword(
            query=record.query,
            priority=priority,
            reason=reason,
            spend=ads.spend,
            roas=ads.roas,
            organic_position=metrics["organic_position"],
            conversions=ads.conversions,
            clicks=ads.clicks,
            impressions=ads.impressions,
            rule_id=rule_id,
        ))

    return keywords


def identify_critical_pages(
    records: Iterable[QueryRecord],
    thresholds: ScoutThresholds,
    rules: Sequence[PriorityRule],
) -> List[CriticalPage]:
    pages: List[CriticalPage] = []

    for record in records:
        gsc = record.search_console
        if gsc is None or not gsc.url:
            continue

        metrics = page_metrics(record)
        if rules:
            result = evaluate_rules(rules, metrics, thresholds)
        else:
            result = default_page_rules(metrics, thresholds)
        if result is None:
            continue

        priority, reason, rule_id = result
        pages.append(CriticalPage(
            url=gsc.url,
            priority=priority,
            reason=reason,
            paid_spend=metrics["paid_spend"],
            organic_position=gsc.position,
            bounce_rate=metrics["bounce_rate"],
            impressions=gsc.impressions,
            ctr=gsc.ctr,
            sessions=metrics["sessions"],
            rule_id=rule_id,
        ))

    return pages


# ============================================================================
# DEDUPLICATION / LIMITS
# ============================================================================

def _beats(candidate_rank: int, candidate_spend: float, existing_rank: int, existing_spend: float) -> bool:
    if candidate_rank != existing_rank:
        return candidate_rank > existing_rank
    return candidate_spend > existing_spend


def deduplicate_keywords(keywords: Sequence[BattlegroundKeyword], limit: int) -> List[BattlegroundKeyword]:
    """One entry per normalized query: higher priority wins, then higher spend."""
    best: Dict[str, BattlegroundKeyword] = {}
    for kw in keywords:
        key = normalize_query(kw.query)
        existing = best.get(key)
        if existing is None or _beats(kw.priority.rank, kw.spend, existing.priority.rank, existing.spend):
            best[key] = kw

    ranked = sorted(best.values(), key=lambda k: (-k.priority.rank, -k.spend))
    return ranked[:limit]


def deduplicate_pages(pages: Sequence[CriticalPage], limit: int) -> List[CriticalPage]:
    """One entry per URL: higher priority wins, then higher paid spend."""
    best: Dict[str, CriticalPage] = {}
    for page in pages:
        existing = best.get(page.url)
        if existing is None or _beats(page.priority.rank, page.paid_spend, existing.priority.rank, existing.paid_spend):
            best[page.url] = page

    ranked = sorted(best.values(), key=lambda p: (-p.priority.rank, -p.paid_spend))
    return ranked[:limit]


# ============================================================================
# ENTRY POINT
# ============================================================================

def run_scout(records: Sequence[QueryRecord], skill: Optional[ScoutSkillDefinition] = None) -> ScoutOutput:
    """
    Triage raw query records into battleground keywords and critical pages.

    Args:
        records: Per-query metrics for the report date range
        skill: Scout skill of the resolved bundle (defaults apply when None)

    Returns:
        ScoutOutput with deduplicated, limited candidates and summary counts
    """
    thresholds = skill.thresholds if skill else DEFAULT_THRESHOLDS
    limits = skill.limits if skill else DEFAULT_LIMITS
    keyword_rules = skill.priority_rules.battleground_keywords if skill else ()
    page_rules = skill.priority_rules.critical_pages if skill else ()

    logger.info(
        f"[SCOUT] Starting triage: {len(records)} records, "
        f"skill={skill.version if skill else 'default'}, "
        f"keyword_rules={len(keyword_rules)}, page_rules={len(page_rules)}"
    )

    keywords = deduplicate_keywords(
        identify_battleground_keywords(records, thresholds, keyword_rules),
        limits.max_battleground_keywords,
    )
    pages = deduplicate_pages(
        identify_critical_pages(records, thresholds, page_rules),
        limits.max_critical_pages,
    )

    summary = ScoutSummary(
        total_keywords_analyzed=sum(1 for r in records if r.google_ads is not None),
        total_pages_analyzed=len({
            r.search_console.url for r in records if r.search_console and r.search_console.url
        }),
        high_priority_count=(
            sum(1 for k in keywords if k.priority is Priority.HIGH)
            + sum(1 for p in pages if p.priority is Priority.HIGH)
        ),
    )

    logger.info(
        f"[SCOUT] Triage complete: {len(keywords)} battleground keywords, "
        f"{len(pages)} critical pages, {summary.high_priority_count} high priority"
    )

    return ScoutOutput(
        battleground_keywords=tuple(keywords),
        critical_pages=tuple(pages),
        summary=summary,
        thresholds_applied=thresholds.to_dict(),
        skill_version=skill.version if skill else None,
    )
