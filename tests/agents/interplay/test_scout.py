"""
Unit tests for the Scout

Rule-based triage: default predicates, declarative skill rules, dedup and
idempotence.
"""

import pytest

from src.agents.interplay.models import CriticalPage, Priority, QueryRecord
from src.agents.interplay.scout import (
    deduplicate_keywords,
    deduplicate_pages,
    normalize_query,
    run_scout,
)
from src.agents.skills import get_skill_bundle
from src.agents.skills.skill_base import (
    PriorityRule,
    RulePriority,
    ScoutSkillDefinition,
    ScoutPriorityRules,
    when,
)


def ads_record(query, spend, roas=0.0, conversions=0, impressions=1000, position=None, url=None, **extra):
    data = {
        "query": query,
        "googleAds": {"spend": spend, "roas": roas, "conversions": conversions, "impressions": impressions},
    }
    if position is not None:
        data["searchConsole"] = {"position": position, "impressions": impressions, "url": url}
    data.update(extra)
    return QueryRecord.from_dict(data)


def page(url, priority, paid_spend):
    return CriticalPage(
        url=url,
        priority=priority,
        reason="high_spend_low_organic",
        paid_spend=paid_spend,
        organic_position=None,
        bounce_rate=None,
        impressions=0,
        ctr=None,
    )


# ============================================================================
# DEFAULT RULES
# ============================================================================

class TestDefaultRules:
    """Predicates used when a skill declares no rules"""

    def test_high_spend_low_roas(self):
        """$500 spend at 1.2 ROAS with no organic rank is high priority"""
        output = run_scout([ads_record("buy running shoes", spend=500, roas=1.2)])

        assert len(output.battleground_keywords) == 1
        keyword = output.battleground_keywords[0]
        assert keyword.priority is Priority.HIGH
        assert keyword.reason == "high_spend_low_roas"
        assert keyword.organic_position is None

    def test_cannibalization(self):
        output = run_scout([ads_record("brand shoes", spend=80, roas=5.0, position=2.0, url="https://x.test/")])
        assert output.battleground_keywords[0].reason == "cannibalization_risk"

    def test_growth_potential(self):
        output = run_scout([ads_record("trail shoes", spend=40, roas=3.0, conversions=10)])
        keyword = output.battleground_keywords[0]
        assert keyword.priority is Priority.MEDIUM
        assert keyword.reason == "growth_potential"

    def test_unremarkable_keyword_ignored(self):
        output = run_scout([ads_record("socks", spend=10, roas=4.0)])
        assert output.battleground_keywords == ()

    def test_records_without_ads_are_not_keywords(self):
        record = QueryRecord.from_dict({
            "query": "organic only",
            "searchConsole": {"position": 4.0, "impressions": 50, "url": "https://x.test/a"},
        })
        output = run_scout([record])
        assert output.battleground_keywords == ()
        assert output.summary.total_keywords_analyzed == 0

    def test_high_spend_page_without_organic_rank(self):
        record = ads_record("pipes", spend=300, roas=4.0, position=25.0, url="https://x.test/pipes")
        output = run_scout([record])

        assert len(output.critical_pages) == 1
        page = output.critical_pages[0]
        assert page.priority is Priority.HIGH
        assert page.reason == "high_spend_low_organic"


# ============================================================================
# SKILL RULES
# ============================================================================

class TestSkillRules:
    """Declarative PriorityRules from a skill bundle"""

    def test_lead_gen_high_spend_few_leads(self, lead_gen_records):
        output = run_scout(lead_gen_records, get_skill_bundle("lead-gen").scout)

        by_query = {k.query: k for k in output.battleground_keywords}
        emergency = by_query["emergency plumber near me"]
        assert emergency.priority is Priority.HIGH
        assert emergency.rule_id == "high-spend-low-conversions"
        assert by_query["water heater repair"].reason == "cannibalization_risk"
        assert output.skill_version == get_skill_bundle("lead-gen").version

    def test_first_matching_rule_wins(self):
        skill = ScoutSkillDefinition(
            version="test",
            priority_rules=ScoutPriorityRules(battleground_keywords=(
                PriorityRule(
                    id="any-spend", name="Any spend", description="", priority=RulePriority.LOW,
                    conditions=(when("spend", ">", 0),), reason="competitive_pressure",
                ),
                PriorityRule(
                    id="big-spend", name="Big spend", description="", priority=RulePriority.CRITICAL,
                    conditions=(when("spend", ">", 100),), reason="high_spend_low_roas",
                ),
            )),
        )
        output = run_scout([ads_record("x", spend=500)], skill)
        assert output.battleground_keywords[0].rule_id == "any-spend"
        assert output.battleground_keywords[0].priority is Priority.LOW

    def test_null_metric_fails_condition(self):
        skill = ScoutSkillDefinition(
            version="test",
            priority_rules=ScoutPriorityRules(battleground_keywords=(
                PriorityRule(
                    id="ranked", name="Ranked", description="", priority=RulePriority.HIGH,
                    conditions=(when("organic_position", "<", 5),), reason="cannibalization_risk",
                ),
            )),
        )
        assert run_scout([ads_record("x", spend=500)], skill).battleground_keywords == ()

    def test_min_impressions_filter(self):
        low_volume = ads_record("rare query", spend=900, impressions=10)
        output = run_scout([low_volume], get_skill_bundle("lead-gen").scout)
        assert output.battleground_keywords == ()


# ============================================================================
# DEDUP / IDEMPOTENCE
# ============================================================================

class TestDeduplication:
    """One candidate per normalized query"""

    def test_normalize_query(self):
        assert normalize_query("  Running   SHOES ") == "running shoes"

    def test_higher_priority_survives(self):
        records = [
            ads_record("Running Shoes", spend=40, roas=3.0, conversions=10),   # medium
            ads_record("running shoes", spend=500, roas=1.0),                  # high
        ]
        output = run_scout(records)
        assert len(output.battleground_keywords) == 1
        assert output.battleground_keywords[0].priority is Priority.HIGH

    def test_spend_breaks_ties(self):
        records = [
            ads_record("running shoes", spend=300, roas=1.0),
            ads_record("running  shoes", spend=700, roas=1.0),
        ]
        output = run_scout(records)
        assert output.battleground_keywords[0].spend == 700

    def test_pages_deduplicated_by_url(self):
        """Same URL twice: higher priority wins, then higher paid spend"""
        url = "https://x.test/pipes"
        pages = [
            page(url, Priority.MEDIUM, 900.0),
            page(url, Priority.HIGH, 100.0),
            page(url, Priority.HIGH, 250.0),
            page("https://x.test/other", Priority.LOW, 50.0),
        ]

        result = deduplicate_pages(pages, 10)

        assert [(p.url, p.priority, p.paid_spend) for p in result] == [
            (url, Priority.HIGH, 250.0),
            ("https://x.test/other", Priority.LOW, 50.0),
        ]

    def test_page_records_for_same_url_collapse(self):
        url = "https://x.test/pipes"
        records = [
            ads_record("copper pipes", spend=300, roas=4.0, position=25.0, url=url),
            ads_record("pipe fitting", spend=450, roas=4.0, position=25.0, url=url),
        ]

        output = run_scout(records)

        assert len(output.critical_pages) == 1
        assert output.critical_pages[0].paid_spend == 450

    def test_limit_applied_after_ranking(self):
        records = [ads_record(f"kw {i}", spend=200 + i, roas=1.0) for i in range(30)]
        keywords = deduplicate_keywords(run_scout(records).battleground_keywords, 5)
        assert [k.spend for k in keywords] == [229, 228, 227, 226, 225]

    def test_rerun_is_identical(self, lead_gen_records):
        skill = get_skill_bundle("lead-gen").scout
        first = run_scout(lead_gen_records, skill)
        second = run_scout(lead_gen_records, skill)
        assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("business_type", ["ecommerce", "lead-gen", "saas", "local"])
def test_every_bundle_triages(business_type, lead_gen_records):
    output = run_scout(lead_gen_records, get_skill_bundle(business_type).scout)
    for keyword in output.battleground_keywords:
        assert keyword.priority in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)
