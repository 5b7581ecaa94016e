"""
Unit tests for the Researcher and page content extraction

Tiered competitive lookup, priority boosts, bounded page fetches and the
BeautifulSoup-based extraction.
"""

from datetime import date

import pytest
from unittest.mock import AsyncMock

from src.agents.interplay.models import (
    BattlegroundKeyword,
    CompetitiveMetrics,
    CriticalPage,
    DataLevel,
    DateRange,
    Priority,
)
from src.agents.interplay.page_content import (
    classify_page,
    extract_page_content,
    extract_schema_types,
)
from src.agents.interplay.repository import CompetitiveMetricsSource, InMemoryCompetitiveMetricsSource
from src.agents.interplay.researcher import (
    Researcher,
    apply_priority_boost,
    calculate_priority_boost,
)
from src.agents.interplay.scout import run_scout
from src.agents.skills import get_skill_bundle
from src.agents.skills.skill_base import DataQualityConfig, PriorityBoost

from .conftest import CLIENT_ID, EMERGENCY_PAGE_HTML, EMERGENCY_URL, FakePageFetcher


def keyword(query="emergency plumber", priority=Priority.MEDIUM, spend=250.0, conversions=4):
    return BattlegroundKeyword(
        query=query,
        priority=priority,
        reason="growth_potential",
        spend=spend,
        roas=0.0,
        organic_position=None,
        conversions=conversions,
    )


def page(url, priority=Priority.HIGH):
    return CriticalPage(
        url=url,
        priority=priority,
        reason="high_spend_low_organic",
        paid_spend=300.0,
        organic_position=14.0,
        bounce_rate=None,
        impressions=2000,
        ctr=0.01,
    )


# ============================================================================
# COMPETITIVE LOOKUP
# ============================================================================

class TestCompetitiveLookup:
    """Keyword-level first, account-level fallback"""

    @pytest.mark.asyncio
    async def test_keyword_level_preferred(self, competitive_source, date_range):
        researcher = Researcher(competitive_source, FakePageFetcher())
        metrics = await researcher.get_competitive_metrics(CLIENT_ID, "emergency plumber near me", date_range)

        assert metrics.data_level is DataLevel.KEYWORD
        assert metrics.impression_share == 35.0

    @pytest.mark.asyncio
    async def test_account_level_fallback(self, competitive_source, date_range):
        researcher = Researcher(competitive_source, FakePageFetcher())
        metrics = await researcher.get_competitive_metrics(CLIENT_ID, "water heater repair", date_range)

        assert metrics.data_level is DataLevel.ACCOUNT
        assert metrics.impression_share == 55.0

    @pytest.mark.asyncio
    async def test_rows_outside_range_ignored(self, date_range):
        source = InMemoryCompetitiveMetricsSource()
        source.add_keyword_metrics(
            CLIENT_ID, "kw", DateRange(date(2026, 8, 1), date(2026, 8, 31)), {"impressionShare": 10}
        )
        researcher = Researcher(source, FakePageFetcher())
        assert await researcher.get_competitive_metrics(CLIENT_ID, "kw", date_range) is None

    @pytest.mark.asyncio
    async def test_lookup_failure_is_absent_data(self, date_range):
        source = AsyncMock(spec=CompetitiveMetricsSource)
        source.get_keyword_metrics.side_effect = RuntimeError("warehouse down")
        researcher = Researcher(source, FakePageFetcher())

        assert await researcher.get_competitive_metrics(CLIENT_ID, "kw", date_range) is None

    @pytest.mark.asyncio
    async def test_no_source_configured(self, date_range):
        researcher = Researcher(None, FakePageFetcher())
        enriched = await researcher.enrich_keywords(CLIENT_ID, [keyword()], date_range)
        assert enriched[0].data_level is DataLevel.NONE


# ============================================================================
# PRIORITY BOOSTS
# ============================================================================

class TestPriorityBoost:
    """Skill boosts move priority one step at most"""

    BOOSTS = (
        PriorityBoost.from_condition("impressionShare", "< 40", 2, "Visibility headroom"),
        PriorityBoost.from_condition("topOfPageRate", "> 90", -1, "Already dominant"),
        PriorityBoost.from_condition("conversions", ">= 3", 0.5, "Converting"),
    )

    def test_sum_of_matching_boosts(self):
        metrics = CompetitiveMetrics(data_level=DataLevel.KEYWORD, impression_share=30.0, top_of_page_rate=95.0)
        total, reasons = calculate_priority_boost(keyword(), metrics, self.BOOSTS)

        assert total == pytest.approx(1.5)
        assert reasons == ["Visibility headroom", "Already dominant", "Converting"]

    def test_missing_metric_skips_boost(self):
        metrics = CompetitiveMetrics(data_level=DataLevel.ACCOUNT)
        total, reasons = calculate_priority_boost(keyword(conversions=0), metrics, self.BOOSTS)
        assert total == 0
        assert reasons == []

    def test_unknown_metric_skips_boost(self):
        boost = PriorityBoost.from_condition("mysteryMetric", "> 1", 5, "never")
        metrics = CompetitiveMetrics(data_level=DataLevel.KEYWORD, impression_share=10.0)
        assert calculate_priority_boost(keyword(), metrics, [boost]) == (0.0, [])

    @pytest.mark.parametrize("start,total,expected", [
        (Priority.LOW, 0.5, Priority.HIGH),
        (Priority.MEDIUM, 2.0, Priority.HIGH),
        (Priority.HIGH, 3.0, Priority.HIGH),
        (Priority.HIGH, -0.5, Priority.MEDIUM),
        (Priority.MEDIUM, -2.0, Priority.MEDIUM),
        (Priority.LOW, -1.0, Priority.LOW),
        (Priority.MEDIUM, 0.0, Priority.MEDIUM),
    ])
    def test_apply_boost(self, start, total, expected):
        assert apply_priority_boost(start, total) is expected

    @pytest.mark.asyncio
    async def test_enrichment_applies_boost(self, date_range):
        source = InMemoryCompetitiveMetricsSource()
        source.add_keyword_metrics(CLIENT_ID, "emergency plumber", date_range, {"impressionShare": 20.0})
        researcher = Researcher(source, FakePageFetcher())

        [enriched] = await researcher.enrich_keywords(CLIENT_ID, [keyword()], date_range, self.BOOSTS)

        assert enriched.priority is Priority.HIGH
        assert enriched.keyword.priority is Priority.MEDIUM
        assert enriched.boost_total == pytest.approx(2.5)

    @pytest.mark.asyncio
    async def test_no_boost_without_competitive_data(self, date_range):
        researcher = Researcher(InMemoryCompetitiveMetricsSource(), FakePageFetcher())
        [enriched] = await researcher.enrich_keywords(CLIENT_ID, [keyword()], date_range, self.BOOSTS)
        assert enriched.priority is Priority.MEDIUM
        assert enriched.boost_reasons == ()


# ============================================================================
# PAGE FETCHING
# ============================================================================

class TestPageFetching:
    """Batched, best-effort page enrichment"""

    @pytest.mark.asyncio
    async def test_timeout_leaves_siblings_intact(self):
        """One slow page in a batch does not affect the others"""
        urls = [f"https://example.com/p{i}" for i in range(3)]
        fetcher = FakePageFetcher(
            {url: f"<html><body><p>page {url}</p></body></html>" for url in urls},
            slow=[urls[1]],
        )
        researcher = Researcher(None, fetcher)
        config = DataQualityConfig(max_fetch_timeout_ms=50, max_concurrent_fetches=3)

        enriched = await researcher.enrich_pages([page(u) for u in urls], None, config)

        assert [p.url for p in enriched] == urls
        assert enriched[0].content is not None
        assert enriched[1].content is None
        assert enriched[2].content is not None

    @pytest.mark.asyncio
    async def test_errors_and_bad_status_are_absent_content(self):
        fetcher = FakePageFetcher(
            {"https://a.test/": "<html></html>", "https://b.test/": "<html></html>"},
            errors=["https://a.test/"],
            status_codes={"https://b.test/": 404},
        )
        researcher = Researcher(None, fetcher)

        enriched = await researcher.enrich_pages([page("https://a.test/"), page("https://b.test/")], None)

        assert all(p.content is None for p in enriched)

    @pytest.mark.asyncio
    async def test_batches_respect_concurrency(self):
        urls = [f"https://example.com/{i}" for i in range(5)]
        fetcher = FakePageFetcher({u: "<html></html>" for u in urls})
        researcher = Researcher(None, fetcher)

        enriched = await researcher.enrich_pages(
            [page(u) for u in urls], None, DataQualityConfig(max_concurrent_fetches=2)
        )

        assert len(enriched) == 5
        assert fetcher.requested == urls

    @pytest.mark.asyncio
    async def test_full_run_counts_quality(self, lead_gen_records, competitive_source, date_range, page_fetcher):
        bundle = get_skill_bundle("lead-gen")
        scout_output = run_scout(lead_gen_records, bundle.scout)
        researcher = Researcher(competitive_source, page_fetcher)

        output = await researcher.run(scout_output, bundle.researcher, date_range, CLIENT_ID)

        quality = output.data_quality
        assert quality.keywords_with_competitive_data == 2
        assert quality.keywords_with_keyword_level_data == 1
        assert quality.pages_with_content == 1
        assert quality.pages_with_schema == 1
        assert output.enriched_pages[0].url == EMERGENCY_URL


# ============================================================================
# CONTENT EXTRACTION
# ============================================================================

class TestPageContent:
    """Markup parsing with the skill's page enrichment config"""

    def test_standard_fields(self):
        content = extract_page_content(EMERGENCY_PAGE_HTML, EMERGENCY_URL)

        assert content.title == "24/7 Emergency Plumbing | Example Plumbing"
        assert content.h1 == "Emergency Plumbing"
        assert content.meta_description == "Fast emergency plumbers across the city."
        assert content.canonical_url == EMERGENCY_URL
        assert "tracking" not in content.content_preview
        assert content.word_count > 5

    def test_json_ld_read_before_scripts_removed(self):
        content = extract_page_content(EMERGENCY_PAGE_HTML, EMERGENCY_URL)
        assert content.schema_types == ("Organization",)
        assert content.has_schema

    def test_skill_schema_rules_and_signals(self):
        html = """
        <html><body>
          <script type="application/ld+json">{"@type": "Product"}</script>
          <script type="application/ld+json">{not json</script>
          <a href="tel:123">Call</a>
        </body></html>
        """
        config = get_skill_bundle("lead-gen").researcher.page_enrichment
        content = extract_page_content(html, "https://example.com/services/drains", config)

        assert "Product" in content.schema_types
        assert "Invalid JSON-LD syntax" in content.schema_errors
        assert "Missing recommended schema: Organization" in content.schema_errors
        assert "Inappropriate schema present: Product" in content.schema_errors
        assert content.content_signals["phone-number"] is True
        assert content.content_signals["contact-form"] is False
        assert content.page_type == "service"

    def test_schema_graph_and_lists(self):
        data = [{"@graph": [{"@type": "Organization"}, {"@type": ["Service", "Thing"]}]}]
        assert extract_schema_types(data) == ["Organization", "Service", "Thing"]

    def test_empty_body(self):
        content = extract_page_content("", "https://example.com/")
        assert content.word_count == 0
        assert content.title is None

    def test_classification_below_threshold_uses_default(self):
        config = get_skill_bundle("lead-gen").researcher.page_enrichment.page_classification
        assert classify_page("https://example.com/random-page", config) == (config.default_type, 0.0)
        assert classify_page("https://example.com/", None) == ("unknown", 0.0)
