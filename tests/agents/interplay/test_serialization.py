"""
Unit tests for prompt serialization

Token estimation, full/compact mode switching, priority truncation and the
SEM/SEO/Director prompt builders.
"""

import pytest

from src.agents.interplay.errors import PromptTooLargeError
from src.agents.interplay.models import (
    BattlegroundKeyword,
    ClientContext,
    CompetitiveMetrics,
    CriticalPage,
    DataLevel,
    EnrichedKeyword,
    EnrichedPage,
    PageContent,
    Priority,
)
from src.agents.interplay.schemas import SEMAction, SEOAction
from src.agents.skills import get_skill_bundle
from src.prompts.interplay_prompts import (
    build_director_prompt,
    build_sem_prompt,
    build_seo_prompt,
)
from src.prompts.serialization import (
    TOKEN_LIMITS,
    SerializationMode,
    calculate_keyword_priority,
    calculate_page_priority,
    determine_serialization_mode,
    estimate_tokens,
    prioritize_and_truncate,
    validate_prompt_size,
)


def enriched_keyword(index, reason="growth_potential", spend=50.0, conversions=0, metrics=None):
    keyword = BattlegroundKeyword(
        query=f"keyword {index}",
        priority=Priority.MEDIUM,
        reason=reason,
        spend=spend,
        roas=1.5,
        organic_position=None,
        conversions=conversions,
    )
    return EnrichedKeyword(keyword=keyword, priority=keyword.priority, competitive_metrics=metrics)


def enriched_page(index, reason="high_impressions_low_ctr", paid_spend=50.0, impressions=600, content=None):
    page = CriticalPage(
        url=f"https://example.com/page-{index}",
        priority=Priority.MEDIUM,
        reason=reason,
        paid_spend=paid_spend,
        organic_position=8.0,
        bounce_rate=None,
        impressions=impressions,
        ctr=0.01,
    )
    return EnrichedPage(page=page, content=content)


# ============================================================================
# TOKEN ESTIMATION
# ============================================================================

class TestTokenEstimation:
    """Four characters per token, rounded up"""

    @pytest.mark.parametrize("text,expected", [("", 0), ("abc", 1), ("abcd", 1), ("abcde", 2)])
    def test_estimate(self, text, expected):
        assert estimate_tokens(text) == expected

    def test_validate_prompt_size_ceiling(self):
        limit_chars = TOKEN_LIMITS.MAX_PROMPT_TOKENS * 4
        assert validate_prompt_size("x" * limit_chars, "SEM") == TOKEN_LIMITS.MAX_PROMPT_TOKENS

        with pytest.raises(PromptTooLargeError) as exc_info:
            validate_prompt_size("x" * (limit_chars + 1), "SEM")
        assert exc_info.value.label == "SEM"
        assert exc_info.value.limit == TOKEN_LIMITS.MAX_PROMPT_TOKENS


# ============================================================================
# MODE SELECTION
# ============================================================================

class TestSerializationMode:
    """Full below the caps, compact above"""

    def test_full_mode_at_cap(self):
        keywords = [enriched_keyword(i) for i in range(TOKEN_LIMITS.MAX_KEYWORDS_FULL)]
        mode, budget = determine_serialization_mode(keywords, [])

        assert mode is SerializationMode.FULL
        assert budget.keywords_included == TOKEN_LIMITS.MAX_KEYWORDS_FULL
        assert not budget.truncation_applied

    def test_compact_mode_above_keyword_cap(self):
        keywords = [enriched_keyword(i) for i in range(25)]
        mode, budget = determine_serialization_mode(keywords, [])

        assert mode is SerializationMode.COMPACT
        assert budget.keywords_included == TOKEN_LIMITS.MAX_KEYWORDS_COMPACT
        assert budget.keywords_dropped == 15
        assert budget.to_dict()["truncationApplied"] is True

    def test_compact_mode_above_page_cap(self):
        pages = [enriched_page(i) for i in range(TOKEN_LIMITS.MAX_PAGES_FULL + 1)]
        mode, budget = determine_serialization_mode([], pages)

        assert mode is SerializationMode.COMPACT
        assert budget.pages_included == TOKEN_LIMITS.MAX_PAGES_COMPACT
        assert budget.pages_included + budget.pages_dropped == len(pages)


# ============================================================================
# TRUNCATION
# ============================================================================

class TestTruncation:
    """Highest scores survive, nothing is lost from the count"""

    def test_keyword_scores(self):
        base = calculate_keyword_priority(enriched_keyword(0, reason="growth_potential", spend=50))
        assert base == 70
        assert calculate_keyword_priority(enriched_keyword(0, reason="high-spend-low-roas", spend=600)) == 130
        assert calculate_keyword_priority(enriched_keyword(0, reason="unusual", spend=150, conversions=2)) == 75
        with_metrics = enriched_keyword(0, metrics=CompetitiveMetrics(data_level=DataLevel.ACCOUNT))
        assert calculate_keyword_priority(with_metrics) == base + 10

    def test_page_scores(self):
        assert calculate_page_priority(enriched_page(0, reason="high_spend_low_organic", paid_spend=400)) == 125
        fetched = enriched_page(0, impressions=2000, content=PageContent())
        assert calculate_page_priority(fetched) == 70 + 10 + 10

    def test_counts_are_conserved(self):
        keywords = [enriched_keyword(i, spend=float(i)) for i in range(12)]
        included, dropped = prioritize_and_truncate(keywords, 5, calculate_keyword_priority)

        assert len(included) == 5
        assert len(included) + dropped == len(keywords)

    def test_highest_scores_kept(self):
        keywords = [enriched_keyword(i, spend=50) for i in range(8)]
        keywords.append(enriched_keyword(99, reason="high_spend_low_roas", spend=800))
        included, _ = prioritize_and_truncate(keywords, 3, calculate_keyword_priority)

        assert included[0].query == "keyword 99"
        assert [k.query for k in included[1:]] == ["keyword 0", "keyword 1"]

    def test_no_truncation_under_limit(self):
        keywords = [enriched_keyword(i) for i in range(3)]
        included, dropped = prioritize_and_truncate(keywords, 10, calculate_keyword_priority)
        assert included == keywords
        assert dropped == 0


# ============================================================================
# PROMPT BUILDERS
# ============================================================================

class TestPromptBuilders:
    """Rendered prompts carry skill framing and the data payload"""

    def test_sem_prompt_full(self):
        skill = get_skill_bundle("lead-gen").sem
        result = build_sem_prompt(
            [enriched_keyword(1)], skill, ClientContext(industry="Home Services", target_market="Austin")
        )

        assert result.mode is SerializationMode.FULL
        assert result.items_dropped == 0
        assert skill.prompt.role_context in result.prompt
        assert "keyword 1" in result.prompt
        assert "Industry: Home Services" in result.prompt
        assert result.estimated_tokens == estimate_tokens(result.prompt)

    def test_sem_prompt_compact_with_notice(self):
        skill = get_skill_bundle("ecommerce").sem
        result = build_sem_prompt([enriched_keyword(i) for i in range(30)], skill)

        assert result.mode is SerializationMode.COMPACT
        assert result.items_dropped == 20
        assert "20 lower-priority keywords omitted" in result.prompt
        assert '"keyword 9"' in result.prompt
        assert '"keyword 10"' not in result.prompt

    def test_seo_prompt_includes_page_content(self):
        skill = get_skill_bundle("lead-gen").seo
        content = PageContent(title="Drain Cleaning", schema_types=("Organization",), page_type="service")
        result = build_seo_prompt([enriched_page(1, content=content)], skill)

        assert "https://example.com/page-1" in result.prompt
        assert "Drain Cleaning" in result.prompt
        assert result.budget.pages_included == 1

    def test_director_prompt_always_full(self):
        skill = get_skill_bundle("lead-gen").director
        sem = SEMAction(
            action="Add negative keywords for job seekers",
            level="keyword",
            expected_uplift="10% lower cost per lead",
            reasoning="Search terms include job seeker queries",
            impact="high",
        )
        seo = SEOAction(
            condition="Missing business schema",
            recommendation="Add Organization markup",
            specific_actions=["Add a JSON-LD Organization block"],
            impact="medium",
        )

        result = build_director_prompt([sem], [seo], skill)

        assert result.mode is SerializationMode.FULL
        assert result.budget is None
        assert "semActions" in result.prompt
        assert "Add Organization markup" in result.prompt
