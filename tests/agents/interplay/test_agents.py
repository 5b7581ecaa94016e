"""
Unit tests for the SEM and SEO agents and their shared base

JSON extraction, schema validation failures, provider failures and the
skill-driven recommendation filter.
"""

import pytest

from src.agents.interplay.base_agent import (
    extract_json_from_response,
    filter_recommendations,
    recommendation_tags,
)
from src.agents.interplay.errors import AgentExecutionError, AgentResponseError
from src.agents.interplay.models import (
    BattlegroundKeyword,
    CriticalPage,
    EnrichedKeyword,
    EnrichedPage,
    Priority,
)
from src.agents.interplay.sem_agent import SEMAgent
from src.agents.interplay.seo_agent import SEOAgent
from src.agents.skills import get_skill_bundle
from src.agents.skills.skill_base import AgentOutputConfig, RecommendationTypes
from src.prompts.interplay_prompts import SEM_SYSTEM_PROMPT, SEO_SYSTEM_PROMPT

from .conftest import EMERGENCY_URL

LEAD_GEN = get_skill_bundle("lead-gen")


@pytest.fixture
def keywords():
    keyword = BattlegroundKeyword(
        query="emergency plumber near me",
        priority=Priority.HIGH,
        reason="high_spend_low_roas",
        spend=500.0,
        roas=0.0,
        organic_position=12.0,
        conversions=1,
    )
    return [EnrichedKeyword(keyword=keyword, priority=Priority.HIGH)]


@pytest.fixture
def pages():
    page = CriticalPage(
        url=EMERGENCY_URL,
        priority=Priority.HIGH,
        reason="high_spend_low_organic",
        paid_spend=500.0,
        organic_position=12.0,
        bounce_rate=0.85,
        impressions=1500,
        ctr=0.01,
    )
    return [EnrichedPage(page=page)]


# ============================================================================
# JSON EXTRACTION
# ============================================================================

class TestExtractJson:
    """Tolerant payload extraction from raw model text"""

    def test_fenced_block(self):
        content = 'Here you go:\n```json\n{"a": 1}\n```\nThanks'
        assert extract_json_from_response(content) == '{"a": 1}'

    def test_unlabelled_fence(self):
        assert extract_json_from_response('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_outermost_braces(self):
        content = 'Result: {"outer": {"inner": 1}} done'
        assert extract_json_from_response(content) == '{"outer": {"inner": 1}}'

    def test_array(self):
        assert extract_json_from_response("list: [1, 2, 3]") == "[1, 2, 3]"

    @pytest.mark.parametrize("content", ["", "no json here", "} backwards {"])
    def test_nothing_found(self, content):
        assert extract_json_from_response(content) is None


# ============================================================================
# RECOMMENDATION FILTER
# ============================================================================

class TestFilterRecommendations:
    """Exclude, reorder and cap by the skill's output config"""

    CONFIG = AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=("negative-keywords",),
            deprioritize=("complete-restructure",),
            exclude=("shopping-campaign",),
        ),
        max_recommendations=3,
    )

    def test_tags_include_inferred_type_and_slugs(self):
        tags = recommendation_tags("Add negative keywords before a complete restructure", "sem", self.CONFIG)
        assert tags == ["keyword-targeting", "negative-keywords", "complete-restructure"]

    def test_exclude_reorder_and_cap(self):
        items = [
            "Plan a complete restructure of the account",
            "Launch a shopping campaign",
            "Tighten ad copy for emergency terms",
            "Add negative keywords for job seekers",
            "Test call extensions",
            "Review location settings",
        ]

        result = filter_recommendations(items, self.CONFIG, lambda text: text, "sem")

        assert result == [
            "Add negative keywords for job seekers",
            "Tighten ad copy for emergency terms",
            "Test call extensions",
        ]

    def test_empty_config_keeps_order(self):
        items = ["first action", "second action"]
        assert filter_recommendations(items, AgentOutputConfig(), lambda t: t, "seo") == items


# ============================================================================
# SEM AGENT
# ============================================================================

class TestSEMAgent:
    """SEM stage against a mocked provider"""

    @pytest.mark.asyncio
    async def test_empty_input_skips_provider(self, provider_factory):
        provider = provider_factory()
        agent = SEMAgent(provider)

        output = await agent.run([], LEAD_GEN.sem)

        assert output.sem_actions == []
        provider.generate.assert_not_awaited()
        assert agent.last_prompt is None

    @pytest.mark.asyncio
    async def test_valid_response(self, provider_factory, keywords, sem_response):
        provider = provider_factory(sem=sem_response)
        agent = SEMAgent(provider, temperature=0.1, max_tokens=500)

        output = await agent.run(keywords, LEAD_GEN.sem)

        assert len(output.sem_actions) == 2
        assert output.sem_actions[0].action.startswith("Add negative keywords")
        assert agent.last_prompt is not None
        kwargs = provider.generate.await_args.kwargs
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 500
        assert kwargs["messages"][0] == {"role": "system", "content": SEM_SYSTEM_PROMPT}
        assert "emergency plumber near me" in kwargs["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_fenced_response(self, provider_factory, keywords):
        fenced = """```json
{"semActions": [{"action": "Add call extensions to emergency ads", "level": "ad_group",
 "expectedUplift": "More calls", "reasoning": "Emergency searchers prefer calling", "impact": "high"}]}
```"""
        output = await SEMAgent(provider_factory(sem=fenced)).run(keywords, LEAD_GEN.sem)
        assert output.sem_actions[0].level.value == "ad_group"

    @pytest.mark.asyncio
    async def test_wrong_shape_is_response_error(self, provider_factory, keywords):
        """A bare list of strings fails schema validation"""
        provider = provider_factory(sem={"semActions": ["cut costs", "raise bids"]})

        with pytest.raises(AgentResponseError) as exc_info:
            await SEMAgent(provider).run(keywords, LEAD_GEN.sem)

        assert exc_info.value.stage == "SEM"
        assert exc_info.value.details["errors"]

    @pytest.mark.asyncio
    async def test_invalid_json_is_response_error(self, provider_factory, keywords):
        with pytest.raises(AgentResponseError, match="Invalid JSON"):
            await SEMAgent(provider_factory(sem="{semActions: nope}")).run(keywords, LEAD_GEN.sem)

    @pytest.mark.asyncio
    async def test_no_json_is_response_error(self, provider_factory, keywords):
        with pytest.raises(AgentResponseError, match="No JSON found"):
            await SEMAgent(provider_factory(sem="I cannot help with that.")).run(keywords, LEAD_GEN.sem)

    @pytest.mark.asyncio
    async def test_provider_failure_is_execution_error(self, provider_factory, keywords):
        provider = provider_factory(sem=TimeoutError("upstream timeout"))

        with pytest.raises(AgentExecutionError) as exc_info:
            await SEMAgent(provider).run(keywords, LEAD_GEN.sem)

        assert not isinstance(exc_info.value, AgentResponseError)
        assert "upstream timeout" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_content_is_response_error(self, provider_factory, keywords):
        with pytest.raises(AgentResponseError, match="Empty response"):
            await SEMAgent(provider_factory(sem="   ")).run(keywords, LEAD_GEN.sem)


# ============================================================================
# SEO AGENT
# ============================================================================

class TestSEOAgent:
    """SEO stage against a mocked provider"""

    @pytest.mark.asyncio
    async def test_empty_input_skips_provider(self, provider_factory):
        provider = provider_factory()
        output = await SEOAgent(provider).run([], LEAD_GEN.seo)

        assert output.seo_actions == []
        provider.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_valid_response(self, provider_factory, pages, seo_response, count_stage_calls):
        provider = provider_factory(seo=seo_response)
        agent = SEOAgent(provider)

        output = await agent.run(pages, LEAD_GEN.seo)

        assert output.seo_actions[0].url == EMERGENCY_URL
        assert count_stage_calls(provider, SEO_SYSTEM_PROMPT) == 1
        assert agent.last_prompt.budget.pages_included == 1

    @pytest.mark.asyncio
    async def test_excluded_type_filtered(self, provider_factory, pages, seo_response):
        seo_response["seoActions"].append({
            "condition": "Service pages lack rich results",
            "recommendation": "Add product schema to the service listing",
            "specificActions": ["Mark up prices on each service"],
            "impact": "medium",
        })

        output = await SEOAgent(provider_factory(seo=seo_response)).run(pages, LEAD_GEN.seo)

        assert [a.recommendation for a in output.seo_actions] == [
            "Implement ProfessionalService schema on the emergency page",
        ]

    @pytest.mark.asyncio
    async def test_too_many_specific_actions(self, provider_factory, pages, seo_response):
        seo_response["seoActions"][0]["specificActions"] = [f"Step number {i}" for i in range(6)]

        with pytest.raises(AgentResponseError):
            await SEOAgent(provider_factory(seo=seo_response)).run(pages, LEAD_GEN.seo)
