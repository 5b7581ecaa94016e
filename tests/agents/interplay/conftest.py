"""
Shared fixtures for the interplay pipeline tests.

The model provider is an AsyncMock whose generate() routes on the system
prompt, so SEM, SEO and Director answers can be scripted independently even
though SEM and SEO run concurrently.
"""

import asyncio
import copy
import json
from datetime import date
from typing import Any, Dict, Optional

import pytest
from unittest.mock import AsyncMock

from src.agents.interplay.models import DateRange, QueryRecord
from src.agents.interplay.repository import (
    InMemoryCompetitiveMetricsSource,
    InMemoryQueryDataSource,
    InMemoryReportRepository,
)
from src.agents.interplay.researcher import FetchResult, PageFetcher
from src.agents.skills.skill_registry import SkillRegistry
from src.prompts.interplay_prompts import (
    DIRECTOR_SYSTEM_PROMPT,
    SEM_SYSTEM_PROMPT,
    SEO_SYSTEM_PROMPT,
)

CLIENT_ID = "acct-123"
EMERGENCY_URL = "https://example.com/services/emergency-plumbing"
WATER_HEATER_URL = "https://example.com/services/water-heater"


# ============================================================================
# FAKES
# ============================================================================

class FakePageFetcher(PageFetcher):
    """Serves canned markup; URLs in ``slow`` never answer, URLs in ``errors`` raise."""

    def __init__(self, pages: Optional[Dict[str, str]] = None, slow=(), errors=(), status_codes=None):
        self.pages = pages or {}
        self.slow = set(slow)
        self.errors = set(errors)
        self.status_codes = status_codes or {}
        self.requested = []

    async def fetch(self, url: str) -> FetchResult:
        self.requested.append(url)
        if url in self.slow:
            await asyncio.sleep(60)
        if url in self.errors:
            raise ConnectionError(f"connection refused: {url}")
        return FetchResult(status_code=self.status_codes.get(url, 200), text=self.pages.get(url, ""))


def make_provider(
    sem: Any = None,
    seo: Any = None,
    director: Any = None,
) -> AsyncMock:
    """
    Build a mock provider.

    Each answer is either a dict (serialized to JSON), a raw string, or an
    exception instance to raise from generate().
    """
    answers = {
        SEM_SYSTEM_PROMPT: sem,
        SEO_SYSTEM_PROMPT: seo,
        DIRECTOR_SYSTEM_PROMPT: director,
    }

    async def generate(messages, **kwargs):
        answer = answers[messages[0]["content"]]
        if isinstance(answer, Exception):
            raise answer
        if answer is None:
            raise AssertionError(f"Unexpected provider call: {messages[0]['content'][:40]}")
        content = answer if isinstance(answer, str) else json.dumps(answer)
        return {"content": content, "model": "test-model", "finish_reason": "stop"}

    provider = AsyncMock()
    provider.generate = AsyncMock(side_effect=generate)
    return provider


def stage_calls(provider: AsyncMock, system_prompt: str) -> int:
    return sum(
        1 for call in provider.generate.await_args_list
        if call.kwargs["messages"][0]["content"] == system_prompt
    )


# ============================================================================
# CANNED MODEL ANSWERS
# ============================================================================

SEM_RESPONSE = {
    "semActions": [
        {
            "action": "Add negative keywords for 'plumber jobs' to stop wasted clicks",
            "level": "keyword",
            "expectedUplift": "15% lower cost per lead",
            "reasoning": "Search terms show job seekers clicking ads without submitting a lead form",
            "impact": "high",
            "keyword": "emergency plumber near me",
        },
        {
            "action": "Switch the main campaign to target ROAS bidding",
            "level": "campaign",
            "expectedUplift": "Improve return by 20%",
            "reasoning": "Return on ad spend on the main campaign is below target",
            "impact": "medium",
        },
    ]
}

SEO_RESPONSE = {
    "seoActions": [
        {
            "condition": "Service page has no structured business details",
            "recommendation": "Implement ProfessionalService schema on the emergency page",
            "specificActions": ["Add a JSON-LD ProfessionalService block with areaServed"],
            "impact": "high",
            "url": EMERGENCY_URL,
        },
    ]
}

DIRECTOR_RESPONSE = {
    "executiveSummary": {
        "summary": "Paid search is leaking budget on job-seeker clicks while the top service page lacks trust signals.",
        "keyHighlights": [
            "Wasted clicks on emergency plumbing terms",
            "Service page missing business markup",
        ],
    },
    "unifiedRecommendations": [
        {
            "title": "Cut wasted clicks on emergency terms",
            "description": "Add negative keywords for job-seeker queries to lower cost per lead.",
            "type": "sem",
            "impact": "high",
            "effort": "low",
            "actionItems": ["Add 'jobs' and 'careers' as negatives"],
        },
        {
            "title": "Add Product structured data",
            "description": "Add Product structured data to the service pages for rich results.",
            "type": "seo",
            "impact": "medium",
            "effort": "low",
            "actionItems": ["Mark up each service page"],
        },
        {
            "title": "Speed up the emergency landing page",
            "description": "A technical fix for slow page speed on the emergency landing page.",
            "type": "seo",
            "impact": "low",
            "effort": "medium",
            "actionItems": ["Compress hero images", "Defer third-party scripts"],
        },
        {
            "title": "Refresh headline copy",
            "description": "Try new ad headlines that mention same-day service.",
            "type": "sem",
            "impact": "low",
            "effort": "low",
            "actionItems": ["Write three new headlines"],
        },
    ],
}

EMERGENCY_PAGE_HTML = """
<html>
  <head>
    <title>24/7 Emergency Plumbing | Example Plumbing</title>
    <meta name="description" content="Fast emergency plumbers across the city.">
    <link rel="canonical" href="https://example.com/services/emergency-plumbing">
    <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization"}</script>
  </head>
  <body>
    <h1>Emergency Plumbing</h1>
    <p>Burst pipe? Call now for a licensed plumber in under an hour.</p>
    <a href="tel:+15551234567">Call us</a>
    <script>console.log("tracking")</script>
  </body>
</html>
"""


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_registry():
    """Every test starts from the built-in bundles."""
    SkillRegistry.reset_instance()
    yield
    SkillRegistry.reset_instance()


@pytest.fixture
def date_range():
    return DateRange(start=date(2026, 9, 1), end=date(2026, 9, 30))


@pytest.fixture
def lead_gen_records():
    return [
        QueryRecord.from_dict({
            "query": "emergency plumber near me",
            "googleAds": {"spend": 500.0, "clicks": 100, "impressions": 2000, "conversions": 1, "roas": 0},
            "searchConsole": {"position": 12.0, "clicks": 15, "impressions": 1500, "ctr": 0.01, "url": EMERGENCY_URL},
            "ga4Metrics": {"sessions": 200, "bounceRate": 0.85},
        }),
        QueryRecord.from_dict({
            "query": "water heater repair",
            "googleAds": {"spend": 150.0, "clicks": 40, "impressions": 800, "conversions": 8, "roas": 0},
            "searchConsole": {"position": 2.0, "clicks": 20, "impressions": 300, "ctr": 0.05, "url": WATER_HEATER_URL},
        }),
    ]


@pytest.fixture
def repository():
    return InMemoryReportRepository()


@pytest.fixture
def competitive_source(date_range):
    source = InMemoryCompetitiveMetricsSource()
    source.add_keyword_metrics(CLIENT_ID, "emergency plumber near me", date_range, {
        "impressionShare": 35.0,
        "lostImpressionShareRank": 20.0,
        "lostImpressionShareBudget": 45.0,
        "topOfPageRate": 60.0,
    })
    source.add_account_metrics(CLIENT_ID, date_range, {"impressionShare": 55.0, "topOfPageRate": 70.0})
    return source


@pytest.fixture
def query_source(lead_gen_records):
    return InMemoryQueryDataSource({CLIENT_ID: lead_gen_records})


@pytest.fixture
def page_fetcher():
    return FakePageFetcher({EMERGENCY_URL: EMERGENCY_PAGE_HTML})


@pytest.fixture
def sem_response():
    return copy.deepcopy(SEM_RESPONSE)


@pytest.fixture
def seo_response():
    return copy.deepcopy(SEO_RESPONSE)


@pytest.fixture
def director_response():
    return copy.deepcopy(DIRECTOR_RESPONSE)


@pytest.fixture
def provider_factory():
    return make_provider


@pytest.fixture
def count_stage_calls():
    return stage_calls
