"""
Researcher - Data Enrichment (no LLM calls)

Enriches Scout findings on two independent tracks:
- SEM track: competitive metrics per battleground keyword (keyword-level
  auction insights first, account-level fallback) plus skill priority boosts
- SEO track: landing page content fetched in bounded batches and analysed
  with the skill's page enrichment config

Every lookup and fetch here is best-effort: a miss or failure is logged and
recorded as absent enrichment, never raised.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from src.agents.interplay.models import (
    BattlegroundKeyword,
    CompetitiveMetrics,
    CriticalPage,
    DataLevel,
    DataQualityMetrics,
    DateRange,
    EnrichedKeyword,
    EnrichedPage,
    PageContent,
    Priority,
    ResearcherOutput,
    ScoutOutput,
)
from src.agents.interplay.page_content import extract_page_content
from src.agents.interplay.repository import CompetitiveMetricsSource
from src.agents.skills.skill_base import (
    DataQualityConfig,
    PageEnrichmentConfig,
    PriorityBoost,
    ResearcherSkillDefinition,
)
from src.utils.http_client_pool import HTTPClientManager
from src.utils.logger.custom_logging import LoggerMixin

DEFAULT_DATA_QUALITY = DataQualityConfig()

# Boost metrics read from the keyword itself rather than auction insights
KEYWORD_BOOST_METRICS = ("spend", "roas", "conversions")
COMPETITIVE_BOOST_METRICS = (
    "impressionShare",
    "lostImpressionShareRank",
    "lostImpressionShareBudget",
    "topOfPageRate",
)


# ============================================================================
# PRIORITY BOOSTS
# ============================================================================

def get_boost_metric_value(
    keyword: BattlegroundKeyword,
    metrics: CompetitiveMetrics,
    metric_name: str,
) -> Optional[float]:
    """Resolve a boost metric; unknown names resolve to None (boost skipped)."""
    if metric_name in COMPETITIVE_BOOST_METRICS:
        return metrics.get(metric_name)
    if metric_name in KEYWORD_BOOST_METRICS:
        return getattr(keyword, metric_name)
    return None


def calculate_priority_boost(
    keyword: BattlegroundKeyword,
    metrics: CompetitiveMetrics,
    boosts: Sequence[PriorityBoost],
) -> Tuple[float, List[str]]:
    """Sum the boosts of every matching rule. Returns (total, reasons)."""
    total = 0.0
    reasons: List[str] = []
    for boost in boosts:
        value = get_boost_metric_value(keyword, metrics, boost.metric)
        if value is None:
            continue
        if boost.applies(value):
            total += boost.boost
            reasons.append(boost.reason)
    return total, reasons


def apply_priority_boost(priority: Priority, total_boost: float) -> Priority:
    """
    Move priority by at most one step.

    A positive net boost promotes anything below high to high; a negative net
    boost demotes high to medium. Medium and low are never demoted further.
    """
    if total_boost > 0 and priority is not Priority.HIGH:
        return Priority.HIGH
    if total_boost < 0 and priority is Priority.HIGH:
        return Priority.MEDIUM
    return priority


# ============================================================================
# PAGE FETCHING
# ============================================================================

@dataclass(frozen=True)
class FetchResult:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class PageFetcher(ABC):
    """Fetches raw page markup. Implementations must not execute scripts."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchResult:
        pass


class HttpPageFetcher(PageFetcher, LoggerMixin):
    """Fetches pages through the shared httpx client (identifying User-Agent set by the pool)."""

    def __init__(self, client_manager: HTTPClientManager):
        super().__init__()
        self.client_manager = client_manager

    async def fetch(self, url: str) -> FetchResult:
        async with self.client_manager.get_httpx_client() as client:
            response = await client.get(url)
            return FetchResult(status_code=response.status_code, text=response.text)


# ============================================================================
# RESEARCHER
# ============================================================================

class Researcher(LoggerMixin):
    """
    Enrichment stage of the interplay pipeline.

    Usage:
        researcher = Researcher(competitive_source, HttpPageFetcher(manager))
        output = await researcher.run(scout_output, bundle.researcher, date_range, client_id)
    """

    def __init__(
        self,
        competitive_source: Optional[CompetitiveMetricsSource],
        page_fetcher: PageFetcher,
    ):
        super().__init__()
        self.competitive_source = competitive_source
        self.page_fetcher = page_fetcher

    async def run(
        self,
        scout_output: ScoutOutput,
        skill: Optional[ResearcherSkillDefinition],
        date_range: DateRange,
        client_account_id: str,
    ) -> ResearcherOutput:
        data_quality_config = skill.data_quality if skill else DEFAULT_DATA_QUALITY
        boosts = skill.keyword_enrichment.priority_boosts if skill else ()
        page_config = skill.page_enrichment if skill else None

        self.logger.info(
            f"[RESEARCHER] Starting enrichment: "
            f"{len(scout_output.battleground_keywords)} keywords, "
            f"{len(scout_output.critical_pages)} pages, "
            f"skill={skill.version if skill else 'default'}"
        )

        enriched_keywords = await self.enrich_keywords(
            client_account_id,
            scout_output.battleground_keywords,
            date_range,
            boosts,
        )
        enriched_pages = await self.enrich_pages(
            scout_output.critical_pages,
            page_config,
            data_quality_config,
        )

        data_quality = DataQualityMetrics(
            keywords_with_competitive_data=sum(
                1 for k in enriched_keywords if k.competitive_metrics is not None
            ),
            keywords_with_keyword_level_data=sum(
                1 for k in enriched_keywords if k.data_level is DataLevel.KEYWORD
            ),
            pages_with_content=sum(1 for p in enriched_pages if p.content is not None),
            pages_with_schema=sum(1 for p in enriched_pages if p.content and p.content.has_schema),
            pages_fetch_failed=sum(1 for p in enriched_pages if p.content is None),
        )

        output = ResearcherOutput(
            enriched_keywords=tuple(enriched_keywords),
            enriched_pages=tuple(enriched_pages),
            data_quality=data_quality,
            skill_version=skill.version if skill else None,
        )

        self.logger.info(
            f"[RESEARCHER] Enrichment complete: "
            f"competitive_data={data_quality.keywords_with_competitive_data}/{len(enriched_keywords)}, "
            f"pages_with_content={data_quality.pages_with_content}/{len(enriched_pages)}, "
            f"pages_with_schema={data_quality.pages_with_schema}, "
            f"fetch_failed={data_quality.pages_fetch_failed}"
        )
        if not output.meets_quality_thresholds(data_quality_config):
            self.logger.warning(
                f"[RESEARCHER] Data quality below skill minimums "
                f"(keywords>={data_quality_config.min_keywords_with_competitive_data}, "
                f"pages>={data_quality_config.min_pages_with_content})"
            )

        return output

    # ------------------------------------------------------------------------
    # SEM track
    # ------------------------------------------------------------------------

    async def get_competitive_metrics(
        self,
        client_account_id: str,
        keyword: str,
        date_range: DateRange,
    ) -> Optional[CompetitiveMetrics]:
        """Keyword-level data first, then account-level; None when neither exists."""
        if self.competitive_source is None:
            return None

        try:
            metrics = await self.competitive_source.get_keyword_metrics(client_account_id, keyword, date_range)
            if metrics is not None:
                return metrics

            metrics = await self.competitive_source.get_account_metrics(client_account_id, date_range)
            if metrics is not None:
                self.logger.debug(f"[RESEARCHER] Using account-level competitive data for '{keyword}'")
            return metrics
        except Exception as e:
            self.logger.warning(f"[RESEARCHER] Competitive lookup failed for '{keyword}': {e}")
            return None

    async def enrich_keywords(
        self,
        client_account_id: str,
        keywords: Sequence[BattlegroundKeyword],
        date_range: DateRange,
        boosts: Sequence[PriorityBoost] = (),
    ) -> List[EnrichedKeyword]:
        enriched: List[EnrichedKeyword] = []

        for keyword in keywords:
            metrics = await self.get_competitive_metrics(client_account_id, keyword.query, date_range)

            priority = keyword.priority
            total = 0.0
            reasons: List[str] = []
            if boosts and metrics is not None:
                total, reasons = calculate_priority_boost(keyword, metrics, boosts)
                priority = apply_priority_boost(keyword.priority, total)
                if priority is not keyword.priority:
                    self.logger.debug(
                        f"[RESEARCHER] Boost {total:+.2f} moved '{keyword.query}' "
                        f"{keyword.priority.value} -> {priority.value} ({', '.join(reasons)})"
                    )

            enriched.append(EnrichedKeyword(
                keyword=keyword,
                priority=priority,
                competitive_metrics=metrics,
                boost_total=total,
                boost_reasons=tuple(reasons),
            ))

        return enriched

    # ------------------------------------------------------------------------
    # SEO track
    # ------------------------------------------------------------------------

    async def fetch_page_content(
        self,
        url: str,
        page_config: Optional[PageEnrichmentConfig],
        timeout_seconds: float,
    ) -> Optional[PageContent]:
        """Fetch and analyse one page. Any failure yields None."""
        try:
            result = await asyncio.wait_for(self.page_fetcher.fetch(url), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            self.logger.warning(f"[RESEARCHER] Fetch timed out after {timeout_seconds:.1f}s: {url}")
            return None
        except Exception as e:
            self.logger.warning(f"[RESEARCHER] Fetch failed for {url}: {e}")
            return None

        if not result.ok:
            self.logger.warning(f"[RESEARCHER] Fetch returned HTTP {result.status_code}: {url}")
            return None

        try:
            return extract_page_content(result.text, url, page_config)
        except Exception as e:
            self.logger.warning(f"[RESEARCHER] Content extraction failed for {url}: {e}")
            return None

    async def _enrich_page(
        self,
        page: CriticalPage,
        page_config: Optional[PageEnrichmentConfig],
        timeout_seconds: float,
    ) -> EnrichedPage:
        content = await self.fetch_page_content(page.url, page_config, timeout_seconds)
        return EnrichedPage(page=page, content=content)

    async def enrich_pages(
        self,
        pages: Sequence[CriticalPage],
        page_config: Optional[PageEnrichmentConfig],
        data_quality_config: DataQualityConfig = DEFAULT_DATA_QUALITY,
    ) -> List[EnrichedPage]:
        """Fetch pages in successive batches of at most max_concurrent_fetches."""
        batch_size = max(1, data_quality_config.max_concurrent_fetches)
        timeout_seconds = data_quality_config.max_fetch_timeout_ms / 1000.0

        enriched: List[EnrichedPage] = []
        for start in range(0, len(pages), batch_size):
            batch = pages[start:start + batch_size]
            results = await asyncio.gather(
                *(self._enrich_page(page, page_config, timeout_seconds) for page in batch)
            )
            enriched.extend(results)

        return enriched
