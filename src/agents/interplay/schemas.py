"""
Interplay Report - LLM Output Schemas

Pydantic models validating the JSON returned by the reasoning service. Field
aliases follow the camelCase JSON contract stated in the prompts; Python code
uses the snake_case attribute names.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_ITEM_LENGTH = 5


def _require_item_length(items: List[str]) -> List[str]:
    for item in items:
        if len(item.strip()) < MIN_ITEM_LENGTH:
            raise ValueError(f"list entry shorter than {MIN_ITEM_LENGTH} characters: {item!r}")
    return items


# ============================================================================
# SHARED
# ============================================================================

class ImpactLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EffortLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SEMActionLevel(str, Enum):
    CAMPAIGN = "campaign"
    AD_GROUP = "ad_group"
    KEYWORD = "keyword"


class RecommendationType(str, Enum):
    SEM = "sem"
    SEO = "seo"
    HYBRID = "hybrid"


class _AgentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# SEM AGENT
# ============================================================================

class SEMAction(_AgentModel):
    action: str = Field(..., min_length=5)
    level: SEMActionLevel
    expected_uplift: str = Field(..., alias="expectedUplift", min_length=5)
    reasoning: str = Field(..., min_length=10)
    impact: ImpactLevel
    keyword: Optional[str] = None


class SEMAgentOutput(_AgentModel):
    sem_actions: List[SEMAction] = Field(..., alias="semActions", min_length=1, max_length=15)

    @classmethod
    def empty(cls) -> "SEMAgentOutput":
        """Output for a run with no battleground keywords (bypasses min_length)."""
        return cls.model_construct(sem_actions=[])


# ============================================================================
# SEO AGENT
# ============================================================================

class SEOAction(_AgentModel):
    condition: str = Field(..., min_length=5)
    recommendation: str = Field(..., min_length=5)
    specific_actions: List[str] = Field(..., alias="specificActions", min_length=1, max_length=5)
    impact: ImpactLevel
    url: Optional[str] = None

    @field_validator("specific_actions")
    @classmethod
    def _check_specific_actions(cls, items: List[str]) -> List[str]:
        return _require_item_length(items)


class SEOAgentOutput(_AgentModel):
    seo_actions: List[SEOAction] = Field(..., alias="seoActions", min_length=1, max_length=15)

    @classmethod
    def empty(cls) -> "SEOAgentOutput":
        """Output for a run with no critical pages (bypasses min_length)."""
        return cls.model_construct(seo_actions=[])


# ============================================================================
# DIRECTOR
# ============================================================================

class ExecutiveSummary(_AgentModel):
    summary: str = Field(..., min_length=20, max_length=1000)
    key_highlights: List[str] = Field(..., alias="keyHighlights", min_length=1, max_length=5)

    @field_validator("key_highlights")
    @classmethod
    def _check_highlights(cls, items: List[str]) -> List[str]:
        return _require_item_length(items)


class UnifiedRecommendation(_AgentModel):
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=10, max_length=500)
    type: RecommendationType
    impact: ImpactLevel
    effort: EffortLevel
    action_items: List[str] = Field(..., alias="actionItems", min_length=1, max_length=5)

    @field_validator("action_items")
    @classmethod
    def _check_action_items(cls, items: List[str]) -> List[str]:
        return _require_item_length(items)


class DirectorOutput(_AgentModel):
    executive_summary: ExecutiveSummary = Field(..., alias="executiveSummary")
    unified_recommendations: List[UnifiedRecommendation] = Field(
        default_factory=list, alias="unifiedRecommendations", max_length=10
    )
