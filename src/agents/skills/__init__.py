"""
Skills Module - Business-Type Configuration Bundles

Every stage of the interplay pipeline is parameterized by one skill bundle
selected by business category:

Architecture:
    business_type -> SkillRegistry.resolve() -> AgentSkillBundle
        .scout       thresholds and declarative priority rules
        .researcher  competitive boosts, page extraction, classification
        .sem / .seo  KPI framing, benchmarks, prompt text, output filters
        .director    synthesis guidance, impact weights, exclusion patterns

Available Bundles:
    - ECOMMERCE_SKILL_BUNDLE: Online retail, ROAS and Product schema
    - LEAD_GEN_SKILL_BUNDLE: Service businesses, cost per lead
    - SAAS_SKILL_BUNDLE: Subscription software, CAC and trials
    - LOCAL_SKILL_BUNDLE: Location-bound businesses, calls and visits

Usage:
    from src.agents.skills import SkillRegistry

    registry = SkillRegistry.get_instance()
    resolution = registry.resolve("lead-gen")
    thresholds = resolution.bundle.scout.thresholds
"""

from src.agents.skills.skill_base import (
    AgentSkillBundle,
    BusinessType,
    ComparisonOperator,
    PriorityBoost,
    PriorityRule,
    RuleCondition,
    RulePriority,
    ScoutThresholds,
    when,
)
from src.agents.skills.skill_registry import (
    FALLBACK_BUSINESS_TYPES,
    SkillRegistry,
    SkillResolution,
    get_skill_bundle,
    get_skill_registry,
    validate_bundle,
)
from src.agents.skills.ecommerce_skill import ECOMMERCE_SKILL_BUNDLE
from src.agents.skills.lead_gen_skill import LEAD_GEN_SKILL_BUNDLE
from src.agents.skills.saas_skill import SAAS_SKILL_BUNDLE
from src.agents.skills.local_skill import LOCAL_SKILL_BUNDLE

__all__ = [
    "AgentSkillBundle",
    "BusinessType",
    "ComparisonOperator",
    "PriorityBoost",
    "PriorityRule",
    "RuleCondition",
    "RulePriority",
    "ScoutThresholds",
    "when",
    "FALLBACK_BUSINESS_TYPES",
    "SkillRegistry",
    "SkillResolution",
    "get_skill_bundle",
    "get_skill_registry",
    "validate_bundle",
    "ECOMMERCE_SKILL_BUNDLE",
    "LEAD_GEN_SKILL_BUNDLE",
    "SAAS_SKILL_BUNDLE",
    "LOCAL_SKILL_BUNDLE",
]
