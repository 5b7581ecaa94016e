"""
Skill Registry - Central Management for Business-Type Skill Bundles

This module provides a singleton registry holding one AgentSkillBundle per
business type and resolving the bundle for a requested category.

Architecture:
    business_type (string) -> BusinessType -> SkillRegistry.resolve() -> SkillResolution

Fallback:
    Categories without a registered bundle resolve through the static
    FALLBACK_BUSINESS_TYPES table. Unknown strings resolve to the configured
    DEFAULT_BUSINESS_TYPE. A category that still has no bundle after the
    fallback lookup is a deployment defect and raises SkillConfigurationError.

Thread Safety:
    The registry is built once at first access. Bundles are frozen after
    creation, so resolution is read-only.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from src.agents.interplay.errors import SkillConfigurationError
from src.agents.skills.skill_base import (
    IMPACT_THRESHOLDS,
    KEYWORD_REASON_CODES,
    PAGE_REASON_CODES,
    AgentSkillBundle,
    BusinessType,
)
from src.utils.config import settings
from src.utils.logger.custom_logging import LoggerMixin


# ============================================================================
# Fallback Table
# ============================================================================

FALLBACK_BUSINESS_TYPES: Dict[BusinessType, BusinessType] = {
    BusinessType.LEAD_GEN: BusinessType.ECOMMERCE,
    BusinessType.SAAS: BusinessType.ECOMMERCE,
    BusinessType.LOCAL: BusinessType.ECOMMERCE,
}


@dataclass(frozen=True)
class SkillResolution:
    """Result of resolving a business category to a skill bundle."""
    bundle: AgentSkillBundle
    using_fallback: bool = False
    fallback_from: Optional[str] = None
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "business_type": self.bundle.business_type.value,
            "version": self.bundle.version,
            "using_fallback": self.using_fallback,
            "fallback_from": self.fallback_from,
            "warning": self.warning,
        }


# ============================================================================
# Bundle Validation
# ============================================================================

def validate_bundle(bundle: AgentSkillBundle) -> None:
    """
    Check the numeric invariants of a skill bundle.

    Raises:
        SkillConfigurationError: On the first invalid value found
    """
    prefix = f"Skill bundle {bundle.business_type.value}@{bundle.version}"

    thresholds = bundle.scout.thresholds
    for name, value in thresholds.to_dict().items():
        if value < 0:
            raise SkillConfigurationError(f"{prefix}: threshold {name} must be non-negative")

    rules = bundle.scout.priority_rules
    for rule_set, allowed in (
        (rules.battleground_keywords, KEYWORD_REASON_CODES),
        (rules.critical_pages, PAGE_REASON_CODES),
    ):
        for rule in rule_set:
            if rule.reason_code not in allowed:
                raise SkillConfigurationError(
                    f"{prefix}: rule '{rule.id}' has unknown reason code '{rule.reason_code}'"
                )

    limits = bundle.scout.limits
    if limits.max_battleground_keywords < 1 or limits.max_critical_pages < 1:
        raise SkillConfigurationError(f"{prefix}: scout limits must be at least 1")

    quality = bundle.researcher.data_quality
    if quality.max_concurrent_fetches < 1 or quality.max_fetch_timeout_ms <= 0:
        raise SkillConfigurationError(f"{prefix}: fetch concurrency and timeout must be positive")

    classification = bundle.researcher.page_enrichment.page_classification
    confidences = [p.confidence for p in classification.patterns]
    confidences.append(classification.confidence_threshold)
    if any(c < 0 or c > 1 for c in confidences):
        raise SkillConfigurationError(f"{prefix}: classification confidence must be within [0, 1]")

    filtering = bundle.director.filtering
    if abs(filtering.impact_weights.total() - 1.0) > 0.01:
        raise SkillConfigurationError(
            f"{prefix}: impact weights must sum to 1.0 (got {filtering.impact_weights.total():.2f})"
        )
    if filtering.min_impact_threshold not in IMPACT_THRESHOLDS:
        raise SkillConfigurationError(
            f"{prefix}: invalid min_impact_threshold '{filtering.min_impact_threshold}'"
        )
    for output in (bundle.sem.output, bundle.seo.output):
        if output.max_recommendations < 1:
            raise SkillConfigurationError(f"{prefix}: max_recommendations must be at least 1")
    if filtering.max_recommendations < 1:
        raise SkillConfigurationError(f"{prefix}: director max_recommendations must be at least 1")


# ============================================================================
# Registry
# ============================================================================

class SkillRegistry(LoggerMixin):
    """
    Singleton registry for business-type skill bundles.

    Usage:
        registry = SkillRegistry.get_instance()
        resolution = registry.resolve("lead-gen")
        bundle = resolution.bundle
    """

    _instance: Optional["SkillRegistry"] = None
    _initialized: bool = False

    def __new__(cls) -> "SkillRegistry":
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if SkillRegistry._initialized:
            return

        super().__init__()

        # Import bundles here to avoid circular imports
        from src.agents.skills.ecommerce_skill import ECOMMERCE_SKILL_BUNDLE
        from src.agents.skills.lead_gen_skill import LEAD_GEN_SKILL_BUNDLE
        from src.agents.skills.saas_skill import SAAS_SKILL_BUNDLE
        from src.agents.skills.local_skill import LOCAL_SKILL_BUNDLE

        self._bundles: Dict[BusinessType, AgentSkillBundle] = {}
        for bundle in (
            ECOMMERCE_SKILL_BUNDLE,
            LEAD_GEN_SKILL_BUNDLE,
            SAAS_SKILL_BUNDLE,
            LOCAL_SKILL_BUNDLE,
        ):
            validate_bundle(bundle)
            self._bundles[bundle.business_type] = bundle

        self._default_business_type = (
            BusinessType.from_value(settings.DEFAULT_BUSINESS_TYPE) or BusinessType.ECOMMERCE
        )

        SkillRegistry._initialized = True

        self.logger.info(
            f"[SKILL_REGISTRY] Initialized with {len(self._bundles)} bundles: "
            f"{[b.value for b in self._bundles]}"
        )

    @classmethod
    def get_instance(cls) -> "SkillRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """
        Reset singleton instance (for testing purposes).

        Warning: Not thread-safe. Only use in test setup/teardown.
        """
        cls._instance = None
        cls._initialized = False

    def resolve(self, business_type: Any) -> SkillResolution:
        """
        Resolve a business category to its skill bundle.

        Args:
            business_type: BusinessType or category string ("lead-gen", "SaaS", ...)

        Returns:
            SkillResolution with the bundle and fallback details

        Raises:
            SkillConfigurationError: No bundle for the category or its fallback
        """
        requested = business_type.value if isinstance(business_type, BusinessType) else str(business_type)
        parsed = BusinessType.from_value(business_type)

        if parsed is not None and parsed in self._bundles:
            self.logger.debug(f"[SKILL_REGISTRY] Resolved {parsed.value}")
            return SkillResolution(bundle=self._bundles[parsed])

        if parsed is None:
            target = self._default_business_type
        else:
            target = FALLBACK_BUSINESS_TYPES.get(parsed)

        if target is None or target not in self._bundles:
            raise SkillConfigurationError(
                f"No skill bundle registered for '{requested}' and no usable fallback"
            )

        warning = (
            f"No skill bundle for business type '{requested}', "
            f"using '{target.value}' skill bundle instead"
        )
        self.logger.warning(f"[SKILL_REGISTRY] {warning}")

        return SkillResolution(
            bundle=self._bundles[target],
            using_fallback=True,
            fallback_from=requested,
            warning=warning,
        )

    def has_bundle(self, business_type: Any) -> bool:
        parsed = BusinessType.from_value(business_type)
        return parsed is not None and parsed in self._bundles

    def get_available_business_types(self) -> List[str]:
        return sorted(b.value for b in self._bundles)

    def get_skill_info(self) -> Dict[str, Dict[str, Any]]:
        """
        Get information about all registered bundles.

        Returns:
            Dict mapping business type to bundle description
        """
        return {
            business_type.value: bundle.describe()
            for business_type, bundle in self._bundles.items()
        }

    def register_bundle(self, bundle: AgentSkillBundle) -> None:
        """
        Register a new bundle or replace an existing one.

        Raises:
            TypeError: If bundle is not an AgentSkillBundle
            SkillConfigurationError: If the bundle fails validation
        """
        if not isinstance(bundle, AgentSkillBundle):
            raise TypeError(
                f"Expected AgentSkillBundle instance, got {type(bundle).__name__}"
            )

        validate_bundle(bundle)
        self._bundles[bundle.business_type] = bundle
        self.logger.info(
            f"[SKILL_REGISTRY] Registered bundle {bundle.business_type.value}@{bundle.version}"
        )

    def unregister_bundle(self, business_type: BusinessType) -> None:
        """Remove a bundle (used by tests to exercise fallback resolution)."""
        self._bundles.pop(business_type, None)

    def __repr__(self) -> str:
        return (
            f"<SkillRegistry bundles={[b.value for b in self._bundles]} "
            f"default={self._default_business_type.value}>"
        )


# ============================================================================
# Convenience Functions
# ============================================================================

def get_skill_registry() -> SkillRegistry:
    """Get the singleton SkillRegistry instance."""
    return SkillRegistry.get_instance()


def get_skill_bundle(business_type: Any) -> AgentSkillBundle:
    """Resolve a business category straight to its bundle."""
    return get_skill_registry().resolve(business_type).bundle
