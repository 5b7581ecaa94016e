"""
Unit tests for SkillRegistry

Covers bundle resolution, the static fallback table, unknown categories and
bundle validation.
"""

import dataclasses

import pytest

from src.agents.interplay.errors import SkillConfigurationError
from src.agents.skills import (
    ECOMMERCE_SKILL_BUNDLE,
    LEAD_GEN_SKILL_BUNDLE,
    BusinessType,
    SkillRegistry,
    get_skill_bundle,
    validate_bundle,
)
from src.agents.skills.skill_base import ImpactWeights


# ============================================================================
# RESOLUTION
# ============================================================================

class TestResolve:
    """Direct resolution of registered business types"""

    def test_all_builtin_types_registered(self):
        registry = SkillRegistry.get_instance()
        assert registry.get_available_business_types() == ["ecommerce", "lead-gen", "local", "saas"]

    def test_resolves_exact_bundle_without_fallback(self):
        resolution = SkillRegistry.get_instance().resolve("lead-gen")
        assert resolution.bundle is LEAD_GEN_SKILL_BUNDLE
        assert resolution.using_fallback is False
        assert resolution.fallback_from is None

    def test_lenient_category_parsing(self):
        resolution = SkillRegistry.get_instance().resolve("Lead_Gen")
        assert resolution.bundle.business_type is BusinessType.LEAD_GEN

    def test_accepts_enum_member(self):
        assert get_skill_bundle(BusinessType.ECOMMERCE) is ECOMMERCE_SKILL_BUNDLE

    def test_singleton(self):
        assert SkillRegistry.get_instance() is SkillRegistry()


# ============================================================================
# FALLBACK
# ============================================================================

class TestFallback:
    """Static fallback map and default category"""

    def test_missing_bundle_falls_back_to_ecommerce(self):
        registry = SkillRegistry.get_instance()
        registry.unregister_bundle(BusinessType.SAAS)

        resolution = registry.resolve("saas")

        assert resolution.using_fallback is True
        assert resolution.fallback_from == "saas"
        assert resolution.bundle.business_type is BusinessType.ECOMMERCE
        assert "saas" in resolution.warning

    def test_unknown_category_uses_default(self):
        resolution = SkillRegistry.get_instance().resolve("pet-grooming")
        assert resolution.using_fallback is True
        assert resolution.fallback_from == "pet-grooming"
        assert resolution.bundle.business_type is BusinessType.ECOMMERCE

    def test_no_usable_fallback_raises(self):
        registry = SkillRegistry.get_instance()
        registry.unregister_bundle(BusinessType.LOCAL)
        registry.unregister_bundle(BusinessType.ECOMMERCE)

        with pytest.raises(SkillConfigurationError):
            registry.resolve("local")


# ============================================================================
# VALIDATION
# ============================================================================

class TestValidation:
    """Bundle invariants checked at registration"""

    def test_builtin_bundles_are_valid(self):
        for business_type in BusinessType:
            validate_bundle(get_skill_bundle(business_type))

    def test_weights_must_sum_to_one(self):
        director = LEAD_GEN_SKILL_BUNDLE.director
        bad_filtering = dataclasses.replace(
            director.filtering,
            impact_weights=ImpactWeights(revenue=0.5, cost=0.5, effort=0.5, risk=0.5),
        )
        bad_bundle = dataclasses.replace(
            LEAD_GEN_SKILL_BUNDLE,
            director=dataclasses.replace(director, filtering=bad_filtering),
        )

        with pytest.raises(SkillConfigurationError, match="impact weights"):
            SkillRegistry.get_instance().register_bundle(bad_bundle)

    @pytest.mark.parametrize("threshold", ["critical", "", "MEDIUM"])
    def test_impact_threshold_must_be_known_level(self, threshold):
        director = LEAD_GEN_SKILL_BUNDLE.director
        bad_bundle = dataclasses.replace(
            LEAD_GEN_SKILL_BUNDLE,
            director=dataclasses.replace(
                director,
                filtering=dataclasses.replace(director.filtering, min_impact_threshold=threshold),
            ),
        )

        with pytest.raises(SkillConfigurationError, match="min_impact_threshold"):
            validate_bundle(bad_bundle)

    def test_register_rejects_non_bundle(self):
        with pytest.raises(TypeError):
            SkillRegistry.get_instance().register_bundle({"business_type": "saas"})

    def test_bundle_versions_are_consistent(self):
        info = SkillRegistry.get_instance().get_skill_info()
        for description in info.values():
            assert set(description["stage_versions"].values()) == {description["version"]}
