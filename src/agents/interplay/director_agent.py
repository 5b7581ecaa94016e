"""
Director Agent - cross-channel synthesis

Combines the SEM and SEO actions into one executive report:

1. Upstream constraint check: actions matching the skill's must_exclude
   rules never reach the synthesis prompt
2. Synthesis call (conflict, synergy and prioritization rules are passed as
   guidance in the prompt)
3. Deterministic post-processing:
   a. constraint check over the unified recommendations
   b. weighted-score ranking (impact weights from the skill)
   c. must_include pins
   d. minimum impact cutoff (pinned items bypass it)
   e. truncation to max_recommendations, highlight and action-item trimming
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from src.agents.interplay.base_agent import BaseInterplayAgent
from src.agents.interplay.constraint_validation import (
    build_exclusion_rules,
    extract_filtered_sem_actions,
    extract_filtered_seo_actions,
    first_matching_rule,
    normalize_unified_recommendation,
    validate_recommendations,
    validate_upstream_constraints,
)
from src.agents.interplay.models import ClientContext, ConstraintViolation
from src.agents.interplay.schemas import (
    DirectorOutput,
    ExecutiveSummary,
    SEMAgentOutput,
    SEOAgentOutput,
    UnifiedRecommendation,
)
from src.agents.skills.skill_base import DirectorSkillDefinition, FilteringConfig, ImpactWeights
from src.prompts.interplay_prompts import DIRECTOR_SYSTEM_PROMPT, PromptBuildResult, build_director_prompt

IMPACT_SCORES = {"high": 3, "medium": 2, "low": 1}
EASE_SCORES = {"low": 3, "medium": 2, "high": 1}

NO_ACTIONS_SUMMARY = ExecutiveSummary(
    summary=(
        "No significant optimization opportunities were identified in the current data. "
        "This may indicate the account is well-optimized or that additional data is needed for analysis."
    ),
    key_highlights=["No urgent issues detected", "Consider expanding data sources"],
)

EMPTY_SYNTHESIS_SUMMARY = ExecutiveSummary(
    summary=(
        "Analysis completed but no specific recommendations were generated. "
        "The account may already be well-optimized or additional data may be needed."
    ),
    key_highlights=["Analysis completed", "No urgent optimizations identified"],
)


@dataclass
class DirectorResult:
    output: DirectorOutput
    upstream_violations: List[ConstraintViolation] = field(default_factory=list)
    output_violations: List[ConstraintViolation] = field(default_factory=list)
    prompt: Optional[PromptBuildResult] = None

    @property
    def violations(self) -> List[ConstraintViolation]:
        return [*self.upstream_violations, *self.output_violations]


# ============================================================================
# RANKING
# ============================================================================

def score_recommendation(recommendation: UnifiedRecommendation, weights: ImpactWeights) -> float:
    """Higher is better: value terms scale with impact, cost terms with ease."""
    impact = IMPACT_SCORES[recommendation.impact.value]
    ease = EASE_SCORES[recommendation.effort.value]
    return (weights.revenue + weights.cost) * impact + (weights.effort + weights.risk) * ease


def meets_impact_threshold(recommendation: UnifiedRecommendation, threshold: str) -> bool:
    return IMPACT_SCORES[recommendation.impact.value] >= IMPACT_SCORES[threshold]


def rank_recommendations(
    recommendations: List[UnifiedRecommendation],
    filtering: FilteringConfig,
) -> Tuple[List[UnifiedRecommendation], int]:
    """
    Order, cut and cap the recommendations.

    Returns the final list and how many were pinned by must_include.
    """
    include_rules = build_exclusion_rules(filtering.must_include)
    scored = sorted(
        enumerate(recommendations),
        key=lambda pair: (-score_recommendation(pair[1], filtering.impact_weights), pair[0]),
    )

    pinned: List[UnifiedRecommendation] = []
    rest: List[UnifiedRecommendation] = []
    for index, rec in scored:
        if include_rules and first_matching_rule(normalize_unified_recommendation(rec, index), include_rules):
            pinned.append(rec)
        elif meets_impact_threshold(rec, filtering.min_impact_threshold):
            rest.append(rec)

    return (pinned + rest)[:filtering.max_recommendations], len(pinned)


def _trim_recommendation(recommendation: UnifiedRecommendation, max_items: int) -> UnifiedRecommendation:
    if len(recommendation.action_items) <= max_items:
        return recommendation
    return recommendation.model_copy(update={"action_items": recommendation.action_items[:max_items]})


def _trim_summary(summary: ExecutiveSummary, max_highlights: int) -> ExecutiveSummary:
    if len(summary.key_highlights) <= max_highlights:
        return summary
    return summary.model_copy(update={"key_highlights": summary.key_highlights[:max_highlights]})


# ============================================================================
# AGENT
# ============================================================================

class DirectorAgent(BaseInterplayAgent):
    stage = "Director"
    system_prompt = DIRECTOR_SYSTEM_PROMPT

    async def run(
        self,
        sem_output: SEMAgentOutput,
        seo_output: SEOAgentOutput,
        skill: DirectorSkillDefinition,
        context: Optional[ClientContext] = None,
    ) -> DirectorResult:
        filtering = skill.filtering
        self.logger.info(
            f"[DIRECTOR] Starting synthesis: sem_actions={len(sem_output.sem_actions)} "
            f"seo_actions={len(seo_output.seo_actions)} skill={skill.version}"
        )

        upstream = validate_upstream_constraints(
            sem_output.sem_actions,
            seo_output.seo_actions,
            filtering.must_exclude,
            skill_version=skill.version,
        )
        sem_actions = extract_filtered_sem_actions(upstream.filtered)
        seo_actions = extract_filtered_seo_actions(upstream.filtered)

        if not sem_actions and not seo_actions:
            self.logger.warning("[DIRECTOR] No recommendations to synthesize")
            return DirectorResult(
                output=DirectorOutput(executive_summary=NO_ACTIONS_SUMMARY, unified_recommendations=[]),
                upstream_violations=list(upstream.violations),
            )

        built = build_director_prompt(sem_actions, seo_actions, skill, context)
        content = await self._call_provider(built.prompt)
        output = self.parse_and_validate(content, DirectorOutput)

        if not output.unified_recommendations:
            self.logger.warning("[DIRECTOR] Model returned no unified recommendations, using fallback summary")
            return DirectorResult(
                output=DirectorOutput(executive_summary=EMPTY_SYNTHESIS_SUMMARY, unified_recommendations=[]),
                upstream_violations=list(upstream.violations),
                prompt=built,
            )

        kept, output_violations = validate_recommendations(
            output.unified_recommendations,
            filtering.must_exclude,
            skill_version=skill.version,
        )
        ranked, pinned = rank_recommendations(kept, filtering)

        max_items = skill.output.recommendation_format.max_action_items
        final = DirectorOutput(
            executive_summary=_trim_summary(output.executive_summary, skill.executive_summary.max_highlights),
            unified_recommendations=[_trim_recommendation(r, max_items) for r in ranked],
        )

        self.logger.info(
            f"[DIRECTOR] Synthesis complete: original={len(output.unified_recommendations)} "
            f"after_constraints={len(kept)} pinned={pinned} final={len(final.unified_recommendations)}"
        )
        return DirectorResult(
            output=final,
            upstream_violations=list(upstream.violations),
            output_violations=output_violations,
            prompt=built,
        )
