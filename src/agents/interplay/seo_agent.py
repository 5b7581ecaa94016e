"""
SEO Agent

Turns enriched critical pages into organic-search actions, reasoning within
the business type's SEO skill (schema rules, content patterns, common issues).
"""

from typing import Optional, Sequence

from src.agents.interplay.base_agent import BaseInterplayAgent, filter_recommendations
from src.agents.interplay.models import ClientContext, EnrichedPage
from src.agents.interplay.schemas import SEOAction, SEOAgentOutput
from src.agents.skills.skill_base import SEOSkillDefinition
from src.prompts.interplay_prompts import SEO_SYSTEM_PROMPT, PromptBuildResult, build_seo_prompt


def seo_action_text(action: SEOAction) -> str:
    return f"{action.recommendation} {' '.join(action.specific_actions)}"


class SEOAgent(BaseInterplayAgent):
    stage = "SEO"
    system_prompt = SEO_SYSTEM_PROMPT

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.last_prompt: Optional[PromptBuildResult] = None

    async def run(
        self,
        pages: Sequence[EnrichedPage],
        skill: SEOSkillDefinition,
        context: Optional[ClientContext] = None,
    ) -> SEOAgentOutput:
        self.last_prompt = None
        if not pages:
            self.logger.info("[SEO_AGENT] No critical pages, skipping analysis")
            return SEOAgentOutput.empty()

        built = build_seo_prompt(pages, skill, context)
        self.last_prompt = built
        self.logger.info(
            f"[SEO_AGENT] Analyzing {len(pages)} pages "
            f"(mode={built.mode.value}, ~{built.estimated_tokens} tokens, dropped={built.items_dropped})"
        )

        content = await self._call_provider(built.prompt)
        output = self.parse_and_validate(content, SEOAgentOutput)

        actions = filter_recommendations(output.seo_actions, skill.output, seo_action_text, "seo")
        if len(actions) != len(output.seo_actions):
            self.logger.info(
                f"[SEO_AGENT] Skill output filter kept {len(actions)}/{len(output.seo_actions)} actions"
            )

        self.logger.info(f"[SEO_AGENT] Generated {len(actions)} actions")
        return SEOAgentOutput.model_construct(seo_actions=actions)
