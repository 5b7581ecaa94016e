"""
SEM Agent

Turns enriched battleground keywords into paid-search actions, reasoning
within the business type's SEM skill.
"""

from typing import Optional, Sequence

from src.agents.interplay.base_agent import BaseInterplayAgent, filter_recommendations
from src.agents.interplay.models import ClientContext, EnrichedKeyword
from src.agents.interplay.schemas import SEMAction, SEMAgentOutput
from src.agents.skills.skill_base import SEMSkillDefinition
from src.prompts.interplay_prompts import SEM_SYSTEM_PROMPT, PromptBuildResult, build_sem_prompt


def sem_action_text(action: SEMAction) -> str:
    return f"{action.action} {action.reasoning}"


class SEMAgent(BaseInterplayAgent):
    stage = "SEM"
    system_prompt = SEM_SYSTEM_PROMPT

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.last_prompt: Optional[PromptBuildResult] = None

    async def run(
        self,
        keywords: Sequence[EnrichedKeyword],
        skill: SEMSkillDefinition,
        context: Optional[ClientContext] = None,
    ) -> SEMAgentOutput:
        self.last_prompt = None
        if not keywords:
            self.logger.info("[SEM_AGENT] No battleground keywords, skipping analysis")
            return SEMAgentOutput.empty()

        built = build_sem_prompt(keywords, skill, context)
        self.last_prompt = built
        self.logger.info(
            f"[SEM_AGENT] Analyzing {len(keywords)} keywords "
            f"(mode={built.mode.value}, ~{built.estimated_tokens} tokens, dropped={built.items_dropped})"
        )

        content = await self._call_provider(built.prompt)
        output = self.parse_and_validate(content, SEMAgentOutput)

        actions = filter_recommendations(output.sem_actions, skill.output, sem_action_text, "sem")
        if len(actions) != len(output.sem_actions):
            self.logger.info(
                f"[SEM_AGENT] Skill output filter kept {len(actions)}/{len(output.sem_actions)} actions"
            )

        self.logger.info(f"[SEM_AGENT] Generated {len(actions)} actions")
        return SEMAgentOutput.model_construct(sem_actions=actions)
