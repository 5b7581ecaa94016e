"""
Interplay Base Agent

Shared plumbing for the three reasoning stages (SEM, SEO, Director):

- one system + user message pair per call to the model provider
- tolerant JSON extraction from the raw response text
- pydantic validation into the stage's output schema
- the skill-driven recommendation filter (exclude / prioritize / truncate)

Provider failures become AgentExecutionError; unparsable or non-conforming
responses become AgentResponseError. Neither is retried here.
"""

import json
import re
from abc import ABC
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.agents.interplay.constraint_validation import infer_action_type
from src.agents.interplay.errors import AgentExecutionError, AgentResponseError
from src.agents.skills.skill_base import AgentOutputConfig
from src.providers.base_provider import ModelProvider
from src.utils.config import settings
from src.utils.logger.custom_logging import LoggerMixin

ModelT = TypeVar("ModelT", bound=BaseModel)
ItemT = TypeVar("ItemT")

RESPONSE_PREVIEW_CHARS = 500

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.I)


def extract_json_from_response(content: str) -> Optional[str]:
    """
    Pull the JSON payload out of a model response.

    Tried in order: a markdown code fence, the outermost {...}, the
    outermost [...]. Returns None when nothing JSON-shaped is present.
    """
    if not content:
        return None

    fence = _FENCE_PATTERN.search(content)
    if fence and fence.group(1).strip():
        return fence.group(1).strip()

    brace_start = content.find("{")
    brace_end = content.rfind("}")
    if brace_start >= 0 and brace_end > brace_start:
        return content[brace_start:brace_end + 1]

    bracket_start = content.find("[")
    bracket_end = content.rfind("]")
    if bracket_start >= 0 and bracket_end > bracket_start:
        return content[bracket_start:bracket_end + 1]

    return None


def _slug_in_text(slug: str, text: str) -> bool:
    return slug in text or slug.replace("-", " ") in text


def recommendation_tags(text: str, source: str, output_config: AgentOutputConfig) -> List[str]:
    """Inferred action type plus every configured recommendation type named in the text."""
    lowered = text.lower()
    types = output_config.recommendation_types
    tags = [infer_action_type(lowered, source)]
    for slug in (*types.prioritize, *types.deprioritize, *types.exclude):
        if slug not in tags and _slug_in_text(slug.lower(), lowered):
            tags.append(slug)
    return tags


def filter_recommendations(
    items: Sequence[ItemT],
    output_config: AgentOutputConfig,
    text_fn: Callable[[ItemT], str],
    source: str,
) -> List[ItemT]:
    """
    Apply a skill's output rules to validated actions.

    Items tagged with an excluded type are dropped, prioritized ones move to
    the front and deprioritized ones to the back (order otherwise kept), and
    the result is cut to max_recommendations.
    """
    types = output_config.recommendation_types
    exclude = set(types.exclude)
    prioritize = set(types.prioritize)
    deprioritize = set(types.deprioritize)

    ranked = []
    for item in items:
        tags = set(recommendation_tags(text_fn(item), source, output_config))
        if tags & exclude:
            continue
        if tags & prioritize:
            rank = 0
        elif tags & deprioritize:
            rank = 2
        else:
            rank = 1
        ranked.append((rank, item))

    ranked.sort(key=lambda pair: pair[0])
    return [item for _, item in ranked][:output_config.max_recommendations]


class BaseInterplayAgent(ABC, LoggerMixin):
    """
    Base class for the reasoning stages.

    Attributes:
        stage: Stage name used in errors ("SEM", "SEO", "Director")
        provider: Model provider (already constructed; initialized lazily)
        temperature: Sampling temperature for every call
        max_tokens: Completion token cap for every call
    """

    stage: str = "agent"
    system_prompt: str = ""

    def __init__(
        self,
        provider: ModelProvider,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        super().__init__()
        self.provider = provider
        self.temperature = settings.INTERPLAY_TEMPERATURE if temperature is None else temperature
        self.max_tokens = settings.INTERPLAY_MAX_TOKENS if max_tokens is None else max_tokens

    # ========================================================================
    # PROVIDER CALL
    # ========================================================================

    async def _ensure_provider(self) -> None:
        if getattr(self.provider, "client", object()) is None:
            await self.provider.initialize()

    async def _call_provider(self, prompt: str) -> str:
        messages = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": prompt},
        ]

        try:
            await self._ensure_provider()
            response = await self.provider.generate(
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            raise AgentExecutionError(self.stage, str(e)) from e

        content = (response or {}).get("content") or ""
        if not content.strip():
            raise AgentResponseError(self.stage, "Empty response from model provider")
        return content

    # ========================================================================
    # PARSING
    # ========================================================================

    def parse_and_validate(self, content: str, model_cls: Type[ModelT]) -> ModelT:
        json_str = extract_json_from_response(content)
        if json_str is None:
            raise AgentResponseError(
                self.stage,
                "No JSON found in response",
                details={"response": content[:RESPONSE_PREVIEW_CHARS]},
            )

        try:
            data: Any = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise AgentResponseError(
                self.stage,
                f"Invalid JSON in response: {e}",
                details={"response": content[:RESPONSE_PREVIEW_CHARS]},
            ) from e

        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            raise AgentResponseError(
                self.stage,
                "Response does not match the expected schema",
                details={"errors": e.errors(include_url=False), "response": json_str[:RESPONSE_PREVIEW_CHARS]},
            ) from e
