import openai
from openai import AsyncOpenAI
from typing import Dict, Any, List, Optional, AsyncGenerator

from src.providers.base_provider import ModelProvider
from src.utils.logger.custom_logging import LoggerMixin


# ============================================================================
# MODEL CAPABILITY CONSTANTS
# ============================================================================

# Models that require max_completion_tokens instead of max_tokens
NEW_API_MODELS = [
    "o1",
    "o3",
    "o4",
    "gpt-5",
]

# Models that only accept the default temperature
MODELS_WITHOUT_TEMPERATURE = [
    "o1",
    "o3",
    "o4",
    "gpt-5",
]


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def is_new_api_model(model_name: str) -> bool:
    """True if the model expects max_completion_tokens."""
    return model_name.lower().startswith(tuple(NEW_API_MODELS))


def model_supports_temperature(model_name: str) -> bool:
    """True if the model accepts a temperature parameter."""
    return not model_name.lower().startswith(tuple(MODELS_WITHOUT_TEMPERATURE))


def convert_params_for_model(model_name: str, kwargs: Dict[str, Any], logger=None) -> Dict[str, Any]:
    """
    Adapt generation parameters to what the model accepts.

    - max_tokens -> max_completion_tokens for reasoning/new models
    - temperature dropped where only the default is allowed
    """
    params = kwargs.copy()

    if is_new_api_model(model_name) and "max_tokens" in params:
        params["max_completion_tokens"] = params.pop("max_tokens")

    if not model_supports_temperature(model_name) and "temperature" in params:
        if logger:
            logger.debug(f"[OpenAI] Removing temperature for {model_name}")
        del params["temperature"]

    return params


# ============================================================================
# OPENAI PROVIDER CLASS
# ============================================================================

class OpenAIModelProvider(ModelProvider, LoggerMixin):
    """
    Provider for OpenAI chat completion models using the official SDK.

    Used by the reasoning stages with a system + user message pair; the
    user message carries the whole serialized prompt.
    """

    def __init__(self, api_key: str, model_name: str = "gpt-4.1-mini", timeout: Optional[float] = 120.0):
        super().__init__()
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout
        self.client: Optional[AsyncOpenAI] = None

    async def initialize(self) -> None:
        """Initialize the OpenAI client"""
        try:
            self.client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
            self.logger.info(f"Initialized OpenAI provider with model {self.model_name}")
        except Exception as e:
            self.logger.error(f"Failed to initialize OpenAI provider: {str(e)}")
            raise

    async def generate(
        self,
        messages: List[Dict[str, str]],
        **kwargs
    ) -> Dict[str, Any]:
        """
        Generate a non-streaming completion.

        Args:
            messages: List of message dicts with role and content
            **kwargs: temperature, max_tokens, response_format, model

        Returns:
            Formatted response dict
        """
        if not self.client:
            await self.initialize()

        model = kwargs.pop("model", self.model_name)
        converted_kwargs = convert_params_for_model(model, kwargs, self.logger)

        try:
            self.logger.debug(
                f"[OpenAI] Generating with model={model}, "
                f"params={list(converted_kwargs.keys())}"
            )
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                **converted_kwargs
            )
            return self._format_response(response)

        except openai.BadRequestError as e:
            error_msg = str(e)
            self.logger.error(f"OpenAI BadRequest: {error_msg}")

            # Retry once when the model rejects max_tokens
            if "max_tokens" in error_msg and "max_tokens" in converted_kwargs:
                self.logger.warning(f"[OpenAI] Retrying with max_completion_tokens for model {model}")
                converted_kwargs["max_completion_tokens"] = converted_kwargs.pop("max_tokens")
                response = await self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    **converted_kwargs
                )
                return self._format_response(response)

            raise

        except Exception as e:
            self.logger.error(f"Error generating OpenAI completion: {str(e)}")
            raise

    async def stream(
        self,
        messages: List[Dict[str, str]],
        **kwargs
    ) -> AsyncGenerator[str, None]:
        """Stream response text chunks"""
        if not self.client:
            await self.initialize()

        model = kwargs.pop("model", self.model_name)
        converted_kwargs = convert_params_for_model(model, kwargs, self.logger)

        try:
            stream = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                stream=True,
                **converted_kwargs
            )
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content

        except Exception as e:
            self.logger.error(f"Error streaming OpenAI completion: {str(e)}")
            raise

    def supports_feature(self, feature_name: str) -> bool:
        feature_support = {
            "json_mode": True,
            "max_completion_tokens": is_new_api_model(self.model_name),
            "temperature": model_supports_temperature(self.model_name),
        }
        return feature_support.get(feature_name, False)

    def _format_response(self, response) -> Dict[str, Any]:
        """Format OpenAI response to the common provider structure"""
        return {
            "content": response.choices[0].message.content,
            "model": response.model,
            "id": response.id,
            "finish_reason": response.choices[0].finish_reason,
            "raw_response": response
        }
