from enum import Enum
from typing import Optional

from src.providers.base_provider import ModelProvider
from src.providers.openai_provider import OpenAIModelProvider
from src.utils.logger.custom_logging import LoggerMixin
from src.utils.config import settings


class ProviderType(str, Enum):
    """Supported reasoning-service provider types."""
    OPENAI = "openai"

    @classmethod
    def list(cls):
        """Get list of all provider type values."""
        return [c.value for c in cls]


class ModelProviderFactory(LoggerMixin):
    """
    Factory for creating model providers.

    Centralizes provider instantiation and API key validation.
    """

    @staticmethod
    def create_provider(
        provider_type: str,
        model_name: str,
        api_key: Optional[str] = None,
        **kwargs
    ) -> ModelProvider:
        """
        Create appropriate provider based on type.

        Args:
            provider_type: One of ProviderType values
            model_name: Model identifier, e.g. "gpt-4.1-mini"
            api_key: API key for the provider (falls back to settings)
            **kwargs: Provider-specific arguments (timeout)

        Returns:
            ModelProvider: Configured provider instance

        Raises:
            ValueError: If provider type is unsupported or API key is missing
        """
        logger = LoggerMixin().logger
        provider_type_lower = provider_type.lower() if isinstance(provider_type, str) else provider_type

        if provider_type_lower == ProviderType.OPENAI:
            api_key = api_key or ModelProviderFactory._get_api_key(provider_type_lower)
            if not api_key:
                raise ValueError(
                    "API key is required for OpenAI provider. "
                    "Set OPENAI_API_KEY environment variable or pass api_key parameter."
                )
            logger.debug(f"[FACTORY] Creating OpenAI provider: {model_name}")
            return OpenAIModelProvider(
                api_key=api_key,
                model_name=model_name,
                timeout=kwargs.get("timeout", 120.0),
            )

        raise ValueError(
            f"Unsupported provider type: {provider_type}. "
            f"Supported providers: {ProviderType.list()}"
        )

    @staticmethod
    def create_default_provider() -> ModelProvider:
        """Create the provider configured by PROVIDER_DEFAULT / MODEL_DEFAULT."""
        return ModelProviderFactory.create_provider(
            provider_type=settings.PROVIDER_DEFAULT,
            model_name=settings.MODEL_DEFAULT,
        )

    @staticmethod
    def _get_api_key(provider_type: str) -> Optional[str]:
        if provider_type == ProviderType.OPENAI:
            return settings.OPENAI_API_KEY
        return None
