from src.providers.base_provider import ModelProvider
from src.providers.openai_provider import OpenAIModelProvider
from src.providers.provider_factory import ModelProviderFactory, ProviderType

__all__ = [
    "ModelProvider",
    "OpenAIModelProvider",
    "ModelProviderFactory",
    "ProviderType",
]
