from abc import ABC, abstractmethod
from typing import Dict, Any, List, AsyncGenerator


class ModelProvider(ABC):
    """Base interface for the external reasoning service used by the SEM, SEO and Director stages"""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the provider"""
        pass

    @abstractmethod
    async def generate(self, messages: List[Dict[str, str]], **kwargs) -> Dict[str, Any]:
        """
        Generate a completion.

        Returns:
            Dict with at least "content" (the raw response text)
        """
        pass

    @abstractmethod
    async def stream(self, messages: List[Dict[str, str]], **kwargs) -> AsyncGenerator[str, None]:
        """Stream response chunks"""
        pass

    @abstractmethod
    def supports_feature(self, feature_name: str) -> bool:
        """
        Check if provider supports a specific feature.

        Args:
            feature_name: Name of the feature to check
                - json_mode: provider can be asked for a JSON object response
                - temperature: model accepts a temperature parameter
                - max_completion_tokens: model expects max_completion_tokens

        Returns:
            bool: Whether the feature is supported
        """
        pass
