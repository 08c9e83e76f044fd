from abc import ABC, abstractmethod

from readmemuse.llm.config import LLMConfig
from readmemuse.llm.messages import InputMessage, LLMResponse


class LLMClient(ABC):
    """Abstract interface for text-generation providers."""

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    async def complete(self, messages: list[InputMessage]) -> LLMResponse:
        """Send a completion request.

        Args:
            messages: Conversation to complete, system message first.

        Returns:
            LLMResponse with the output items and usage information.

        Raises:
            LLMError: On any failure (rate limit, timeout, etc.)
        """

    @property
    def model_name(self) -> str:
        return self.config.provider_config.model_name

    @property
    def provider(self) -> str:
        return self.config.provider_config.provider.value
