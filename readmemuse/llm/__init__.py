from readmemuse.llm.client import LLMClient
from readmemuse.llm.config import LLMConfig, LLMProvider, ProviderConfig, RetryPolicy, SamplingParams
from readmemuse.llm.errors import LLMError, LLMErrorType
from readmemuse.llm.messages import InputMessage, LLMResponse, MessageRole
from readmemuse.llm.openrouter import OpenRouterClient

__all__ = [
    "LLMClient",
    "LLMConfig",
    "LLMProvider",
    "ProviderConfig",
    "RetryPolicy",
    "SamplingParams",
    "LLMError",
    "LLMErrorType",
    "InputMessage",
    "LLMResponse",
    "MessageRole",
    "OpenRouterClient",
]
