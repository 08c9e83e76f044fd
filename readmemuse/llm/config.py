import os
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, SecretStr

API_KEY_ENV = "OPENROUTER_API_KEY"
MODEL_ENV = "READMEMUSE_MODEL"
DEFAULT_MODEL = "openai/gpt-4o-mini"


class LLMProvider(StrEnum):
    OPENROUTER = "openrouter"


class ProviderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    provider: LLMProvider = LLMProvider.OPENROUTER
    model_name: str = DEFAULT_MODEL
    api_key: SecretStr | None = None
    timeout_sec: int = 60


class SamplingParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    temperature: float = 0.2
    top_p: float = 1.0
    max_tokens: int = 2048


class RetryPolicy(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_retries: int = 2
    initial_delay_sec: float = 1.0
    max_delay_sec: float = 10.0
    exponential_base: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Backoff before retrying after the given (1-based) attempt."""
        return min(
            self.max_delay_sec,
            self.initial_delay_sec * (self.exponential_base ** (attempt - 1)),
        )


class LLMConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    provider_config: ProviderConfig = Field(default_factory=ProviderConfig)
    sampling: SamplingParams = Field(default_factory=SamplingParams)
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)

    @classmethod
    def from_env(cls, model_name: str | None = None) -> "LLMConfig":
        api_key = os.getenv(API_KEY_ENV)
        return cls(
            provider_config=ProviderConfig(
                model_name=model_name or os.getenv(MODEL_ENV) or DEFAULT_MODEL,
                api_key=SecretStr(api_key) if api_key else None,
            )
        )

    @property
    def has_api_key(self) -> bool:
        return self.provider_config.api_key is not None
