import asyncio
import json
import logging
import time

import httpx
from pydantic import ValidationError

from readmemuse.llm.client import LLMClient
from readmemuse.llm.config import LLMConfig
from readmemuse.llm.errors import (
    AuthenticationError,
    InvalidRequestError,
    LLMError,
    LLMErrorType,
    LLMTimeoutError,
    ProviderError,
    RateLimitedError,
)
from readmemuse.llm.messages import InputMessage, LLMResponse

logger = logging.getLogger(__name__)

OPENROUTER_API_URL = "https://openrouter.ai/api/v1/responses"


class OpenRouterClient(LLMClient):

    def __init__(self, config: LLMConfig):
        super().__init__(config)

    def _get_headers(self) -> dict[str, str]:
        api_key = self.config.provider_config.api_key

        if not api_key:
            raise AuthenticationError("API key is required")

        return {
            "Authorization": f"Bearer {api_key.get_secret_value()}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://github.com/readmemuse",
            "X-Title": "ReadmeMuse",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        # fresh client per attempt, closed in _post_once
        return httpx.AsyncClient(
            timeout=self.config.provider_config.timeout_sec,
            headers=self._get_headers(),
        )

    def _build_request_body(self, messages: list[InputMessage]) -> dict:
        return {
            "model": self.model_name,
            "input": [json.loads(message.model_dump_json()) for message in messages],
            "max_output_tokens": self.config.sampling.max_tokens,
            "temperature": self.config.sampling.temperature,
            "top_p": self.config.sampling.top_p,
        }

    def _classify_error(self, status_code: int, response_body: dict | None) -> LLMError:
        message = f"HTTP {status_code}"
        if response_body:
            error = response_body.get("error")
            if isinstance(error, dict) and error.get("message"):
                message = error["message"]

        if status_code == 400:
            return InvalidRequestError(message, details={"status_code": status_code})
        if status_code in (401, 402, 403):
            return AuthenticationError(message)
        if status_code == 429:
            return RateLimitedError(message)
        # 5xx and anything unexpected
        return ProviderError(message, status_code=status_code)

    async def _post_once(self, request_body: dict) -> LLMResponse:
        client = await self._get_client()
        try:
            started = time.monotonic()
            response = await client.post(OPENROUTER_API_URL, json=request_body)
            try:
                response_body = response.json()
            except ValueError:
                response_body = None
            if response_body is not None and not isinstance(response_body, dict):
                response_body = None

            if response.status_code != 200:
                raise self._classify_error(response.status_code, response_body)

            if response_body is None:
                raise LLMError(
                    LLMErrorType.INVALID_RESPONSE,
                    "Non-JSON response from provider",
                    retryable=True,
                )

            try:
                result = LLMResponse.model_validate(response_body)
            except ValidationError as e:
                raise LLMError(
                    LLMErrorType.INVALID_RESPONSE,
                    f"Invalid response schema: {e.errors()[:1]}",
                    retryable=False,
                ) from e

            logger.debug(
                "OpenRouter request %s finished in %.0f ms (%d tokens)",
                result.id or "-",
                (time.monotonic() - started) * 1000,
                result.usage.total_tokens if result.usage else 0,
            )
            return result

        except httpx.TimeoutException as e:
            raise LLMTimeoutError(
                f"Request timed out after {self.config.provider_config.timeout_sec} seconds"
            ) from e
        except httpx.RequestError as e:
            raise LLMError(LLMErrorType.NETWORK_ERROR, str(e), retryable=True) from e
        finally:
            await client.aclose()

    async def complete(self, messages: list[InputMessage]) -> LLMResponse:
        request_body = self._build_request_body(messages)
        retry_policy = self.config.retry_policy
        max_attempts = retry_policy.max_retries + 1
        attempt = 0

        logger.info("Requesting completion from %s (%d messages)", self.model_name, len(messages))

        while True:
            attempt += 1
            try:
                return await self._post_once(request_body)
            except LLMError as error:
                logger.warning(
                    "OpenRouter attempt %d/%d failed: %s (%s, retryable=%s)",
                    attempt,
                    max_attempts,
                    error,
                    error.error_type.value,
                    error.retryable,
                )
                if not error.retryable or attempt >= max_attempts:
                    raise

            delay = retry_policy.delay_for(attempt)
            if delay > 0:
                await asyncio.sleep(delay)
