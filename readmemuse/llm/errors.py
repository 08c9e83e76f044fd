from enum import StrEnum


class LLMErrorType(StrEnum):
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    AUTH_FAILED = "auth_failed"
    INVALID_REQUEST = "invalid_request"
    INVALID_RESPONSE = "invalid_response"
    PROVIDER_ERROR = "provider_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


class LLMError(Exception):
    def __init__(
        self,
        error_type: LLMErrorType,
        message: str,
        retryable: bool = False,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.retryable = retryable
        self.details = details or {}


class AuthenticationError(LLMError):
    def __init__(self, message: str):
        super().__init__(LLMErrorType.AUTH_FAILED, message, retryable=False)


class RateLimitedError(LLMError):
    def __init__(self, message: str, retry_after_sec: int | None = None):
        super().__init__(
            LLMErrorType.RATE_LIMITED,
            message,
            retryable=True,
            details={"retry_after_sec": retry_after_sec},
        )


class LLMTimeoutError(LLMError):
    def __init__(self, message: str):
        super().__init__(LLMErrorType.TIMEOUT, message, retryable=True)


class InvalidRequestError(LLMError):
    """Malformed or rejected request (HTTP 400)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(LLMErrorType.INVALID_REQUEST, message, retryable=False, details=details)


class ProviderError(LLMError):
    """Provider-side failure (HTTP 5xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            LLMErrorType.PROVIDER_ERROR,
            message,
            retryable=True,
            details={"status_code": status_code},
        )
