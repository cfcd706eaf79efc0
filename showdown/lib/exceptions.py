"""Custom exceptions for Showdown."""

from typing import Any


class ShowdownError(Exception):
    """Base exception for all Showdown errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ShowdownError):
    """Raised at startup when required configuration is missing."""

    def __init__(self, message: str, setting: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.setting = setting


# =============================================================================
# LLM Errors
# =============================================================================


class LLMError(ShowdownError):
    """Base exception for LLM-related errors."""

    pass


class LLMRateLimitError(LLMError):
    """Raised when hitting API rate limits."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: float | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class LLMAuthenticationError(LLMError):
    """Raised when API authentication fails."""

    pass


class LLMConnectionError(LLMError):
    """Raised when unable to connect to LLM API."""

    pass


class LLMResponseParseError(LLMError):
    """Raised when the LLM response has no usable text."""

    def __init__(
        self,
        message: str = "Failed to parse LLM response",
        raw_response: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.raw_response = raw_response


# =============================================================================
# Commentary Errors
# =============================================================================


class CommentaryError(ShowdownError):
    """Base exception for commentary generation errors."""

    pass


class CommentaryUnavailableError(CommentaryError):
    """Raised when no commentary line could be produced for a round."""

    def __init__(
        self,
        message: str = "Commentary unavailable",
        reason: str | None = None,
        outcome: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.reason = reason
        self.outcome = outcome
