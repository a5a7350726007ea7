"""LLM client exceptions.

Summarization is optional, so the service layer catches these and
returns the screening result without prose.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM client errors."""


class LLMUnavailableError(LLMError):
    """Raised when the LLM service cannot be reached.

    This includes connection errors and exhausted retries.
    """


class LLMTimeoutError(LLMUnavailableError):
    """Raised when an LLM request times out."""


class LLMResponseError(LLMError):
    """Raised when the LLM returns an error status or an unusable body."""


class LLMRateLimitError(LLMError):
    """Raised when the LLM service rate limits the request."""


class LLMConfigurationError(LLMError):
    """Raised when the LLM client is misconfigured (e.g. no API key)."""
