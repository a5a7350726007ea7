"""Screening pipeline exceptions.

These exceptions are caught by the endpoint layer and converted to
structured error payloads. Component-local failures (a single page or
image fetch) never raise; they degrade to empty values instead.
"""

from __future__ import annotations


class ScreeningError(Exception):
    """Base exception for screening errors."""


class ConfigurationError(ScreeningError):
    """Raised when a required collaborator credential is missing.

    Fails the whole request; nothing can be searched without it.
    """


class UpstreamUnavailableError(ScreeningError):
    """Raised when the search or location collaborator cannot be used.

    Covers timeouts, transport errors and non-success statuses. The
    orchestrator recovers through the fallback query or by dropping the
    location bias, otherwise the category is reported as failed.
    """


class MalformedInputError(ScreeningError):
    """Raised when the request is missing required fields after cleaning."""
