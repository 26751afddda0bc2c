"""
Error normalization - turns transport/HTTP failures into safe user text.

Two entry points:
    error_from_status(status, response_message) -> AppError
        Used by the API client the moment a non-2xx response is observed.
    sanitize_error(error) -> str
        Used when rendering any failure to Discord. Internal diagnostics
        never appear in the returned text.
"""

import logging
from typing import Optional

from cloud_agent_bridge.domain.exceptions import (
    AppError,
    AuthError,
    NotFoundError,
    RateLimitedError,
    ServiceError,
    UnknownError,
    ValidationError,
)

logger = logging.getLogger(__name__)

HTTP_ERROR_MAP: dict[int, tuple[type[AppError], str]] = {
    400: (ValidationError, "Invalid request. Please check your input."),
    401: (AuthError, "Authentication failed. Please check your API credentials."),
    403: (AuthError, "Access denied. You may not have permission for this action."),
    404: (NotFoundError, "Resource not found. The agent may have been deleted."),
    429: (RateLimitedError, "Rate limited. Please wait a moment and try again."),
    500: (ServiceError, "The service is experiencing issues. Please try again later."),
    502: (ServiceError, "The service is temporarily unavailable. Please try again."),
    503: (ServiceError, "The service is under maintenance. Please try again later."),
}

UNKNOWN_HTTP_MESSAGE = "An error occurred while communicating with the service."
GENERIC_MESSAGE = "An unexpected error occurred. Please try again or check the logs."

NETWORK_MESSAGE = "Network error. Please check your connection and try again."
TIMEOUT_MESSAGE = "Request timed out. The operation may still be processing."

# Our own validation messages, passed through verbatim
_SAFE_FRAGMENTS = ("invalid agent id", "agent id is required")

# Lower-cased prefixes of validation messages, checked after the patterns below.
# ValidationError returns early as an AppError; these cover the same text when it
# arrives wrapped in a plain exception.
_SAFE_PREFIXES = (
    "prompt",
    "repository",
    "missing",
    "branch name",
    "invalid branch name",
    "invalid repository",
    "unknown subcommand",
)

# (substrings, safe message), checked in order
_TEXT_PATTERNS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("not found", "404"), "Agent not found. Please verify the agent ID exists."),
    (
        ("unauthorized", "401"),
        "Authentication failed. Please verify the API credentials configured for this bot.",
    ),
    (("rate limit", "429"), "Rate limited. Please wait before making more requests."),
    (("timeout", "timed out"), TIMEOUT_MESSAGE),
    (("network", "fetch failed", "connection"), NETWORK_MESSAGE),
)


def error_from_status(status: int, response_message: Optional[str] = None) -> AppError:
    """Map an HTTP status (plus the body's message, kept internal) to an AppError."""
    mapped = HTTP_ERROR_MAP.get(status)
    if mapped:
        error_cls, user_message = mapped
        return error_cls(user_message, response_message, status)

    return UnknownError(
        UNKNOWN_HTTP_MESSAGE,
        response_message or f"HTTP {status}",
        status,
    )


def sanitize_error(error: object) -> str:
    """Return a user-safe message for any error value."""
    if isinstance(error, AppError):
        if error.internal_message:
            logger.debug(
                "Suppressed internal error detail (%s): %s",
                error.kind.value,
                error.internal_message,
            )
        return error.user_message

    if isinstance(error, BaseException):
        text = str(error)
        lowered = text.lower()

        if any(fragment in lowered for fragment in _SAFE_FRAGMENTS):
            return text

        for needles, safe_message in _TEXT_PATTERNS:
            if any(needle in lowered for needle in needles):
                return safe_message

        if lowered.startswith(_SAFE_PREFIXES):
            return text

    return GENERIC_MESSAGE
