"""
Unit tests for error normalization.

Run with: pytest tests/test_error_normalizer.py -v
"""

import pytest

from cloud_agent_bridge.domain.exceptions import (
    AppError,
    AuthError,
    ErrorKind,
    NotFoundError,
    RateLimitedError,
    ServiceError,
    TransportError,
    UnknownError,
    ValidationError,
)
from cloud_agent_bridge.services.error_normalizer import (
    GENERIC_MESSAGE,
    NETWORK_MESSAGE,
    TIMEOUT_MESSAGE,
    UNKNOWN_HTTP_MESSAGE,
    error_from_status,
    sanitize_error,
)


class TestErrorFromStatus:
    @pytest.mark.parametrize(
        "status, error_cls, kind",
        [
            (400, ValidationError, ErrorKind.VALIDATION),
            (401, AuthError, ErrorKind.UNAUTHORIZED),
            (403, AuthError, ErrorKind.UNAUTHORIZED),
            (404, NotFoundError, ErrorKind.NOT_FOUND),
            (429, RateLimitedError, ErrorKind.RATE_LIMITED),
            (500, ServiceError, ErrorKind.SERVICE_UNAVAILABLE),
            (502, ServiceError, ErrorKind.SERVICE_UNAVAILABLE),
            (503, ServiceError, ErrorKind.SERVICE_UNAVAILABLE),
        ],
    )
    def test_mapped_statuses(self, status, error_cls, kind):
        error = error_from_status(status, "raw upstream message")
        assert isinstance(error, error_cls)
        assert error.kind is kind
        assert error.status_code == status
        assert error.internal_message == "raw upstream message"
        assert "raw upstream message" not in error.user_message

    def test_404_message(self):
        assert error_from_status(404).user_message == (
            "Resource not found. The agent may have been deleted."
        )

    @pytest.mark.parametrize("status", [418, 504, 409])
    def test_unmapped_status(self, status):
        error = error_from_status(status)
        assert isinstance(error, UnknownError)
        assert error.user_message == UNKNOWN_HTTP_MESSAGE
        assert error.internal_message == f"HTTP {status}"
        assert error.status_code == status


class TestSanitizeError:
    def test_app_error_shows_only_user_message(self):
        error = ServiceError("Try again later.", "db-primary password=hunter2 refused")
        assert sanitize_error(error) == "Try again later."

    def test_transport_error_is_an_app_error(self):
        assert sanitize_error(TransportError(NETWORK_MESSAGE, "ConnectError(...)")) == NETWORK_MESSAGE

    def test_app_error_with_explicit_kind(self):
        error = AppError("Nope.", kind=ErrorKind.NOT_FOUND)
        assert error.kind is ErrorKind.NOT_FOUND
        assert sanitize_error(error) == "Nope."

    @pytest.mark.parametrize(
        "text",
        ["Invalid branch name. Use letters, numbers, dots, slashes and hyphens", "Unknown subcommand: bogus"],
    )
    def test_validation_error_message_is_returned_as_is(self, text):
        assert sanitize_error(ValidationError(text, "raw option tree")) == text

    @pytest.mark.parametrize(
        "text",
        [
            "Invalid agent ID format. Expected format: bc_[alphanumeric] (e.g., bc_abc123)",
            "Agent ID is required",
        ],
    )
    def test_agent_id_messages_pass_through(self, text):
        assert sanitize_error(Exception(text)) == text

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Agent bc_1 not found", "Agent not found. Please verify the agent ID exists."),
            ("HTTP 404", "Agent not found. Please verify the agent ID exists."),
            (
                "401 Unauthorized",
                "Authentication failed. Please verify the API credentials configured for this bot.",
            ),
            ("rate limit exceeded", "Rate limited. Please wait before making more requests."),
            ("Request timeout after 30s", TIMEOUT_MESSAGE),
            ("socket timed out", TIMEOUT_MESSAGE),
            ("fetch failed", NETWORK_MESSAGE),
            ("Connection reset by peer", NETWORK_MESSAGE),
        ],
    )
    def test_text_patterns(self, text, expected):
        assert sanitize_error(Exception(text)) == expected

    def test_patterns_are_checked_before_safe_prefixes(self):
        expected = "Agent not found. Please verify the agent ID exists."
        assert sanitize_error(Exception("Repository not found")) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "Prompt is required",
            "Repository is required",
            "Missing subcommand",
            "Branch name exceeds maximum length of 255 characters",
            "Invalid repository format. Use owner/repo",
            "Unknown subcommand: bogus",
        ],
    )
    def test_validation_prefixes_pass_through(self, text):
        assert sanitize_error(Exception(text)) == text

    @pytest.mark.parametrize(
        "value",
        [Exception("KeyError at /srv/app/db.py line 12"), "plain string", None, 42],
    )
    def test_everything_else_is_generic(self, value):
        assert sanitize_error(value) == GENERIC_MESSAGE
