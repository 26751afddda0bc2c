"""
AuthError - Raised when the remote service rejects our credential or permissions.
Maps to: HTTP 401 Unauthorized / 403 Forbidden
"""

from cloud_agent_bridge.domain.exceptions.app_error import AppError, ErrorKind


class AuthError(AppError):
    """Raised when the API credential is rejected."""

    kind = ErrorKind.UNAUTHORIZED
