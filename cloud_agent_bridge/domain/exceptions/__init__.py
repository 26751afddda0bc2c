"""
DOMAIN EXCEPTIONS - Error taxonomy

Validation and context assembly raise these immediately; the API client
raises the upstream kinds. The interaction router is the only place that
catches them and turns them into a Discord reply.
"""

from cloud_agent_bridge.domain.exceptions.app_error import AppError, ErrorKind
from cloud_agent_bridge.domain.exceptions.validation_error import ValidationError
from cloud_agent_bridge.domain.exceptions.auth_error import AuthError
from cloud_agent_bridge.domain.exceptions.not_found import NotFoundError
from cloud_agent_bridge.domain.exceptions.upstream_errors import (
    RateLimitedError,
    ServiceError,
    TransportError,
    UnknownError,
)
from cloud_agent_bridge.domain.exceptions.configuration_error import ConfigurationError

__all__ = [
    "AppError",
    "ErrorKind",
    "ValidationError",
    "AuthError",
    "NotFoundError",
    "RateLimitedError",
    "ServiceError",
    "TransportError",
    "UnknownError",
    "ConfigurationError",
]
