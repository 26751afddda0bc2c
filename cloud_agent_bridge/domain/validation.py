"""
Input validation for fields typed by Discord users.

Every ``validate_*`` function takes the raw (possibly missing) value and
returns the normalized value, or raises ``ValidationError`` with a message
that is safe to show back to the user.
"""

import math
import re
from typing import Optional

from cloud_agent_bridge.domain.exceptions import ValidationError

AGENT_ID_PREFIX = "bc"

# bc_ followed by ASCII letters/digits only
AGENT_ID_PATTERN = re.compile(rf"{AGENT_ID_PREFIX}_[a-zA-Z0-9]+")

REPOSITORY_HOST = "github.com"
_HTTPS_REPOSITORY_PATTERN = re.compile(
    rf"https://{re.escape(REPOSITORY_HOST)}/[\w.-]+/[\w.-]+", re.ASCII
)
_SHORT_REPOSITORY_PATTERN = re.compile(r"[\w.-]+/[\w.-]+", re.ASCII)

BRANCH_NAME_PATTERN = re.compile(r"[\w./-]+", re.ASCII)

MAX_PROMPT_LENGTH = 10000
MAX_BRANCH_NAME_LENGTH = 255

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def is_valid_agent_id(agent_id: str) -> bool:
    return AGENT_ID_PATTERN.fullmatch(agent_id) is not None


def validate_agent_id(agent_id: Optional[str]) -> str:
    """Validate an agent id such as ``bc_abc123``.

    Raises:
        ValidationError: if missing or malformed
    """
    if not agent_id:
        raise ValidationError("Agent ID is required")

    if not is_valid_agent_id(agent_id):
        raise ValidationError(
            f"Invalid agent ID format. Expected format: {AGENT_ID_PREFIX}_[alphanumeric] "
            f"(e.g., {AGENT_ID_PREFIX}_abc123)"
        )

    return agent_id


def is_valid_repository_url(url: str) -> bool:
    """Accept ``https://github.com/owner/repo`` and ``owner/repo``."""
    return bool(
        _HTTPS_REPOSITORY_PATTERN.fullmatch(url)
        or _SHORT_REPOSITORY_PATTERN.fullmatch(url)
    )


def validate_repository(repository: Optional[str]) -> str:
    if not repository:
        raise ValidationError("Repository is required")

    if not is_valid_repository_url(repository):
        raise ValidationError(
            f"Invalid repository format. Use owner/repo or https://{REPOSITORY_HOST}/owner/repo"
        )

    return repository


def validate_prompt(prompt: Optional[str]) -> str:
    """Prompt must be non-empty and at most MAX_PROMPT_LENGTH characters (inclusive)."""
    if not prompt:
        raise ValidationError("Prompt is required")

    if len(prompt) > MAX_PROMPT_LENGTH:
        raise ValidationError(
            f"Prompt exceeds maximum length of {MAX_PROMPT_LENGTH} characters"
        )

    return prompt


def validate_branch_name(branch_name: Optional[str]) -> Optional[str]:
    """Validate an optional target branch name. Missing input returns None."""
    if not branch_name:
        return None

    if len(branch_name) > MAX_BRANCH_NAME_LENGTH:
        raise ValidationError(
            f"Branch name exceeds maximum length of {MAX_BRANCH_NAME_LENGTH} characters"
        )

    if not BRANCH_NAME_PATTERN.fullmatch(branch_name):
        raise ValidationError(
            "Invalid branch name. Use only alphanumeric characters, underscores, "
            "dots, hyphens, and forward slashes."
        )

    return branch_name


def validate_limit(limit: Optional[float], max_value: int = MAX_LIMIT) -> int:
    """Clamp a page size into [1, max_value]. Never raises."""
    if limit is None or math.isnan(limit):
        return DEFAULT_LIMIT
    if limit < 1:
        return 1
    if limit > max_value:
        return max_value
    return math.floor(limit)
