"""
Agent Entity - A cloud agent run, owned by the remote service.

These models mirror the cloud agent API's JSON (camelCase on the wire).
Nothing here is persisted; every request reads fresh state from the API.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for API payloads: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AgentStatus(str, Enum):
    RUNNING = "RUNNING"
    FINISHED = "FINISHED"
    STOPPED = "STOPPED"
    FAILED = "FAILED"


class AgentSource(ApiModel):
    repository: str
    ref: Optional[str] = None


class AgentTarget(ApiModel):
    branch_name: Optional[str] = None
    url: Optional[str] = None
    pr_url: Optional[str] = None
    auto_create_pr: Optional[bool] = None
    open_as_cursor_github_app: Optional[bool] = None
    skip_reviewer_request: Optional[bool] = None


class Agent(ApiModel):
    id: str
    name: str = ""
    # Kept as a plain string so an unexpected status never breaks parsing
    status: str
    source: AgentSource
    target: AgentTarget = Field(default_factory=AgentTarget)
    summary: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def known_status(self) -> Optional[AgentStatus]:
        try:
            return AgentStatus(self.status)
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        return self.name or self.id


class AgentList(ApiModel):
    agents: list[Agent] = []
    next_cursor: Optional[str] = None


class AgentRef(ApiModel):
    """Body returned by launch / follow-up / stop / delete."""

    id: str = ""


class ConversationMessage(ApiModel):
    id: str
    type: str  # "user_message" | "assistant_message"
    text: str = ""

    @property
    def is_user(self) -> bool:
        return self.type == "user_message"


class Conversation(ApiModel):
    id: str
    messages: list[ConversationMessage] = []


class Repository(ApiModel):
    owner: str
    name: str
    repository: str


class RepositoryList(ApiModel):
    repositories: list[Repository] = []


class ModelList(ApiModel):
    models: list[str] = []


class ApiKeyInfo(ApiModel):
    api_key_name: str
    created_at: Optional[datetime] = None
    user_email: str = ""


# ==================== REQUEST PAYLOADS ====================


class ImageDimension(ApiModel):
    width: int
    height: int


class PromptImage(ApiModel):
    data: str  # base64
    dimension: ImageDimension


class Prompt(ApiModel):
    text: str
    images: Optional[list[PromptImage]] = None


class LaunchTarget(ApiModel):
    branch_name: Optional[str] = None
    auto_create_pr: Optional[bool] = None
    open_as_cursor_github_app: Optional[bool] = None
    skip_reviewer_request: Optional[bool] = None


class Webhook(ApiModel):
    url: str
    secret: Optional[str] = None


class LaunchAgentRequest(ApiModel):
    prompt: Prompt
    source: AgentSource
    model: Optional[str] = None
    target: Optional[LaunchTarget] = None
    webhook: Optional[Webhook] = None


class FollowUpRequest(ApiModel):
    prompt: Prompt
