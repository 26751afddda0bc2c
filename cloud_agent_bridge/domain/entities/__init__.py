"""Remote cloud agent entities and request payloads."""

from cloud_agent_bridge.domain.entities.agent import (
    Agent,
    AgentList,
    AgentRef,
    AgentSource,
    AgentStatus,
    AgentTarget,
    ApiKeyInfo,
    Conversation,
    ConversationMessage,
    FollowUpRequest,
    ImageDimension,
    LaunchAgentRequest,
    LaunchTarget,
    ModelList,
    Prompt,
    PromptImage,
    Repository,
    RepositoryList,
    Webhook,
)

__all__ = [
    "Agent",
    "AgentList",
    "AgentRef",
    "AgentSource",
    "AgentStatus",
    "AgentTarget",
    "ApiKeyInfo",
    "Conversation",
    "ConversationMessage",
    "FollowUpRequest",
    "ImageDimension",
    "LaunchAgentRequest",
    "LaunchTarget",
    "ModelList",
    "Prompt",
    "PromptImage",
    "Repository",
    "RepositoryList",
    "Webhook",
]
