"""Discord interactions adapter."""

from cloud_agent_bridge.adapters.discord.discord_router import (
    InteractionRouter,
    OperationResult,
    RouterResponse,
)
from cloud_agent_bridge.adapters.discord.discord_routes import router as discord_router

__all__ = [
    "InteractionRouter",
    "OperationResult",
    "RouterResponse",
    "discord_router",
]
