"""
Dishka DI Container Setup.

Dishka concepts:
- Provider: Class that defines how to create dependencies
- @provide: Decorator to mark factory methods
- Scope: Lifecycle of dependency (APP = singleton, REQUEST = per-request)

Flow:
  Container -> Settings -> CloudAgentClient (APP, closed at shutdown)
                                   |
                        InteractionRouter (REQUEST) -> discord route
"""

from typing import AsyncIterator, Optional

import httpx
from dishka import AsyncContainer, Provider, Scope, make_async_container, provide

from cloud_agent_bridge.adapters.discord.discord_formatter import DiscordFormatter
from cloud_agent_bridge.adapters.discord.discord_router import InteractionRouter
from cloud_agent_bridge.config.settings import Settings
from cloud_agent_bridge.services.cloud_agent_client import CloudAgentClient


class AppProvider(Provider):
    """
    Application dependency provider.

    Settings are loaded once by the caller and handed in; nothing here reads
    the environment. ``transport`` replaces the HTTP transport of the cloud
    agent client (tests pass an ``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self._settings = settings
        self._transport = transport

    # ==================== CONFIG ====================

    @provide(scope=Scope.APP)
    def get_settings(self) -> Settings:
        return self._settings

    # ==================== CLIENTS ====================

    @provide(scope=Scope.APP)
    async def get_cloud_agent_client(
        self, settings: Settings
    ) -> AsyncIterator[CloudAgentClient]:
        """
        Provide the cloud agent API client (singleton, app-scoped).

        - One connection pool shared across all requests
        - Closed when the container closes (app shutdown)
        """
        client = CloudAgentClient(
            base_url=settings.cursor_api_base_url,
            api_token=settings.cursor_api_token,
            max_retries=settings.cursor_api_max_retries,
            base_delay=settings.cursor_api_base_delay,
            max_delay=settings.cursor_api_max_delay,
            timeout=settings.cursor_api_timeout,
            transport=self._transport,
        )
        yield client
        await client.aclose()

    # ==================== DISCORD ====================

    @provide(scope=Scope.APP)
    def get_discord_formatter(self) -> DiscordFormatter:
        return DiscordFormatter()

    @provide(scope=Scope.REQUEST)
    def get_interaction_router(
        self, client: CloudAgentClient, formatter: DiscordFormatter
    ) -> InteractionRouter:
        return InteractionRouter(client=client, formatter=formatter)


def create_container(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> AsyncContainer:
    """Create the DI container. Call this ONCE per application instance."""
    return make_async_container(AppProvider(settings, transport=transport))
