"""Bulk-overwrite the application's global commands with the declared ones."""

import logging
from typing import Optional

import httpx

from cloud_agent_bridge.adapters.discord.discord_commands import COMMANDS
from cloud_agent_bridge.config.settings import RegistrationSettings

logger = logging.getLogger(__name__)


class CommandRegistrationError(Exception):
    """Discord refused the command list."""

    def __init__(self, status_code: int, detail: object):
        super().__init__(f"Discord API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def commands_url(settings: RegistrationSettings) -> str:
    return (
        f"{settings.discord_api_base_url.rstrip('/')}"
        f"/applications/{settings.discord_application_id}/commands"
    )


def register_commands(
    settings: RegistrationSettings,
    commands: Optional[list[dict]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> list[dict]:
    """PUT the command list to Discord and return what Discord registered.

    Raises:
        CommandRegistrationError: on a non-2xx answer
        httpx.HTTPError: if Discord could not be reached
    """
    commands = COMMANDS if commands is None else commands
    url = commands_url(settings)
    logger.info("Registering %d commands at %s", len(commands), url)

    with httpx.Client(transport=transport, timeout=30.0) as client:
        response = client.put(
            url,
            json=commands,
            headers={"Authorization": f"Bot {settings.discord_bot_token}"},
        )

    if not response.is_success:
        try:
            detail = response.json()
        except ValueError:
            detail = response.text
        raise CommandRegistrationError(response.status_code, detail)

    return response.json()
