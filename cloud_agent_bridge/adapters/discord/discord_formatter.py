"""Discord Response Formatter - Formats cloud agent results into Discord interaction replies."""

import logging
from datetime import datetime, timezone
from typing import Optional

from cloud_agent_bridge.adapters.discord.discord_context import ReferencedMessage
from cloud_agent_bridge.adapters.discord.interactions import (
    EPHEMERAL_FLAG,
    ComponentType,
    InteractionResponseType,
    TextInputStyle,
)
from cloud_agent_bridge.domain.entities import (
    Agent,
    AgentStatus,
    ApiKeyInfo,
    ConversationMessage,
    Repository,
)
from cloud_agent_bridge.services.error_normalizer import sanitize_error

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000
MAX_EMBED_DESCRIPTION_LENGTH = 4096
MAX_ERROR_LENGTH = 1900
TRUNCATION_SUFFIX = "... (truncated)"

MODAL_CUSTOM_ID_PREFIX = "ask_agent_modal:"
MODAL_FIELD_MESSAGE_CONTEXT = "message_context"
MODAL_FIELD_PROMPT = "prompt"
MODAL_FIELD_REPOSITORY = "repository"
MODAL_EXCERPT_LENGTH = 500

STATUS_EMOJI = {
    AgentStatus.RUNNING: "🔄",
    AgentStatus.FINISHED: "✅",
    AgentStatus.STOPPED: "⏸️",
    AgentStatus.FAILED: "❌",
}
UNKNOWN_STATUS_EMOJI = "❓"

COLOR_FINISHED = 0x00FF00
COLOR_FAILED = 0xFF0000
COLOR_DEFAULT = 0x0099FF

REPLY_CONTEXT_NOTE = "💬 *Context from referenced message included*"
MODAL_CONTEXT_NOTE = "💬 *Context from Discord message included*"


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


def _status_emoji(agent: Agent) -> str:
    status = agent.known_status
    return STATUS_EMOJI.get(status, UNKNOWN_STATUS_EMOJI) if status else UNKNOWN_STATUS_EMOJI


def _format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "unknown"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


class DiscordFormatter:
    """Builds Discord interaction response bodies."""

    # ==================== ENVELOPES ====================

    def pong(self) -> dict:
        return {"type": InteractionResponseType.PONG}

    def message(self, content: str, ephemeral: bool = False) -> dict:
        data: dict = {"content": content}
        if ephemeral:
            data["flags"] = EPHEMERAL_FLAG
        return self.reply(data)

    def reply(self, data: dict) -> dict:
        return {"type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, "data": data}

    def error_reply(self, error: object, ephemeral: bool = False) -> dict:
        return self.message(self.format_error(error), ephemeral=ephemeral)

    # ==================== PLAIN TEXT ====================

    def format_success(self, message: str) -> str:
        return f"✅ {message}"

    def format_error(self, error: object) -> str:
        """Render any failure as a safe error block. Internal details never appear."""
        message = sanitize_error(error)
        return f"❌ **Error**\n\n```\n{truncate(message, MAX_ERROR_LENGTH)}\n```"

    def format_agent_list(self, agents: list[Agent]) -> str:
        if not agents:
            return "📋 No agents found."

        lines = [f"📋 **Your Agents** ({len(agents)})\n\n"]
        for agent in agents:
            lines.append(f"{_status_emoji(agent)} **{agent.display_name}**\n")
            lines.append(f"   ID: `{agent.id}` | Status: {agent.status}\n")
            lines.append(f"   Created: {_format_timestamp(agent.created_at)}\n\n")

        return truncate("".join(lines), MAX_MESSAGE_LENGTH)

    def format_conversation(self, messages: list[ConversationMessage]) -> str:
        if not messages:
            return "💬 No conversation history yet."

        parts = ["💬 **Conversation History**\n\n"]
        for msg in messages:
            icon, role = ("👤", "You") if msg.is_user else ("🤖", "Agent")
            parts.append(f"{icon} **{role}:**\n{msg.text}\n\n")

        return truncate("".join(parts), MAX_MESSAGE_LENGTH)

    def format_models(self, models: list[str]) -> str:
        if not models:
            return "🤖 No models available."

        parts = ["🤖 **Available Models**\n\n"]
        parts.extend(f"• {model}\n" for model in models)
        parts.append(
            "\n💡 *Tip: Use model name in `/agent create` or leave empty for auto-selection*"
        )
        return truncate("".join(parts), MAX_MESSAGE_LENGTH)

    def format_repositories(self, repos: list[Repository]) -> str:
        if not repos:
            return "📦 No repositories found."

        parts = [
            "📦 **Accessible Repositories**\n\n",
            "⚠️ *This endpoint is rate-limited: 1 request/minute, 30/hour*\n\n",
        ]
        for repo in repos:
            parts.append(f"• **{repo.owner}/{repo.name}**\n  {repo.repository}\n\n")

        return truncate("".join(parts), MAX_MESSAGE_LENGTH)

    def format_api_key_info(self, info: ApiKeyInfo) -> str:
        return (
            "🔑 **API Key Information**\n\n"
            f"**Name:** {info.api_key_name}\n"
            f"**Email:** {info.user_email}\n"
            f"**Created:** {_format_timestamp(info.created_at)}\n\n"
            "✅ Your API key is valid and working!"
        )

    def format_agent_launched(self, agent: Agent, context_note: Optional[str] = None) -> str:
        text = (
            "Agent launched!\n\n"
            f"**ID:** `{agent.id}`\n"
            f"**Branch:** {agent.target.branch_name or 'auto-generated'}\n"
            f"**URL:** {agent.target.url or 'n/a'}"
        )
        if context_note:
            text += f"\n\n{context_note}"
        return self.format_success(text)

    def format_modal_launched(self, agent: Agent) -> str:
        return self.format_success(
            "Agent launched from message context!\n\n"
            f"**ID:** `{agent.id}`\n"
            f"**Branch:** {agent.target.branch_name or 'auto-generated'}\n"
            f"**URL:** {agent.target.url or 'n/a'}\n\n"
            f"{MODAL_CONTEXT_NOTE}"
        )

    def format_follow_up(self, agent_id: str, with_context: bool = False) -> str:
        text = (
            f"Follow-up added to agent `{agent_id}`\n\n"
            "The agent will continue working on your instruction."
        )
        if with_context:
            text += f"\n\n{REPLY_CONTEXT_NOTE}"
        return self.format_success(text)

    # ==================== EMBEDS ====================

    def format_agent_status(self, agent: Agent) -> dict:
        """Render one agent as a rich embed."""
        emoji = _status_emoji(agent)
        fields = [
            {"name": "Status", "value": f"{emoji} {agent.status}", "inline": True},
            {"name": "Repository", "value": agent.source.repository, "inline": True},
        ]
        if agent.source.ref:
            fields.append({"name": "Branch/Ref", "value": agent.source.ref, "inline": True})
        if agent.target.branch_name:
            fields.append(
                {"name": "Target Branch", "value": agent.target.branch_name, "inline": True}
            )
        if agent.target.pr_url:
            fields.append(
                {
                    "name": "Pull Request",
                    "value": f"[View PR]({agent.target.pr_url})",
                    "inline": True,
                }
            )

        description = (
            truncate(agent.summary, MAX_EMBED_DESCRIPTION_LENGTH)
            if agent.summary
            else "No summary available yet."
        )

        if agent.known_status is AgentStatus.FINISHED:
            color = COLOR_FINISHED
        elif agent.known_status is AgentStatus.FAILED:
            color = COLOR_FAILED
        else:
            color = COLOR_DEFAULT

        embed = {
            "title": f"{emoji} {agent.display_name}",
            "description": description,
            "color": color,
            "fields": fields,
            "footer": {"text": f"Agent ID: {agent.id}"},
        }
        if agent.target.url:
            embed["url"] = agent.target.url
        if agent.created_at:
            embed["timestamp"] = agent.created_at.isoformat()

        return {"embeds": [embed]}

    # ==================== MODAL ====================

    def format_ask_agent_modal(self, target: ReferencedMessage) -> dict:
        """Form shown after "Ask Agent"; custom_id carries the target message id."""
        excerpt = target.content
        if len(excerpt) > MODAL_EXCERPT_LENGTH:
            excerpt = excerpt[: MODAL_EXCERPT_LENGTH - 3] + "..."

        def text_input(**fields) -> dict:
            return {
                "type": ComponentType.ACTION_ROW,
                "components": [{"type": ComponentType.TEXT_INPUT, **fields}],
            }

        return {
            "type": InteractionResponseType.MODAL,
            "data": {
                "custom_id": f"{MODAL_CUSTOM_ID_PREFIX}{target.id}",
                "title": "Ask Agent About Message",
                "components": [
                    text_input(
                        custom_id=MODAL_FIELD_MESSAGE_CONTEXT,
                        label="Message Context (for reference)",
                        style=TextInputStyle.PARAGRAPH,
                        value=excerpt,
                        required=True,
                        max_length=1000,
                    ),
                    text_input(
                        custom_id=MODAL_FIELD_PROMPT,
                        label="Your Task/Instruction",
                        style=TextInputStyle.PARAGRAPH,
                        placeholder="e.g., Fix this bug, Implement this feature...",
                        required=True,
                        min_length=10,
                        max_length=2000,
                    ),
                    text_input(
                        custom_id=MODAL_FIELD_REPOSITORY,
                        label="GitHub Repository URL",
                        style=TextInputStyle.SHORT,
                        placeholder="https://github.com/owner/repo",
                        required=True,
                    ),
                ],
            },
        }
