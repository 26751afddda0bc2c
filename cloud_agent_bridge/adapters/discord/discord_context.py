"""
Discord Context Builder - merges a Discord message into the agent prompt.

Two sources of context:
    1. Reply context    - the user ran /agent create|followup while replying to
                          a message (``interaction.message.referenced_message``)
    2. Context menu     - the user right-clicked a message and chose "Ask Agent"
                          (``data.target_id`` looked up in ``data.resolved.messages``)

Two prompt templates, deliberately kept apart:
    build_prompt_with_context() - structured author/attachment/embed rendering
    build_modal_prompt()        - two raw text boxes from the "Ask Agent" modal
"""

from dataclasses import dataclass, field
from typing import Optional

from cloud_agent_bridge.adapters.discord.interactions import DiscordMessage, Interaction

CHANNEL_CONTEXT_HEADER = "=== CHANNEL CONTEXT ==="
MODAL_CONTEXT_HEADER = "=== DISCORD MESSAGE CONTEXT ==="
USER_TASK_HEADER = "=== USER TASK ==="
BOT_MARKER = " [BOT]"


@dataclass(frozen=True)
class MessageAuthor:
    id: str
    username: str
    global_name: Optional[str] = None
    bot: bool = False

    @property
    def display_name(self) -> str:
        return self.global_name or self.username


@dataclass(frozen=True)
class MessageAttachment:
    id: str
    filename: str
    url: str
    content_type: Optional[str] = None
    size: int = 0


@dataclass(frozen=True)
class ReferencedMessage:
    """Normalized view of a Discord message used as prompt context."""

    id: str
    content: str
    author: MessageAuthor
    timestamp: str = ""
    attachments: tuple[MessageAttachment, ...] = field(default_factory=tuple)
    embed_count: int = 0


def _project(message: DiscordMessage) -> ReferencedMessage:
    return ReferencedMessage(
        id=message.id,
        content=message.content or "",
        author=MessageAuthor(
            id=message.author.id,
            username=message.author.username,
            global_name=message.author.global_name,
            bot=bool(message.author.bot),
        ),
        timestamp=message.timestamp,
        attachments=tuple(
            MessageAttachment(
                id=attachment.id,
                filename=attachment.filename,
                url=attachment.url,
                content_type=attachment.content_type,
                size=attachment.size,
            )
            for attachment in message.attachments
        ),
        embed_count=len(message.embeds),
    )


def extract_referenced_message(interaction: Interaction) -> Optional[ReferencedMessage]:
    """Return the message the user was replying to, if Discord sent one."""
    referenced = interaction.message.referenced_message if interaction.message else None
    if referenced is None:
        return None
    return _project(referenced)


def extract_target_message(interaction: Interaction) -> Optional[ReferencedMessage]:
    """Return the right-clicked message of a message context-menu command."""
    data = interaction.data
    if data is None or not data.target_id or data.resolved is None:
        return None

    target = data.resolved.messages.get(data.target_id)
    if target is None:
        return None
    return _project(target)


def build_prompt_with_context(
    user_prompt: str, referenced_message: Optional[ReferencedMessage] = None
) -> str:
    """Prefix the user's prompt with the referenced message.

    Without a referenced message the prompt is returned unchanged.
    """
    if referenced_message is None:
        return user_prompt

    author = referenced_message.author
    bot_marker = BOT_MARKER if author.bot else ""

    parts = [CHANNEL_CONTEXT_HEADER, ""]
    parts.append(f"Message from @{author.display_name}{bot_marker}:")

    if referenced_message.content:
        parts.append(referenced_message.content)

    if referenced_message.attachments:
        parts.append("")
        parts.append("Attachments:")
        for attachment in referenced_message.attachments:
            parts.append(
                f"- {attachment.filename} ({attachment.content_type or 'unknown'}): {attachment.url}"
            )

    if referenced_message.embed_count > 0:
        parts.append("")
        parts.append(f"[Message contains {referenced_message.embed_count} embed(s)]")

    parts.extend(["", USER_TASK_HEADER, "", user_prompt])
    return "\n".join(parts)


def build_modal_prompt(message_context: str, user_prompt: str) -> str:
    """Compose the prompt for an "Ask Agent" modal submission."""
    return "\n".join(
        [
            MODAL_CONTEXT_HEADER,
            "",
            message_context,
            "",
            USER_TASK_HEADER,
            "",
            user_prompt,
        ]
    )
