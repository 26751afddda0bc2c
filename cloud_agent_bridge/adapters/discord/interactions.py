"""
Discord Interaction payloads.

Only the fields the bridge reads are modelled; everything else Discord sends
is ignored. ``type`` fields stay plain ints so an interaction kind we do not
know about still parses and can be rejected by the router with a 400.

See: https://discord.com/developers/docs/interactions/receiving-and-responding
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


class InteractionResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    MODAL = 9


class ApplicationCommandType(IntEnum):
    CHAT_INPUT = 1
    USER = 2
    MESSAGE = 3


class OptionType(IntEnum):
    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10


class ComponentType(IntEnum):
    ACTION_ROW = 1
    TEXT_INPUT = 4


class TextInputStyle(IntEnum):
    SHORT = 1
    PARAGRAPH = 2


# Message flag: only the invoking user sees the reply
EPHEMERAL_FLAG = 1 << 6


class DiscordModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DiscordUser(DiscordModel):
    id: str
    username: str
    discriminator: Optional[str] = None
    global_name: Optional[str] = None
    bot: Optional[bool] = None
    avatar: Optional[str] = None


class DiscordAttachment(DiscordModel):
    id: str
    filename: str
    url: str
    content_type: Optional[str] = None
    size: int = 0


class DiscordEmbed(DiscordModel):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None


class DiscordMessage(DiscordModel):
    id: str
    content: Optional[str] = ""
    author: DiscordUser
    timestamp: str = ""
    attachments: list[DiscordAttachment] = []
    embeds: list[DiscordEmbed] = []
    # The message this one replies to, when Discord includes it
    referenced_message: Optional["DiscordMessage"] = None


OptionValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


class CommandOption(DiscordModel):
    name: str
    type: int
    value: Optional[OptionValue] = None
    options: Optional[list["CommandOption"]] = None


class ResolvedData(DiscordModel):
    messages: dict[str, DiscordMessage] = {}
    users: dict[str, DiscordUser] = {}


class ModalComponent(DiscordModel):
    """Action row (type 1, holds ``components``) or text input (type 4, holds ``value``)."""

    type: int
    custom_id: Optional[str] = None
    value: Optional[str] = None
    components: Optional[list["ModalComponent"]] = None


class InteractionData(DiscordModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[int] = None
    options: Optional[list[CommandOption]] = None
    # Context-menu commands
    target_id: Optional[str] = None
    resolved: Optional[ResolvedData] = None
    # Modal submissions
    custom_id: Optional[str] = None
    components: Optional[list[ModalComponent]] = None


class Interaction(DiscordModel):
    id: str = ""
    application_id: Optional[str] = None
    type: int
    token: Optional[str] = None
    guild_id: Optional[str] = None
    channel_id: Optional[str] = None
    message: Optional[DiscordMessage] = None
    data: Optional[InteractionData] = None

    def modal_values(self) -> dict[str, str]:
        """Collect ``custom_id -> value`` from every text input of a modal submission."""
        values: dict[str, str] = {}
        rows = self.data.components if self.data and self.data.components else []
        for row in rows:
            for component in row.components or []:
                if component.custom_id:
                    values[component.custom_id] = component.value or ""
        return values


@dataclass(frozen=True)
class CommandOptions:
    """Typed lookup over a subcommand's leaf options.

    A missing option and an option of the wrong type both read as ``None``.
    """

    options: tuple[CommandOption, ...] = ()

    @classmethod
    def of(cls, options: Optional[Iterable[CommandOption]]) -> "CommandOptions":
        return cls(tuple(options or ()))

    def _value(self, name: str) -> Optional[OptionValue]:
        for option in self.options:
            if option.name == name:
                return option.value
        return None

    def string(self, name: str) -> Optional[str]:
        value = self._value(name)
        return value if isinstance(value, str) else None

    def number(self, name: str) -> Optional[Union[int, float]]:
        value = self._value(name)
        # bool is an int subclass; a boolean is never a number here
        if isinstance(value, bool):
            return None
        return value if isinstance(value, (int, float)) else None

    def boolean(self, name: str) -> Optional[bool]:
        value = self._value(name)
        return value if isinstance(value, bool) else None
