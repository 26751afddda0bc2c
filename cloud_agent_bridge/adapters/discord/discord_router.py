"""
Discord Interaction Router - classifies an interaction and runs one operation.

STATES:
-------
    PING                                 -> PONG, nothing else
    APPLICATION_COMMAND "Ask Agent"      -> modal form (no API call)
    APPLICATION_COMMAND "agent" <sub>    -> validate -> [context] -> API -> reply
    MODAL_SUBMIT "ask_agent_modal:<id>"  -> validate -> compose -> launch -> reply
    anything else                        -> 400 {"error": ...}

Every subcommand and the modal submission run through ``_execute``, the only
place failures are caught. It returns an ``OperationResult`` that ``_render``
turns into either the success reply or a sanitized error message. Command
failures therefore always reach Discord as a normal message, never as a 5xx.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from cloud_agent_bridge.adapters.discord.discord_commands import (
    AGENT_COMMAND_NAME,
    ASK_AGENT_COMMAND_NAME,
    SUBCOMMAND_NAMES,
)
from cloud_agent_bridge.adapters.discord.discord_context import (
    build_modal_prompt,
    build_prompt_with_context,
    extract_referenced_message,
    extract_target_message,
)
from cloud_agent_bridge.adapters.discord.discord_formatter import (
    MODAL_CUSTOM_ID_PREFIX,
    MODAL_FIELD_MESSAGE_CONTEXT,
    MODAL_FIELD_PROMPT,
    MODAL_FIELD_REPOSITORY,
    REPLY_CONTEXT_NOTE,
    DiscordFormatter,
)
from cloud_agent_bridge.adapters.discord.interactions import (
    CommandOptions,
    Interaction,
    InteractionType,
)
from cloud_agent_bridge.domain.entities import (
    AgentSource,
    LaunchAgentRequest,
    LaunchTarget,
    Prompt,
)
from cloud_agent_bridge.domain.exceptions import AppError, ValidationError
from cloud_agent_bridge.domain.validation import (
    validate_agent_id,
    validate_branch_name,
    validate_limit,
    validate_prompt,
    validate_repository,
)
from cloud_agent_bridge.observability.metrics import (
    increment_command,
    increment_error,
    increment_interaction,
)
from cloud_agent_bridge.services.cloud_agent_client import CloudAgentClient

logger = logging.getLogger(__name__)

SubcommandHandler = Callable[[Interaction, CommandOptions], Awaitable[dict]]


@dataclass(frozen=True)
class RouterResponse:
    """HTTP status plus JSON body to send back to Discord."""

    body: dict
    status_code: int = 200


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one operation: a reply body or the error that stopped it."""

    reply: Optional[dict] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, reply: dict) -> "OperationResult":
        return cls(reply=reply)

    @classmethod
    def failure(cls, error: Exception) -> "OperationResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


def _client_error(message: str) -> RouterResponse:
    return RouterResponse({"error": message}, status_code=400)


class InteractionRouter:
    """Routes Discord interactions to cloud agent API operations."""

    def __init__(
        self,
        client: CloudAgentClient,
        formatter: Optional[DiscordFormatter] = None,
    ):
        self._client = client
        self._formatter = formatter or DiscordFormatter()
        self._handlers: dict[str, SubcommandHandler] = {
            "create": self._create,
            "list": self._list,
            "status": self._status,
            "conversation": self._conversation,
            "followup": self._followup,
            "stop": self._stop,
            "delete": self._delete,
            "models": self._models,
            "repos": self._repos,
            "apikey": self._apikey,
        }

    async def handle(self, interaction: Interaction) -> RouterResponse:
        if interaction.type == InteractionType.PING:
            increment_interaction("ping")
            return RouterResponse(self._formatter.pong())

        if interaction.type == InteractionType.APPLICATION_COMMAND:
            return await self._handle_command(interaction)

        if interaction.type == InteractionType.MODAL_SUBMIT:
            custom_id = interaction.data.custom_id if interaction.data else None
            if custom_id and custom_id.startswith(MODAL_CUSTOM_ID_PREFIX):
                increment_interaction("modal_submit")
                result = await self._execute(
                    "ask_agent_modal", lambda: self._submit_ask_agent_modal(interaction)
                )
                return RouterResponse(self._render(result))
            logger.info("[DISCORD] Unmatched modal submission: %s", custom_id)
            increment_interaction("unknown")
            return _client_error("Unknown modal submission")

        logger.info("[DISCORD] Unknown interaction type: %s", interaction.type)
        increment_interaction("unknown")
        return _client_error("Unknown interaction type")

    # ==================== CLASSIFICATION ====================

    async def _handle_command(self, interaction: Interaction) -> RouterResponse:
        data = interaction.data
        if data is None:
            increment_interaction("unknown")
            return _client_error("Missing command data")

        if data.name == ASK_AGENT_COMMAND_NAME:
            increment_interaction("context_menu")
            return self._open_ask_agent_modal(interaction)

        if data.name != AGENT_COMMAND_NAME:
            logger.info("[DISCORD] Unknown command: %s", data.name)
            increment_interaction("unknown")
            return _client_error("Unknown command")

        subcommand = data.options[0] if data.options else None
        if subcommand is None:
            increment_interaction("unknown")
            return _client_error("Missing subcommand")

        increment_interaction("command")
        options = CommandOptions.of(subcommand.options)
        handler = self._handlers.get(subcommand.name)
        logger.info("[DISCORD] /%s %s", AGENT_COMMAND_NAME, subcommand.name)

        if handler is None:
            result = await self._execute(
                "unknown", lambda: self._unknown_subcommand(subcommand.name)
            )
        else:
            result = await self._execute(
                subcommand.name, lambda: handler(interaction, options)
            )
        return RouterResponse(self._render(result))

    def _open_ask_agent_modal(self, interaction: Interaction) -> RouterResponse:
        target = extract_target_message(interaction)
        if target is None:
            logger.warning("[DISCORD] Ask Agent invoked without a resolvable target message")
            return RouterResponse(
                self._formatter.error_reply(
                    ValidationError("Could not retrieve the target message"),
                    ephemeral=True,
                )
            )
        return RouterResponse(self._formatter.format_ask_agent_modal(target))

    # ==================== BOUNDARY ====================

    async def _execute(
        self, operation: str, action: Callable[[], Awaitable[dict]]
    ) -> OperationResult:
        try:
            reply = await action()
        except Exception as exc:
            if isinstance(exc, AppError):
                logger.warning(
                    "[DISCORD] %s failed (%s): %s",
                    operation,
                    exc.kind.value,
                    exc.internal_message or exc.user_message,
                )
                increment_error(exc.kind.value)
            else:
                logger.exception("[DISCORD] %s failed unexpectedly", operation)
                increment_error("unhandled")
            increment_command(operation, "error")
            return OperationResult.failure(exc)

        increment_command(operation, "success")
        return OperationResult.success(reply)

    def _render(self, result: OperationResult) -> dict:
        if result.ok:
            return result.reply
        return self._formatter.error_reply(result.error)

    async def _unknown_subcommand(self, name: str) -> dict:
        raise ValidationError(
            f"Unknown subcommand: {name}. Available: {', '.join(SUBCOMMAND_NAMES)}"
        )

    # ==================== SUBCOMMANDS ====================

    async def _create(self, interaction: Interaction, options: CommandOptions) -> dict:
        prompt = validate_prompt(options.string("prompt"))
        repository = validate_repository(options.string("repository"))
        model = options.string("model")
        ref = options.string("ref")
        branch_name = validate_branch_name(options.string("branch_name"))
        auto_create_pr = options.boolean("auto_create_pr")

        referenced = extract_referenced_message(interaction)
        full_prompt = build_prompt_with_context(prompt, referenced)

        target = None
        if branch_name or auto_create_pr is not None:
            target = LaunchTarget(branch_name=branch_name, auto_create_pr=auto_create_pr)

        launched = await self._client.launch_agent(
            LaunchAgentRequest(
                prompt=Prompt(text=full_prompt),
                source=AgentSource(repository=repository, ref=ref),
                model=model,
                target=target,
            )
        )
        agent = await self._client.get_agent(launched.id)
        logger.info("[DISCORD] Launched agent %s on %s", agent.id, repository)

        note = REPLY_CONTEXT_NOTE if referenced else None
        return self._formatter.message(self._formatter.format_agent_launched(agent, note))

    async def _list(self, interaction: Interaction, options: CommandOptions) -> dict:
        limit = validate_limit(options.number("limit"))
        result = await self._client.list_agents(limit=limit)
        return self._formatter.message(self._formatter.format_agent_list(result.agents))

    async def _status(self, interaction: Interaction, options: CommandOptions) -> dict:
        agent_id = validate_agent_id(options.string("agent_id"))
        agent = await self._client.get_agent(agent_id)
        return self._formatter.reply(self._formatter.format_agent_status(agent))

    async def _conversation(self, interaction: Interaction, options: CommandOptions) -> dict:
        agent_id = validate_agent_id(options.string("agent_id"))
        conversation = await self._client.get_conversation(agent_id)
        return self._formatter.message(
            self._formatter.format_conversation(conversation.messages)
        )

    async def _followup(self, interaction: Interaction, options: CommandOptions) -> dict:
        agent_id = validate_agent_id(options.string("agent_id"))
        prompt = validate_prompt(options.string("prompt"))

        referenced = extract_referenced_message(interaction)
        full_prompt = build_prompt_with_context(prompt, referenced)

        await self._client.follow_up(agent_id, full_prompt)
        return self._formatter.message(
            self._formatter.format_follow_up(agent_id, with_context=referenced is not None)
        )

    async def _stop(self, interaction: Interaction, options: CommandOptions) -> dict:
        agent_id = validate_agent_id(options.string("agent_id"))
        await self._client.stop_agent(agent_id)
        return self._formatter.message(
            self._formatter.format_success(f"Agent `{agent_id}` stopped.")
        )

    async def _delete(self, interaction: Interaction, options: CommandOptions) -> dict:
        agent_id = validate_agent_id(options.string("agent_id"))
        await self._client.delete_agent(agent_id)
        return self._formatter.message(
            self._formatter.format_success(f"Agent `{agent_id}` permanently deleted.")
        )

    async def _models(self, interaction: Interaction, options: CommandOptions) -> dict:
        result = await self._client.list_models()
        return self._formatter.message(self._formatter.format_models(result.models))

    async def _repos(self, interaction: Interaction, options: CommandOptions) -> dict:
        result = await self._client.list_repositories()
        return self._formatter.message(
            self._formatter.format_repositories(result.repositories)
        )

    async def _apikey(self, interaction: Interaction, options: CommandOptions) -> dict:
        info = await self._client.get_api_key_info()
        return self._formatter.message(
            self._formatter.format_api_key_info(info), ephemeral=True
        )

    # ==================== MODAL ====================

    async def _submit_ask_agent_modal(self, interaction: Interaction) -> dict:
        target_message_id = interaction.data.custom_id[len(MODAL_CUSTOM_ID_PREFIX):]
        values = interaction.modal_values()

        prompt = validate_prompt(values.get(MODAL_FIELD_PROMPT))
        repository = validate_repository(values.get(MODAL_FIELD_REPOSITORY))
        full_prompt = build_modal_prompt(
            values.get(MODAL_FIELD_MESSAGE_CONTEXT, ""), prompt
        )

        launched = await self._client.launch_agent(
            LaunchAgentRequest(
                prompt=Prompt(text=full_prompt),
                source=AgentSource(repository=repository),
            )
        )
        agent = await self._client.get_agent(launched.id)
        logger.info(
            "[DISCORD] Launched agent %s from message %s", agent.id, target_message_id
        )
        return self._formatter.message(self._formatter.format_modal_launched(agent))
