"""
Discord application command declarations.

Registered once with ``register_commands.py``; the router dispatches on the
names declared here.
"""

from cloud_agent_bridge.adapters.discord.interactions import (
    ApplicationCommandType,
    OptionType,
)

AGENT_COMMAND_NAME = "agent"
ASK_AGENT_COMMAND_NAME = "Ask Agent"

# Permission: Manage Server (1 << 5)
MANAGE_SERVER_PERMISSION = str(1 << 5)

AGENT_ID_DESCRIPTION = "Agent ID (e.g., bc_abc123)"


def _option(option_type: OptionType, name: str, description: str, required: bool = False) -> dict:
    return {
        "type": option_type,
        "name": name,
        "description": description,
        "required": required,
    }


def _subcommand(name: str, description: str, options: list[dict] | None = None) -> dict:
    subcommand = {
        "type": OptionType.SUB_COMMAND,
        "name": name,
        "description": description,
    }
    if options:
        subcommand["options"] = options
    return subcommand


def _agent_id_option() -> dict:
    return _option(OptionType.STRING, "agent_id", AGENT_ID_DESCRIPTION, required=True)


AGENT_COMMAND: dict = {
    "name": AGENT_COMMAND_NAME,
    "description": "Manage Cursor Cloud Agents",
    "type": ApplicationCommandType.CHAT_INPUT,
    "default_member_permissions": MANAGE_SERVER_PERMISSION,
    "options": [
        _subcommand(
            "create",
            "Launch a new Cursor Cloud Agent",
            [
                _option(OptionType.STRING, "prompt", "The task or prompt for the agent", True),
                _option(OptionType.STRING, "repository", "GitHub repository URL", True),
                _option(OptionType.STRING, "model", "AI model to use (optional, defaults to auto)"),
                _option(OptionType.STRING, "ref", "Git branch or ref (optional, defaults to main)"),
                _option(OptionType.STRING, "branch_name", "Target branch name for changes (optional)"),
                _option(
                    OptionType.BOOLEAN,
                    "auto_create_pr",
                    "Automatically create a PR when finished (default: false)",
                ),
            ],
        ),
        _subcommand(
            "list",
            "List all your Cursor Cloud Agents",
            [_option(OptionType.INTEGER, "limit", "Number of agents to return (max 100)")],
        ),
        _subcommand("status", "Get the status of a specific agent", [_agent_id_option()]),
        _subcommand(
            "conversation", "View the conversation history of an agent", [_agent_id_option()]
        ),
        _subcommand(
            "followup",
            "Add a follow-up instruction to an agent",
            [
                _agent_id_option(),
                _option(OptionType.STRING, "prompt", "Follow-up instruction", True),
            ],
        ),
        _subcommand("stop", "Stop a running agent", [_agent_id_option()]),
        _subcommand("delete", "Permanently delete an agent", [_agent_id_option()]),
        _subcommand("models", "List available AI models for agents"),
        _subcommand("repos", "List accessible GitHub repositories (rate limited)"),
        _subcommand("apikey", "Show information about your Cursor API key"),
    ],
}

# Message context menu command: right-click a message to ask an agent about it
ASK_AGENT_COMMAND: dict = {
    "name": ASK_AGENT_COMMAND_NAME,
    "type": ApplicationCommandType.MESSAGE,
    "default_member_permissions": MANAGE_SERVER_PERMISSION,
}

COMMANDS: list[dict] = [AGENT_COMMAND, ASK_AGENT_COMMAND]

SUBCOMMAND_NAMES: tuple[str, ...] = tuple(
    option["name"] for option in AGENT_COMMAND["options"]
)
