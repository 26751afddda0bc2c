"""Discord interaction and cloud agent API payloads shared by the tests."""

from typing import Optional

AGENT_ID = "bc_abc123"

AGENT = {
    "id": AGENT_ID,
    "name": "Fix login bug",
    "status": "RUNNING",
    "source": {"repository": "https://github.com/acme/web", "ref": "main"},
    "target": {
        "branchName": "cursor/fix-login-bug",
        "url": f"https://cursor.com/agents?id={AGENT_ID}",
        "autoCreatePr": False,
    },
    "summary": "Working on the login form",
    "createdAt": "2024-01-15T10:30:00Z",
}


def user(username="alice", user_id="111", bot=False, global_name=None) -> dict:
    data = {"id": user_id, "username": username, "discriminator": "0"}
    if bot:
        data["bot"] = True
    if global_name:
        data["global_name"] = global_name
    return data


def message(
    content="It crashes on submit",
    message_id="900",
    author: Optional[dict] = None,
    attachments: Optional[list] = None,
    embeds: Optional[list] = None,
    referenced: Optional[dict] = None,
) -> dict:
    data = {
        "id": message_id,
        "content": content,
        "author": author or user(),
        "timestamp": "2024-01-15T10:00:00+00:00",
        "attachments": attachments or [],
        "embeds": embeds or [],
    }
    if referenced is not None:
        data["referenced_message"] = referenced
    return data


def option(name: str, value, option_type: int = 3) -> dict:
    return {"name": name, "type": option_type, "value": value}


def agent_command(
    subcommand: Optional[str],
    options: Optional[list] = None,
    referenced: Optional[dict] = None,
    interaction_id: str = "1234567890",
) -> dict:
    data = {"id": "42", "name": "agent", "type": 1}
    if subcommand is not None:
        sub = {"name": subcommand, "type": 1}
        if options:
            sub["options"] = options
        data["options"] = [sub]

    interaction = {
        "id": interaction_id,
        "application_id": "app-1",
        "type": 2,
        "token": "interaction-token",
        "data": data,
    }
    if referenced is not None:
        interaction["message"] = message(
            content="", message_id="901", author=user("bob", "222"), referenced=referenced
        )
    return interaction


def ask_agent_command(target: Optional[dict] = None) -> dict:
    data = {"id": "43", "name": "Ask Agent", "type": 3}
    if target is not None:
        data["target_id"] = target["id"]
        data["resolved"] = {"messages": {target["id"]: target}}
    return {"id": "1234567891", "type": 2, "token": "interaction-token", "data": data}


def modal_submit(
    values: dict,
    custom_id: str = "ask_agent_modal:900",
) -> dict:
    rows = [
        {"type": 1, "components": [{"type": 4, "custom_id": key, "value": value}]}
        for key, value in values.items()
    ]
    return {
        "id": "1234567892",
        "type": 5,
        "token": "interaction-token",
        "data": {"custom_id": custom_id, "components": rows},
    }
