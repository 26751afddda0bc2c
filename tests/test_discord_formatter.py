"""
Unit tests for Discord reply formatting.

Run with: pytest tests/test_discord_formatter.py -v
"""

import pytest

from cloud_agent_bridge.adapters.discord.discord_context import MessageAuthor, ReferencedMessage
from cloud_agent_bridge.adapters.discord.discord_formatter import (
    COLOR_FAILED,
    COLOR_FINISHED,
    MAX_MESSAGE_LENGTH,
    MODAL_CONTEXT_NOTE,
    REPLY_CONTEXT_NOTE,
    DiscordFormatter,
    truncate,
)
from cloud_agent_bridge.domain.entities import Agent, ApiKeyInfo, ConversationMessage, Repository
from cloud_agent_bridge.domain.exceptions import ServiceError, ValidationError
from cloud_agent_bridge.services.error_normalizer import GENERIC_MESSAGE

from payloads import AGENT, AGENT_ID


@pytest.fixture()
def formatter():
    return DiscordFormatter()


def _agent(**overrides) -> Agent:
    return Agent.model_validate({**AGENT, **overrides})


class TestEnvelopes:
    def test_pong(self, formatter):
        assert formatter.pong() == {"type": 1}

    def test_message(self, formatter):
        assert formatter.message("hi") == {"type": 4, "data": {"content": "hi"}}

    def test_ephemeral_message(self, formatter):
        assert formatter.message("secret", ephemeral=True)["data"]["flags"] == 64

    def test_error_reply_hides_internal_detail(self, formatter):
        reply = formatter.error_reply(ServiceError("Please try again later.", "pg: password=hunter2"))
        content = reply["data"]["content"]
        assert content == "❌ **Error**\n\n```\nPlease try again later.\n```"
        assert "hunter2" not in content

    def test_error_reply_for_unexpected_exception(self, formatter):
        reply = formatter.error_reply(RuntimeError("NoneType has no attribute 'id'"))
        assert GENERIC_MESSAGE in reply["data"]["content"]


class TestTruncate:
    def test_short_text_untouched(self):
        assert truncate("abc", 10) == "abc"

    def test_long_text_cut_with_suffix(self):
        result = truncate("x" * 3000, MAX_MESSAGE_LENGTH)
        assert len(result) == MAX_MESSAGE_LENGTH
        assert result.endswith("... (truncated)")


class TestTextReplies:
    def test_success_prefix(self, formatter):
        assert formatter.format_success("Done") == "✅ Done"

    def test_empty_agent_list(self, formatter):
        assert formatter.format_agent_list([]) == "📋 No agents found."

    def test_agent_list(self, formatter):
        text = formatter.format_agent_list(
            [_agent(), _agent(id="bc_def456", name="", status="CREATING", createdAt=None)]
        )

        assert text.startswith("📋 **Your Agents** (2)")
        assert "🔄 **Fix login bug**" in text
        assert f"ID: `{AGENT_ID}` | Status: RUNNING" in text
        assert "Created: 2024-01-15 10:30 UTC" in text
        assert "❓ **bc_def456**" in text
        assert "Created: unknown" in text

    def test_long_agent_list_is_truncated(self, formatter):
        agents = [_agent(id=f"bc_{i}", name="n" * 80) for i in range(40)]
        text = formatter.format_agent_list(agents)
        assert len(text) <= MAX_MESSAGE_LENGTH
        assert text.endswith("... (truncated)")

    def test_conversation(self, formatter):
        text = formatter.format_conversation(
            [
                ConversationMessage(id="1", type="user_message", text="Fix it"),
                ConversationMessage(id="2", type="assistant_message", text="On it"),
            ]
        )
        assert "👤 **You:**\nFix it" in text
        assert "🤖 **Agent:**\nOn it" in text

    def test_empty_conversation(self, formatter):
        assert formatter.format_conversation([]) == "💬 No conversation history yet."

    def test_models(self, formatter):
        text = formatter.format_models(["claude-4-sonnet", "gpt-5"])
        assert "• claude-4-sonnet\n• gpt-5\n" in text
        assert "/agent create" in text

    def test_repositories(self, formatter):
        text = formatter.format_repositories(
            [Repository(owner="acme", name="web", repository="https://github.com/acme/web")]
        )
        assert "rate-limited" in text
        assert "• **acme/web**\n  https://github.com/acme/web" in text

    def test_api_key_info(self, formatter):
        info = ApiKeyInfo.model_validate(
            {"apiKeyName": "ci-key", "userEmail": "dev@acme.test", "createdAt": "2024-02-01T08:00:00Z"}
        )
        text = formatter.format_api_key_info(info)
        assert "**Name:** ci-key" in text
        assert "**Email:** dev@acme.test" in text
        assert "**Created:** 2024-02-01 08:00 UTC" in text

    def test_agent_launched_with_context_note(self, formatter):
        text = formatter.format_agent_launched(_agent(), REPLY_CONTEXT_NOTE)
        assert text.startswith("✅ Agent launched!")
        assert f"**ID:** `{AGENT_ID}`" in text
        assert "**Branch:** cursor/fix-login-bug" in text
        assert text.endswith(REPLY_CONTEXT_NOTE)

    def test_agent_launched_without_target(self, formatter):
        text = formatter.format_agent_launched(_agent(target={}))
        assert "**Branch:** auto-generated" in text
        assert "**URL:** n/a" in text
        assert REPLY_CONTEXT_NOTE not in text

    def test_modal_launched(self, formatter):
        text = formatter.format_modal_launched(_agent())
        assert "from message context" in text
        assert text.endswith(MODAL_CONTEXT_NOTE)

    def test_follow_up(self, formatter):
        assert REPLY_CONTEXT_NOTE not in formatter.format_follow_up(AGENT_ID)
        assert REPLY_CONTEXT_NOTE in formatter.format_follow_up(AGENT_ID, with_context=True)


class TestAgentStatusEmbed:
    def test_running_agent(self, formatter):
        embed = formatter.format_agent_status(_agent())["embeds"][0]

        assert embed["title"] == "🔄 Fix login bug"
        assert embed["description"] == "Working on the login form"
        assert embed["url"] == f"https://cursor.com/agents?id={AGENT_ID}"
        assert embed["footer"] == {"text": f"Agent ID: {AGENT_ID}"}
        names = [field["name"] for field in embed["fields"]]
        assert names == ["Status", "Repository", "Branch/Ref", "Target Branch"]

    def test_finished_agent_with_pr(self, formatter):
        agent = _agent(status="FINISHED", target={"prUrl": "https://github.com/acme/web/pull/7"})
        embed = formatter.format_agent_status(agent)["embeds"][0]

        assert embed["color"] == COLOR_FINISHED
        assert {"name": "Pull Request", "value": "[View PR](https://github.com/acme/web/pull/7)", "inline": True} in embed["fields"]
        assert "url" not in embed

    def test_failed_agent_without_summary(self, formatter):
        embed = formatter.format_agent_status(_agent(status="FAILED", summary=None))["embeds"][0]
        assert embed["color"] == COLOR_FAILED
        assert embed["description"] == "No summary available yet."


class TestAskAgentModal:
    def _target(self, content):
        return ReferencedMessage(id="900", content=content, author=MessageAuthor(id="1", username="alice"))

    def test_modal_shape(self, formatter):
        modal = formatter.format_ask_agent_modal(self._target("It crashes on submit"))

        assert modal["type"] == 9
        assert modal["data"]["custom_id"] == "ask_agent_modal:900"
        inputs = [row["components"][0] for row in modal["data"]["components"]]
        assert [i["custom_id"] for i in inputs] == ["message_context", "prompt", "repository"]
        assert inputs[0]["value"] == "It crashes on submit"
        assert all(i["required"] for i in inputs)

    def test_long_excerpt_is_shortened(self, formatter):
        modal = formatter.format_ask_agent_modal(self._target("y" * 800))
        value = modal["data"]["components"][0]["components"][0]["value"]
        assert len(value) == 500
        assert value.endswith("...")

    def test_validation_error_message_is_shown(self, formatter):
        reply = formatter.error_reply(ValidationError("Could not retrieve the target message"), ephemeral=True)
        assert "Could not retrieve the target message" in reply["data"]["content"]
        assert reply["data"]["flags"] == 64
