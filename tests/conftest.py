import asyncio
import json
from typing import Callable, Optional, Union

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from fastapi.testclient import TestClient

from cloud_agent_bridge.adapters.discord.discord_router import InteractionRouter
from cloud_agent_bridge.adapters.discord.interactions import Interaction
from cloud_agent_bridge.config.settings import Settings
from cloud_agent_bridge.fastapi_app import create_fastapi_app
from cloud_agent_bridge.services.cloud_agent_client import CloudAgentClient

API_BASE_URL = "https://api.cursor.test"
API_TOKEN = "key_test_token"
INTERACTIONS_URL = "/api/discord/interactions"
SIGNATURE_TIMESTAMP = "1700000000"

Scripted = Union[tuple, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeCloudAgentApi:
    """Scripted cloud agent API served through ``httpx.MockTransport``.

    Each route holds a queue of responses; the last one repeats once the
    queue is down to one. A response is ``(status, json_body)``, an
    exception to raise, or a callable taking the request.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Scripted]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Scripted) -> None:
        self.routes[(method, path)] = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": f"no route {request.url.path}"})

        scripted = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(scripted, Exception):
            raise scripted
        if callable(scripted):
            return scripted(request)

        status, body = scripted
        if body is None:
            return httpx.Response(status)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def json_body(self, method: str, path: str, index: int = 0) -> dict:
        return json.loads(self.sent(method, path)[index].content)


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture()
def fake_api():
    return FakeCloudAgentApi()


@pytest.fixture()
def fake_sleep():
    return RecordingSleep()


@pytest.fixture()
def signing_key():
    return Ed25519PrivateKey.generate()


@pytest.fixture()
def public_key_hex(signing_key):
    return signing_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw).hex()


@pytest.fixture()
def settings(public_key_hex):
    return Settings(
        discord_public_key=public_key_hex,
        discord_application_id="app-1",
        discord_bot_token="bot-token",
        cursor_api_token=API_TOKEN,
        cursor_api_base_url=API_BASE_URL,
        cursor_api_base_delay=0.0,
        cursor_api_max_delay=0.0,
        log_level="WARNING",
    )


@pytest.fixture()
def call_api(fake_api, fake_sleep):
    """Run ``action(client)`` against a client wired to ``fake_api``."""

    def _call(action, **client_kwargs):
        async def _run():
            async with CloudAgentClient(
                API_BASE_URL,
                API_TOKEN,
                transport=fake_api.transport(),
                sleep=fake_sleep,
                jitter=lambda: 0.0,
                **client_kwargs,
            ) as client:
                return await action(client)

        return asyncio.run(_run())

    return _call


@pytest.fixture()
def handle_interaction(call_api):
    """Route one raw interaction payload and return the RouterResponse."""

    def _handle(payload: dict):
        interaction = Interaction.model_validate(payload)
        return call_api(lambda client: InteractionRouter(client).handle(interaction))

    return _handle


@pytest.fixture()
def client(settings, fake_api):
    """A test client for the FastAPI app."""
    app = create_fastapi_app(settings, transport=fake_api.transport())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def signed_post(client, signing_key):
    """POST a body to the interactions endpoint with a valid Discord signature."""

    def _post(payload, timestamp: str = SIGNATURE_TIMESTAMP, key: Optional[Ed25519PrivateKey] = None):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        signature = (key or signing_key).sign(timestamp.encode("utf-8") + body).hex()
        return client.post(
            INTERACTIONS_URL,
            content=body,
            headers={
                "Content-Type": "application/json",
                "X-Signature-Ed25519": signature,
                "X-Signature-Timestamp": timestamp,
            },
        )

    return _post
