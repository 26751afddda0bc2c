"""
Cloud agent API client (async) with retry and error normalization.

Usage:
    client = CloudAgentClient(base_url=settings.cursor_api_base_url,
                              api_token=settings.cursor_api_token)
    agent = await client.get_agent("bc_abc123")
    await client.aclose()

Every public method goes through ``request()``:
    attempt ──► non-2xx? ──► error_from_status() ──► retryable? ──► sleep, retry
                                                  └─► no ──► raise immediately

Retryable: 429, any 5xx, and TransportError (connection/timeout failures
raised by httpx). Up to ``max_retries`` retries (4 attempts by default).
Delay before retry n (0-indexed) is min(max_delay, base_delay * 2**n) plus
up to 25% jitter. Once the budget is spent the last error is re-raised as is.
"""

import asyncio
import logging
import random
import re
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from cloud_agent_bridge.domain.entities import (
    Agent,
    AgentList,
    AgentRef,
    ApiKeyInfo,
    Conversation,
    FollowUpRequest,
    LaunchAgentRequest,
    ModelList,
    Prompt,
    PromptImage,
    RepositoryList,
)
from cloud_agent_bridge.domain.exceptions import (
    AppError,
    RateLimitedError,
    TransportError,
    UnknownError,
)
from cloud_agent_bridge.observability.metrics import (
    increment_api_retry,
    observe_api_latency,
)
from cloud_agent_bridge.services.error_normalizer import (
    NETWORK_MESSAGE,
    TIMEOUT_MESSAGE,
    error_from_status,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0  # seconds
DEFAULT_MAX_DELAY = 30.0  # seconds
DEFAULT_TIMEOUT = 30.0  # seconds, per attempt
JITTER_RATIO = 0.25

_AGENT_PATH = re.compile(r"^/v0/agents/[^/?]+")


def is_retryable(error: BaseException) -> bool:
    """Classify an already-normalized error."""
    if isinstance(error, (RateLimitedError, TransportError)):
        return True
    if isinstance(error, AppError) and error.status_code is not None:
        return 500 <= error.status_code <= 599
    return False


class wait_capped_exponential_jitter(wait_base):
    """min(max_delay, base_delay * 2**n) + uniform jitter of up to 25% of that value."""

    def __init__(
        self,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        jitter: Callable[[], float] = random.random,
    ):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter

    def delay_for(self, retry_index: int) -> float:
        capped = min(self.max_delay, self.base_delay * (2**retry_index))
        return capped + capped * JITTER_RATIO * self.jitter()

    def __call__(self, retry_state: RetryCallState) -> float:
        # attempt_number counts attempts already made, so the first retry is index 0
        return self.delay_for(retry_state.attempt_number - 1)


def _route_label(path: str) -> str:
    route = path.split("?", 1)[0]
    return _AGENT_PATH.sub("/v0/agents/{id}", route)


def _read_error_body(response: httpx.Response) -> dict:
    """Parse an error body; anything that is not a JSON object degrades to {}."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _encode(identifier: str) -> str:
    return quote(identifier, safe="")


class CloudAgentClient:
    """Thin async wrapper over the cloud agent REST API."""

    def __init__(
        self,
        base_url: str,
        api_token: str,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        jitter: Callable[[], float] = random.random,
    ):
        self._api_token = api_token
        self._max_retries = max_retries
        self._wait = wait_capped_exponential_jitter(base_delay, max_delay, jitter)
        self._sleep = sleep
        self._log_before_sleep = before_sleep_log(logger, logging.WARNING)
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "CloudAgentClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ==================== CORE REQUEST ====================

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Perform one logical API call, retrying classified-retryable failures."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=self._wait,
            retry=retry_if_exception(is_retryable),
            before_sleep=self._before_sleep,
            sleep=self._sleep,
            reraise=True,
        )
        return await retrying(self._send_once, method, path, body, params)

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        reason = error.kind.value if isinstance(error, AppError) else "unknown"
        increment_api_retry(reason)
        self._log_before_sleep(retry_state)

    async def _send_once(
        self,
        method: str,
        path: str,
        body: Optional[dict],
        params: Optional[dict],
    ) -> Any:
        route = _route_label(path)
        started = time.perf_counter()
        try:
            response = await self._http.request(
                method,
                path,
                json=body,
                params=params,
                headers={"Authorization": f"Bearer {self._api_token}"},
            )
        except httpx.TimeoutException as exc:
            observe_api_latency(method, route, "timeout", time.perf_counter() - started)
            raise TransportError(
                TIMEOUT_MESSAGE, f"{method} {route} timed out: {exc!r}", timed_out=True
            ) from exc
        except httpx.TransportError as exc:
            observe_api_latency(method, route, "transport_error", time.perf_counter() - started)
            raise TransportError(
                NETWORK_MESSAGE, f"{method} {route} failed: {exc!r}"
            ) from exc

        status = response.status_code
        observe_api_latency(method, route, str(status), time.perf_counter() - started)

        if response.is_success:
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as exc:
                raise UnknownError(
                    "Received an unexpected response from the service.",
                    f"{method} {route} returned non-JSON body",
                    status,
                ) from exc

        error_data = _read_error_body(response)
        message = (
            error_data.get("message")
            or error_data.get("error")
            or f"Cloud agent API error: {status}"
        )
        error = error_from_status(status, str(message))
        logger.warning(
            "[API] %s %s -> %d (%s): %s",
            method,
            route,
            status,
            error.kind.value,
            error.internal_message,
        )
        raise error

    @staticmethod
    def _parse(model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise UnknownError(
                "Received an unexpected response from the service.",
                f"Could not parse {model.__name__}: {exc}",
            ) from exc

    # ==================== AGENTS ====================

    async def list_agents(
        self, limit: Optional[int] = None, cursor: Optional[str] = None
    ) -> AgentList:
        params = {}
        if limit:
            params["limit"] = str(limit)
        if cursor:
            params["cursor"] = cursor
        data = await self.request("GET", "/v0/agents", params=params or None)
        return self._parse(AgentList, data)

    async def get_agent(self, agent_id: str) -> Agent:
        data = await self.request("GET", f"/v0/agents/{_encode(agent_id)}")
        return self._parse(Agent, data)

    async def get_conversation(self, agent_id: str) -> Conversation:
        data = await self.request("GET", f"/v0/agents/{_encode(agent_id)}/conversation")
        return self._parse(Conversation, data)

    async def launch_agent(self, launch: LaunchAgentRequest) -> AgentRef:
        data = await self.request("POST", "/v0/agents", body=launch.to_payload())
        return self._parse(AgentRef, data)

    async def follow_up(
        self,
        agent_id: str,
        prompt_text: str,
        images: Optional[list[PromptImage]] = None,
    ) -> AgentRef:
        payload = FollowUpRequest(prompt=Prompt(text=prompt_text, images=images))
        data = await self.request(
            "POST",
            f"/v0/agents/{_encode(agent_id)}/followup",
            body=payload.to_payload(),
        )
        return self._parse(AgentRef, data)

    async def stop_agent(self, agent_id: str) -> AgentRef:
        data = await self.request("POST", f"/v0/agents/{_encode(agent_id)}/stop")
        return self._parse(AgentRef, data)

    async def delete_agent(self, agent_id: str) -> AgentRef:
        """Permanently delete an agent. Cannot be undone."""
        data = await self.request("DELETE", f"/v0/agents/{_encode(agent_id)}")
        return self._parse(AgentRef, data)

    # ==================== ACCOUNT ====================

    async def list_models(self) -> ModelList:
        data = await self.request("GET", "/v0/models")
        return self._parse(ModelList, data)

    async def list_repositories(self) -> RepositoryList:
        """List repositories the key can access.

        The remote service rate-limits this endpoint heavily
        (1 request/minute, 30/hour); nothing is enforced locally.
        """
        data = await self.request("GET", "/v0/repositories")
        return self._parse(RepositoryList, data)

    async def get_api_key_info(self) -> ApiKeyInfo:
        data = await self.request("GET", "/v0/me")
        return self._parse(ApiKeyInfo, data)
