"""Langfuse prompt API client.

Usage:
    client = LangfuseClient(settings.langfuse)
    prompt = await client.get_prompt("support/greeting", label="staging")
    await client.close()
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, SecretStr, ValidationError

from promptrelay.config.models.remote import LangfuseConfig
from promptrelay.exceptions import (
    InvalidArgumentError,
    NotConfiguredError,
    RemoteNotFoundError,
    RemoteProtocolError,
    RemoteRequestError,
    RemoteTransportError,
)
from promptrelay.observability.events import PromptEvent
from promptrelay.observability.logging import get_logger
from promptrelay.observability.metrics import REMOTE_REQUEST_LATENCY
from promptrelay.providers.base import DEFAULT_LABEL, RemotePromptClient
from promptrelay.providers.langfuse.models import (
    CreateLangfuseChatPromptRequest,
    CreateLangfusePromptRequest,
    LangfuseChatPrompt,
    LangfusePromptList,
    LangfusePromptListItem,
    LangfusePromptVersion,
    LangfuseTextPrompt,
)
from promptrelay.providers.langfuse.retry import (
    RetryPolicy,
    Sleep,
    send_with_retry,
    should_retry_status,
)

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

PROMPTS_PATH = "/api/public/v2/prompts"
DEFAULT_TIMEOUT_SECONDS = 30.0
LIST_PAGE_SIZE = 50


class LangfuseClient(RemotePromptClient):
    """Async client for the Langfuse prompt endpoints.

    One httpx.AsyncClient (and its connection pool) is shared by every call,
    so a single instance serves concurrent requests. Every operation goes
    through the configured retry policy.
    """

    def __init__(
        self,
        config: LangfuseConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection, transport and resilience settings
            transport: Custom httpx transport (tests use httpx.MockTransport)
            sleep: Backoff delay function
        """
        self._config = config
        self._policy = RetryPolicy.from_config(config.resilience)
        self._sleep = sleep
        self._client: httpx.AsyncClient | None = None

        if not config.is_configured():
            logger.warning(PromptEvent.NOT_CONFIGURED, component="langfuse_client")
            return

        http = config.http
        limits = httpx.Limits(
            max_connections=http.max_connections,
            keepalive_expiry=(
                http.pooled_connection_lifetime_minutes * 60
                if http.pooled_connection_lifetime_minutes
                else 5.0
            ),
        )
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            auth=httpx.BasicAuth(
                _secret(config.public_key),
                _secret(config.secret_key),
            ),
            timeout=float(http.request_timeout_seconds or DEFAULT_TIMEOUT_SECONDS),
            limits=limits,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._policy

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()

    async def get_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
    ) -> LangfuseTextPrompt | None:
        """Fetch a text prompt; None when the service answers 404."""
        return await self._get_prompt_version(name, version, label, LangfuseTextPrompt, "get_prompt")

    async def get_chat_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
    ) -> LangfuseChatPrompt | None:
        """Fetch a chat prompt; None when the service answers 404."""
        return await self._get_prompt_version(
            name, version, label, LangfuseChatPrompt, "get_chat_prompt"
        )

    async def list_prompts(self) -> list[LangfusePromptListItem]:
        """List all prompts, following pagination until the last page."""
        client = self._require_client()
        items: list[LangfusePromptListItem] = []
        page = 1
        while True:
            params = {"page": page, "limit": LIST_PAGE_SIZE}
            response = await self._send(
                lambda: client.get(PROMPTS_PATH, params=params),
                operation="list_prompts",
                prompt_key="*",
            )
            self._raise_for_status(response, "*")
            listing = self._parse(response, LangfusePromptList)
            items.extend(listing.data)
            if not listing.data or page >= listing.meta.total_pages:
                return items
            page += 1

    async def create_prompt(self, request: CreateLangfusePromptRequest) -> LangfuseTextPrompt:
        """Create a text prompt version."""
        client = self._require_client()
        _validate_name(request.name)
        if not request.prompt or not request.prompt.strip():
            raise InvalidArgumentError("Prompt content is required.")

        body = request.model_dump(by_alias=True, exclude_none=True)
        response = await self._send(
            lambda: client.post(PROMPTS_PATH, json=body),
            operation="create_prompt",
            prompt_key=request.name,
        )
        self._raise_for_status(response, request.name)
        return self._parse(response, LangfuseTextPrompt)

    async def create_chat_prompt(
        self, request: CreateLangfuseChatPromptRequest
    ) -> LangfuseChatPrompt:
        """Create a chat prompt version."""
        client = self._require_client()
        _validate_name(request.name)
        if not request.prompt:
            raise InvalidArgumentError("Chat messages are required.")

        body = request.model_dump(by_alias=True, exclude_none=True)
        response = await self._send(
            lambda: client.post(PROMPTS_PATH, json=body),
            operation="create_chat_prompt",
            prompt_key=request.name,
        )
        self._raise_for_status(response, request.name)
        return self._parse(response, LangfuseChatPrompt)

    async def update_prompt_labels(
        self,
        name: str,
        version: int,
        new_labels: list[str],
    ) -> LangfusePromptVersion:
        """Set labels on a prompt version.

        Raises:
            RemoteNotFoundError: The prompt or version does not exist
        """
        client = self._require_client()
        _validate_name(name)
        if version <= 0:
            raise InvalidArgumentError("Version must be greater than 0.")
        if not new_labels:
            raise InvalidArgumentError("At least one label is required.")

        path = f"{PROMPTS_PATH}/{quote(name, safe='')}/versions/{version}"
        response = await self._send(
            lambda: client.patch(path, json={"newLabels": new_labels}),
            operation="update_prompt_labels",
            prompt_key=name,
        )
        if response.status_code == 404:
            raise RemoteNotFoundError(
                f"Prompt '{name}' version {version} not found", status_code=404
            )
        self._raise_for_status(response, name)
        return self._parse(response, LangfusePromptVersion)

    async def _get_prompt_version(
        self,
        name: str,
        version: int | None,
        label: str | None,
        model: type[M],
        operation: str,
    ) -> M | None:
        client = self._require_client()
        _validate_name(name)

        params: dict[str, Any] = {}
        if version is not None:
            params["version"] = version
        if label and label.strip():
            params["label"] = label
        elif version is None:
            params["label"] = DEFAULT_LABEL

        path = f"{PROMPTS_PATH}/{quote(name, safe='')}"
        response = await self._send(
            lambda: client.get(path, params=params),
            operation=operation,
            prompt_key=name,
        )
        if response.status_code == 404:
            return None
        self._raise_for_status(response, name)
        return self._parse(response, model)

    async def _send(
        self,
        send: Callable[[], Awaitable[httpx.Response]],
        *,
        operation: str,
        prompt_key: str,
    ) -> httpx.Response:
        with REMOTE_REQUEST_LATENCY.labels(operation=operation).time():
            return await send_with_retry(
                send,
                self._policy,
                operation=operation,
                prompt_key=prompt_key,
                sleep=self._sleep,
            )

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise NotConfiguredError("Langfuse is not configured.")
        return self._client

    @staticmethod
    def _raise_for_status(response: httpx.Response, prompt_key: str) -> None:
        if response.is_success:
            return
        status = response.status_code
        message = f"Prompt service returned {status} for '{prompt_key}': {response.text[:200]}"
        if should_retry_status(status):
            raise RemoteTransportError(message, status_code=status)
        raise RemoteRequestError(message, status_code=status)

    @staticmethod
    def _parse(response: httpx.Response, model: type[M]) -> M:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RemoteProtocolError(
                f"Unexpected {model.__name__} payload from prompt service: {exc}",
                status_code=response.status_code,
            ) from exc


def _validate_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidArgumentError("Prompt name is required.")


def _secret(value: SecretStr | None) -> str:
    return value.get_secret_value() if value is not None else ""
