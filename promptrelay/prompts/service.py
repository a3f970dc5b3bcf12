"""Prompt resolution: remote fetch with local fallback.

Reads (get_prompt, get_chat_prompt, get_prompts) never fail because the
remote is down or the prompt is missing: they fall back to the configured
local default and return None when there is none. Only invalid input and
task cancellation reach the caller.

Mutations (create_prompt, create_chat_prompt, update_prompt_labels) and
list_prompts need the remote service and surface every error.
"""

from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from promptrelay.exceptions import (
    InvalidArgumentError,
    NotConfiguredError,
    RemoteProtocolError,
)
from promptrelay.observability.events import PromptEvent
from promptrelay.observability.logging import get_logger
from promptrelay.observability.metrics import PROMPT_FETCH_COUNT
from promptrelay.prompts.batch import DEFAULT_MAX_CONCURRENCY, BatchPromptFetcher
from promptrelay.prompts.models import (
    BatchPromptsResult,
    ChatPromptResult,
    CreateChatPromptRequest,
    CreatePromptRequest,
    PromptIdentity,
    PromptKind,
    PromptResult,
    PromptSource,
    UpdatePromptLabelsRequest,
)
from promptrelay.prompts.registry import ResolvedPromptRegistry
from promptrelay.prompts.resolution import resolve_identity
from promptrelay.providers.base import RemotePromptClient
from promptrelay.providers.langfuse.models import (
    CreateLangfuseChatPromptRequest,
    CreateLangfusePromptRequest,
    LangfuseChatPrompt,
    LangfusePromptListItem,
    LangfuseTextPrompt,
)

logger = get_logger(__name__)

T = TypeVar("T")

RemoteFetch = Callable[[str, int | None, str | None], Awaitable[T | None]]


class PromptService:
    """Resolve logical prompt keys to content.

    Example:
        service = PromptService(build_registry(settings.prompts), LangfuseClient(settings.langfuse))
        prompt = await service.get_prompt("greeting")
        if prompt is None:
            ...  # neither remote nor local default
    """

    def __init__(
        self,
        registry: ResolvedPromptRegistry,
        client: RemotePromptClient | None = None,
        *,
        max_concurrency: int | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            registry: Merged prompt configuration
            client: Remote prompt client; None runs on local defaults only
            max_concurrency: Batch concurrency cap (default 10)
        """
        self._registry = registry
        self._client = client
        self._max_concurrency = max_concurrency or DEFAULT_MAX_CONCURRENCY

    @property
    def registry(self) -> ResolvedPromptRegistry:
        return self._registry

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def remote_configured(self) -> bool:
        return self._client is not None and self._client.is_configured

    def resolve(
        self,
        prompt_key: str,
        version: int | None = None,
        label: str | None = None,
    ) -> PromptIdentity:
        """Validate a request and compute the identity to fetch."""
        _require_key(prompt_key)
        if version is not None and version <= 0:
            raise InvalidArgumentError("Version must be greater than 0.")
        return resolve_identity(prompt_key, self._registry.try_get(prompt_key), version, label)

    async def get_prompt(
        self,
        prompt_key: str,
        version: int | None = None,
        label: str | None = None,
    ) -> PromptResult | None:
        """Get a text prompt.

        Precedence: explicit version/label, then the configured entry, then
        the remote default label. An effective version suppresses any label.

        Returns:
            The remote prompt, else the local text default, else None
        """
        identity = self.resolve(prompt_key, version, label)
        remote = await self._fetch_remote(
            prompt_key,
            identity,
            self._client.get_prompt if self._client else None,
            PromptEvent.FETCH_PROMPT,
        )
        if remote is not None:
            PROMPT_FETCH_COUNT.labels(kind="text", source=PromptSource.REMOTE.value).inc()
            return _text_result(remote)
        return self._text_default(prompt_key)

    async def get_chat_prompt(
        self,
        prompt_key: str,
        version: int | None = None,
        label: str | None = None,
    ) -> ChatPromptResult | None:
        """Get a chat prompt. Same precedence and fallback as get_prompt."""
        identity = self.resolve(prompt_key, version, label)
        remote = await self._fetch_remote(
            prompt_key,
            identity,
            self._client.get_chat_prompt if self._client else None,
            PromptEvent.FETCH_CHAT_PROMPT,
        )
        if remote is not None:
            PROMPT_FETCH_COUNT.labels(kind="chat", source=PromptSource.REMOTE.value).inc()
            return ChatPromptResult(
                prompt_key=remote.name,
                content=list(remote.prompt),
                version=remote.version,
                labels=list(remote.labels),
                tags=list(remote.tags),
                config=remote.config,
                kind=PromptKind.parse(remote.type),
                source=PromptSource.REMOTE,
            )
        return self._chat_default(prompt_key)

    async def get_prompts(
        self,
        prompt_keys: Iterable[str],
        label: str | None = None,
    ) -> list[PromptResult]:
        """Get many text prompts concurrently; failing keys are dropped."""
        fetcher = BatchPromptFetcher(self, max_concurrency=self._max_concurrency)
        return await fetcher.fetch_many(prompt_keys, label=label)

    async def get_prompts_detailed(
        self,
        prompt_keys: Iterable[str],
        label: str | None = None,
    ) -> BatchPromptsResult:
        """Like get_prompts, also reporting the keys that produced nothing."""
        fetcher = BatchPromptFetcher(self, max_concurrency=self._max_concurrency)
        return await fetcher.fetch_many_detailed(prompt_keys, label=label)

    async def list_prompts(self) -> list[LangfusePromptListItem]:
        """List every prompt stored remotely."""
        client = self._require_remote("*", "list prompts")
        return await client.list_prompts()

    async def create_prompt(self, request: CreatePromptRequest) -> PromptResult:
        """Create a text prompt version under the key's remote name."""
        _require_key(request.prompt_key)
        if not request.content or not request.content.strip():
            raise InvalidArgumentError("Content is required.")
        client = self._require_remote(request.prompt_key, "create prompt")

        identity = self.resolve(request.prompt_key)
        logger.info(
            "prompt_create",
            prompt_key=request.prompt_key,
            actual_key=identity.actual_key,
        )
        try:
            created = await client.create_prompt(
                CreateLangfusePromptRequest(
                    name=identity.actual_key,
                    prompt=request.content,
                    commit_message=request.commit_message,
                    labels=request.labels,
                    tags=request.tags,
                )
            )
        except Exception as exc:
            logger.error(
                PromptEvent.CREATE_FAILED,
                prompt_key=request.prompt_key,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise
        return _text_result(created)

    async def create_chat_prompt(self, request: CreateChatPromptRequest) -> ChatPromptResult:
        """Create a chat prompt version under the key's remote name."""
        _require_key(request.prompt_key)
        if not request.chat_messages:
            raise InvalidArgumentError("Chat messages are required.")
        client = self._require_remote(request.prompt_key, "create chat prompt")

        identity = self.resolve(request.prompt_key)
        logger.info(
            "chat_prompt_create",
            prompt_key=request.prompt_key,
            actual_key=identity.actual_key,
        )
        try:
            created: LangfuseChatPrompt = await client.create_chat_prompt(
                CreateLangfuseChatPromptRequest(
                    name=identity.actual_key,
                    prompt=request.chat_messages,
                    commit_message=request.commit_message,
                    labels=request.labels,
                    tags=request.tags,
                )
            )
        except Exception as exc:
            logger.error(
                PromptEvent.CREATE_FAILED,
                prompt_key=request.prompt_key,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise
        return ChatPromptResult(
            prompt_key=created.name,
            content=list(created.prompt),
            version=created.version,
            labels=list(created.labels),
            tags=list(created.tags),
            config=created.config,
            kind=PromptKind.parse(created.type),
            source=PromptSource.REMOTE,
        )

    async def update_prompt_labels(
        self,
        prompt_key: str,
        version: int,
        request: UpdatePromptLabelsRequest,
    ) -> PromptResult:
        """Attach labels to a text prompt version.

        Raises:
            RemoteNotFoundError: The version does not exist remotely
            RemoteProtocolError: The version is not a text prompt
        """
        _require_key(prompt_key)
        if version <= 0:
            raise InvalidArgumentError("Version must be greater than 0.")
        labels = [label for label in request.new_labels if label and label.strip()]
        if not labels:
            raise InvalidArgumentError("At least one label is required.")
        client = self._require_remote(prompt_key, "update prompt labels")

        identity = self.resolve(prompt_key, version)
        updated = await client.update_prompt_labels(
            identity.actual_key, identity.version or version, labels
        )
        if PromptKind.parse(updated.type) is not PromptKind.TEXT or not isinstance(
            updated.prompt, str
        ):
            raise RemoteProtocolError(
                f"Expected text prompt but received {updated.type} prompt"
            )

        logger.info(
            PromptEvent.LABELS_UPDATED,
            prompt_key=prompt_key,
            actual_key=identity.actual_key,
            version=updated.version,
            labels=updated.labels,
        )
        return PromptResult(
            prompt_key=updated.name,
            content=updated.prompt,
            version=updated.version,
            labels=list(updated.labels),
            tags=list(updated.tags),
            config=updated.config,
            kind=PromptKind.TEXT,
            source=PromptSource.REMOTE,
        )

    async def _fetch_remote(
        self,
        prompt_key: str,
        identity: PromptIdentity,
        fetch: RemoteFetch[T] | None,
        event: PromptEvent,
    ) -> T | None:
        if fetch is None or not self.remote_configured:
            return None

        logger.info(
            event,
            prompt_key=prompt_key,
            actual_key=identity.actual_key,
            version=identity.version,
            label=identity.label,
        )
        try:
            return await fetch(identity.actual_key, identity.version, identity.label)
        except Exception as exc:  # noqa: BLE001
            # CancelledError is not an Exception and propagates past this
            logger.warning(
                PromptEvent.REMOTE_FALLBACK,
                prompt_key=prompt_key,
                actual_key=identity.actual_key,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

    def _text_default(self, prompt_key: str) -> PromptResult | None:
        configuration = self._registry.try_get(prompt_key)
        if configuration is None or not (
            configuration.default_content and configuration.default_content.strip()
        ):
            PROMPT_FETCH_COUNT.labels(kind="text", source="none").inc()
            return None

        logger.info(PromptEvent.LOCAL_DEFAULT_RETURNED, prompt_key=prompt_key, kind="text")
        PROMPT_FETCH_COUNT.labels(kind="text", source=PromptSource.LOCAL.value).inc()
        return PromptResult(
            prompt_key=prompt_key,
            content=configuration.default_content,
            kind=PromptKind.TEXT,
            source=PromptSource.LOCAL,
        )

    def _chat_default(self, prompt_key: str) -> ChatPromptResult | None:
        configuration = self._registry.try_get(prompt_key)
        if configuration is None or not configuration.chat_default_content:
            PROMPT_FETCH_COUNT.labels(kind="chat", source="none").inc()
            return None

        logger.info(PromptEvent.LOCAL_DEFAULT_RETURNED, prompt_key=prompt_key, kind="chat")
        PROMPT_FETCH_COUNT.labels(kind="chat", source=PromptSource.LOCAL.value).inc()
        return ChatPromptResult(
            prompt_key=prompt_key,
            content=list(configuration.chat_default_content),
            kind=PromptKind.CHAT,
            source=PromptSource.LOCAL,
        )

    def _require_remote(self, prompt_key: str, operation: str) -> RemotePromptClient:
        if self._client is None or not self._client.is_configured:
            logger.warning(PromptEvent.NOT_CONFIGURED, operation=operation, prompt_key=prompt_key)
            raise NotConfiguredError("Langfuse is not configured.")
        return self._client


def _require_key(prompt_key: str | None) -> None:
    if not prompt_key or not prompt_key.strip():
        raise InvalidArgumentError("PromptKey is required.")


def _text_result(remote: LangfuseTextPrompt) -> PromptResult:
    return PromptResult(
        prompt_key=remote.name,
        content=remote.prompt,
        version=remote.version,
        labels=list(remote.labels),
        tags=list(remote.tags),
        config=remote.config,
        kind=PromptKind.parse(remote.type),
        source=PromptSource.REMOTE,
    )
