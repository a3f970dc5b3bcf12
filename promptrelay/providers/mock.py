"""Mock remote prompt client for testing."""

from typing import Any

from promptrelay.config.models.prompts import ChatMessage
from promptrelay.exceptions import (
    InvalidArgumentError,
    NotConfiguredError,
    RemoteNotFoundError,
    RemoteProtocolError,
)
from promptrelay.providers.base import DEFAULT_LABEL, RemotePromptClient
from promptrelay.providers.langfuse.models import (
    CreateLangfuseChatPromptRequest,
    CreateLangfusePromptRequest,
    LangfuseChatPrompt,
    LangfusePromptListItem,
    LangfusePromptVersion,
    LangfuseTextPrompt,
)


class MockPromptClient(RemotePromptClient):
    """In-memory stand-in for the remote prompt service.

    Stores versions per prompt name, resolves labels the way the service
    does (a label lives on at most one version) and records every call.
    Failures can be injected per prompt name. Not suitable for production use.
    """

    def __init__(self, configured: bool = True) -> None:
        """Initialize empty storage.

        Args:
            configured: Report the remote as configured
        """
        self._configured = configured
        self._prompts: dict[str, list[LangfusePromptVersion]] = {}
        self._failures: dict[str, BaseException] = {}
        self._call_history: list[dict[str, Any]] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def fail_with(self, name: str, error: BaseException) -> None:
        """Raise error on every call for the given prompt name."""
        self._failures[name] = error

    def add_prompt(
        self,
        name: str,
        prompt: str | list[ChatMessage],
        *,
        labels: list[str] | None = None,
        tags: list[str] | None = None,
        config: dict[str, Any] | None = None,
    ) -> LangfusePromptVersion:
        """Store a new version of a prompt and return it."""
        versions = self._prompts.setdefault(name, [])
        new_labels = list(labels or [])
        self._detach_labels(name, new_labels)
        stored = LangfusePromptVersion(
            name=name,
            version=len(versions) + 1,
            type="text" if isinstance(prompt, str) else "chat",
            prompt=prompt,
            labels=new_labels,
            tags=list(tags or []),
            config=config or {},
        )
        versions.append(stored)
        return stored

    async def get_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
    ) -> LangfuseTextPrompt | None:
        found = self._lookup("get_prompt", name, version, label)
        if found is None:
            return None
        if not isinstance(found.prompt, str):
            raise RemoteProtocolError(f"Prompt '{name}' is a chat prompt")
        return LangfuseTextPrompt.model_validate(found.model_dump())

    async def get_chat_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
    ) -> LangfuseChatPrompt | None:
        found = self._lookup("get_chat_prompt", name, version, label)
        if found is None:
            return None
        if isinstance(found.prompt, str):
            raise RemoteProtocolError(f"Prompt '{name}' is a text prompt")
        return LangfuseChatPrompt.model_validate(found.model_dump())

    async def list_prompts(self) -> list[LangfusePromptListItem]:
        self._record("list_prompts", "*")
        return [
            LangfusePromptListItem(
                name=name,
                type=versions[-1].type,
                versions=[v.version for v in versions],
                labels=sorted({label for v in versions for label in v.labels}),
                tags=versions[-1].tags,
            )
            for name, versions in self._prompts.items()
        ]

    async def create_prompt(self, request: CreateLangfusePromptRequest) -> LangfuseTextPrompt:
        self._record("create_prompt", request.name)
        if not request.prompt.strip():
            raise InvalidArgumentError("Prompt content is required.")
        stored = self.add_prompt(
            request.name, request.prompt, labels=request.labels, tags=request.tags
        )
        return LangfuseTextPrompt.model_validate(stored.model_dump())

    async def create_chat_prompt(
        self, request: CreateLangfuseChatPromptRequest
    ) -> LangfuseChatPrompt:
        self._record("create_chat_prompt", request.name)
        if not request.prompt:
            raise InvalidArgumentError("Chat messages are required.")
        stored = self.add_prompt(
            request.name, list(request.prompt), labels=request.labels, tags=request.tags
        )
        return LangfuseChatPrompt.model_validate(stored.model_dump())

    async def update_prompt_labels(
        self,
        name: str,
        version: int,
        new_labels: list[str],
    ) -> LangfusePromptVersion:
        self._record("update_prompt_labels", name, version=version, labels=new_labels)
        versions = self._prompts.get(name, [])
        if version <= 0 or version > len(versions):
            raise RemoteNotFoundError(f"Prompt '{name}' version {version} not found", 404)
        self._detach_labels(name, new_labels)
        target = versions[version - 1]
        updated = target.model_copy(
            update={"labels": sorted(set(target.labels) | set(new_labels))}
        )
        versions[version - 1] = updated
        return updated

    def _lookup(
        self,
        operation: str,
        name: str,
        version: int | None,
        label: str | None,
    ) -> LangfusePromptVersion | None:
        if version is None and not (label and label.strip()):
            label = DEFAULT_LABEL
        self._record(operation, name, version=version, label=label)
        for version_record in self._prompts.get(name, []):
            if version is not None and version_record.version == version:
                return version_record
            if version is None and label in version_record.labels:
                return version_record
        return None

    def _record(self, operation: str, name: str, **kwargs: Any) -> None:
        if not self._configured:
            raise NotConfiguredError("Mock prompt service is not configured.")
        self._call_history.append({"operation": operation, "name": name, **kwargs})
        error = self._failures.get(name)
        if error is not None:
            raise error

    def _detach_labels(self, name: str, labels: list[str]) -> None:
        versions = self._prompts.get(name, [])
        for index, existing in enumerate(versions):
            remaining = [label for label in existing.labels if label not in labels]
            if remaining != existing.labels:
                versions[index] = existing.model_copy(update={"labels": remaining})
