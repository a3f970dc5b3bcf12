"""Remote prompt client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from promptrelay.providers.langfuse.models import (
        CreateLangfuseChatPromptRequest,
        CreateLangfusePromptRequest,
        LangfuseChatPrompt,
        LangfusePromptListItem,
        LangfusePromptVersion,
        LangfuseTextPrompt,
    )

DEFAULT_LABEL = "production"


class RemotePromptClient(ABC):
    """Request/response operations against the remote prompt service.

    Fetches return None when the prompt does not exist. When neither a
    version nor a label is given, fetches request DEFAULT_LABEL.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the remote service can be called at all."""

    @abstractmethod
    async def get_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
    ) -> LangfuseTextPrompt | None:
        """Fetch a text prompt version."""

    @abstractmethod
    async def get_chat_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
    ) -> LangfuseChatPrompt | None:
        """Fetch a chat prompt version."""

    @abstractmethod
    async def list_prompts(self) -> list[LangfusePromptListItem]:
        """List every prompt known to the service."""

    @abstractmethod
    async def create_prompt(self, request: CreateLangfusePromptRequest) -> LangfuseTextPrompt:
        """Create a new text prompt version."""

    @abstractmethod
    async def create_chat_prompt(
        self, request: CreateLangfuseChatPromptRequest
    ) -> LangfuseChatPrompt:
        """Create a new chat prompt version."""

    @abstractmethod
    async def update_prompt_labels(
        self,
        name: str,
        version: int,
        new_labels: list[str],
    ) -> LangfusePromptVersion:
        """Attach labels to an existing prompt version."""

    async def close(self) -> None:  # noqa: B027
        """Release transport resources."""
