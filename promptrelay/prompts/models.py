"""Prompt domain models.

- ResolvedPromptConfiguration: one merged configuration record per logical key
- PromptIdentity: the exact (actual key, version, label) sent to the remote
- PromptResult / ChatPromptResult: what callers get back
- Request models for the mutating operations
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from promptrelay.config.models.prompts import ChatMessage


class PromptKind(str, Enum):
    """Content shape of a prompt."""

    TEXT = "text"
    CHAT = "chat"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "PromptKind":
        """Map a remote 'type' string to a kind, case-insensitively."""
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class PromptSource(str, Enum):
    """Where returned content came from."""

    REMOTE = "remote"
    LOCAL = "local"


class ResolvedPromptConfiguration(BaseModel):
    """Merged configuration for one logical key.

    Both label and version may be stored; which one is effective is decided
    per call by promptrelay.prompts.resolution.
    """

    model_config = ConfigDict(frozen=True)

    logical_key: str
    actual_key: str
    label: str | None = None
    version: int | None = None
    default_content: str | None = None
    chat_default_content: tuple[ChatMessage, ...] | None = None


class PromptIdentity(BaseModel):
    """Parameters of a single remote fetch."""

    model_config = ConfigDict(frozen=True)

    actual_key: str
    version: int | None = None
    label: str | None = None


class _PromptResultBase(BaseModel):
    prompt_key: str = Field(..., description="Remote name, or the logical key for local results")
    version: int | None = Field(default=None, description="Remote version")
    labels: list[str] = Field(default_factory=list, description="Remote labels")
    tags: list[str] = Field(default_factory=list, description="Remote tags")
    config: dict[str, Any] | None = Field(
        default=None,
        description="Opaque prompt config stored with the remote version",
    )
    source: PromptSource = Field(..., description="Remote or local fallback")


class PromptResult(_PromptResultBase):
    """A resolved text prompt."""

    content: str
    kind: PromptKind = PromptKind.TEXT


class ChatPromptResult(_PromptResultBase):
    """A resolved chat prompt."""

    content: list[ChatMessage]
    kind: PromptKind = PromptKind.CHAT


class BatchPromptsResult(BaseModel):
    """Outcome of a batch fetch: the prompts found and the keys without one."""

    prompts: list[PromptResult] = Field(default_factory=list)
    not_found: list[str] = Field(default_factory=list)


class CreatePromptRequest(BaseModel):
    """Create a new text prompt version."""

    prompt_key: str
    content: str
    commit_message: str | None = None
    labels: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class CreateChatPromptRequest(BaseModel):
    """Create a new chat prompt version."""

    prompt_key: str
    chat_messages: list[ChatMessage]
    commit_message: str | None = None
    labels: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class UpdatePromptLabelsRequest(BaseModel):
    """Replace the labels attached to a prompt version."""

    new_labels: list[str]
