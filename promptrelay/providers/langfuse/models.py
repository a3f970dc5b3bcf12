"""Wire models for the Langfuse public prompt API (v2).

These mirror the JSON payloads and are converted to promptrelay models by
the prompt service. Unknown fields are ignored.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from promptrelay.config.models.prompts import ChatMessage


class LangfuseModel(BaseModel):
    """Base for camelCase Langfuse payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class LangfusePromptBase(LangfuseModel):
    name: str
    version: int
    type: str = "text"
    labels: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    config: dict[str, Any] | None = None


class LangfuseTextPrompt(LangfusePromptBase):
    """A text prompt version."""

    prompt: str


class LangfuseChatPrompt(LangfusePromptBase):
    """A chat prompt version."""

    type: str = "chat"
    prompt: list[ChatMessage]


class LangfusePromptVersion(LangfusePromptBase):
    """A prompt version of either type, as returned by label updates."""

    prompt: str | list[ChatMessage]


class LangfusePromptListItem(LangfuseModel):
    """Summary row of the prompt list endpoint."""

    name: str
    type: str | None = None
    versions: list[int] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    last_updated_at: datetime | None = None
    last_config: dict[str, Any] | None = None


class LangfusePageMeta(LangfuseModel):
    page: int = 1
    limit: int = 50
    total_items: int = 0
    total_pages: int = 1


class LangfusePromptList(LangfuseModel):
    """One page of the prompt list endpoint."""

    data: list[LangfusePromptListItem] = Field(default_factory=list)
    meta: LangfusePageMeta = Field(default_factory=LangfusePageMeta)


class CreateLangfusePromptRequest(LangfuseModel):
    """Body of POST /api/public/v2/prompts for a text prompt."""

    name: str
    type: Literal["text"] = "text"
    prompt: str
    commit_message: str | None = None
    labels: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    config: dict[str, Any] | None = None


class CreateLangfuseChatPromptRequest(LangfuseModel):
    """Body of POST /api/public/v2/prompts for a chat prompt."""

    name: str
    type: Literal["chat"] = "chat"
    prompt: list[ChatMessage]
    commit_message: str | None = None
    labels: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    config: dict[str, Any] | None = None
