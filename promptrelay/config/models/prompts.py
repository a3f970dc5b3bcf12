"""Prompt configuration models.

Prompts can be configured from five overlapping sources, merged into one
record per logical key (see promptrelay.prompts.merger):

    [prompts.defaults]          logical key -> text default
    [prompts.chat_defaults]     logical key -> chat messages default
    [prompts.prompt_keys]       legacy logical key -> remote key/label/version
    [prompts.prompt_entries]    unified entries keyed by logical key
    [[prompts.entries]]         unified entries as a list (name, else key)
"""

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A single role/content message of a chat prompt."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="Role: system, user, assistant, ...")
    content: str = Field(..., description="Message content")


class PromptKeyConfig(BaseModel):
    """Legacy mapping of a logical key to its remote identity."""

    key: str = Field(..., description="Remote prompt key/name")
    label: str | None = Field(default=None, description="Default label")
    version: int | None = Field(default=None, gt=0, description="Default version")


class PromptEntryConfig(BaseModel):
    """Unified prompt entry.

    Every field is optional so an entry can override a single field of
    what earlier sources configured for the same logical key.
    """

    name: str | None = Field(
        default=None,
        description="Logical key used by callers (list form only, falls back to key)",
    )
    key: str | None = Field(default=None, description="Remote prompt key/name")
    label: str | None = Field(
        default=None,
        description="Default label used when the caller gives neither version nor label",
    )
    version: int | None = Field(
        default=None,
        gt=0,
        description="Default version, wins over the default label",
    )
    default: str | None = Field(default=None, description="Local text fallback")
    chat_default: list[ChatMessage] | None = Field(
        default=None,
        description="Local chat fallback",
    )


class PromptsConfig(BaseModel):
    """All prompt configuration sources."""

    defaults: dict[str, str] = Field(
        default_factory=dict,
        description="Text defaults by logical key",
    )
    chat_defaults: dict[str, list[ChatMessage]] = Field(
        default_factory=dict,
        description="Chat defaults by logical key",
    )
    prompt_keys: dict[str, PromptKeyConfig] = Field(
        default_factory=dict,
        description="Legacy key mappings by logical key",
    )
    prompt_entries: dict[str, PromptEntryConfig] = Field(
        default_factory=dict,
        description="Unified entries by logical key",
    )
    entries: list[PromptEntryConfig] = Field(
        default_factory=list,
        description="Unified entries as a list",
    )
