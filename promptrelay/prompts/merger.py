"""Merge layered prompt configuration into one record per logical key.

Sources are applied in a fixed order; a later fragment overrides an earlier
one field by field. Only fields that carry a value overwrite: blank strings,
missing versions and empty chat lists leave what earlier sources set.

    1. [prompts.defaults]        text defaults
    2. [prompts.chat_defaults]   chat defaults
    3. [prompts.prompt_keys]     legacy key/label/version mapping
    4. [prompts.prompt_entries]  unified entries keyed by logical key
    5. [[prompts.entries]]       unified entries, logical key = name or key

Keys compare case-insensitively. A record keeps the casing its logical key
had the first time it was seen.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from promptrelay.config.models.prompts import ChatMessage, PromptEntryConfig, PromptsConfig
from promptrelay.prompts.models import ResolvedPromptConfiguration
from promptrelay.prompts.registry import ResolvedPromptRegistry, normalize_key


class SourceKind(IntEnum):
    """Configuration sources, in the order they are applied."""

    TEXT_DEFAULTS = 1
    CHAT_DEFAULTS = 2
    PROMPT_KEYS = 3
    PROMPT_ENTRIES = 4
    ENTRY_LIST = 5


@dataclass(frozen=True)
class PromptFragment:
    """One configuration source's contribution for one logical key."""

    source: SourceKind
    logical_key: str
    entry: PromptEntryConfig


@dataclass
class _Accumulator:
    logical_key: str
    actual_key: str | None = None
    label: str | None = None
    version: int | None = None
    default_content: str | None = None
    chat_default_content: tuple[ChatMessage, ...] | None = None

    @classmethod
    def from_record(cls, record: ResolvedPromptConfiguration) -> "_Accumulator":
        return cls(
            logical_key=record.logical_key,
            actual_key=record.actual_key,
            label=record.label,
            version=record.version,
            default_content=record.default_content,
            chat_default_content=record.chat_default_content,
        )

    def apply(self, entry: PromptEntryConfig) -> None:
        if _has_text(entry.key):
            self.actual_key = entry.key
        if _has_text(entry.label):
            self.label = entry.label
        if entry.version is not None:
            self.version = entry.version
        if _has_text(entry.default):
            self.default_content = entry.default
        if entry.chat_default:
            self.chat_default_content = tuple(entry.chat_default)

    def resolve(self) -> ResolvedPromptConfiguration:
        return ResolvedPromptConfiguration(
            logical_key=self.logical_key,
            actual_key=self.actual_key if _has_text(self.actual_key) else self.logical_key,
            label=self.label,
            version=self.version,
            default_content=self.default_content,
            chat_default_content=self.chat_default_content,
        )


def _has_text(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def entry_logical_key(entry: PromptEntryConfig) -> str | None:
    """Logical key of a list-form entry: its name, else its remote key."""
    if _has_text(entry.name):
        return entry.name
    if _has_text(entry.key):
        return entry.key
    return None


def fragments_from_config(config: PromptsConfig) -> list[PromptFragment]:
    """Flatten every configuration source into fragments in application order."""
    fragments: list[PromptFragment] = []

    for logical_key, content in config.defaults.items():
        fragments.append(
            PromptFragment(SourceKind.TEXT_DEFAULTS, logical_key, PromptEntryConfig(default=content))
        )

    for logical_key, messages in config.chat_defaults.items():
        fragments.append(
            PromptFragment(
                SourceKind.CHAT_DEFAULTS,
                logical_key,
                PromptEntryConfig(chat_default=messages),
            )
        )

    # Legacy mappings carry identity only, never defaults
    for logical_key, key_config in config.prompt_keys.items():
        fragments.append(
            PromptFragment(
                SourceKind.PROMPT_KEYS,
                logical_key,
                PromptEntryConfig(
                    key=key_config.key,
                    label=key_config.label,
                    version=key_config.version,
                ),
            )
        )

    for logical_key, entry in config.prompt_entries.items():
        fragments.append(PromptFragment(SourceKind.PROMPT_ENTRIES, logical_key, entry))

    for entry in config.entries:
        logical_key = entry_logical_key(entry)
        if logical_key is None:
            continue
        fragments.append(PromptFragment(SourceKind.ENTRY_LIST, logical_key, entry))

    return fragments


def merge(
    fragments: Iterable[PromptFragment],
    base: ResolvedPromptRegistry | None = None,
) -> ResolvedPromptRegistry:
    """Fold fragments, in the order given, into a registry.

    Args:
        fragments: Fragments in precedence order (later wins per field)
        base: Registry to continue merging from, so merging [A, B] and then
            [C] equals merging [A, B, C] in one pass

    Returns:
        A new immutable registry
    """
    aggregate: dict[str, _Accumulator] = {}
    if base is not None:
        for record in base.records():
            aggregate[normalize_key(record.logical_key)] = _Accumulator.from_record(record)

    for fragment in fragments:
        if not _has_text(fragment.logical_key):
            continue
        normalized = normalize_key(fragment.logical_key)
        item = aggregate.get(normalized)
        if item is None:
            item = _Accumulator(logical_key=fragment.logical_key)
            aggregate[normalized] = item
        item.apply(fragment.entry)

    return ResolvedPromptRegistry(item.resolve() for item in aggregate.values())


def build_registry(config: PromptsConfig) -> ResolvedPromptRegistry:
    """Build the registry from the configured prompt sources."""
    return merge(fragments_from_config(config))
