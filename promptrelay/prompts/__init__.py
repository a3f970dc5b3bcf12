"""Prompt configuration merge, resolution and delivery.

    registry = build_registry(settings.prompts)
    service = PromptService(registry, client)
    prompt = await service.get_prompt("greeting")
"""

from promptrelay.prompts.batch import BatchPromptFetcher, unique_keys
from promptrelay.prompts.merger import (
    PromptFragment,
    SourceKind,
    build_registry,
    fragments_from_config,
    merge,
)
from promptrelay.prompts.models import (
    BatchPromptsResult,
    ChatPromptResult,
    CreateChatPromptRequest,
    CreatePromptRequest,
    PromptIdentity,
    PromptKind,
    PromptResult,
    PromptSource,
    ResolvedPromptConfiguration,
    UpdatePromptLabelsRequest,
)
from promptrelay.prompts.registry import ResolvedPromptRegistry
from promptrelay.prompts.resolution import resolve_identity
from promptrelay.prompts.service import PromptService

__all__ = [
    # Merge
    "PromptFragment",
    "SourceKind",
    "build_registry",
    "fragments_from_config",
    "merge",
    # Registry
    "ResolvedPromptRegistry",
    # Resolution
    "PromptService",
    "resolve_identity",
    # Batch
    "BatchPromptFetcher",
    "unique_keys",
    # Models
    "BatchPromptsResult",
    "ChatPromptResult",
    "CreateChatPromptRequest",
    "CreatePromptRequest",
    "PromptIdentity",
    "PromptKind",
    "PromptResult",
    "PromptSource",
    "ResolvedPromptConfiguration",
    "UpdatePromptLabelsRequest",
]
