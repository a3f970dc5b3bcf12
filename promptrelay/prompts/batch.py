"""Bounded-concurrency batch fetch of text prompts."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

from promptrelay.exceptions import InvalidArgumentError
from promptrelay.observability.events import PromptEvent
from promptrelay.observability.logging import get_logger
from promptrelay.observability.metrics import BATCH_ITEM_FAILURES
from promptrelay.prompts.models import BatchPromptsResult, PromptResult
from promptrelay.prompts.registry import normalize_key

if TYPE_CHECKING:
    from promptrelay.prompts.service import PromptService

logger = get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 10


def unique_keys(prompt_keys: Iterable[str]) -> list[str]:
    """Drop blank keys and case-insensitive duplicates, keeping first casing."""
    seen: set[str] = set()
    keys: list[str] = []
    for key in prompt_keys:
        if not key or not key.strip():
            continue
        normalized = normalize_key(key)
        if normalized in seen:
            continue
        seen.add(normalized)
        keys.append(key)
    return keys


class BatchPromptFetcher:
    """Resolve many prompt keys through PromptService with a concurrency cap.

    At most max_concurrency resolutions are in flight at once. A key whose
    resolution raises is logged and left out; it never aborts the batch.
    Cancelling the calling task cancels every in-flight resolution.
    """

    def __init__(self, service: PromptService, max_concurrency: int | None = None) -> None:
        """Initialize the fetcher.

        Args:
            service: Resolves single keys
            max_concurrency: Permit count (default 10)
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise InvalidArgumentError("max_concurrency must be at least 1.")
        self._service = service
        self._max_concurrency = max_concurrency or DEFAULT_MAX_CONCURRENCY

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def fetch_many(
        self,
        prompt_keys: Iterable[str],
        label: str | None = None,
    ) -> list[PromptResult]:
        """Fetch text prompts for the given keys.

        Args:
            prompt_keys: Logical keys; blanks and case-insensitive duplicates are dropped
            label: Label applied to every key

        Returns:
            Results for the keys that resolved, remote or local

        Raises:
            InvalidArgumentError: No usable key was given
        """
        result = await self.fetch_many_detailed(prompt_keys, label=label)
        return result.prompts

    async def fetch_many_detailed(
        self,
        prompt_keys: Iterable[str],
        label: str | None = None,
    ) -> BatchPromptsResult:
        """Fetch text prompts and report keys that produced no result."""
        keys = unique_keys(prompt_keys)
        if not keys:
            raise InvalidArgumentError("At least one prompt key is required.")

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def fetch_one(key: str) -> PromptResult | None:
            async with semaphore:
                try:
                    return await self._service.get_prompt(key, label=label)
                except Exception as exc:  # noqa: BLE001
                    logger.warning(
                        PromptEvent.BATCH_ITEM_FAILED,
                        prompt_key=key,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    BATCH_ITEM_FAILURES.inc()
                    return None

        results = await asyncio.gather(*(fetch_one(key) for key in keys))

        found: list[PromptResult] = []
        not_found: list[str] = []
        for key, result in zip(keys, results, strict=True):
            if result is None:
                logger.info(PromptEvent.BATCH_ITEM_NOT_FOUND, prompt_key=key, label=label)
                not_found.append(key)
            else:
                found.append(result)

        logger.debug(
            "prompt_batch_completed",
            requested=len(keys),
            found=len(found),
            not_found=len(not_found),
        )
        return BatchPromptsResult(prompts=found, not_found=not_found)
