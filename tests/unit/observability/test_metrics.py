"""Tests for Prometheus metrics."""

import pytest
from prometheus_client import REGISTRY

from promptrelay.prompts import PromptService, ResolvedPromptRegistry
from promptrelay.providers import MockPromptClient


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestPromptFetchCount:
    """Tests for PROMPT_FETCH_COUNT counter."""

    @pytest.mark.asyncio
    async def test_counts_local_fallback(self, service: PromptService) -> None:
        labels = {"kind": "text", "source": "local"}
        before = sample("promptrelay_prompt_fetch_total", labels)

        await service.get_prompt("greeting")

        assert sample("promptrelay_prompt_fetch_total", labels) == before + 1

    @pytest.mark.asyncio
    async def test_counts_remote_hit(self) -> None:
        client = MockPromptClient()
        client.add_prompt("metrics-remote", "Hi", labels=["production"])
        service = PromptService(ResolvedPromptRegistry(), client)
        labels = {"kind": "text", "source": "remote"}
        before = sample("promptrelay_prompt_fetch_total", labels)

        await service.get_prompt("metrics-remote")

        assert sample("promptrelay_prompt_fetch_total", labels) == before + 1


class TestBatchItemFailures:
    """Tests for BATCH_ITEM_FAILURES counter."""

    @pytest.mark.asyncio
    async def test_counts_dropped_keys(self, service: PromptService) -> None:
        before = sample("promptrelay_batch_item_failures_total")

        async def broken(key: str, label: str | None = None) -> None:
            raise RuntimeError("broken")

        service.get_prompt = broken  # type: ignore[method-assign]
        await service.get_prompts(["greeting", "farewell"])

        assert sample("promptrelay_batch_item_failures_total") == before + 2
