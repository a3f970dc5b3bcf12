"""Unit tests for prompt domain models."""

import pytest
from pydantic import ValidationError

from promptrelay.prompts.models import (
    PromptIdentity,
    PromptKind,
    PromptResult,
    PromptSource,
)


class TestPromptKind:
    """Tests for PromptKind.parse."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", PromptKind.TEXT),
            ("Chat", PromptKind.CHAT),
            (" TEXT ", PromptKind.TEXT),
            ("image", PromptKind.UNKNOWN),
            (None, PromptKind.UNKNOWN),
        ],
    )
    def test_parse(self, value: str | None, expected: PromptKind) -> None:
        assert PromptKind.parse(value) is expected


class TestPromptResult:
    """Tests for result models."""

    def test_local_result_defaults(self) -> None:
        result = PromptResult(prompt_key="greeting", content="Hi", source=PromptSource.LOCAL)
        assert result.kind is PromptKind.TEXT
        assert result.version is None
        assert result.labels == []
        assert result.config is None

    def test_identity_is_frozen(self) -> None:
        identity = PromptIdentity(actual_key="support/greeting", version=1)
        with pytest.raises(ValidationError):
            identity.version = 2  # type: ignore[misc]
