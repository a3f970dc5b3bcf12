"""Unit tests for configuration Pydantic models."""

import pytest
from pydantic import SecretStr, ValidationError

from promptrelay.config.models import (
    ChatMessage,
    HttpClientConfig,
    LangfuseConfig,
    LoggingConfig,
    PromptEntryConfig,
    PromptKeyConfig,
    PromptsConfig,
    ResilienceConfig,
)


class TestLangfuseConfig:
    """Tests for LangfuseConfig model."""

    def test_empty_is_valid_and_unconfigured(self) -> None:
        """No connection settings means local-only mode."""
        config = LangfuseConfig()
        assert config.is_configured() is False

    def test_blank_values_count_as_unset(self) -> None:
        """Whitespace-only values are treated as missing."""
        config = LangfuseConfig(base_url="  ", public_key="", secret_key=" ")
        assert config.base_url is None
        assert config.public_key is None
        assert config.secret_key is None
        assert config.is_configured() is False

    def test_fully_configured(self) -> None:
        """All three settings make the remote available."""
        config = LangfuseConfig(
            base_url=" https://cloud.langfuse.com ",
            public_key="pk-lf-1",
            secret_key=SecretStr(" sk-lf-1 "),
        )
        assert config.is_configured() is True
        assert config.base_url == "https://cloud.langfuse.com"
        assert config.secret_key is not None
        assert config.secret_key.get_secret_value() == "sk-lf-1"

    @pytest.mark.parametrize(
        "values",
        [
            {"base_url": "https://cloud.langfuse.com"},
            {"public_key": "pk-lf-1", "secret_key": "sk-lf-1"},
            {"base_url": "https://cloud.langfuse.com", "secret_key": "sk-lf-1"},
        ],
    )
    def test_partial_configuration_rejected(self, values: dict[str, str]) -> None:
        """Some but not all settings is a configuration error."""
        with pytest.raises(ValidationError, match="incomplete"):
            LangfuseConfig(**values)

    def test_relative_url_rejected(self) -> None:
        """base_url must be absolute http(s)."""
        with pytest.raises(ValidationError, match="absolute URL"):
            LangfuseConfig(base_url="langfuse.local", public_key="pk", secret_key="sk")

    def test_secrets_hidden_in_repr(self) -> None:
        """Keys never appear in the model repr."""
        config = LangfuseConfig(
            base_url="https://cloud.langfuse.com",
            public_key="pk-lf-visible",
            secret_key="sk-lf-visible",
        )
        assert "sk-lf-visible" not in repr(config)


class TestResilienceConfig:
    """Tests for ResilienceConfig model."""

    def test_defaults(self) -> None:
        """Retries are off by default with 2 retries at 200ms base."""
        config = ResilienceConfig()
        assert config.enabled is False
        assert config.max_retries == 2
        assert config.base_delay_ms == 200

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResilienceConfig(max_retries=-1)

    def test_zero_delay_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResilienceConfig(base_delay_ms=0)


class TestHttpClientConfig:
    """Tests for HttpClientConfig model."""

    def test_all_optional(self) -> None:
        config = HttpClientConfig()
        assert config.max_connections is None
        assert config.request_timeout_seconds is None

    def test_max_connections_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            HttpClientConfig(max_connections=0)


class TestPromptConfigModels:
    """Tests for prompt configuration models."""

    def test_entry_fields_all_optional(self) -> None:
        """An entry may override a single field."""
        entry = PromptEntryConfig(label="staging")
        assert entry.key is None
        assert entry.version is None
        assert entry.chat_default is None

    def test_entry_version_must_be_positive(self) -> None:
        """Versions start at 1."""
        with pytest.raises(ValidationError):
            PromptEntryConfig(version=0)

    def test_prompt_key_requires_key(self) -> None:
        with pytest.raises(ValidationError):
            PromptKeyConfig.model_validate({"label": "production"})

    def test_chat_defaults_parse_messages(self) -> None:
        """Chat defaults are parsed from role/content tables."""
        config = PromptsConfig.model_validate(
            {"chat_defaults": {"assistant": [{"role": "system", "content": "Be brief."}]}}
        )
        assert config.chat_defaults["assistant"] == [
            ChatMessage(role="system", content="Be brief.")
        ]

    def test_chat_message_is_frozen(self) -> None:
        message = ChatMessage(role="user", content="hi")
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore[misc]


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_invalid_format_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")  # type: ignore[arg-type]
