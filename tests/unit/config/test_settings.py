"""Unit tests for Settings class and get_settings function."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from promptrelay.config import get_settings, load_settings, reload_settings
from promptrelay.config.settings import Settings, set_toml_config


@pytest.fixture
def configured_env(
    test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point the loader at the temporary config dir with no environment file."""
    monkeypatch.setenv("PROMPTRELAY_CONFIG_DIR", str(test_config_dir))
    monkeypatch.setenv("PROMPTRELAY_ENV", "nonexistent")
    return test_config_dir


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self) -> None:
        """Settings has sensible defaults."""
        set_toml_config({})
        settings = Settings()
        assert settings.app_name == "promptrelay"
        assert settings.observability.logging.level == "INFO"

    def test_logging_level_lives_under_observability(self) -> None:
        """There is one logging level setting, the one bootstrap applies."""
        assert "log_level" not in Settings.model_fields
        assert "debug" not in Settings.model_fields

    def test_remote_unconfigured_by_default(self) -> None:
        """Without credentials the remote is off and retries are disabled."""
        set_toml_config({})
        settings = Settings()
        assert settings.langfuse.is_configured() is False
        assert settings.langfuse.resilience.enabled is False
        assert settings.langfuse.resilience.max_retries == 2
        assert settings.langfuse.resilience.base_delay_ms == 200

    def test_prompt_sources_default_empty(self) -> None:
        """Every prompt source starts empty."""
        set_toml_config({})
        prompts = Settings().prompts
        assert prompts.defaults == {}
        assert prompts.chat_defaults == {}
        assert prompts.prompt_keys == {}
        assert prompts.prompt_entries == {}
        assert prompts.entries == []

    def test_observability_defaults(self) -> None:
        """Logging is JSON with redaction on."""
        set_toml_config({})
        logging = Settings().observability.logging
        assert logging.format == "json"
        assert logging.redact_secrets is True


class TestGetSettings:
    """Tests for get_settings function."""

    def test_loads_prompt_sources_from_toml(self, configured_env: Path) -> None:
        """Every prompt source is read from TOML."""
        (configured_env / "default.toml").write_text(
            """
[prompts.defaults]
greeting = "Hello"

[prompts.chat_defaults]
assistant = [{ role = "system", content = "Be brief." }]

[prompts.prompt_keys.greeting]
key = "support/greeting"
label = "staging"

[prompts.prompt_entries.summary]
key = "docs/summary"
version = 3

[[prompts.entries]]
name = "farewell"
default = "Bye"
"""
        )

        settings = get_settings()
        prompts = settings.prompts
        assert prompts.defaults == {"greeting": "Hello"}
        assert prompts.chat_defaults["assistant"][0].content == "Be brief."
        assert prompts.prompt_keys["greeting"].key == "support/greeting"
        assert prompts.prompt_entries["summary"].version == 3
        assert prompts.entries[0].name == "farewell"

    def test_settings_cached(self, configured_env: Path) -> None:
        """get_settings returns cached instance."""
        (configured_env / "default.toml").write_text("app_name = 'cached'")

        assert get_settings() is get_settings()

    def test_reload_settings_clears_cache(self, configured_env: Path) -> None:
        """reload_settings returns fresh instance."""
        default_toml = configured_env / "default.toml"
        default_toml.write_text("app_name = 'original'")
        assert get_settings().app_name == "original"

        default_toml.write_text("app_name = 'updated'")
        assert reload_settings().app_name == "updated"

    def test_partial_langfuse_config_rejected(self, configured_env: Path) -> None:
        """A base URL without keys fails at load time."""
        (configured_env / "default.toml").write_text(
            "[langfuse]\nbase_url = 'https://cloud.langfuse.com'"
        )

        with pytest.raises(ValidationError, match="incomplete"):
            get_settings()


class TestEnvironmentVariableOverrides:
    """Tests for environment variable configuration overrides."""

    def test_top_level_override(
        self, configured_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Top-level values can be overridden with env vars."""
        (configured_env / "default.toml").write_text("app_name = 'toml'")
        monkeypatch.setenv("PROMPTRELAY_APP_NAME", "from-env")

        assert get_settings().app_name == "from-env"

    def test_logging_level_override(
        self, configured_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The effective log level is set through the observability section."""
        (configured_env / "default.toml").write_text("[observability.logging]\nlevel = 'INFO'")
        monkeypatch.setenv("PROMPTRELAY_OBSERVABILITY__LOGGING__LEVEL", "DEBUG")

        assert get_settings().observability.logging.level == "DEBUG"

    def test_nested_override(
        self, configured_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Nested values can be overridden with double underscore."""
        (configured_env / "default.toml").write_text(
            "[langfuse.resilience]\nenabled = false\nmax_retries = 2"
        )
        monkeypatch.setenv("PROMPTRELAY_LANGFUSE__RESILIENCE__ENABLED", "true")

        resilience = get_settings().langfuse.resilience
        assert resilience.enabled is True
        assert resilience.max_retries == 2

    def test_secret_from_env_completes_toml_config(
        self, configured_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Credentials can come from the environment while the URL stays in TOML."""
        (configured_env / "default.toml").write_text(
            "[langfuse]\nbase_url = 'https://cloud.langfuse.com'"
        )
        monkeypatch.setenv("PROMPTRELAY_LANGFUSE__PUBLIC_KEY", "pk-lf-env")
        monkeypatch.setenv("PROMPTRELAY_LANGFUSE__SECRET_KEY", "sk-lf-env")

        langfuse = get_settings().langfuse
        assert langfuse.is_configured() is True
        assert langfuse.secret_key is not None
        assert langfuse.secret_key.get_secret_value() == "sk-lf-env"


class TestLoadSettings:
    """Tests for load_settings."""

    def test_loads_named_environment(self, test_config_dir: Path, mock_toml_files) -> None:
        """A specific overlay can be loaded without touching the cache."""
        mock_toml_files(
            {
                "default.toml": "[langfuse.resilience]\nenabled = false",
                "staging.toml": "[langfuse.resilience]\nenabled = true",
            }
        )

        settings = load_settings(test_config_dir, "staging")

        assert settings.langfuse.resilience.enabled is True
        assert get_settings.cache_info().currsize == 0
