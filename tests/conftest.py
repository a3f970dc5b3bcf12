"""Shared test fixtures for the promptrelay test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest

from promptrelay.config.models import LangfuseConfig, PromptsConfig, ResilienceConfig
from promptrelay.prompts import PromptService, ResolvedPromptRegistry, build_registry
from promptrelay.providers import LangfuseClient, MockPromptClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "app_name = 'dev'",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"PROMPTRELAY_APP_NAME": "relay-test"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from promptrelay.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def prompts_config() -> PromptsConfig:
    """Layered prompt configuration exercising every source."""
    return PromptsConfig.model_validate(
        {
            "defaults": {
                "greeting": "Hello from local defaults",
                "farewell": "Goodbye",
            },
            "chat_defaults": {
                "assistant": [
                    {"role": "system", "content": "You are helpful."},
                    {"role": "user", "content": "{{question}}"},
                ],
            },
            "prompt_keys": {
                "greeting": {"key": "support/greeting", "label": "staging"},
            },
            "prompt_entries": {
                "summary": {"key": "docs/summary", "version": 3, "label": "production"},
            },
            "entries": [
                {"name": "farewell", "key": "support/farewell", "label": "latest"},
            ],
        }
    )


@pytest.fixture
def registry(prompts_config: PromptsConfig) -> ResolvedPromptRegistry:
    """Registry built from prompts_config."""
    return build_registry(prompts_config)


@pytest.fixture
def mock_client() -> MockPromptClient:
    """Configured in-memory remote."""
    return MockPromptClient()


@pytest.fixture
def service(registry: ResolvedPromptRegistry, mock_client: MockPromptClient) -> PromptService:
    """PromptService over the layered registry and the mock remote."""
    return PromptService(registry, mock_client)


@pytest.fixture
def langfuse_config() -> LangfuseConfig:
    """Configured Langfuse settings with retries enabled."""
    return LangfuseConfig(
        base_url="https://langfuse.test",
        public_key="pk-lf-test",
        secret_key="sk-lf-test",
        resilience=ResilienceConfig(enabled=True, max_retries=2, base_delay_ms=200),
    )


class RecordingSleep:
    """Backoff sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_client(
    langfuse_config: LangfuseConfig, recording_sleep: RecordingSleep
) -> Callable[..., LangfuseClient]:
    """Factory for a LangfuseClient backed by httpx.MockTransport.

    Usage:
        client = make_client(lambda request: httpx.Response(200, json={...}))
    """

    def _make(handler: Handler, config: LangfuseConfig | None = None) -> LangfuseClient:
        return LangfuseClient(
            config or langfuse_config,
            transport=httpx.MockTransport(handler),
            sleep=recording_sleep,
        )

    return _make


@pytest.fixture
def text_prompt_payload() -> Callable[..., dict[str, Any]]:
    """Factory for the JSON body of a text prompt as the service returns it."""
    return _text_prompt_payload


def _text_prompt_payload(
    name: str = "support/greeting",
    prompt: str = "Hello from Langfuse",
    version: int = 1,
    labels: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "name": name,
        "version": version,
        "type": "text",
        "prompt": prompt,
        "labels": labels if labels is not None else ["production"],
        "tags": ["support"],
        "config": {"temperature": 0.2},
        "commitMessage": None,
    }
