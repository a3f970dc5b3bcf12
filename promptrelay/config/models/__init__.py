"""Configuration model exports.

    from promptrelay.config.models import LangfuseConfig, PromptsConfig
"""

from promptrelay.config.models.observability import (
    LoggingConfig,
    ObservabilityConfig,
)
from promptrelay.config.models.prompts import (
    ChatMessage,
    PromptEntryConfig,
    PromptKeyConfig,
    PromptsConfig,
)
from promptrelay.config.models.remote import (
    HttpClientConfig,
    LangfuseConfig,
    ResilienceConfig,
)

__all__ = [
    # Observability
    "LoggingConfig",
    "ObservabilityConfig",
    # Prompts
    "ChatMessage",
    "PromptEntryConfig",
    "PromptKeyConfig",
    "PromptsConfig",
    # Remote
    "HttpClientConfig",
    "LangfuseConfig",
    "ResilienceConfig",
]
