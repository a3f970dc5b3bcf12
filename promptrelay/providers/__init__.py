"""Remote prompt service clients.

The interface is RemotePromptClient. LangfuseClient talks to the Langfuse
public API over httpx; MockPromptClient keeps prompts in memory for tests
and local development.
"""

from promptrelay.providers.base import DEFAULT_LABEL, RemotePromptClient
from promptrelay.providers.langfuse.client import LangfuseClient
from promptrelay.providers.mock import MockPromptClient

__all__ = [
    "DEFAULT_LABEL",
    "LangfuseClient",
    "MockPromptClient",
    "RemotePromptClient",
]
