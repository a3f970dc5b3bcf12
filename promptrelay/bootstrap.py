"""Bootstrap module for promptrelay setup.

Builds a ready PromptService from settings:
- Configures structured logging, tagging every event with the app name
- Merges the layered prompt configuration into a registry
- Creates the Langfuse client when credentials are configured

Example usage:

    from promptrelay.bootstrap import bootstrap

    service, client = bootstrap()
    prompt = await service.get_prompt("greeting")
    await client.close()
"""

import structlog

from promptrelay.config import get_settings
from promptrelay.config.settings import Settings
from promptrelay.observability.logging import get_logger, setup_logging
from promptrelay.prompts.merger import build_registry
from promptrelay.prompts.service import PromptService
from promptrelay.providers.base import RemotePromptClient
from promptrelay.providers.langfuse.client import LangfuseClient

logger = get_logger(__name__)


def create_prompt_service(
    settings: Settings,
    client: RemotePromptClient | None = None,
) -> PromptService:
    """Wire a PromptService from settings.

    Args:
        settings: Loaded settings
        client: Remote client to use instead of a LangfuseClient built from settings

    Returns:
        PromptService with the merged registry; batch concurrency follows
        langfuse.http.max_connections (default 10)
    """
    registry = build_registry(settings.prompts)
    remote = client if client is not None else LangfuseClient(settings.langfuse)

    service = PromptService(
        registry,
        remote,
        max_concurrency=settings.langfuse.http.max_connections,
    )
    logger.info(
        "prompt_service_created",
        prompts=len(registry),
        remote_configured=service.remote_configured,
        retries_enabled=settings.langfuse.resilience.enabled,
        max_concurrency=service.max_concurrency,
    )
    return service


def bootstrap(settings: Settings | None = None) -> tuple[PromptService, RemotePromptClient]:
    """Load configuration, configure logging and build the service.

    Args:
        settings: Settings to use instead of get_settings()

    Returns:
        Tuple of (PromptService, remote client); close the client on shutdown
    """
    settings = settings or get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_secrets=log_config.redact_secrets,
    )
    structlog.contextvars.bind_contextvars(app=settings.app_name)

    client = LangfuseClient(settings.langfuse)
    return create_prompt_service(settings, client), client
