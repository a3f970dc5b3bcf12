"""Langfuse prompt API client, retry policy and wire models."""

from promptrelay.providers.langfuse.client import LangfuseClient
from promptrelay.providers.langfuse.retry import (
    RetryDecision,
    RetryPolicy,
    send_with_retry,
    should_retry_status,
)

__all__ = [
    "LangfuseClient",
    "RetryDecision",
    "RetryPolicy",
    "send_with_retry",
    "should_retry_status",
]
