"""Fixed log event identifiers.

Operators filter on these names to follow a prompt through remote fetch,
retry, fallback and batch handling. They carry no behavior.
"""

from enum import StrEnum


class PromptEvent(StrEnum):
    """Structured log event names."""

    FETCH_PROMPT = "prompt_fetch_remote"
    FETCH_CHAT_PROMPT = "chat_prompt_fetch_remote"
    REMOTE_FALLBACK = "prompt_remote_fallback"
    LOCAL_DEFAULT_RETURNED = "prompt_local_default_returned"
    BATCH_ITEM_FAILED = "prompt_batch_item_failed"
    BATCH_ITEM_NOT_FOUND = "prompt_batch_item_not_found"
    RETRY_ATTEMPT = "prompt_retry_attempt"
    NOT_CONFIGURED = "prompt_remote_not_configured"
    CREATE_FAILED = "prompt_create_failed"
    LABELS_UPDATED = "prompt_labels_updated"
