"""Prometheus metrics for promptrelay."""

from prometheus_client import Counter, Histogram

PROMPT_FETCH_COUNT = Counter(
    "promptrelay_prompt_fetch_total",
    "Prompt reads by kind and where the content came from",
    labelnames=["kind", "source"],
)

REMOTE_RETRIES = Counter(
    "promptrelay_remote_retries_total",
    "Retries issued against the remote prompt service",
    labelnames=["operation"],
)

REMOTE_REQUEST_LATENCY = Histogram(
    "promptrelay_remote_request_latency_seconds",
    "Remote prompt service latency including retries",
    labelnames=["operation"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

BATCH_ITEM_FAILURES = Counter(
    "promptrelay_batch_item_failures_total",
    "Batch keys dropped because their resolution raised",
)
