"""Observability: structured logging, event identifiers and metrics.

Uses structlog for logging and Prometheus for metrics.
"""

from promptrelay.observability.events import PromptEvent
from promptrelay.observability.logging import get_logger, setup_logging

__all__ = ["PromptEvent", "get_logger", "setup_logging"]
