"""Observability package for the cloud agent bridge."""

from cloud_agent_bridge.observability.metrics import (
    increment_interaction,
    increment_command,
    observe_api_latency,
    increment_api_retry,
    increment_error,
    get_metrics_content,
)

__all__ = [
    "increment_interaction",
    "increment_command",
    "observe_api_latency",
    "increment_api_retry",
    "increment_error",
    "get_metrics_content",
]
