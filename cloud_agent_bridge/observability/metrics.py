"""
Prometheus counters and histograms for the bridge.

Everything here is exported by GET /metrics (presentation/api/metrics.py).
Labels stay low-cardinality: interaction kinds, subcommand names, error kinds
and route templates. Agent ids never become label values.
"""

from prometheus_client import (
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# DEFINITIONS
# =============================================================================
INTERACTIONS_TOTAL = Counter(
    "bridge_interactions_total",
    "Total number of Discord interactions received by kind",
    ["kind"],
)

COMMANDS_TOTAL = Counter(
    "bridge_commands_total",
    "Total number of command executions by operation and outcome",
    ["operation", "outcome"],
)

API_REQUEST_LATENCY = Histogram(
    "bridge_api_request_duration_seconds",
    "Latency of a single cloud agent API attempt in seconds",
    ["method", "route", "status"],
    buckets=[0.1, 0.25, 0.5, 1, 2, 5, 10, 30],
)

API_RETRIES_TOTAL = Counter(
    "bridge_api_retries_total",
    "Total number of retried cloud agent API attempts by reason",
    ["reason"],
)

ERRORS_TOTAL = Counter(
    "bridge_errors_total",
    "Total number of errors rendered to users by kind",
    ["error_kind"],
)


# =============================================================================
# RECORDERS
# =============================================================================
def increment_interaction(kind: str):
    """Call once per inbound interaction. Integration point: discord_router.InteractionRouter.handle()"""
    INTERACTIONS_TOTAL.labels(kind=kind).inc()


def increment_command(operation: str, outcome: str):
    """Call after each subcommand / modal submission. outcome is "success" or "error"."""
    COMMANDS_TOTAL.labels(operation=operation, outcome=outcome).inc()


def observe_api_latency(method: str, route: str, status: str, duration: float):
    """Call after each API attempt. Integration point: services/cloud_agent_client.py"""
    API_REQUEST_LATENCY.labels(method=method, route=route, status=status).observe(
        duration
    )


def increment_api_retry(reason: str):
    """Call before sleeping for a retry. reason is the error kind that triggered it."""
    API_RETRIES_TOTAL.labels(reason=reason).inc()


def increment_error(error_kind: str):
    ERRORS_TOTAL.labels(error_kind=error_kind).inc()


# =============================================================================
# EXPOSITION
# =============================================================================
def get_metrics_content():
    """Return (payload bytes, content type) for the scrape endpoint."""
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "increment_interaction",
    "increment_command",
    "observe_api_latency",
    "increment_api_retry",
    "increment_error",
    "get_metrics_content",
]
