"""Prometheus metrics for the dialogue engine.

Provides metrics collection for:
- Update throughput by kind and outcome
- Dispatch latency
- Flow transitions
"""

from prometheus_client import Counter, Histogram, Info

app_info = Info(
    "botmachine_app",
    "Application information",
)
app_info.info(
    {
        "version": "0.3.0",
        "service": "botmachine",
    }
)

updates_total = Counter(
    "botmachine_updates_total",
    "Total number of updates dispatched",
    ["kind", "status"],  # kind: message/callback_query/other, status: ok/error
)

dispatch_duration_seconds = Histogram(
    "botmachine_dispatch_duration_seconds",
    "Time spent dispatching a single update",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

flow_transitions_total = Counter(
    "botmachine_flow_transitions_total",
    "Flow state transitions",
    ["flow", "outcome"],  # outcome: refresh/transition/exit/rerender/recovered
)


def record_update(kind: str, status: str, duration: float) -> None:
    """Record one dispatched update.

    Args:
        kind: Update kind (message, callback_query, other)
        status: Dispatch outcome (ok or error)
        duration: Dispatch duration in seconds
    """
    updates_total.labels(kind=kind, status=status).inc()
    dispatch_duration_seconds.observe(duration)


def record_flow_transition(flow: str, outcome: str) -> None:
    """Record a flow state machine step.

    Args:
        flow: Flow name
        outcome: What the step did
    """
    flow_transitions_total.labels(flow=flow, outcome=outcome).inc()
