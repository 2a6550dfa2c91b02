from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

GOAL_CLASSIFICATIONS_TOTAL = Counter(
    "agentorch_goal_classifications_total",
    "Goals routed to an agent variant, grouped by the rule that matched",
    labelnames=("variant", "matched_on"),
)

AGENT_RUNS_TOTAL = Counter(
    "agentorch_agent_runs_total",
    "Agent workflow runs by variant and status",
    labelnames=("variant", "status"),
)

AGENT_RUNS_ACTIVE = Gauge(
    "agentorch_agent_runs_active",
    "Agent workflow runs currently in flight",
    labelnames=("variant",),
)

AGENT_RUN_LATENCY_SECONDS = Histogram(
    "agentorch_agent_run_latency_seconds",
    "End-to-end agent workflow runtime",
    labelnames=("variant",),
    buckets=(0.1, 0.5, 1, 2, 5, 10, 15, 30, 60, float("inf")),
)

WORKFLOW_STEPS_TOTAL = Counter(
    "agentorch_workflow_steps_total",
    "Workflow steps started per agent variant",
    labelnames=("variant",),
)

PROGRESS_NOTIFICATIONS_TOTAL = Counter(
    "agentorch_progress_notifications_total",
    "Progress notifications delivered to sinks",
    labelnames=("kind",),
)


def record_goal_classification(*, variant: str, matched_on: str) -> None:
    GOAL_CLASSIFICATIONS_TOTAL.labels(variant=variant, matched_on=matched_on).inc()


def mark_agent_run_started(*, variant: str) -> None:
    AGENT_RUNS_ACTIVE.labels(variant=variant).inc()
    AGENT_RUNS_TOTAL.labels(variant, "started").inc()


def mark_agent_run_finished(*, variant: str, status: str, latency: float) -> None:
    AGENT_RUNS_ACTIVE.labels(variant=variant).dec()
    AGENT_RUNS_TOTAL.labels(variant, status).inc()
    AGENT_RUN_LATENCY_SECONDS.labels(variant=variant).observe(max(0.0, latency))


def increment_workflow_step(*, variant: str) -> None:
    WORKFLOW_STEPS_TOTAL.labels(variant=variant).inc()


def increment_progress_notification(*, kind: str) -> None:
    PROGRESS_NOTIFICATIONS_TOTAL.labels(kind=kind).inc()
