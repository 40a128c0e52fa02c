"""Prometheus metrics for the Designate Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "designate_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "designate_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

phase_duration_seconds = Histogram(
    "designate_operator_phase_duration_seconds",
    "Duration of reconcile phases in seconds",
    ["phase", "result"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

requeue_total = Counter(
    "designate_operator_requeue_total",
    "Total number of reconciliations ending with a requeue",
    ["kind", "phase"],
)

# Input drift detection metrics
drift_detected_total = Counter(
    "designate_operator_drift_detected_total",
    "Total number of input hash changes",
    ["kind", "hash_key"],
)

# API call metrics
api_call_total = Counter(
    "designate_operator_api_call_total",
    "Total number of Kubernetes API calls made by resource drivers",
    ["resource", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "designate_operator_api_call_duration_seconds",
    "Duration of Kubernetes API calls in seconds",
    ["resource", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

error_total = Counter(
    "designate_operator_error_total",
    "Total number of reconcile errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "designate_operator_resource_status_total",
    "Resource readiness observed at the end of a reconcile",
    ["kind", "status"],
)
