"""Prometheus metrics for simconsole."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# Store metrics
store_operations_total = Counter(
    "simconsole_store_operations_total",
    "Total entity store operations",
    ["kind", "operation", "outcome"],
)

store_cached_resources = Gauge(
    "simconsole_store_cached_resources",
    "Number of resources in the store's collection cache",
    ["kind"],
)

store_selection_active = Gauge(
    "simconsole_store_selection_active",
    "Whether the store currently holds a selection (0 or 1)",
    ["kind"],
)

pod_index_buckets = Gauge(
    "simconsole_pod_index_buckets",
    "Number of buckets in the pod-by-node index, including unscheduled",
)

# API client metrics
api_requests_total = Counter(
    "simconsole_api_requests_total",
    "Total requests sent to the simulator API",
    ["kind", "method", "status"],
)

api_request_duration_seconds = Histogram(
    "simconsole_api_request_duration_seconds",
    "Simulator API request duration in seconds",
    ["kind", "method"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
