"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

HTTP_REQUESTS_TOTAL = Counter(
    "stratify_http_requests_total",
    "Total number of HTTP requests.",
    ["method", "route", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "stratify_http_request_duration_seconds",
    "HTTP request duration in seconds.",
    ["method", "route", "status"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

BACKEND_REQUESTS_TOTAL = Counter(
    "stratify_backend_requests_total",
    "Calls made to the data/auth backend.",
    ["operation", "table", "outcome"],
)

STALE_RESULTS_DISCARDED_TOTAL = Counter(
    "stratify_stale_results_discarded_total",
    "List/search responses dropped because a newer request was issued.",
    ["view"],
)

DASHBOARD_SESSIONS_ACTIVE = Gauge(
    "stratify_dashboard_sessions_active",
    "Dashboard sessions that have not idled out.",
)


def observe_http_request(
    *,
    method: str,
    route: str,
    status_code: int,
    duration_ms: float,
) -> None:
    status = str(status_code)
    HTTP_REQUESTS_TOTAL.labels(method=method, route=route, status=status).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(
        method=method, route=route, status=status
    ).observe(duration_ms / 1000.0)


def observe_backend_call(*, operation: str, table: str, ok: bool) -> None:
    BACKEND_REQUESTS_TOTAL.labels(
        operation=operation, table=table, outcome="ok" if ok else "error"
    ).inc()
