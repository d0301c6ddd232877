"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        20.0,
        40.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

TRANSFORM_COUNTER = Counter(
    "transform_requests_total",
    "Transform requests by persona and outcome",
    ("persona", "outcome"),
)

STAGE_FAILURE_COUNTER = Counter(
    "transform_stage_failures_total",
    "Collaborator stage failures in the transform pipeline",
    ("stage",),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=str(status_code),
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_transform(persona_id: str, outcome: str) -> None:
    TRANSFORM_COUNTER.labels(persona=persona_id or "unknown", outcome=outcome).inc()


def record_stage_failure(stage: str) -> None:
    STAGE_FAILURE_COUNTER.labels(stage=stage).inc()
