"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_FAILURE_COUNTER,
    TRANSFORM_COUNTER,
    observe_request,
    observe_transform,
    record_stage_failure,
)

__all__ = [
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_FAILURE_COUNTER",
    "TRANSFORM_COUNTER",
    "observe_request",
    "observe_transform",
    "record_stage_failure",
]
