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
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

STAGE_OUTCOME_COUNTER = Counter(
    "pipeline_stage_outcomes_total",
    "Content pipeline stage executions by outcome",
    ("stage", "outcome"),
)

STAGE_DURATION = Histogram(
    "pipeline_stage_duration_seconds",
    "Content pipeline stage duration in seconds",
    ("stage",),
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)

TTS_RETRY_COUNTER = Counter(
    "pipeline_tts_retries_total",
    "Speech synthesis attempts retried after a transient error",
)

STAGE_OUTCOMES = ("success", "fallback", "failed")


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
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


def observe_stage(stage: str, outcome: str, duration_seconds: float) -> None:
    """Record one pipeline stage execution."""

    if outcome not in STAGE_OUTCOMES:
        raise ValueError(f"Unknown stage outcome '{outcome}'")
    STAGE_OUTCOME_COUNTER.labels(stage=stage, outcome=outcome).inc()
    STAGE_DURATION.labels(stage=stage).observe(max(duration_seconds, 0))


def increment_tts_retry() -> None:
    TTS_RETRY_COUNTER.inc()
