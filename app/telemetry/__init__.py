"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_DURATION,
    STAGE_OUTCOME_COUNTER,
    TTS_RETRY_COUNTER,
    increment_tts_retry,
    observe_request,
    observe_stage,
)

__all__ = [
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_DURATION",
    "STAGE_OUTCOME_COUNTER",
    "TTS_RETRY_COUNTER",
    "increment_tts_retry",
    "observe_request",
    "observe_stage",
]
