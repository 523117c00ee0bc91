"""Telemetry system - non-blocking resolution event streaming."""

from .events import EventOutcome, Operation, ResolutionEvent
from .emitter import TelemetryEmitter

__all__ = [
    "ResolutionEvent",
    "EventOutcome",
    "Operation",
    "TelemetryEmitter",
]
