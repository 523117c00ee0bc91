"""Telemetry event types."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class EventOutcome(str, Enum):
    """Outcome of a resolution call."""
    SUCCESS = "success"
    ERROR = "error"


class Operation(str, Enum):
    """Type of resolution performed."""
    RESOLVE_ONE = "resolve_one"
    RESOLVE_MANY = "resolve_many"


@dataclass(frozen=True, slots=True)
class ResolutionEvent:
    """
    A single resolution call, for telemetry.

    Captures what was asked for, how long the metadata round trip and
    validation took, and how the answer broke down.
    """
    # Request identification
    request_id: str

    # Timing
    timestamp: datetime

    # What
    operation: Operation
    names: tuple[str, ...]

    # Outcome
    outcome: EventOutcome
    error_message: str | None = None

    # Performance
    latency_ms: float = 0.0

    # Result breakdown
    valid_count: int = 0
    invalid_count: int = 0

    # Additional context
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        operation: Operation,
        names: list[str] | tuple[str, ...],
        outcome: EventOutcome,
        latency_ms: float = 0.0,
        **kwargs,
    ) -> ResolutionEvent:
        """Factory method with sensible defaults."""
        return cls(
            request_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            operation=operation,
            names=tuple(names),
            outcome=outcome,
            latency_ms=latency_ms,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
            "operation": self.operation.value,
            "names": list(self.names),
            "outcome": self.outcome.value,
            "error_message": self.error_message,
            "latency_ms": self.latency_ms,
            "valid_count": self.valid_count,
            "invalid_count": self.invalid_count,
            "metadata": self.metadata,
        }
