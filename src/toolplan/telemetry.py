"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Telemetry sinks for scheduler observability.

The executor reports stage events, invocation counters and latency
histograms through a `TelemetrySink`. The default sink drops everything;
`InMemoryTelemetrySink` keeps rows for tests and debugging.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class TelemetryEvent:
    """
    Point-in-time telemetry event.

    Attributes:
        name: Event name.
        timestamp_ms: Epoch milliseconds at emission time.
        attributes: JSON-safe event attributes.
    """

    name: str
    timestamp_ms: int
    attributes: dict[str, Any] = field(default_factory=dict)


class TelemetrySink(Protocol):
    """Protocol implemented by telemetry backends."""

    def record_event(self, event: TelemetryEvent) -> None:
        """
        Record a single event.

        Args:
            event: Event payload to emit.
        """
        ...

    def increment_counter(
        self,
        name: str,
        value: int = 1,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        """
        Increment a named counter.

        Args:
            name: Counter name.
            value: Increment value.
            attributes: Optional counter attributes.
        """
        ...

    def record_histogram(
        self,
        name: str,
        value: float,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        """
        Record a histogram measurement.

        Args:
            name: Histogram name.
            value: Numeric measurement value.
            attributes: Optional histogram attributes.
        """
        ...


@dataclass(slots=True)
class NullTelemetrySink:
    """No-op telemetry sink used as safe default."""

    def record_event(self, event: TelemetryEvent) -> None:
        _ = event

    def increment_counter(
        self,
        name: str,
        value: int = 1,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        _ = (name, value, attributes)

    def record_histogram(
        self,
        name: str,
        value: float,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        _ = (name, value, attributes)


@dataclass(slots=True)
class InMemoryTelemetrySink:
    """Telemetry sink that keeps every row in memory."""

    _events: list[TelemetryEvent] = field(default_factory=list)
    _counters: list[dict[str, Any]] = field(default_factory=list)
    _histograms: list[dict[str, Any]] = field(default_factory=list)

    def record_event(self, event: TelemetryEvent) -> None:
        self._events.append(event)

    def increment_counter(
        self,
        name: str,
        value: int = 1,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        self._counters.append(
            {"name": name, "value": value, "attributes": dict(attributes or {})}
        )

    def record_histogram(
        self,
        name: str,
        value: float,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        self._histograms.append(
            {"name": name, "value": value, "attributes": dict(attributes or {})}
        )

    def events(self) -> list[TelemetryEvent]:
        """Return a copy of recorded events."""
        return list(self._events)

    def counters(self) -> list[dict[str, Any]]:
        """Return a copy of recorded counter increments."""
        return list(self._counters)

    def histograms(self) -> list[dict[str, Any]]:
        """Return a copy of recorded histogram points."""
        return list(self._histograms)

    def counter_total(self, name: str) -> int:
        """Sum all increments recorded for counter `name`."""
        return sum(int(row["value"]) for row in self._counters if row["name"] == name)


def now_ms() -> int:
    """Return current epoch time in milliseconds."""
    return int(time.time() * 1000)
