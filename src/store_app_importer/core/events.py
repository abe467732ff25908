"""
Progress and diagnostic events emitted by the import pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportEvent:
    """A structured progress or error event for one application."""

    kind: str  # e.g. "manifest.resolved", "assignment.dropped", "import.failed"
    package_identifier: str
    message: str = ""
    level: int = logging.INFO
    data: dict = field(default_factory=dict)


@runtime_checkable
class EventSink(Protocol):
    """
    Protocol that all event sinks must implement.

    Sinks receive every ImportEvent in the order the pipeline emits them.
    """

    def emit(self, event: ImportEvent) -> None:
        """Handle a single event."""
        ...


class LoggingEventSink:
    """Writes events through the standard logging module."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def emit(self, event: ImportEvent) -> None:
        self.log.log(event.level, f"[{event.package_identifier}] {event.kind}: {event.message}")
