"""
Telemetry seam.

Tracked operations call ``record_event`` explicitly at entry. The default
implementation only writes structured audit entries to the log; sending
events anywhere else is the job of an external collaborator.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

from install_assistant.utils.logging import LogCategory, LogEntry, LogLevel, get_logger


class Telemetry(Protocol):
    """Anything that can receive named events."""

    def track(self, event: str, properties: Optional[Dict[str, Any]] = None) -> None:
        ...


class AuditTelemetry:
    """Telemetry that records events as structured audit log entries."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("audit")
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def track(self, event: str, properties: Optional[Dict[str, Any]] = None) -> None:
        """Log an audit event."""
        properties = properties or {}
        self.events.append((event, properties))

        log_entry = LogEntry(
            level=LogLevel.INFO,
            category=LogCategory.TELEMETRY,
            message=f"Event: {event}",
            operation=event,
            metadata={'properties': properties}
        )
        self.logger.info(log_entry.message, extra={'log_entry': log_entry})


def record_event(
    telemetry: Optional[Telemetry],
    event: str,
    properties: Optional[Dict[str, Any]] = None
) -> None:
    """Record ``event`` on ``telemetry`` if one is configured."""
    if telemetry is not None:
        telemetry.track(event, properties)
