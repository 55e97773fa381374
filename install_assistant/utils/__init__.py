"""
Utilities module for the Install Assistant.

This module contains version parsing, filesystem helpers, logging
setup and the telemetry seam.
"""

from install_assistant.utils.helpers import (
    path_accessible,
    path_read_writable,
    can_execute,
    is_path_inside,
    load_config_file,
    save_config_file,
)
from install_assistant.utils.logging import (
    setup_logging,
    get_logger,
    LogCategory,
    LogEntry,
    StructuredFormatter,
)
from install_assistant.utils.telemetry import (
    AuditTelemetry,
    Telemetry,
    record_event,
)
from install_assistant.utils.versions import (
    compare_versions,
    is_version_below_minimum,
    parse_driver_version,
)

__all__ = [
    # Helper functions
    "path_accessible",
    "path_read_writable",
    "can_execute",
    "is_path_inside",
    "load_config_file",
    "save_config_file",
    # Logging utilities
    "setup_logging",
    "get_logger",
    "LogCategory",
    "LogEntry",
    "StructuredFormatter",
    # Telemetry
    "AuditTelemetry",
    "Telemetry",
    "record_event",
    # Versions
    "compare_versions",
    "is_version_below_minimum",
    "parse_driver_version",
]
