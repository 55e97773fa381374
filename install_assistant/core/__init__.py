"""
Core module for the Install Assistant.

This module contains the exception hierarchy shared by the
validation engine, the runtime runner and the migration protocol.
"""

from install_assistant.core.exceptions import (
    InstallAssistantError,
    ConfigurationError,
    ProcessStartError,
    HelperProcessError,
    MigrationError,
    RepairError,
    AppStartError,
)

__all__ = [
    "InstallAssistantError",
    "ConfigurationError",
    "ProcessStartError",
    "HelperProcessError",
    "MigrationError",
    "RepairError",
    "AppStartError",
]
