"""
Custom exceptions for the Install Assistant.

This module defines the exception classes raised across the
installer core. Item-level validation problems are never raised;
they are reported as validation items instead.
"""

from typing import Any, Dict, Optional


class InstallAssistantError(Exception):
    """Base exception class for Install Assistant errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(InstallAssistantError):
    """Raised when persisted configuration is missing or malformed."""
    pass


class ProcessStartError(InstallAssistantError):
    """Raised when an external process cannot be started."""

    def __init__(self, message: str, command: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.command = command


class HelperProcessError(InstallAssistantError):
    """Raised when the extension manager helper exits with a non-zero code."""

    def __init__(
        self,
        message: str,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

    def __str__(self) -> str:
        return (
            f"{self.message}\nExit code: {self.exit_code}\n"
            f"Output:{self.stdout}\n\nError:{self.stderr}"
        )


class MigrationError(InstallAssistantError):
    """Raised when migrating extensions between installations fails."""
    pass


class RepairError(InstallAssistantError):
    """Raised when a repair action cannot complete."""
    pass


class AppStartError(RuntimeError):
    """
    Raised on application lifecycle misuse, such as initializing
    process-wide state twice. Indicates a bootstrap ordering bug and
    is deliberately not an InstallAssistantError.
    """
    pass
