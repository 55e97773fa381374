"""
Hardware capability collaborator.

GPU enumeration heuristics live outside the installer core; the core only
consumes their verdict through ``HardwareValidator.validate``.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class HardwareValidation:
    """Verdict on whether this machine can run the managed application."""
    is_valid: bool
    gpu: Optional[str] = None  # not guaranteed to be usable, check is_valid
    error: Optional[str] = None


class HardwareValidator(Protocol):
    async def validate(self) -> HardwareValidation:
        ...


class StaticHardwareValidator:
    """Returns a verdict decided up front, e.g. from a command-line flag."""

    def __init__(self, result: HardwareValidation):
        self.result = result

    async def validate(self) -> HardwareValidation:
        return self.result
