"""
Installation record model.

Represents the on-disk installation the validation engine inspects.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel

from install_assistant.constants import EXTENSIONS_DIRECTORY
from install_assistant.models.config import InstallState
from install_assistant.models.validation import ValidationReport

if TYPE_CHECKING:
    from install_assistant.config.desktop_config import DesktopConfig


class Installation(BaseModel):
    """
    An installation read from persisted configuration.

    The record becomes stale as soon as a repair action changes the
    configuration; callers must build a new one with ``from_config``.
    """
    state: InstallState
    base_path: Path
    is_valid: bool = False
    has_issues: bool = False
    validation: Optional[ValidationReport] = None

    @classmethod
    def from_config(cls, config: "DesktopConfig") -> Optional["Installation"]:
        """
        Build an installation record from the desktop settings.

        Returns:
            The record, or None when nothing has been installed yet

        Raises:
            ConfigurationError: If the settings document is missing or malformed
        """
        settings = config.reload()
        state = settings.install_state
        if state is None or state == InstallState.NOT_INSTALLED:
            return None
        if not settings.base_path:
            return None
        return cls(state=state, base_path=Path(settings.base_path))

    @property
    def extensions_path(self) -> Path:
        return self.base_path / EXTENSIONS_DIRECTORY

    def apply_report(self, report: ValidationReport) -> None:
        """Record the outcome of a validation pass."""
        self.validation = report
        self.is_valid = report.overall_valid
        self.has_issues = report.has_issues
