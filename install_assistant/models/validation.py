"""
Validation result models.

A validation pass produces one ``ValidationItem`` per check, collected into
an immutable ``ValidationReport``.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ValidationStatus(str, Enum):
    """Status of a single validation item."""
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    SKIPPED = "skipped"


class ValidationItemName(str, Enum):
    """Keys of the installation health checks, in report order."""
    INSTALL_STATE = "install_state"
    BASE_PATH = "base_path"
    VENV_DIRECTORY = "venv_directory"
    PYTHON_INTERPRETER = "python_interpreter"
    UV = "uv"
    PYTHON_PACKAGES = "python_packages"
    GIT = "git"
    VC_REDIST = "vc_redist"
    HARDWARE = "hardware"
    NVIDIA_DRIVER = "nvidia_driver"


class ValidationItem(BaseModel):
    """Result of one named health check."""
    model_config = ConfigDict(frozen=True)

    name: ValidationItemName
    status: ValidationStatus
    detail: Optional[str] = None

    @classmethod
    def ok(cls, name: ValidationItemName, detail: Optional[str] = None) -> "ValidationItem":
        return cls(name=name, status=ValidationStatus.OK, detail=detail)

    @classmethod
    def warning(cls, name: ValidationItemName, detail: Optional[str] = None) -> "ValidationItem":
        return cls(name=name, status=ValidationStatus.WARNING, detail=detail)

    @classmethod
    def error(cls, name: ValidationItemName, detail: Optional[str] = None) -> "ValidationItem":
        return cls(name=name, status=ValidationStatus.ERROR, detail=detail)

    @classmethod
    def skipped(cls, name: ValidationItemName, detail: Optional[str] = None) -> "ValidationItem":
        return cls(name=name, status=ValidationStatus.SKIPPED, detail=detail)


class ValidationReport(BaseModel):
    """Immutable snapshot of one full validation pass."""
    model_config = ConfigDict(frozen=True)

    items: Dict[ValidationItemName, ValidationItem] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_items(cls, items: Iterable[ValidationItem]) -> "ValidationReport":
        return cls(items={item.name: item for item in items})

    @property
    def overall_valid(self) -> bool:
        """True iff no item is an error."""
        return all(item.status != ValidationStatus.ERROR for item in self.items.values())

    @property
    def has_issues(self) -> bool:
        """True iff any item is a warning or an error."""
        return any(
            item.status in (ValidationStatus.WARNING, ValidationStatus.ERROR)
            for item in self.items.values()
        )

    @property
    def errors(self) -> List[ValidationItem]:
        return [item for item in self.items.values() if item.status == ValidationStatus.ERROR]

    @property
    def warnings(self) -> List[ValidationItem]:
        return [item for item in self.items.values() if item.status == ValidationStatus.WARNING]

    def status_of(self, name: ValidationItemName) -> Optional[ValidationStatus]:
        item = self.items.get(name)
        return item.status if item else None

    def as_status_map(self) -> Dict[str, str]:
        """Item name to status, as sent to the repair surface."""
        return {name.value: item.status.value for name, item in self.items.items()}
