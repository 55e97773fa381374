"""
Install Assistant

Validates, repairs and migrates a desktop application's local Python
installation: its base path, bundled runtime, packages and system tools.
"""

__version__ = "0.1.0"
__author__ = "Install Assistant Team"

from install_assistant.models.installation import Installation
from install_assistant.models.validation import ValidationReport, ValidationStatus

__all__ = [
    "Installation",
    "ValidationReport",
    "ValidationStatus",
]
