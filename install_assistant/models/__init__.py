"""
Data models for the Install Assistant.

This module contains the Pydantic models used for configuration,
validation results, install stages and installation records.
"""

from install_assistant.models.config import (
    AssistantSettings,
    DesktopSettings,
    InstallState,
)
from install_assistant.models.installation import Installation
from install_assistant.models.stage import (
    InstallStage,
    InstallStageInfo,
    create_install_stage_info,
)
from install_assistant.models.validation import (
    ValidationItem,
    ValidationItemName,
    ValidationReport,
    ValidationStatus,
)

__all__ = [
    # Configuration models
    "AssistantSettings",
    "DesktopSettings",
    "InstallState",
    # Installation record
    "Installation",
    # Stage models
    "InstallStage",
    "InstallStageInfo",
    "create_install_stage_info",
    # Validation models
    "ValidationItem",
    "ValidationItemName",
    "ValidationReport",
    "ValidationStatus",
]
