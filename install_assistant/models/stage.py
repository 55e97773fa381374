"""
Installation stage models.

Tracks which phase of the first-run bootstrap is active.
"""

import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InstallStage(str, Enum):
    """Phases of the first-run bootstrap, in their nominal order."""
    # Initial stages
    IDLE = "idle"
    APP_INITIALIZING = "app_initializing"
    CHECKING_EXISTING_INSTALL = "checking_existing_install"

    # Pre-installation checks
    HARDWARE_VALIDATION = "hardware_validation"
    GIT_CHECK = "git_check"

    # User interaction
    WELCOME_SCREEN = "welcome_screen"
    INSTALL_OPTIONS_SELECTION = "install_options_selection"

    # Installation process
    CREATING_DIRECTORIES = "creating_directories"
    INITIALIZING_CONFIG = "initializing_config"
    PYTHON_ENVIRONMENT_SETUP = "python_environment_setup"
    INSTALLING_REQUIREMENTS = "installing_requirements"
    INSTALLING_PYTORCH = "installing_pytorch"
    INSTALLING_STUDIO_REQUIREMENTS = "installing_studio_requirements"
    INSTALLING_MANAGER_REQUIREMENTS = "installing_manager_requirements"
    MIGRATING_CUSTOM_NODES = "migrating_custom_nodes"

    # Post-installation
    MAINTENANCE_MODE = "maintenance_mode"
    STARTING_SERVER = "starting_server"
    READY = "ready"
    ERROR = "error"

    @property
    def order(self) -> int:
        return list(InstallStage).index(self)


class InstallStageInfo(BaseModel):
    """The current install stage with optional progress details."""
    model_config = ConfigDict(frozen=True)

    stage: InstallStage
    progress: Optional[float] = Field(default=None, ge=0, le=100)  # None is indeterminate
    message: Optional[str] = None
    error: Optional[str] = None
    timestamp: float = Field(default_factory=time.time)


def create_install_stage_info(
    stage: InstallStage,
    progress: Optional[float] = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
) -> InstallStageInfo:
    """Create stage info stamped with the current time."""
    return InstallStageInfo(stage=stage, progress=progress, message=message, error=error)
