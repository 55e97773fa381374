"""
Configuration models for the Install Assistant.

This module defines Pydantic models for the persisted desktop settings
document and for the assistant's own tool-level settings.
"""

import sys
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from install_assistant.constants import DEFAULT_PROBE_TIMEOUT, MINIMUM_NVIDIA_DRIVER_VERSION


class InstallState(str, Enum):
    """Install-state marker stored in the desktop settings."""
    NOT_INSTALLED = "not-installed"
    STARTED = "started"
    INSTALLED = "installed"
    UPGRADED = "upgraded"


class DesktopSettings(BaseModel):
    """Persisted desktop settings document (``config.json``)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    base_path: Optional[str] = Field(default=None, alias="basePath")
    install_state: Optional[InstallState] = Field(default=None, alias="installState")

    @field_validator('base_path')
    @classmethod
    def base_path_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('basePath must not be blank')
        return v


def default_install_root() -> Path:
    """Directory holding the running executable."""
    return Path(sys.executable).resolve().parent


class AssistantSettings(BaseModel):
    """Tool-level settings for the Install Assistant."""
    app_install_root: Path = Field(default_factory=default_install_root)
    resources_path: Optional[Path] = None
    probe_timeout: float = Field(default=DEFAULT_PROBE_TIMEOUT, gt=0)
    minimum_driver_version: str = MINIMUM_NVIDIA_DRIVER_VERSION
    max_repairs: Optional[int] = Field(default=None, ge=1)
