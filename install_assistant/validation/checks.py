"""
Installation health checks.

Each check inspects one aspect of an installation and produces exactly one
ValidationItem. Checks share no mutable state and may run concurrently.
Problems are reported as items, never raised.
"""

import logging
import ntpath
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional, Union

from install_assistant.constants import (
    GIT_PROBE_COMMAND,
    NVIDIA_GPU,
    NVIDIA_SMI_COMMAND,
    VC_REDIST_LIBRARY,
)
from install_assistant.models.config import AssistantSettings
from install_assistant.models.installation import Installation
from install_assistant.models.validation import ValidationItem, ValidationItemName
from install_assistant.runtime.environment import VirtualEnvironment
from install_assistant.runtime.process import can_execute_shell_command, probe_shell_output
from install_assistant.utils.helpers import is_path_inside, path_accessible, path_read_writable
from install_assistant.utils.versions import is_version_below_minimum, parse_driver_version
from install_assistant.validation.hardware import HardwareValidator

logger = logging.getLogger(__name__)

VenvFactory = Callable[[Path], VirtualEnvironment]


class ValidationCheck(ABC):
    """Abstract base class for all installation checks."""

    name: ValidationItemName

    @abstractmethod
    async def check(self, installation: Installation) -> ValidationItem:
        """
        Inspect the installation.

        Returns:
            The item for ``self.name``
        """
        pass


class BasePathCheck(ValidationCheck):
    """
    The base path must be usable and must not live inside the application's
    own install root, where an application update would wipe it.
    """

    name = ValidationItemName.BASE_PATH

    def __init__(self, app_install_root: Union[str, Path]):
        self.app_install_root = Path(app_install_root)

    async def check(self, installation: Installation) -> ValidationItem:
        base_path = installation.base_path

        if is_path_inside(base_path, self.app_install_root):
            logger.error("Base path %s is inside the app install root %s", base_path, self.app_install_root)
            return ValidationItem.error(
                self.name,
                f"Base path {base_path} is inside the application install directory "
                f"and would be removed by an update."
            )

        if not await path_accessible(base_path):
            return ValidationItem.error(self.name, f"Base path does not exist: {base_path}")

        if not await path_read_writable(base_path):
            return ValidationItem.error(self.name, f"Base path is not readable and writable: {base_path}")

        return ValidationItem.ok(self.name)


class GitCheck(ValidationCheck):
    """``git`` must be on the search path."""

    name = ValidationItemName.GIT

    def __init__(self, timeout: float):
        self.timeout = timeout

    async def check(self, installation: Installation) -> ValidationItem:
        if await can_execute_shell_command(GIT_PROBE_COMMAND, timeout=self.timeout):
            return ValidationItem.ok(self.name)
        return ValidationItem.error(self.name, "git was not found on the search path")


class VCRedistCheck(ValidationCheck):
    """The Visual C++ runtime library must be present on Windows."""

    name = ValidationItemName.VC_REDIST

    def __init__(self, platform_name: Optional[str] = None, system_root: Optional[str] = None):
        self.platform_name = platform_name or sys.platform
        self.system_root = system_root

    @property
    def library_path(self) -> str:
        system_root = self.system_root or os.environ.get("SYSTEMROOT", r"C:\Windows")
        return ntpath.join(system_root, "System32", VC_REDIST_LIBRARY)

    async def check(self, installation: Installation) -> ValidationItem:
        if self.platform_name != "win32":
            return ValidationItem.skipped(self.name, "Only required on Windows")

        if await path_accessible(self.library_path):
            return ValidationItem.ok(self.name)
        return ValidationItem.error(
            self.name, f"Visual C++ runtime not found: {self.library_path}"
        )


class RuntimeCheck(ValidationCheck):
    """Base class for checks against the installation's isolated runtime."""

    def __init__(self, venv_factory: VenvFactory = VirtualEnvironment):
        self.venv_factory = venv_factory

    def venv_for(self, installation: Installation) -> VirtualEnvironment:
        return self.venv_factory(installation.base_path)


class VenvDirectoryCheck(RuntimeCheck):
    name = ValidationItemName.VENV_DIRECTORY

    async def check(self, installation: Installation) -> ValidationItem:
        venv = self.venv_for(installation)
        if await venv.exists():
            return ValidationItem.ok(self.name)
        return ValidationItem.error(self.name, f"Virtual environment not found: {venv.venv_path}")


class PythonInterpreterCheck(RuntimeCheck):
    name = ValidationItemName.PYTHON_INTERPRETER

    async def check(self, installation: Installation) -> ValidationItem:
        venv = self.venv_for(installation)
        if await venv.has_interpreter():
            return ValidationItem.ok(self.name)
        return ValidationItem.error(
            self.name, f"Python interpreter not found: {venv.python_interpreter_path}"
        )


class UvCheck(RuntimeCheck):
    name = ValidationItemName.UV

    async def check(self, installation: Installation) -> ValidationItem:
        venv = self.venv_for(installation)
        if await venv.has_uv():
            return ValidationItem.ok(self.name)
        return ValidationItem.error(self.name, f"uv not found: {venv.uv_path}")


class PythonPackagesCheck(RuntimeCheck):
    """Requirement manifests must exist and their packages be installed."""

    name = ValidationItemName.PYTHON_PACKAGES

    async def check(self, installation: Installation) -> ValidationItem:
        venv = self.venv_for(installation)

        if not await venv.has_interpreter() or not await venv.has_uv():
            return ValidationItem.skipped(self.name, "Runtime is incomplete")

        missing = await venv.missing_manifests()
        if missing:
            return ValidationItem.error(
                self.name,
                "Missing requirement manifests: " + ", ".join(str(p) for p in missing)
            )

        installed = await venv.has_requirements()
        if installed is None:
            return ValidationItem.error(self.name, "Could not resolve the declared requirements")
        if not installed:
            return ValidationItem.warning(self.name, "Some packages are missing or out of date")
        return ValidationItem.ok(self.name)


class HardwareCheck(ValidationCheck):
    """Maps the hardware collaborator's verdict onto an item."""

    name = ValidationItemName.HARDWARE

    def __init__(self, validator: Optional[HardwareValidator]):
        self.validator = validator

    async def check(self, installation: Installation) -> ValidationItem:
        if self.validator is None:
            return ValidationItem.skipped(self.name, "Hardware validation disabled")

        result = await self.validator.validate()
        if result.is_valid:
            return ValidationItem.ok(self.name, result.gpu)
        return ValidationItem.error(self.name, result.error or "Unsupported hardware")


class NvidiaDriverCheck(ValidationCheck):
    """
    Warns when an NVIDIA driver is present but older than supported.
    Only runs when the hardware collaborator reports an NVIDIA GPU.
    """

    name = ValidationItemName.NVIDIA_DRIVER

    def __init__(self, minimum_version: str, timeout: float, hardware: Optional[HardwareValidator] = None):
        self.minimum_version = minimum_version
        self.timeout = timeout
        self.hardware = hardware

    async def check(self, installation: Installation) -> ValidationItem:
        if self.hardware is None:
            return ValidationItem.skipped(self.name, "Hardware validation disabled")
        hardware = await self.hardware.validate()
        if hardware.gpu != NVIDIA_GPU:
            return ValidationItem.skipped(self.name, "No NVIDIA GPU detected")

        output = await probe_shell_output(NVIDIA_SMI_COMMAND, timeout=self.timeout)
        if output is None:
            return ValidationItem.skipped(self.name, "nvidia-smi not available")

        version = parse_driver_version(output)
        if version is None:
            return ValidationItem.warning(self.name, "Could not determine the NVIDIA driver version")

        if is_version_below_minimum(version, self.minimum_version):
            return ValidationItem.warning(
                self.name,
                f"NVIDIA driver {version} is older than the minimum supported "
                f"version {self.minimum_version}"
            )
        return ValidationItem.ok(self.name, version)


def default_checks(
    settings: AssistantSettings,
    hardware: Optional[HardwareValidator] = None,
    venv_factory: VenvFactory = VirtualEnvironment,
    platform_name: Optional[str] = None,
) -> List[ValidationCheck]:
    """The standard set of installation checks, in report order."""
    return [
        BasePathCheck(settings.app_install_root),
        VenvDirectoryCheck(venv_factory),
        PythonInterpreterCheck(venv_factory),
        UvCheck(venv_factory),
        PythonPackagesCheck(venv_factory),
        GitCheck(settings.probe_timeout),
        VCRedistCheck(platform_name),
        HardwareCheck(hardware),
        NvidiaDriverCheck(settings.minimum_driver_version, settings.probe_timeout, hardware),
    ]
