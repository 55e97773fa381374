"""
Repair actions.

A repair action targets exactly one validation item and changes the
condition behind it. The validation engine re-validates after each one.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Union

from install_assistant.config.desktop_config import DesktopConfig
from install_assistant.core.exceptions import RepairError
from install_assistant.models.validation import ValidationItemName, ValidationReport
from install_assistant.runtime.environment import VirtualEnvironment
from install_assistant.runtime.process import ProcessCallbacks
from install_assistant.utils.logging import LogCategory, LogEntry

logger = logging.getLogger(__name__)

RepairHandler = Callable[[], Awaitable[None]]


@dataclass
class RepairAction:
    """A user-triggered fix for one validation item."""
    item: ValidationItemName
    label: str
    handler: RepairHandler

    async def run(self) -> None:
        """
        Run the handler.

        Raises:
            RepairError: If the handler fails, including filesystem errors
        """
        log_entry = LogEntry(
            category=LogCategory.REPAIR,
            message=f"Running repair for {self.item.value}: {self.label}",
            operation=self.label,
            metadata={"item": self.item.value}
        )
        logger.info(log_entry.message, extra={"log_entry": log_entry})
        try:
            await self.handler()
        except OSError as e:
            raise RepairError(
                f"{self.label} failed: {e}",
                details={"item": self.item.value}
            ) from e


def _check_exit(exit_code: int, step: str) -> None:
    if exit_code != 0:
        raise RepairError(f"{step} failed with exit code {exit_code}", details={"exit_code": exit_code})


def set_base_path_action(config: DesktopConfig, path: Union[str, Path]) -> RepairAction:
    """Point the installation at a different base path, stored absolute."""
    async def handler() -> None:
        if not str(path).strip():
            raise RepairError("Base path must not be empty", details={"item": ValidationItemName.BASE_PATH.value})
        config.set("basePath", str(Path(path).expanduser().resolve()))

    return RepairAction(ValidationItemName.BASE_PATH, f"Use base path {path}", handler)


def reset_venv_action(
    venv: VirtualEnvironment,
    item: ValidationItemName = ValidationItemName.VENV_DIRECTORY,
    callbacks: Optional[ProcessCallbacks] = None,
) -> RepairAction:
    """Delete and recreate the runtime, then reinstall its requirements."""
    async def handler() -> None:
        await venv.remove()
        _check_exit(await venv.create(callbacks), "Creating the virtual environment")
        _check_exit(await venv.install_requirements(callbacks), "Installing requirements")

    return RepairAction(item, "Reinstall the Python environment", handler)


def install_requirements_action(
    venv: VirtualEnvironment,
    callbacks: Optional[ProcessCallbacks] = None,
) -> RepairAction:
    async def handler() -> None:
        _check_exit(await venv.install_requirements(callbacks), "Installing requirements")

    return RepairAction(ValidationItemName.PYTHON_PACKAGES, "Install missing packages", handler)


def clear_uv_cache_action(
    venv: VirtualEnvironment,
    callbacks: Optional[ProcessCallbacks] = None,
) -> RepairAction:
    async def handler() -> None:
        _check_exit(await venv.clear_uv_cache(callbacks), "Clearing the uv cache")

    return RepairAction(ValidationItemName.PYTHON_PACKAGES, "Clear the package cache", handler)


def recheck_action(item: ValidationItemName) -> RepairAction:
    """For conditions the user fixes outside the installer (e.g. installing git)."""
    async def handler() -> None:
        return None

    return RepairAction(item, "I have fixed this, check again", handler)


_RUNTIME_ITEMS = (
    ValidationItemName.VENV_DIRECTORY,
    ValidationItemName.PYTHON_INTERPRETER,
    ValidationItemName.UV,
)


def available_repairs(
    report: ValidationReport,
    venv: Optional[VirtualEnvironment],
    callbacks: Optional[ProcessCallbacks] = None,
) -> Dict[ValidationItemName, List[RepairAction]]:
    """
    Automated repair actions for each failing item in ``report``.

    Base path repairs need a path from the user and are not included.
    """
    repairs: Dict[ValidationItemName, List[RepairAction]] = {}
    for item in report.errors + report.warnings:
        actions: List[RepairAction] = []
        if venv is not None and item.name in _RUNTIME_ITEMS:
            actions.append(reset_venv_action(venv, item.name, callbacks))
        elif venv is not None and item.name == ValidationItemName.PYTHON_PACKAGES:
            actions.append(install_requirements_action(venv, callbacks))
            actions.append(clear_uv_cache_action(venv, callbacks))
        if item.name != ValidationItemName.BASE_PATH:
            actions.append(recheck_action(item.name))
        repairs[item.name] = actions
    return repairs
