"""
Pytest configuration and fixtures for the Install Assistant tests.

Provides temporary installations, desktop settings files and a fake
repair surface shared across the test modules.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from install_assistant.config.desktop_config import DesktopConfig
from install_assistant.install.repairs import RepairAction
from install_assistant.models.validation import ValidationReport


@pytest.fixture
def base_path(tmp_path: Path) -> Path:
    """An existing, writable installation base path."""
    path = tmp_path / "Hanzo"
    path.mkdir()
    return path


@pytest.fixture
def app_install_root(tmp_path: Path) -> Path:
    """Directory standing in for the application's own install location."""
    path = tmp_path / "Programs" / "Hanzo Desktop"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def write_config(tmp_path: Path):
    """Factory writing a ``config.json`` settings document."""
    def _write(data: Dict[str, Any], name: str = "config.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def installed_config(write_config, base_path: Path) -> DesktopConfig:
    """Desktop config for a completed installation at ``base_path``."""
    path = write_config({"basePath": str(base_path), "installState": "installed"})
    return DesktopConfig.load(path)


class FakeRepairSurface:
    """Repair surface replaying a scripted list of actions."""

    def __init__(self, actions: Optional[List[Optional[RepairAction]]] = None):
        self.actions = list(actions or [])
        self.published: List[ValidationReport] = []
        self.maintenance_reports: List[ValidationReport] = []
        self.requests = 0

    async def publish(self, report: ValidationReport) -> None:
        self.published.append(report)

    async def open_maintenance(self, report: ValidationReport) -> None:
        self.maintenance_reports.append(report)

    async def next_repair(self, report: ValidationReport) -> Optional[RepairAction]:
        self.requests += 1
        if not self.actions:
            return None
        return self.actions.pop(0)


@pytest.fixture
def fake_surface():
    """Factory for scripted repair surfaces."""
    return FakeRepairSurface
