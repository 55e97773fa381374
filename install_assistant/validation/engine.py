"""
Install validation engine.

Runs every installation check, publishes the resulting report and, when
the installation is broken, drives the repair loop: the repair surface
hands back one repair action at a time, and after each the engine reloads
the installation record and validates again.

The engine never re-runs checks on its own. The conditions it checks
(missing files, missing tools) do not heal without a repair.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Protocol, Sequence

from install_assistant.config.desktop_config import DesktopConfig
from install_assistant.core.exceptions import ConfigurationError, InstallAssistantError
from install_assistant.install.repairs import RepairAction
from install_assistant.models.installation import Installation
from install_assistant.models.stage import InstallStage, create_install_stage_info
from install_assistant.models.validation import (
    ValidationItem,
    ValidationItemName,
    ValidationReport,
)
from install_assistant.state.app_state import AppState
from install_assistant.state.subscriptions import CallbackList, Subscription
from install_assistant.utils.telemetry import Telemetry, record_event
from install_assistant.validation.checks import ValidationCheck

logger = logging.getLogger(__name__)


class RepairSurface(Protocol):
    """The user-facing maintenance surface."""

    async def publish(self, report: ValidationReport) -> None:
        """Show the latest report."""
        ...

    async def open_maintenance(self, report: ValidationReport) -> None:
        """Switch to repair mode because ``report`` has errors."""
        ...

    async def next_repair(self, report: ValidationReport) -> Optional[RepairAction]:
        """Wait for the user's next repair, or None if they gave up."""
        ...


class InstallValidationEngine:
    """
    Validates an installation and supervises its repair.

    Args:
        config: Persisted desktop configuration
        checks: Checks to run on every pass, in report order
        surface: Repair surface; without one the engine only reports
        app_state: Receives the maintenance stage when repairs begin
        telemetry: Receives one event per validation run
        max_repairs: Upper bound on repair actions per run
    """

    def __init__(
        self,
        config: DesktopConfig,
        checks: Sequence[ValidationCheck],
        surface: Optional[RepairSurface] = None,
        app_state: Optional[AppState] = None,
        telemetry: Optional[Telemetry] = None,
        max_repairs: Optional[int] = None,
    ):
        self.config = config
        self.checks: List[ValidationCheck] = list(checks)
        self.surface = surface
        self.app_state = app_state
        self.telemetry = telemetry
        self.max_repairs = max_repairs

        self.installation: Optional[Installation] = None
        self.last_report: Optional[ValidationReport] = None
        self._report_callbacks: CallbackList[ValidationReport] = CallbackList("validation_report")

    def subscribe(self, callback: Callable[[ValidationReport], None]) -> Subscription:
        """Receive every report the engine publishes."""
        return self._report_callbacks.subscribe(callback)

    async def _publish(self, report: ValidationReport) -> None:
        self.last_report = report
        self._report_callbacks.dispatch(report)
        if self.surface is not None:
            await self.surface.publish(report)

    async def load_installation(self) -> Optional[Installation]:
        """
        Reload the installation record from configuration.

        When there is no usable record a report with a single synthetic
        ``install_state`` error is published and None is returned.
        """
        try:
            installation = Installation.from_config(self.config)
        except ConfigurationError as e:
            logger.error("Cannot read installation config: %s", e.message)
            installation = None
            detail = e.message
        else:
            detail = "No installation found in configuration"

        self.installation = installation
        if installation is None:
            await self._publish(ValidationReport.from_items([
                ValidationItem.error(ValidationItemName.INSTALL_STATE, detail)
            ]))
        return installation

    async def _run_check(self, check: ValidationCheck, installation: Installation) -> ValidationItem:
        try:
            return await check.check(installation)
        except Exception as e:
            logger.exception("Check %s failed unexpectedly", check.name.value)
            return ValidationItem.error(check.name, f"Check failed: {e}")

    async def validate(self, installation: Installation) -> ValidationReport:
        """Run all checks concurrently and publish the report."""
        items = await asyncio.gather(*(self._run_check(check, installation) for check in self.checks))
        report = ValidationReport.from_items(items)
        installation.apply_report(report)

        for item in report.errors:
            logger.error("Validation error [%s]: %s", item.name.value, item.detail)
        for item in report.warnings:
            logger.warning("Validation warning [%s]: %s", item.name.value, item.detail)
        logger.info("Validation complete. Valid: %s, issues: %s", report.overall_valid, report.has_issues)

        await self._publish(report)
        return report

    def _enter_maintenance(self) -> None:
        if self.app_state is not None:
            self.app_state.set_install_stage(create_install_stage_info(
                InstallStage.MAINTENANCE_MODE,
                message="Installation needs repair"
            ))

    async def ensure_installed(self) -> ValidationReport:
        """
        Validate the installation, repairing it with the user's help.

        Returns:
            The last published report. It has issues when the user abandoned
            repair, which is a normal outcome rather than an error.
        """
        record_event(self.telemetry, "validation:ensure_installed")

        installation = await self.load_installation()
        if installation is None:
            return self.last_report

        report = await self.validate(installation)
        if report.overall_valid:
            return report

        if self.surface is None:
            logger.warning("Installation has errors and no repair surface is available")
            return report

        self._enter_maintenance()
        await self.surface.open_maintenance(report)

        repairs = 0
        while not report.overall_valid:
            if self.max_repairs is not None and repairs >= self.max_repairs:
                logger.warning("Stopping after %d repair actions", repairs)
                break

            action = await self.surface.next_repair(report)
            if action is None:
                logger.info("Repair abandoned by user")
                break

            repairs += 1
            record_event(self.telemetry, "validation:repair", {"item": action.item.value})
            try:
                await action.run()
            except InstallAssistantError as e:
                logger.error("Repair '%s' failed: %s", action.label, e.message)

            installation = await self.load_installation()
            if installation is None:
                return self.last_report
            report = await self.validate(installation)

        return report
