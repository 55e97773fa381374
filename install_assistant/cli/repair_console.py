"""
Console repair surface.

Renders validation reports with Rich and lets the user pick one repair
action at a time.
"""

from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from install_assistant.config.desktop_config import DesktopConfig
from install_assistant.install.repairs import RepairAction, available_repairs, set_base_path_action
from install_assistant.models.validation import ValidationItemName, ValidationReport, ValidationStatus
from install_assistant.runtime.environment import VirtualEnvironment
from install_assistant.runtime.process import ProcessCallbacks

STATUS_STYLES = {
    ValidationStatus.OK: "[green]✓ ok[/green]",
    ValidationStatus.WARNING: "[yellow]⚠ warning[/yellow]",
    ValidationStatus.ERROR: "[red]✗ error[/red]",
    ValidationStatus.SKIPPED: "[dim]- skipped[/dim]",
}


def render_report(report: ValidationReport) -> Table:
    """Build a Rich table for ``report``."""
    table = Table(title="Installation Validation", show_header=True, header_style="bold blue")
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details", style="dim")

    for name, item in report.items.items():
        table.add_row(name.value, STATUS_STYLES[item.status], item.detail or "")
    return table


class ConsoleRepairSurface:
    """Repair surface driven by Rich prompts."""

    def __init__(
        self,
        config: DesktopConfig,
        console: Optional[Console] = None,
        venv_factory: Callable[[Path], VirtualEnvironment] = VirtualEnvironment,
    ):
        self.config = config
        self.console = console or Console()
        self.venv_factory = venv_factory

    def _callbacks(self) -> ProcessCallbacks:
        def echo(line: str) -> None:
            self.console.print(line.rstrip(), style="dim", markup=False, highlight=False)
        return ProcessCallbacks(on_stdout=echo, on_stderr=echo)

    async def publish(self, report: ValidationReport) -> None:
        self.console.print(render_report(report))

    async def open_maintenance(self, report: ValidationReport) -> None:
        self.console.print(Panel.fit(
            f"[bold red]{len(report.errors)} problem(s) found.[/bold red]\n"
            "Choose a fix for one problem at a time; the installation is checked again after each fix.",
            title="Maintenance",
            border_style="red"
        ))

    def _actions_for(self, report: ValidationReport) -> List[RepairAction]:
        base_path = self.config.settings.base_path
        venv = self.venv_factory(Path(base_path)) if base_path else None
        repairs = available_repairs(report, venv, self._callbacks())
        return [action for actions in repairs.values() for action in actions]

    async def next_repair(self, report: ValidationReport) -> Optional[RepairAction]:
        actions = self._actions_for(report)
        offer_base_path = report.status_of(ValidationItemName.BASE_PATH) == ValidationStatus.ERROR

        self.console.print("\n[bold]Available fixes:[/bold]")
        choices: List[str] = []
        for index, action in enumerate(actions, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]. [{action.item.value}] {action.label}")
            choices.append(str(index))
        if offer_base_path:
            self.console.print("  [cyan]p[/cyan]. [base_path] Choose a different base path")
            choices.append("p")
        self.console.print("  [cyan]q[/cyan]. Quit without fixing")
        choices.append("q")

        choice = Prompt.ask("Select a fix", choices=choices, default="q", console=self.console)
        if choice == "q":
            return None
        if choice == "p":
            path = Prompt.ask("New base path", console=self.console).strip()
            while not path:
                self.console.print("[red]Enter a directory path.[/red]")
                path = Prompt.ask("New base path", console=self.console).strip()
            return set_base_path_action(self.config, path)
        return actions[int(choice) - 1]
