"""
Main CLI entry point for the Install Assistant.

This module provides the command-line interface using Click with Rich
formatting: installation validation with interactive repair, extension
migration between installations and the install stage listing.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from install_assistant import __version__
from install_assistant.cli.repair_console import ConsoleRepairSurface, render_report
from install_assistant.config.desktop_config import DesktopConfig
from install_assistant.core.exceptions import InstallAssistantError
from install_assistant.models.config import AssistantSettings
from install_assistant.models.stage import InstallStage
from install_assistant.runtime.environment import VirtualEnvironment
from install_assistant.runtime.process import ProcessCallbacks
from install_assistant.migration.snapshot import ManagerCli
from install_assistant.state.app_state import initialize_app_state
from install_assistant.utils.logging import setup_logging
from install_assistant.utils.telemetry import AuditTelemetry
from install_assistant.validation.checks import default_checks
from install_assistant.validation.engine import InstallValidationEngine
from install_assistant.validation.hardware import HardwareValidation, StaticHardwareValidator

console = Console()


def _fail(error: InstallAssistantError) -> None:
    console.print(f"Error: {error}", style="red", markup=False)
    if error.details:
        for key, value in error.details.items():
            console.print(f"  [dim]{key}: {value}[/dim]")
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Also write logs to this file')
@click.pass_context
def main(ctx: click.Context, version: bool, verbose: bool, log_file: Optional[str]):
    """
    Install Assistant

    Checks a desktop application's local installation and walks through
    repairing it.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    if version:
        console.print(f"Install Assistant version {__version__}")
        sys.exit(0)

    setup_logging(level="DEBUG" if verbose else "WARNING", log_file=log_file)

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use --help to see available commands[/yellow]")
        console.print("  [cyan]install-assistant validate[/cyan]      - Validate and repair an installation")
        console.print("  [cyan]install-assistant migrate-nodes[/cyan] - Copy extensions from another installation")
        console.print("  [cyan]install-assistant stages[/cyan]        - List install stages")


@main.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Desktop settings file (config.json)')
@click.option('--repair/--no-repair', default=True, help='Offer repairs when the installation is broken')
@click.option('--install-root', type=click.Path(file_okay=False), help='Application install directory')
@click.option('--gpu', help='Report this GPU as detected ("nvidia" also enables the driver check)')
@click.option('--max-repairs', type=click.IntRange(min=1), help='Stop after this many repair actions')
@click.pass_context
def validate(ctx: click.Context, config_path: str, repair: bool, install_root: Optional[str],
             gpu: Optional[str], max_repairs: Optional[int]):
    """Validate an installation and repair it interactively."""
    settings_kwargs = {"max_repairs": max_repairs}
    if install_root:
        settings_kwargs["app_install_root"] = Path(install_root)
    settings = AssistantSettings(**settings_kwargs)

    if ctx.obj.get('verbose', False):
        console.print(f"[dim]Config file: {config_path}[/dim]")
        console.print(f"[dim]Install root: {settings.app_install_root}[/dim]")

    try:
        config = DesktopConfig.load(config_path)
    except InstallAssistantError as e:
        _fail(e)

    hardware = StaticHardwareValidator(HardwareValidation(is_valid=True, gpu=gpu)) if gpu else None
    surface = ConsoleRepairSurface(config, console) if repair else None
    engine = InstallValidationEngine(
        config,
        default_checks(settings, hardware),
        surface=surface,
        app_state=initialize_app_state(),
        telemetry=AuditTelemetry(),
        max_repairs=settings.max_repairs,
    )

    report = asyncio.run(engine.ensure_installed())
    if surface is None:
        console.print(render_report(report))

    if report.overall_valid:
        console.print("[green]✓ Installation is valid[/green]")
        return
    console.print(f"[red]✗ Installation has {len(report.errors)} error(s)[/red]")
    sys.exit(1)


@main.command(name="migrate-nodes")
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Desktop settings file of the target installation')
@click.option('--from', 'source', type=click.Path(), required=True, help='Installation to copy extensions from')
@click.option('--resources', type=click.Path(file_okay=False), required=True,
              help='Application resources directory')
def migrate_nodes(config_path: str, source: str, resources: str):
    """Reinstall another installation's extensions into this one."""
    try:
        config = DesktopConfig.load(config_path)
        base_path = config.settings.base_path
        if not base_path:
            console.print("[red]Error: No base path configured[/red]")
            sys.exit(1)

        def echo(line: str) -> None:
            console.print(line.rstrip(), style="dim", markup=False, highlight=False)

        manager = ManagerCli(VirtualEnvironment(Path(base_path)), resources, telemetry=AuditTelemetry())
        console.print(f"[green]Migrating extensions from {source}...[/green]")
        asyncio.run(manager.migrate(source, ProcessCallbacks(on_stdout=echo, on_stderr=echo)))
    except InstallAssistantError as e:
        _fail(e)

    console.print("[green]✓ Extensions migrated[/green]")


@main.command()
def stages():
    """List the install stages in order."""
    table = Table(title="Install Stages", show_header=True, header_style="bold blue")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Stage", style="cyan")

    for stage in InstallStage:
        table.add_row(str(stage.order), stage.value)
    console.print(table)


if __name__ == '__main__':
    main()
