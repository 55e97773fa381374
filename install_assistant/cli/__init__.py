# CLI module for the install assistant

from .repair_console import ConsoleRepairSurface, render_report

__all__ = ["ConsoleRepairSurface", "render_report"]
