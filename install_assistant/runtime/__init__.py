"""
Runtime module for the Install Assistant.

Runs external commands, inside the isolated runtime or as short
availability probes.
"""

from install_assistant.runtime.environment import VirtualEnvironment
from install_assistant.runtime.process import (
    ProcessCallbacks,
    build_environment,
    can_execute_shell_command,
    probe_shell_output,
    run_process,
)

__all__ = [
    "VirtualEnvironment",
    "ProcessCallbacks",
    "build_environment",
    "can_execute_shell_command",
    "probe_shell_output",
    "run_process",
]
