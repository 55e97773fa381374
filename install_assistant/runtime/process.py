"""
External process execution.

Two modes are provided:

* ``run_process`` runs a structured command, streams its output line by
  line to caller-supplied callbacks and returns the exit code. A non-zero
  exit code is data, not an error; only a failure to start the process
  raises.
* ``can_execute_shell_command`` / ``probe_shell_output`` run a shell
  command under a bounded timeout purely to test availability. On timeout
  the process is killed and the probe fails; probes never raise.
"""

import asyncio
import logging
import os
import signal
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

from install_assistant.constants import DEFAULT_PROBE_TIMEOUT
from install_assistant.core.exceptions import ProcessStartError

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str], None]

READ_CHUNK_SIZE = 65536


@dataclass
class ProcessCallbacks:
    """Per-line output sinks for a running process."""
    on_stdout: Optional[OutputCallback] = None
    on_stderr: Optional[OutputCallback] = None


def build_environment(overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Inherited environment with ``overrides`` applied on top."""
    env = dict(os.environ)
    if overrides:
        env.update({key: str(value) for key, value in overrides.items()})
    return env


async def _pump(stream: Optional[asyncio.StreamReader], sink: Optional[OutputCallback]) -> None:
    # Chunked reads; readline() fails on lines longer than the stream limit.
    if stream is None:
        return
    pending = b""
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split(b"\n")
        if sink is not None:
            for line in lines:
                sink((line + b"\n").decode(errors="replace"))
    if pending and sink is not None:
        sink(pending.decode(errors="replace"))


async def run_process(
    command: Union[str, Path],
    args: Sequence[str] = (),
    callbacks: Optional[ProcessCallbacks] = None,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> int:
    """
    Run a command to completion, streaming its output.

    Args:
        command: Executable to run
        args: Arguments passed to the executable
        callbacks: Output sinks, invoked once per line as it is produced
        env: Environment variable overrides on top of the inherited environment
        cwd: Working directory for the process

    Returns:
        The process exit code

    Raises:
        ProcessStartError: If the process cannot be started
    """
    callbacks = callbacks or ProcessCallbacks()
    command_line = " ".join([str(command), *args])
    logger.debug("Running: %s (cwd=%s)", command_line, cwd)

    try:
        process = await asyncio.create_subprocess_exec(
            str(command),
            *[str(arg) for arg in args],
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=build_environment(env),
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as e:
        raise ProcessStartError(
            f"Failed to start process: {command_line}: {e}",
            command=command_line,
            details={"cwd": str(cwd) if cwd is not None else None}
        ) from e

    try:
        await asyncio.gather(
            _pump(process.stdout, callbacks.on_stdout),
            _pump(process.stderr, callbacks.on_stderr),
        )
    except BaseException:
        logger.warning("Output handling failed, killing: %s", command_line)
        await _kill(process, group=False)
        raise
    exit_code = await process.wait()
    logger.debug("Process exited with code %s: %s", exit_code, command_line)
    return exit_code


async def _kill(process: asyncio.subprocess.Process, group: bool = True) -> None:
    if process.returncode is None:
        try:
            if group and sys.platform != "win32":
                # Probes run in their own session; take the whole group down.
                os.killpg(process.pid, signal.SIGKILL)
            else:
                process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


async def _run_probe(command: str, timeout: float, capture: bool) -> Tuple[bool, Optional[str]]:
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE if capture else asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            start_new_session=sys.platform != "win32",
        )
    except OSError as e:
        logger.debug("Probe could not start: %s (%s)", command, e)
        return False, None

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError:
        logger.warning("Probe timed out after %.1fs, killing: %s", timeout, command)
        await _kill(process)
        return False, None
    except asyncio.CancelledError:
        await _kill(process)
        raise

    success = process.returncode == 0
    output = stdout.decode(errors="replace") if (capture and stdout is not None) else None
    return success, output


async def can_execute_shell_command(command: str, timeout: float = DEFAULT_PROBE_TIMEOUT) -> bool:
    """
    Check whether a shell command runs successfully.

    Output is discarded; only the exit code matters. The command is killed
    if it does not finish within ``timeout`` seconds.

    Returns:
        True if the command exited with code 0, otherwise False
    """
    success, _ = await _run_probe(command, timeout, capture=False)
    return success


async def probe_shell_output(command: str, timeout: float = DEFAULT_PROBE_TIMEOUT) -> Optional[str]:
    """
    Run a shell command and return its stdout if it succeeded.

    Returns:
        Captured stdout, or None if the command failed, could not start
        or timed out
    """
    success, output = await _run_probe(command, timeout, capture=True)
    return output if success else None
