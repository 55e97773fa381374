"""
Tests for external process execution and shell probes.

These run real subprocesses using the current interpreter.
"""

import asyncio
import os
import sys
import time
from pathlib import Path

import pytest

from install_assistant.core.exceptions import ProcessStartError
from install_assistant.runtime.process import (
    ProcessCallbacks,
    build_environment,
    can_execute_shell_command,
    probe_shell_output,
    run_process,
)

PYTHON = f'"{sys.executable}"'


def process_gone(pid: int) -> bool:
    """True if ``pid`` no longer runs (exited or left as a zombie)."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return True
    status = Path(f"/proc/{pid}/status")
    if not status.exists():
        return False
    for line in status.read_text().splitlines():
        if line.startswith("State:"):
            return line.split()[1] == "Z"
    return False


class TestRunProcess:
    """Test structured command execution."""

    @pytest.mark.asyncio
    async def test_streams_output_per_line(self):
        stdout, stderr = [], []
        exit_code = await run_process(
            sys.executable,
            ["-c", "import sys; print('one'); print('two'); print('oops', file=sys.stderr)"],
            ProcessCallbacks(on_stdout=stdout.append, on_stderr=stderr.append),
        )

        assert exit_code == 0
        assert [line.strip() for line in stdout] == ["one", "two"]
        assert [line.strip() for line in stderr] == ["oops"]

    @pytest.mark.asyncio
    async def test_line_longer_than_stream_limit(self):
        stdout = []
        exit_code = await run_process(
            sys.executable,
            ["-c", "print('x' * 200000); print('tail')"],
            ProcessCallbacks(on_stdout=stdout.append),
        )

        assert exit_code == 0
        assert [len(line.rstrip()) for line in stdout] == [200000, 4]

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="newline translation")
    async def test_final_line_without_newline(self):
        stdout = []
        await run_process(
            sys.executable,
            ["-c", "import sys; sys.stdout.write('a\\nb')"],
            ProcessCallbacks(on_stdout=stdout.append),
        )
        assert stdout == ["a\n", "b"]

    @pytest.mark.asyncio
    async def test_failing_callback_kills_child(self):
        def broken(line):
            raise RuntimeError("sink failed")

        start = time.monotonic()
        with pytest.raises(RuntimeError, match="sink failed"):
            await run_process(
                sys.executable,
                ["-c", "import time; print('ready', flush=True); time.sleep(30)"],
                ProcessCallbacks(on_stdout=broken),
            )
        assert time.monotonic() - start < 10

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_returned(self):
        exit_code = await run_process(sys.executable, ["-c", "import sys; sys.exit(3)"])
        assert exit_code == 3

    @pytest.mark.asyncio
    async def test_env_overrides_and_cwd(self, tmp_path):
        stdout = []
        await run_process(
            sys.executable,
            ["-c", "import os; print(os.environ['IA_TEST_VALUE']); print(os.getcwd())"],
            ProcessCallbacks(on_stdout=stdout.append),
            env={"IA_TEST_VALUE": "hello"},
            cwd=tmp_path,
        )

        assert stdout[0].strip() == "hello"
        assert stdout[1].strip() == str(tmp_path.resolve())

    @pytest.mark.asyncio
    async def test_missing_executable_raises(self, tmp_path):
        with pytest.raises(ProcessStartError) as exc_info:
            await run_process(tmp_path / "no-such-binary", ["--help"])
        assert "no-such-binary" in exc_info.value.command

    def test_build_environment_inherits(self, monkeypatch):
        monkeypatch.setenv("IA_INHERITED", "yes")
        env = build_environment({"IA_OVERRIDE": "1"})
        assert env["IA_INHERITED"] == "yes"
        assert env["IA_OVERRIDE"] == "1"


class TestShellProbes:
    """Test bounded availability probes."""

    @pytest.mark.asyncio
    async def test_successful_command(self):
        assert await can_execute_shell_command(f'{PYTHON} -c "pass"') is True

    @pytest.mark.asyncio
    async def test_failing_command(self):
        assert await can_execute_shell_command(f'{PYTHON} -c "import sys; sys.exit(1)"') is False

    @pytest.mark.asyncio
    async def test_unknown_command(self):
        assert await can_execute_shell_command("definitely-not-a-real-command-3f9a") is False

    @pytest.mark.asyncio
    async def test_timeout_kills_and_fails(self):
        start = time.monotonic()
        result = await can_execute_shell_command(
            f'{PYTHON} -c "import time; time.sleep(30)"', timeout=0.5
        )
        elapsed = time.monotonic() - start

        assert result is False
        assert elapsed < 10

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX process groups")
    async def test_repeated_timeouts_leave_no_running_children(self, tmp_path):
        pids = []
        for attempt in range(3):
            pid_file = tmp_path / f"child-{attempt}.pid"
            command = (
                f'{PYTHON} -c "import os, time; '
                f"open(r'{pid_file}', 'w').write(str(os.getpid())); time.sleep(30)\""
            )

            assert await can_execute_shell_command(command, timeout=2.0) is False
            pids.append(int(pid_file.read_text()))

        for pid in pids:
            for _ in range(20):
                if process_gone(pid):
                    break
                await asyncio.sleep(0.1)
            assert process_gone(pid), f"child {pid} still running"

    @pytest.mark.asyncio
    async def test_probe_output(self):
        output = await probe_shell_output(f'{PYTHON} -c "print(123)"')
        assert output is not None
        assert output.strip() == "123"

    @pytest.mark.asyncio
    async def test_probe_output_on_failure(self):
        assert await probe_shell_output(f'{PYTHON} -c "import sys; sys.exit(2)"') is None
