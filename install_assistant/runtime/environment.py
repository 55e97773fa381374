"""
Isolated Python runtime for the managed application.

Wraps a virtual environment under the installation base path and runs
commands inside it. Dependency installation is delegated to ``uv``; this
class only supervises it.

A runtime is not re-entrant: callers must not overlap runtime-mutating
commands against the same instance.
"""

import asyncio
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from install_assistant.constants import (
    MANAGER_REQUIREMENTS_FILE,
    REQUIREMENTS_FILE,
    VENV_DIRECTORY,
)
from install_assistant.runtime.process import OutputCallback, ProcessCallbacks, run_process
from install_assistant.utils.helpers import can_execute, path_accessible

logger = logging.getLogger(__name__)


class VirtualEnvironment:
    """
    A virtual environment rooted at ``<base_path>/.venv``.

    Args:
        base_path: Installation base path; commands run here by default
        python_version: Interpreter version requested when creating the venv
        requirements_path: Requirements manifest for the application
        manager_requirements_path: Requirements manifest for the extension manager
        platform_name: Override for ``sys.platform`` (for path layout)
    """

    def __init__(
        self,
        base_path: Union[str, Path],
        python_version: str = "3.12",
        requirements_path: Optional[Union[str, Path]] = None,
        manager_requirements_path: Optional[Union[str, Path]] = None,
        platform_name: Optional[str] = None,
    ):
        self.base_path = Path(base_path)
        self.python_version = python_version
        self.platform_name = platform_name or sys.platform
        self.venv_path = self.base_path / VENV_DIRECTORY
        self.requirements_path = Path(requirements_path) if requirements_path else self.base_path / REQUIREMENTS_FILE
        self.manager_requirements_path = (
            Path(manager_requirements_path) if manager_requirements_path
            else self.base_path / MANAGER_REQUIREMENTS_FILE
        )

    @property
    def _is_windows(self) -> bool:
        return self.platform_name == "win32"

    @property
    def bin_path(self) -> Path:
        return self.venv_path / ("Scripts" if self._is_windows else "bin")

    @property
    def python_interpreter_path(self) -> Path:
        return self.bin_path / ("python.exe" if self._is_windows else "python")

    @property
    def uv_path(self) -> Path:
        return self.bin_path / ("uv.exe" if self._is_windows else "uv")

    @property
    def cache_path(self) -> Path:
        return self.base_path / "uv-cache"

    @property
    def requirement_manifests(self) -> List[Path]:
        return [self.requirements_path, self.manager_requirements_path]

    def runtime_env(self, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Environment variables pointing tools at this runtime."""
        env = {
            "VIRTUAL_ENV": str(self.venv_path),
            "UV_CACHE_DIR": str(self.cache_path),
            "UV_PYTHON_INSTALL_DIR": str(self.base_path / "python"),
            "PATH": os.pathsep.join([str(self.bin_path), os.environ.get("PATH", "")]),
        }
        if overrides:
            env.update(overrides)
        return env

    async def exists(self) -> bool:
        """Whether the venv directory exists."""
        return await path_accessible(self.venv_path)

    async def has_interpreter(self) -> bool:
        return await can_execute(self.python_interpreter_path)

    async def has_uv(self) -> bool:
        return await can_execute(self.uv_path)

    async def missing_manifests(self) -> List[Path]:
        """Requirement manifests that are not present on disk."""
        results = await asyncio.gather(*(path_accessible(p) for p in self.requirement_manifests))
        return [path for path, present in zip(self.requirement_manifests, results) if not present]

    async def run_command(
        self,
        command: Union[str, Path],
        args: Sequence[str],
        callbacks: Optional[ProcessCallbacks] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Union[str, Path]] = None,
    ) -> int:
        """Run ``command`` inside this runtime and return its exit code."""
        return await run_process(
            command,
            args,
            callbacks=callbacks,
            env=self.runtime_env(env),
            cwd=cwd if cwd is not None else self.base_path,
        )

    async def run_python_command(
        self,
        args: Sequence[str],
        callbacks: Optional[ProcessCallbacks] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Union[str, Path]] = None,
    ) -> int:
        """Run the runtime's interpreter with ``args``."""
        return await self.run_command(self.python_interpreter_path, args, callbacks, env, cwd)

    async def run_uv_command(
        self,
        args: Sequence[str],
        callbacks: Optional[ProcessCallbacks] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Union[str, Path]] = None,
    ) -> int:
        """Run the runtime's ``uv`` with ``args``."""
        return await self.run_command(self.uv_path, args, callbacks, env, cwd)

    def _pip_install_args(self, dry_run: bool = False) -> List[str]:
        args = ["pip", "install", "--python", str(self.python_interpreter_path)]
        if dry_run:
            args.append("--dry-run")
        for manifest in self.requirement_manifests:
            args.extend(["-r", str(manifest)])
        return args

    async def has_requirements(self, callbacks: Optional[ProcessCallbacks] = None) -> Optional[bool]:
        """
        Check whether all declared requirements are installed.

        Runs a dry-run install through ``uv``.

        Returns:
            True if nothing would be installed, False if packages are
            missing or outdated, None if the dry run itself failed
        """
        output: List[str] = []
        callbacks = callbacks or ProcessCallbacks()

        def collector(forward: Optional[OutputCallback]) -> OutputCallback:
            def collect(line: str) -> None:
                output.append(line)
                if forward:
                    forward(line)
            return collect

        exit_code = await self.run_uv_command(
            self._pip_install_args(dry_run=True),
            ProcessCallbacks(on_stdout=collector(callbacks.on_stdout), on_stderr=collector(callbacks.on_stderr)),
        )
        if exit_code != 0:
            logger.warning("Requirements dry run failed with exit code %s", exit_code)
            return None

        text = "".join(output)
        return "Would install" not in text and "Would uninstall" not in text

    async def create(self, callbacks: Optional[ProcessCallbacks] = None) -> int:
        """
        Create the venv with ``uv`` from the search path, then seed the
        venv with its own copy of ``uv``.

        Returns:
            Exit code of the first failing step, or 0
        """
        uv = shutil.which("uv")
        if uv is None:
            uv = str(self.uv_path)
        exit_code = await self.run_command(
            uv, ["venv", "--python", self.python_version, "--seed", str(self.venv_path)], callbacks
        )
        if exit_code != 0:
            return exit_code
        return await self.run_python_command(["-m", "pip", "install", "uv"], callbacks)

    async def install_requirements(self, callbacks: Optional[ProcessCallbacks] = None) -> int:
        """Install the requirement manifests into the venv."""
        return await self.run_uv_command(self._pip_install_args(), callbacks)

    async def clear_uv_cache(self, callbacks: Optional[ProcessCallbacks] = None) -> int:
        """Remove ``uv``'s package cache for this runtime."""
        return await self.run_uv_command(["cache", "clean"], callbacks)

    async def remove(self) -> None:
        """Delete the venv directory."""
        if await self.exists():
            logger.info("Removing virtual environment: %s", self.venv_path)
            await asyncio.to_thread(shutil.rmtree, self.venv_path)
