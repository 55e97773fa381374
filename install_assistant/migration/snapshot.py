"""
Extension migration through manager snapshots.

Extensions are moved from an existing installation into a new one by asking
the extension manager helper to save a snapshot of the source and restore
it into the target. The snapshot file lives only for one ``migrate`` call.
"""

import asyncio
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from install_assistant.constants import (
    APP_DIRECTORY_NAME,
    EXTENSIONS_DIRECTORY,
    MANAGER_DIRECTORY_NAME,
    MANAGER_MODULE,
    MANAGER_SCRIPT,
    MIGRATE_CUSTOM_NODES_EVENT,
    PATH_CONTEXT_ENV_VAR,
)
from install_assistant.core.exceptions import HelperProcessError, MigrationError
from install_assistant.runtime.environment import VirtualEnvironment
from install_assistant.runtime.process import ProcessCallbacks
from install_assistant.utils.helpers import path_accessible
from install_assistant.utils.telemetry import Telemetry, record_event

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@contextmanager
def scoped_snapshot_file(suffix: str = ".json", directory: Optional[PathLike] = None) -> Iterator[Path]:
    """
    Create an empty temporary snapshot file and delete it on exit,
    including when the body raises.
    """
    fd, name = tempfile.mkstemp(prefix="snapshot-", suffix=suffix, dir=directory)
    os.close(fd)
    path = Path(name)
    logger.debug("Using temp file: %s", path)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


class ManagerCli:
    """
    Runs the extension manager's command-line helper inside a runtime.

    Args:
        virtual_environment: Runtime of the target installation
        resources_path: Application resources directory holding the bundled
            application and its extension manager
        telemetry: Receives one event per migration
    """

    def __init__(
        self,
        virtual_environment: VirtualEnvironment,
        resources_path: PathLike,
        telemetry: Optional[Telemetry] = None,
    ):
        self.virtual_environment = virtual_environment
        self.resources_path = Path(resources_path)
        self.telemetry = telemetry
        self.app_path = self.resources_path / APP_DIRECTORY_NAME
        self.cli_path = self.app_path / EXTENSIONS_DIRECTORY / MANAGER_DIRECTORY_NAME / MANAGER_SCRIPT

    async def _build_command_args(self, args: List[str]) -> List[str]:
        if await path_accessible(self.cli_path):
            return [str(self.cli_path), *args]
        return ["-m", MANAGER_MODULE, *args]

    async def run_command(
        self,
        args: List[str],
        callbacks: Optional[ProcessCallbacks] = None,
        env: Optional[Dict[str, str]] = None,
        check_exit: bool = True,
        cwd: Optional[PathLike] = None,
    ) -> str:
        """
        Run the helper and return its stdout.

        Raises:
            HelperProcessError: If the helper exits non-zero and ``check_exit`` is set
            ProcessStartError: If the interpreter cannot be started
        """
        output: List[str] = []
        error: List[str] = []

        def on_stdout(message: str) -> None:
            output.append(message)
            if callbacks and callbacks.on_stdout:
                callbacks.on_stdout(message)

        def on_stderr(message: str) -> None:
            logger.warning("[manager] %s", message.rstrip())
            error.append(message)
            if callbacks and callbacks.on_stderr:
                callbacks.on_stderr(message)

        command_env = {PATH_CONTEXT_ENV_VAR: str(self.virtual_environment.base_path)}
        command_env.update(env or {})
        command_args = await self._build_command_args(args)

        exit_code = await self.virtual_environment.run_python_command(
            command_args,
            ProcessCallbacks(on_stdout=on_stdout, on_stderr=on_stderr),
            command_env,
            cwd,
        )

        stdout = "".join(output)
        if check_exit and exit_code != 0:
            raise HelperProcessError(
                "Error calling extension manager",
                exit_code=exit_code,
                stdout=stdout,
                stderr="".join(error),
                details={"args": args},
            )
        return stdout

    async def export_snapshot(
        self,
        source_root: PathLike,
        output_file: PathLike,
        callbacks: Optional[ProcessCallbacks] = None,
    ) -> None:
        """
        Save a snapshot of the extensions installed in ``source_root``.

        The helper resolves the installation either from its working
        directory or from the path-context variable, so both point at
        the source.
        """
        source_root = str(source_root)
        output = await self.run_command(
            ["save-snapshot", "--output", str(output_file), "--no-full-snapshot"],
            callbacks,
            {PATH_CONTEXT_ENV_VAR: source_root, "PYTHONPATH": source_root},
            True,
            source_root,
        )
        logger.info(output)

    async def import_snapshot(
        self,
        snapshot_file: PathLike,
        target_dir: PathLike,
        callbacks: Optional[ProcessCallbacks] = None,
    ) -> None:
        """Restore the extensions listed in ``snapshot_file`` into ``target_dir``."""
        logger.info("Restoring snapshot %s", snapshot_file)
        output = await self.run_command(
            ["restore-snapshot", str(snapshot_file), "--restore-to", str(target_dir)],
            callbacks,
            {PATH_CONTEXT_ENV_VAR: str(self.app_path)},
        )
        logger.info(output)

    async def migrate(self, source_root: PathLike, callbacks: Optional[ProcessCallbacks] = None) -> None:
        """
        Reinstall the extensions of ``source_root`` into this installation.

        Raises:
            MigrationError: If ``source_root`` does not exist
            HelperProcessError: If either helper step fails; the snapshot
                file is removed regardless
        """
        record_event(self.telemetry, MIGRATE_CUSTOM_NODES_EVENT)

        if not await path_accessible(source_root):
            raise MigrationError(
                f"Source installation not found: {source_root}",
                details={"source_root": str(source_root)}
            )

        extensions_path = self.virtual_environment.base_path / EXTENSIONS_DIRECTORY
        with scoped_snapshot_file() as snapshot_file:
            await self.export_snapshot(source_root, snapshot_file, callbacks)
            await self.import_snapshot(snapshot_file, extensions_path, callbacks)

            # The restore bootstraps its own copy of the manager next to the installed one.
            manager_path = extensions_path / MANAGER_DIRECTORY_NAME
            if await path_accessible(manager_path):
                await asyncio.to_thread(shutil.rmtree, manager_path, ignore_errors=True)
                logger.info("Removed extra manager directory: %s", manager_path)
