"""
Tests for the Install Assistant CLI.

Installation checks are narrowed to the base path check so the commands
do not depend on tools installed on the test machine.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

import install_assistant.state.app_state as app_state_module
from install_assistant.cli.main import main
from install_assistant.core.exceptions import HelperProcessError
from install_assistant.models.stage import InstallStage
from install_assistant.state.app_state import use_app_state
from install_assistant.validation.checks import BasePathCheck


@pytest.fixture(autouse=True)
def reset_app_state(monkeypatch):
    """Each invocation bootstraps the process-wide state afresh."""
    monkeypatch.setattr(app_state_module, "_app_state", None)


class TestCLI:
    """Test CLI functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_main_command_help(self):
        result = self.runner.invoke(main, [])
        assert result.exit_code == 0
        assert "Use --help to see available commands" in result.output
        assert "install-assistant validate" in result.output

    def test_version_flag(self):
        result = self.runner.invoke(main, ['--version'])
        assert result.exit_code == 0
        assert "Install Assistant version" in result.output

    def test_stages(self):
        result = self.runner.invoke(main, ['stages'])
        assert result.exit_code == 0
        assert "maintenance_mode" in result.output
        assert "installing_studio_requirements" in result.output


class TestValidateCommand:
    """Test the validate command."""

    def setup_method(self):
        self.runner = CliRunner()

    def invoke_validate(self, config_path, install_root, *extra):
        def narrowed_checks(settings, hardware=None):
            return [BasePathCheck(settings.app_install_root)]

        with patch("install_assistant.cli.main.default_checks", side_effect=narrowed_checks):
            return self.runner.invoke(main, [
                'validate', '--config', str(config_path), '--install-root', str(install_root), *extra
            ])

    def test_valid_installation(self, write_config, base_path, app_install_root):
        config_path = write_config({"basePath": str(base_path), "installState": "installed"})
        result = self.invoke_validate(config_path, app_install_root, '--no-repair')

        assert result.exit_code == 0
        assert "Installation is valid" in result.output
        assert "base_path" in result.output

    def test_broken_installation_without_repair(self, write_config, tmp_path, app_install_root):
        config_path = write_config({"basePath": str(tmp_path / "missing"), "installState": "installed"})
        result = self.invoke_validate(config_path, app_install_root, '--no-repair')

        assert result.exit_code == 1
        assert "1 error(s)" in result.output

    def test_quit_repair_prompt(self, write_config, tmp_path, app_install_root):
        config_path = write_config({"basePath": str(tmp_path / "missing"), "installState": "installed"})

        def narrowed_checks(settings, hardware=None):
            return [BasePathCheck(settings.app_install_root)]

        with patch("install_assistant.cli.main.default_checks", side_effect=narrowed_checks), \
             patch("install_assistant.cli.repair_console.Prompt.ask", return_value="q"):
            result = self.runner.invoke(main, [
                'validate', '--config', str(config_path), '--install-root', str(app_install_root)
            ])

        assert result.exit_code == 1
        assert "Maintenance" in result.output
        assert use_app_state().install_stage.stage == InstallStage.MAINTENANCE_MODE

    def test_malformed_config(self, tmp_path, app_install_root):
        config_path = tmp_path / "config.json"
        config_path.write_text("{")
        result = self.invoke_validate(config_path, app_install_root)

        assert result.exit_code == 1
        assert "Malformed" in result.output

    def test_missing_config_file(self, tmp_path):
        result = self.runner.invoke(main, ['validate', '--config', str(tmp_path / "nope.json")])
        assert result.exit_code == 2


class TestMigrateNodesCommand:
    """Test the migrate-nodes command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_success(self, write_config, base_path, tmp_path):
        config_path = write_config({"basePath": str(base_path), "installState": "installed"})
        resources = tmp_path / "resources"
        resources.mkdir()

        with patch("install_assistant.cli.main.ManagerCli.migrate", new_callable=AsyncMock) as migrate:
            result = self.runner.invoke(main, [
                'migrate-nodes', '--config', str(config_path),
                '--from', str(tmp_path / "old"), '--resources', str(resources)
            ])

        assert result.exit_code == 0
        assert "Extensions migrated" in result.output
        assert migrate.await_args.args[0] == str(tmp_path / "old")

    def test_helper_failure(self, write_config, base_path, tmp_path):
        config_path = write_config({"basePath": str(base_path), "installState": "installed"})
        error = HelperProcessError("Error calling extension manager", exit_code=1, stderr="boom")

        with patch("install_assistant.cli.main.ManagerCli.migrate", new_callable=AsyncMock, side_effect=error):
            result = self.runner.invoke(main, [
                'migrate-nodes', '--config', str(config_path),
                '--from', str(tmp_path), '--resources', str(tmp_path)
            ])

        assert result.exit_code == 1
        assert "boom" in result.output

    def test_no_base_path(self, write_config, tmp_path):
        config_path = write_config({"installState": "not-installed"})
        result = self.runner.invoke(main, [
            'migrate-nodes', '--config', str(config_path), '--from', str(tmp_path), '--resources', str(tmp_path)
        ])

        assert result.exit_code == 1
        assert json.loads(config_path.read_text()) == {"installState": "not-installed"}
