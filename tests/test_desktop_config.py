"""
Tests for the persisted desktop configuration and installation records.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from install_assistant.config.desktop_config import DesktopConfig
from install_assistant.core.exceptions import ConfigurationError
from install_assistant.models.config import AssistantSettings, InstallState
from install_assistant.models.installation import Installation


class TestDesktopConfig:
    """Test loading and writing the settings document."""

    def test_load_json(self, write_config):
        config = DesktopConfig.load(write_config({"basePath": "/data/hanzo", "installState": "installed"}))

        assert config.settings.base_path == "/data/hanzo"
        assert config.settings.install_state == InstallState.INSTALLED
        assert config.get("basePath") == "/data/hanzo"
        assert config.get("windowStyle", "default") == "default"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"basePath": "/srv/hanzo", "installState": "upgraded"}))

        config = DesktopConfig.load(path)
        assert config.settings.install_state == InstallState.UPGRADED

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            DesktopConfig.load(tmp_path / "config.json")
        assert exc_info.value.details["path"] == str(tmp_path / "config.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Malformed"):
            DesktopConfig.load(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("basePath: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Malformed"):
            DesktopConfig.load(path)

    def test_unreadable_path(self, tmp_path):
        path = tmp_path / "config.json"
        path.mkdir()

        with pytest.raises(ConfigurationError, match="Cannot read"):
            DesktopConfig.load(path)

    def test_set_write_failure(self, write_config):
        config = DesktopConfig.load(write_config({"basePath": "/old", "installState": "installed"}))

        with patch("install_assistant.config.desktop_config.save_config_file",
                   side_effect=PermissionError("read-only")):
            with pytest.raises(ConfigurationError, match="Cannot write"):
                config.set("basePath", "/new")
        assert config.settings.base_path == "/old"

    def test_invalid_install_state(self, write_config):
        with pytest.raises(ConfigurationError, match="Invalid settings"):
            DesktopConfig.load(write_config({"installState": "half-done"}))

    def test_blank_base_path(self, write_config):
        with pytest.raises(ConfigurationError):
            DesktopConfig.load(write_config({"basePath": "   "}))

    def test_set_persists_and_keeps_unknown_keys(self, write_config):
        path = write_config({"basePath": "/old", "installState": "installed", "windowStyle": "custom"})
        config = DesktopConfig.load(path)

        config.set("basePath", "/new")

        saved = json.loads(Path(path).read_text())
        assert saved == {"basePath": "/new", "installState": "installed", "windowStyle": "custom"}
        assert config.settings.base_path == "/new"

    def test_set_rejects_invalid_value(self, write_config):
        path = write_config({"basePath": "/old", "installState": "installed"})
        config = DesktopConfig.load(path)

        with pytest.raises(ConfigurationError):
            config.set("installState", "bogus")
        assert json.loads(Path(path).read_text())["installState"] == "installed"

    def test_reload_sees_external_changes(self, write_config):
        path = write_config({"basePath": "/a", "installState": "started"})
        config = DesktopConfig.load(path)
        path.write_text(json.dumps({"basePath": "/b", "installState": "installed"}))

        assert config.settings.base_path == "/a"
        assert config.reload().base_path == "/b"


class TestInstallationFromConfig:
    """Test building installation records."""

    @pytest.mark.parametrize("state", ["installed", "upgraded", "started"])
    def test_record_for_installed_states(self, write_config, state):
        config = DesktopConfig(write_config({"basePath": "/data/hanzo", "installState": state}))
        installation = Installation.from_config(config)

        assert installation.state == InstallState(state)
        assert installation.base_path == Path("/data/hanzo")
        assert installation.extensions_path == Path("/data/hanzo/custom_nodes")
        assert installation.validation is None

    def test_not_installed(self, write_config):
        config = DesktopConfig(write_config({"basePath": "/data", "installState": "not-installed"}))
        assert Installation.from_config(config) is None

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Installation.from_config(DesktopConfig(tmp_path / "absent.json"))


class TestAssistantSettings:
    """Test tool-level settings."""

    def test_defaults(self):
        settings = AssistantSettings()
        assert settings.probe_timeout == 5.0
        assert settings.minimum_driver_version == "580"
        assert settings.app_install_root.is_absolute()

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            AssistantSettings(probe_timeout=0)
