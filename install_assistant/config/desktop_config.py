"""
Persisted desktop configuration store.

Reads and writes the settings document that holds the installation base
path and install-state marker. Repair actions write through this store;
the validation engine reloads it after every repair.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from install_assistant.core.exceptions import ConfigurationError
from install_assistant.models.config import DesktopSettings
from install_assistant.utils.helpers import load_config_file, save_config_file

logger = logging.getLogger(__name__)


class DesktopConfig:
    """Settings document backed by a JSON or YAML file."""

    def __init__(self, path: Union[str, Path], settings: Optional[DesktopSettings] = None):
        self.path = Path(path)
        self._settings = settings

    @classmethod
    def load(cls, path: Union[str, Path]) -> "DesktopConfig":
        """
        Load the settings document from disk.

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        config = cls(path)
        config.reload()
        return config

    def reload(self) -> DesktopSettings:
        """Re-read the settings document, replacing any cached copy."""
        try:
            data = load_config_file(self.path)
        except FileNotFoundError as e:
            raise ConfigurationError(str(e), details={"path": str(self.path)}) from e
        except (ValueError, yaml.YAMLError) as e:
            # json.JSONDecodeError is a ValueError
            raise ConfigurationError(
                f"Malformed configuration file {self.path}: {e}",
                details={"path": str(self.path)}
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file {self.path}: {e}",
                details={"path": str(self.path)}
            ) from e

        try:
            self._settings = DesktopSettings.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid settings in {self.path}: {e.error_count()} error(s)",
                details={"path": str(self.path), "errors": e.errors(include_url=False)}
            ) from e

        logger.debug("Loaded desktop settings from %s", self.path)
        return self._settings

    @property
    def settings(self) -> DesktopSettings:
        if self._settings is None:
            return self.reload()
        return self._settings

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting by its persisted key (e.g. ``basePath``)."""
        data = self.settings.model_dump(by_alias=True, mode="json")
        return data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a setting by its persisted key and write the document."""
        data = self.settings.model_dump(by_alias=True, mode="json", exclude_none=True)
        data[key] = value
        try:
            settings = DesktopSettings.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid value for setting '{key}'",
                details={"key": key, "errors": e.errors(include_url=False)}
            ) from e

        try:
            save_config_file(settings.model_dump(by_alias=True, mode="json", exclude_none=True), self.path)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot write configuration file {self.path}: {e}",
                details={"path": str(self.path), "key": key}
            ) from e
        self._settings = settings
        logger.info("Updated setting %s", key)
