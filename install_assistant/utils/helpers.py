"""
Helper utilities for the Install Assistant.

This module contains filesystem and configuration-file helpers used
throughout the application.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml


async def path_accessible(path: Union[str, Path]) -> bool:
    """Return True if the path exists and can be accessed."""
    return await asyncio.to_thread(os.access, path, os.F_OK)


async def path_read_writable(path: Union[str, Path]) -> bool:
    """Return True if the path exists and is readable and writable."""
    return await asyncio.to_thread(os.access, path, os.R_OK | os.W_OK)


async def can_execute(path: Union[str, Path]) -> bool:
    """Return True if the path is an executable file."""
    return await asyncio.to_thread(lambda: os.path.isfile(path) and os.access(path, os.X_OK))


def is_path_inside(path: Union[str, Path], root: Union[str, Path]) -> bool:
    """
    Check whether ``path`` equals ``root`` or is nested beneath it.

    Both paths are resolved to their real location first, so symbolic
    links and junctions aliasing ``root`` are treated as ``root``.
    """
    real_path = Path(os.path.realpath(path))
    real_root = Path(os.path.realpath(root))
    if os.name == "nt":
        real_path = Path(os.path.normcase(real_path))
        real_root = Path(os.path.normcase(real_root))
    return real_path == real_root or real_root in real_path.parents


def load_config_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Args:
        file_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        if file_path.suffix.lower() in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif file_path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported configuration file format: {file_path.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {file_path}")
    return data


def save_config_file(config: Dict[str, Any], file_path: Union[str, Path]) -> None:
    """
    Save configuration to a YAML or JSON file, chosen by suffix.

    Args:
        config: Configuration dictionary
        file_path: Path to save configuration
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, 'w', encoding='utf-8') as f:
        if file_path.suffix.lower() in ['.yaml', '.yml']:
            yaml.safe_dump(config, f, default_flow_style=False, indent=2)
        elif file_path.suffix.lower() == '.json':
            json.dump(config, f, indent=2, default=str)
        else:
            raise ValueError(f"Unsupported configuration file format: {file_path.suffix}")
