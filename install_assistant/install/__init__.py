from install_assistant.install.repairs import (
    RepairAction,
    available_repairs,
    clear_uv_cache_action,
    install_requirements_action,
    recheck_action,
    reset_venv_action,
    set_base_path_action,
)

__all__ = [
    "RepairAction",
    "available_repairs",
    "clear_uv_cache_action",
    "install_requirements_action",
    "recheck_action",
    "reset_venv_action",
    "set_base_path_action",
]
