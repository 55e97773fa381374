"""
Shared constants for the Install Assistant.
"""

# Name of the managed application's directory inside the resources path.
APP_DIRECTORY_NAME = "Hanzo Studio"

# Directory (relative to an installation base path) holding extensions.
EXTENSIONS_DIRECTORY = "custom_nodes"

# Extension manager shipped with the application. The snapshot restore
# step recreates this directory under the target's extensions directory.
MANAGER_DIRECTORY_NAME = "Hanzo Manager"
MANAGER_MODULE = "hanzo_studio_manager.cm_cli"
MANAGER_SCRIPT = "cm-cli.py"

# Environment variable the helper reads to locate an installation.
PATH_CONTEXT_ENV_VAR = "COMFYUI_PATH"

# Runtime layout
VENV_DIRECTORY = ".venv"
REQUIREMENTS_FILE = "requirements.txt"
MANAGER_REQUIREMENTS_FILE = "manager_requirements.txt"

# Probes
DEFAULT_PROBE_TIMEOUT = 5.0
GIT_PROBE_COMMAND = "git --help"
NVIDIA_SMI_COMMAND = "nvidia-smi"
NVIDIA_GPU = "nvidia"
MINIMUM_NVIDIA_DRIVER_VERSION = "580"

# Windows runtime library required by the managed application.
VC_REDIST_LIBRARY = "vcruntime140.dll"

# Telemetry events
MIGRATE_CUSTOM_NODES_EVENT = "migrate_flow:migrate_custom_nodes"
