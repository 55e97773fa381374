# Validation module for the install assistant

from .checks import (
    BasePathCheck,
    GitCheck,
    HardwareCheck,
    NvidiaDriverCheck,
    PythonInterpreterCheck,
    PythonPackagesCheck,
    UvCheck,
    ValidationCheck,
    VCRedistCheck,
    VenvDirectoryCheck,
    default_checks,
)
from .engine import InstallValidationEngine, RepairSurface
from .hardware import HardwareValidation, HardwareValidator, StaticHardwareValidator

__all__ = [
    # Checks
    'BasePathCheck',
    'GitCheck',
    'HardwareCheck',
    'NvidiaDriverCheck',
    'PythonInterpreterCheck',
    'PythonPackagesCheck',
    'UvCheck',
    'ValidationCheck',
    'VCRedistCheck',
    'VenvDirectoryCheck',
    'default_checks',

    # Engine
    'InstallValidationEngine',
    'RepairSurface',

    # Hardware collaborator
    'HardwareValidation',
    'HardwareValidator',
    'StaticHardwareValidator',
]
