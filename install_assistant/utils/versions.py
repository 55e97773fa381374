"""
Version parsing and comparison helpers.

These functions are pure and never raise: malformed or empty version
strings compare as ``0.0.0`` and unparsable driver output yields ``None``.
"""

import re
from typing import List, Optional

DRIVER_VERSION_PATTERN = re.compile(r"Driver\s+Version\s*:\s*(\d+(?:\.\d+)*)", re.IGNORECASE)
_VERSION_SEPARATORS = re.compile(r"[+.\-]")


def parse_driver_version(raw_output: Optional[str]) -> Optional[str]:
    """
    Extract a driver version from verbose diagnostic output.

    Args:
        raw_output: Free-form text, e.g. the banner printed by ``nvidia-smi``

    Returns:
        The version string (``"591.59"``), or None when no token is present
    """
    if not raw_output:
        return None
    match = DRIVER_VERSION_PATTERN.search(raw_output)
    return match.group(1) if match else None


def _normalize(version: Optional[str]) -> List[int]:
    if not version:
        return []
    return [int(part) for part in _VERSION_SEPARATORS.split(version.strip()) if part.isdigit()]


def compare_versions(version_a: Optional[str], version_b: Optional[str]) -> int:
    """
    Compare two version strings component-wise.

    Components are split on ``.``, ``-`` and ``+``; non-numeric components
    are ignored and missing trailing components count as zero.

    Returns:
        -1 if ``version_a`` is lower, 1 if higher, 0 if equal
    """
    a_parts = _normalize(version_a)
    b_parts = _normalize(version_b)

    for i in range(max(len(a_parts), len(b_parts))):
        a_part = a_parts[i] if i < len(a_parts) else 0
        b_part = b_parts[i] if i < len(b_parts) else 0
        if a_part < b_part:
            return -1
        if a_part > b_part:
            return 1

    return 0


def is_version_below_minimum(version: Optional[str], minimum: Optional[str]) -> bool:
    """Return True if ``version`` is strictly lower than ``minimum``."""
    return compare_versions(version, minimum) < 0
