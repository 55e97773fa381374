"""
Tests for version parsing and comparison.
"""

import pytest

from install_assistant.utils.versions import (
    compare_versions,
    is_version_below_minimum,
    parse_driver_version,
)

NVIDIA_SMI_OUTPUT = """
+-----------------------------------------------------------------------------------------+
| NVIDIA-SMI 591.59                 Driver Version: 591.59         CUDA Version: 13.1     |
|-----------------------------------------+------------------------+----------------------+
| GPU  Name                  Driver-Model | Bus-Id          Disp.A | Volatile Uncorr. ECC |
"""


class TestParseDriverVersion:
    """Test driver version extraction."""

    def test_parses_nvidia_smi_banner(self):
        assert parse_driver_version(NVIDIA_SMI_OUTPUT) == "591.59"

    def test_case_insensitive(self):
        assert parse_driver_version("driver version: 580.12.3") == "580.12.3"

    def test_no_version_token(self):
        assert parse_driver_version("NVIDIA-SMI has failed") is None

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_input(self, raw):
        assert parse_driver_version(raw) is None


class TestCompareVersions:
    """Test component-wise comparison."""

    @pytest.mark.parametrize("a, b, expected", [
        ("579", "580", -1),
        ("580", "580", 0),
        ("580.0.1", "580", 1),
        ("581.0", "580", 1),
        ("580.0.0", "580", 0),
        ("1.10", "1.9", 1),
        ("1.2-beta", "1.2", 0),
    ])
    def test_compare(self, a, b, expected):
        assert compare_versions(a, b) == expected

    def test_antisymmetric(self):
        assert compare_versions("591.59", "580") == -compare_versions("580", "591.59")

    @pytest.mark.parametrize("malformed", [None, "", "not-a-version"])
    def test_malformed_treated_as_zero(self, malformed):
        assert compare_versions(malformed, "0") == 0
        assert compare_versions(malformed, "1") == -1


class TestIsVersionBelowMinimum:
    """Test the minimum driver threshold."""

    @pytest.mark.parametrize("version, expected", [
        ("579", True),
        ("579.99", True),
        ("580", False),
        ("580.0.1", False),
        ("591.59", False),
    ])
    def test_threshold(self, version, expected):
        assert is_version_below_minimum(version, "580") is expected
