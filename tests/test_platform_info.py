"""Tests for the platform profile resolved at startup."""
from __future__ import annotations

from unittest.mock import patch

import pytest

from weni.platform_info import PlatformProfile, normalize_machine


class TestPlatformProfile:
    """Tests for per-platform labels and paths."""

    def test_linux_x86_64(self):
        profile = PlatformProfile.for_platform("Linux", "x86_64")

        assert profile.is_linux is True
        assert profile.cpu_architecture == "64-bit (x86_64)"
        assert profile.os_architecture == "64-bit"
        assert profile.hosts_path == "/etc/hosts"

    def test_linux_aarch64(self):
        profile = PlatformProfile.for_platform("Linux", "aarch64")

        assert profile.cpu_architecture == "64-bit (ARM64)"
        assert profile.os_architecture == "64-bit (ARM)"

    def test_macos_arm64(self):
        profile = PlatformProfile.for_platform("Darwin", "arm64")

        assert profile.is_macos is True
        assert profile.machine == "aarch64"
        assert profile.hosts_path == "/etc/hosts"

    def test_raspberry_pi_32bit(self):
        profile = PlatformProfile.for_platform("Linux", "armv7l")

        assert profile.cpu_architecture == "32-bit (ARM)"
        assert profile.os_architecture == "32-bit (ARM)"

    def test_unknown_machine_passes_through(self):
        profile = PlatformProfile.for_platform("Linux", "riscv64")

        assert profile.cpu_architecture == "riscv64"
        assert profile.os_architecture == "riscv64"

    @pytest.mark.windows
    def test_windows_hosts_path(self, monkeypatch):
        monkeypatch.setenv("SystemRoot", r"D:\Windows")
        profile = PlatformProfile.for_platform("Windows", "AMD64")

        assert profile.is_windows is True
        assert profile.cpu_architecture == "64-bit (x86_64)"
        assert profile.hosts_path == r"D:\Windows\System32\drivers\etc\hosts"

    @pytest.mark.windows
    def test_windows_hosts_path_default_root(self, monkeypatch):
        monkeypatch.delenv("SystemRoot", raising=False)
        profile = PlatformProfile.for_platform("Windows", "AMD64")

        assert profile.hosts_path == r"C:\Windows\System32\drivers\etc\hosts"

    @pytest.mark.windows
    def test_battery_unsupported_on_32bit_windows(self):
        profile = PlatformProfile.for_platform("Windows", "x86")

        assert profile.battery_supported is False
        assert profile.cpu_architecture == "32-bit (x86)"

    def test_battery_supported_elsewhere(self):
        assert PlatformProfile.for_platform("Windows", "AMD64").battery_supported is True
        assert PlatformProfile.for_platform("Linux", "x86_64").battery_supported is True

    def test_detect_uses_platform_module(self):
        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            profile = PlatformProfile.detect()

        assert profile == PlatformProfile.for_platform("Linux", "x86_64")


@pytest.mark.parametrize(
    "machine,expected",
    [("AMD64", "x86_64"), ("i686", "x86"), ("arm64", "aarch64"), ("armv6l", "arm")],
)
def test_normalize_machine(machine, expected):
    assert normalize_machine(machine) == expected
