from __future__ import annotations

from dataclasses import dataclass
import os
import platform

import psutil

POSIX_HOSTS_PATH = "/etc/hosts"
WINDOWS_HOSTS_SUFFIX = r"System32\drivers\etc\hosts"

# machine() spellings vary per OS: AMD64 on Windows, arm64 on macOS, aarch64 on Linux.
_MACHINE_ALIASES = {
    "amd64": "x86_64",
    "x86_64": "x86_64",
    "x64": "x86_64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "arm64": "aarch64",
    "aarch64": "aarch64",
    "armv6l": "arm",
    "armv7l": "arm",
    "armv8l": "arm",
    "arm": "arm",
}

_CPU_ARCH_LABELS = {
    "x86": "32-bit (x86)",
    "x86_64": "64-bit (x86_64)",
    "aarch64": "64-bit (ARM64)",
    "arm": "32-bit (ARM)",
}

_OS_ARCH_LABELS = {
    "x86": "32-bit",
    "x86_64": "64-bit",
    "aarch64": "64-bit (ARM)",
    "arm": "32-bit (ARM)",
}


@dataclass(frozen=True)
class PlatformProfile:
    """Per-platform facts resolved once at startup."""

    system: str
    machine: str
    cpu_architecture: str
    os_architecture: str
    hosts_path: str
    battery_supported: bool

    @property
    def is_linux(self) -> bool:
        return self.system == "linux"

    @property
    def is_windows(self) -> bool:
        return self.system == "windows"

    @property
    def is_macos(self) -> bool:
        return self.system == "darwin"

    @classmethod
    def detect(cls) -> PlatformProfile:
        return cls.for_platform(platform.system(), platform.machine())

    @classmethod
    def for_platform(cls, system: str, machine: str) -> PlatformProfile:
        system = system.lower()
        arch = normalize_machine(machine)
        return cls(
            system=system,
            machine=arch,
            cpu_architecture=_CPU_ARCH_LABELS.get(arch, arch),
            os_architecture=_OS_ARCH_LABELS.get(arch, arch),
            hosts_path=hosts_path_for(system),
            battery_supported=battery_supported_on(system, arch),
        )


def normalize_machine(machine: str) -> str:
    raw = machine.strip()
    return _MACHINE_ALIASES.get(raw.lower(), raw)


def hosts_path_for(system: str) -> str:
    if system == "windows":
        root = os.environ.get("SystemRoot", r"C:\Windows")
        return root.rstrip("\\") + "\\" + WINDOWS_HOSTS_SUFFIX
    return POSIX_HOSTS_PATH


def battery_supported_on(system: str, arch: str) -> bool:
    # No battery backend is available for 32-bit x86 Windows builds.
    if system == "windows" and arch == "x86":
        return False
    return hasattr(psutil, "sensors_battery")
