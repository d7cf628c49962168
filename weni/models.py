from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, TypeVar, Union

UNKNOWN = "Unknown"

T = TypeVar("T")


@dataclass(frozen=True)
class Available(Generic[T]):
    """Successful subsystem report carrying its payload."""

    data: T

    @property
    def error(self) -> None:
        return None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    """Failed subsystem report carrying a human-readable reason."""

    error: str

    @property
    def data(self) -> None:
        return None

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class CpuRecord:
    name: str
    cores: int
    usage: float
    frequency: int
    architecture: str


@dataclass(frozen=True)
class MemoryRecord:
    total: int
    used: int
    available: int
    usage_percent: float

    @classmethod
    def from_totals(cls, total: int, available: int) -> MemoryRecord:
        # used is derived so that used + available == total always holds
        available = min(max(available, 0), total)
        used = total - available
        usage_percent = (used / total) * 100.0 if total > 0 else 0.0
        return cls(total=total, used=used, available=available, usage_percent=usage_percent)


@dataclass(frozen=True)
class OsRecord:
    name: str = UNKNOWN
    kernel_version: str = UNKNOWN
    os_version: str = UNKNOWN
    hostname: str = UNKNOWN
    architecture: str = UNKNOWN


@dataclass(frozen=True)
class SystemInfo:
    cpu: CpuRecord | None = None
    memory: MemoryRecord | None = None
    os: OsRecord | None = None


class BatteryState(str, Enum):
    CHARGING = "Charging"
    DISCHARGING = "Discharging"
    FULL = "Full"
    EMPTY = "Empty"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class BatteryRecord:
    state: BatteryState
    percentage: float
    time_to_full: str | None = None
    time_to_empty: str | None = None
    health: float | None = None
    technology: str = UNKNOWN
    temperature: float | None = None


@dataclass(frozen=True)
class DiskRecord:
    mount_point: str
    name: str
    file_system: str
    total_space: int
    used_space: int
    available_space: int
    usage_percent: float
    is_removable: bool


@dataclass(frozen=True)
class NetworkInterfaceRecord:
    name: str
    received: int
    transmitted: int
    packets_received: int
    packets_transmitted: int
    errors_received: int
    errors_transmitted: int


@dataclass(frozen=True)
class TemperatureComponentRecord:
    label: str
    temperature: float
    max: float | None = None
    critical: float | None = None


@dataclass(frozen=True)
class ProcessRecord:
    pid: int
    name: str
    cpu_usage: float
    memory_usage: int
    disk_read: int
    disk_write: int


@dataclass(frozen=True)
class ProcessInfo:
    processes: list[ProcessRecord]
    total_count: int


@dataclass(frozen=True)
class HostEntry:
    ip: str
    hostnames: list[str]


BatteryReport = Union[Available[BatteryRecord], Unavailable]
HostsReport = Union[Available[list[HostEntry]], Unavailable]


@dataclass(frozen=True)
class Selection:
    """Which subsystems one collection pass should query."""

    cpu: bool = False
    memory: bool = False
    system: bool = False
    battery: bool = False
    disk: bool = False
    network: bool = False
    temp: bool = False
    processes: bool = False
    hosts: bool = False
    top_n: int | None = None
    sort_by_cpu: bool = False
    filter_comments: bool = True

    @property
    def any_subsystem(self) -> bool:
        return any(getattr(self, name) for name in SUBSYSTEM_FLAGS)

    def resolved(self) -> Selection:
        """Return a copy where an empty subsystem set means every subsystem."""
        if self.any_subsystem:
            return self
        return replace(self, **{name: True for name in SUBSYSTEM_FLAGS})


SUBSYSTEM_FLAGS = (
    "cpu",
    "memory",
    "system",
    "battery",
    "disk",
    "network",
    "temp",
    "processes",
    "hosts",
)


@dataclass(frozen=True)
class Snapshot:
    """One collection pass; a field is None when its subsystem was not requested."""

    cpu: CpuRecord | None = None
    memory: MemoryRecord | None = None
    os: OsRecord | None = None
    battery: BatteryReport | None = None
    disks: list[DiskRecord] | None = None
    network: list[NetworkInterfaceRecord] | None = None
    temperature: list[TemperatureComponentRecord] | None = None
    processes: ProcessInfo | None = None
    hosts: HostsReport | None = None
