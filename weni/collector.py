from __future__ import annotations

from pathlib import Path
import logging
import platform
import socket
import subprocess
import time
from typing import Callable

import psutil

from weni.config import CollectorConfig
from weni.hosts import read_hosts
from weni.logging_utils import TRACE_LEVEL
from weni.models import (
    UNKNOWN,
    Available,
    BatteryRecord,
    BatteryReport,
    BatteryState,
    CpuRecord,
    DiskRecord,
    HostsReport,
    MemoryRecord,
    NetworkInterfaceRecord,
    OsRecord,
    ProcessInfo,
    ProcessRecord,
    Selection,
    Snapshot,
    SystemInfo,
    TemperatureComponentRecord,
    Unavailable,
)
from weni.platform_info import PlatformProfile
from weni.units import format_duration

POWER_SUPPLY_ROOT = Path("/sys/class/power_supply")
SYS_BLOCK_ROOT = Path("/sys/class/block")

NO_BATTERY_MESSAGE = "No battery found (this may be a desktop system)"
UNSUPPORTED_BATTERY_MESSAGE = "Battery information is not supported on this platform"
UNSUPPORTED_BATTERY_MESSAGE_WIN32 = "Battery information is not supported on 32-bit Windows"

_SYSFS_BATTERY_STATES = {
    "charging": BatteryState.CHARGING,
    "discharging": BatteryState.DISCHARGING,
    "full": BatteryState.FULL,
    "empty": BatteryState.EMPTY,
}

_PROCESS_ATTRS = ["pid", "name"]


class SystemCollector:
    """Queries each OS subsystem independently and assembles snapshots.

    Nothing is cached between calls: every collection pass primes and reads
    its own psutil counters.
    """

    def __init__(
        self,
        config: CollectorConfig,
        profile: PlatformProfile | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.profile = profile or PlatformProfile.detect()
        self._sleep = sleep
        self.logger = logging.getLogger(self.__class__.__name__)

    def collect(self, selection: Selection) -> Snapshot:
        """Run exactly the collectors the selection asks for, in order."""
        selection = selection.resolved()
        self.logger.debug("Collecting snapshot for %s.", selection)

        system = self.collect_system(selection.cpu, selection.memory, selection.system)
        battery = self.collect_battery() if selection.battery else None
        disks = self.collect_disks() if selection.disk else None
        network = self.collect_network() if selection.network else None
        temperature = self.collect_temperatures() if selection.temp else None
        processes = (
            self.collect_processes(selection.top_n, selection.sort_by_cpu)
            if selection.processes
            else None
        )
        hosts = self.collect_hosts(selection.filter_comments) if selection.hosts else None

        self.logger.debug("Completed snapshot collection.")
        return Snapshot(
            cpu=system.cpu,
            memory=system.memory,
            os=system.os,
            battery=battery,
            disks=disks,
            network=network,
            temperature=temperature,
            processes=processes,
            hosts=hosts,
        )

    # -- cpu / memory / os -------------------------------------------------

    def collect_system(self, cpu: bool, memory: bool, os: bool) -> SystemInfo:
        if not (cpu or memory or os):
            return SystemInfo()
        return SystemInfo(
            cpu=self._collect_cpu() if cpu else None,
            memory=self._collect_memory() if memory else None,
            os=self._collect_os() if os else None,
        )

    def _collect_cpu(self) -> CpuRecord:
        # The first reading after priming is meaningless, so sample across one settle delay.
        psutil.cpu_percent(interval=None)
        self._sleep(self.config.settle_delay_s)
        usage = float(psutil.cpu_percent(interval=None))

        frequency = 0
        try:
            freq = psutil.cpu_freq()
            if freq and freq.current:
                frequency = int(freq.current)
        except Exception:
            self.logger.debug("Failed to collect CPU frequency.")

        return CpuRecord(
            name=self._cpu_brand(),
            cores=psutil.cpu_count(logical=False) or 0,
            usage=usage,
            frequency=frequency,
            architecture=self.profile.cpu_architecture,
        )

    def _cpu_brand(self) -> str:
        brand: str | None = None
        if self.profile.is_linux:
            cpuinfo = self._read_file("/proc/cpuinfo")
            if cpuinfo:
                for line in cpuinfo.splitlines():
                    key, _, value = line.partition(":")
                    # "model name" on x86, "Model" or "Hardware" on ARM boards
                    if key.strip() in ("model name", "Model", "Hardware") and value.strip():
                        brand = value.strip()
                        break
        elif self.profile.is_macos:
            output = self._run_command(["sysctl", "-n", "machdep.cpu.brand_string"])
            if output:
                brand = output.strip()
        if not brand:
            brand = platform.processor().strip()
        return brand or UNKNOWN

    def _collect_memory(self) -> MemoryRecord:
        vm = psutil.virtual_memory()
        return MemoryRecord.from_totals(total=int(vm.total), available=int(vm.available))

    def _collect_os(self) -> OsRecord:
        name, version = self._os_name_and_version()
        return OsRecord(
            name=name,
            kernel_version=self._field_or_unknown("kernel_version", platform.release),
            os_version=version,
            hostname=self._field_or_unknown("hostname", socket.gethostname),
            architecture=self.profile.os_architecture,
        )

    def _os_name_and_version(self) -> tuple[str, str]:
        if self.profile.is_linux:
            release = self._os_release()
            name = release.get("NAME") or "Linux"
            version = release.get("VERSION_ID") or release.get("VERSION") or UNKNOWN
            return name, version
        if self.profile.is_macos:
            version = self._field_or_unknown("os_version", lambda: platform.mac_ver()[0])
            return "macOS", version
        if self.profile.is_windows:
            version = self._field_or_unknown("os_version", lambda: platform.win32_ver()[1])
            return "Windows", version
        return (
            self._field_or_unknown("name", platform.system),
            self._field_or_unknown("os_version", platform.version),
        )

    def _os_release(self) -> dict[str, str]:
        try:
            return platform.freedesktop_os_release()
        except OSError:
            self.logger.debug("os-release not available.")
            return {}

    def _field_or_unknown(self, label: str, query: Callable[[], str]) -> str:
        try:
            value = query()
        except Exception as exc:
            self.logger.debug("Failed to query %s: %s", label, exc)
            return UNKNOWN
        value = value.strip() if isinstance(value, str) else ""
        return value or UNKNOWN

    # -- battery -----------------------------------------------------------

    def collect_battery(self) -> BatteryReport:
        if not self.profile.battery_supported:
            if self.profile.is_windows and self.profile.machine == "x86":
                return Unavailable(UNSUPPORTED_BATTERY_MESSAGE_WIN32)
            return Unavailable(UNSUPPORTED_BATTERY_MESSAGE)

        try:
            battery = psutil.sensors_battery()
        except Exception as exc:
            self.logger.warning("Battery query failed: %s", exc)
            return Unavailable(f"Failed to initialize battery manager: {exc}")

        details: dict[str, str] = {}
        if self.profile.is_linux:
            try:
                details = self._linux_battery_details()
            except OSError as exc:
                self.logger.warning("Battery enumeration failed: %s", exc)
                return Unavailable(f"Failed to enumerate batteries: {exc}")

        if battery is None:
            self.logger.debug("No battery data available from psutil.")
            return Unavailable(NO_BATTERY_MESSAGE)

        state = self._battery_state(battery, details.get("status"))
        time_to_empty = None
        if state == BatteryState.DISCHARGING and self._secsleft_known(battery.secsleft):
            time_to_empty = format_duration(battery.secsleft)
        time_to_full = None
        if state == BatteryState.CHARGING:
            seconds = self._sysfs_time_to_full(details)
            if seconds is not None:
                time_to_full = format_duration(seconds)

        return Available(
            BatteryRecord(
                state=state,
                percentage=min(100.0, max(0.0, float(battery.percent))),
                time_to_full=time_to_full,
                time_to_empty=time_to_empty,
                health=self._sysfs_health(details),
                technology=details.get("technology") or UNKNOWN,
                temperature=self._sysfs_temperature(details),
            )
        )

    def _linux_battery_details(self) -> dict[str, str]:
        """Read the first sysfs battery's attributes; later batteries are ignored."""
        if not POWER_SUPPLY_ROOT.exists():
            return {}
        supplies = sorted(POWER_SUPPLY_ROOT.iterdir())
        for supply in supplies:
            if (self._read_file(str(supply / "type")) or "").strip() != "Battery":
                continue
            details: dict[str, str] = {}
            for attr in (
                "status",
                "technology",
                "temp",
                "energy_now",
                "energy_full",
                "energy_full_design",
                "charge_now",
                "charge_full",
                "charge_full_design",
                "power_now",
                "current_now",
            ):
                value = self._read_file(str(supply / attr))
                if value is not None and value.strip():
                    details[attr] = value.strip()
            self.logger.log(TRACE_LEVEL, "Battery %s details: %s", supply.name, details)
            return details
        return {}

    @staticmethod
    def _secsleft_known(secsleft: int | None) -> bool:
        if secsleft is None:
            return False
        if secsleft in (psutil.POWER_TIME_UNLIMITED, psutil.POWER_TIME_UNKNOWN):
            return False
        return secsleft >= 0

    @staticmethod
    def _battery_state(battery, sysfs_status: str | None) -> BatteryState:
        if sysfs_status:
            return _SYSFS_BATTERY_STATES.get(sysfs_status.lower(), BatteryState.UNKNOWN)
        if battery.power_plugged is None:
            return BatteryState.UNKNOWN
        if battery.power_plugged:
            return BatteryState.FULL if battery.percent >= 100 else BatteryState.CHARGING
        return BatteryState.EMPTY if battery.percent <= 0 else BatteryState.DISCHARGING

    @staticmethod
    def _sysfs_health(details: dict[str, str]) -> float | None:
        for full_key, design_key in (
            ("energy_full", "energy_full_design"),
            ("charge_full", "charge_full_design"),
        ):
            try:
                full = float(details[full_key])
                design = float(details[design_key])
            except (KeyError, ValueError):
                continue
            if design > 0:
                return min(full / design * 100.0, 100.0)
        return None

    @staticmethod
    def _sysfs_temperature(details: dict[str, str]) -> float | None:
        # sysfs reports tenths of a degree Celsius
        try:
            return float(details["temp"]) / 10.0
        except (KeyError, ValueError):
            return None

    @staticmethod
    def _sysfs_time_to_full(details: dict[str, str]) -> float | None:
        for now_key, full_key, rate_key in (
            ("energy_now", "energy_full", "power_now"),
            ("charge_now", "charge_full", "current_now"),
        ):
            try:
                now = float(details[now_key])
                full = float(details[full_key])
                rate = abs(float(details[rate_key]))
            except (KeyError, ValueError):
                continue
            if rate > 0 and full > now:
                return (full - now) / rate * 3600
        return None

    # -- disks / network / temperatures ------------------------------------

    def collect_disks(self) -> list[DiskRecord]:
        disks: list[DiskRecord] = []
        for partition in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(partition.mountpoint)
            except OSError as exc:
                self.logger.debug("Skipping %s: %s", partition.mountpoint, exc)
                continue
            total = int(usage.total)
            available = min(int(usage.free), total)
            used = total - available
            disks.append(
                DiskRecord(
                    mount_point=partition.mountpoint,
                    name=partition.device,
                    file_system=partition.fstype or UNKNOWN,
                    total_space=total,
                    used_space=used,
                    available_space=available,
                    usage_percent=(used / total) * 100.0 if total > 0 else 0.0,
                    is_removable=self._is_removable(partition),
                )
            )
        return disks

    def _is_removable(self, partition) -> bool:
        if self.profile.is_windows:
            return "removable" in (partition.opts or "").split(",")
        if not self.profile.is_linux or not partition.device.startswith("/dev/"):
            return False
        # Partitions resolve to .../sda/sda1; the flag lives on the whole disk.
        block = (SYS_BLOCK_ROOT / Path(partition.device).name).resolve()
        for candidate in (block, block.parent):
            flag = self._read_file(str(candidate / "removable"))
            if flag is not None:
                return flag.strip() == "1"
        return False

    def collect_network(self) -> list[NetworkInterfaceRecord]:
        try:
            io_stats = psutil.net_io_counters(pernic=True)
        except OSError as exc:
            self.logger.warning("Failed to read network counters: %s", exc)
            return []
        return [
            NetworkInterfaceRecord(
                name=name,
                received=int(counters.bytes_recv),
                transmitted=int(counters.bytes_sent),
                packets_received=int(counters.packets_recv),
                packets_transmitted=int(counters.packets_sent),
                errors_received=int(counters.errin),
                errors_transmitted=int(counters.errout),
            )
            for name, counters in io_stats.items()
        ]

    def collect_temperatures(self) -> list[TemperatureComponentRecord]:
        if not hasattr(psutil, "sensors_temperatures"):
            self.logger.debug("Temperature sensors not supported on this platform.")
            return []
        try:
            temps = psutil.sensors_temperatures(fahrenheit=False)
        except Exception as exc:
            self.logger.debug("Failed to read temperature sensors: %s", exc)
            return []

        components: list[TemperatureComponentRecord] = []
        for chip, entries in (temps or {}).items():
            for entry in entries:
                label = f"{chip} {entry.label}" if entry.label else chip
                components.append(
                    TemperatureComponentRecord(
                        label=label,
                        temperature=float(entry.current),
                        max=float(entry.high) if entry.high else None,
                        critical=float(entry.critical) if entry.critical else None,
                    )
                )
        if not components:
            self.logger.debug("No temperature sensors found.")
        return components

    # -- processes ---------------------------------------------------------

    def collect_processes(self, top_n: int | None = None, sort_by_cpu: bool = False) -> ProcessInfo:
        procs: list[psutil.Process] = []
        for proc in psutil.process_iter(attrs=_PROCESS_ATTRS):
            try:
                proc.cpu_percent(interval=None)
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            procs.append(proc)

        self._sleep(self.config.settle_delay_s)

        records: list[ProcessRecord] = []
        for proc in procs:
            try:
                with proc.oneshot():
                    records.append(self._process_record(proc))
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                # Exited or became unreadable during the settle delay
                continue

        total_count = len(records)
        if sort_by_cpu:
            records.sort(key=lambda p: p.cpu_usage, reverse=True)
        else:
            records.sort(key=lambda p: p.memory_usage, reverse=True)
        if top_n is not None:
            records = records[:top_n]
        return ProcessInfo(processes=records, total_count=total_count)

    def _process_record(self, proc: psutil.Process) -> ProcessRecord:
        info = proc.info
        cpu_usage = float(proc.cpu_percent(interval=None))
        mem_info = proc.memory_info()
        disk_read = disk_write = 0
        try:
            io = proc.io_counters()
            disk_read, disk_write = int(io.read_bytes), int(io.write_bytes)
        except (psutil.AccessDenied, AttributeError, NotImplementedError):
            # io_counters is missing on macOS and restricted for other users' processes
            pass
        return ProcessRecord(
            pid=int(info.get("pid") or proc.pid),
            name=info.get("name") or "",
            cpu_usage=cpu_usage,
            memory_usage=int(mem_info.rss),
            disk_read=disk_read,
            disk_write=disk_write,
        )

    # -- hosts -------------------------------------------------------------

    def collect_hosts(self, filter_comments: bool = True) -> HostsReport:
        path = self.config.hosts_path or self.profile.hosts_path
        return read_hosts(path, filter_comments)

    # -- helpers -----------------------------------------------------------

    def _run_command(self, command: list[str]) -> str | None:
        try:
            result = subprocess.run(
                command,
                check=False,
                text=True,
                capture_output=True,
                timeout=5,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired):
            self.logger.debug("Command unavailable: %s", command[0])
            return None
        if result.returncode != 0:
            self.logger.debug(
                "Command failed (%s): %s", result.returncode, " ".join(command)
            )
            if result.stderr:
                self.logger.log(TRACE_LEVEL, "stderr: %s", result.stderr.strip())
            return None
        self.logger.log(TRACE_LEVEL, "stdout: %s", result.stdout.strip())
        return result.stdout

    def _read_file(self, path: str) -> str | None:
        """Read a file and return its contents, or None if it doesn't exist."""
        try:
            return Path(path).read_text()
        except (FileNotFoundError, PermissionError, OSError):
            return None
