"""Table and JSON rendering of snapshots.

Both formats read the same record fields. Each record type's table rows are
declared once below as ``(label, field, formatter)`` and must name every
dataclass field of that record, so nothing can appear in one format only.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
import json
from typing import Any, Callable

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from weni.models import (
    Available,
    BatteryRecord,
    CpuRecord,
    DiskRecord,
    HostEntry,
    MemoryRecord,
    NetworkInterfaceRecord,
    OsRecord,
    ProcessInfo,
    ProcessRecord,
    Snapshot,
    TemperatureComponentRecord,
    Unavailable,
)
from weni.units import format_bytes, format_celsius, format_mhz, format_percent

NOT_AVAILABLE = "N/A"

Row = tuple[str, str, Callable[[Any], str]]


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def _optional(formatter: Callable[[Any], str]) -> Callable[[Any], str]:
    def format_optional(value: Any) -> str:
        return NOT_AVAILABLE if value is None else formatter(value)

    return format_optional


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _enum_value(value: Enum) -> str:
    return str(value.value)


CPU_ROWS: tuple[Row, ...] = (
    ("Model", "name", str),
    ("Cores", "cores", str),
    ("Usage", "usage", format_percent),
    ("Frequency", "frequency", format_mhz),
    ("Architecture", "architecture", str),
)

MEMORY_ROWS: tuple[Row, ...] = (
    ("Total", "total", format_bytes),
    ("Used", "used", format_bytes),
    ("Available", "available", format_bytes),
    ("Usage", "usage_percent", format_percent),
)

OS_ROWS: tuple[Row, ...] = (
    ("OS", "name", str),
    ("Version", "os_version", str),
    ("Kernel", "kernel_version", str),
    ("Hostname", "hostname", str),
    ("Architecture", "architecture", str),
)

BATTERY_ROWS: tuple[Row, ...] = (
    ("State", "state", _enum_value),
    ("Charge", "percentage", format_percent),
    ("Time to Full", "time_to_full", _optional(str)),
    ("Time to Empty", "time_to_empty", _optional(str)),
    ("Health", "health", _optional(format_percent)),
    ("Technology", "technology", str),
    ("Temperature", "temperature", _optional(format_celsius)),
)

DISK_ROWS: tuple[Row, ...] = (
    ("Mount Point", "mount_point", str),
    ("Name", "name", str),
    ("File System", "file_system", str),
    ("Total", "total_space", format_bytes),
    ("Used", "used_space", format_bytes),
    ("Available", "available_space", format_bytes),
    ("Usage", "usage_percent", format_percent),
    ("Removable", "is_removable", _yes_no),
)

NETWORK_ROWS: tuple[Row, ...] = (
    ("Interface", "name", str),
    ("Received", "received", format_bytes),
    ("Transmitted", "transmitted", format_bytes),
    ("Packets RX", "packets_received", str),
    ("Packets TX", "packets_transmitted", str),
    ("Errors RX", "errors_received", str),
    ("Errors TX", "errors_transmitted", str),
)

TEMPERATURE_ROWS: tuple[Row, ...] = (
    ("Component", "label", str),
    ("Temperature", "temperature", format_celsius),
    ("Max", "max", _optional(format_celsius)),
    ("Critical", "critical", _optional(format_celsius)),
)

PROCESS_ROWS: tuple[Row, ...] = (
    ("PID", "pid", str),
    ("Name", "name", str),
    ("CPU Usage", "cpu_usage", format_percent),
    ("Memory", "memory_usage", format_bytes),
    ("Disk Read", "disk_read", format_bytes),
    ("Disk Write", "disk_write", format_bytes),
)

PROCESS_SUMMARY_ROWS: tuple[Row, ...] = (
    ("Total Processes", "total_count", str),
    ("Shown", "processes", lambda processes: str(len(processes))),
)

HOST_ENTRY_ROWS: tuple[Row, ...] = (
    ("IP", "ip", str),
    ("Hostnames", "hostnames", " ".join),
)

ROWS_BY_RECORD: dict[type, tuple[Row, ...]] = {
    CpuRecord: CPU_ROWS,
    MemoryRecord: MEMORY_ROWS,
    OsRecord: OS_ROWS,
    BatteryRecord: BATTERY_ROWS,
    DiskRecord: DISK_ROWS,
    NetworkInterfaceRecord: NETWORK_ROWS,
    TemperatureComponentRecord: TEMPERATURE_ROWS,
    ProcessRecord: PROCESS_ROWS,
    ProcessInfo: PROCESS_SUMMARY_ROWS,
    HostEntry: HOST_ENTRY_ROWS,
}


def to_jsonable(value: Any) -> Any:
    """Convert records into plain JSON types, keeping every field name."""
    if isinstance(value, (Available, Unavailable)):
        return {"data": to_jsonable(value.data), "error": value.error}
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    return to_jsonable(snapshot)


def render_json(snapshot: Snapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False)


def record_rows(record: Any) -> list[tuple[str, str]]:
    """Return the formatted ``(label, value)`` pairs shown for a record."""
    rows = ROWS_BY_RECORD[type(record)]
    return [(label, formatter(getattr(record, name))) for label, name, formatter in rows]


def _record_table(record: Any) -> Table:
    table = Table(show_header=False, box=box.SQUARE)
    table.add_column("Field", style="yellow")
    table.add_column("Value")
    for label, value in record_rows(record):
        table.add_row(label, Text(value))
    return table


def _section(console: Console, title: str) -> None:
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")


def _error_line(console: Console, message: str) -> None:
    console.print(message, style="red", markup=False, highlight=False)


def _note(console: Console, message: str) -> None:
    console.print(message, style="dim", markup=False, highlight=False)


def render_table(snapshot: Snapshot, console: Console) -> None:
    """Print one section per requested subsystem; unrequested ones print nothing."""
    if snapshot.os is not None:
        _section(console, "System Information")
        console.print(_record_table(snapshot.os))

    if snapshot.cpu is not None:
        _section(console, "CPU Information")
        console.print(_record_table(snapshot.cpu))

    if snapshot.memory is not None:
        _section(console, "Memory Information")
        console.print(_record_table(snapshot.memory))

    if snapshot.battery is not None:
        _section(console, "Battery Information")
        if snapshot.battery.ok:
            console.print(_record_table(snapshot.battery.data))
        else:
            _error_line(console, snapshot.battery.error)

    if snapshot.disks is not None:
        _section(console, "Disk Information")
        if not snapshot.disks:
            _note(console, "No disks found")
        for disk in snapshot.disks:
            console.print(_record_table(disk))

    if snapshot.network is not None:
        _section(console, "Network Information")
        if not snapshot.network:
            _note(console, "No network interfaces found")
        for iface in snapshot.network:
            console.print(_record_table(iface))

    if snapshot.temperature is not None:
        _section(console, "Temperature Information")
        if not snapshot.temperature:
            _note(console, "No temperature sensors found")
        for component in snapshot.temperature:
            console.print(_record_table(component))

    if snapshot.processes is not None:
        _section(console, "Process Information")
        console.print(_record_table(snapshot.processes))
        for process in snapshot.processes.processes:
            console.print(_record_table(process))

    if snapshot.hosts is not None:
        _section(console, "Hosts File")
        if not snapshot.hosts.ok:
            _error_line(console, snapshot.hosts.error)
        elif not snapshot.hosts.data:
            _note(console, "No host entries found")
        else:
            console.print(_hosts_table(snapshot.hosts.data))

    console.print()


def _hosts_table(entries: list[HostEntry]) -> Table:
    table = Table(show_header=False, box=box.SQUARE)
    table.add_column("IP", style="yellow")
    table.add_column("Hostnames")
    for entry in entries:
        (_, ip), (_, hostnames) = record_rows(entry)
        table.add_row(Text(ip), Text(hostnames))
    return table


def render(snapshot: Snapshot, output_format: OutputFormat, console: Console | None = None) -> None:
    console = console or Console()
    if output_format == OutputFormat.JSON:
        # Plain write: rich markup and highlighting must not touch the document.
        console.file.write(render_json(snapshot) + "\n")
        console.file.flush()
        return
    render_table(snapshot, console)
