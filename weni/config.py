from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import configparser

DEFAULT_SETTLE_DELAY_MS = 200
DEFAULT_INTERVAL_S = 2


@dataclass(frozen=True)
class CollectorConfig:
    settle_delay_s: float
    hosts_path: str | None


@dataclass(frozen=True)
class ProcessConfig:
    top: int | None
    sort_cpu: bool


@dataclass(frozen=True)
class HostsConfig:
    filter_comments: bool


@dataclass(frozen=True)
class WatchConfig:
    interval_s: int


@dataclass(frozen=True)
class AppConfig:
    collector: CollectorConfig
    process: ProcessConfig
    hosts: HostsConfig
    watch: WatchConfig


def _get_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def _get_optional_int(value: str | None) -> int | None:
    value = _get_optional(value)
    if value is None:
        return None
    return int(value)


def default_config() -> AppConfig:
    return _build_config(configparser.ConfigParser())


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        return default_config()
    parser = configparser.ConfigParser()
    try:
        read_files = parser.read(path, encoding="utf-8")
    except configparser.Error as exc:
        raise ValueError(f"Invalid config file {path}: {exc}") from exc
    if not read_files:
        raise FileNotFoundError(f"Config file not found: {path}")
    return _build_config(parser)


def _build_config(parser: configparser.ConfigParser) -> AppConfig:
    # Every section is optional; parser.get with fallback covers missing ones.
    settle_delay_ms = parser.getint(
        "collector", "settle_delay_ms", fallback=DEFAULT_SETTLE_DELAY_MS
    )
    collector = CollectorConfig(
        settle_delay_s=max(0, settle_delay_ms) / 1000.0,
        hosts_path=_get_optional(parser.get("collector", "hosts_path", fallback=None)),
    )

    top = _get_optional_int(parser.get("process", "top", fallback=None))
    if top is not None and top < 1:
        raise ValueError(f"[process] top must be a positive integer, got {top}")
    process = ProcessConfig(
        top=top,
        sort_cpu=parser.getboolean("process", "sort_cpu", fallback=False),
    )

    hosts = HostsConfig(
        filter_comments=parser.getboolean("hosts", "filter_comments", fallback=True),
    )

    watch = WatchConfig(
        interval_s=max(1, parser.getint("watch", "interval_s", fallback=DEFAULT_INTERVAL_S)),
    )

    return AppConfig(collector=collector, process=process, hosts=hosts, watch=watch)
