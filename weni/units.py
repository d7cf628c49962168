from __future__ import annotations

KB = 1024
MB = KB * 1024
GB = MB * 1024


def format_bytes(size: int) -> str:
    """Format a byte count on the 1024-based B/KB/MB/GB scale."""
    if size >= GB:
        return f"{size / GB:.2f} GB"
    if size >= MB:
        return f"{size / MB:.2f} MB"
    if size >= KB:
        return f"{size / KB:.2f} KB"
    return f"{int(size)} B"


def format_duration(seconds: float) -> str:
    total = max(0, int(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    return f"{hours}h {minutes}m"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def format_celsius(value: float) -> str:
    return f"{value:.1f}°C"


def format_mhz(value: int) -> str:
    return f"{value} MHz"
