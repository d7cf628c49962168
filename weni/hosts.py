from __future__ import annotations

import logging
from pathlib import Path

from weni.models import Available, HostEntry, HostsReport, Unavailable

logger = logging.getLogger(__name__)


def parse_hosts(text: str, filter_comments: bool = True) -> list[HostEntry]:
    """Parse hosts-file text into entries.

    Lines need an address followed by at least one hostname; anything shorter
    is dropped silently. With ``filter_comments`` off, ``#`` is kept as an
    ordinary token.
    """
    entries: list[HostEntry] = []
    for line in text.splitlines():
        content = line.strip()
        if not content:
            continue
        if filter_comments:
            if content.startswith("#"):
                continue
            content = content.split("#", 1)[0].strip()
            if not content:
                continue

        parts = content.split()
        if len(parts) < 2:
            logger.debug("Skipping malformed hosts line: %r", line)
            continue
        entries.append(HostEntry(ip=parts[0], hostnames=parts[1:]))
    return entries


def read_hosts(path: str | Path, filter_comments: bool = True) -> HostsReport:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        logger.warning("Failed to read hosts file %s: %s", path, reason)
        return Unavailable(
            f"Unable to read hosts file {path}: {reason} "
            "(administrator privileges may be required)"
        )
    return Available(parse_hosts(text, filter_comments))
