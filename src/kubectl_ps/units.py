"""Cell formatting: memory units, percentages and ages."""

from __future__ import annotations

import datetime
from typing import Optional

from .config import (
    GIB,
    MIB,
    PLACEHOLDER,
    UNITS_BYTES,
    UNITS_GIBIBYTES,
    UNITS_MEBIBYTES,
)


def format_memory(value: int, units: str) -> str:
    """
    Render a byte count in the selected unit mode.

    bytes -> "536870912", mebibytes -> "512.0", gibibytes -> "0.50",
    human -> "512.0M" below one GiB and "1.50G" from one GiB up.
    """
    if units == UNITS_BYTES:
        return str(value)
    if units == UNITS_MEBIBYTES:
        return f"{value / MIB:.1f}"
    if units == UNITS_GIBIBYTES:
        return f"{value / GIB:.2f}"
    if value / GIB >= 1:
        return f"{value / GIB:.2f}G"
    return f"{value / MIB:.1f}M"


def format_percent(ratio: Optional[float]) -> str:
    if ratio is None:
        return PLACEHOLDER
    return f"{ratio * 100:.0f}%"


def format_age(
    created: Optional[datetime.datetime],
    now: Optional[datetime.datetime] = None,
) -> str:
    """Age as "<n>d" from 48 hours up, "<n>h" from one hour up, else "<n>m"."""
    if created is None:
        return PLACEHOLDER
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    seconds = int((now - created).total_seconds())
    if seconds >= 48 * 3600:
        return f"{seconds // 86400}d"
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    return f"{seconds // 60}m"


def parse_timestamp(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse a metadata.creationTimestamp ("2024-05-01T12:00:00Z")."""
    if not value:
        return None
    try:
        parsed = datetime.datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ")
    except ValueError:
        return None
    return parsed.replace(tzinfo=datetime.timezone.utc)
