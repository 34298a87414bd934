"""Timestamps in the formats clients display."""

from datetime import datetime, timezone
from typing import Optional


def local_timestamp(now: Optional[datetime] = None) -> str:
    """Format a time the way a zh-CN locale renders it, e.g. ``2025/3/7 09:05:01``.

    Month and day are not zero-padded; the clock part is.
    """
    now = now or datetime.now()
    return f"{now.year}/{now.month}/{now.day} {now:%H:%M:%S}"


def utc_isoformat() -> str:
    return datetime.now(timezone.utc).isoformat()
