"""Wall-clock time in the application's zone.

Ledger and budget timestamps are stored naive, as wall-clock time in a single
zone: ``BUDGETWISE_TIMEZONE``, or the server's local zone when that is unset.
Values that carry an offset are converted into that zone before the offset is
dropped, so two different instants never collapse into one stored value.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional


def to_wall_clock(value: datetime, zone: Optional[tzinfo] = None) -> datetime:
    """Return ``value`` as naive wall-clock time in ``zone``.

    Naive values are taken to be wall-clock time already and pass through.
    """

    if value.tzinfo is None:
        return value
    # astimezone(None) converts to the server's local zone
    return value.astimezone(zone).replace(tzinfo=None)


def wall_clock_now(zone: Optional[tzinfo] = None) -> datetime:
    if zone is None:
        return datetime.now()
    return datetime.now(zone).replace(tzinfo=None)


__all__ = ["to_wall_clock", "wall_clock_now"]
