from __future__ import annotations

import datetime as dt
from collections.abc import Sequence

from .models import CommitSummary


def parse_timestamp(spec: str) -> dt.datetime:
    s = (spec or "").strip()
    if not s:
        raise ValueError("Empty timestamp")
    if len(s) == 10:
        # Bare date: the whole day is included.
        day = dt.date.fromisoformat(s)
        return dt.datetime.combine(day, dt.time(23, 59, 59))
    return dt.datetime.fromisoformat(s).replace(tzinfo=None)


def time_extent(summaries: Sequence[CommitSummary]) -> tuple[dt.datetime, dt.datetime] | None:
    if not summaries:
        return None
    stamps = [s.timestamp for s in summaries]
    return min(stamps), max(stamps)


def cutoff_at_progress(extent: tuple[dt.datetime, dt.datetime], progress: float) -> dt.datetime:
    """
    Map slider progress (0..100) linearly onto the commit time extent.
    """
    if not (0 <= progress <= 100):
        raise ValueError(f"progress must be within 0..100, got {progress!r}")
    start, end = extent
    return start + (end - start) * (progress / 100)


def progress_for_cutoff(extent: tuple[dt.datetime, dt.datetime], cutoff: dt.datetime) -> float:
    start, end = extent
    span = (end - start).total_seconds()
    if span <= 0:
        return 100.0 if cutoff >= start else 0.0
    pct = (cutoff - start).total_seconds() / span * 100
    return max(0.0, min(100.0, pct))


def parse_time_of_day_range(spec: str) -> tuple[float, float]:
    parts = [p.strip() for p in (spec or "").split(",")]
    if len(parts) != 2:
        raise ValueError(f"Invalid time-of-day range: {spec!r} (expected LO,HI)")
    lo, hi = (_parse_hour(p) for p in parts)
    if lo > hi:
        raise ValueError(f"Invalid time-of-day range: {spec!r} (LO > HI)")
    return lo, hi


def _parse_hour(value: str) -> float:
    if ":" in value:
        h, m = value.split(":", 1)
        out = int(h) + int(m) / 60
    else:
        out = float(value)
    if not (0 <= out <= 24):
        raise ValueError(f"Hour out of range: {value!r}")
    return out


def fmt_time_of_day(fraction: float) -> str:
    total_minutes = min(int(round(fraction * 60)), 24 * 60 - 1)
    h, m = divmod(total_minutes, 60)
    return f"{h:02d}:{m:02d}"
