from __future__ import annotations

import datetime as dt
import math
import types
from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Any, TypeVar

from .models import FALLBACK_TYPE, ChangeRecord, CommitSummary, CommitWindow

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def count(group: Sequence[Any]) -> int:
    return len(group)


def sum_of(field: str | Callable[[Any], float]) -> Callable[[Sequence[Any]], float]:
    """
    Build a reducer summing a numeric attribute (or dict key) over a group.
    `field` may also be a callable returning the value for one item.
    """
    if callable(field):
        getter = field
    else:

        def getter(item: Any) -> float:
            if isinstance(item, dict):
                return item.get(field, 0) or 0
            return getattr(item, field)

    def reducer(group: Sequence[Any]) -> float:
        return sum(getter(item) for item in group)

    return reducer


def rollup_by_key(
    items: Iterable[T],
    key_fn: Callable[[T], K],
    reducer: Callable[[list[T]], Any] = count,
) -> dict[K, Any]:
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return {k: reducer(v) for k, v in groups.items()}


def _summarize(commit_id: str, group: list[ChangeRecord], fallback_type: str) -> CommitSummary:
    by_type: dict[str, int] = {}
    for r in group:
        label = r.type or fallback_type
        by_type[label] = by_type.get(label, 0) + int(r.lines_changed)
    return CommitSummary(
        commit_id=commit_id,
        timestamp=min(r.timestamp for r in group),
        total_lines=sum(int(r.lines_changed) for r in group),
        # fsum keeps the mean independent of row order.
        time_of_day=math.fsum(r.time_of_day for r in group) / len(group),
        by_type=types.MappingProxyType(by_type),
        record_count=len(group),
        files=len({r.file for r in group}),
    )


def aggregate(records: Iterable[ChangeRecord], *, fallback_type: str = FALLBACK_TYPE) -> list[CommitSummary]:
    groups: dict[str, list[ChangeRecord]] = {}
    for r in records:
        groups.setdefault(r.commit_id, []).append(r)
    return [_summarize(cid, group, fallback_type) for cid, group in groups.items()]


def filter_by_time(summaries: Iterable[CommitSummary], cutoff: dt.datetime) -> list[CommitSummary]:
    return [s for s in summaries if s.timestamp <= cutoff]


def apply_window(summaries: Iterable[CommitSummary], window: CommitWindow) -> list[CommitSummary]:
    out = list(summaries) if window.cutoff is None else filter_by_time(summaries, window.cutoff)
    return [s for s in out if window.contains(s)]


def type_breakdown(summaries: Iterable[CommitSummary]) -> list[dict[str, object]]:
    totals: dict[str, int] = {}
    for s in summaries:
        for label, lines in s.by_type.items():
            totals[label] = totals.get(label, 0) + int(lines)
    overall = sum(totals.values())
    out: list[dict[str, object]] = []
    for label, lines in totals.items():
        pct = round(lines / overall * 100, 1) if overall > 0 else 0.0
        out.append({"type": label, "lines": lines, "pct": pct})
    return out


def overview(records: Sequence[ChangeRecord], *, fallback_type: str = FALLBACK_TYPE) -> dict[str, int]:
    return {
        "records": len(records),
        "files": len({r.file for r in records}),
        "types": len({r.type or fallback_type for r in records}),
        "commits": len({r.commit_id for r in records}),
        "lines_changed": sum(int(r.lines_changed) for r in records),
    }
