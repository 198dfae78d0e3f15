from __future__ import annotations

import datetime as dt
import random

import pytest

from portfolio_stats.analysis_aggregate import (
    aggregate,
    apply_window,
    count,
    filter_by_time,
    overview,
    rollup_by_key,
    sum_of,
    type_breakdown,
)
from portfolio_stats.models import ChangeRecord, CommitWindow


def _rec(commit: str, type_: str, lines: int, ts: str = "2025-02-10T10:00:00", file: str = "index.js") -> ChangeRecord:
    return ChangeRecord(file=file, type=type_, commit_id=commit, timestamp=dt.datetime.fromisoformat(ts), lines_changed=lines)


def _random_records(n: int, seed: int = 7) -> list[ChangeRecord]:
    rnd = random.Random(seed)
    base = dt.datetime(2025, 1, 1)
    out: list[ChangeRecord] = []
    for i in range(n):
        out.append(
            ChangeRecord(
                file=f"f{rnd.randint(0, 9)}.js",
                type=rnd.choice(["js", "css", "html", ""]),
                commit_id=f"c{rnd.randint(0, 14)}",
                timestamp=base + dt.timedelta(minutes=rnd.randint(0, 60 * 24 * 30)),
                lines_changed=rnd.randint(0, 200),
            )
        )
    return out


def test_aggregate_two_commits_scenario() -> None:
    records = [
        _rec("c1", "js", 5, file="a.js"),
        _rec("c1", "css", 3, file="a.css"),
        _rec("c2", "js", 10),
    ]
    out = aggregate(records)
    assert [s.commit_id for s in out] == ["c1", "c2"]
    c1, c2 = out
    assert c1.total_lines == 8
    assert c1.by_type == {"js": 5, "css": 3}
    assert c1.record_count == 2
    assert c1.files == 2
    assert c2.total_lines == 10
    assert c2.by_type == {"js": 10}


def test_aggregate_empty() -> None:
    assert aggregate([]) == []


def test_aggregate_preserves_first_seen_order() -> None:
    records = [_rec("b", "js", 1), _rec("a", "js", 1), _rec("b", "js", 1), _rec("c", "js", 1)]
    assert [s.commit_id for s in aggregate(records)] == ["b", "a", "c"]


def test_aggregate_timestamp_is_minimum_and_time_of_day_is_mean() -> None:
    records = [
        _rec("c1", "js", 1, ts="2025-02-10T11:30:00"),
        _rec("c1", "js", 1, ts="2025-02-10T10:00:00"),
    ]
    (s,) = aggregate(records)
    assert s.timestamp == dt.datetime(2025, 2, 10, 10, 0, 0)
    assert s.time_of_day == 10.75


def test_aggregate_time_of_day_includes_seconds() -> None:
    (s,) = aggregate([_rec("c1", "js", 1, ts="2025-02-10T06:15:36")])
    assert abs(s.time_of_day - (6 + 15 / 60 + 36 / 3600)) < 1e-12


def test_aggregate_missing_type_uses_fallback() -> None:
    (s,) = aggregate([_rec("c1", "", 4), _rec("c1", "js", 1)])
    assert s.by_type == {"other": 4, "js": 1}
    (s2,) = aggregate([_rec("c1", "", 4)], fallback_type="misc")
    assert s2.by_type == {"misc": 4}


def test_aggregate_conserves_lines_and_commit_count() -> None:
    records = _random_records(300)
    out = aggregate(records)
    assert sum(s.total_lines for s in out) == sum(r.lines_changed for r in records)
    assert len(out) == len({r.commit_id for r in records})
    assert sum(s.record_count for s in out) == len(records)
    for s in out:
        assert sum(s.by_type.values()) == s.total_lines


def test_aggregate_is_order_independent_as_multiset() -> None:
    records = _random_records(200)
    shuffled = list(records)
    random.Random(3).shuffle(shuffled)
    a = sorted(aggregate(records), key=lambda s: s.commit_id)
    b = sorted(aggregate(shuffled), key=lambda s: s.commit_id)
    assert a == b


def test_filter_by_time_keeps_order_and_is_inclusive() -> None:
    records = [
        _rec("c3", "js", 1, ts="2025-02-12T09:00:00"),
        _rec("c1", "js", 1, ts="2025-02-10T09:00:00"),
        _rec("c2", "js", 1, ts="2025-02-11T09:00:00"),
    ]
    summaries = aggregate(records)
    cutoff = dt.datetime(2025, 2, 11, 9, 0, 0)
    out = filter_by_time(summaries, cutoff)
    assert [s.commit_id for s in out] == ["c1", "c2"]
    assert out == [s for s in summaries if s.timestamp <= cutoff]
    assert filter_by_time(summaries, dt.datetime(2000, 1, 1)) == []


def test_apply_window_combines_cutoff_and_time_of_day() -> None:
    summaries = aggregate(
        [
            _rec("morning", "js", 1, ts="2025-02-10T08:00:00"),
            _rec("evening", "js", 1, ts="2025-02-10T21:00:00"),
            _rec("late", "js", 1, ts="2025-03-01T09:00:00"),
        ]
    )
    window = CommitWindow(cutoff=dt.datetime(2025, 2, 28), time_of_day_range=(7.0, 12.0))
    assert [s.commit_id for s in apply_window(summaries, window)] == ["morning"]
    assert apply_window(summaries, CommitWindow()) == summaries


def test_rollup_by_key_counts_types() -> None:
    records = [_rec(f"c{i}", t, 1) for i, t in enumerate(["js", "js", "css", "js", "css"])]
    out = rollup_by_key(records, lambda r: r.type, count)
    assert out == {"js": 3, "css": 2}
    assert list(out) == ["js", "css"]


def test_rollup_by_key_sum_reducers() -> None:
    records = [_rec("c1", "js", 5), _rec("c2", "css", 3), _rec("c3", "js", 10)]
    assert rollup_by_key(records, lambda r: r.type, sum_of("lines_changed")) == {"js": 15, "css": 3}
    assert rollup_by_key(records, lambda r: r.type, sum_of(lambda r: r.lines_changed * 2)) == {"js": 30, "css": 6}

    projects = [{"year": "2024", "stars": 2}, {"year": "2025"}, {"year": "2024", "stars": 1}]
    assert rollup_by_key(projects, lambda p: p["year"], sum_of("stars")) == {"2024": 3, "2025": 0}


def test_type_breakdown_percentages() -> None:
    summaries = aggregate([_rec("c1", "js", 5), _rec("c1", "css", 3), _rec("c2", "js", 10)])
    rows = type_breakdown(summaries)
    assert rows == [
        {"type": "js", "lines": 15, "pct": 83.3},
        {"type": "css", "lines": 3, "pct": 16.7},
    ]
    zero = type_breakdown(aggregate([_rec("c1", "js", 0)]))
    assert zero == [{"type": "js", "lines": 0, "pct": 0.0}]
    assert type_breakdown([]) == []


def test_overview_counts() -> None:
    records = [
        _rec("c1", "js", 5, file="a.js"),
        _rec("c1", "css", 3, file="a.css"),
        _rec("c2", "js", 10, file="a.js"),
    ]
    assert overview(records) == {"records": 3, "files": 2, "types": 2, "commits": 2, "lines_changed": 18}


def test_overview_counts_empty_type_as_fallback() -> None:
    records = [_rec("c1", "", 1), _rec("c2", "other", 1), _rec("c3", "js", 1)]
    assert overview(records)["types"] == 2
    assert overview(records, fallback_type="misc")["types"] == 3


def test_summary_by_type_is_read_only() -> None:
    (s,) = aggregate([_rec("c1", "js", 5)])
    with pytest.raises(TypeError):
        s.by_type["js"] = 1  # type: ignore[index]
    assert s.by_type == {"js": 5}
