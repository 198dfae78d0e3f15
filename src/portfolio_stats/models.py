from __future__ import annotations

import dataclasses
import datetime as dt
from collections.abc import Mapping

FALLBACK_TYPE = "other"


@dataclasses.dataclass(frozen=True)
class ChangeRecord:
    file: str
    type: str
    commit_id: str
    timestamp: dt.datetime
    lines_changed: int

    @property
    def time_of_day(self) -> float:
        t = self.timestamp
        return t.hour + t.minute / 60 + t.second / 3600


@dataclasses.dataclass(frozen=True)
class CommitSummary:
    commit_id: str
    timestamp: dt.datetime  # earliest record in the commit
    total_lines: int
    time_of_day: float  # mean fractional hour, [0, 24)
    by_type: Mapping[str, int]  # type -> lines, read-only
    record_count: int = 0
    files: int = 0


@dataclasses.dataclass(frozen=True)
class ProjectFilter:
    query: str = ""
    year: str | None = None


@dataclasses.dataclass(frozen=True)
class CommitWindow:
    cutoff: dt.datetime | None = None
    time_of_day_range: tuple[float, float] | None = None  # inclusive

    def contains(self, s: CommitSummary) -> bool:
        if self.cutoff is not None and s.timestamp > self.cutoff:
            return False
        if self.time_of_day_range is not None:
            lo, hi = self.time_of_day_range
            if not (lo <= s.time_of_day <= hi):
                return False
        return True
