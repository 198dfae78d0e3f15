from __future__ import annotations

import csv
import datetime as dt
import json
import sys
from pathlib import Path

from .models import FALLBACK_TYPE, ChangeRecord

REQUIRED_COLUMNS = ("file", "type", "commit", "date", "time", "length")


class ParseError(ValueError):
    pass


def _parse_clock(value: str) -> dt.time:
    parts = value.split(":")
    if len(parts) not in (2, 3) or not all(p.strip().isdigit() for p in parts):
        raise ValueError(f"invalid time {value!r} (expected HH:MM or HH:MM:SS)")
    h, m = int(parts[0]), int(parts[1])
    s = int(parts[2]) if len(parts) == 3 else 0
    return dt.time(h, m, s)


def parse_record_timestamp(date_value: str, time_value: str) -> dt.datetime:
    d = (date_value or "").strip()
    t = (time_value or "").strip()
    if not d:
        raise ValueError("missing date")
    if "T" in d or " " in d:
        # Full datetime in the date column; wall-clock time is kept, offset dropped.
        stamp = dt.datetime.fromisoformat(d).replace(tzinfo=None)
        if t:
            return dt.datetime.combine(stamp.date(), _parse_clock(t))
        return stamp
    day = dt.date.fromisoformat(d)
    if not t:
        raise ValueError("missing time")
    return dt.datetime.combine(day, _parse_clock(t))


def parse_change_row(row: dict[str, str], *, line_no: int = 0, fallback_type: str = FALLBACK_TYPE) -> ChangeRecord:
    where = f"row {line_no}" if line_no else "row"
    commit_id = str(row.get("commit", "") or "").strip()
    if not commit_id:
        raise ParseError(f"{where}: missing commit id")

    try:
        timestamp = parse_record_timestamp(str(row.get("date", "") or ""), str(row.get("time", "") or ""))
    except ValueError as e:
        raise ParseError(f"{where}: bad timestamp: {e}") from e

    raw_len = str(row.get("length", "") or "").strip()
    try:
        lines = int(raw_len)
    except ValueError as e:
        raise ParseError(f"{where}: length is not an integer: {raw_len!r}") from e
    if lines < 0:
        raise ParseError(f"{where}: negative length: {lines}")

    return ChangeRecord(
        file=str(row.get("file", "") or "").strip(),
        type=str(row.get("type", "") or "").strip() or fallback_type,
        commit_id=commit_id,
        timestamp=timestamp,
        lines_changed=lines,
    )


def read_loc_csv(path: Path, *, fallback_type: str = FALLBACK_TYPE) -> list[ChangeRecord]:
    with path.open("r", newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        header = [h.strip() for h in (reader.fieldnames or [])]
        missing = [c for c in REQUIRED_COLUMNS if c not in header]
        if missing:
            raise ParseError(f"{path}: missing columns: {', '.join(missing)}")
        reader.fieldnames = header
        # Header is line 1.
        return [parse_change_row(row, line_no=i, fallback_type=fallback_type) for i, row in enumerate(reader, start=2)]


def read_projects_json(path: Path) -> list[dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ParseError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise ParseError(f"{path}: expected a JSON list of projects")
    projects = [p for p in data if isinstance(p, dict)]
    skipped = len(data) - len(projects)
    if skipped:
        print(f"Warning: skipped {skipped} non-object entries in {path}", file=sys.stderr)
    return projects
