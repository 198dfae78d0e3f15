#!/usr/bin/env python3
from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path


def load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def sum_csv_column(path: Path, column: str) -> tuple[int, int]:
    rows = 0
    total = 0
    with path.open("r", newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            rows += 1
            total += int(row.get(column, 0) or 0)
    return rows, total


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(description="Sanity-check portfolio-stats report outputs.")
    ap.add_argument("--reports", type=Path, default=Path("reports"), help="Reports directory.")
    args = ap.parse_args(argv)

    reports = args.reports
    if not reports.exists():
        raise SystemExit(f"Reports dir not found: {reports}")
    summary_path = reports / "summary.json"
    if not summary_path.exists():
        raise SystemExit(f"No summary.json in: {reports}")

    summary = load_json(summary_path)
    commits = int(summary.get("commits_selected", 0))
    lines = int(summary.get("lines_selected", 0))

    ok = True
    commits_csv = reports / "commits.csv"
    types_csv = reports / "types.csv"
    for p in (commits_csv, types_csv):
        if not p.exists():
            print(f"[WARN] missing {p}")
            ok = False
    if not ok:
        return 1

    n_commits, commit_lines = sum_csv_column(commits_csv, "total_lines")
    _, type_lines = sum_csv_column(types_csv, "lines")

    print(f"- summary commits/lines: {commits}/{lines}")
    print(f"- commits.csv commits/lines: {n_commits}/{commit_lines}")
    print(f"- types.csv lines: {type_lines}")

    if (n_commits, commit_lines) != (commits, lines):
        ok = False
        print(f"  [WARN] commits mismatch: Δcommits={n_commits-commits:+}, Δlines={commit_lines-lines:+}")
    if type_lines != lines:
        ok = False
        print(f"  [WARN] types mismatch: Δlines={type_lines-lines:+}")

    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
