from __future__ import annotations

import csv
import json
from pathlib import Path

from .analysis_aggregate import type_breakdown
from .models import CommitSummary, CommitWindow


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, indent=2, sort_keys=False), encoding="utf-8")


def summary_to_dict(s: CommitSummary) -> dict[str, object]:
    return {
        "commit": s.commit_id,
        "timestamp": s.timestamp.isoformat(),
        "total_lines": s.total_lines,
        "time_of_day": round(s.time_of_day, 6),
        "records": s.record_count,
        "files": s.files,
        "by_type": dict(s.by_type),
    }


def write_commits_csv(path: Path, summaries: list[CommitSummary]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["commit", "timestamp", "total_lines", "time_of_day", "records", "files", "types"])
        for s in summaries:
            writer.writerow(
                [
                    s.commit_id,
                    s.timestamp.isoformat(),
                    s.total_lines,
                    f"{s.time_of_day:.4f}",
                    s.record_count,
                    s.files,
                    ";".join(f"{k}={v}" for k, v in s.by_type.items()),
                ]
            )


def write_types_csv(path: Path, rows: list[dict[str, object]]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["type", "lines", "pct"])
        for r in rows:
            writer.writerow([r["type"], r["lines"], r["pct"]])


def write_commit_reports(
    *,
    report_dir: Path,
    overview: dict[str, int],
    summaries: list[CommitSummary],
    window: CommitWindow,
) -> list[Path]:
    ensure_dir(report_dir)
    types = type_breakdown(summaries)

    commits_json = report_dir / "commits.json"
    commits_csv = report_dir / "commits.csv"
    types_csv = report_dir / "types.csv"
    summary_json = report_dir / "summary.json"

    write_json(commits_json, [summary_to_dict(s) for s in summaries])
    write_commits_csv(commits_csv, summaries)
    write_types_csv(types_csv, types)
    write_json(
        summary_json,
        {
            "overview": overview,
            "window": {
                "cutoff": window.cutoff.isoformat() if window.cutoff is not None else None,
                "time_of_day_range": list(window.time_of_day_range) if window.time_of_day_range is not None else None,
            },
            "commits_selected": len(summaries),
            "lines_selected": sum(s.total_lines for s in summaries),
            "types": types,
        },
    )
    return [commits_json, commits_csv, types_csv, summary_json]
