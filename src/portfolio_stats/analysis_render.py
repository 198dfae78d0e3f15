from __future__ import annotations

from .analysis_aggregate import type_breakdown
from .analysis_periods import fmt_time_of_day
from .models import CommitSummary, CommitWindow

COMMITS_BANNER = r"""
+------------------------------------------------------------------------+
|                             COMMIT HISTORY                             |
+------------------------------------------------------------------------+
""".strip("\n")


def fmt_int(n: int) -> str:
    return f"{int(n):,}"


def trunc(s: str, max_len: int) -> str:
    if len(s) <= max_len:
        return s
    if max_len <= 1:
        return s[:max_len]
    return s[: max_len - 1] + "…"


def bar(value: int, max_value: int, width: int = 22) -> str:
    if max_value <= 0:
        filled = 0
    else:
        filled = int(round((value / max_value) * width))
    filled = max(0, min(width, filled))
    return "[" + ("#" * filled) + ("-" * (width - filled)) + "]"


def _window_label(window: CommitWindow) -> str:
    parts: list[str] = []
    if window.cutoff is not None:
        parts.append(f"up to {window.cutoff.isoformat(sep=' ')}")
    if window.time_of_day_range is not None:
        lo, hi = window.time_of_day_range
        parts.append(f"between {fmt_time_of_day(lo)} and {fmt_time_of_day(hi)}")
    return ", ".join(parts) if parts else "all commits"


def render_commit_report(
    *,
    overview: dict[str, int],
    summaries: list[CommitSummary],
    window: CommitWindow,
    top_n: int = 10,
) -> str:
    lines: list[str] = [COMMITS_BANNER, ""]
    lines.append("Summary")
    lines.append(f"  Files:     {fmt_int(overview.get('files', 0))}")
    lines.append(f"  Languages: {fmt_int(overview.get('types', 0))}")
    lines.append(f"  Commits:   {fmt_int(overview.get('commits', 0))}")
    lines.append(f"  Lines:     {fmt_int(overview.get('lines_changed', 0))}")
    lines.append("")
    lines.append(f"Window: {_window_label(window)}")

    if not summaries:
        lines.append("  (no commits)")
        return "\n".join(lines) + "\n"

    total = sum(s.total_lines for s in summaries)
    lines.append(f"  {fmt_int(len(summaries))} commits selected, {fmt_int(total)} lines")
    lines.append("")

    rows = type_breakdown(summaries)
    max_lines = max((int(r["lines"]) for r in rows), default=0)
    lines.append("By type")
    for r in rows:
        label = trunc(str(r["type"]), 14)
        lines.append(f"  {label:<14} {bar(int(r['lines']), max_lines)} {fmt_int(int(r['lines'])):>9}  ({r['pct']:.1f}%)")
    lines.append("")

    latest = sorted(summaries, key=lambda s: s.timestamp, reverse=True)[: max(0, top_n)]
    if latest:
        lines.append("Latest commits")
        for s in latest:
            lines.append(
                f"  {trunc(s.commit_id, 12):<12} {s.timestamp:%Y-%m-%d} {fmt_time_of_day(s.time_of_day)}"
                f"  {fmt_int(s.total_lines):>7} lines  {s.files} files"
            )
    return "\n".join(lines) + "\n"


def render_projects_report(*, projects: list[dict], pie: list[dict[str, object]]) -> str:
    lines: list[str] = [f"{len(projects)} projects"]
    for p in projects:
        title = str(p.get("title", "") or "(untitled)")
        year = str(p.get("year", "") or "")
        lines.append(f"  - {trunc(title, 60)}" + (f" ({year})" if year else ""))
    if pie:
        lines.append("")
        lines.append("Legend")
        for d in pie:
            lines.append(f"  {d['label']} ({d['value']})")
    return "\n".join(lines) + "\n"
