from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analysis_aggregate import aggregate, apply_window, overview
from .analysis_load import ParseError, read_loc_csv, read_projects_json
from .analysis_periods import cutoff_at_progress, parse_time_of_day_range, parse_timestamp, time_extent
from .analysis_projects import filter_projects, pie_data
from .analysis_render import render_commit_report, render_projects_report
from .analysis_write import ensure_dir, write_commit_reports, write_json
from .config import Settings, load_settings
from .models import CommitSummary, CommitWindow, ProjectFilter


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Aggregate per-file change rows into per-commit summaries.")
    parser.add_argument("--csv", type=Path, default=None, help="Path to loc.csv (overrides `loc_csv` in config).")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
    g = parser.add_mutually_exclusive_group()
    g.add_argument("--cutoff", type=str, default="", help="Only commits at or before this ISO date/datetime.")
    g.add_argument("--progress", type=float, default=None, help="Cutoff as a percentage (0..100) of the commit time span.")
    parser.add_argument(
        "--tod-range",
        type=str,
        default="",
        help="Only commits whose mean time of day is within LO,HI (hours or HH:MM, e.g. 9,17:30).",
    )
    parser.add_argument("--out", type=Path, default=None, help="Write JSON/CSV reports to this directory.")
    parser.add_argument("--top", type=int, default=None, help="Latest commits to list (overrides `top_commits`).")
    return parser


def _build_projects_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portfolio-stats projects", description="Filter projects and count them by year.")
    parser.add_argument("--projects", type=Path, default=None, help="Path to projects.json (overrides `projects_json`).")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
    parser.add_argument("--query", type=str, default="", help="Case-insensitive search over all project fields.")
    parser.add_argument("--year", type=str, default=None, help="Only projects from this year.")
    parser.add_argument("--out", type=Path, default=None, help="Write pie.json to this directory.")
    return parser


def _build_window(args: argparse.Namespace, summaries: list[CommitSummary]) -> CommitWindow:
    cutoff = None
    if str(args.cutoff).strip():
        try:
            cutoff = parse_timestamp(args.cutoff)
        except ValueError as e:
            raise SystemExit(f"--cutoff: {e}")
    elif args.progress is not None:
        if not (0 <= args.progress <= 100):
            raise SystemExit(f"--progress: must be within 0..100, got {args.progress!r}")
        extent = time_extent(summaries)
        if extent is not None:
            cutoff = cutoff_at_progress(extent, args.progress)

    tod_range = None
    if str(args.tod_range).strip():
        try:
            tod_range = parse_time_of_day_range(args.tod_range)
        except ValueError as e:
            raise SystemExit(f"--tod-range: {e}")
    return CommitWindow(cutoff=cutoff, time_of_day_range=tod_range)


def run_commits(args: argparse.Namespace, settings: Settings) -> int:
    csv_path = args.csv or settings.loc_csv
    if not csv_path.exists():
        print(f"Error: loc CSV not found: {csv_path}", file=sys.stderr)
        return 2
    try:
        records = read_loc_csv(csv_path, fallback_type=settings.fallback_type)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    if not records:
        print(f"Warning: no rows in {csv_path}", file=sys.stderr)

    summaries = aggregate(records, fallback_type=settings.fallback_type)
    window = _build_window(args, summaries)
    selected = apply_window(summaries, window)
    stats = overview(records, fallback_type=settings.fallback_type)

    top_n = settings.top_commits if args.top is None else max(0, args.top)
    print(render_commit_report(overview=stats, summaries=selected, window=window, top_n=top_n), end="")

    if args.out is not None:
        written = write_commit_reports(report_dir=args.out, overview=stats, summaries=selected, window=window)
        print(f"Done. Reports in: {args.out} ({len(written)} files)")
    return 0


def run_projects(args: argparse.Namespace, settings: Settings) -> int:
    path = args.projects or settings.projects_json
    if not path.exists():
        print(f"Error: projects JSON not found: {path}", file=sys.stderr)
        return 2
    try:
        projects = read_projects_json(path)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    flt = ProjectFilter(query=str(args.query or ""), year=args.year)
    matching = filter_projects(projects, flt)
    pie = pie_data(matching)
    print(render_projects_report(projects=matching, pie=pie), end="")

    if args.out is not None:
        ensure_dir(args.out)
        write_json(args.out / "pie.json", pie)
        print(f"Done. Reports in: {args.out}")
    return 0


def main(argv: list[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return run_commits(args, load_settings(args.config))


def projects_main(argv: list[str]) -> int:
    parser = _build_projects_parser()
    args = parser.parse_args(argv)
    return run_projects(args, load_settings(args.config))
