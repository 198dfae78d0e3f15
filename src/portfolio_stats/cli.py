from __future__ import annotations

import sys

from . import analysis_cli, validate_reports


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        p = analysis_cli._build_parser()
        p.prog = "portfolio-stats"
        p.print_help()
        print("")
        print("commands:")
        print("  commits    Summarize commits from loc.csv (default).")
        print("  projects   Filter projects and count them by year.")
        print("  validate   Sanity-check a report folder.")
        print("")
        print("Run `portfolio-stats <command> --help` for command-specific options.")
        return 0
    if argv[0] == "commits":
        return analysis_cli.main(argv[1:])
    if argv[0] == "projects":
        return analysis_cli.projects_main(argv[1:])
    if argv[0] == "validate":
        return validate_reports.main(argv[1:])
    return analysis_cli.main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
