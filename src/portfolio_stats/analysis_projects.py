from __future__ import annotations

import dataclasses

from .analysis_aggregate import count, rollup_by_key
from .models import ProjectFilter


def project_matches(project: dict, flt: ProjectFilter) -> bool:
    if flt.query:
        haystack = "\n".join(str(v) for v in project.values()).lower()
        if flt.query.lower() not in haystack:
            return False
    if flt.year is not None and str(project.get("year", "")) != str(flt.year):
        return False
    return True


def filter_projects(projects: list[dict], flt: ProjectFilter) -> list[dict]:
    return [p for p in projects if project_matches(p, flt)]


def toggle_year(flt: ProjectFilter, label: str) -> ProjectFilter:
    year = None if flt.year == str(label) else str(label)
    return dataclasses.replace(flt, year=year)


def pie_data(projects: list[dict]) -> list[dict[str, object]]:
    counts = rollup_by_key(projects, lambda p: str(p.get("year", "")), count)
    total = sum(counts.values())
    return [
        {"label": label, "value": n, "pct": round(n / total * 100, 1) if total else 0.0}
        for label, n in counts.items()
    ]
