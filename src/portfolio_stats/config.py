from __future__ import annotations

import dataclasses
import json
from pathlib import Path

from .models import FALLBACK_TYPE


@dataclasses.dataclass(frozen=True)
class Settings:
    loc_csv: Path = Path("meta/loc.csv")
    projects_json: Path = Path("lib/projects.json")
    fallback_type: str = FALLBACK_TYPE
    output_dir: Path = Path("reports")
    top_commits: int = 10


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    return json.loads(config_path.read_text(encoding="utf-8"))


def settings_from_config(config: dict, *, base_dir: Path | None = None) -> Settings:
    """
    Build `Settings` from a loaded config dict. Relative paths are resolved
    against `base_dir` (the config file's directory) when given.
    """
    defaults = Settings()

    def path_value(key: str, default: Path) -> Path:
        raw = str(config.get(key, "") or "").strip()
        p = Path(raw) if raw else default
        if base_dir is not None and raw and not p.is_absolute():
            p = base_dir / p
        return p

    fallback = str(config.get("fallback_type", "") or "").strip() or defaults.fallback_type
    try:
        top = int(config.get("top_commits", defaults.top_commits))
    except (TypeError, ValueError):
        raise SystemExit(f"Invalid top_commits in config: {config.get('top_commits')!r}")

    return Settings(
        loc_csv=path_value("loc_csv", defaults.loc_csv),
        projects_json=path_value("projects_json", defaults.projects_json),
        fallback_type=fallback,
        output_dir=path_value("output_dir", defaults.output_dir),
        top_commits=max(0, top),
    )


def load_settings(config_path: Path) -> Settings:
    config = load_config(config_path)
    return settings_from_config(config, base_dir=config_path.parent if config else None)
