from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

DEFAULT_INSTALLERS = ("Victor", "Mikel", "Natan", "Nacor", "Maite", "Jonan", "Fiti", "Tenka", "Eneko")


@dataclass(frozen=True)
class PlanningConfig:
    hours_per_day: float = 8.0
    overflow_tolerance: float = 0.1
    min_split_hours: float = 0.5
    installers: tuple[str, ...] = field(default=DEFAULT_INSTALLERS)


def _config_path() -> Path:
    env_path = os.getenv("INSTALLPLAN_CONFIG")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return CONFIG_DIR / "planning.yaml"


def load_planning_config(path: Path | None = None) -> PlanningConfig:
    """Read the planning YAML, falling back to built-in defaults."""

    path = path or _config_path()
    if not path.exists():
        return PlanningConfig()
    with path.open("r", encoding="utf-8") as fp:
        raw = yaml.safe_load(fp) or {}

    defaults = PlanningConfig()
    installers = raw.get("installers") or defaults.installers
    return PlanningConfig(
        hours_per_day=float(raw.get("hours_per_day", defaults.hours_per_day)),
        overflow_tolerance=float(raw.get("overflow_tolerance", defaults.overflow_tolerance)),
        min_split_hours=float(raw.get("min_split_hours", defaults.min_split_hours)),
        installers=tuple(str(name).strip() for name in installers if str(name).strip()),
    )


PLANNING_CONFIG = load_planning_config()
