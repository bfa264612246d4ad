from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

DEFAULTS_PATH = "game/config/defaults.yaml"


@dataclass
class ConsoleCfg:
    output_indent: str = "  "       # Indent for the 2nd+ arguments of Console.out(), "" for none
    log_level: int = 1              # 0 nothing, 1 errors, 2 + warnings, 3 everything

@dataclass
class ParserCfg:
    trim_whitespaces_behind_markers: bool = True    # Drop spaces between a closing ']' and the text

@dataclass
class PresenterCfg:
    display_disabled_decisions: bool = True         # False hides them instead of greying them out


@dataclass
class EngineCfg:
    console: ConsoleCfg = field(default_factory=ConsoleCfg)
    parser: ParserCfg = field(default_factory=ParserCfg)
    presenter: PresenterCfg = field(default_factory=PresenterCfg)
    scripts: List[str] = field(default_factory=list)


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur

def _as_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(v)

def load_settings_data(path: str = DEFAULTS_PATH) -> Dict[str, Any]:
    """ Raw YAML mapping, {} when the file is missing or empty. """
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: settings must be a mapping")
    return data

def settings_from_data(data: Dict[str, Any]) -> EngineCfg:
    level = int(_get(data, "console.log_level", 1))
    scripts = _get(data, "scripts", []) or []
    if isinstance(scripts, str):
        scripts = [scripts]

    return EngineCfg(
        console=ConsoleCfg(
            output_indent=str(_get(data, "console.output_indent", "  ")),
            log_level=max(0, min(3, level)),
        ),
        parser=ParserCfg(
            trim_whitespaces_behind_markers=_as_bool(_get(data, "parser.trim_whitespaces_behind_markers", True)),
        ),
        presenter=PresenterCfg(
            display_disabled_decisions=_as_bool(_get(data, "presenter.display_disabled_decisions", True)),
        ),
        scripts=[str(s) for s in scripts],
    )

def load_settings(path: str = DEFAULTS_PATH) -> EngineCfg:
    return settings_from_data(load_settings_data(path))
