from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import json
import yaml

from plunge.paths import DEFAULT_MAX_PATH_LENGTH


@dataclass(slots=True)
class SyncConfig:
    verbose: bool = False
    dry_run: bool = False
    purge: bool = False
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH
    purge_excludes: list[str] = field(default_factory=list)


def _as_bool(value: Any, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ValueError(f"{field_name} must be a boolean")


def _as_positive_int(value: Any, field_name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{field_name} must be a positive integer")
    return value


def _as_list_of_strings(value: Any, field_name: str, default: list[str] | None = None) -> list[str]:
    if value is None:
        return list(default or [])
    if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
        raise ValueError(f"{field_name} must be a list of strings")
    return [item for item in value if item.strip()]


def _load_raw_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ValueError(f"Config file does not exist: {config_path}")

    suffix = config_path.suffix.lower()
    text = config_path.read_text(encoding="utf-8")
    if suffix in {".yml", ".yaml"}:
        loaded = yaml.safe_load(text)
    elif suffix == ".json":
        loaded = json.loads(text)
    else:
        raise ValueError("Config file must be .yaml/.yml or .json")

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError("Config root must be an object")
    return loaded


def load_config(config_path: Path | None) -> SyncConfig:
    if config_path is None:
        return SyncConfig()

    raw = _load_raw_config(config_path)
    return SyncConfig(
        verbose=_as_bool(raw.get("verbose"), "verbose", default=False),
        dry_run=_as_bool(raw.get("dryRun"), "dryRun", default=False),
        purge=_as_bool(raw.get("purge"), "purge", default=False),
        max_path_length=_as_positive_int(
            raw.get("maxPathLength"), "maxPathLength", default=DEFAULT_MAX_PATH_LENGTH
        ),
        purge_excludes=_as_list_of_strings(raw.get("purgeExcludes"), "purgeExcludes", default=[]),
    )
