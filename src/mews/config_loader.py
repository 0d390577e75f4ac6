"""Load MewsConfig from a project's config.json.

Merges file config with keyword overrides.  Overrides take precedence.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mews._errors import ConfigError
from mews.config import MewsConfig

CONFIG_FILE = "config.json"

# config.json key -> MewsConfig field
_FIELD_MAP = {
    "src": "entry",
    "out": "output",
}


def load_config(root: Path, **overrides: object) -> MewsConfig:
    """Load MewsConfig from root, merging ``config.json`` when present.

    The whole JSON object is kept as ``settings`` so build scripts can read
    project-specific keys.  ``src`` and ``out`` additionally drive the entry
    file and output directory.  ``None`` overrides are ignored so CLI
    defaults never clobber file values.

    Raises:
        ConfigError: If root is not a directory or config.json is malformed.

    """
    if not root.is_dir():
        msg = f"project directory required, got {str(root)!r}"
        raise ConfigError(msg)

    settings = _read_config_json(root / CONFIG_FILE)
    merged: dict[str, Any] = {}
    for key, field_name in _FIELD_MAP.items():
        if settings.get(key):
            merged[field_name] = settings[key]
    merged.update({k: v for k, v in overrides.items() if v is not None})

    # Normalize output to Path
    if "output" in merged and not isinstance(merged["output"], Path):
        merged["output"] = Path(str(merged["output"]))
    return MewsConfig(root=root, settings=settings, **merged)


def _read_config_json(path: Path) -> dict[str, Any]:
    """Parse config.json.  Returns an empty dict when the file is absent."""
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a JSON object, got {type(data).__name__}"
        raise ConfigError(msg)
    return data
