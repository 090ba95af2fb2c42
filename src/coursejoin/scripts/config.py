# File: coursejoin/scripts/config.py
import copy
from pathlib import Path

import yaml

from coursejoin.scripts.errors import InputMissingError, MalformedInputError

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "config" / "datasets.yml"

DEFAULTS = {
    "datasets": {
        "races": {"label": "Races", "path": "data/races.csv", "required": ["course"]},
        "coords": {
            "label": "Racecourse coordinates",
            "path": "data/racecourseCoords.csv",
            "required": ["name", "x", "y"],
        },
    },
    "join": {"key": "course", "on": "name", "fields": {"x": "course_x", "y": "course_y"}},
    "format": {"delimiter": ","},
}


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_settings(path=None) -> dict:
    """Read the YAML config, filling anything it leaves out from DEFAULTS."""
    config_path = Path(path) if path else DEFAULT_CONFIG
    if not config_path.is_file():
        raise InputMissingError(config_path, "Config")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            conf = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise MalformedInputError(config_path, f"invalid YAML ({exc})") from exc
    if not isinstance(conf, dict):
        raise MalformedInputError(config_path, "expected a mapping at the top level")

    settings = _merge(copy.deepcopy(DEFAULTS), conf)
    if not isinstance(settings["join"].get("fields"), dict) or not settings["join"]["fields"]:
        raise MalformedInputError(config_path, "join.fields must map source columns to output columns")
    return settings
