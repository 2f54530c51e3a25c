"""YAML config loader with environment token injection and runtime get/set."""

import hashlib
import json
import os
from pathlib import Path
from typing import Any

import yaml

from spirograph.config.schema import SpirographConfig

TOKEN_ENV_VAR = "NOAA_CDO_TOKEN"


def load_config(path: str | Path) -> SpirographConfig:
    """Load and validate config from a YAML file.

    A missing file or an empty document yields the defaults. If the station
    token is not set in YAML, it is read from NOAA_CDO_TOKEN.
    """
    path = Path(path)
    raw: dict[str, Any] = {}
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    station = raw.setdefault("station", {}) or {}
    raw["station"] = station
    if not station.get("token"):
        env_token = os.environ.get(TOKEN_ENV_VAR, "")
        if env_token:
            station["token"] = env_token

    return SpirographConfig(**raw)


def config_hash(config: SpirographConfig) -> str:
    """Compute a deterministic SHA256 hash of the config, excluding the token."""
    data = config.model_dump(mode="json")
    data["station"].pop("token", None)
    encoded = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode()).hexdigest()[:16]


def get_config_value(config: SpirographConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'geometry.rolling_radius.min'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: SpirographConfig, dotted_key: str, value: Any) -> SpirographConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new SpirographConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        if part not in target:
            raise KeyError(f"Config key not found: {dotted_key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    # Attempt type coercion for common cases
    old_value = target.get(parts[-1])
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    elif isinstance(old_value, list) and isinstance(value, str):
        value = [int(v) for v in value.split(",") if v.strip()]
    target[parts[-1]] = value
    return SpirographConfig(**data)
