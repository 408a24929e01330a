"""Gateway: YAML configuration loader — reads raw settings for the L4 config builders."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from nutripal.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS

CONFIG_ENV_VAR = 'NUTRIPAL_CONFIG'


class YamlConfigLoader:
    """Reads YAML settings. Lookup order: explicit path, $NUTRIPAL_CONFIG, user config dir."""

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Return the merged YAML data as a raw dict (before Pydantic validation)."""
        path = resolve_config_path(config_path)
        data = _read_mapping(path) if path is not None else {}
        if overrides:
            deep_merge(data, overrides)
        return data


def resolve_config_path(config_path: str | None = None) -> Path | None:
    """Pick the config file to read. An explicitly named file must exist; defaults may be absent."""
    explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser()
        if not path.exists():
            raise FileNotFoundError(f'Config file not found: {path}')
        return path
    return next((p for p in DEFAULT_CONFIG_PATHS if p.exists()), None)


def _read_mapping(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding='utf-8'))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f'{path}: top level must be a mapping, got {type(data).__name__}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
