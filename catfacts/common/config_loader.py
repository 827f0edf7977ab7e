"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from catfacts.common.constants import KEY_POLICIES
from catfacts.common.errors import ConfigError
from catfacts.common.fs import read_yaml
from catfacts.common.schema import validate_collector_config


@dataclass(frozen=True)
class CollectorConfig:
    endpoint_url: str
    iteration_count: int
    inter_request_delay: float
    output_directory: Path
    key_policy: str = KEY_POLICIES[0]


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config_yaml(path: Path):
    try:
        return read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = _read_config_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_config_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def build_collector_config(raw: dict) -> CollectorConfig:
    cfg = validate_collector_config(raw)
    return CollectorConfig(
        endpoint_url=cfg["endpoint_url"].strip(),
        iteration_count=cfg["iteration_count"],
        inter_request_delay=float(cfg["inter_request_delay"]),
        output_directory=Path(cfg["output_directory"]),
        key_policy=cfg.get("key_policy", KEY_POLICIES[0]),
    )


def load_collector_config(
    config_path: Path,
    *,
    overlay_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CollectorConfig:
    """Load the YAML config, merge the overlay file, then apply explicit overrides.

    Overrides whose value is ``None`` are ignored so unset command-line flags
    leave the file values alone.
    """
    raw = _load_yaml_with_overlay(config_path, overlay_path)
    if overrides:
        raw = _deep_merge(raw, {k: v for k, v in overrides.items() if v is not None})
    return build_collector_config(raw)
