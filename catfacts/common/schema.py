"""Minimal strict schema for the collector YAML config."""

from __future__ import annotations

from catfacts.common.constants import KEY_POLICIES
from catfacts.common.errors import ConfigError

REQUIRED_KEYS = {
    "endpoint_url",
    "iteration_count",
    "inter_request_delay",
    "output_directory",
}
OPTIONAL_KEYS = {"key_policy"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_collector_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigError("collector config must be a mapping")
    _assert_required_keys(cfg, REQUIRED_KEYS, "collector config")
    _assert_no_unknown_keys(cfg, REQUIRED_KEYS | OPTIONAL_KEYS, "collector config", allow_unknown)

    endpoint = cfg["endpoint_url"]
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ConfigError("endpoint_url must be a non-empty string")

    count = cfg["iteration_count"]
    if not _is_int(count) or count < 1:
        raise ConfigError(f"iteration_count must be a positive integer, got {count!r}")

    delay = cfg["inter_request_delay"]
    if not (_is_int(delay) or isinstance(delay, float)) or delay < 0:
        raise ConfigError(f"inter_request_delay must be a non-negative number of seconds, got {delay!r}")

    output = cfg["output_directory"]
    if not isinstance(output, str) or not output.strip():
        raise ConfigError("output_directory must be a non-empty string")

    policy = cfg.get("key_policy", KEY_POLICIES[0])
    if policy not in KEY_POLICIES:
        raise ConfigError(f"key_policy must be one of {', '.join(KEY_POLICIES)}, got {policy!r}")

    return cfg
