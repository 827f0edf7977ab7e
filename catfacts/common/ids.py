"""Run identifier helpers."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from catfacts.common.errors import ConfigError

# Run ids name files under run_meta/, so they share the store's key alphabet.
RUN_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9._-]*$")


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


def resolve_run_id(requested: str | None) -> str:
    """Return ``requested`` if it is a safe file stem, or a fresh id when unset."""
    if requested is None:
        return generate_run_id()
    if not RUN_ID_PATTERN.match(requested):
        raise ConfigError(f"Invalid run id {requested!r}: use letters, digits, '.', '_' or '-'")
    return requested
