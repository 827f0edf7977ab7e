"""Filesystem helpers."""

from __future__ import annotations

import json
from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def dump_json(payload) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        f.write(dump_json(payload))


def write_text_exclusive(path: Path, text: str) -> None:
    """Create ``path`` and write ``text`` to it; raises FileExistsError if it exists."""
    ensure_dir(path.parent)
    with path.open("x", encoding="utf-8") as f:
        try:
            f.write(text)
        except BaseException:
            f.close()
            path.unlink(missing_ok=True)
            raise


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")
