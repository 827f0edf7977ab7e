"""Write-once JSON file store, one file per record."""

from __future__ import annotations

import re
from pathlib import Path

from catfacts.collect.decoder import decode
from catfacts.common.constants import ENTRY_SUFFIX, INDEX_KEY_TEMPLATE, KEY_POLICIES
from catfacts.common.errors import ConfigError, PersistenceError
from catfacts.common.fs import dump_json, ensure_dir, read_text, write_text_exclusive
from catfacts.common.models import PersistedEntry, Record

SAFE_KEY = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9._-]*$")


def derive_key(policy: str, index: int, record: Record) -> str:
    """Key for the ``index``-th (1-based) record of a run under ``policy``."""
    if policy == "index":
        return INDEX_KEY_TEMPLATE.format(index=index)
    if policy == "id":
        return record.id
    raise ConfigError(f"Unknown key policy: {policy!r} (expected one of {', '.join(KEY_POLICIES)})")


def serialize(record: Record) -> str:
    return dump_json(record.to_dict())


class RecordStore:
    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        if not SAFE_KEY.match(key):
            raise PersistenceError(f"Invalid store key: {key!r}", key=key)
        return self.root / f"{key}{ENTRY_SUFFIX}"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def keys(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.stem for p in self.root.glob(f"*{ENTRY_SUFFIX}") if p.is_file())

    def persist(self, record: Record, key: str) -> PersistedEntry:
        path = self.path_for(key)
        body = serialize(record)
        try:
            body.encode("utf-8")
        except UnicodeError as exc:
            raise PersistenceError(f"Entry with key {key!r} is not encodable as UTF-8: {exc}", key=key) from exc
        try:
            ensure_dir(self.root)
        except OSError as exc:
            raise PersistenceError(f"Cannot create store directory {self.root}: {exc}", key=key) from exc
        try:
            write_text_exclusive(path, body)
        except FileExistsError as exc:
            raise PersistenceError(
                f"Refusing to overwrite existing entry with key {key!r}",
                key=key,
                conflict=True,
            ) from exc
        except OSError as exc:
            raise PersistenceError(f"Cannot write entry with key {key!r}: {exc}", key=key) from exc
        return PersistedEntry(key=key, path=path, body=body)

    def load(self, key: str) -> Record:
        path = self.path_for(key)
        try:
            body = read_text(path)
        except OSError as exc:
            raise PersistenceError(f"Cannot read entry with key {key!r}: {exc}", key=key) from exc
        return decode(body)
