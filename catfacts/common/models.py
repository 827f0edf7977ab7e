"""Data models used across the collector."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Status:
    verified: bool
    sent_count: int


@dataclass(frozen=True)
class Record:
    """One collected fact, with attribute names normalised from the API spelling."""

    used: bool
    source: str
    animal_type: str
    deleted: bool
    id: str
    version: int
    text: str
    updated_at: str
    created_at: str
    status: Status
    user: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FetchResult:
    """A successful (2xx) response. Failures are raised, never returned."""

    status: int
    body: str
    url: str


@dataclass(frozen=True)
class PersistedEntry:
    key: str
    path: Path
    body: str
