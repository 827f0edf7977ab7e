"""Fail-fast fetch -> decode -> persist loop, modelled as an explicit state machine."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from catfacts.collect.decoder import decode
from catfacts.collect.store import RecordStore, derive_key
from catfacts.common.config_loader import CollectorConfig
from catfacts.common.errors import HttpStatusError, error_code_for
from catfacts.common.http import HttpClient
from catfacts.common.logging import log_event
from catfacts.common.models import PersistedEntry, Record
from catfacts.common.time_utils import elapsed_ms


class LoopState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    DECODING = "decoding"
    PERSISTING = "persisting"
    SLEEPING = "sleeping"
    DONE = "done"
    ABORTED = "aborted"


TRANSITIONS: dict[LoopState, frozenset[LoopState]] = {
    LoopState.IDLE: frozenset({LoopState.FETCHING}),
    LoopState.FETCHING: frozenset({LoopState.DECODING, LoopState.ABORTED}),
    LoopState.DECODING: frozenset({LoopState.PERSISTING, LoopState.ABORTED}),
    LoopState.PERSISTING: frozenset({LoopState.SLEEPING, LoopState.ABORTED}),
    LoopState.SLEEPING: frozenset({LoopState.FETCHING, LoopState.DONE, LoopState.ABORTED}),
    LoopState.DONE: frozenset(),
    LoopState.ABORTED: frozenset(),
}


@dataclass(frozen=True)
class RunResult:
    state: LoopState
    entries: tuple[PersistedEntry, ...]

    @property
    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]


class CollectionLoop:
    """Drive ``iteration_count`` iterations of fetch, decode and persist.

    The first failure moves the loop to ``ABORTED`` and is re-raised unchanged;
    entries persisted before the failure stay on disk. The delay is a blocking
    pause between iterations and is skipped after the last one.
    """

    def __init__(
        self,
        config: CollectorConfig,
        fetcher: HttpClient,
        store: RecordStore,
        *,
        decoder: Callable[[str], Record] = decode,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
        run_id: str | None = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.store = store
        self.decoder = decoder
        self.sleep = sleep
        self.logger = logger or logging.getLogger("catfacts.collect")
        self.run_id = run_id
        self.state = LoopState.IDLE
        self.history: list[LoopState] = [LoopState.IDLE]
        self.entries: list[PersistedEntry] = []
        self.iteration = 0
        self.error: Exception | None = None

    def _transition(self, target: LoopState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal loop transition {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)
        log_event(
            self.logger,
            f"state {target.value}",
            level=logging.DEBUG,
            run_id=self.run_id,
            state=target.value,
            iteration=self.iteration,
            event="STATE_CHANGE",
        )

    def _run_iteration(self, index: int) -> None:
        started = time.monotonic()
        self.iteration = index
        self._transition(LoopState.FETCHING)
        result = self.fetcher.fetch(self.config.endpoint_url)

        self._transition(LoopState.DECODING)
        record = self.decoder(result.body)

        self._transition(LoopState.PERSISTING)
        key = derive_key(self.config.key_policy, index, record)
        entry = self.store.persist(record, key)
        self.entries.append(entry)
        log_event(
            self.logger,
            f"written one entry with key {key}",
            run_id=self.run_id,
            state=self.state.value,
            iteration=index,
            key=key,
            event="ENTRY_WRITTEN",
            status="ok",
            http_status=result.status,
            duration_ms=elapsed_ms(started),
        )

        self._transition(LoopState.SLEEPING)
        if index < self.config.iteration_count:
            self.sleep(self.config.inter_request_delay)

    def run(self) -> RunResult:
        if self.state is not LoopState.IDLE:
            raise RuntimeError(f"Collection loop already ran (state {self.state.value})")

        started = time.monotonic()
        log_event(
            self.logger,
            f"collecting {self.config.iteration_count} records from {self.config.endpoint_url}",
            run_id=self.run_id,
            state=self.state.value,
            event="RUN_START",
            status="ok",
        )
        try:
            for index in range(1, self.config.iteration_count + 1):
                self._run_iteration(index)
        except Exception as exc:
            failed_in = self.state
            self.error = exc
            self._transition(LoopState.ABORTED)
            log_event(
                self.logger,
                f"run aborted while {failed_in.value} in iteration {self.iteration}: {exc}",
                level=logging.ERROR,
                run_id=self.run_id,
                state=self.state.value,
                iteration=self.iteration,
                event="RUN_ABORTED",
                status="error",
                http_status=exc.status if isinstance(exc, HttpStatusError) else None,
                duration_ms=elapsed_ms(started),
                error_code=error_code_for(exc),
            )
            raise

        self._transition(LoopState.DONE)
        log_event(
            self.logger,
            f"run done, {len(self.entries)} entries written",
            run_id=self.run_id,
            state=self.state.value,
            iteration=self.iteration,
            event="RUN_DONE",
            status="ok",
            duration_ms=elapsed_ms(started),
        )
        return RunResult(state=self.state, entries=tuple(self.entries))
