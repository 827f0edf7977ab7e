"""Run summary written next to the run log."""

from __future__ import annotations

from pathlib import Path

from catfacts.collect.loop import CollectionLoop, LoopState
from catfacts.common.constants import RUN_META_DIRNAME
from catfacts.common.errors import error_code_for
from catfacts.common.fs import write_json


def write_run_summary(output_dir: Path, run_id: str, loop: CollectionLoop) -> Path:
    error = None
    if loop.error is not None:
        error = {
            "error_code": error_code_for(loop.error),
            "message": str(loop.error),
        }

    status = "done" if loop.state is LoopState.DONE else "aborted"
    summary_path = output_dir / RUN_META_DIRNAME / f"{run_id}.summary.json"
    payload = {
        "run_id": run_id,
        "status": status,
        "final_state": loop.state.value,
        "endpoint_url": loop.config.endpoint_url,
        "iterations_requested": loop.config.iteration_count,
        "iterations_completed": len(loop.entries),
        "key_policy": loop.config.key_policy,
        "keys": [entry.key for entry in loop.entries],
        "error": error,
    }
    write_json(summary_path, payload)
    return summary_path
