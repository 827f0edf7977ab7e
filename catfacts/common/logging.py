"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from catfacts.common.constants import JSON_LOG_FIELDS, RUN_META_DIRNAME
from catfacts.common.fs import ensure_dir
from catfacts.common.time_utils import utc_timestamp_iso


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "run_id": getattr(record, "run_id", None),
            "state": getattr(record, "state", None),
            "iteration": getattr(record, "iteration", None),
            "key": getattr(record, "key", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "http_status": getattr(record, "http_status", None),
            "duration_ms": getattr(record, "duration_ms", None),
            "error_code": getattr(record, "error_code", None),
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False)


def build_logger(run_id: str, output_dir: Path | None = None, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(f"catfacts.{run_id}")
    logger.setLevel(level.upper())
    logger.handlers.clear()
    logger.propagate = False

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    if output_dir is not None:
        log_path = output_dir / RUN_META_DIRNAME / f"{run_id}.log.jsonl"
        ensure_dir(log_path.parent)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **event_fields: Any) -> None:
    logger.log(level, message, extra=event_fields)
