"""CLI entrypoint for the cat fact sample collector."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from catfacts.collect.loop import CollectionLoop
from catfacts.collect.reports import write_run_summary
from catfacts.collect.store import RecordStore
from catfacts.common.config_loader import load_collector_config
from catfacts.common.constants import DEFAULT_CONFIG_PATH, EXIT_HARD_FAIL, EXIT_SUCCESS, KEY_POLICIES
from catfacts.common.errors import CollectorError, ConfigError
from catfacts.common.http import HttpClient
from catfacts.common.ids import generate_run_id, resolve_run_id
from catfacts.common.logging import build_logger, close_logger, log_event


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--endpoint", default=None, help="overrides endpoint_url")
    parser.add_argument("--iterations", type=int, default=None, help="overrides iteration_count")
    parser.add_argument("--delay", type=float, default=None, help="overrides inter_request_delay (seconds)")
    parser.add_argument("--output-dir", default=None, help="overrides output_directory")
    parser.add_argument("--key-policy", default=None, choices=list(KEY_POLICIES))
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> dict:
    return {
        "endpoint_url": args.endpoint,
        "iteration_count": args.iterations,
        "inter_request_delay": args.delay,
        "output_directory": args.output_dir,
        "key_policy": args.key_policy,
    }


def run_command(args: argparse.Namespace) -> int:
    run_id = None
    try:
        run_id = resolve_run_id(args.run_id)
        config = load_collector_config(
            Path(args.config),
            overlay_path=Path(args.overlay_config) if args.overlay_config else None,
            overrides=_overrides(args),
        )
    except ConfigError as exc:
        run_id = run_id or generate_run_id()
        logger = build_logger(run_id, level=args.log_level)
        log_event(
            logger,
            f"invalid configuration: {exc}",
            level=logging.ERROR,
            run_id=run_id,
            event="RUN_ABORTED",
            status="error",
            error_code=exc.error_code,
        )
        close_logger(logger)
        return EXIT_HARD_FAIL

    logger = build_logger(run_id, output_dir=config.output_directory, level=args.log_level)
    store = RecordStore(config.output_directory)
    try:
        with HttpClient() as client:
            loop = CollectionLoop(config, client, store, logger=logger, run_id=run_id)
            try:
                loop.run()
            except CollectorError:
                return EXIT_HARD_FAIL
            except Exception:
                return EXIT_HARD_FAIL
            finally:
                write_run_summary(config.output_directory, run_id, loop)
        return EXIT_SUCCESS
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
