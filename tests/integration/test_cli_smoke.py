from __future__ import annotations

import json
from pathlib import Path

import pytest

from catfacts import cli
from catfacts.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS
from catfacts.common.http import classify_response


def _fake_client_factory(responses: list[tuple[int, str]]):
    class FakeHttpClient:
        def __init__(self, **_kwargs):
            self.responses = list(responses)

        def __enter__(self):
            return self

        def __exit__(self, *_exc):
            return None

        def fetch(self, endpoint: str):
            status, body = self.responses.pop(0)
            return classify_response(status, body, endpoint)

    return FakeHttpClient


def _write_config(tmp_path: Path, data_dir: Path) -> Path:
    path = tmp_path / "collector.yml"
    path.write_text(
        f"""endpoint_url: "https://example.test/facts/random"
iteration_count: 3
inter_request_delay: 0
output_directory: "{data_dir.as_posix()}"
""",
        encoding="utf-8",
    )
    return path


@pytest.mark.integration
def test_cli_collects_entries_and_writes_summary(monkeypatch, tmp_path: Path, fact_body):
    data_dir = tmp_path / "data"
    monkeypatch.setattr(cli, "HttpClient", _fake_client_factory([(200, fact_body)] * 3))
    args = cli.parse_args(["--config", str(_write_config(tmp_path, data_dir)), "--run-id", "run-smoke"])

    exit_code = cli.run_command(args)

    assert exit_code == EXIT_SUCCESS
    assert sorted(p.name for p in data_dir.glob("*.json")) == [
        "record-0001.json",
        "record-0002.json",
        "record-0003.json",
    ]
    summary = json.loads((data_dir / "run_meta" / "run-smoke.summary.json").read_text(encoding="utf-8"))
    assert summary["status"] == "done"
    assert summary["iterations_completed"] == 3
    assert summary["error"] is None
    assert (data_dir / "run_meta" / "run-smoke.log.jsonl").exists()


@pytest.mark.integration
def test_cli_404_exits_non_zero_with_no_entries(monkeypatch, tmp_path: Path):
    data_dir = tmp_path / "data"
    monkeypatch.setattr(cli, "HttpClient", _fake_client_factory([(404, "<html>Not Found</html>")]))
    args = cli.parse_args(["--config", str(_write_config(tmp_path, data_dir)), "--run-id", "run-404"])

    exit_code = cli.run_command(args)

    assert exit_code == EXIT_HARD_FAIL
    assert list(data_dir.glob("*.json")) == []
    summary = json.loads((data_dir / "run_meta" / "run-404.summary.json").read_text(encoding="utf-8"))
    assert summary["status"] == "aborted"
    assert summary["final_state"] == "aborted"
    assert summary["error"]["error_code"] == "CLIENT_ERROR"
    assert "404" in summary["error"]["message"]


@pytest.mark.integration
def test_cli_overrides_iteration_count(monkeypatch, tmp_path: Path, fact_body):
    data_dir = tmp_path / "data"
    monkeypatch.setattr(cli, "HttpClient", _fake_client_factory([(200, fact_body)]))
    args = cli.parse_args(
        [
            "--config",
            str(_write_config(tmp_path, data_dir)),
            "--iterations",
            "1",
            "--key-policy",
            "id",
            "--run-id",
            "run-override",
        ]
    )

    assert cli.run_command(args) == EXIT_SUCCESS
    assert [p.name for p in data_dir.glob("*.json")] == ["591f98803b90f7150a19c151.json"]


@pytest.mark.integration
def test_cli_invalid_config_exits_non_zero(tmp_path: Path):
    args = cli.parse_args(["--config", str(tmp_path / "missing.yml"), "--run-id", "run-bad-config"])

    assert cli.run_command(args) == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_unexpected_failure_is_summarised(monkeypatch, tmp_path: Path):
    class BrokenHttpClient:
        def __enter__(self):
            return self

        def __exit__(self, *_exc):
            return None

        def fetch(self, endpoint: str):
            raise LookupError(f"no handler for {endpoint}")

    data_dir = tmp_path / "data"
    monkeypatch.setattr(cli, "HttpClient", BrokenHttpClient)
    args = cli.parse_args(["--config", str(_write_config(tmp_path, data_dir)), "--run-id", "run-unexpected"])

    assert cli.run_command(args) == EXIT_HARD_FAIL
    summary = json.loads((data_dir / "run_meta" / "run-unexpected.summary.json").read_text(encoding="utf-8"))
    assert summary["final_state"] == "aborted"
    assert summary["error"]["error_code"] == "UNEXPECTED_ERROR"
    assert "no handler" in summary["error"]["message"]


@pytest.mark.integration
def test_cli_malformed_config_exits_non_zero(tmp_path: Path):
    config = tmp_path / "collector.yml"
    config.write_text("endpoint_url: [unclosed\n", encoding="utf-8")
    args = cli.parse_args(["--config", str(config), "--run-id", "run-bad-yaml"])

    assert cli.run_command(args) == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_rejects_unsafe_run_id(tmp_path: Path):
    data_dir = tmp_path / "data"
    args = cli.parse_args(["--config", str(_write_config(tmp_path, data_dir)), "--run-id", "../outside"])

    assert cli.run_command(args) == EXIT_HARD_FAIL
    assert not (tmp_path / "outside.log.jsonl").exists()
    assert not data_dir.exists()
