import json
from dataclasses import replace
from pathlib import Path

import pytest

from catfacts.collect.decoder import decode
from catfacts.collect.store import RecordStore, derive_key
from catfacts.common.errors import ConfigError, PersistenceError


def test_persist_writes_one_normalised_json_file(tmp_path: Path, fact_body):
    store = RecordStore(tmp_path / "data")
    record = decode(fact_body)

    entry = store.persist(record, "record-0001")

    assert entry.path == tmp_path / "data" / "record-0001.json"
    on_disk = json.loads(entry.path.read_text(encoding="utf-8"))
    assert on_disk["animal_type"] == "cat"
    assert on_disk["status"] == {"verified": True, "sent_count": 1}
    assert "type" not in on_disk
    assert entry.body == entry.path.read_text(encoding="utf-8")
    assert store.keys() == ["record-0001"]


def test_persist_same_key_twice_keeps_first_content(tmp_path: Path, fact_body):
    store = RecordStore(tmp_path)
    first = decode(fact_body)
    second = replace(first, text="A different fact.")

    entry = store.persist(first, "record-0001")
    original = entry.path.read_text(encoding="utf-8")

    with pytest.raises(PersistenceError) as excinfo:
        store.persist(second, "record-0001")

    assert excinfo.value.conflict is True
    assert excinfo.value.key == "record-0001"
    assert "record-0001" in str(excinfo.value)
    assert entry.path.read_text(encoding="utf-8") == original
    assert store.load("record-0001") == first


@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden", "white space"])
def test_persist_rejects_unsafe_keys(tmp_path: Path, fact_body, key):
    store = RecordStore(tmp_path)

    with pytest.raises(PersistenceError) as excinfo:
        store.persist(decode(fact_body), key)

    assert excinfo.value.conflict is False
    assert list(tmp_path.iterdir()) == []


def test_persist_reports_filesystem_failure(tmp_path: Path, fact_body):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    store = RecordStore(blocker)

    with pytest.raises(PersistenceError) as excinfo:
        store.persist(decode(fact_body), "record-0001")

    assert excinfo.value.conflict is False


def test_keys_ignores_run_metadata(tmp_path: Path, fact_body):
    store = RecordStore(tmp_path)
    (tmp_path / "run_meta").mkdir()
    (tmp_path / "run_meta" / "run-1.summary.json").write_text("{}", encoding="utf-8")
    store.persist(decode(fact_body), "b")
    store.persist(decode(fact_body), "a")

    assert store.keys() == ["a", "b"]
    assert store.exists("a")
    assert not store.exists("c")


def test_keys_on_missing_directory_is_empty(tmp_path: Path):
    assert RecordStore(tmp_path / "missing").keys() == []


def test_load_missing_key_raises(tmp_path: Path):
    with pytest.raises(PersistenceError):
        RecordStore(tmp_path).load("record-0001")


def test_derive_key_policies(fact_body):
    record = decode(fact_body)

    assert derive_key("index", 1, record) == "record-0001"
    assert derive_key("index", 12, record) == "record-0012"
    assert derive_key("id", 1, record) == "591f98803b90f7150a19c151"
    with pytest.raises(ConfigError):
        derive_key("uuid", 1, record)


def test_persist_rejects_record_not_encodable_as_utf8(tmp_path: Path, fact_payload):
    fact_payload["text"] = "\ud800 cats purr"
    record = decode(json.dumps(fact_payload))
    store = RecordStore(tmp_path)

    with pytest.raises(PersistenceError) as excinfo:
        store.persist(record, "record-0001")

    assert excinfo.value.conflict is False
    assert excinfo.value.key == "record-0001"
    assert list(tmp_path.iterdir()) == []
