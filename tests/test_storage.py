import json
import logging
from pathlib import Path

from block_crush.storage import JsonFileStore, MemoryStore


def test_missing_file_returns_fallback(tmp_path):
    store = JsonFileStore(tmp_path / "nope" / "storage.json")
    assert store.get("bestScore", 0) == 0
    assert store.get("bestScore") is None


def test_round_trip_with_prefix(tmp_path):
    path = tmp_path / "data" / "storage.json"
    store = JsonFileStore(path)
    store.set("bestScore", 120)
    store.set("other", {"a": [1, 2]})
    assert store.get("bestScore", 0) == 120
    assert store.get("other") == {"a": [1, 2]}
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["blockCrush_bestScore"] == 120


def test_corrupt_file_falls_back_and_warns(tmp_path, caplog):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)
    with caplog.at_level(logging.WARNING, logger="block_crush.storage"):
        assert store.get("bestScore", 7) == 7
    assert "storage get failed" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="block_crush.storage"):
        assert store.get("bestScore", 7, silent=True) == 7
    assert caplog.text == ""

    # A write starts a fresh file and keeps the unreadable one beside it
    store.set("bestScore", 9)
    assert store.get("bestScore", 0) == 9
    assert (tmp_path / "storage.json.corrupt").read_text(encoding="utf-8") == "{not json"


def test_set_keeps_other_keys_and_leaves_no_temp_file(tmp_path):
    path = tmp_path / "storage.json"
    store = JsonFileStore(path)
    store.set("bestScore", 5)
    store.set("stage", 3)
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {"blockCrush_bestScore": 5, "blockCrush_stage": 3}
    assert sorted(p.name for p in tmp_path.iterdir()) == ["storage.json"]


def test_failed_write_leaves_previous_file_intact(tmp_path, monkeypatch):
    path = tmp_path / "storage.json"
    store = JsonFileStore(path)
    store.set("bestScore", 5)

    def fail_replace(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", fail_replace)
    store.set("bestScore", 50, silent=True)
    monkeypatch.undo()
    assert store.get("bestScore") == 5


def test_unserialisable_value_is_swallowed(tmp_path, caplog):
    store = JsonFileStore(tmp_path / "storage.json")
    store.set("bestScore", 5)
    with caplog.at_level(logging.WARNING, logger="block_crush.storage"):
        store.set("bestScore", object())
    assert "storage set failed" in caplog.text
    assert store.get("bestScore") == 5


def test_unwritable_path_is_swallowed(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = JsonFileStore(blocker / "storage.json")
    store.set("bestScore", 5, silent=True)
    assert store.get("bestScore", 0, silent=True) == 0


def test_memory_store():
    store = MemoryStore()
    assert store.get("k", "fallback") == "fallback"
    store.set("k", [1, 2])
    assert store.get("k") == [1, 2]
    store.set("bad", {1, 2})
    assert store.get("bad", 0) == 0
