"""
Unit tests for the Storage module.

Covers snapshot and report output, the history index, and statistics.
"""

import json
from pathlib import Path

from portfolio_quality.core.storage import Storage
from portfolio_quality.quality.validator import validate_snapshot


# ---------------------------------------------------------------------------
# Initialisation
# ---------------------------------------------------------------------------


class TestStorageInit:
    def test_creates_directories(self, tmp_data_dir):
        storage = Storage(tmp_data_dir)
        assert Path(storage.snapshots_dir).exists()
        assert Path(storage.reports_dir).exists()

    def test_default_history(self, tmp_data_dir):
        storage = Storage(tmp_data_dir)
        assert storage.history["reports"] == []
        assert "created" in storage.history

    def test_data_dir_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATA_DIR", str(tmp_path / "env-data"))
        storage = Storage()
        assert storage.data_dir == tmp_path / "env-data"

    def test_loads_existing_history(self, tmp_data_dir, snapshot):
        s1 = Storage(tmp_data_dir)
        s1.save_report(validate_snapshot(snapshot), name="first")
        s2 = Storage(tmp_data_dir)
        assert [r["name"] for r in s2.history["reports"]] == ["first"]


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


class TestSaveSnapshot:
    def test_save_creates_json_file(self, tmp_data_dir, snapshot):
        storage = Storage(tmp_data_dir)
        path = storage.save_snapshot(snapshot, "clean")
        assert path == storage.snapshots_dir / "clean.json"
        with open(path) as f:
            data = json.load(f)
        assert len(data["companies"]) == 2
        assert data["companies"][0]["status"] == "active"

    def test_write_json_creates_parents(self, tmp_data_dir):
        storage = Storage(tmp_data_dir)
        path = storage.write_json(Path(tmp_data_dir) / "nested" / "out.json", {"a": 1})
        assert path.exists()


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class TestSaveReport:
    def test_save_and_load(self, tmp_data_dir, snapshot):
        storage = Storage(tmp_data_dir)
        storage.save_report(validate_snapshot(snapshot), name="run1", source="data.json")
        loaded = storage.load_report("run1")
        assert loaded["isValid"] is True
        assert loaded["stats"]["totalEntities"] == 7

    def test_history_entry(self, tmp_data_dir, snapshot):
        storage = Storage(tmp_data_dir)
        storage.save_report(validate_snapshot(snapshot), name="run1", source="data.json")
        latest = storage.latest_report()
        assert latest["name"] == "run1"
        assert latest["source"] == "data.json"
        assert latest["valid"] is True
        assert latest["score"] == 100
        assert "updated" in storage.history

    def test_default_name_is_timestamp(self, tmp_data_dir, snapshot):
        storage = Storage(tmp_data_dir)
        path = storage.save_report(validate_snapshot(snapshot))
        assert path.name.startswith("report_")

    def test_load_missing_report(self, tmp_data_dir):
        storage = Storage(tmp_data_dir)
        assert storage.load_report("nope") is None
        assert storage.latest_report() is None


class TestStats:
    def test_get_stats(self, tmp_data_dir, snapshot):
        storage = Storage(tmp_data_dir)
        storage.save_snapshot(snapshot)
        storage.save_report(validate_snapshot(snapshot), name="a")
        storage.save_report(validate_snapshot(snapshot), name="b")
        stats = storage.get_stats()
        assert stats["snapshots"] == 1
        assert stats["reports"] == 2
        assert stats["reports_tracked"] == 2
        assert stats["data_dir"] == tmp_data_dir
