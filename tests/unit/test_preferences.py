"""Unit tests for persisted preferences."""

import json

from payout_console.client.preferences import FILTER_STORAGE_KEY, PreferenceStore


class TestPreferenceStore:
    def test_default_when_file_missing(self, tmp_path):
        store = PreferenceStore(tmp_path / "prefs.json")
        assert store.get(FILTER_STORAGE_KEY, "all") == "all"

    def test_round_trip(self, tmp_path):
        store = PreferenceStore(tmp_path / "nested" / "prefs.json")
        store.set(FILTER_STORAGE_KEY, "pending")
        assert store.get(FILTER_STORAGE_KEY, "all") == "pending"

    def test_value_stored_json_encoded(self, tmp_path):
        path = tmp_path / "prefs.json"
        PreferenceStore(path).set(FILTER_STORAGE_KEY, "flagged")
        assert json.loads(path.read_text()) == {"fundsConsoleFilter": '"flagged"'}

    def test_other_keys_preserved(self, tmp_path):
        path = tmp_path / "prefs.json"
        store = PreferenceStore(path)
        store.set("theme", "dark")
        store.set(FILTER_STORAGE_KEY, "paid")
        assert store.get("theme", None) == "dark"

    def test_corrupt_file_falls_back(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json")
        assert PreferenceStore(path).get(FILTER_STORAGE_KEY, "all") == "all"

    def test_corrupt_value_falls_back(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({FILTER_STORAGE_KEY: "pending"}))
        assert PreferenceStore(path).get(FILTER_STORAGE_KEY, "all") == "all"

    def test_non_object_file_falls_back(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("[1, 2]")
        assert PreferenceStore(path).get(FILTER_STORAGE_KEY, "all") == "all"

    def test_write_over_corrupt_file(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("garbage")
        store = PreferenceStore(path)
        store.set(FILTER_STORAGE_KEY, "pending")
        assert store.get(FILTER_STORAGE_KEY, "all") == "pending"
