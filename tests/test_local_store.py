from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from storage.local_store import LocalJsonStore, StoreConfig


class LocalJsonStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def _store(self, **kw) -> LocalJsonStore:
        return LocalJsonStore(StoreConfig(data_dir=self._tmp.name, **kw))

    def test_missing_key_is_none(self):
        self.assertIsNone(self._store().get_item("nothing"))

    def test_set_then_get_and_remove(self):
        store = self._store()
        store.set_item("k", '{"a": 1}')
        self.assertEqual(store.get_item("k"), '{"a": 1}')
        store.remove_item("k")
        self.assertIsNone(store.get_item("k"))
        store.remove_item("k")

    def test_write_leaves_no_temp_files(self):
        store = self._store()
        store.set_item("k", "v1")
        store.set_item("k", "v2")
        self.assertEqual(sorted(p.name for p in Path(self._tmp.name).iterdir()), ["k.json"])

    def test_read_cache_is_invalidated_by_own_writes(self):
        store = self._store(read_cache_ttl_sec=60)
        self.assertIsNone(store.get_item("k"))
        store.set_item("k", "fresh")
        self.assertEqual(store.get_item("k"), "fresh")

    def test_read_cache_serves_within_ttl(self):
        store = self._store(read_cache_ttl_sec=60)
        store.set_item("k", "v1")
        self.assertEqual(store.get_item("k"), "v1")
        Path(self._tmp.name, "k.json").write_text("outside", encoding="utf-8")
        self.assertEqual(store.get_item("k"), "v1")

    def test_rejects_path_like_keys(self):
        store = self._store()
        for bad in ("", "../x", "a/b", ".."):
            with self.assertRaises(ValueError, msg=bad):
                store.get_item(bad)

    def test_admin_log_is_capped_and_newest_first(self):
        store = self._store(admin_logs_max=3)
        for i in range(5):
            store.append_admin_log("error", f"op{i}", "boom")
        raw = json.loads(Path(self._tmp.name, "dreamy_drift_admin_logs.json").read_text(encoding="utf-8"))
        self.assertEqual([r["action"] for r in raw], ["op2", "op3", "op4"])
        self.assertEqual(len(store.get_recent_admin_logs(limit=2)), 2)

    def test_admin_log_tolerates_corrupted_log(self):
        store = self._store()
        Path(self._tmp.name, "dreamy_drift_admin_logs.json").write_text("nope", encoding="utf-8")
        self.assertEqual(store.get_recent_admin_logs(), [])
        store.append_admin_log("error", "op", "boom")
        self.assertEqual(store.get_recent_admin_logs()[0]["action"], "op")


if __name__ == "__main__":
    unittest.main()
