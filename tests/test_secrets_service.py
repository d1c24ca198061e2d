from __future__ import annotations

import tempfile
import unittest
from unittest import mock

from services import secrets_service
from storage.local_store import LocalJsonStore, StoreConfig
from storage.repo import DriftRepo


class ResolveApiKeyTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.repo = DriftRepo(LocalJsonStore(StoreConfig(data_dir=self._tmp.name, read_cache_ttl_sec=0)))

    def test_stored_key_wins(self):
        self.repo.set_api_key("user-key")
        with mock.patch.object(secrets_service, "_read_secrets_api_key", return_value="app-key"):
            self.assertEqual(secrets_service.resolve_api_key(self.repo), ("user-key", "stored"))

    def test_falls_back_to_app_secrets(self):
        with mock.patch.object(secrets_service, "_read_secrets_api_key", return_value="app-key"):
            self.assertEqual(secrets_service.resolve_api_key(self.repo), ("app-key", "secrets"))

    def test_not_configured(self):
        with mock.patch.object(secrets_service, "_read_secrets_api_key", return_value=""):
            self.assertEqual(secrets_service.resolve_api_key(self.repo), ("", ""))


if __name__ == "__main__":
    unittest.main()
