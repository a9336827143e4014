import json
import tempfile
import unittest
from pathlib import Path

from cms_backend.store import InMemoryCollectionStore, JsonFileStore


class JsonFileStoreTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.tmp.name)
        self.store = JsonFileStore(self.data_dir)

    def tearDown(self):
        self.tmp.cleanup()

    async def test_missing_file_is_recreated_with_default(self):
        result = await self.store.load("events", [])
        self.assertTrue(result.recovered)
        self.assertEqual(result.document, [])

        path = self.data_dir / "events.json"
        self.assertTrue(path.exists())
        self.assertEqual(json.loads(path.read_text(encoding="utf-8")), [])

    async def test_corrupt_file_is_replaced_with_default(self):
        path = self.data_dir / "contacts.json"
        path.write_text("{not json", encoding="utf-8")

        result = await self.store.load("contacts", {"email": "x@example.com"})
        self.assertTrue(result.recovered)
        self.assertEqual(result.document, {"email": "x@example.com"})
        self.assertEqual(
            json.loads(path.read_text(encoding="utf-8")), {"email": "x@example.com"}
        )

    async def test_existing_file_is_returned_untouched(self):
        (self.data_dir / "news.json").write_text('[{"id": 3}]', encoding="utf-8")
        result = await self.store.load("news", [])
        self.assertFalse(result.recovered)
        self.assertEqual(result.document, [{"id": 3}])

    async def test_default_is_copied_not_shared(self):
        default = [{"id": 1}]
        result = await self.store.load("events", default)
        result.document.append({"id": 2})
        self.assertEqual(default, [{"id": 1}])

    async def test_callable_default_only_runs_on_recovery(self):
        calls = []

        def factory():
            calls.append(1)
            return [{"id": 1}]

        await self.store.load("admins", factory)
        await self.store.load("admins", factory)
        self.assertEqual(len(calls), 1)

    async def test_coroutine_default_is_awaited(self):
        async def factory():
            return [{"id": 1}]

        result = await self.store.load("admins", factory)
        self.assertTrue(result.recovered)
        self.assertEqual(result.document, [{"id": 1}])
        self.assertEqual(
            json.loads((self.data_dir / "admins.json").read_text(encoding="utf-8")),
            [{"id": 1}],
        )

    async def test_save_is_pretty_printed_utf8(self):
        ok = await self.store.save("news", [{"id": 1, "title": "Notícia"}])
        self.assertTrue(ok)
        text = (self.data_dir / "news.json").read_text(encoding="utf-8")
        self.assertIn("\n  {", text)
        self.assertIn("Notícia", text)

    async def test_save_failure_returns_false(self):
        (self.data_dir / "events.json").mkdir()
        ok = await self.store.save("events", [])
        self.assertFalse(ok)

    async def test_load_survives_failed_recovery_write(self):
        (self.data_dir / "events.json").mkdir()
        result = await self.store.load("events", [{"id": 9}])
        self.assertTrue(result.recovered)
        self.assertEqual(result.document, [{"id": 9}])


class InMemoryCollectionStoreTests(unittest.IsolatedAsyncioTestCase):
    async def test_corrupt_seed_is_recovered_and_recorded(self):
        store = InMemoryCollectionStore()
        store.seed_raw("messages", "][")
        result = await store.load("messages", [])
        self.assertTrue(result.recovered)
        self.assertEqual(store.recoveries, ["messages"])
        self.assertEqual(store.peek("messages"), [])

    async def test_fail_saves(self):
        store = InMemoryCollectionStore(fail_saves=True)
        self.assertFalse(await store.save("events", []))
        self.assertIsNone(store.peek("events"))


if __name__ == "__main__":
    unittest.main()
