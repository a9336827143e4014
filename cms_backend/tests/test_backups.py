import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from cms_backend.backups import (
    INVALID_DATE,
    BackupManager,
    backup_filename,
    decode_timestamp,
    encode_timestamp,
    split_backup_filename,
)
from cms_backend.errors import NotFoundError, StorageFailure, ValidationError
from cms_backend.store import InMemoryCollectionStore

INSTANT = datetime(2025, 8, 28, 21, 30, 45, 123000, tzinfo=timezone.utc)


class FilenameCodecTests(unittest.TestCase):
    def test_encode(self):
        self.assertEqual(encode_timestamp(INSTANT), "2025-08-28T21-30-45-123Z")
        self.assertEqual(
            backup_filename(INSTANT), "backup-2025-08-28T21-30-45-123Z.json"
        )

    def test_decode(self):
        self.assertEqual(decode_timestamp("2025-08-28T21-30-45-123Z"), INSTANT)

    def test_decode_without_millis(self):
        self.assertEqual(
            decode_timestamp("2025-08-28T21-30-45Z"),
            INSTANT.replace(microsecond=0),
        )

    def test_decode_garbage(self):
        self.assertIsNone(decode_timestamp("not-a-date"))
        self.assertIsNone(decode_timestamp("2025-13-40T99-99-99-999Z"))

    def test_split(self):
        self.assertEqual(
            split_backup_filename("backup-before-restore-2025-08-28T21-30-45-123Z.json"),
            ("before-restore", "2025-08-28T21-30-45-123Z"),
        )
        self.assertEqual(
            split_backup_filename("backup-2025-08-28T21-30-45-123Z.json"),
            ("backup", "2025-08-28T21-30-45-123Z"),
        )


class BackupManagerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.backup_dir = Path(self.tmp.name) / "backups"
        self.store = InMemoryCollectionStore()
        self.store.seed("events", [{"id": 1, "title": "Evento"}])
        self.store.seed("news", [{"id": 1, "title": "Notícia"}])
        self.backups = BackupManager(self.store, self.backup_dir)

    def tearDown(self):
        self.tmp.cleanup()

    def write_backup(self, filename, payload):
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        path = self.backup_dir / filename
        path.write_text(
            payload if isinstance(payload, str) else json.dumps(payload),
            encoding="utf-8",
        )
        return path

    async def test_create_backup_writes_snapshot(self):
        handle = await self.backups.create_backup()
        self.assertTrue(handle.filename.startswith("backup-"))
        self.assertTrue(handle.filename.endswith(".json"))

        content = json.loads(
            (self.backup_dir / handle.filename).read_text(encoding="utf-8")
        )
        self.assertEqual(content["timestamp"], handle.timestamp)
        self.assertEqual(content["events"], [{"id": 1, "title": "Evento"}])
        self.assertEqual(content["news"], [{"id": 1, "title": "Notícia"}])

    async def test_list_missing_directory(self):
        self.assertEqual(await self.backups.list_backups(), [])

    async def test_list_sorted_by_filename_with_display_date(self):
        self.write_backup("backup-2025-01-01T10-00-00-000Z.json", {})
        self.write_backup("backup-2025-08-28T21-30-45-123Z.json", {})
        self.write_backup("backup-before-restore-2025-03-01T00-00-00-000Z.json", {})
        self.write_backup("backup-garbage.json", {})
        self.write_backup("notes.txt", "ignored")

        records = await self.backups.list_backups()
        self.assertEqual(
            [r.filename for r in records],
            [
                "backup-garbage.json",
                "backup-before-restore-2025-03-01T00-00-00-000Z.json",
                "backup-2025-08-28T21-30-45-123Z.json",
                "backup-2025-01-01T10-00-00-000Z.json",
            ],
        )
        by_name = {r.filename: r for r in records}
        self.assertEqual(by_name["backup-garbage.json"].date, INVALID_DATE)
        self.assertEqual(
            by_name["backup-2025-08-28T21-30-45-123Z.json"].date, "28/08/2025, 21:30:45"
        )
        self.assertEqual(
            by_name["backup-before-restore-2025-03-01T00-00-00-000Z.json"].kind,
            "before-restore",
        )

    async def test_display_timezone(self):
        backups = BackupManager(self.store, self.backup_dir, "America/Sao_Paulo")
        self.write_backup("backup-2025-08-28T21-30-45-123Z.json", {})
        records = await backups.list_backups()
        self.assertEqual(records[0].date, "28/08/2025, 18:30:45")

    async def test_restore_round_trip(self):
        handle = await self.backups.create_backup()
        self.store.seed("events", [])
        self.store.seed("news", [{"id": 2}])

        result = await self.backups.restore(handle.filename)
        self.assertEqual(result.restored_from, handle.filename)
        self.assertTrue(result.backup_created.startswith("backup-before-restore-"))
        self.assertEqual(self.store.peek("events"), [{"id": 1, "title": "Evento"}])
        self.assertEqual(self.store.peek("news"), [{"id": 1, "title": "Notícia"}])

        safety = json.loads(
            (self.backup_dir / result.backup_created).read_text(encoding="utf-8")
        )
        self.assertEqual(safety["events"], [])
        self.assertEqual(safety["news"], [{"id": 2}])

    async def test_restore_missing_file_leaves_data_alone(self):
        with self.assertRaises(NotFoundError):
            await self.backups.restore("backup-2020-01-01T00-00-00-000Z.json")
        self.assertEqual(self.store.peek("events"), [{"id": 1, "title": "Evento"}])
        self.assertFalse(self.backup_dir.exists())

    async def test_restore_requires_filename(self):
        with self.assertRaises(ValidationError):
            await self.backups.restore("")

    async def test_restore_rejects_paths(self):
        with self.assertRaises(ValidationError):
            await self.backups.restore("../data/events.json")

    async def test_restore_rejects_malformed_content(self):
        self.write_backup("backup-bad.json", "{oops")
        self.write_backup("backup-shape.json", {"events": {}, "news": []})
        for filename in ("backup-bad.json", "backup-shape.json"):
            with self.assertRaises(ValidationError):
                await self.backups.restore(filename)
        self.assertEqual(self.store.peek("events"), [{"id": 1, "title": "Evento"}])
        self.assertEqual(len(list(self.backup_dir.iterdir())), 2)

    async def test_safety_snapshot_survives_failed_restore(self):
        self.write_backup("backup-old.json", {"events": [], "news": []})
        self.store.fail_saves = True

        with self.assertRaises(StorageFailure) as ctx:
            await self.backups.restore("backup-old.json")

        snapshots = [
            p.name for p in self.backup_dir.iterdir() if p.name.startswith("backup-before-restore-")
        ]
        self.assertEqual(len(snapshots), 1)
        self.assertIn(snapshots[0], ctx.exception.message)
        self.assertEqual(self.store.peek("events"), [{"id": 1, "title": "Evento"}])


if __name__ == "__main__":
    unittest.main()
