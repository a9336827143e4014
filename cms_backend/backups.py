"""
Snapshots of the events and news collections.

A backup is one pretty-printed JSON file ``{timestamp, events, news}`` whose
name encodes its creation instant, e.g.
``backup-2025-08-28T21-30-45-123Z.json``. Restoring writes a
``backup-before-restore-...`` snapshot of the live data first, then
overwrites events and news one after the other. The two overwrites are not
atomic as a pair.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import aiofiles
import aiofiles.os

from cms_backend.content import EventRepository, NewsRepository
from cms_backend.dates import iso_timestamp, parse_timestamp, utc_now
from cms_backend.errors import NotFoundError, StorageFailure, ValidationError
from cms_backend.store import CollectionStore, dumps_document

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup-"
BEFORE_RESTORE_PREFIX = "backup-before-restore-"
BACKUP_SUFFIX = ".json"
INVALID_DATE = "Data inválida"
DISPLAY_FORMAT = "%d/%m/%Y, %H:%M:%S"


# Filename codec ---------------------------------------------------------------


def encode_timestamp(instant: datetime) -> str:
    """2025-08-28T21:30:45.123Z -> 2025-08-28T21-30-45-123Z"""
    return iso_timestamp(instant).replace(":", "-").replace(".", "-")


def decode_timestamp(encoded: str) -> Optional[datetime]:
    """Inverse of `encode_timestamp`; None when the text is not a valid instant.

    The date part keeps its hyphens. In the time part the first three hyphens
    become colons and the fourth a period before the milliseconds; any other
    shape falls back to turning every hyphen into a colon.
    """
    if "T" in encoded and "Z" in encoded:
        date_part, _, time_part = encoded.partition("T")
        time_part = time_part.replace("Z", "")
        components = time_part.split("-")
        if len(components) == 4:
            hours, minutes, seconds, millis = components
            time_part = f"{hours}:{minutes}:{seconds}.{millis}"
        else:
            time_part = time_part.replace("-", ":")
        iso = f"{date_part}T{time_part}Z"
    else:
        iso = encoded.replace("-", ":")
    return parse_timestamp(iso)


def backup_filename(instant: datetime, prefix: str = BACKUP_PREFIX) -> str:
    return f"{prefix}{encode_timestamp(instant)}{BACKUP_SUFFIX}"


def is_backup_filename(filename: str) -> bool:
    return filename.startswith(BACKUP_PREFIX) and filename.endswith(BACKUP_SUFFIX)


def split_backup_filename(filename: str) -> tuple[str, str]:
    """Return ``(kind, encoded timestamp)`` for a backup filename."""
    stem = filename[: -len(BACKUP_SUFFIX)] if filename.endswith(BACKUP_SUFFIX) else filename
    if stem.startswith(BEFORE_RESTORE_PREFIX):
        return "before-restore", stem[len(BEFORE_RESTORE_PREFIX):]
    if stem.startswith(BACKUP_PREFIX):
        return "backup", stem[len(BACKUP_PREFIX):]
    return "unknown", stem


# Manager ----------------------------------------------------------------------


@dataclass
class BackupHandle:
    filename: str
    timestamp: str

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class BackupRecord:
    filename: str
    timestamp: str
    kind: str
    date: str

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class RestoreResult:
    restored_from: str
    backup_created: str
    restored_at: str

    def as_dict(self) -> dict:
        return asdict(self)


class BackupManager:
    def __init__(
        self,
        store: CollectionStore,
        backup_dir: str | Path,
        display_timezone: str = "UTC",
    ):
        self.store = store
        self.backup_dir = Path(backup_dir)
        self.display_zone = ZoneInfo(display_timezone)

    def _format_display(self, instant: Optional[datetime]) -> str:
        if instant is None:
            return INVALID_DATE
        return instant.astimezone(self.display_zone).strftime(DISPLAY_FORMAT)

    def _path(self, filename: str) -> Path:
        if (
            not filename
            or filename in (".", "..")
            or Path(filename).name != filename
            or "\\" in filename
        ):
            raise ValidationError("Nome de arquivo de backup inválido")
        return self.backup_dir / filename

    async def _write_snapshot(self, prefix: str) -> BackupHandle:
        await aiofiles.os.makedirs(self.backup_dir, exist_ok=True)

        events = (await self.store.load(EventRepository.collection, [])).document
        news = (await self.store.load(NewsRepository.collection, [])).document

        now = utc_now()
        handle = BackupHandle(filename=backup_filename(now, prefix), timestamp=iso_timestamp(now))
        payload = {"timestamp": handle.timestamp, "events": events, "news": news}
        path = self.backup_dir / handle.filename
        try:
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(dumps_document(payload))
        except OSError as e:
            logger.error("Failed to write snapshot %s: %s", path, e)
            raise StorageFailure("Erro ao criar backup") from e
        return handle

    async def create_backup(self) -> BackupHandle:
        handle = await self._write_snapshot(BACKUP_PREFIX)
        logger.info("Backup created: %s", handle.filename)
        return handle

    async def list_backups(self) -> list[BackupRecord]:
        """All backup files, sorted by raw filename descending.

        Lexical order is chronological only within one prefix.
        """
        if not await aiofiles.os.path.isdir(self.backup_dir):
            return []

        records = []
        for filename in await aiofiles.os.listdir(self.backup_dir):
            if not is_backup_filename(filename):
                continue
            kind, encoded = split_backup_filename(filename)
            records.append(
                BackupRecord(
                    filename=filename,
                    timestamp=encoded,
                    kind=kind,
                    date=self._format_display(decode_timestamp(encoded)),
                )
            )
        records.sort(key=lambda record: record.filename, reverse=True)
        return records

    async def restore(self, filename: str) -> RestoreResult:
        if not filename:
            raise ValidationError("Nome do arquivo de backup é obrigatório")
        path = self._path(filename)
        if not await aiofiles.os.path.isfile(path):
            raise NotFoundError("Arquivo de backup não encontrado")

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            logger.error("Failed to read backup %s: %s", path, e)
            raise StorageFailure("Erro ao ler arquivo de backup") from e
        try:
            backup = json.loads(raw)
        except ValueError as e:
            raise ValidationError("Arquivo de backup inválido") from e
        if (
            not isinstance(backup, dict)
            or not isinstance(backup.get("events"), list)
            or not isinstance(backup.get("news"), list)
        ):
            raise ValidationError("Arquivo de backup inválido")

        # The safety snapshot must be on disk before any live file is touched.
        safety = await self._write_snapshot(BEFORE_RESTORE_PREFIX)
        logger.info("Pre-restore snapshot written: %s", safety.filename)

        if not await self.store.save(EventRepository.collection, backup["events"]):
            raise StorageFailure(
                f"Erro ao restaurar eventos; dados anteriores em {safety.filename}"
            )
        if not await self.store.save(NewsRepository.collection, backup["news"]):
            raise StorageFailure(
                f"Erro ao restaurar notícias; dados anteriores em {safety.filename}"
            )

        logger.info("Restored %s", filename)
        return RestoreResult(
            restored_from=filename,
            backup_created=safety.filename,
            restored_at=iso_timestamp(),
        )
