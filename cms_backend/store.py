"""
Collection store: one JSON document per named collection.

`JsonFileStore` keeps each collection in ``<data_dir>/<name>.json`` and does
its I/O through aiofiles. `InMemoryCollectionStore` is the test double with
the same contract.

Neither implementation locks: concurrent read-modify-write cycles on the same
collection are last-writer-wins.
"""

from __future__ import annotations

import copy
import inspect
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol, Union

import aiofiles

logger = logging.getLogger(__name__)

Document = Union[list, dict]
DefaultValue = Union[Document, Callable[[], Union[Document, Awaitable[Document]]]]


@dataclass
class LoadResult:
    """Outcome of a load; `recovered` is True when the default replaced a missing/corrupt file."""

    document: Any
    recovered: bool = False


class CollectionStore(Protocol):
    """Defines the operations repositories need from persistence."""

    async def load(self, name: str, default: DefaultValue) -> LoadResult:
        ...

    async def save(self, name: str, document: Document) -> bool:
        ...


async def _resolve_default(default: DefaultValue) -> Document:
    if callable(default):
        document = default()
        if inspect.isawaitable(document):
            document = await document
        return document
    return copy.deepcopy(default)


def dumps_document(document: Any) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


class JsonFileStore:
    """Pretty-printed JSON files on local disk."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    async def load(self, name: str, default: DefaultValue) -> LoadResult:
        path = self.path_for(name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
            return LoadResult(document=json.loads(raw))
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s (%s); recreating with default value", path, e)

        document = await _resolve_default(default)
        if not await self.save(name, document):
            logger.error("Could not recreate %s; serving default value from memory", path)
        return LoadResult(document=document, recovered=True)

    async def save(self, name: str, document: Document) -> bool:
        path = self.path_for(name)
        try:
            payload = dumps_document(document)
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(payload)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save %s: %s", path, e)
            return False


@dataclass
class InMemoryCollectionStore:
    """Test double for the file store.

    Documents are held as serialized JSON text so callers never share
    references with the store, mirroring what a file round-trip does.
    Setting `fail_saves` makes every save report failure.
    """

    documents: dict = field(default_factory=dict)
    fail_saves: bool = False
    recoveries: list = field(default_factory=list)

    def seed(self, name: str, document: Any) -> None:
        self.documents[name] = dumps_document(document)

    def seed_raw(self, name: str, text: str) -> None:
        """Store arbitrary text, e.g. to simulate a corrupt file."""
        self.documents[name] = text

    def peek(self, name: str) -> Any:
        raw = self.documents.get(name)
        return None if raw is None else json.loads(raw)

    async def load(self, name: str, default: DefaultValue) -> LoadResult:
        raw = self.documents.get(name)
        if raw is not None:
            try:
                return LoadResult(document=json.loads(raw))
            except ValueError:
                pass
        document = await _resolve_default(default)
        self.recoveries.append(name)
        await self.save(name, document)
        return LoadResult(document=document, recovered=True)

    async def save(self, name: str, document: Document) -> bool:
        if self.fail_saves:
            return False
        self.documents[name] = dumps_document(document)
        return True

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.documents.clear()
        self.recoveries.clear()
        self.fail_saves = False
