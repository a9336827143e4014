"""
Shared plumbing for the JSON-backed repositories.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from cms_backend.errors import StorageFailure, ValidationError
from cms_backend.store import CollectionStore, DefaultValue

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def next_id(items: Iterable[dict]) -> int:
    """1 + the largest id present, or 1 for an empty collection.

    Ids of deleted entries at the top of the range are handed out again.
    """
    return max((item.get("id") or 0 for item in items), default=0) + 1


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(fields: dict, names: Iterable[str]) -> None:
    names = list(names)
    missing = [name for name in names if is_blank(fields.get(name))]
    if missing:
        raise ValidationError("Campos obrigatórios: " + ", ".join(names))


def validate_email(value: str) -> None:
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        raise ValidationError("Formato de email inválido")


def apply_whitelist(target: dict, fields: dict, allowed: Iterable[str]) -> list[str]:
    """Copy allowed keys present in `fields` onto `target`.

    None and empty strings count as absent, so an update never nulls or
    blanks a stored value. Returns the names that were applied.
    """
    applied = []
    for name in allowed:
        value = fields.get(name)
        if value is None or value == "":
            continue
        target[name] = value
        applied.append(name)
    return applied


def find_index(items: list[dict], item_id: int) -> int:
    for index, item in enumerate(items):
        if item.get("id") == item_id:
            return index
    return -1


class JsonRepository:
    """Base for repositories over a single named collection."""

    collection: str = ""
    default: DefaultValue = []

    def __init__(self, store: CollectionStore):
        self.store = store

    async def _load(self) -> Any:
        result = await self.store.load(self.collection, self._default())
        return result.document

    def _default(self) -> DefaultValue:
        return self.default

    async def _save(self, document: Any, failure_message: str) -> None:
        if not await self.store.save(self.collection, document):
            raise StorageFailure(failure_message)
