"""
Repositories for the public content collections: events and news.

Both follow the same lifecycle. Items are created with `max(id) + 1`,
updated through a field whitelist, and soft-deleted by flipping `active`.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from cms_backend.dates import (
    format_long_date,
    iso_timestamp,
    parse_calendar_date,
    utc_now,
)
from cms_backend.errors import NotFoundError, ValidationError
from cms_backend.repository import (
    JsonRepository,
    apply_whitelist,
    find_index,
    next_id,
    require_fields,
)

logger = logging.getLogger(__name__)

EVENT_PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1560472354-b33ff0c44a43"
    "?ixlib=rb-4.0.3&auto=format&fit=crop&w=1000&q=80"
)
NEWS_PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1639762681485-074b7f938ba0"
    "?ixlib=rb-4.0.3&auto=format&fit=crop&w=1000&q=80"
)
RECENT_WINDOW = timedelta(days=30)


def _by_date_desc(items: list[dict]) -> list[dict]:
    return sorted(items, key=lambda item: item.get("date") or "", reverse=True)


def _by_created_desc(items: list[dict]) -> list[dict]:
    return sorted(items, key=lambda item: item.get("created_at") or "", reverse=True)


class ContentRepository(JsonRepository):
    """Shared list/get/create/update/soft-delete for dated content."""

    required_fields: tuple[str, ...] = ()
    update_fields: tuple[str, ...] = ()
    label = "item"
    not_found_message = "Item não encontrado"

    def _build(self, fields: dict) -> dict:
        raise NotImplementedError

    async def list_public(self) -> list[dict]:
        items = await self._load()
        return _by_date_desc([item for item in items if item.get("active")])

    async def list_featured(self) -> list[dict]:
        items = await self._load()
        return _by_date_desc(
            [item for item in items if item.get("active") and item.get("featured")]
        )

    async def list_all(self) -> list[dict]:
        """Admin listing: inactive items included, newest first."""
        return _by_created_desc(await self._load())

    async def get(self, item_id: int) -> dict:
        items = await self._load()
        index = find_index(items, item_id)
        if index == -1:
            raise NotFoundError(self.not_found_message)
        return items[index]

    async def get_public(self, item_id: int) -> dict:
        item = await self.get(item_id)
        if not item.get("active"):
            raise NotFoundError(self.not_found_message)
        return item

    async def create(self, fields: dict) -> dict:
        require_fields(fields, self.required_fields)
        items = await self._load()
        now = iso_timestamp()
        item = {"id": next_id(items), **self._build(fields)}
        item["formatted_date"] = format_long_date(item["date"])
        item["active"] = True
        item["created_at"] = now
        item["updated_at"] = now

        items.append(item)
        await self._save(items, f"Erro ao salvar {self.label}")
        logger.info("Created %s #%s", self.collection, item["id"])
        return item

    async def update(self, item_id: int, fields: dict) -> dict:
        items = await self._load()
        index = find_index(items, item_id)
        if index == -1:
            raise NotFoundError(self.not_found_message)

        formatted = format_long_date(fields["date"]) if fields.get("date") else None
        item = items[index]
        apply_whitelist(item, fields, self.update_fields)
        if formatted:
            item["formatted_date"] = formatted
        item["updated_at"] = iso_timestamp()

        await self._save(items, "Erro ao salvar alterações")
        return item

    async def soft_delete(self, item_id: int) -> dict:
        items = await self._load()
        index = find_index(items, item_id)
        if index == -1:
            raise NotFoundError(self.not_found_message)
        items[index]["active"] = False
        items[index]["updated_at"] = iso_timestamp()
        await self._save(items, f"Erro ao excluir {self.label}")
        logger.info("Deactivated %s #%s", self.collection, item_id)
        return items[index]

    async def stats(self) -> dict:
        items = await self._load()
        active = [item for item in items if item.get("active")]
        cutoff = (utc_now() - RECENT_WINDOW).date()
        recent = 0
        for item in active:
            try:
                if parse_calendar_date(item.get("date")) >= cutoff:
                    recent += 1
            except ValidationError:
                continue
        return {
            "total": len(active),
            "featured": sum(1 for item in active if item.get("featured")),
            "recent": recent,
        }


class EventRepository(ContentRepository):
    collection = "events"
    required_fields = ("title", "description", "date", "location", "category")
    update_fields = (
        "title",
        "description",
        "date",
        "location",
        "participants",
        "category",
        "image",
        "featured",
        "active",
    )
    label = "evento"
    not_found_message = "Evento não encontrado"

    def _build(self, fields: dict) -> dict:
        return {
            "title": fields["title"],
            "description": fields["description"],
            "date": fields["date"],
            "location": fields["location"],
            "participants": str(fields.get("participants") or "0"),
            "category": fields["category"],
            "image": fields.get("image") or EVENT_PLACEHOLDER_IMAGE,
            "featured": bool(fields.get("featured", False)),
        }

    async def update(self, item_id: int, fields: dict) -> dict:
        # participants is stored as a string
        if fields.get("participants") is not None:
            fields = {**fields, "participants": str(fields["participants"])}
        return await super().update(item_id, fields)


class NewsRepository(ContentRepository):
    collection = "news"
    required_fields = ("title", "summary", "content", "author", "category")
    update_fields = (
        "title",
        "summary",
        "content",
        "date",
        "author",
        "category",
        "image",
        "link",
        "featured",
        "active",
    )
    label = "notícia"
    not_found_message = "Notícia não encontrada"

    def _build(self, fields: dict) -> dict:
        return {
            "title": fields["title"],
            "summary": fields["summary"],
            "content": fields["content"],
            "date": fields.get("date") or utc_now().date().isoformat(),
            "author": fields["author"],
            "category": fields["category"],
            "image": fields.get("image") or NEWS_PLACEHOLDER_IMAGE,
            "link": fields.get("link") or "#",
            "featured": bool(fields.get("featured", False)),
        }
