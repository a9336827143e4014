"""
Contact info (a singleton document) and the public contact-message inbox.
"""

from __future__ import annotations

import logging
from typing import Optional

from cms_backend.dates import iso_timestamp
from cms_backend.errors import NotFoundError
from cms_backend.repository import (
    JsonRepository,
    find_index,
    next_id,
    require_fields,
    validate_email,
)

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_HOURS = "Segunda a Sexta: 8h às 18h"


def default_contact_info() -> dict:
    return {
        "email": "contato@example.com",
        "phone": "(11) 3000-0000",
        "address": "Rua Quatá, 300 - Vila Olímpia, São Paulo - SP, 04546-042",
        "business_hours": DEFAULT_BUSINESS_HOURS,
        "social_media": {
            "linkedin": "https://linkedin.com/company/example",
            "instagram": "https://instagram.com/example",
            "twitter": "https://twitter.com/example",
        },
        "updated_at": iso_timestamp(),
    }


class ContactInfoRepository(JsonRepository):
    collection = "contacts"

    def _default(self):
        return default_contact_info

    async def get(self) -> dict:
        return await self._load()

    async def replace(self, fields: dict) -> dict:
        require_fields(fields, ("email", "phone", "address"))
        contact_info = {
            "email": fields["email"],
            "phone": fields["phone"],
            "address": fields["address"],
            "business_hours": fields.get("business_hours") or DEFAULT_BUSINESS_HOURS,
            "social_media": fields.get("social_media") or {},
            "updated_at": iso_timestamp(),
        }
        await self._save(contact_info, "Erro ao salvar informações de contato")
        return contact_info


class MessageRepository(JsonRepository):
    collection = "messages"

    async def submit(self, fields: dict) -> dict:
        require_fields(fields, ("name", "email", "message"))
        validate_email(fields["email"])

        messages = await self._load()
        message = {
            "id": next_id(messages),
            "name": fields["name"],
            "email": fields["email"],
            "message": fields["message"],
            "sent_at": iso_timestamp(),
            "read": False,
            "responded": False,
        }
        messages.append(message)
        await self._save(messages, "Erro ao salvar mensagem")
        logger.info("New contact message #%s from %s", message["id"], message["email"])
        return message

    async def list_all(self) -> list[dict]:
        messages = await self._load()
        return sorted(messages, key=lambda m: m.get("sent_at") or "", reverse=True)

    async def mark(
        self,
        message_id: int,
        *,
        read: Optional[bool] = None,
        responded: Optional[bool] = None,
    ) -> dict:
        messages = await self._load()
        index = find_index(messages, message_id)
        if index == -1:
            raise NotFoundError("Mensagem não encontrada")

        message = messages[index]
        if isinstance(read, bool):
            message["read"] = read
        if isinstance(responded, bool):
            message["responded"] = responded
        message["updated_at"] = iso_timestamp()

        await self._save(messages, "Erro ao atualizar mensagem")
        return message

    async def delete(self, message_id: int) -> dict:
        messages = await self._load()
        index = find_index(messages, message_id)
        if index == -1:
            raise NotFoundError("Mensagem não encontrada")
        removed = messages.pop(index)
        await self._save(messages, "Erro ao excluir mensagem")
        return removed
