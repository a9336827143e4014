"""Contact info and contact-message routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cms_backend.auth import Principal
from cms_backend.contacts import ContactInfoRepository, MessageRepository
from cms_backend.dependencies import (
    get_contact_info_repository,
    get_message_repository,
    require_admin,
)
from cms_backend.schemas import (
    ContactInfoPayload,
    MessagePayload,
    MessageUpdatePayload,
    envelope,
)

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.get("")
async def get_contact_info(
    contacts: ContactInfoRepository = Depends(get_contact_info_repository),
):
    return envelope(await contacts.get())


@router.put("")
async def update_contact_info(
    payload: ContactInfoPayload,
    contacts: ContactInfoRepository = Depends(get_contact_info_repository),
    _: Principal = Depends(require_admin),
):
    contact_info = await contacts.replace(payload.present_fields())
    return envelope(
        contact_info, message="Informações de contato atualizadas com sucesso"
    )


@router.post("/message")
async def submit_message(
    payload: MessagePayload,
    messages: MessageRepository = Depends(get_message_repository),
):
    """Public contact form submission."""
    message = await messages.submit(payload.present_fields())
    return envelope(
        {
            "id": message["id"],
            "name": message["name"],
            "email": message["email"],
            "sent_at": message["sent_at"],
        },
        message="Mensagem enviada com sucesso! Entraremos em contato em breve.",
    )


@router.get("/messages")
async def list_messages(
    messages: MessageRepository = Depends(get_message_repository),
    _: Principal = Depends(require_admin),
):
    items = await messages.list_all()
    return envelope(items, total=len(items))


@router.put("/messages/{message_id}")
async def update_message(
    message_id: int,
    payload: MessageUpdatePayload,
    messages: MessageRepository = Depends(get_message_repository),
    _: Principal = Depends(require_admin),
):
    message = await messages.mark(
        message_id, read=payload.read, responded=payload.responded
    )
    return envelope(message, message="Mensagem atualizada com sucesso")


@router.delete("/messages/{message_id}")
async def delete_message(
    message_id: int,
    messages: MessageRepository = Depends(get_message_repository),
    _: Principal = Depends(require_admin),
):
    removed = await messages.delete(message_id)
    return envelope(removed, message="Mensagem excluída com sucesso")
