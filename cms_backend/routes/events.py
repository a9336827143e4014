"""Events router: public reads, admin writes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cms_backend.auth import Principal
from cms_backend.content import EventRepository
from cms_backend.dependencies import get_event_repository, require_admin
from cms_backend.schemas import EventPayload, envelope

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
async def list_events(events: EventRepository = Depends(get_event_repository)):
    """Active events, most recent date first."""
    items = await events.list_public()
    return envelope(items, total=len(items))


@router.get("/featured")
async def list_featured_events(events: EventRepository = Depends(get_event_repository)):
    items = await events.list_featured()
    return envelope(items, total=len(items))


@router.get("/{event_id}")
async def get_event(event_id: int, events: EventRepository = Depends(get_event_repository)):
    return envelope(await events.get_public(event_id))


@router.post("", status_code=201)
async def create_event(
    payload: EventPayload,
    events: EventRepository = Depends(get_event_repository),
    _: Principal = Depends(require_admin),
):
    event = await events.create(payload.present_fields())
    return envelope(event, message="Evento criado com sucesso")


@router.put("/{event_id}")
async def update_event(
    event_id: int,
    payload: EventPayload,
    events: EventRepository = Depends(get_event_repository),
    _: Principal = Depends(require_admin),
):
    event = await events.update(event_id, payload.present_fields())
    return envelope(event, message="Evento atualizado com sucesso")


@router.delete("/{event_id}")
async def delete_event(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    _: Principal = Depends(require_admin),
):
    await events.soft_delete(event_id)
    return envelope(message="Evento excluído com sucesso")
