"""Admin panel routes: dashboard, full listings, uploads, backup/restore."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from cms_backend.backups import BackupManager
from cms_backend.config import get_settings
from cms_backend.content import EventRepository, NewsRepository
from cms_backend.dependencies import (
    get_backup_manager,
    get_event_repository,
    get_news_repository,
    get_upload_store,
    require_admin,
)
from cms_backend.errors import ValidationError
from cms_backend.schemas import RestorePayload, envelope
from cms_backend.uploads import UploadStore, save_image

router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)


@router.get("/dashboard")
async def dashboard(
    events: EventRepository = Depends(get_event_repository),
    news: NewsRepository = Depends(get_news_repository),
):
    return envelope({"events": await events.stats(), "news": await news.stats()})


@router.get("/events")
async def list_all_events(events: EventRepository = Depends(get_event_repository)):
    """Every event, inactive included, newest first."""
    items = await events.list_all()
    return envelope(items, total=len(items))


@router.get("/news")
async def list_all_news(news: NewsRepository = Depends(get_news_repository)):
    items = await news.list_all()
    return envelope(items, total=len(items))


@router.post("/upload")
async def upload_image(
    image: Optional[UploadFile] = File(None),
    uploads: UploadStore = Depends(get_upload_store),
):
    if image is None or not image.filename:
        raise ValidationError("Nenhum arquivo enviado")
    settings = get_settings()
    # One byte past the limit is enough for save_image to reject the file.
    data = await image.read(settings.max_file_size + 1)
    stored = await save_image(
        uploads,
        original_name=image.filename,
        content_type=image.content_type or "",
        data=data,
        allowed_types=settings.allowed_file_type_list,
        max_size=settings.max_file_size,
    )
    return envelope(stored, message="Imagem enviada com sucesso")


@router.delete("/upload/{filename}")
async def delete_image(filename: str, uploads: UploadStore = Depends(get_upload_store)):
    await uploads.delete(filename)
    return envelope(message="Imagem excluída com sucesso")


@router.post("/backup")
async def create_backup(backups: BackupManager = Depends(get_backup_manager)):
    handle = await backups.create_backup()
    return envelope(handle.as_dict(), message="Backup criado com sucesso")


@router.get("/backups")
async def list_backups(backups: BackupManager = Depends(get_backup_manager)):
    records = [record.as_dict() for record in await backups.list_backups()]
    if not records:
        return envelope([], message="Nenhum backup encontrado", total=0)
    return envelope(records, total=len(records))


@router.post("/restore")
async def restore_backup(
    payload: RestorePayload,
    backups: BackupManager = Depends(get_backup_manager),
):
    result = await backups.restore(payload.filename)
    return envelope(result.as_dict(), message="Backup restaurado com sucesso")
