"""News router: public reads, admin writes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cms_backend.auth import Principal
from cms_backend.content import NewsRepository
from cms_backend.dependencies import get_news_repository, require_admin
from cms_backend.schemas import NewsPayload, envelope

router = APIRouter(prefix="/news", tags=["news"])


@router.get("")
async def list_news(news: NewsRepository = Depends(get_news_repository)):
    """Active news items, most recent date first."""
    items = await news.list_public()
    return envelope(items, total=len(items))


@router.get("/featured")
async def list_featured_news(news: NewsRepository = Depends(get_news_repository)):
    items = await news.list_featured()
    return envelope(items, total=len(items))


@router.get("/{news_id}")
async def get_news_item(news_id: int, news: NewsRepository = Depends(get_news_repository)):
    return envelope(await news.get_public(news_id))


@router.post("", status_code=201)
async def create_news_item(
    payload: NewsPayload,
    news: NewsRepository = Depends(get_news_repository),
    _: Principal = Depends(require_admin),
):
    item = await news.create(payload.present_fields())
    return envelope(item, message="Notícia criada com sucesso")


@router.put("/{news_id}")
async def update_news_item(
    news_id: int,
    payload: NewsPayload,
    news: NewsRepository = Depends(get_news_repository),
    _: Principal = Depends(require_admin),
):
    item = await news.update(news_id, payload.present_fields())
    return envelope(item, message="Notícia atualizada com sucesso")


@router.delete("/{news_id}")
async def delete_news_item(
    news_id: int,
    news: NewsRepository = Depends(get_news_repository),
    _: Principal = Depends(require_admin),
):
    await news.soft_delete(news_id)
    return envelope(message="Notícia excluída com sucesso")
