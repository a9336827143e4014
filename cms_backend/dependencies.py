"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from cms_backend.admins import AdminRepository
from cms_backend.auth import (
    PasswordHasher,
    Principal,
    TokenService,
    authenticate,
    authorize,
)
from cms_backend.backups import BackupManager
from cms_backend.config import get_settings
from cms_backend.contacts import ContactInfoRepository, MessageRepository
from cms_backend.content import EventRepository, NewsRepository
from cms_backend.store import CollectionStore, InMemoryCollectionStore, JsonFileStore
from cms_backend.uploads import InMemoryUploadStore, LocalUploadStore, UploadStore

_store: CollectionStore | None = None
_upload_store: UploadStore | None = None
_password_hasher: PasswordHasher | None = None
_token_service: TokenService | None = None


def get_store() -> CollectionStore:
    """
    Return a singleton collection store so every request sees the same files.
    """
    global _store
    if _store:
        return _store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _store = InMemoryCollectionStore()
    else:
        _store = JsonFileStore(settings.data_dir)
    return _store


def get_upload_store() -> UploadStore:
    global _upload_store
    if _upload_store:
        return _upload_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _upload_store = InMemoryUploadStore()
    else:
        _upload_store = LocalUploadStore(settings.upload_dir)
    return _upload_store


def get_password_hasher() -> PasswordHasher:
    global _password_hasher
    if _password_hasher:
        return _password_hasher
    _password_hasher = PasswordHasher(rounds=get_settings().bcrypt_rounds)
    return _password_hasher


def get_token_service() -> TokenService:
    global _token_service
    if _token_service:
        return _token_service
    settings = get_settings()
    _token_service = TokenService(settings.jwt_secret, settings.jwt_expire_hours)
    return _token_service


def reset_backends() -> None:
    """Drop cached singletons (useful in tests)."""
    global _store, _upload_store, _password_hasher, _token_service
    _store = None
    _upload_store = None
    _password_hasher = None
    _token_service = None


def get_event_repository(store: CollectionStore = Depends(get_store)) -> EventRepository:
    return EventRepository(store)


def get_news_repository(store: CollectionStore = Depends(get_store)) -> NewsRepository:
    return NewsRepository(store)


def get_contact_info_repository(
    store: CollectionStore = Depends(get_store),
) -> ContactInfoRepository:
    return ContactInfoRepository(store)


def get_message_repository(store: CollectionStore = Depends(get_store)) -> MessageRepository:
    return MessageRepository(store)


def get_admin_repository(
    store: CollectionStore = Depends(get_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AdminRepository:
    settings = get_settings()
    return AdminRepository(
        store,
        hasher,
        bootstrap_email=settings.admin_email,
        bootstrap_password=settings.admin_password,
    )


def get_backup_manager(store: CollectionStore = Depends(get_store)) -> BackupManager:
    settings = get_settings()
    return BackupManager(store, settings.backup_dir, settings.display_timezone)


def get_current_principal(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    return authenticate(tokens, authorization)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    return authorize(principal)
