"""Routes package initialization."""

from . import admin, admins, auth, contacts, events, health, news

__all__ = [
    'admin',
    'admins',
    'auth',
    'contacts',
    'events',
    'health',
    'news',
]
