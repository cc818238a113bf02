"""Shared service handles injected into route handlers."""

from fastapi import Request

from app.core.config import get_settings
from app.services.notifications import NotificationDispatcher
from app.services.storage import FileStorage, get_storage


def get_notifier(request: Request) -> NotificationDispatcher:
    """The application's single notification dispatcher (created in app.main)."""
    return request.app.state.notifier


def get_file_storage() -> FileStorage:
    return get_storage(get_settings())
