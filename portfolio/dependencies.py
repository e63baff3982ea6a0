"""
Dependency wiring for the FastAPI app.

The content store variant is chosen once, on first use, from settings.
"""

from __future__ import annotations

import logging

from portfolio.config import get_settings
from portfolio.content_store import (
    ConfiguredContentStore,
    ContentStore,
    DisabledContentStore,
)
from portfolio.db import SqlDbClient
from portfolio.local_store import JsonFileLocalStore
from portfolio.storage import S3StorageClient

logger = logging.getLogger(__name__)

_content_store: ContentStore | None = None


def build_content_store() -> ContentStore:
    settings = get_settings()
    if not settings.backend_configured:
        logger.warning(
            "Backend not configured; using local fallback at %s",
            settings.local_store_path,
        )
        return DisabledContentStore(
            JsonFileLocalStore(settings.local_store_path),
            static_resume_path=settings.static_resume_path,
        )

    storage = S3StorageClient(
        endpoint=settings.storage_endpoint or "",
        region=settings.storage_region or "",
        access_key_id=settings.storage_access_key or "",
        secret_access_key=settings.storage_secret_key or "",
        public_base_url=settings.storage_public_url or "",
    )
    return ConfiguredContentStore(
        SqlDbClient(settings.database_url),
        storage,
        resume_file_name=settings.resume_file_name,
    )


def get_content_store() -> ContentStore:
    """
    Return a singleton content store so the variant is selected once.
    """
    global _content_store
    if _content_store:
        return _content_store
    _content_store = build_content_store()
    return _content_store


def set_content_store(store: ContentStore | None) -> None:
    """Replace the singleton (used by tests and scripts)."""
    global _content_store
    _content_store = store
