"""Shared fixtures for portfolio tests."""

from portfolio.content_store import ConfiguredContentStore
from portfolio.db import SqlDbClient
from portfolio.schemas import ProjectCreate
from portfolio.storage import InMemoryStorageClient


def make_configured_store() -> ConfiguredContentStore:
    return ConfiguredContentStore(
        SqlDbClient("sqlite+pysqlite:///:memory:"),
        InMemoryStorageClient(),
        resume_file_name="resume.pdf",
    )


def project_payload(title: str, **overrides) -> ProjectCreate:
    values = {
        "title": title,
        "slug": title.lower().replace(" ", "-"),
        "category": "Branding",
        "description": f"{title} description",
    }
    values.update(overrides)
    return ProjectCreate(**values)
