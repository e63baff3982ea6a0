"""
Content store: the single access point for portfolio data and media.

Two variants share one interface. `ConfiguredContentStore` talks to the
database and object storage; `DisabledContentStore` is selected when the
backend is not configured and answers every call with its empty result,
keeping analytics counters in a local store instead.

Both variants swallow backend failures: reads return an empty list or None,
writes return None or False. Callers cannot tell "not found" apart from
"backend error" and should render an empty state for either.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError

from portfolio import media
from portfolio.db import DbClient
from portfolio.local_store import LocalStore
from portfolio.schemas import (
    AnalyticsStats,
    ContactResult,
    Project,
    ProjectCreate,
    ProjectUpdate,
    ResumeData,
)
from portfolio.storage import StorageClient

logger = logging.getLogger(__name__)

STORAGE_ERRORS = (BotoCoreError, ClientError)

RESUME_DOWNLOADS_KEY = "resume_downloads"
PROJECT_VIEWS_KEY = "project_views"


class ContentStore(Protocol):
    """Operations the site and admin area need from the backend."""

    configured: bool

    def list_projects(self) -> list[Project]:
        ...

    def get_project_by_slug(self, slug: str) -> Optional[Project]:
        ...

    def get_featured_projects(self) -> list[Project]:
        ...

    def create_project(self, project: ProjectCreate) -> Optional[Project]:
        ...

    def update_project(
        self, project_id: str, updates: ProjectUpdate
    ) -> Optional[Project]:
        ...

    def delete_project(self, project_id: str) -> bool:
        ...

    def submit_contact(
        self, name: str, email: str, message: Optional[str]
    ) -> ContactResult:
        ...

    def upload_file(
        self,
        filename: str,
        data: bytes,
        bucket: str,
        content_type: Optional[str] = None,
    ) -> Optional[str]:
        ...

    def delete_file(self, url: str, bucket: str) -> bool:
        ...

    def upload_image(
        self, filename: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        ...

    def delete_image(self, url: str) -> bool:
        ...

    def upload_video(
        self, filename: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        ...

    def delete_video(self, url: str) -> bool:
        ...

    def upload_document(
        self, filename: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        ...

    def delete_document(self, url: str) -> bool:
        ...

    def track_resume_download(self) -> bool:
        ...

    def track_project_view(self, project_id: str) -> bool:
        ...

    def get_analytics_stats(self) -> AnalyticsStats:
        ...

    def get_resume_data(self) -> Optional[ResumeData]:
        ...

    def save_resume_data(self, resume: ResumeData) -> Optional[ResumeData]:
        ...

    def upload_resume(
        self, data: bytes, content_type: Optional[str] = "application/pdf"
    ) -> Optional[str]:
        ...

    def get_resume_url(self) -> str:
        ...


class _BucketShortcuts:
    """Per-bucket wrappers shared by both variants."""

    def upload_image(
        self, filename: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        return self.upload_file(filename, data, media.IMAGES_BUCKET, content_type)

    def delete_image(self, url: str) -> bool:
        return self.delete_file(url, media.IMAGES_BUCKET)

    def upload_video(
        self, filename: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        return self.upload_file(filename, data, media.VIDEOS_BUCKET, content_type)

    def delete_video(self, url: str) -> bool:
        return self.delete_file(url, media.VIDEOS_BUCKET)

    def upload_document(
        self, filename: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        return self.upload_file(filename, data, media.DOCUMENTS_BUCKET, content_type)

    def delete_document(self, url: str) -> bool:
        return self.delete_file(url, media.DOCUMENTS_BUCKET)


class ConfiguredContentStore(_BucketShortcuts):
    """Backed by a database client and an object storage client."""

    configured = True

    def __init__(
        self,
        db: DbClient,
        storage: StorageClient,
        *,
        resume_file_name: str = "resume.pdf",
    ):
        self.db = db
        self.storage = storage
        self.resume_file_name = resume_file_name

    # Projects

    def list_projects(self) -> list[Project]:
        try:
            return self.db.list_projects()
        except SQLAlchemyError:
            logger.exception("Error fetching projects")
            return []

    def get_project_by_slug(self, slug: str) -> Optional[Project]:
        try:
            return self.db.get_project_by_slug(slug)
        except SQLAlchemyError:
            logger.exception("Error fetching project %s", slug)
            return None

    def get_featured_projects(self) -> list[Project]:
        try:
            return self.db.list_projects(featured_only=True)
        except SQLAlchemyError:
            logger.exception("Error fetching featured projects")
            return []

    def create_project(self, project: ProjectCreate) -> Optional[Project]:
        try:
            return self.db.insert_project(project)
        except SQLAlchemyError:
            logger.exception("Error creating project %s", project.slug)
            return None

    def update_project(
        self, project_id: str, updates: ProjectUpdate
    ) -> Optional[Project]:
        try:
            return self.db.update_project(
                project_id, updates.model_dump(exclude_unset=True)
            )
        except SQLAlchemyError:
            logger.exception("Error updating project %s", project_id)
            return None

    def delete_project(self, project_id: str) -> bool:
        try:
            self.db.delete_project(project_id)
        except SQLAlchemyError:
            logger.exception("Error deleting project %s", project_id)
            return False
        return True

    # Contact

    def submit_contact(
        self, name: str, email: str, message: Optional[str]
    ) -> ContactResult:
        try:
            self.db.insert_contact(name, email, message)
        except SQLAlchemyError as exc:
            logger.exception("Error submitting contact form")
            return ContactResult(success=False, error=str(exc.__cause__ or exc))
        return ContactResult(success=True)

    # Media

    def upload_file(
        self,
        filename: str,
        data: bytes,
        bucket: str,
        content_type: Optional[str] = None,
    ) -> Optional[str]:
        name = media.generate_file_name(filename)
        try:
            self.storage.upload_bytes(
                bucket,
                name,
                data,
                content_type=content_type,
                cache_control=media.UPLOAD_CACHE_CONTROL,
            )
        except STORAGE_ERRORS:
            logger.exception("Error uploading %s to %s", filename, bucket)
            return None
        return self.storage.public_url(bucket, name)

    def delete_file(self, url: str, bucket: str) -> bool:
        name = media.file_name_from_url(url)
        if not name:
            return False
        try:
            self.storage.remove(bucket, [name])
        except STORAGE_ERRORS:
            logger.exception("Error deleting %s from %s", name, bucket)
            return False
        return True

    # Analytics

    def track_resume_download(self) -> bool:
        try:
            self.db.insert_event("resume_download")
        except SQLAlchemyError:
            logger.exception("Error tracking resume download")
            return False
        return True

    def track_project_view(self, project_id: str) -> bool:
        try:
            self.db.insert_event("project_view", project_id)
        except SQLAlchemyError:
            logger.exception("Error tracking project view %s", project_id)
            return False
        return True

    def get_analytics_stats(self) -> AnalyticsStats:
        stats = AnalyticsStats()
        try:
            stats.resume_downloads = self.db.count_events("resume_download")
        except SQLAlchemyError:
            logger.exception("Error counting resume downloads")
        try:
            stats.project_views = self.db.count_events("project_view")
        except SQLAlchemyError:
            logger.exception("Error counting project views")
        return stats

    # Resume

    def get_resume_data(self) -> Optional[ResumeData]:
        try:
            return self.db.get_resume()
        except SQLAlchemyError:
            logger.exception("Error fetching resume data")
            return None

    def save_resume_data(self, resume: ResumeData) -> Optional[ResumeData]:
        try:
            return self.db.upsert_resume(resume)
        except SQLAlchemyError:
            logger.exception("Error saving resume data")
            return None

    def upload_resume(
        self, data: bytes, content_type: Optional[str] = "application/pdf"
    ) -> Optional[str]:
        try:
            self.storage.remove(media.RESUMES_BUCKET, [self.resume_file_name])
        except STORAGE_ERRORS:
            logger.warning("Could not remove previous resume file", exc_info=True)
        try:
            self.storage.upload_bytes(
                media.RESUMES_BUCKET,
                self.resume_file_name,
                data,
                content_type=content_type,
            )
        except STORAGE_ERRORS:
            logger.exception("Error uploading resume")
            return None
        return self.get_resume_url()

    def get_resume_url(self) -> str:
        return self.storage.public_url(media.RESUMES_BUCKET, self.resume_file_name)


class DisabledContentStore(_BucketShortcuts):
    """
    Used when the backend is not configured. Reads are empty, writes fail
    quietly, analytics go to the local store.
    """

    configured = False

    def __init__(self, local_store: LocalStore, *, static_resume_path: str):
        self.local_store = local_store
        self.static_resume_path = static_resume_path

    def list_projects(self) -> list[Project]:
        logger.warning("Backend not configured - using static data")
        return []

    def get_project_by_slug(self, slug: str) -> Optional[Project]:
        return None

    def get_featured_projects(self) -> list[Project]:
        return []

    def create_project(self, project: ProjectCreate) -> Optional[Project]:
        return None

    def update_project(
        self, project_id: str, updates: ProjectUpdate
    ) -> Optional[Project]:
        return None

    def delete_project(self, project_id: str) -> bool:
        return False

    def submit_contact(
        self, name: str, email: str, message: Optional[str]
    ) -> ContactResult:
        logger.info(
            "Contact form submission (backend not configured): name=%s email=%s message=%r",
            name,
            email,
            message,
        )
        return ContactResult(success=True)

    def upload_file(
        self,
        filename: str,
        data: bytes,
        bucket: str,
        content_type: Optional[str] = None,
    ) -> Optional[str]:
        return None

    def delete_file(self, url: str, bucket: str) -> bool:
        return False

    def track_resume_download(self) -> bool:
        self.local_store.append(RESUME_DOWNLOADS_KEY, {"timestamp": _timestamp()})
        return True

    def track_project_view(self, project_id: str) -> bool:
        self.local_store.append(
            PROJECT_VIEWS_KEY, {"project_id": project_id, "timestamp": _timestamp()}
        )
        return True

    def get_analytics_stats(self) -> AnalyticsStats:
        return AnalyticsStats(
            resume_downloads=len(self.local_store.get_list(RESUME_DOWNLOADS_KEY)),
            project_views=len(self.local_store.get_list(PROJECT_VIEWS_KEY)),
        )

    def get_resume_data(self) -> Optional[ResumeData]:
        return None

    def save_resume_data(self, resume: ResumeData) -> Optional[ResumeData]:
        return None

    def upload_resume(
        self, data: bytes, content_type: Optional[str] = "application/pdf"
    ) -> Optional[str]:
        return None

    def get_resume_url(self) -> str:
        return self.static_resume_path


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
