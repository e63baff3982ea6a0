"""
SQLAlchemy-backed table access for projects, contacts, analytics and resume data.

Methods here raise on failure; the content store decides how failures map
to the sentinel results the site expects.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    create_engine,
    delete,
    func,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio.schemas import (
    CaseStudy,
    EventType,
    Project,
    ProjectCreate,
    ResumeData,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class DbClient(Protocol):
    """Interface for table access."""

    def list_projects(self, *, featured_only: bool = False) -> list[Project]:
        ...

    def get_project_by_slug(self, slug: str) -> Optional[Project]:
        ...

    def get_project(self, project_id: str) -> Optional[Project]:
        ...

    def insert_project(self, project: ProjectCreate) -> Project:
        ...

    def update_project(self, project_id: str, updates: dict) -> Optional[Project]:
        ...

    def delete_project(self, project_id: str) -> None:
        ...

    def insert_contact(self, name: str, email: str, message: Optional[str]) -> str:
        ...

    def insert_event(
        self, event_type: EventType, project_id: Optional[str] = None
    ) -> str:
        ...

    def count_events(self, event_type: EventType) -> int:
        ...

    def get_resume(self) -> Optional[ResumeData]:
        ...

    def upsert_resume(self, resume: ResumeData) -> ResumeData:
        ...


class SqlDbClient:
    """
    Accepts any SQLAlchemy URL (Postgres in production, SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("database_url is required for SqlDbClient")
        engine_kwargs: dict = {"future": True, "pool_pre_ping": True}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # Share one connection so every thread sees the same database.
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_recycle"] = 1800
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError:
            # Queries fail later and are mapped to empty results by the caller.
            logger.exception("Could not create tables at %s", self.engine.url)

    def _to_project(self, row: "ProjectRow") -> Project:
        return Project(
            id=row.id,
            title=row.title,
            slug=row.slug,
            category=row.category or "",
            thumbnail_url=row.thumbnail_url,
            video_url=row.video_url,
            pdf_url=row.pdf_url,
            description=row.description,
            case_study=CaseStudy(**row.case_study) if row.case_study else None,
            is_featured=bool(row.is_featured),
            order_index=row.order_index,
            created_at=row.created_at,
        )

    def list_projects(self, *, featured_only: bool = False) -> list[Project]:
        stmt = select(ProjectRow)
        if featured_only:
            stmt = stmt.where(ProjectRow.is_featured.is_(True))
        # Nulls sort last; ties keep whatever order the database returns.
        stmt = stmt.order_by(
            ProjectRow.order_index.is_(None), ProjectRow.order_index.asc()
        )
        with self.Session() as session:
            rows = session.execute(stmt).scalars().all()
            return [self._to_project(row) for row in rows]

    def get_project_by_slug(self, slug: str) -> Optional[Project]:
        with self.Session() as session:
            row = session.execute(
                select(ProjectRow).where(ProjectRow.slug == slug)
            ).scalar_one_or_none()
            return self._to_project(row) if row else None

    def get_project(self, project_id: str) -> Optional[Project]:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            return self._to_project(row) if row else None

    def insert_project(self, project: ProjectCreate) -> Project:
        payload = project.model_dump()
        with self.Session() as session:
            row = ProjectRow(id=_new_id(), created_at=_utcnow(), **payload)
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_project(row)

    def update_project(self, project_id: str, updates: dict) -> Optional[Project]:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return None
            for key, value in updates.items():
                setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_project(row)

    def delete_project(self, project_id: str) -> None:
        with self.Session() as session:
            session.execute(delete(ProjectRow).where(ProjectRow.id == project_id))
            session.commit()

    def insert_contact(self, name: str, email: str, message: Optional[str]) -> str:
        contact_id = _new_id()
        with self.Session() as session:
            session.add(
                ContactRow(
                    id=contact_id,
                    name=name,
                    email=email,
                    message=message,
                    created_at=_utcnow(),
                )
            )
            session.commit()
        return contact_id

    def insert_event(
        self, event_type: EventType, project_id: Optional[str] = None
    ) -> str:
        event_id = _new_id()
        with self.Session() as session:
            session.add(
                AnalyticsRow(
                    id=event_id,
                    event_type=event_type,
                    project_id=project_id,
                    created_at=_utcnow(),
                )
            )
            session.commit()
        return event_id

    def count_events(self, event_type: EventType) -> int:
        with self.Session() as session:
            stmt = (
                select(func.count())
                .select_from(AnalyticsRow)
                .where(AnalyticsRow.event_type == event_type)
            )
            return int(session.execute(stmt).scalar_one())

    def get_resume(self) -> Optional[ResumeData]:
        with self.Session() as session:
            row = session.execute(
                select(ResumeRow).order_by(ResumeRow.updated_at.desc()).limit(1)
            ).scalar_one_or_none()
            if not row:
                return None
            return ResumeData(**row.data, id=row.id, updated_at=row.updated_at)

    def upsert_resume(self, resume: ResumeData) -> ResumeData:
        data = resume.model_dump(mode="json", exclude={"id", "updated_at"})
        now = _utcnow()
        with self.Session() as session:
            row = None
            if resume.id:
                row = session.get(ResumeRow, resume.id)
            if row is None:
                row = session.execute(select(ResumeRow).limit(1)).scalar_one_or_none()
            if row:
                row.data = data
                row.updated_at = now
            else:
                row = ResumeRow(id=_new_id(), data=data, updated_at=now)
                session.add(row)
            session.commit()
            session.refresh(row)
            return ResumeData(**row.data, id=row.id, updated_at=row.updated_at)


Base = declarative_base()


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    category = Column(String, nullable=False, default="")
    thumbnail_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    pdf_url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    case_study = Column(JSON, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    order_index = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class ContactRow(Base):
    __tablename__ = "contacts"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class AnalyticsRow(Base):
    __tablename__ = "analytics"

    id = Column(String, primary_key=True)
    event_type = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class ResumeRow(Base):
    __tablename__ = "resume_data"

    id = Column(String, primary_key=True)
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
