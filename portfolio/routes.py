"""
HTTP routes for the public site and the admin area.
"""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    HTTPException,
    Query,
    Request,
    UploadFile,
)
from fastapi.responses import RedirectResponse

from portfolio import media
from portfolio.auth import AdminSession, authenticate, create_access_token, require_admin
from portfolio.config import Settings, get_settings
from portfolio.content_store import ContentStore
from portfolio.dependencies import get_content_store
from portfolio.editors import MEDIA_SLOTS, ProjectEditor
from portfolio.hooks import ProjectsLoader
from portfolio.schemas import (
    AdminProjectsResponse,
    AnalyticsStats,
    ContactRequest,
    ContactResult,
    DeleteResponse,
    LoginRequest,
    MediaDeleteResponse,
    MediaKind,
    MediaUploadResponse,
    Project,
    ProjectCreate,
    ProjectUpdate,
    ResumeData,
    SessionResponse,
    SiteContent,
    TokenResponse,
    TrackResponse,
)
from portfolio.site_content import load_site_content
from portfolio.slugs import derive_slug

logger = logging.getLogger(__name__)

router = APIRouter()


def _media_or_none(values: dict) -> dict:
    for field_name, _ in MEDIA_SLOTS.values():
        if field_name in values and not values[field_name]:
            values[field_name] = None
    return values


@router.get("/health")
def health(store: ContentStore = Depends(get_content_store)):
    return {"status": "ok", "backend": "configured" if store.configured else "disabled"}


# Public site


@router.get("/site", response_model=SiteContent)
def site_content(
    store: ContentStore = Depends(get_content_store),
    settings: Settings = Depends(get_settings),
):
    return load_site_content(settings.static_dir, store.get_resume_url())


@router.get("/projects", response_model=list[Project])
def list_projects(store: ContentStore = Depends(get_content_store)):
    return store.list_projects()


@router.get("/projects/featured", response_model=list[Project])
def list_featured_projects(store: ContentStore = Depends(get_content_store)):
    return store.get_featured_projects()


@router.get("/projects/{slug}", response_model=Project)
def get_project(slug: str, store: ContentStore = Depends(get_content_store)):
    project = store.get_project_by_slug(slug)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/projects/{project_id}/views", response_model=TrackResponse, status_code=202)
def track_project_view(
    project_id: str,
    background_tasks: BackgroundTasks,
    store: ContentStore = Depends(get_content_store),
):
    background_tasks.add_task(store.track_project_view, project_id)
    return TrackResponse()


@router.post("/contact", response_model=ContactResult)
def submit_contact(
    payload: ContactRequest, store: ContentStore = Depends(get_content_store)
):
    return store.submit_contact(payload.name, payload.email, payload.message)


@router.get("/resume/download")
def download_resume(
    background_tasks: BackgroundTasks,
    store: ContentStore = Depends(get_content_store),
):
    """Redirect to the resume file; tracking does not affect the download."""
    background_tasks.add_task(store.track_resume_download)
    return RedirectResponse(store.get_resume_url(), status_code=307)


# Auth


@router.post("/auth/login", response_model=TokenResponse)
def login(payload: LoginRequest, settings: Settings = Depends(get_settings)):
    if not authenticate(payload.email, payload.password, settings):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return TokenResponse(access_token=create_access_token(settings.admin_email, settings))


@router.get("/auth/session", response_model=SessionResponse)
def current_session(session: AdminSession = Depends(require_admin)):
    return SessionResponse(
        email=session.email, role=session.role, expires_at=session.expires_at
    )


# Admin


@router.get("/admin/projects", response_model=AdminProjectsResponse)
def admin_projects(
    request: Request,
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    """
    Project list plus editor state driven by `?new=true` / `?edit=<id>`.
    """
    loader = ProjectsLoader(store)
    editor = ProjectEditor(store, loader)
    editor.open_from_query(request.query_params)
    return AdminProjectsResponse(
        projects=loader.projects,
        editor_open=editor.is_open,
        editing_id=editor.editing.id if editor.editing else None,
        draft=editor.form if editor.is_open else None,
    )


@router.get("/admin/slug")
def admin_slug(
    title: str = Query(..., min_length=1),
    _: AdminSession = Depends(require_admin),
):
    return {"slug": derive_slug(title)}


@router.post("/admin/projects", response_model=Project, status_code=201)
def create_project(
    payload: ProjectCreate,
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    values = _media_or_none(payload.model_dump())
    if values["order_index"] is None:
        values["order_index"] = len(store.list_projects()) + 1
    project = store.create_project(ProjectCreate(**values))
    if project is None:
        raise HTTPException(status_code=502, detail="Could not save project")
    return project


@router.put("/admin/projects/{project_id}", response_model=Project)
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    values = _media_or_none(payload.model_dump(exclude_unset=True))
    project = store.update_project(project_id, ProjectUpdate(**values))
    if project is None:
        raise HTTPException(status_code=502, detail="Could not save project")
    return project


@router.delete("/admin/projects/{project_id}", response_model=DeleteResponse)
def delete_project(
    project_id: str,
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    return DeleteResponse(deleted=store.delete_project(project_id))


@router.post("/admin/media/{kind}", response_model=MediaUploadResponse)
async def upload_media(
    kind: MediaKind,
    file: UploadFile = File(...),
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    if not file.filename:
        raise HTTPException(status_code=400, detail="File required")
    data = await file.read()
    url = store.upload_file(
        file.filename, data, media.bucket_for_kind(kind), file.content_type
    )
    if not url:
        raise HTTPException(status_code=502, detail="Upload failed")
    return MediaUploadResponse(url=url)


@router.delete("/admin/media/{kind}", response_model=MediaDeleteResponse)
def delete_media(
    kind: MediaKind,
    url: str = Query(..., min_length=1),
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    return MediaDeleteResponse(
        deleted=store.delete_file(url, media.bucket_for_kind(kind))
    )


@router.get("/admin/analytics", response_model=AnalyticsStats)
def admin_analytics(
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    return store.get_analytics_stats()


@router.get("/admin/resume", response_model=ResumeData)
def get_resume(
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    return store.get_resume_data() or ResumeData()


@router.put("/admin/resume", response_model=ResumeData)
def save_resume(
    payload: ResumeData,
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    saved = store.save_resume_data(payload)
    if saved is None:
        raise HTTPException(status_code=502, detail="Could not save resume")
    return saved


@router.post("/admin/resume/file", response_model=MediaUploadResponse)
async def upload_resume_file(
    file: UploadFile = File(...),
    store: ContentStore = Depends(get_content_store),
    _: AdminSession = Depends(require_admin),
):
    if not file.filename or not file.filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="PDF file required")
    data = await file.read()
    url = store.upload_resume(data, file.content_type or "application/pdf")
    if not url:
        raise HTTPException(status_code=502, detail="Upload failed")
    return MediaUploadResponse(url=url)
