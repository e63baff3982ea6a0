"""
Admin editors holding draft state for a project or the resume document.

Nothing reaches the backend until `submit()` / `save()`, except media
uploads and removals which go straight to storage.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Mapping, Optional, TypeVar

from pydantic import BaseModel

from portfolio import media
from portfolio.content_store import ContentStore
from portfolio.hooks import ProjectsLoader
from portfolio.schemas import (
    Certification,
    Education,
    Language,
    Project,
    ProjectCreate,
    ProjectDraft,
    ProjectUpdate,
    ResumeData,
    ResumeExperience,
    ResumeSkill,
)
from portfolio.slugs import derive_slug

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

# slot -> (form field, media kind)
MEDIA_SLOTS: dict[str, tuple[str, str]] = {
    "thumbnail": ("thumbnail_url", "image"),
    "video": ("video_url", "video"),
    "pdf": ("pdf_url", "document"),
}


class ProjectEditor:
    """Draft form for creating or editing one project at a time."""

    def __init__(self, store: ContentStore, loader: ProjectsLoader):
        self.store = store
        self.loader = loader
        self.is_open = False
        self.editing: Optional[Project] = None
        self.form = ProjectDraft()
        self.previews: dict[str, Optional[str]] = {slot: None for slot in MEDIA_SLOTS}

    def open_new(self) -> None:
        self.editing = None
        self.form = ProjectDraft()
        self.previews = {slot: None for slot in MEDIA_SLOTS}
        self.is_open = True

    def open_edit(self, project: Project) -> None:
        self.editing = project
        self.form = ProjectDraft(
            title=project.title,
            slug=project.slug,
            category=project.category,
            description=project.description or "",
            is_featured=project.is_featured,
            thumbnail_url=project.thumbnail_url or "",
            video_url=project.video_url or "",
            pdf_url=project.pdf_url or "",
        )
        self.previews = {
            "thumbnail": project.thumbnail_url,
            "video": project.video_url,
            "pdf": project.pdf_url,
        }
        self.is_open = True

    def open_from_query(self, params: Mapping[str, str]) -> bool:
        """Honour `?new=true` and `?edit=<id>`; returns whether the editor opened."""
        if params.get("new") == "true":
            self.open_new()
        edit_id = params.get("edit")
        if edit_id:
            project = next(
                (p for p in self.loader.projects if p.id == edit_id), None
            )
            if project:
                self.open_edit(project)
        return self.is_open

    def close(self) -> None:
        self.is_open = False
        self.editing = None
        self.form = ProjectDraft()
        self.previews = {slot: None for slot in MEDIA_SLOTS}

    def set_title(self, title: str) -> None:
        self.form.title = title
        # Slug follows the title only for new projects.
        if title and self.editing is None:
            self.form.slug = derive_slug(title)

    def set_field(self, name: str, value: Any) -> None:
        if name == "title":
            self.set_title(value)
            return
        if name not in ProjectDraft.model_fields:
            raise KeyError(f"Unknown project field: {name}")
        setattr(self.form, name, value)

    def upload_media(
        self,
        slot: str,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> Optional[str]:
        field_name, kind = MEDIA_SLOTS[slot]
        url = self.store.upload_file(
            filename, data, media.bucket_for_kind(kind), content_type
        )
        if url:
            self.previews[slot] = url
            setattr(self.form, field_name, url)
        return url

    def remove_media(self, slot: str) -> bool:
        field_name, kind = MEDIA_SLOTS[slot]
        preview = self.previews.get(slot)
        if not preview:
            return False
        deleted = self.store.delete_file(preview, media.bucket_for_kind(kind))
        self.previews[slot] = None
        setattr(self.form, field_name, "")
        return deleted

    def upload_thumbnail(self, filename: str, data: bytes, content_type: Optional[str] = None):
        return self.upload_media("thumbnail", filename, data, content_type)

    def upload_video(self, filename: str, data: bytes, content_type: Optional[str] = None):
        return self.upload_media("video", filename, data, content_type)

    def upload_pdf(self, filename: str, data: bytes, content_type: Optional[str] = None):
        return self.upload_media("pdf", filename, data, content_type)

    def remove_thumbnail(self) -> bool:
        return self.remove_media("thumbnail")

    def remove_video(self) -> bool:
        return self.remove_media("video")

    def remove_pdf(self) -> bool:
        return self.remove_media("pdf")

    def _payload(self) -> dict:
        payload = self.form.model_dump()
        for field_name, _ in MEDIA_SLOTS.values():
            payload[field_name] = payload[field_name] or None
        return payload

    def submit(self) -> Optional[Project]:
        """
        Create or update from the draft, refetch the list and close.

        Raises pydantic.ValidationError when the draft is incomplete; the
        editor then stays open.
        """
        payload = self._payload()
        if self.editing is not None:
            result = self.store.update_project(
                self.editing.id, ProjectUpdate(**payload)
            )
        else:
            result = self.store.create_project(
                ProjectCreate(
                    **payload,
                    case_study=None,
                    order_index=len(self.loader.projects) + 1,
                )
            )
        if result is None:
            logger.error("Saving project %s failed", payload.get("slug"))
        self.loader.refetch()
        self.close()
        return result

    def delete(self, project_id: str) -> bool:
        deleted = self.store.delete_project(project_id)
        self.loader.refetch()
        return deleted


def new_id() -> str:
    return uuid.uuid4().hex


def replace_at(items: list[T], index: int, item: T) -> list[T]:
    return [item if i == index else existing for i, existing in enumerate(items)]


def append_item(items: list[T], item: T) -> list[T]:
    return [*items, item]


def remove_at(items: list[T], index: int) -> list[T]:
    return [existing for i, existing in enumerate(items) if i != index]


def with_field(model: M, field: str, value: Any) -> M:
    """Copy of `model` with one field replaced, re-validated."""
    if field not in type(model).model_fields or field == "id":
        raise KeyError(f"Unknown field for {type(model).__name__}: {field}")
    return type(model).model_validate({**model.model_dump(), field: value})


def empty_resume() -> ResumeData:
    return ResumeData()


class ResumeEditor:
    """Draft of the single resume document."""

    def __init__(self, store: ContentStore):
        self.store = store
        self.draft = empty_resume()
        self.loading = False

    def load(self) -> ResumeData:
        self.loading = True
        try:
            data = self.store.get_resume_data()
            self.draft = data if data is not None else empty_resume()
        finally:
            self.loading = False
        return self.draft

    def save(self) -> Optional[ResumeData]:
        saved = self.store.save_resume_data(self.draft)
        if saved is not None:
            self.draft = saved
        return saved

    def _set(self, collection: str, items: list) -> None:
        self.draft = self.draft.model_copy(update={collection: items})

    def _update_entry(
        self, collection: str, index: int, change: Callable[[BaseModel], BaseModel]
    ) -> None:
        items = getattr(self.draft, collection)
        self._set(collection, replace_at(items, index, change(items[index])))

    def _edit_strings(
        self,
        collection: str,
        index: int,
        list_field: str,
        change: Callable[[list[str]], list[str]],
    ) -> None:
        def apply(entry: BaseModel) -> BaseModel:
            return entry.model_copy(
                update={list_field: change(getattr(entry, list_field))}
            )

        self._update_entry(collection, index, apply)

    # Personal info and summary

    def update_personal_info(self, field: str, value: str) -> None:
        info = with_field(self.draft.personal_info, field, value)
        self.draft = self.draft.model_copy(update={"personal_info": info})

    def set_summary(self, summary: str) -> None:
        self.draft = self.draft.model_copy(update={"summary": summary})

    # Experience

    def add_experience(self) -> ResumeExperience:
        entry = ResumeExperience(id=new_id(), responsibilities=[""])
        self._set("experience", append_item(self.draft.experience, entry))
        return entry

    def update_experience(self, index: int, field: str, value: Any) -> None:
        self._update_entry(
            "experience", index, lambda e: with_field(e, field, value)
        )

    def remove_experience(self, index: int) -> None:
        self._set("experience", remove_at(self.draft.experience, index))

    def add_responsibility(self, exp_index: int) -> None:
        self._edit_strings(
            "experience", exp_index, "responsibilities", lambda r: append_item(r, "")
        )

    def update_responsibility(self, exp_index: int, resp_index: int, value: str) -> None:
        self._edit_strings(
            "experience",
            exp_index,
            "responsibilities",
            lambda r: replace_at(r, resp_index, value),
        )

    def remove_responsibility(self, exp_index: int, resp_index: int) -> None:
        self._edit_strings(
            "experience",
            exp_index,
            "responsibilities",
            lambda r: remove_at(r, resp_index),
        )

    # Education

    def add_education(self) -> Education:
        entry = Education(id=new_id(), gpa="", achievements=[""])
        self._set("education", append_item(self.draft.education, entry))
        return entry

    def update_education(self, index: int, field: str, value: Any) -> None:
        self._update_entry("education", index, lambda e: with_field(e, field, value))

    def remove_education(self, index: int) -> None:
        self._set("education", remove_at(self.draft.education, index))

    def add_achievement(self, edu_index: int) -> None:
        self._edit_strings(
            "education", edu_index, "achievements", lambda a: append_item(a, "")
        )

    def update_achievement(self, edu_index: int, ach_index: int, value: str) -> None:
        self._edit_strings(
            "education",
            edu_index,
            "achievements",
            lambda a: replace_at(a, ach_index, value),
        )

    def remove_achievement(self, edu_index: int, ach_index: int) -> None:
        self._edit_strings(
            "education", edu_index, "achievements", lambda a: remove_at(a, ach_index)
        )

    # Skills

    def add_skill_category(self) -> ResumeSkill:
        entry = ResumeSkill(id=new_id(), skills=[""])
        self._set("skills", append_item(self.draft.skills, entry))
        return entry

    def update_skill_category(self, index: int, field: str, value: Any) -> None:
        self._update_entry("skills", index, lambda e: with_field(e, field, value))

    def remove_skill_category(self, index: int) -> None:
        self._set("skills", remove_at(self.draft.skills, index))

    def add_skill_to_category(self, cat_index: int) -> None:
        self._edit_strings("skills", cat_index, "skills", lambda s: append_item(s, ""))

    def update_skill_in_category(
        self, cat_index: int, skill_index: int, value: str
    ) -> None:
        self._edit_strings(
            "skills", cat_index, "skills", lambda s: replace_at(s, skill_index, value)
        )

    def remove_skill_from_category(self, cat_index: int, skill_index: int) -> None:
        self._edit_strings(
            "skills", cat_index, "skills", lambda s: remove_at(s, skill_index)
        )

    # Certifications

    def add_certification(self) -> Certification:
        entry = Certification(id=new_id(), credential_id="", url="")
        self._set("certifications", append_item(self.draft.certifications, entry))
        return entry

    def update_certification(self, index: int, field: str, value: Any) -> None:
        self._update_entry(
            "certifications", index, lambda e: with_field(e, field, value)
        )

    def remove_certification(self, index: int) -> None:
        self._set("certifications", remove_at(self.draft.certifications, index))

    # Languages

    def add_language(self) -> Language:
        entry = Language(id=new_id())
        self._set("languages", append_item(self.draft.languages, entry))
        return entry

    def update_language(self, index: int, field: str, value: Any) -> None:
        self._update_entry("languages", index, lambda e: with_field(e, field, value))

    def remove_language(self, index: int) -> None:
        self._set("languages", remove_at(self.draft.languages, index))
