"""
Pydantic schemas for portfolio entities and API payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio.slugs import RESERVED_SLUGS

EventType = Literal["resume_download", "project_view"]
Proficiency = Literal["Native", "Fluent", "Advanced", "Intermediate", "Basic"]
MediaKind = Literal["image", "video", "document"]


class CaseStudy(BaseModel):
    problem: str = ""
    process: list[str] = Field(default_factory=list)
    solution: str = ""
    results: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)


class ProjectBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200)
    category: str = ""
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    pdf_url: Optional[str] = None
    description: Optional[str] = None
    case_study: Optional[CaseStudy] = None
    is_featured: bool = False
    order_index: Optional[int] = None


def _check_slug(value: Optional[str]) -> Optional[str]:
    if value is not None and value.lower() in RESERVED_SLUGS:
        raise ValueError(f"slug '{value}' is reserved")
    return value


class ProjectCreate(ProjectBase):
    @field_validator("slug")
    @classmethod
    def slug_not_reserved(cls, value: Optional[str]) -> Optional[str]:
        return _check_slug(value)


class ProjectUpdate(BaseModel):
    """Partial update; unset fields are left untouched."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    pdf_url: Optional[str] = None
    description: Optional[str] = None
    case_study: Optional[CaseStudy] = None
    is_featured: Optional[bool] = None
    order_index: Optional[int] = None

    @field_validator("slug")
    @classmethod
    def slug_not_reserved(cls, value: Optional[str]) -> Optional[str]:
        return _check_slug(value)


class Project(ProjectBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    message: Optional[str] = Field(default=None, max_length=5000)


class ContactResult(BaseModel):
    success: bool
    error: Optional[str] = None


class AnalyticsEvent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_type: EventType
    project_id: Optional[str] = None
    created_at: datetime


class AnalyticsStats(BaseModel):
    resume_downloads: int = 0
    project_views: int = 0


class PersonalInfo(BaseModel):
    name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    website: str = ""
    linkedin: str = ""
    portfolio: str = ""


class ResumeExperience(BaseModel):
    id: str
    job_title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    responsibilities: list[str] = Field(default_factory=list)


class Education(BaseModel):
    id: str
    degree: str = ""
    field_of_study: str = ""
    institution: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: Optional[str] = None
    achievements: list[str] = Field(default_factory=list)


class ResumeSkill(BaseModel):
    id: str
    category: str = ""
    skills: list[str] = Field(default_factory=list)


class Certification(BaseModel):
    id: str
    name: str = ""
    issuer: str = ""
    date: str = ""
    credential_id: Optional[str] = None
    url: Optional[str] = None


class Language(BaseModel):
    id: str
    name: str = ""
    proficiency: Proficiency = "Intermediate"


class ResumeData(BaseModel):
    id: Optional[str] = None
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    experience: list[ResumeExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[ResumeSkill] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    languages: list[Language] = Field(default_factory=list)
    updated_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SessionResponse(BaseModel):
    email: str
    role: str
    expires_at: datetime


class MediaUploadResponse(BaseModel):
    url: str


class MediaDeleteResponse(BaseModel):
    deleted: bool


class DeleteResponse(BaseModel):
    deleted: bool


class TrackResponse(BaseModel):
    status: Literal["accepted"] = "accepted"


class ProjectDraft(BaseModel):
    title: str = ""
    slug: str = ""
    category: str = ""
    description: str = ""
    is_featured: bool = False
    thumbnail_url: str = ""
    video_url: str = ""
    pdf_url: str = ""


class AdminProjectsResponse(BaseModel):
    projects: list[Project]
    editor_open: bool = False
    editing_id: Optional[str] = None
    draft: Optional[ProjectDraft] = None


class ShowcaseProject(BaseModel):
    title: str
    category: str
    description: str
    thumbnail: str
    pdf_url: Optional[str] = None


class SiteContent(BaseModel):
    personal_info: PersonalInfo
    tagline: str
    showcase: list[ShowcaseProject]
    resume_url: str
