"""
Static site content served independently of the managed backend.

Defaults can be overridden by a `site.json` file in the static directory.
"""

from __future__ import annotations

import json
import logging
import os

from pydantic import ValidationError

from portfolio.schemas import PersonalInfo, ShowcaseProject, SiteContent

logger = logging.getLogger(__name__)

SITE_CONTENT_FILE = "site.json"

DEFAULT_PERSONAL_INFO = PersonalInfo(
    name="Portfolio Owner",
    title="Brand & Marketing Designer",
    email="hello@example.com",
    location="Remote",
)

DEFAULT_TAGLINE = (
    "Designing clear, consistent, and high-impact visuals for brands, "
    "campaigns, and content-heavy projects."
)


def load_site_content(static_dir: str, resume_url: str) -> SiteContent:
    path = os.path.join(static_dir, SITE_CONTENT_FILE)
    overrides: dict = {}
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                overrides = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.exception("Could not read %s; using defaults", path)
            overrides = {}
    if not isinstance(overrides, dict):
        logger.warning("Expected a JSON object in %s; using defaults", path)
        overrides = {}

    try:
        personal_info = PersonalInfo(
            **{**DEFAULT_PERSONAL_INFO.model_dump(), **overrides.get("personal_info", {})}
        )
        showcase = [
            ShowcaseProject(**item) for item in overrides.get("showcase", [])
        ]
    except (TypeError, ValidationError):
        logger.exception("Invalid site content in %s; using defaults", path)
        personal_info, showcase = DEFAULT_PERSONAL_INFO, []

    tagline = overrides.get("tagline")
    return SiteContent(
        personal_info=personal_info,
        tagline=tagline if isinstance(tagline, str) and tagline else DEFAULT_TAGLINE,
        showcase=showcase,
        resume_url=resume_url,
    )
