"""
Helpers for naming uploaded media and mapping public URLs back to object names.
"""

from __future__ import annotations

import random
import string
import time
from typing import Optional
from urllib.parse import unquote, urlparse

from portfolio.schemas import MediaKind

IMAGES_BUCKET = "project-images"
VIDEOS_BUCKET = "project-videos"
DOCUMENTS_BUCKET = "project-documents"
RESUMES_BUCKET = "resumes"

BUCKETS_BY_KIND: dict[str, str] = {
    "image": IMAGES_BUCKET,
    "video": VIDEOS_BUCKET,
    "document": DOCUMENTS_BUCKET,
}

UPLOAD_CACHE_CONTROL = "max-age=3600"

_BASE36 = string.digits + string.ascii_lowercase


def bucket_for_kind(kind: MediaKind) -> str:
    return BUCKETS_BY_KIND[kind]


def random_suffix(length: int = 6, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.SystemRandom()
    return "".join(rng.choice(_BASE36) for _ in range(length))


def file_extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def generate_file_name(
    original_name: str,
    *,
    now: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Build `<epoch-millis>-<base36 suffix>.<ext>` for an upload.

    Collisions are not checked; the timestamp plus suffix is assumed unique.
    """
    millis = int((time.time() if now is None else now) * 1000)
    name = f"{millis}-{random_suffix(rng=rng)}"
    ext = file_extension(original_name or "")
    return f"{name}.{ext}" if ext else name


def file_name_from_url(url: str) -> Optional[str]:
    """Return the trailing path segment of a public URL, or None if empty."""
    if not url:
        return None
    path = urlparse(url).path
    name = unquote(path.rsplit("/", 1)[-1])
    return name or None
