"""
Import portfolio projects from a JSON file into the configured backend.

The file holds a list of project objects (title, category, description, ...).
Missing slugs are derived from titles; projects whose slug already exists are
skipped unless --update is given.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pydantic import ValidationError

from portfolio.content_store import ContentStore
from portfolio.dependencies import get_content_store
from portfolio.schemas import ProjectCreate, ProjectUpdate
from portfolio.slugs import derive_slug

logger = logging.getLogger(__name__)


def import_projects(store: ContentStore, items: list[dict], *, update: bool) -> dict:
    counts = {"created": 0, "updated": 0, "skipped": 0, "failed": 0}
    next_index = len(store.list_projects()) + 1
    for item in items:
        values = dict(item)
        values.setdefault("slug", derive_slug(values.get("title", "")))
        try:
            project = ProjectCreate(**values)
        except ValidationError as exc:
            logger.error("Invalid project %r: %s", values.get("title"), exc)
            counts["failed"] += 1
            continue

        existing = store.get_project_by_slug(project.slug)
        if existing:
            if not update:
                counts["skipped"] += 1
                continue
            result = store.update_project(
                existing.id, ProjectUpdate(**project.model_dump(exclude_unset=True))
            )
            counts["updated" if result else "failed"] += 1
            continue

        if project.order_index is None:
            project.order_index = next_index
        result = store.create_project(project)
        if result:
            next_index += 1
            counts["created"] += 1
        else:
            counts["failed"] += 1
    return counts


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Import portfolio projects from JSON.")
    parser.add_argument("path", help="JSON file containing a list of projects.")
    parser.add_argument(
        "--update",
        action="store_true",
        help="Update projects whose slug already exists instead of skipping them.",
    )
    args = parser.parse_args()

    store = get_content_store()
    if not store.configured:
        logger.error("Backend not configured; set PORTFOLIO_DATABASE_URL and storage keys.")
        return 1

    with open(args.path, "r", encoding="utf-8") as f:
        items = json.load(f)
    if not isinstance(items, list):
        logger.error("Expected a JSON list of projects in %s", args.path)
        return 1

    counts = import_projects(store, items, update=args.update)
    logger.info(
        "Imported projects: %d created, %d updated, %d skipped, %d failed",
        counts["created"],
        counts["updated"],
        counts["skipped"],
        counts["failed"],
    )
    return 0 if counts["failed"] == 0 else 2


if __name__ == "__main__":
    raise SystemExit(main())
