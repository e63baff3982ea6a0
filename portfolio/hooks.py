"""
Fetch-on-mount loaders exposing `data`, `loading` and `refetch()`.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from portfolio.content_store import ContentStore
from portfolio.schemas import Project

T = TypeVar("T")


class EntityLoader(Generic[T]):
    """
    Runs `fetch` once on construction and again on every `refetch()`.

    Nothing is cached and mutations are never applied locally; callers
    refetch after each write to see the latest state.
    """

    def __init__(self, fetch: Callable[[], T], initial: T):
        self._fetch = fetch
        self.data: T = initial
        self.loading = True
        self.refetch()

    def refetch(self) -> T:
        self.loading = True
        try:
            self.data = self._fetch()
        finally:
            self.loading = False
        return self.data


class ProjectsLoader(EntityLoader[list[Project]]):
    def __init__(self, store: ContentStore):
        super().__init__(store.list_projects, [])

    @property
    def projects(self) -> list[Project]:
        return self.data
