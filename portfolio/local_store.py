"""
Local durable key/value storage used when the remote backend is not configured.

Each key holds an ordered JSON array. The file-backed store re-reads the file
on every access so a fresh instance sees what a previous one wrote.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


class LocalStore(Protocol):
    """Minimal list-valued key/value interface."""

    def get_list(self, key: str) -> list:
        ...

    def append(self, key: str, item: dict) -> None:
        ...


@dataclass
class InMemoryLocalStore:
    """Non-persistent store for tests."""

    items: dict[str, list] = field(default_factory=dict)

    def get_list(self, key: str) -> list:
        return list(self.items.get(key, []))

    def append(self, key: str, item: dict) -> None:
        self.items.setdefault(key, []).append(item)


class JsonFileLocalStore:
    """JSON document on disk mapping keys to arrays."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Unreadable local store at %s; starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get_list(self, key: str) -> list:
        value = self._read().get(key)
        return list(value) if isinstance(value, list) else []

    def append(self, key: str, item: dict) -> None:
        with self._lock:
            data = self._read()
            values = data.get(key)
            if not isinstance(values, list):
                values = []
            values.append(item)
            data[key] = values
            self._write(data)
