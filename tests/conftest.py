"""Pytest configuration — adds src/ to sys.path and provides an in-memory directory."""

import itertools
import os
import sys
from collections.abc import Callable
from typing import BinaryIO

import pytest

# Add src/ to Python path so tests can import from sales_drive
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from sales_drive.graph.models import DirectoryEntry  # noqa: E402


class InMemoryDirectory:
    """RemoteDirectory fake: keeps entries in insertion order, allows duplicate names.

    Every call is recorded in ``calls`` as ``(operation, args)``. ``on_query``
    runs after each query has been answered, which lets tests interleave
    concurrent callers between the lookup and the create.
    """

    def __init__(self) -> None:
        self.entries: dict[str, DirectoryEntry] = {}
        self.contents: dict[str, bytes] = {}
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.on_query: Callable[[str, str | None], None] | None = None
        self._ids = itertools.count(1)

    def add_folder(self, name: str, parent_id: str) -> DirectoryEntry:
        entry = DirectoryEntry(
            id=f"seed-{next(self._ids)}", name=name, is_folder=True, parent_id=parent_id
        )
        self.entries[entry.id] = entry
        return entry

    def folders(
        self, parent_id: str | None = None, name: str | None = None
    ) -> list[DirectoryEntry]:
        return [
            e
            for e in self.entries.values()
            if e.is_folder
            and (parent_id is None or e.parent_id == parent_id)
            and (name is None or e.name == name)
        ]

    def created(self) -> list[tuple[object, ...]]:
        return [args for op, args in self.calls if op == "create"]

    def query(
        self,
        parent_id: str,
        name: str | None = None,
        folders_only: bool = False,
    ) -> list[DirectoryEntry]:
        self.calls.append(("query", (parent_id, name, folders_only)))
        result = [
            e
            for e in self.entries.values()
            if e.parent_id == parent_id
            and (name is None or e.name == name)
            and (not folders_only or e.is_folder)
        ]
        if self.on_query is not None:
            self.on_query(parent_id, name)
        return result

    def create(
        self,
        name: str,
        parent_id: str,
        is_folder: bool,
        content: bytes | BinaryIO | None = None,
        mime_type: str | None = None,
    ) -> DirectoryEntry:
        self.calls.append(("create", (name, parent_id, is_folder)))
        entry = DirectoryEntry(
            id=f"id-{next(self._ids)}",
            name=name,
            is_folder=is_folder,
            parent_id=parent_id,
            mime_type=mime_type,
        )
        self.entries[entry.id] = entry
        if not is_folder:
            data = content if isinstance(content, bytes) or content is None else content.read()
            self.contents[entry.id] = data or b""
        return entry

    def get_content(self, entry_id: str) -> bytes:
        self.calls.append(("get_content", (entry_id,)))
        return self.contents[entry_id]

    def update(self, entry_id: str, name: str) -> DirectoryEntry:
        self.calls.append(("update", (entry_id, name)))
        old = self.entries[entry_id]
        entry = DirectoryEntry(
            id=old.id, name=name, is_folder=old.is_folder, parent_id=old.parent_id
        )
        self.entries[entry_id] = entry
        return entry

    def delete(self, entry_id: str) -> None:
        self.calls.append(("delete", (entry_id,)))
        del self.entries[entry_id]
        self.contents.pop(entry_id, None)


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory()
