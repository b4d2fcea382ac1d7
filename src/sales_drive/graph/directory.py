"""Remote directory abstraction and its OneDrive (Microsoft Graph) implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, BinaryIO, Protocol
from urllib.parse import quote

from sales_drive.errors import StoreError
from sales_drive.graph.client import (
    GRAPH_BASE_URL,
    GraphApiError,
    GraphAuthError,
    GraphClient,
)
from sales_drive.graph.models import (
    FIELD_CONFLICT_BEHAVIOR,
    FIELD_FOLDER,
    FIELD_NAME,
    ODATA_NEXT_LINK,
    ODATA_VALUE,
    DirectoryEntry,
)

if TYPE_CHECKING:
    from sales_drive.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class RemoteDirectory(Protocol):
    """Hierarchical store of named, parented entries.

    The store does not enforce unique names among siblings and offers no
    compare-and-swap over creation. Implementations raise StoreError for
    every remote failure.
    """

    def query(
        self,
        parent_id: str,
        name: str | None = None,
        folders_only: bool = False,
    ) -> list[DirectoryEntry]:
        """Return non-trashed children of parent_id, optionally filtered, in store order."""
        ...

    def create(
        self,
        name: str,
        parent_id: str,
        is_folder: bool,
        content: bytes | BinaryIO | None = None,
        mime_type: str | None = None,
    ) -> DirectoryEntry: ...

    def get_content(self, entry_id: str) -> bytes: ...

    def update(self, entry_id: str, name: str) -> DirectoryEntry: ...

    def delete(self, entry_id: str) -> None: ...


def odata_literal(value: str) -> str:
    """Quote a value as an OData string literal, doubling embedded single quotes."""
    return "'" + value.replace("'", "''") + "'"


@contextmanager
def _store_call(operation: str, target: str) -> Iterator[None]:
    """Translate Graph and transport failures into StoreError."""
    try:
        yield
    except (GraphAuthError, GraphApiError) as exc:
        logger.error("[%s] graph call failed; target:%s;error:%s", operation, target, exc)
        raise StoreError(operation, target, str(exc)) from exc
    except OSError as exc:
        # URLError and socket timeouts both land here.
        logger.error("[%s] transport failure; target:%s;error:%s", operation, target, exc)
        raise StoreError(operation, target, str(exc) or type(exc).__name__) from exc


class GraphDirectory:
    """RemoteDirectory backed by a user's OneDrive through Microsoft Graph."""

    def __init__(
        self,
        graph_client: GraphClient,
        drive_user: str,
        conflict_behavior: str = "rename",
    ) -> None:
        """Initialise the Graph-backed directory.

        Args:
            graph_client: Authenticated GraphClient instance.
            drive_user: UPN or object ID of the OneDrive owner. Required with app
                permissions (client credentials flow) where /me is not available.
            conflict_behavior: Value for @microsoft.graph.conflictBehavior on creates.
                "rename" keeps every create successful when a same-named sibling
                exists; "fail" surfaces the conflict as a StoreError.
        """
        self._graph = graph_client
        self._drive_user = drive_user
        self._conflict_behavior = conflict_behavior

    def _item_path(self, entry_id: str) -> str:
        return f"/users/{self._drive_user}/drive/items/{quote(entry_id, safe='!')}"

    @staticmethod
    def _relative_path(full_url: str) -> str:
        """Convert a full Graph API URL to a relative path for GraphClient.get()."""
        if full_url.startswith(GRAPH_BASE_URL):
            return full_url[len(GRAPH_BASE_URL) :]
        return full_url

    def query(
        self,
        parent_id: str,
        name: str | None = None,
        folders_only: bool = False,
    ) -> list[DirectoryEntry]:
        """List children of a folder, following @odata.nextLink pagination.

        The name predicate is sent as an OData $filter and re-checked locally
        for an exact, case-sensitive match. Items with a deleted facet are
        treated as trashed and skipped.
        """
        path = f"{self._item_path(parent_id)}/children"
        if name is not None:
            predicate = f"{FIELD_NAME} eq {odata_literal(name)}"
            path = f"{path}?$filter={quote(predicate, safe='')}"

        entries: list[DirectoryEntry] = []
        next_path: str | None = path
        with _store_call("query", parent_id if name is None else f"{parent_id}/{name}"):
            while next_path is not None:
                response = self._graph.get(next_path)
                for raw in response.get(ODATA_VALUE, []):
                    entry = DirectoryEntry.from_graph(raw)
                    if entry.is_deleted:
                        continue
                    if folders_only and not entry.is_folder:
                        continue
                    if name is not None and entry.name != name:
                        continue
                    entries.append(entry)
                next_link = response.get(ODATA_NEXT_LINK)
                next_path = self._relative_path(next_link) if next_link else None
        return entries

    def create(
        self,
        name: str,
        parent_id: str,
        is_folder: bool,
        content: bytes | BinaryIO | None = None,
        mime_type: str | None = None,
    ) -> DirectoryEntry:
        """Create a folder, or upload a file in a single request.

        Files go through the simple upload endpoint (PUT .../content).
        """
        if is_folder:
            payload = {
                FIELD_NAME: name,
                FIELD_FOLDER: {},
                FIELD_CONFLICT_BEHAVIOR: self._conflict_behavior,
            }
            with _store_call("create_folder", f"{parent_id}/{name}"):
                raw = self._graph.post_json(f"{self._item_path(parent_id)}/children", payload)
            entry = DirectoryEntry.from_graph(raw)
            logger.info(
                "[create] created folder; parent_id:%s;name:%s;id:%s", parent_id, name, entry.id
            )
            return entry

        if content is None:
            data = b""
        elif isinstance(content, bytes):
            data = content
        else:
            data = content.read()
        path = (
            f"{self._item_path(parent_id)}:/{quote(name, safe='')}:/content"
            f"?{FIELD_CONFLICT_BEHAVIOR}={self._conflict_behavior}"
        )
        with _store_call("create_file", f"{parent_id}/{name}"):
            raw = self._graph.put_content(path, data, mime_type or DEFAULT_CONTENT_TYPE)
        entry = DirectoryEntry.from_graph(raw)
        logger.info(
            "[create] uploaded file; parent_id:%s;name:%s;id:%s;bytes:%d",
            parent_id,
            name,
            entry.id,
            len(data),
        )
        return entry

    def get_content(self, entry_id: str) -> bytes:
        with _store_call("get_content", entry_id):
            return self._graph.get_content(f"{self._item_path(entry_id)}/content")

    def update(self, entry_id: str, name: str) -> DirectoryEntry:
        with _store_call("update", entry_id):
            raw = self._graph.patch_json(self._item_path(entry_id), {FIELD_NAME: name})
        logger.info("[update] renamed entry; id:%s;name:%s", entry_id, name)
        return DirectoryEntry.from_graph(raw)

    def delete(self, entry_id: str) -> None:
        with _store_call("delete", entry_id):
            self._graph.delete(self._item_path(entry_id))
        logger.info("[delete] deleted entry; id:%s", entry_id)


def graph_directory_from_config(graph_client: GraphClient, config: AppConfig) -> GraphDirectory:
    """Construct a GraphDirectory from application configuration.

    Args:
        graph_client: Authenticated GraphClient instance.
        config: Application configuration instance.

    Returns:
        Configured GraphDirectory instance.
    """
    return GraphDirectory(
        graph_client=graph_client,
        drive_user=config.drive_user,
        conflict_behavior=config.conflict_behavior,
    )
