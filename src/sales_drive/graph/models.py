"""Data models for Microsoft Graph drive items."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

# Graph API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_FOLDER = "folder"
FIELD_FILE = "file"
FIELD_MIME_TYPE = "mimeType"
FIELD_SIZE = "size"
FIELD_DELETED = "deleted"
FIELD_PARENT_REFERENCE = "parentReference"
FIELD_CREATED = "createdDateTime"
FIELD_MODIFIED = "lastModifiedDateTime"
FIELD_WEB_URL = "webUrl"
FIELD_DOWNLOAD_URL = "@microsoft.graph.downloadUrl"
FIELD_CONFLICT_BEHAVIOR = "@microsoft.graph.conflictBehavior"

# OData response keys
ODATA_NEXT_LINK = "@odata.nextLink"
ODATA_VALUE = "value"


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _epoch_millis(value: datetime | None) -> int | None:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


@dataclass(frozen=True)
class DirectoryEntry:
    """A file or folder in the remote store.

    ``id`` is assigned by the store and never changes. ``name`` is not unique
    among siblings: two entries under the same parent may share a name.
    """

    id: str
    name: str
    is_folder: bool
    parent_id: str
    created_time: datetime | None = None
    modified_time: datetime | None = None
    size: int | None = None
    mime_type: str | None = None
    web_view_link: str | None = None
    web_content_link: str | None = None
    is_deleted: bool = False

    @classmethod
    def from_graph(cls, raw: dict[str, Any]) -> DirectoryEntry:
        """Map a raw Graph API drive item dict to a DirectoryEntry."""
        parent_ref = raw.get(FIELD_PARENT_REFERENCE, {})
        file_facet = raw.get(FIELD_FILE) or {}
        return cls(
            id=raw.get(FIELD_ID, ""),
            name=raw.get(FIELD_NAME, ""),
            is_folder=FIELD_FOLDER in raw,
            parent_id=parent_ref.get(FIELD_ID, ""),
            created_time=_parse_timestamp(raw.get(FIELD_CREATED)),
            modified_time=_parse_timestamp(raw.get(FIELD_MODIFIED)),
            size=raw.get(FIELD_SIZE),
            mime_type=file_facet.get(FIELD_MIME_TYPE),
            web_view_link=raw.get(FIELD_WEB_URL),
            web_content_link=raw.get(FIELD_DOWNLOAD_URL),
            is_deleted=FIELD_DELETED in raw,
        )

    def to_listing(self) -> dict[str, Any]:
        """Serialize for the listing endpoint, with timestamps as epoch milliseconds."""
        return {
            "id": self.id,
            "name": self.name,
            "mimeType": self.mime_type,
            "size": self.size,
            "webContentLink": self.web_content_link,
            "webViewLink": self.web_view_link,
            "createdTime": _epoch_millis(self.created_time),
            "modifiedTime": _epoch_millis(self.modified_time),
        }
