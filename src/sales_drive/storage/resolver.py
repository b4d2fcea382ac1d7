"""Find-or-create resolution of folder paths in the remote directory."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from sales_drive.errors import StoreError
from sales_drive.storage.naming import validate_name

if TYPE_CHECKING:
    from sales_drive.graph.directory import RemoteDirectory

logger = logging.getLogger(__name__)


class PathResolver:
    """Resolves an ordered list of folder names to the id of the leaf folder.

    Each segment is looked up under the previous one and created when absent.
    The lookup and the create are two separate remote calls and nothing
    serializes them: two callers resolving the same new segment at the same
    time can both miss and both create, leaving two sibling folders with the
    same name. The store cannot prevent this and a process-local lock would
    not cover other instances, so the race is left in place. Later
    resolutions use the first match the store returns.
    """

    def __init__(self, directory: RemoteDirectory) -> None:
        self._directory = directory

    def resolve(self, root_id: str, segments: Sequence[str]) -> str:
        """Return the id of root_id/segments[0]/.../segments[-1], creating missing folders.

        Args:
            root_id: Id of the folder the path starts from.
            segments: Folder names in order, outermost first.

        Returns:
            Id of the leaf folder, or root_id when segments is empty.

        Raises:
            ValidationError: If any segment is blank or contains a path
                delimiter. Checked before any remote call.
            StoreError: If a remote call fails. Folders created before the
                failure are left in place.
        """
        for segment in segments:
            validate_name(segment)

        current_id = root_id
        for segment in segments:
            try:
                current_id = self._find_or_create(current_id, segment)
            except StoreError as exc:
                logger.error(
                    "[resolve] resolution stopped; parent_id:%s;segment:%s", current_id, segment
                )
                raise StoreError(exc.operation, exc.target, exc.detail, segment=segment) from exc
        return current_id

    def _find_or_create(self, parent_id: str, name: str) -> str:
        matches = self._directory.query(parent_id, name=name, folders_only=True)
        if matches:
            if len(matches) > 1:
                logger.warning(
                    "[_find_or_create] duplicate sibling folders; parent_id:%s;name:%s;ids:%s",
                    parent_id,
                    name,
                    ",".join(m.id for m in matches),
                )
            return matches[0].id

        created = self._directory.create(name, parent_id, is_folder=True)
        logger.info(
            "[_find_or_create] created missing folder; parent_id:%s;name:%s;id:%s",
            parent_id,
            name,
            created.id,
        )
        return created.id
