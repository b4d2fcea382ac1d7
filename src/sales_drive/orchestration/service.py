"""Sales file service — wires folder resolution, uploads and file passthroughs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sales_drive.graph.client import graph_client_from_config
from sales_drive.graph.directory import graph_directory_from_config
from sales_drive.storage.resolver import PathResolver
from sales_drive.storage.uploader import UploadCoordinator, UploadRequest

if TYPE_CHECKING:
    from sales_drive.config import AppConfig
    from sales_drive.graph.directory import RemoteDirectory
    from sales_drive.graph.models import DirectoryEntry

logger = logging.getLogger(__name__)


class SalesFileService:
    """Entry point for all operations on the configured sales root folder."""

    def __init__(self, directory: RemoteDirectory, root_folder_id: str) -> None:
        """Initialise the service.

        Args:
            directory: Remote directory holding the sales folders.
            root_folder_id: Id of the folder uploads are organized under and the
                default folder for listings.
        """
        self._directory = directory
        self._root_folder_id = root_folder_id
        self.resolver = PathResolver(directory)
        self.uploader = UploadCoordinator(directory, self.resolver, root_folder_id)

    def upload(self, request: UploadRequest) -> str:
        return self.uploader.upload(request)

    def list_files(self, folder_id: str | None = None) -> list[DirectoryEntry]:
        """List entries directly under folder_id (the root folder when not given).

        Entries come back in the order the store returns them.
        """
        target = folder_id or self._root_folder_id
        entries = self._directory.query(target)
        logger.info("[list_files] listed folder; folder_id:%s;count:%d", target, len(entries))
        return entries

    def download(self, file_id: str) -> bytes:
        return self._directory.get_content(file_id)

    def rename(self, file_id: str, new_name: str) -> DirectoryEntry:
        return self._directory.update(file_id, new_name)

    def delete(self, file_id: str) -> None:
        self._directory.delete(file_id)


def sales_file_service_from_config(config: AppConfig) -> SalesFileService:
    """Construct a SalesFileService from application configuration.

    Creates a GraphClient and GraphDirectory from the config, then wires
    them into a SalesFileService.

    Args:
        config: Application configuration instance.

    Returns:
        Configured SalesFileService instance.
    """
    client = graph_client_from_config(config)
    directory = graph_directory_from_config(client, config)
    return SalesFileService(directory=directory, root_folder_id=config.root_folder_id)
