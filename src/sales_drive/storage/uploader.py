"""Upload coordination: validate, resolve the target folder, store the file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO

from sales_drive.errors import ValidationError
from sales_drive.storage.naming import destination_file_name, is_csv_upload, month_name

if TYPE_CHECKING:
    from sales_drive.graph.directory import RemoteDirectory
    from sales_drive.storage.resolver import PathResolver

logger = logging.getLogger(__name__)


@dataclass
class UploadRequest:
    """Parameters of a single sales data upload.

    Attributes:
        content: File bytes or a readable binary stream.
        content_type: Media type declared by the client (e.g. "text/csv").
        original_filename: File name as sent by the client.
        month_number: Month as "01".."12" or 1..12.
        market: Market name (e.g. "Amazon").
        country: Country code (e.g. "US").
        brand: Brand name (e.g. "Bryco").
        from_date: Start of the data range, used verbatim in the file name.
        to_date: End of the data range, used verbatim in the file name.
    """

    content: bytes | BinaryIO
    content_type: str | None
    original_filename: str | None
    month_number: str | int
    market: str
    country: str
    brand: str
    from_date: str
    to_date: str


class UploadCoordinator:
    """Stores sales files under root / Month / Market / Country."""

    def __init__(self, directory: RemoteDirectory, resolver: PathResolver, root_id: str) -> None:
        """Initialise the coordinator.

        Args:
            directory: Remote directory the file is written to.
            resolver: PathResolver sharing the same directory.
            root_id: Id of the folder the month folders live under.
        """
        self._directory = directory
        self._resolver = resolver
        self._root_id = root_id

    def upload(self, request: UploadRequest) -> str:
        """Upload a CSV file to root/Month/Market/Country/Brand-From_To.csv.

        Every check runs before the first remote call. There is no overwrite:
        uploading the same parameters twice yields two entries with distinct
        ids, since the store accepts repeated names.

        Returns:
            Id of the new file entry.

        Raises:
            ValidationError: Unsupported file type, invalid month or malformed name.
            StoreError: A remote call failed. Folders already created stay.
        """
        if not is_csv_upload(request.content_type, request.original_filename):
            logger.info(
                "[upload] rejected file; content_type:%s;filename:%s",
                request.content_type,
                request.original_filename,
            )
            raise ValidationError("unsupported file type")

        segments = [month_name(request.month_number), request.market, request.country]
        file_name = destination_file_name(request.brand, request.from_date, request.to_date)

        folder_id = self._resolver.resolve(self._root_id, segments)
        entry = self._directory.create(
            file_name,
            folder_id,
            is_folder=False,
            content=request.content,
            mime_type=request.content_type,
        )
        logger.info(
            "[upload] stored sales file; path:%s;name:%s;id:%s",
            "/".join(segments),
            file_name,
            entry.id,
        )
        return entry.id
