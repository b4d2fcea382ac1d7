"""Integration tests for Microsoft Graph API connectivity.

These tests require real Azure credentials and are skipped in CI/CD unless
the SD_CLIENT_ID environment variable is set. They write under the
configured root folder and clean up the entries they create.
"""

import os
import uuid

import pytest

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.getenv("SD_CLIENT_ID"),
        reason="Real Graph credentials not available",
    ),
]


def test_list_root_folder_real() -> None:
    """List the configured root folder on the real drive."""
    from sales_drive.config import load_config
    from sales_drive.orchestration.service import sales_file_service_from_config

    service = sales_file_service_from_config(load_config())
    entries = service.list_files()

    assert isinstance(entries, list)


def test_resolve_twice_returns_same_folder_real() -> None:
    """Resolving a fresh path creates it once and reuses it on the second call."""
    from sales_drive.config import load_config
    from sales_drive.orchestration.service import sales_file_service_from_config

    config = load_config()
    service = sales_file_service_from_config(config)
    scratch = f"integration-{uuid.uuid4().hex[:8]}"

    try:
        first = service.resolver.resolve(config.root_folder_id, [scratch, "Amazon", "US"])
        second = service.resolver.resolve(config.root_folder_id, [scratch, "Amazon", "US"])
        assert first == second
    finally:
        for entry in service.list_files():
            if entry.name == scratch:
                service.delete(entry.id)
