"""Unit tests for graph/directory.py — GraphDirectory request mapping and error translation."""

from unittest.mock import MagicMock
from urllib.error import URLError

import pytest

from sales_drive.errors import StoreError
from sales_drive.graph.client import GraphApiError, GraphAuthError
from sales_drive.graph.directory import GraphDirectory, odata_literal

USER = "sales@contoso.onmicrosoft.com"
ITEMS = f"/users/{USER}/drive/items"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_directory(conflict_behavior: str = "rename") -> tuple[GraphDirectory, MagicMock]:
    """Return (directory, mock_graph_client)."""
    mock_graph = MagicMock()
    return GraphDirectory(mock_graph, USER, conflict_behavior), mock_graph


def _folder(id: str, name: str, parent_id: str = "root-id") -> dict:  # type: ignore[type-arg]
    return {"id": id, "name": name, "folder": {}, "parentReference": {"id": parent_id}}


def _file(id: str, name: str, parent_id: str = "root-id") -> dict:  # type: ignore[type-arg]
    return {
        "id": id,
        "name": name,
        "file": {"mimeType": "text/csv"},
        "parentReference": {"id": parent_id},
    }


# ---------------------------------------------------------------------------
# odata_literal tests
# ---------------------------------------------------------------------------


class TestOdataLiteral:
    def test_wraps_in_single_quotes(self) -> None:
        assert odata_literal("June") == "'June'"

    def test_doubles_embedded_quotes(self) -> None:
        assert odata_literal("Kohl's") == "'Kohl''s'"

    def test_injection_attempt_stays_inside_literal(self) -> None:
        assert odata_literal("x' or name ne '") == "'x'' or name ne '''"


# ---------------------------------------------------------------------------
# query() tests
# ---------------------------------------------------------------------------


class TestQuery:
    def test_name_filter_is_escaped_and_url_encoded(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get.return_value = {"value": []}

        directory.query("root-id", name="Kohl's", folders_only=True)

        mock_graph.get.assert_called_once_with(
            f"{ITEMS}/root-id/children?$filter=name%20eq%20%27Kohl%27%27s%27"
        )

    def test_without_name_lists_children(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get.return_value = {"value": [_folder("f1", "June"), _file("x1", "a.csv")]}

        entries = directory.query("root-id")

        mock_graph.get.assert_called_once_with(f"{ITEMS}/root-id/children")
        assert [e.id for e in entries] == ["f1", "x1"]

    def test_folders_only_drops_files(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get.return_value = {"value": [_file("x1", "June"), _folder("f1", "June")]}

        entries = directory.query("root-id", name="June", folders_only=True)

        assert [e.id for e in entries] == ["f1"]

    def test_exact_name_match_is_case_sensitive(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get.return_value = {"value": [_folder("f1", "june"), _folder("f2", "June")]}

        entries = directory.query("root-id", name="June", folders_only=True)

        assert [e.id for e in entries] == ["f2"]

    def test_deleted_items_are_skipped(self) -> None:
        directory, mock_graph = _make_directory()
        deleted = {**_folder("f1", "June"), "deleted": {"state": "deleted"}}
        mock_graph.get.return_value = {"value": [deleted, _folder("f2", "June")]}

        entries = directory.query("root-id", name="June", folders_only=True)

        assert [e.id for e in entries] == ["f2"]

    def test_duplicates_returned_in_store_order(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get.return_value = {"value": [_folder("f2", "June"), _folder("f1", "June")]}

        entries = directory.query("root-id", name="June", folders_only=True)

        assert [e.id for e in entries] == ["f2", "f1"]

    def test_follows_next_link_pagination(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get.side_effect = [
            {
                "value": [_file("x1", "a.csv")],
                "@odata.nextLink": (
                    f"https://graph.microsoft.com/v1.0{ITEMS}/root-id/children?$skiptoken=abc"
                ),
            },
            {"value": [_file("x2", "b.csv")]},
        ]

        entries = directory.query("root-id")

        assert [e.id for e in entries] == ["x1", "x2"]
        assert mock_graph.get.call_args_list[1][0][0] == (
            f"{ITEMS}/root-id/children?$skiptoken=abc"
        )

    def test_graph_error_becomes_store_error(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get.side_effect = GraphApiError(404, "Item not found")

        with pytest.raises(StoreError) as exc_info:
            directory.query("missing-id", name="June", folders_only=True)

        assert exc_info.value.operation == "query"
        assert exc_info.value.target == "missing-id/June"
        assert "404" in exc_info.value.detail


# ---------------------------------------------------------------------------
# create() tests
# ---------------------------------------------------------------------------


class TestCreate:
    def test_folder_posts_to_children_with_conflict_behavior(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.post_json.return_value = _folder("new-1", "June")

        entry = directory.create("June", "root-id", is_folder=True)

        mock_graph.post_json.assert_called_once_with(
            f"{ITEMS}/root-id/children",
            {"name": "June", "folder": {}, "@microsoft.graph.conflictBehavior": "rename"},
        )
        assert entry.id == "new-1"
        assert entry.is_folder is True

    def test_file_is_put_to_content_path(self) -> None:
        directory, mock_graph = _make_directory(conflict_behavior="fail")
        mock_graph.put_content.return_value = _file("file-1", "Bryco-a_b.csv", "country-1")

        entry = directory.create(
            "Bryco-a_b.csv", "country-1", is_folder=False, content=b"a,b\n", mime_type="text/csv"
        )

        mock_graph.put_content.assert_called_once_with(
            f"{ITEMS}/country-1:/Bryco-a_b.csv:/content?@microsoft.graph.conflictBehavior=fail",
            b"a,b\n",
            "text/csv",
        )
        assert entry.id == "file-1"

    def test_file_stream_is_read_and_default_type_used(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.put_content.return_value = _file("file-1", "x.csv")
        stream = MagicMock()
        stream.read.return_value = b"1,2\n"

        directory.create("x.csv", "root-id", is_folder=False, content=stream)

        args = mock_graph.put_content.call_args[0]
        assert args[1] == b"1,2\n"
        assert args[2] == "application/octet-stream"

    def test_auth_error_becomes_store_error(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.post_json.side_effect = GraphAuthError("Token acquisition failed")

        with pytest.raises(StoreError) as exc_info:
            directory.create("June", "root-id", is_folder=True)

        assert exc_info.value.operation == "create_folder"
        assert exc_info.value.target == "root-id/June"

    def test_timeout_becomes_store_error(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.put_content.side_effect = TimeoutError("timed out")

        with pytest.raises(StoreError, match="timed out"):
            directory.create("x.csv", "root-id", is_folder=False, content=b"")


# ---------------------------------------------------------------------------
# get_content() / update() / delete() tests
# ---------------------------------------------------------------------------


class TestPassthroughs:
    def test_get_content_reads_item_content(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.get_content.return_value = b"raw"

        assert directory.get_content("file-1") == b"raw"
        mock_graph.get_content.assert_called_once_with(f"{ITEMS}/file-1/content")

    def test_update_patches_name(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.patch_json.return_value = _file("file-1", "renamed.csv")

        entry = directory.update("file-1", "renamed.csv")

        mock_graph.patch_json.assert_called_once_with(f"{ITEMS}/file-1", {"name": "renamed.csv"})
        assert entry.name == "renamed.csv"

    def test_delete_sends_delete(self) -> None:
        directory, mock_graph = _make_directory()

        directory.delete("file-1")

        mock_graph.delete.assert_called_once_with(f"{ITEMS}/file-1")

    def test_network_error_becomes_store_error(self) -> None:
        directory, mock_graph = _make_directory()
        mock_graph.delete.side_effect = URLError("connection refused")

        with pytest.raises(StoreError) as exc_info:
            directory.delete("file-1")

        assert exc_info.value.operation == "delete"
        assert exc_info.value.target == "file-1"
