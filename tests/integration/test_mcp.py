"""Integration tests for the MCP tool handlers."""

import asyncio
import json
import tempfile
from pathlib import Path

import pytest

from depictions.core.notifier import ObserverRegistry
from depictions.core.provider import DepictionProvider
from depictions.core.routing import build_router, item_address
from depictions.core.storage import DatabaseHelper, get_default_db_path
from depictions.mcp.server import (
    _handle_bulk_insert,
    _handle_delete,
    _handle_get,
    _handle_insert,
    _handle_query,
    _handle_update,
    call_tool,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def provider(temp_dir: Path):
    with DatabaseHelper(get_default_db_path(temp_dir)) as helper:
        yield DepictionProvider(helper, ObserverRegistry(), build_router())


class TestHandlers:
    """Tests for the handlers behind each tool."""

    def test_insert_and_get(self, provider: DepictionProvider) -> None:
        result = _handle_insert(provider, {"name": "Lighthouse", "times_used": 2})
        assert result == {"address": item_address(1)}

        fetched = _handle_get(provider, 1)
        assert fetched["result"]["name"] == "Lighthouse"
        assert fetched["result"]["times_used"] == 2

    def test_get_missing(self, provider: DepictionProvider) -> None:
        assert "error" in _handle_get(provider, 3)

    def test_query_with_columns(self, provider: DepictionProvider) -> None:
        _handle_bulk_insert(provider, [{"name": "B"}, {"name": "A"}])

        result = _handle_query(provider, ["name"], None, None, "name")

        assert result == {"results": [{"name": "A"}, {"name": "B"}]}

    def test_update(self, provider: DepictionProvider) -> None:
        _handle_insert(provider, {"name": "Lighthouse"})

        assert _handle_update(provider, 1, {"description": "tall"}) == {"updated": 1}
        assert _handle_get(provider, 1)["result"]["description"] == "tall"

    def test_delete(self, provider: DepictionProvider) -> None:
        _handle_insert(provider, {"name": "Lighthouse"})

        assert _handle_delete(provider, 1) == {"deleted": 0}
        assert _handle_delete(provider, None) == {"deleted": 0}
        assert len(_handle_query(provider, None, None, None, None)["results"]) == 1


class TestCallTool:
    """Tests for tool dispatch and error reporting."""

    def _call(self, name: str, arguments: dict) -> dict:
        contents = asyncio.run(call_tool(name, arguments))
        return json.loads(contents[0].text)

    def test_insert_then_query(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(temp_dir)

        assert "address" in self._call("depictions_insert", {"name": "Tower"})
        result = self._call("depictions_query", {})

        assert [r["name"] for r in result["results"]] == ["Tower"]

    def test_bulk_failure_reported(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(temp_dir)

        result = self._call("depictions_bulk_insert", {"rows": [{"name": "A"}, {"name": None}]})

        assert "error" in result
        assert self._call("depictions_query", {})["results"] == []

    def test_missing_argument(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(temp_dir)
        assert "Missing argument" in self._call("depictions_get", {})["error"]

    def test_unknown_tool(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(temp_dir)
        assert "Unknown tool" in self._call("depictions_explode", {})["error"]

    def test_out_of_range_id(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(temp_dir)
        result = self._call("depictions_get", {"id": 10**30})
        assert "out of range" in result["error"]
