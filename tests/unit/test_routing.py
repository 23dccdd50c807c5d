"""Unit tests for address routing and construction."""

import pytest

from depictions.core.exceptions import InvalidArgument
from depictions.core.models import Target
from depictions.core.routing import (
    DEFAULT_AUTHORITY,
    MAX_ROW_ID,
    build_router,
    collection_address,
    item_address,
    parse_row_id,
)

BASE = f"content://{DEFAULT_AUTHORITY}/depictions"


@pytest.fixture
def router():
    """Create the default routing table."""
    return build_router()


class TestMatch:
    """Tests for resolving addresses to targets."""

    def test_collection(self, router) -> None:
        """Test that the base path resolves to the collection."""
        match = router.match(BASE)
        assert match.target == Target.COLLECTION
        assert match.segment is None
        assert match.matched

    def test_collection_trailing_slash(self, router) -> None:
        """Test that an empty trailing segment is ignored."""
        assert router.match(BASE + "/").target == Target.COLLECTION

    @pytest.mark.parametrize("row_id", ["0", "7", "42", "000123", "9999999999999"])
    def test_item(self, router, row_id: str) -> None:
        """Test that base path plus digits resolves to an item and keeps the segment."""
        match = router.match(f"{BASE}/{row_id}")
        assert match.target == Target.ITEM
        assert match.segment == row_id

    @pytest.mark.parametrize(
        "address",
        [
            f"{BASE}/abc",
            f"{BASE}/-1",
            f"{BASE}/1.5",
            f"{BASE}/12/extra",
            f"{BASE}/١٢",
            f"content://{DEFAULT_AUTHORITY}/categories",
            f"content://{DEFAULT_AUTHORITY}/",
            "content://other.authority/depictions",
            f"http://{DEFAULT_AUTHORITY}/depictions",
            f"{BASE}?limit=1",
            "depictions",
            "content://[bad/depictions",
            "",
        ],
    )
    def test_unrecognized(self, router, address: str) -> None:
        """Test that every other shape is unrecognized."""
        match = router.match(address)
        assert match.target == Target.UNRECOGNIZED
        assert not match.matched

    def test_custom_authority(self) -> None:
        """Test that a router only accepts its own authority."""
        router = build_router("org.example.provider")
        assert router.match("content://org.example.provider/depictions/3").target == Target.ITEM
        assert router.match(BASE).target == Target.UNRECOGNIZED

    def test_router_is_rebuilt_identically(self) -> None:
        """Test that building the table twice gives the same routes."""
        assert build_router().routes == build_router().routes


class TestAddressBuilders:
    """Tests for address construction."""

    def test_collection_address(self) -> None:
        assert collection_address() == BASE

    def test_item_address(self) -> None:
        assert item_address(15) == f"{BASE}/15"

    def test_item_address_round_trips_through_router(self, router) -> None:
        """Test that built addresses resolve to the id they were built from."""
        match = router.match(item_address(321))
        assert match.target == Target.ITEM
        assert parse_row_id(match.segment) == 321

    @pytest.mark.parametrize("bad_id", [-1, "3", 2.0, True, None])
    def test_item_address_rejects_bad_ids(self, bad_id) -> None:
        with pytest.raises(InvalidArgument):
            item_address(bad_id)


class TestParseRowId:
    """Tests for id segment parsing."""

    def test_parses_decimal(self) -> None:
        assert parse_row_id("0042") == 42

    @pytest.mark.parametrize("segment", ["", "x1", "-3", "1e3", " 4", None])
    def test_rejects_non_decimal(self, segment) -> None:
        with pytest.raises(InvalidArgument) as exc_info:
            parse_row_id(segment)

        assert "decimal" in str(exc_info.value)

    def test_rejects_ids_beyond_sqlite_integer(self) -> None:
        """Test that ids SQLite cannot store are refused rather than overflowing later."""
        assert parse_row_id(str(MAX_ROW_ID)) == MAX_ROW_ID

        with pytest.raises(InvalidArgument) as exc_info:
            parse_row_id(str(MAX_ROW_ID + 1))

        assert "out of range" in str(exc_info.value)

    def test_item_address_rejects_ids_beyond_sqlite_integer(self) -> None:
        with pytest.raises(InvalidArgument):
            item_address(MAX_ROW_ID + 1)
