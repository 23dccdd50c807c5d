"""Address routing and construction.

Addresses have the form ``content://<authority>/depictions`` for the whole
collection and ``content://<authority>/depictions/<id>`` for a single row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from depictions.core.exceptions import InvalidArgument
from depictions.core.models import AddressMatch, Target

logger = logging.getLogger(__name__)

SCHEME = "content"
DEFAULT_AUTHORITY = "depictions.contentprovider"
BASE_PATH = "depictions"

# Largest value an SQLite INTEGER column can hold.
MAX_ROW_ID = 2**63 - 1

# Matches a single segment of decimal digits.
NUMBER = "#"


@dataclass(frozen=True)
class Route:
    """A path pattern and the target it resolves to."""

    segments: tuple[str, ...]
    target: Target

    def matches(self, segments: list[str]) -> bool:
        if len(segments) != len(self.segments):
            return False
        for pattern, segment in zip(self.segments, segments):
            if pattern == NUMBER:
                if not (segment.isascii() and segment.isdigit()):
                    return False
            elif pattern != segment:
                return False
        return True


class AddressRouter:
    """Immutable routing table for one authority."""

    __slots__ = ("_authority", "_routes")

    def __init__(self, authority: str, routes: tuple[Route, ...]) -> None:
        self._authority = authority
        self._routes = routes

    @property
    def authority(self) -> str:
        return self._authority

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def match(self, address: str) -> AddressMatch:
        """Resolve an address to the collection, a single item, or nothing."""
        try:
            parts = urlsplit(address)
        except ValueError:
            logger.debug("No route for %s: not a valid address", address)
            return AddressMatch(Target.UNRECOGNIZED)
        if parts.scheme != SCHEME or parts.netloc != self._authority:
            logger.debug("No route for %s: foreign scheme or authority", address)
            return AddressMatch(Target.UNRECOGNIZED)
        if parts.query or parts.fragment:
            logger.debug("No route for %s: query or fragment present", address)
            return AddressMatch(Target.UNRECOGNIZED)

        segments = [s for s in parts.path.split("/") if s]
        for route in self._routes:
            if route.matches(segments):
                segment = segments[-1] if route.target is Target.ITEM else None
                return AddressMatch(route.target, segment)

        logger.debug("No route for %s", address)
        return AddressMatch(Target.UNRECOGNIZED)

    def __repr__(self) -> str:
        return f"AddressRouter(authority={self._authority!r}, routes={len(self._routes)})"


def build_router(authority: str = DEFAULT_AUTHORITY) -> AddressRouter:
    """Build the routing table for the depictions collection and its rows."""
    routes = (
        Route((BASE_PATH,), Target.COLLECTION),
        Route((BASE_PATH, NUMBER), Target.ITEM),
    )
    return AddressRouter(authority, routes)


def collection_address(authority: str = DEFAULT_AUTHORITY) -> str:
    """Address of the whole depictions collection."""
    return f"{SCHEME}://{authority}/{BASE_PATH}"


def item_address(row_id: int, authority: str = DEFAULT_AUTHORITY) -> str:
    """Address of the depiction with the given row id."""
    if isinstance(row_id, bool) or not isinstance(row_id, int):
        raise InvalidArgument(f"Row id must be an integer, got {row_id!r}")
    if row_id < 0:
        raise InvalidArgument(f"Row id must not be negative, got {row_id}")
    if row_id > MAX_ROW_ID:
        raise InvalidArgument(f"Row id is out of range: {row_id}")
    return f"{collection_address(authority)}/{row_id}"


def parse_row_id(segment: str | None) -> int:
    """Parse the trailing id segment of an item address as a base-10 integer."""
    if segment is None or not (segment.isascii() and segment.isdigit()):
        raise InvalidArgument(f"Row id segment is not a decimal number: {segment!r}")
    row_id = int(segment, 10)
    if row_id > MAX_ROW_ID:
        raise InvalidArgument(f"Row id is out of range: {segment}")
    return row_id
