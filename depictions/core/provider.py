"""Provider that dispatches addressed requests to the depictions table."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from depictions.core.exceptions import InvalidArgument, UnrecognizedAddress, UnsupportedOperation
from depictions.core.models import AddressMatch, RowSet, Target
from depictions.core.notifier import ChangeNotifier
from depictions.core.routing import AddressRouter, item_address, parse_row_id
from depictions.core.storage import ALL_FIELDS, COLUMN_ID, TABLE_NAME, DatabaseHelper

logger = logging.getLogger(__name__)

Values = Mapping[str, Any]


class DepictionProvider:
    """Routes addresses to CRUD operations on the depictions table.

    Reads go through a readable handle and mutations through a writable one.
    Every successful insert, bulk insert and update notifies the address it
    was called with.
    """

    def __init__(
        self, helper: DatabaseHelper, notifier: ChangeNotifier, router: AddressRouter
    ) -> None:
        self._helper = helper
        self._notifier = notifier
        self._router = router

    @property
    def router(self) -> AddressRouter:
        return self._router

    def query(
        self,
        address: str,
        projection: Sequence[str] | None = None,
        selection: str | None = None,
        selection_args: Sequence[Any] | None = None,
        sort_order: str | None = None,
    ) -> RowSet:
        """Read the collection, or the single row an item address names.

        For item addresses the caller's projection and selection are ignored:
        all fields of the row with that id are returned.
        """
        match = self._match(address)
        db = self._helper.get_readable()

        if match.target is Target.COLLECTION:
            columns = _check_columns(projection) if projection else ALL_FIELDS
            rows = db.query(
                TABLE_NAME, columns, selection, selection_args, order_by=sort_order
            )
        else:
            row_id = parse_row_id(match.segment)
            columns = ALL_FIELDS
            rows = db.query(TABLE_NAME, columns, f"{COLUMN_ID} = ?", [row_id], order_by=sort_order)

        return RowSet(columns=tuple(columns), rows=rows, notification_address=address)

    def insert(self, address: str, values: Values) -> str:
        """Insert one row and return the item address of the new row."""
        match = self._match(address)
        if match.target is not Target.COLLECTION:
            raise UnsupportedOperation(f"Cannot insert into item address: {address}")
        _check_values(values)

        db = self._helper.get_writable()
        row_id = db.insert(TABLE_NAME, values)
        self._notifier.notify(address)
        return item_address(row_id, self._router.authority)

    def bulk_insert(self, address: str, values: Sequence[Values]) -> int:
        """Insert every row in one transaction. Nothing is kept if any row fails."""
        match = self._match(address)
        if match.target is not Target.COLLECTION:
            raise UnsupportedOperation(f"Cannot bulk insert into item address: {address}")
        for row in values:
            _check_values(row)

        db = self._helper.get_writable()
        with db.transaction():
            for row in values:
                logger.debug("Inserting %s", dict(row))
                db.insert(TABLE_NAME, row)

        self._notifier.notify(address)
        return len(values)

    def update(
        self,
        address: str,
        values: Values,
        selection: str | None = None,
        selection_args: Sequence[Any] | None = None,
    ) -> int:
        """Update the row an item address names. Returns 1, or 0 if there is no such row."""
        match = self._match(address)
        if match.target is not Target.ITEM:
            raise UnsupportedOperation(f"Cannot update collection address: {address}")
        # The id is the only user input placed in the predicate, and it is bound.
        if selection:
            raise InvalidArgument("selection must be empty when updating by id")
        row_id = parse_row_id(match.segment)
        _check_values(values)

        db = self._helper.get_writable()
        rows_updated = db.update(TABLE_NAME, values, f"{COLUMN_ID} = ?", [row_id])
        self._notifier.notify(address)
        return rows_updated

    def delete(
        self,
        address: str,
        selection: str | None = None,
        selection_args: Sequence[Any] | None = None,
    ) -> int:
        """Deleting is disabled: nothing is removed and 0 is always returned."""
        logger.debug("Ignoring delete on %s", address)
        return 0

    def _match(self, address: str) -> AddressMatch:
        match = self._router.match(address)
        if not match.matched:
            raise UnrecognizedAddress(f"Unknown address: {address}")
        return match


def _check_columns(columns: Sequence[str]) -> tuple[str, ...]:
    unknown = [c for c in columns if c not in ALL_FIELDS]
    if unknown:
        raise InvalidArgument(f"Unknown column(s): {', '.join(map(str, unknown))}")
    return tuple(columns)


def _check_values(values: Values) -> None:
    if not values:
        raise InvalidArgument("Empty values")
    _check_columns(list(values))
