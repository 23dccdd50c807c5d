"""Data models for depictions."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from depictions.core.storage.table import (
    COLUMN_DESCRIPTION,
    COLUMN_ENTITY_ID,
    COLUMN_ID,
    COLUMN_LAST_USED,
    COLUMN_NAME,
    COLUMN_TIMES_USED,
)


class Target(Enum):
    """Scope an address resolves to."""

    COLLECTION = "collection"
    ITEM = "item"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class AddressMatch:
    """Result of routing an address."""

    target: Target
    segment: str | None = None

    @property
    def matched(self) -> bool:
        return self.target is not Target.UNRECOGNIZED


@dataclass
class Depiction:
    """A depicted item recently used by the user."""

    id: int
    name: str
    description: str | None = None
    entity_id: str | None = None
    last_used: int | None = None
    times_used: int = 0

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Depiction:
        """Create a Depiction from a database row."""
        return cls(
            id=row[COLUMN_ID],
            name=row[COLUMN_NAME],
            description=row[COLUMN_DESCRIPTION],
            entity_id=row[COLUMN_ENTITY_ID],
            last_used=row[COLUMN_LAST_USED],
            times_used=row[COLUMN_TIMES_USED],
        )


@dataclass
class RowSet:
    """Rows returned by a read, tagged with the address to watch for changes."""

    columns: tuple[str, ...]
    rows: list[sqlite3.Row] = field(default_factory=list)
    notification_address: str | None = None

    def __iter__(self) -> Iterator[sqlite3.Row]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def first(self) -> sqlite3.Row | None:
        return self.rows[0] if self.rows else None

    def as_dicts(self) -> list[dict[str, Any]]:
        return [{column: row[column] for column in self.columns} for row in self.rows]

    def to_depictions(self) -> list[Depiction]:
        """Convert rows to Depictions. Requires every field to be projected."""
        return [Depiction.from_row(row) for row in self.rows]
