"""
Core module: routing, dispatch, notification and storage.

Routing (routing.py):
    - AddressRouter: Immutable table mapping addresses to targets
    - build_router: Builds the table for the depictions collection and rows
    - collection_address/item_address: Canonical address builders

Dispatch (provider.py):
    - DepictionProvider: query, insert, bulk_insert, update, delete

Notification (notifier.py):
    - ChangeNotifier: Protocol for change signals
    - ObserverRegistry: In-process observers keyed by address

Exceptions (exceptions.py):
    - DepictionError: Base exception for all depictions errors
    - UnrecognizedAddress, UnsupportedOperation, InvalidArgument, StoreError

Storage (storage/):
    - DatabaseHelper: Owns the SQLite connection and hands out handles
    - StoreHandle: Readable or writable session on the store
"""

from depictions.core.exceptions import (
    DepictionError,
    InvalidArgument,
    StoreError,
    UnrecognizedAddress,
    UnsupportedOperation,
)
from depictions.core.models import AddressMatch, Depiction, RowSet, Target
from depictions.core.notifier import ChangeNotifier, ObserverRegistry
from depictions.core.provider import DepictionProvider
from depictions.core.routing import (
    AddressRouter,
    build_router,
    collection_address,
    item_address,
    parse_row_id,
)
from depictions.core.storage import DatabaseHelper, StoreHandle, get_default_db_path

__all__ = [
    # Models
    "AddressMatch",
    "Depiction",
    "RowSet",
    "Target",
    # Exceptions
    "DepictionError",
    "InvalidArgument",
    "StoreError",
    "UnrecognizedAddress",
    "UnsupportedOperation",
    # Routing
    "AddressRouter",
    "build_router",
    "collection_address",
    "item_address",
    "parse_row_id",
    # Dispatch and notification
    "DepictionProvider",
    "ChangeNotifier",
    "ObserverRegistry",
    # Storage
    "DatabaseHelper",
    "StoreHandle",
    "get_default_db_path",
]
