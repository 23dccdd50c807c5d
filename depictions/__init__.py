"""
Depictions: routed data access for recently used depictions.

Depictions resolves content addresses to the depictions collection or to a
single row, dispatches CRUD calls to SQLite, and notifies observers after
every change.

Usage:
    from depictions.core import (
        DatabaseHelper,
        DepictionProvider,
        ObserverRegistry,
        build_router,
        collection_address,
        get_default_db_path,
    )

    with DatabaseHelper(get_default_db_path(Path("."))) as helper:
        provider = DepictionProvider(helper, ObserverRegistry(), build_router())
        address = provider.insert(collection_address(), {"name": "Lighthouse"})
        row = provider.query(address).first()
"""

__version__ = "0.1.0"
