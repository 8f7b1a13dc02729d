#!/usr/bin/env python3
"""Migration script to rewrite a legacy portfolio payload in the current shape.

Early dashboard builds stored one flattened entry per business under the
``polymath-dashboard-data`` key. The loader converts these on every start;
this script performs the conversion once and writes the result back, so the
stored payload carries ``entries`` and ``total*`` fields for every business.

Payloads already in the current shape are left untouched.

Usage:
    python migrations/migrate_legacy_payload.py [--db-path PATH]
"""

import sys

from polymath.database.factories import create_sqlite_store
from polymath.database.gateway import PersistenceGateway
from polymath.domain.errors import StorageError


def migrate_store(database_path: str | None = None) -> bool:
    """Upgrade the stored payload.

    Args:
        database_path: Optional path to database file

    Returns:
        True if the payload was rewritten

    Raises:
        StorageError: If the database cannot be opened or written
    """
    store = create_sqlite_store(database_path=database_path)
    store.connect()
    try:
        gateway = PersistenceGateway(store)
        upgraded = gateway.upgrade_stored_payload()
        if gateway.degraded:
            raise StorageError("Storage failed during migration")
    finally:
        store.disconnect()

    if upgraded:
        print("Stored payload upgraded to the current shape.")
    else:
        print("Stored payload already current (or empty). Nothing to do.")
    return upgraded


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Rewrite a legacy portfolio payload in the current shape"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides POLYMATH_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_store(database_path=args.db_path)
        return 0
    except StorageError as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
