#!/usr/bin/env python3
"""Migration script to normalize stored legal settings.

This migration rewrites the legal_settings table in place:
- The legacy key "Valoare tichet de masa" is renamed to
  "Valoare tichet de masa - default clienti BONO" (unless the new key exists).
- Percentage settings (CAS, CASS, CAM, Cota impozit) stored as whole
  numbers (e.g. 10) are converted to decimals (0.10), together with every
  history value greater than 1.

Running it again on a migrated database changes nothing.

Usage:
    python migrations/migrate_legal_settings.py [--db-path PATH] [--dry-run]
"""

import sys
from pathlib import Path

# Add src to path so we can import salarizare modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import inspect
from salarizare.database.factories import create_sqlite_database
from salarizare.domain.settings import migrate_legacy_keys, migrate_percentages


def migrate_database(database_path: str | None = None, dry_run: bool = False) -> int:
    """Apply the legacy key rename and percentage migration.

    Args:
        database_path: Path to database file. If None, uses default location.
        dry_run: Report the changes without writing them

    Returns:
        Number of settings that changed

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")
        finally:
            session.close()

        if "legal_settings" not in inspect(engine).get_table_names():
            raise Exception("Table 'legal_settings' does not exist. Please initialize the database schema first.")

        stored = db.get_legal_settings()
        migrated = migrate_percentages(migrate_legacy_keys(stored))

        changed = [key for key in migrated if stored.get(key) != migrated[key]]
        removed = [key for key in stored if key not in migrated]
        if not changed and not removed:
            print("Migration already applied: legal settings are up to date")
            return 0

        print("Starting migration: normalizing legal settings...")
        for key in removed:
            print(f"  Renamed key: {key}")
        for key in changed:
            before = stored.get(key)
            shown = before.current_value if before is not None else "(new key)"
            print(f"  {key}: {shown} -> {migrated[key].current_value}")

        if dry_run:
            print("Dry run: no changes written")
            return len(changed)

        if not db.put_legal_settings(migrated):
            raise Exception("Could not save legal settings")

        print("Migration completed successfully!")
        return len(changed)

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(description="Normalize stored legal settings")
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides SALARIZARE_DB_PATH environment variable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Show changes without writing them")
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path, dry_run=args.dry_run)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
