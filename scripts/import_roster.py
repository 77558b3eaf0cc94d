#!/usr/bin/env python3
"""
Import an attendee roster from a CSV file.

Reads the file, validates every row, and inserts the valid ones into the
configured database (DATABASE_URL). Existing attendees are kept unless
--clear is given.

Usage:
    python scripts/import_roster.py roster.csv [--clear]

Options:
    --clear    Delete all existing attendees before importing
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session

from kiosk.core.database import create_db_and_tables, engine
from kiosk.roster.importer import import_roster
from kiosk.roster.store import AttendeeStore

MAX_ERRORS_SHOWN = 10


def main(csv_path: Path, clear: bool = False):
    """Import ``csv_path`` and print a summary."""
    if not csv_path.is_file():
        print(f"Error: {csv_path} does not exist.")
        sys.exit(1)

    csv_content = csv_path.read_text(encoding="utf-8-sig")

    create_db_and_tables()

    with Session(engine) as session:
        store = AttendeeStore(session)

        if clear:
            deleted = store.delete_all()
            print(f"Cleared {deleted} existing attendees.")

        report = import_roster(store, csv_content)

        print(f"Rows read:  {report.total_rows}")
        print(f"Valid rows: {report.valid_rows}")
        print(f"Inserted:   {report.inserted_count}")
        if report.failed_count:
            print(f"Failed:     {report.failed_count}")

        if report.errors:
            print(f"\n{len(report.errors)} rows had errors:")
            for error in report.errors[:MAX_ERRORS_SHOWN]:
                print(f"  {error}")
            if len(report.errors) > MAX_ERRORS_SHOWN:
                print(f"  ... and {len(report.errors) - MAX_ERRORS_SHOWN} more")

        stats = store.stats()
        print(f"\nRoster now has {stats['total']} attendees ({stats['checked_in']} checked in)")

    if not report.success:
        sys.exit(1)


if __name__ == "__main__":
    args = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    if len(args) != 1:
        print(__doc__)
        sys.exit(2)
    main(Path(args[0]), clear="--clear" in sys.argv)
