"""Roster import: parse a CSV and insert the valid rows."""
import logging

from sqlalchemy.exc import SQLAlchemyError

from kiosk.roster.parser import ParseResult, parse_csv
from kiosk.roster.store import AttendeeStore

logger = logging.getLogger(__name__)


class ImportReport(ParseResult):
    """Parse result plus what happened when the valid rows were inserted.

    ``failed_count`` only covers rows that passed validation but could not
    be stored; validation problems stay in ``errors``.
    """

    inserted_count: int = 0
    failed_count: int = 0


def insert_rows(store: AttendeeStore, result: ParseResult) -> tuple[int, int]:
    """
    Insert every validated row, one at a time.

    A failing insert is rolled back and logged, and the remaining rows are
    still attempted. Returns (inserted, failed).
    """
    inserted = 0
    failed = 0

    for row in result.attendees:
        try:
            store.insert(row.first_name, row.last_name, row.meal_preference)
            inserted += 1
        except SQLAlchemyError as e:
            store.session.rollback()
            logger.error(f"Error inserting attendee {row.first_name} {row.last_name}: {e}")
            failed += 1

    return inserted, failed


def import_roster(store: AttendeeStore, raw_text: str) -> ImportReport:
    """
    Import a CSV roster into the store.

    Nothing is inserted when no row validates. Existing attendees are left
    alone and are not matched against the new rows, so importing the same
    file twice creates duplicates.
    """
    result = parse_csv(raw_text)

    if not result.success:
        logger.warning(
            f"Roster import rejected: {result.total_rows} rows, {len(result.errors)} errors"
        )
        return ImportReport(**result.model_dump())

    inserted, failed = insert_rows(store, result)
    logger.info(
        f"Roster import completed: {inserted} inserted, {failed} failed, "
        f"{len(result.errors)} invalid of {result.total_rows} rows"
    )
    return ImportReport(**result.model_dump(), inserted_count=inserted, failed_count=failed)
