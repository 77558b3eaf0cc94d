"""Storage handle for the attendee roster.

``AttendeeStore`` wraps one SQLModel ``Session`` and exposes the handful of
operations the importer, the check-in flow and the admin panel need. A store
lives exactly as long as the session it was built from: one per HTTP request
(see ``get_store``) or one per script run.
"""
import logging
from datetime import datetime

from fastapi import Depends
from sqlalchemy import delete, func, or_, update
from sqlmodel import Session, select

from kiosk.core.config import settings
from kiosk.core.database import get_session
from kiosk.models import Attendee

logger = logging.getLogger(__name__)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class AttendeeStore:
    """Roster operations over a single database session."""

    def __init__(self, session: Session):
        self.session = session

    def insert(self, first_name: str, last_name: str, meal_preference: str = "") -> int:
        """Insert one attendee and return its new id."""
        attendee = Attendee(
            first_name=first_name,
            last_name=last_name,
            meal_preference=meal_preference or "",
        )
        self.session.add(attendee)
        self.session.commit()
        self.session.refresh(attendee)
        return attendee.id

    def find_by_id(self, attendee_id: int) -> Attendee | None:
        # Always reload: check-in state may have changed under a cached object
        return self.session.get(Attendee, attendee_id, populate_existing=True)

    def search(self, query: str, limit: int | None = None) -> list[Attendee]:
        """
        Find attendees whose first or last name contains ``query``.

        Matching is case-insensitive. Results are ordered by last name, then
        first name, and capped at ``limit`` (``settings.search_limit`` by
        default). A blank query returns nothing rather than the whole roster.
        """
        query = query.strip()
        if not query:
            return []

        pattern = f"%{escape_like(query)}%"
        statement = (
            select(Attendee)
            .where(
                or_(
                    Attendee.first_name.ilike(pattern, escape="\\"),
                    Attendee.last_name.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Attendee.last_name, Attendee.first_name)
            .limit(limit or settings.search_limit)
        )
        return list(self.session.exec(statement).all())

    def set_checked_in(
        self, attendee_id: int, checked_in: bool, checked_in_at: datetime | None
    ) -> int:
        """
        Move an attendee into the given check-in state.

        The update only matches a row currently in the opposite state, so it
        is a single atomic compare-and-set: of two concurrent attempts, only
        one gets an affected count of 1. Returns the affected row count.
        """
        statement = (
            update(Attendee)
            .where(Attendee.id == attendee_id)
            .where(Attendee.checked_in == (not checked_in))
            .values(checked_in=checked_in, checked_in_at=checked_in_at)
        )
        affected = self.session.connection().execute(statement).rowcount
        self.session.commit()
        return affected

    def count(self, checked_in: bool | None = None) -> int:
        """Count attendees, optionally only those in the given check-in state."""
        statement = select(func.count()).select_from(Attendee)
        if checked_in is not None:
            statement = statement.where(Attendee.checked_in == checked_in)
        return self.session.exec(statement).one()

    def stats(self) -> dict:
        total = self.count()
        checked_in = self.count(checked_in=True)
        return {"total": total, "checked_in": checked_in, "remaining": total - checked_in}

    def delete_all(self) -> int:
        """Remove every attendee. Returns how many rows were deleted."""
        deleted = self.session.connection().execute(delete(Attendee)).rowcount
        self.session.commit()
        # Drop any Attendee objects still held by this session
        self.session.expunge_all()
        logger.info(f"Cleared {deleted} attendees")
        return deleted


def get_store(session: Session = Depends(get_session)) -> AttendeeStore:
    """Dependency for getting a request-scoped attendee store."""
    return AttendeeStore(session)
