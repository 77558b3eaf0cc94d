"""Attendee model for the event roster.

This module defines the Attendee model which represents one person on the
imported roster. Records are created by CSV import, flipped between
"not checked in" and "checked in" at the kiosk, and removed only by a
clear-all from the admin panel.
"""

from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class Attendee(SQLModel, table=True):
    """A person registered for the event.

    Name and meal fields are written once at import time and never changed
    afterwards. The only mutations are check-in and undo, which always move
    ``checked_in`` and ``checked_in_at`` together.

    Attributes:
        id: Integer identifier assigned by the database on insert.
        first_name: Given name, never empty.
        last_name: Family name, never empty.
        meal_preference: Free-text dietary note, empty when not supplied.
        checked_in: Whether the attendee has picked up their badge.
        checked_in_at: When the check-in happened. Non-null exactly when
            ``checked_in`` is True.
        created_at: When the record was imported.
    """
    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(index=True)
    last_name: str = Field(index=True)
    meal_preference: str = Field(default="")
    checked_in: bool = Field(default=False, index=True)
    checked_in_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
