"""Check-in state transitions for attendees.

An attendee starts out not checked in. Checking in is a one-way move that
stamps ``checked_in_at``; the only way back is an explicit undo from the
kiosk, which clears the timestamp again. Each transition is a single
conditional update in the store, so two kiosks racing on the same person
cannot both check them in.
"""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from kiosk.models import Attendee
from kiosk.roster.store import AttendeeStore

logger = logging.getLogger(__name__)


class CheckInStatus(str, Enum):
    CHECKED_IN = "checked_in"
    ALREADY_CHECKED_IN = "already_checked_in"
    UNDONE = "undone"
    NOT_CHECKED_IN = "not_checked_in"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class CheckInResult:
    """Outcome of a check-in or undo.

    ``attendee`` is the record as it stands after the call, or None when
    the id does not exist. For ALREADY_CHECKED_IN it is the unchanged
    record, so the kiosk can show when that person came in.
    """
    status: CheckInStatus
    attendee: Attendee | None = None

    @property
    def success(self) -> bool:
        return self.status in (CheckInStatus.CHECKED_IN, CheckInStatus.UNDONE)


def check_in(
    store: AttendeeStore, attendee_id: int, *, now: datetime | None = None
) -> CheckInResult:
    """
    Mark an attendee as checked in.

    If the update misses because an undo slipped in between, the update is
    attempted once more before giving up.
    """
    now = now or datetime.now(UTC)

    for _ in range(2):
        if store.set_checked_in(attendee_id, True, now):
            attendee = store.find_by_id(attendee_id)
            logger.info(f"Checked in attendee {attendee_id}")
            return CheckInResult(CheckInStatus.CHECKED_IN, attendee)

        # Nothing changed: either the id is unknown or someone got there first
        attendee = store.find_by_id(attendee_id)
        if attendee is None:
            return CheckInResult(CheckInStatus.NOT_FOUND)
        if attendee.checked_in:
            logger.info(
                f"Attendee {attendee_id} already checked in at {attendee.checked_in_at}"
            )
            return CheckInResult(CheckInStatus.ALREADY_CHECKED_IN, attendee)

    logger.warning(f"Check-in for attendee {attendee_id} kept losing to concurrent undos")
    return CheckInResult(CheckInStatus.NOT_CHECKED_IN, attendee)


def undo_check_in(store: AttendeeStore, attendee_id: int) -> CheckInResult:
    """Revert a check-in, clearing its timestamp."""
    for _ in range(2):
        if store.set_checked_in(attendee_id, False, None):
            attendee = store.find_by_id(attendee_id)
            logger.info(f"Undid check-in for attendee {attendee_id}")
            return CheckInResult(CheckInStatus.UNDONE, attendee)

        attendee = store.find_by_id(attendee_id)
        if attendee is None:
            return CheckInResult(CheckInStatus.NOT_FOUND)
        if not attendee.checked_in:
            return CheckInResult(CheckInStatus.NOT_CHECKED_IN, attendee)

    # A check-in landed between each update and re-read
    return CheckInResult(CheckInStatus.ALREADY_CHECKED_IN, attendee)
