"""Attendee routes for the kiosk and the admin panel."""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from kiosk.roster.checkin import CheckInStatus, check_in, undo_check_in
from kiosk.roster.importer import import_roster
from kiosk.roster.store import AttendeeStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/attendees", tags=["attendees"])


class CheckInRequest(BaseModel):
    id: int


class ImportRequest(BaseModel):
    csv_content: str = ""


@router.get("/search")
async def search_attendees(q: str = "", store: AttendeeStore = Depends(get_store)):
    """
    Search attendees by name.

    Matches the query against first and last names, case-insensitively.
    An empty query returns an empty list.
    """
    try:
        return {"attendees": store.search(q)}
    except SQLAlchemyError as e:
        logger.error(f"Search failed: {e}")
        raise HTTPException(status_code=500, detail="Search failed")


@router.get("/stats")
async def attendee_stats(store: AttendeeStore = Depends(get_store)):
    """Return total, checked-in and remaining attendee counts."""
    try:
        return store.stats()
    except SQLAlchemyError as e:
        logger.error(f"Failed to get stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to get stats")


@router.post("/check-in")
async def check_in_attendee(body: CheckInRequest, store: AttendeeStore = Depends(get_store)):
    """
    Check an attendee in.

    Returns the updated attendee on success. A repeat check-in is not an
    error: it returns 200 with ``already_checked_in`` set and the existing
    record, so the kiosk can tell the person they are already in. Returns
    404 if the attendee does not exist.
    """
    try:
        result = check_in(store, body.id)
    except SQLAlchemyError as e:
        logger.error(f"Check-in failed: {e}")
        raise HTTPException(status_code=500, detail="Check-in failed")

    if result.status == CheckInStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Attendee not found")

    if result.status == CheckInStatus.ALREADY_CHECKED_IN:
        return {
            "success": False,
            "already_checked_in": True,
            "attendee": result.attendee,
            "message": "This person has already checked in",
        }
    if not result.success:
        raise HTTPException(status_code=409, detail="Check-in did not take effect, try again")

    return {"success": True, "attendee": result.attendee}


@router.post("/check-in/undo")
async def undo_check_in_attendee(
    body: CheckInRequest, store: AttendeeStore = Depends(get_store)
):
    """
    Undo a check-in.

    Clears the check-in flag and timestamp. Returns 404 if the attendee does
    not exist and 409 if they were not checked in.
    """
    try:
        result = undo_check_in(store, body.id)
    except SQLAlchemyError as e:
        logger.error(f"Undo check-in failed: {e}")
        raise HTTPException(status_code=500, detail="Undo check-in failed")

    if result.status == CheckInStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Attendee not found")
    if result.status == CheckInStatus.NOT_CHECKED_IN:
        raise HTTPException(status_code=409, detail="Attendee is not checked in")
    if not result.success:
        raise HTTPException(status_code=409, detail="Undo did not take effect, try again")

    return {"success": True, "attendee": result.attendee}


@router.post("/import")
async def import_attendees(body: ImportRequest, store: AttendeeStore = Depends(get_store)):
    """
    Import attendees from CSV text.

    Always answers with a report: row counts, how many were inserted, and
    one message per rejected row. Returns 400 if no CSV content was sent.
    """
    if not body.csv_content.strip():
        raise HTTPException(status_code=400, detail="CSV content required")

    try:
        return import_roster(store, body.csv_content)
    except SQLAlchemyError as e:
        logger.error(f"Import failed: {e}")
        raise HTTPException(status_code=500, detail="Import failed")


@router.post("/import/upload")
async def upload_attendees(
    file: UploadFile = File(...), store: AttendeeStore = Depends(get_store)
):
    """
    Import attendees from an uploaded CSV file.

    The file must have a .csv extension and be UTF-8 encoded (a leading
    byte-order mark is fine). Responds with the same report as /import.
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Invalid file type")

    content = await file.read()
    try:
        csv_content = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")

    if not csv_content.strip():
        raise HTTPException(status_code=400, detail="CSV content required")

    try:
        return import_roster(store, csv_content)
    except SQLAlchemyError as e:
        logger.error(f"Import failed: {e}")
        raise HTTPException(status_code=500, detail="Import failed")


@router.delete("/clear")
async def clear_attendees(store: AttendeeStore = Depends(get_store)):
    """
    Delete every attendee.

    Used by the admin panel to reset the roster before re-importing.
    """
    try:
        deleted = store.delete_all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to clear attendees: {e}")
        raise HTTPException(status_code=500, detail="Failed to clear attendees")

    return {"success": True, "deleted": deleted}


@router.get("/{attendee_id}")
async def get_attendee(attendee_id: int, store: AttendeeStore = Depends(get_store)):
    """Return a single attendee, or 404 if it does not exist."""
    try:
        attendee = store.find_by_id(attendee_id)
    except SQLAlchemyError as e:
        logger.error(f"Lookup failed: {e}")
        raise HTTPException(status_code=500, detail="Lookup failed")

    if not attendee:
        raise HTTPException(status_code=404, detail="Attendee not found")
    return attendee
