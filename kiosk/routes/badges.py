"""Badge routes for printing attendee name badges."""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError

from kiosk.roster.store import AttendeeStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/badges", tags=["badges"])
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")


@router.get("/{attendee_id}", response_class=HTMLResponse)
async def print_badge(
    attendee_id: int,
    request: Request,
    first_name: str | None = None,
    last_name: str | None = None,
    store: AttendeeStore = Depends(get_store),
):
    """
    Render a printable badge for an attendee.

    ``first_name`` and ``last_name`` let the operator fix a typo on the
    printed badge. They only affect this page; the stored record keeps the
    imported spelling.
    """
    try:
        attendee = store.find_by_id(attendee_id)
    except SQLAlchemyError as e:
        logger.error(f"Badge lookup failed: {e}")
        raise HTTPException(status_code=500, detail="Badge lookup failed")

    if not attendee:
        raise HTTPException(status_code=404, detail="Attendee not found")

    return templates.TemplateResponse(
        request,
        "badge.html",
        {
            "attendee": attendee,
            "first_name": (first_name or "").strip() or attendee.first_name,
            "last_name": (last_name or "").strip() or attendee.last_name,
        },
    )
