from kiosk.models.attendee import Attendee

__all__ = ["Attendee"]
