"""Tests for roster import."""

from sqlalchemy.exc import OperationalError

from kiosk.roster.importer import import_roster
from kiosk.roster.store import AttendeeStore

ROSTER = "first_name,last_name,meal\nAda,Lovelace,Vegan\n,Byron,\n"


class TestImportRoster:
    def test_imports_valid_rows(self, store: AttendeeStore):
        report = import_roster(store, ROSTER)

        assert report.success is True
        assert report.total_rows == 2
        assert report.valid_rows == 1
        assert report.inserted_count == 1
        assert report.failed_count == 0
        assert report.errors == ["Row 3: First name is required"]

        [attendee] = store.search("lovel")
        assert attendee.first_name == "Ada"
        assert attendee.last_name == "Lovelace"
        assert attendee.meal_preference == "Vegan"
        assert attendee.checked_in is False

    def test_clear_after_import(self, store: AttendeeStore):
        import_roster(store, ROSTER)

        store.delete_all()

        assert store.count() == 0
        assert store.search("lovel") == []

    def test_nothing_inserted_when_no_row_is_valid(self, store: AttendeeStore):
        report = import_roster(store, "first,last\n,Byron\nAda,\n")

        assert report.success is False
        assert report.inserted_count == 0
        assert len(report.errors) == 2
        assert store.count() == 0

    def test_unreadable_input(self, store: AttendeeStore):
        report = import_roster(store, None)

        assert report.success is False
        assert report.total_rows == 0
        assert report.errors[0].startswith("Failed to parse CSV:")

    def test_reimport_creates_duplicates(self, store: AttendeeStore):
        import_roster(store, ROSTER)
        import_roster(store, ROSTER)

        assert len(store.search("lovelace")) == 2

    def test_insert_failure_does_not_abort_batch(self, store: AttendeeStore, monkeypatch):
        original_insert = store.insert

        def flaky_insert(first_name, last_name, meal_preference=""):
            if first_name == "Broken":
                raise OperationalError("INSERT INTO attendee", {}, Exception("disk I/O error"))
            return original_insert(first_name, last_name, meal_preference)

        monkeypatch.setattr(store, "insert", flaky_insert)

        report = import_roster(store, "first,last\nAda,Lovelace\nBroken,Row\nAlan,Turing\n")

        assert report.valid_rows == 3
        assert report.inserted_count == 2
        assert report.failed_count == 1
        assert report.errors == []
        assert store.count() == 2
