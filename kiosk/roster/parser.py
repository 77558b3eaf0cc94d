"""Parse attendee rosters from CSV text."""
import re

from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

# Map common CSV header spellings to the attendee fields we store
COLUMN_ALIASES: dict[str, str] = {
    # First name variations
    "first_name": "first_name",
    "firstname": "first_name",
    "first name": "first_name",
    "first": "first_name",
    "fname": "first_name",
    "given name": "first_name",
    "given_name": "first_name",
    # Last name variations
    "last_name": "last_name",
    "lastname": "last_name",
    "last name": "last_name",
    "last": "last_name",
    "lname": "last_name",
    "surname": "last_name",
    "family name": "last_name",
    "family_name": "last_name",
    # Meal preference variations
    "meal_preference": "meal_preference",
    "meal preference": "meal_preference",
    "meal": "meal_preference",
    "dietary": "meal_preference",
    "dietary preference": "meal_preference",
    "dietary_preference": "meal_preference",
    "diet": "meal_preference",
    "food preference": "meal_preference",
    "food_preference": "meal_preference",
}

# Byte-order mark, zero-width space and no-break space. Spreadsheet exports
# leave these behind and they make a name look filled in when it is not.
INVISIBLE_CHARS = re.compile("[\ufeff\u200b\u00a0]")

LINE_BREAK = re.compile(r"\r?\n")


class AttendeeRow(BaseModel):
    """One validated roster row, ready to be inserted."""

    first_name: str
    last_name: str
    meal_preference: str = ""

    @field_validator("first_name", "last_name")
    @classmethod
    def require_name(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            label = info.field_name.replace("_", " ").capitalize()
            raise PydanticCustomError(
                "name_required", "{label} is required", {"label": label}
            )
        return value


class ParseResult(BaseModel):
    """Outcome of parsing a roster.

    ``errors`` holds one message per rejected row, in row order, so
    ``valid_rows == total_rows - len(errors)`` always holds.
    """

    success: bool
    attendees: list[AttendeeRow]
    errors: list[str]
    total_rows: int
    valid_rows: int


def clean_value(value: str | None) -> str:
    """Drop invisible characters and surrounding whitespace."""
    if not value:
        return ""
    return INVISIBLE_CHARS.sub("", value).strip()


def normalize_column_name(column: str) -> str:
    """
    Map a header cell to its canonical field name.

    Unknown headers come back lower-cased and trimmed, and are ignored by
    the row builder.
    """
    key = clean_value(column).lower()
    return COLUMN_ALIASES.get(key, key)


def split_csv_line(line: str) -> list[str]:
    """
    Split one CSV line into trimmed field values.

    Fields may be wrapped in double quotes to protect commas. Inside a
    quoted field a doubled quote ("") stands for one literal quote, and a
    single quote closes the quoted section.
    """
    fields = []
    current = []
    in_quotes = False

    i = 0
    while i < len(line):
        char = line[i]

        if in_quotes:
            if char == '"' and line[i + 1 : i + 2] == '"':
                current.append('"')
                i += 1  # Skip the escaping quote
            elif char == '"':
                in_quotes = False
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ",":
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

        i += 1

    fields.append("".join(current).strip())
    return fields


def parse_rows(raw_text: str) -> list[dict[str, str]]:
    """
    Split CSV text into rows keyed by normalized header.

    The first non-blank line is the header. Blank lines anywhere are
    skipped and never count as rows. Values missing at the end of a short
    row default to an empty string.
    """
    lines = [line for line in LINE_BREAK.split(raw_text) if clean_value(line)]
    if not lines:
        return []

    headers = [normalize_column_name(cell) for cell in split_csv_line(lines[0])]

    rows = []
    for line in lines[1:]:
        values = split_csv_line(line)
        rows.append(
            {
                header: values[idx] if idx < len(values) else ""
                for idx, header in enumerate(headers)
            }
        )
    return rows


def validate_row(row: dict[str, str]) -> AttendeeRow:
    """Build an AttendeeRow from a parsed row, raising ValidationError if invalid."""
    return AttendeeRow(
        first_name=clean_value(row.get("first_name")),
        last_name=clean_value(row.get("last_name")),
        meal_preference=clean_value(row.get("meal_preference")),
    )


def parse_csv(raw_text: str) -> ParseResult:
    """
    Parse and validate a roster.

    Every data row either lands in ``attendees`` or produces exactly one
    "Row N: ..." message, where N is the line number in the file counting
    the header as line 1. This never raises: input that cannot be read as
    CSV text at all comes back as a failed result with a single error.
    """
    attendees: list[AttendeeRow] = []
    errors: list[str] = []

    try:
        rows = parse_rows(raw_text)

        for i, row in enumerate(rows):
            row_number = i + 2  # header row plus 1-based numbering
            try:
                attendees.append(validate_row(row))
            except ValidationError as e:
                reasons = ", ".join(error["msg"] for error in e.errors())
                errors.append(f"Row {row_number}: {reasons}")

    except Exception as e:
        return ParseResult(
            success=False,
            attendees=[],
            errors=[f"Failed to parse CSV: {e}"],
            total_rows=0,
            valid_rows=0,
        )

    return ParseResult(
        success=len(attendees) > 0,
        attendees=attendees,
        errors=errors,
        total_rows=len(rows),
        valid_rows=len(attendees),
    )
