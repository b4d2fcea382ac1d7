"""Validation and naming rules for sales data uploads."""

from __future__ import annotations

import re

from sales_drive.errors import ValidationError

# Fixed English names; calendar.month_name follows the process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

CSV_MEDIA_TYPES = frozenset({"text/csv", "application/csv", "text/x-csv"})
CSV_EXTENSIONS = (".csv",)

# Path delimiters plus characters OneDrive refuses in item names.
FORBIDDEN_NAME_CHARS = ("/", "\\", '"', "*", ":", "<", ">", "?", "|")

MONTH_NUMBER_PATTERN = re.compile(r"[0-9]{1,2}")


def is_csv_upload(content_type: str | None, original_filename: str | None) -> bool:
    """Return True if the media type is CSV or the file name has a CSV extension.

    Media type parameters (e.g. "; charset=utf-8") are ignored. Both checks
    are case-insensitive.
    """
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type in CSV_MEDIA_TYPES:
        return True
    return (original_filename or "").lower().endswith(CSV_EXTENSIONS)


def month_name(month_number: str | int) -> str:
    """Map a month number ("06", "6" or 6) to its English display name.

    Raises:
        ValidationError: If the value is not an integer between 1 and 12.
    """
    text = str(month_number).strip()
    if not MONTH_NUMBER_PATTERN.fullmatch(text):
        raise ValidationError("invalid month")
    number = int(text)
    if not 1 <= number <= 12:
        raise ValidationError("invalid month")
    return MONTH_NAMES[number - 1]


def validate_name(name: str) -> str:
    """Check that a folder or file name is usable as a single store entry name.

    Single quotes are allowed; the directory escapes them when building queries.

    Raises:
        ValidationError: If the name is blank or contains a delimiter or reserved character.
    """
    if not name or not name.strip():
        raise ValidationError("empty name")
    if any(char in name for char in FORBIDDEN_NAME_CHARS):
        raise ValidationError(f"name contains a reserved character: {name!r}")
    return name


def destination_file_name(brand: str, from_date: str, to_date: str) -> str:
    """Compose "{brand}-{from_date}_{to_date}.csv"; dates are used verbatim."""
    return validate_name(f"{brand}-{from_date}_{to_date}.csv")
