"""
Row parser for the housing CSV format.

Rows are split on "," with no quoting or escaping, so a literal comma inside
a field corrupts the row (it is reported as a field count mismatch).
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .errors import ParseError
from .models import CSV_COLUMNS, HousingRecord

DELIMITER = ","


def parse_flag(value: str) -> bool:
    """Case-insensitive match against "yes". Any other value is False."""
    return value.strip().lower() == "yes"


def _parse_float(name: str, value: str, line_number: int | None) -> float:
    try:
        result = float(value)
    except ValueError as e:
        raise ParseError(
            _located(f"Field '{name}' is not a number: '{value}'", line_number),
            line_number,
        ) from e

    if not math.isfinite(result):
        raise ParseError(
            _located(f"Field '{name}' is not finite: '{value}'", line_number),
            line_number,
        )
    return result


def _parse_int(name: str, value: str, line_number: int | None) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ParseError(
            _located(f"Field '{name}' is not an integer: '{value}'", line_number),
            line_number,
        ) from e


def _located(message: str, line_number: int | None) -> str:
    if line_number is None:
        return message
    return f"Line {line_number}: {message}"


def _is_header(fields: Sequence[str]) -> bool:
    return [f.lower() for f in fields] == list(CSV_COLUMNS)


def parse_fields(
    fields: Sequence[str], line_number: int | None = None
) -> HousingRecord:
    """
    Parse pre-split fields into a HousingRecord.

    Args:
        fields: 13 string fields in CSV_COLUMNS order (whitespace is trimmed)
        line_number: Optional 1-based source line, used in error messages

    Returns:
        Parsed HousingRecord

    Raises:
        ParseError: On field count mismatch, unparseable numeric field,
            or when the row is the header
    """
    values = [f.strip() for f in fields]

    if len(values) != len(CSV_COLUMNS):
        raise ParseError(
            _located(
                f"Expected {len(CSV_COLUMNS)} fields, got {len(values)}", line_number
            ),
            line_number,
        )

    if _is_header(values):
        raise ParseError(
            _located("Row is the header; skip it before parsing", line_number),
            line_number,
        )

    return HousingRecord(
        price=_parse_float("price", values[0], line_number),
        area=_parse_float("area", values[1], line_number),
        bedrooms=_parse_int("bedrooms", values[2], line_number),
        bathrooms=_parse_int("bathrooms", values[3], line_number),
        stories=_parse_int("stories", values[4], line_number),
        mainroad=parse_flag(values[5]),
        guestroom=parse_flag(values[6]),
        basement=parse_flag(values[7]),
        hotwaterheating=parse_flag(values[8]),
        airconditioning=parse_flag(values[9]),
        parking=_parse_int("parking", values[10], line_number),
        prefarea=parse_flag(values[11]),
        furnishing_status=values[12],
    )


def parse_line(line: str, line_number: int | None = None) -> HousingRecord:
    """Split one raw CSV line and parse it. See parse_fields()."""
    return parse_fields(line.rstrip("\r\n").split(DELIMITER), line_number)
