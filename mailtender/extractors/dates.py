"""
Tolerant date parsing for extracted fields.

Accepts fixed formats ("12/21/2020") and loose phrases ("Wednesday,
December 23"), and two-sided delivery windows ("December 21 - December 23").
Unparseable text yields None so the caller can fall back to its default.
"""

import re
from datetime import date, datetime, time

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from mailtender.core.models import Schedule

# Whitespace around the separator keeps ISO dates ("2020-12-21") intact
RANGE_SEPARATOR = re.compile(r"\s+(?:-|–|—|to)\s+")


def parse_date(text: str, default: date) -> date | None:
    """
    Parse a date phrase.

    Args:
        text: Date text as found in the message
        default: Date supplying any component the text leaves out (e.g. year)

    Returns:
        The parsed date, or None if the text holds no recognizable date
    """
    if not text or not text.strip():
        return None
    try:
        parsed = date_parser.parse(
            text.strip(),
            fuzzy=True,
            default=datetime.combine(default, time()),
        )
    except (ValueError, OverflowError):
        return None
    return parsed.date()


def parse_schedule(text: str, today: date) -> Schedule | None:
    """Parse a single date or a 'start - end' window into a Schedule."""
    pieces = RANGE_SEPARATOR.split(text.strip(), maxsplit=1)
    if len(pieces) == 2:
        start = parse_date(pieces[0], today)
        if start is not None:
            end = parse_date(pieces[1], start)
            if end is not None:
                if end < start:
                    # "December 30 - January 2"
                    end = end + relativedelta(years=1)
                return Schedule(start, end)
    day = parse_date(text, today)
    if day is None:
        return None
    return Schedule(day)
