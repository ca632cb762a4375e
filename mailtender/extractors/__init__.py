"""Field extraction from message subjects and bodies."""

from .dates import parse_date, parse_schedule
from .fields import (
    BODY,
    RAW,
    SUBJECT,
    Anchor,
    FieldExtractor,
    FieldRule,
    Fields,
    block,
    schedule,
    text,
    today_schedule,
)

__all__ = [
    "parse_date",
    "parse_schedule",
    "BODY",
    "RAW",
    "SUBJECT",
    "Anchor",
    "FieldExtractor",
    "FieldRule",
    "Fields",
    "block",
    "schedule",
    "text",
    "today_schedule",
]
