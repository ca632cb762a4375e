"""
Field extraction rules.

Each field is an explicit (anchors, default) rule: anchors are tried in
order against their source text (subject, raw transport body, or a decoded
MIME part) and the first hit wins. When every anchor misses, the field
takes its default, which may be None ("unknown"). Only a required field
that stays unknown is an error.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from mailtender.core.exceptions import RequiredFieldMissing
from mailtender.core.logging import get_logger
from mailtender.core.models import BodyAccessor, BodyFormat, Headers, Schedule
from mailtender.extractors.dates import parse_schedule

log = get_logger(__name__)

SUBJECT = "subject"
RAW = "raw"
BODY = "body"


@dataclass(frozen=True)
class Anchor:
    """A regex located in one source of message text."""

    pattern: str
    source: str = BODY
    part: tuple[int, ...] = ()  # Index path into the MIME tree for BODY
    group: int | str = 1
    flags: int = 0

    def __post_init__(self):
        if self.source not in (SUBJECT, RAW, BODY):
            raise ValueError(f"Unknown anchor source: {self.source}")
        object.__setattr__(self, "_regex", re.compile(self.pattern, self.flags))

    def search(self, text: str) -> str | None:
        match = self._regex.search(text)
        if match is None:
            return None
        return match.group(self.group)


def text(value: str, today: date) -> str | None:
    """Trimmed single-line text; blank counts as a miss."""
    value = value.strip()
    return value or None


def block(value: str, today: date) -> str | None:
    """Multi-line block with CRLF line endings normalized."""
    value = value.replace("\r", "")
    return value if value.strip() else None


def schedule(value: str, today: date) -> Schedule | None:
    """Date or date window, parsed tolerantly."""
    return parse_schedule(value.replace("\r", ""), today)


def today_schedule(today: date) -> Schedule:
    """Default for date fields: scheduled today."""
    return Schedule(today)


@dataclass(frozen=True)
class FieldRule:
    """How to locate one named field."""

    name: str
    anchors: tuple[Anchor, ...]
    transform: Callable[[str, date], Any] = text
    default: Any = None  # A value, or a callable taking today's date
    required: bool = False

    def default_value(self, today: date) -> Any:
        if callable(self.default):
            return self.default(today)
        return self.default


@dataclass
class Fields:
    """Extracted values by field name; None means unknown."""

    values: dict[str, Any] = field(default_factory=dict)
    fallbacks: dict[str, str] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def get(self, name: str, default: Any = None) -> Any:
        value = self.values.get(name)
        return default if value is None else value

    def is_known(self, name: str) -> bool:
        return self.values.get(name) is not None


class FieldExtractor:
    """Applies a template's field rules to one message."""

    def __init__(self, template: str, rules: tuple[FieldRule, ...], logger=None):
        self.template = template
        self.rules = rules
        self.log = logger or log

    def extract(self, headers: Headers, body: BodyAccessor, today: date) -> Fields:
        """
        Extract every field for one message.

        The body is only fetched when an anchor actually needs it.

        Raises:
            RequiredFieldMissing: if a required field has no value
        """
        fields = Fields()
        for rule in self.rules:
            value, used = self._extract_field(rule, headers, body, today)
            if value is None and rule.required:
                raise RequiredFieldMissing(self.template, rule.name)
            fields.values[rule.name] = value
            if used != "anchor_0":
                fields.fallbacks[rule.name] = used
                self.log.debug(
                    "extraction_fallback",
                    template=self.template,
                    field=rule.name,
                    used=used,
                )
        return fields

    def _extract_field(
        self,
        rule: FieldRule,
        headers: Headers,
        body: BodyAccessor,
        today: date,
    ) -> tuple[Any, str]:
        for index, anchor in enumerate(rule.anchors):
            source = self._source_text(anchor, headers, body)
            if source is None:
                continue
            found = anchor.search(source)
            if found is None:
                continue
            value = rule.transform(found, today)
            if value is not None:
                return value, f"anchor_{index}"
        return rule.default_value(today), "default"

    @staticmethod
    def _source_text(anchor: Anchor, headers: Headers, body: BodyAccessor) -> str | None:
        if anchor.source == SUBJECT:
            return headers.get("Subject")
        if anchor.source == RAW:
            return body.get(BodyFormat.RAW).raw
        return body.get(BodyFormat.FULL).text_at(anchor.part)
