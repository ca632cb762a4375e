"""
Data models for message classification and task filing.

Uses dataclasses for clean, typed data structures.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable

Headers = dict[str, str]


class BodyFormat(str, Enum):
    """Form in which a message body is fetched from the mailbox."""

    RAW = "raw"  # Full transport-encoded RFC822 source
    FULL = "full"  # Decoded MIME part tree


class DispatchStatus(str, Enum):
    """Result of dispatching one message."""

    UNMATCHED = "unmatched"
    FILED = "filed"
    CAPTURE_FAILED = "capture_failed"
    ERROR = "error"


@dataclass
class Message:
    """A mailbox message reference. Headers and bodies are fetched separately."""

    id: str
    thread_id: str | None = None
    internal_date: int = 0  # Milliseconds since epoch


@dataclass
class Thread:
    """A conversation thread with its message summaries."""

    id: str
    messages: list[Message] = field(default_factory=list)

    def latest(self) -> Message | None:
        """Most recent message in the thread."""
        if not self.messages:
            return None
        return max(self.messages, key=lambda m: m.internal_date)


@dataclass
class BodyPart:
    """One node of a decoded MIME body tree."""

    mime_type: str = "text/plain"
    text: str = ""
    parts: list["BodyPart"] = field(default_factory=list)

    def part(self, *path: int) -> "BodyPart | None":
        """Follow child indexes down the tree, e.g. part(0, 0)."""
        node = self
        for index in path:
            if index >= len(node.parts):
                return None
            node = node.parts[index]
        return node


@dataclass
class BodyView:
    """Body content of a message in whichever form was fetched."""

    raw: str | None = None
    payload: BodyPart | None = None

    def text_at(self, path: tuple[int, ...] = ()) -> str | None:
        """Decoded text of the part at path, or None if absent."""
        if self.payload is None:
            return None
        node = self.payload.part(*path)
        if node is None or not node.text:
            return None
        return node.text


class BodyAccessor:
    """Lazily fetches a message body, at most once per body format."""

    def __init__(self, fetch: Callable[[BodyFormat], BodyView]):
        self._fetch = fetch
        self._bodies: dict[BodyFormat, BodyView] = {}

    def get(self, body_format: BodyFormat) -> BodyView:
        if body_format not in self._bodies:
            self._bodies[body_format] = self._fetch(body_format)
        return self._bodies[body_format]


@dataclass(frozen=True)
class Schedule:
    """A scheduled date, or a two-sided date window."""

    start: date
    end: date | None = None

    @staticmethod
    def stamp(day: date) -> str:
        """Bracketed timestamp like <2020-12-21 Mon>."""
        return f"<{day.strftime('%Y-%m-%d %a')}>"

    def render(self) -> str:
        if self.end is None or self.end == self.start:
            return self.stamp(self.start)
        return f"{self.stamp(self.start)}--{self.stamp(self.end)}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class TaskRecord:
    """A normalized task ready to be sent to the capture sink."""

    heading: str
    context: str
    priority: str
    scheduled: Schedule
    body: str


@dataclass
class CaptureResponse:
    """Result of one capture sink call."""

    success: bool
    status_code: int | None = None
    reason: str = ""


@dataclass
class HandlerResult:
    """What a template produced for one message."""

    template: str
    tasks: list[TaskRecord] = field(default_factory=list)
    fields: dict[str, Any] = field(default_factory=dict)
    archive: bool = True


@dataclass
class DispatchOutcome:
    """Result of dispatching one message through the registry."""

    status: DispatchStatus
    message_id: str
    template: str | None = None
    tasks: list[TaskRecord] = field(default_factory=list)
    archived: bool = False
    error: str | None = None

    @property
    def matched(self) -> bool:
        return self.status != DispatchStatus.UNMATCHED

    @property
    def success(self) -> bool:
        return self.status == DispatchStatus.FILED

    @classmethod
    def unmatched(cls, message_id: str) -> "DispatchOutcome":
        return cls(status=DispatchStatus.UNMATCHED, message_id=message_id)
