"""
Task formatting and transport encoding.

The capture endpoint reads its target from the URL path, so every piece of
task text is percent-encoded with only the unreserved characters
(letters, digits, "-_.~") left as-is.
"""

from dataclasses import dataclass
from urllib.parse import quote

from mailtender.core.models import Schedule, TaskRecord


def encode_component(text: str) -> str:
    """Percent-encode UTF-8 text, escaping everything but unreserved characters."""
    return quote(text, safe="")


def format_task(
    heading: str,
    context: str,
    priority: str,
    scheduled: Schedule,
    body: str,
) -> TaskRecord:
    """Build a TaskRecord, normalizing the heading to lowercase."""
    return TaskRecord(
        heading=heading.lower(),
        context=context,
        priority=priority,
        scheduled=scheduled,
        body=body,
    )


def task_title(task: TaskRecord) -> str:
    """Org-style headline: '[#C] heading  :context:'."""
    return f"[{task.priority}] {task.heading}  :{task.context}:"


def task_body(task: TaskRecord) -> str:
    """Task body prefixed with its SCHEDULED line."""
    return f"SCHEDULED: {task.scheduled.render()}\n{task.body}"


@dataclass(frozen=True)
class CaptureRequest:
    """Percent-encoded pieces of a task, ready to drop into a URL path."""

    priority: str
    heading: str
    context: str
    scheduled: str
    title: str
    body: str

    def path(self, template: str) -> str:
        """Fill a path template such as '/capture/b/LINK/{title}/{body}'."""
        return template.format(
            priority=self.priority,
            heading=self.heading,
            context=self.context,
            scheduled=self.scheduled,
            title=self.title,
            body=self.body,
        )


def encode_task(task: TaskRecord) -> CaptureRequest:
    """Percent-encode a task for the capture endpoint."""
    return CaptureRequest(
        priority=encode_component(task.priority),
        heading=encode_component(task.heading),
        context=encode_component(task.context),
        scheduled=encode_component(task.scheduled.render()),
        title=encode_component(task_title(task)),
        body=encode_component(task_body(task)),
    )
