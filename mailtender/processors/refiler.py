"""
Context refiler: turns any message sitting in a context label into a task.

No template matching happens here. The task heading is the message
subject and the task context is the label name; for "waiting on a reply"
contexts the context is qualified with the counterparty's name.
"""

import re
from datetime import date
from typing import Callable

from mailtender.config import Settings, settings as default_settings
from mailtender.core.formatter import format_task
from mailtender.core.logging import get_logger
from mailtender.core.models import Headers, Message, Schedule, Thread
from mailtender.processors.base import TaskFiler
from mailtender.services.capture import TaskSink

log = get_logger(__name__)

DISPLAY_NAME = re.compile(r'"?(.*?)"?\s<')
LOCAL_PART = re.compile(r"<?(.*?)@")


def friendly_name(address: str | None) -> str | None:
    """
    Short tag-safe name for an address header.

    'Jane Q. Doe <jane@example.com>' -> 'jane_q__doe'
    'jane.doe@example.com' -> 'jane_doe'
    """
    if not address:
        return None
    match = DISPLAY_NAME.search(address)
    name = match.group(1) if match else None
    if not name:
        match = LOCAL_PART.search(address)
        name = match.group(1) if match else None
    if not name:
        return None
    return re.sub(r"[. ]", "_", name.lower())


class ContextRefiler:
    """Files the newest message of a context-labelled thread as a task."""

    def __init__(
        self,
        sink: TaskSink,
        settings: Settings | None = None,
        dry_run: bool | None = None,
        clock: Callable[[], date] = date.today,
        logger=None,
    ):
        self.settings = settings or default_settings
        self.dry_run = self.settings.dry_run if dry_run is None else dry_run
        self.clock = clock
        self.log = logger or log
        self.filer = TaskFiler(sink, dry_run=self.dry_run, logger=self.log)

    def qualified_context(self, context: str, headers: Headers) -> str:
        """Context tag, prefixed with the counterparty for waiting contexts."""
        if not self.settings.is_waiting_context(context):
            return context

        counterparty = friendly_name(headers.get("To"))
        owner = self.settings.owner_name
        if not owner:
            self.log.warning("owner_name_unset", context=context, setting="MAILTENDER_OWNER_NAME")
        if counterparty is None or (owner and counterparty == owner):
            # Waiting tasks are always attributed to the other party
            counterparty = friendly_name(headers.get("From"))
        if not counterparty:
            return context
        return f"{counterparty}:{context}"

    def refile(self, context: str, thread: Thread, message: Message, headers: Headers) -> bool:
        """
        Build and file a generic task for a context-labelled message.

        Args:
            context: Context label name (e.g. '@waiting')
            thread: Thread carrying the label
            message: Newest message of the thread
            headers: That message's headers

        Returns:
            True if the task was accepted; the caller then removes the label
        """
        tlog = self.log.bind(thread_id=thread.id, message_id=message.id, context=context)
        tlog.info("refiling", subject=headers.get("Subject"), sender=headers.get("From"))

        subject = (headers.get("Subject") or "").strip()
        if not subject:
            tlog.error("required_field_missing", field="Subject")
            return False

        task = format_task(
            heading=subject,
            context=self.qualified_context(context, headers),
            priority=self.settings.task_priority,
            scheduled=Schedule(self.clock()),
            body=self.settings.message_link(message.id),
        )
        try:
            return self.filer.file([task], logger=tlog)
        except Exception as e:
            tlog.error("capture_error", error=str(e))
            return False
