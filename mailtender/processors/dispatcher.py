"""
Dispatcher: routes one inbox message to the first matching template.

The dispatcher owns every side effect. Handlers only return tasks; the
dispatcher files them and archives the message (removes INBOX) when all of
them were accepted. A failure inside one handler is logged and reported in
the outcome, never raised, so one broken template cannot stop a scan.
"""

from datetime import date
from typing import Callable

from mailtender.config import Settings, settings as default_settings
from mailtender.core.exceptions import RequiredFieldMissing
from mailtender.core.logging import get_logger
from mailtender.core.models import (
    BodyAccessor,
    DispatchOutcome,
    DispatchStatus,
    Headers,
    Message,
)
from mailtender.handlers.base import BaseHandler, FilingContext
from mailtender.handlers.registry import HandlerRegistry, registry as default_registry
from mailtender.processors.base import TaskFiler
from mailtender.services.capture import TaskSink
from mailtender.services.mailbox import Mailbox

log = get_logger(__name__)


class Dispatcher:
    """Match, extract, file and archive, one message at a time."""

    def __init__(
        self,
        mailbox: Mailbox,
        sink: TaskSink,
        registry: HandlerRegistry | None = None,
        settings: Settings | None = None,
        dry_run: bool | None = None,
        clock: Callable[[], date] = date.today,
        logger=None,
    ):
        self.mailbox = mailbox
        self.registry = registry if registry is not None else default_registry
        self.settings = settings or default_settings
        self.dry_run = self.settings.dry_run if dry_run is None else dry_run
        self.clock = clock
        self.log = logger or log
        self.filer = TaskFiler(sink, dry_run=self.dry_run, logger=self.log)

    def find_handler(self, headers: Headers, logger=None) -> BaseHandler | None:
        """First registered handler whose matcher accepts the headers."""
        logger = logger or self.log
        for handler in self.registry:
            logger.debug("matching", handler=handler.name)
            try:
                if handler.match(headers):
                    return handler
            except Exception as e:
                logger.error("matcher_error", handler=handler.name, error=str(e))
        return None

    def dispatch(self, message: Message, headers: Headers) -> DispatchOutcome:
        """
        Dispatch one message.

        Args:
            message: Message to classify
            headers: Its headers

        Returns:
            DispatchOutcome describing what happened
        """
        mlog = self.log.bind(message_id=message.id)
        mlog.info("dispatching", subject=headers.get("Subject"), sender=headers.get("From"))

        handler = self.find_handler(headers, mlog)
        if handler is None:
            mlog.debug("no_template_matched")
            return DispatchOutcome.unmatched(message.id)

        name = handler.name
        mlog.info("template_matched", template=name)

        body = BodyAccessor(lambda body_format: self.mailbox.get_body(message.id, body_format))
        context = FilingContext(
            today=self.clock(),
            priority=self.settings.task_priority,
            message_link=self.settings.message_link(message.id),
            logger=mlog,
        )

        try:
            result = handler.handle(message, headers, body, context)
        except RequiredFieldMissing as e:
            mlog.error("required_field_missing", template=name, field=e.field)
            return DispatchOutcome(
                status=DispatchStatus.ERROR,
                message_id=message.id,
                template=name,
                error=str(e),
            )
        except Exception as e:
            mlog.error("handler_error", template=name, error=str(e), error_type=type(e).__name__)
            return DispatchOutcome(
                status=DispatchStatus.ERROR,
                message_id=message.id,
                template=name,
                error=str(e),
            )

        try:
            filed = self.filer.file(result.tasks, logger=mlog, template=name)
        except Exception as e:
            mlog.error("capture_error", template=name, error=str(e))
            return DispatchOutcome(
                status=DispatchStatus.ERROR,
                message_id=message.id,
                template=name,
                tasks=result.tasks,
                error=str(e),
            )

        if not filed:
            return DispatchOutcome(
                status=DispatchStatus.CAPTURE_FAILED,
                message_id=message.id,
                template=name,
                tasks=result.tasks,
                error="capture failed",
            )

        archived = self._archive(message, mlog) if result.archive else False
        mlog.info("message_filed", template=name, tasks=len(result.tasks), archived=archived)
        return DispatchOutcome(
            status=DispatchStatus.FILED,
            message_id=message.id,
            template=name,
            tasks=result.tasks,
            archived=archived,
        )

    def _archive(self, message: Message, mlog) -> bool:
        label = self.settings.inbox_label
        if self.dry_run:
            mlog.info("archive_skipped", reason="dry_run", label=label)
            return False
        try:
            self.mailbox.remove_message_label(message.id, label)
        except Exception as e:
            mlog.error("archive_failed", label=label, error=str(e))
            return False
        mlog.info("message_archived", label=label)
        return True
