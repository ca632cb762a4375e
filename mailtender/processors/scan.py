"""
Scan processor: one full pass over the inbox and the context labels.

Messages and threads are processed one at a time, to completion. Any
failure is logged and the pass moves on to the next message, thread or
context; unfiled messages keep their label and are retried next scan.
"""

from datetime import date
from typing import Callable

from mailtender.config import Settings, settings as default_settings
from mailtender.core.logging import bind_context, clear_context, get_logger
from mailtender.core.models import DispatchStatus, Thread
from mailtender.handlers.registry import HandlerRegistry
from mailtender.processors.base import BaseProcessor
from mailtender.processors.dispatcher import Dispatcher
from mailtender.processors.refiler import ContextRefiler
from mailtender.services.capture import TaskSink
from mailtender.services.mailbox import Mailbox

log = get_logger(__name__)

STAT_KEYS = (
    "inbox_messages",
    "filed",
    "unmatched",
    "failed",
    "threads",
    "refiled",
    "refile_failed",
)


class ScanProcessor(BaseProcessor):
    """Runs the inbox pass then the context-folder pass."""

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
        self.settings = settings or default_settings
        self.dry_run = self.settings.dry_run if dry_run is None else dry_run
        self.log = logger or log
        self.dispatcher = Dispatcher(
            mailbox,
            sink,
            registry=registry,
            settings=self.settings,
            dry_run=self.dry_run,
            clock=clock,
            logger=self.log,
        )
        self.refiler = ContextRefiler(
            sink,
            settings=self.settings,
            dry_run=self.dry_run,
            clock=clock,
            logger=self.log,
        )

    def process(self) -> dict:
        stats = dict.fromkeys(STAT_KEYS, 0)
        self.log.info("scan_starting", dry_run=self.dry_run)
        self.scan_inbox(stats)
        self.scan_contexts(stats)
        self.log.info("scan_complete", **stats)
        return stats

    def scan_inbox(self, stats: dict) -> None:
        query = self.settings.inbox_query
        try:
            messages = self.mailbox.list_messages(query)
        except Exception as e:
            self.log.error("inbox_list_error", query=query, error=str(e))
            return

        self.log.info("inbox_messages_found", count=len(messages), query=query)
        for message in messages:
            stats["inbox_messages"] += 1
            bind_context(message_id=message.id)
            try:
                headers = self.mailbox.get_headers(message.id)
                outcome = self.dispatcher.dispatch(message, headers)
            except Exception as e:
                self.log.error("message_error", error=str(e))
                stats["failed"] += 1
                continue
            finally:
                clear_context()

            if outcome.status == DispatchStatus.FILED:
                stats["filed"] += 1
            elif outcome.status == DispatchStatus.UNMATCHED:
                stats["unmatched"] += 1
            else:
                stats["failed"] += 1

    def scan_contexts(self, stats: dict) -> None:
        for context in self.settings.contexts:
            query = self.settings.context_search(context)
            try:
                threads = self.mailbox.list_threads(query)
            except Exception as e:
                self.log.error("context_list_error", context=context, error=str(e))
                continue

            self.log.info("context_threads_found", context=context, count=len(threads))
            for thread in threads:
                stats["threads"] += 1
                bind_context(thread_id=thread.id, context=context)
                try:
                    refiled = self.refile_thread(context, thread)
                except Exception as e:
                    self.log.error("thread_error", error=str(e))
                    refiled = False
                finally:
                    clear_context()
                stats["refiled" if refiled else "refile_failed"] += 1

    def refile_thread(self, context: str, thread: Thread) -> bool:
        """Refile the newest message of a thread and drop the context label."""
        thread = self.mailbox.get_thread(thread.id)
        message = thread.latest()
        if message is None:
            self.log.warning("empty_thread", thread_id=thread.id)
            return False

        headers = self.mailbox.get_headers(message.id)
        if not self.refiler.refile(context, thread, message, headers):
            return False

        if self.dry_run:
            self.log.info("unlabel_skipped", reason="dry_run", thread_id=thread.id, label=context)
            return True
        self.mailbox.remove_thread_label(thread.id, context)
        self.log.info("thread_unlabeled", thread_id=thread.id, label=context)
        return True
