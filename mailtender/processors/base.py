"""
Base classes shared by the filing pipelines.
"""

from abc import ABC, abstractmethod

from mailtender.core.logging import get_logger
from mailtender.core.models import TaskRecord
from mailtender.services.capture import TaskSink

log = get_logger(__name__)


class BaseProcessor(ABC):
    """Abstract processor interface for a scan pipeline."""

    @abstractmethod
    def process(self) -> dict:
        """
        Run one pass.

        Returns:
            Processing statistics dict
        """
        pass


class TaskFiler:
    """Sends tasks to the sink in order, stopping at the first failure.

    In dry-run mode tasks are logged but never sent, and count as filed.
    """

    def __init__(self, sink: TaskSink, dry_run: bool = False, logger=None):
        self.sink = sink
        self.dry_run = dry_run
        self.log = logger or log

    def file(self, tasks: list[TaskRecord], logger=None, **log_fields) -> bool:
        """
        File a chain of tasks.

        A later task is only sent if every earlier one succeeded.

        Args:
            tasks: Tasks to send, in order
            logger: Logger bound to the message being filed
            **log_fields: Extra fields for every log line

        Returns:
            True if every task was accepted (or dry run)
        """
        flog = logger or self.log
        for step, task in enumerate(tasks, start=1):
            flog.info(
                "task_built",
                heading=task.heading,
                context=task.context,
                priority=task.priority,
                scheduled=task.scheduled.render(),
                step=step,
                steps=len(tasks),
                **log_fields,
            )
            flog.debug("task_body", body=task.body)

            if self.dry_run:
                flog.info("capture_skipped", reason="dry_run", heading=task.heading)
                continue

            response = self.sink.capture(task)
            if not response.success:
                flog.error(
                    "capture_failed",
                    heading=task.heading,
                    status_code=response.status_code,
                    reason=response.reason,
                    step=step,
                    steps=len(tasks),
                    **log_fields,
                )
                return False
        return True
