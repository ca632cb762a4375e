"""External service clients: mailbox, calendar, capture sink, OAuth."""

from .mailbox import Mailbox
from .capture import CaptureClient, TaskSink

__all__ = ["Mailbox", "CaptureClient", "TaskSink"]
