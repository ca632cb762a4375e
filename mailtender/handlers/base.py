"""
Abstract base class for message handlers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from mailtender.core.models import BodyAccessor, Headers, HandlerResult, Message


@dataclass(frozen=True)
class FilingContext:
    """Per-dispatch values a handler needs to build its tasks."""

    today: date
    priority: str
    message_link: str
    logger: object = None


class BaseHandler(ABC):
    """Abstract handler interface for one known sender template."""

    name: str = ""

    @abstractmethod
    def match(self, headers: Headers) -> bool:
        """
        Check if this handler recognizes the message.

        Args:
            headers: Message headers (Subject, From, To, ...)

        Returns:
            True if this handler should process the message
        """
        pass

    @abstractmethod
    def handle(
        self,
        message: Message,
        headers: Headers,
        body: BodyAccessor,
        context: FilingContext,
    ) -> HandlerResult:
        """
        Extract fields and build the tasks for a matched message.

        Handlers never call the capture sink or touch labels; the
        dispatcher does both based on the returned result.

        Args:
            message: Message being processed
            headers: Message headers
            body: Lazy accessor for the message body
            context: Date, priority and deep link for the tasks

        Returns:
            HandlerResult with the tasks to file, in order
        """
        pass
