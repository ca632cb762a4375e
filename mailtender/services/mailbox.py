"""
Abstract mailbox capability used by the scan pass and the dispatcher.
"""

from abc import ABC, abstractmethod

from mailtender.core.models import BodyFormat, BodyView, Headers, Message, Thread


class Mailbox(ABC):
    """Abstract interface to the user's mailbox."""

    @abstractmethod
    def list_messages(self, query: str) -> list[Message]:
        """List messages matching a search query (e.g. 'in:inbox is:unread')."""
        pass

    @abstractmethod
    def list_threads(self, query: str) -> list[Thread]:
        """List threads matching a search query. Message lists may be empty."""
        pass

    @abstractmethod
    def get_thread(self, thread_id: str) -> Thread:
        """Fetch a thread with its message summaries (id and date)."""
        pass

    @abstractmethod
    def get_headers(self, message_id: str) -> Headers:
        """Fetch a message's headers as a name -> value mapping."""
        pass

    @abstractmethod
    def get_body(self, message_id: str, body_format: BodyFormat) -> BodyView:
        """Fetch a message body in raw or decoded form."""
        pass

    @abstractmethod
    def remove_message_label(self, message_id: str, label_name: str) -> None:
        """Remove a label (by name) from a message."""
        pass

    @abstractmethod
    def remove_thread_label(self, thread_id: str, label_name: str) -> None:
        """Remove a label (by name) from every message in a thread."""
        pass
