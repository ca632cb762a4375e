"""
Shared pytest fixtures for mailtender tests.
"""

from datetime import date

import pytest

from mailtender.config import Settings
from mailtender.core.models import (
    BodyFormat,
    BodyPart,
    BodyView,
    CaptureResponse,
    Headers,
    Message,
    TaskRecord,
    Thread,
)
from mailtender.services.capture import TaskSink
from mailtender.services.mailbox import Mailbox

TODAY = date(2020, 12, 21)  # A Monday


class FakeMailbox(Mailbox):
    """In-memory mailbox that records every mutating call."""

    def __init__(self):
        self.headers: dict[str, Headers] = {}
        self.bodies: dict[tuple[str, BodyFormat], BodyView] = {}
        self.threads: dict[str, Thread] = {}
        self.thread_labels: dict[str, list[str]] = {}
        self.inbox: list[Message] = []
        self.body_fetches: list[tuple[str, BodyFormat]] = []
        self.removed_message_labels: list[tuple[str, str]] = []
        self.removed_thread_labels: list[tuple[str, str]] = []
        self.queries: list[str] = []

    def add_message(self, message_id, headers, raw=None, payload=None, unread=True):
        self.headers[message_id] = headers
        if raw is not None:
            self.bodies[(message_id, BodyFormat.RAW)] = BodyView(raw=raw)
        if payload is not None:
            self.bodies[(message_id, BodyFormat.FULL)] = BodyView(payload=payload)
        message = Message(id=message_id)
        if unread:
            self.inbox.append(message)
        return message

    def add_thread(self, thread_id, label, messages):
        self.threads[thread_id] = Thread(id=thread_id, messages=messages)
        self.thread_labels.setdefault(label, []).append(thread_id)

    def list_messages(self, query):
        self.queries.append(query)
        return list(self.inbox)

    def list_threads(self, query):
        self.queries.append(query)
        label = query.replace("in:", "")
        return [Thread(id=thread_id) for thread_id in self.thread_labels.get(label, [])]

    def get_thread(self, thread_id):
        return self.threads[thread_id]

    def get_headers(self, message_id):
        return self.headers[message_id]

    def get_body(self, message_id, body_format):
        self.body_fetches.append((message_id, body_format))
        return self.bodies.get((message_id, body_format), BodyView())

    def remove_message_label(self, message_id, label_name):
        self.removed_message_labels.append((message_id, label_name))

    def remove_thread_label(self, thread_id, label_name):
        self.removed_thread_labels.append((thread_id, label_name))


class RecordingSink(TaskSink):
    """Sink that records tasks and answers with queued responses."""

    def __init__(self, responses: list[CaptureResponse] | None = None):
        self.tasks: list[TaskRecord] = []
        self.responses = list(responses or [])

    def capture(self, task):
        self.tasks.append(task)
        if self.responses:
            return self.responses.pop(0)
        return CaptureResponse(success=True, status_code=200, reason="OK")


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(_env_file=None, owner_name="jane_doe", log_file="")


@pytest.fixture
def mailbox() -> FakeMailbox:
    return FakeMailbox()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def failing_sink() -> RecordingSink:
    return RecordingSink([CaptureResponse(success=False, status_code=500, reason="Internal Server Error")])


@pytest.fixture
def chase_headers() -> Headers:
    return {
        "Subject": "Your credit card statement is ready",
        "From": "Chase <no-reply@alertsp.chase.com>",
        "To": "Jane Doe <jane@example.com>",
    }


@pytest.fixture
def capitalone_transfer_raw() -> str:
    return (
        "From: Capital One <transfers@notification.capitalone.com>\r\n"
        "Subject: Transfer Money Notice\r\n"
        "\r\n"
        "Hello Jane,\r\n"
        "Amount: $39.99\r\n"
        "From: Orange Parker Allowance, XXXXXX1099\r\n"
        "To: Orange Checking, XXXXXX6515\r\n"
        "Memo: game\r\n"
        "Transferred On: 08/22/2015\r\n"
        "\r\n"
        "Thanks for saving with us.\r\n"
    )


@pytest.fixture
def amazon_order_headers() -> Headers:
    return {
        "Subject": 'Your Amazon.com order of "USB-C Cable".',
        "From": '"auto-confirm@amazon.com" <auto-confirm@amazon.com>',
        "To": "jane@example.com",
    }


def _amazon_order_payload(delivery_block: str) -> BodyPart:
    """Order confirmation with the given delivery lines in its text part."""
    text = (
        "Hello Jane,\r\n"
        'Thank you for shopping with us. You ordered "USB-C Cable".\r\n'
        "View or manage your orders in Your Orders:\r\n"
        "https://www.amazon.com/gp/css/your-orders-access\r\n"
        f"{delivery_block}"
        "Order Total: $12.99\r\n"
    )
    return BodyPart(
        mime_type="multipart/alternative",
        parts=[
            BodyPart(mime_type="text/plain", text=text),
            BodyPart(mime_type="text/html", text="<html>order</html>"),
        ],
    )


@pytest.fixture
def make_amazon_order_body():
    """Factory for order bodies with custom delivery lines."""
    return _amazon_order_payload


@pytest.fixture
def amazon_order_body() -> BodyPart:
    return _amazon_order_payload(
        "Estimated delivery date:\r\n"
        "    Wednesday, December 23, 2020\r\n"
    )


@pytest.fixture
def make_sink():
    """Factory for sinks answering with the given responses in order."""
    return RecordingSink
