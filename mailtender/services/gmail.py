"""
Gmail API client implementing the Mailbox interface.
"""

import base64
from typing import Any, Iterator

from googleapiclient.discovery import build

from mailtender.core.exceptions import LabelNotFound
from mailtender.core.logging import get_logger
from mailtender.core.models import (
    BodyFormat,
    BodyPart,
    BodyView,
    Headers,
    Message,
    Thread,
)
from mailtender.services.mailbox import Mailbox

log = get_logger(__name__)

USER_ID = "me"


def decode_base64url(data: str | None) -> str:
    """Decode Gmail's base64url body data to text."""
    if not data:
        return ""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def parse_payload(payload: dict[str, Any]) -> BodyPart:
    """Convert a Gmail message payload into a BodyPart tree."""
    return BodyPart(
        mime_type=payload.get("mimeType", "text/plain"),
        text=decode_base64url(payload.get("body", {}).get("data")),
        parts=[parse_payload(part) for part in payload.get("parts", [])],
    )


class GmailMailbox(Mailbox):
    """Mailbox backed by the Gmail REST API."""

    def __init__(self, service=None, credentials=None, logger=None):
        """
        Args:
            service: Prebuilt Gmail API resource (used in tests)
            credentials: OAuth credentials used to build the resource
            logger: Structured logger
        """
        if service is None:
            service = build("gmail", "v1", credentials=credentials, cache_discovery=False)
        self.service = service
        self.log = logger or log
        self._label_ids: dict[str, str] | None = None

    def _paginate(self, request_fn, key: str, **params) -> Iterator[dict[str, Any]]:
        page_token = None
        while True:
            if page_token:
                params["pageToken"] = page_token
            response = request_fn(userId=USER_ID, **params).execute()
            yield from response.get(key, [])
            page_token = response.get("nextPageToken")
            if not page_token:
                break

    def list_messages(self, query: str) -> list[Message]:
        items = self._paginate(self.service.users().messages().list, "messages", q=query)
        return [Message(id=item["id"], thread_id=item.get("threadId")) for item in items]

    def list_threads(self, query: str) -> list[Thread]:
        items = self._paginate(self.service.users().threads().list, "threads", q=query)
        return [Thread(id=item["id"]) for item in items]

    def get_thread(self, thread_id: str) -> Thread:
        response = (
            self.service.users()
            .threads()
            .get(userId=USER_ID, id=thread_id, format="minimal", fields="id,messages(id,internalDate)")
            .execute()
        )
        messages = [
            Message(
                id=item["id"],
                thread_id=thread_id,
                internal_date=int(item.get("internalDate", 0)),
            )
            for item in response.get("messages", [])
        ]
        return Thread(id=thread_id, messages=messages)

    def get_headers(self, message_id: str) -> Headers:
        response = (
            self.service.users()
            .messages()
            .get(userId=USER_ID, id=message_id, format="metadata")
            .execute()
        )
        headers: Headers = {}
        for header in response.get("payload", {}).get("headers", []):
            self.log.debug("message_header", name=header["name"], value=header["value"])
            headers[header["name"]] = header["value"]
        return headers

    def get_body(self, message_id: str, body_format: BodyFormat) -> BodyView:
        response = (
            self.service.users()
            .messages()
            .get(userId=USER_ID, id=message_id, format=body_format.value)
            .execute()
        )
        if body_format == BodyFormat.RAW:
            return BodyView(raw=decode_base64url(response.get("raw")))
        return BodyView(payload=parse_payload(response.get("payload", {})))

    def label_id(self, label_name: str) -> str:
        """Resolve a label name to its id, caching the label list."""
        if self._label_ids is None:
            response = self.service.users().labels().list(userId=USER_ID).execute()
            self._label_ids = {
                label["name"]: label["id"] for label in response.get("labels", [])
            }
        try:
            return self._label_ids[label_name]
        except KeyError:
            raise LabelNotFound(label_name) from None

    def remove_message_label(self, message_id: str, label_name: str) -> None:
        label_id = self.label_id(label_name)
        self.log.info("removing_message_label", message_id=message_id, label=label_name)
        (
            self.service.users()
            .messages()
            .modify(userId=USER_ID, id=message_id, body={"removeLabelIds": [label_id]})
            .execute()
        )

    def remove_thread_label(self, thread_id: str, label_name: str) -> None:
        label_id = self.label_id(label_name)
        self.log.info("removing_thread_label", thread_id=thread_id, label=label_name)
        (
            self.service.users()
            .threads()
            .modify(userId=USER_ID, id=thread_id, body={"removeLabelIds": [label_id]})
            .execute()
        )
