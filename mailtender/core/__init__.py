"""Core modules for message filing."""

from .logging import configure_logging, get_logger, bind_context, clear_context
from .models import (
    BodyAccessor,
    BodyFormat,
    BodyPart,
    BodyView,
    CaptureResponse,
    DispatchOutcome,
    DispatchStatus,
    HandlerResult,
    Headers,
    Message,
    Schedule,
    TaskRecord,
    Thread,
)
from .exceptions import (
    AuthorizationError,
    LabelNotFound,
    MailtenderError,
    RequiredFieldMissing,
)
from .formatter import CaptureRequest, encode_component, encode_task, format_task

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "BodyAccessor",
    "BodyFormat",
    "BodyPart",
    "BodyView",
    "CaptureResponse",
    "DispatchOutcome",
    "DispatchStatus",
    "HandlerResult",
    "Headers",
    "Message",
    "Schedule",
    "TaskRecord",
    "Thread",
    "AuthorizationError",
    "LabelNotFound",
    "MailtenderError",
    "RequiredFieldMissing",
    "CaptureRequest",
    "encode_component",
    "encode_task",
    "format_task",
]
