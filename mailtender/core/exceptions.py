"""
Exception types raised inside the filing pipeline.
"""


class MailtenderError(Exception):
    """Base class for mailtender errors."""


class RequiredFieldMissing(MailtenderError):
    """A template could not extract a field it needs to build a task."""

    def __init__(self, template: str, field: str):
        self.template = template
        self.field = field
        super().__init__(f"{template}: required field '{field}' not found")


class LabelNotFound(MailtenderError):
    """A label name does not exist in the mailbox."""

    def __init__(self, label_name: str):
        self.label_name = label_name
        super().__init__(f"Label not found: {label_name}")


class AuthorizationError(MailtenderError):
    """No usable OAuth credentials are available."""
