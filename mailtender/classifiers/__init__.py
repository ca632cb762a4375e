"""Header predicates for recognizing known senders."""

from .base import HeaderPredicate
from .patterns import (
    AllOf,
    Contains,
    Equals,
    Matches,
    sender_contains,
    sender_is,
    subject_contains,
    subject_is,
    subject_matches,
)

__all__ = [
    "HeaderPredicate",
    "AllOf",
    "Contains",
    "Equals",
    "Matches",
    "sender_contains",
    "sender_is",
    "subject_contains",
    "subject_is",
    "subject_matches",
]
