"""
Header predicates used by templates to recognize a sender.

A template usually pairs a From condition (exact address or a domain
substring, since display names drift) with a Subject condition (exact for
stable subjects, substring or regex when the subject carries an order
number or date).
"""

import re
from dataclasses import dataclass

from mailtender.classifiers.base import HeaderPredicate
from mailtender.core.models import Headers


@dataclass(frozen=True)
class Equals(HeaderPredicate):
    """Header value equals a string exactly."""

    header: str
    value: str

    def __call__(self, headers: Headers) -> bool:
        actual = headers.get(self.header)
        return actual is not None and actual == self.value


@dataclass(frozen=True)
class Contains(HeaderPredicate):
    """Header value contains a substring."""

    header: str
    value: str

    def __call__(self, headers: Headers) -> bool:
        actual = headers.get(self.header)
        return actual is not None and self.value in actual


@dataclass(frozen=True)
class Matches(HeaderPredicate):
    """Case-sensitive regex search over a header value."""

    header: str
    pattern: str

    def __post_init__(self):
        # Fail at registration time, not on the first message
        object.__setattr__(self, "_regex", re.compile(self.pattern))

    def __call__(self, headers: Headers) -> bool:
        actual = headers.get(self.header)
        return actual is not None and self._regex.search(actual) is not None


class AllOf(HeaderPredicate):
    """Logical AND of several predicates."""

    def __init__(self, *predicates: HeaderPredicate):
        flat: list[HeaderPredicate] = []
        for predicate in predicates:
            if isinstance(predicate, AllOf):
                flat.extend(predicate.predicates)
            else:
                flat.append(predicate)
        self.predicates = tuple(flat)

    def __call__(self, headers: Headers) -> bool:
        return all(predicate(headers) for predicate in self.predicates)

    def __repr__(self) -> str:
        return f"AllOf{self.predicates!r}"


def subject_is(value: str) -> Equals:
    return Equals("Subject", value)


def subject_contains(value: str) -> Contains:
    return Contains("Subject", value)


def subject_matches(pattern: str) -> Matches:
    return Matches("Subject", pattern)


def sender_is(value: str) -> Equals:
    return Equals("From", value)


def sender_contains(value: str) -> Contains:
    return Contains("From", value)
