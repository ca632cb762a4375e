"""
Abstract base class for header predicates.
"""

from abc import ABC, abstractmethod

from mailtender.core.models import Headers


class HeaderPredicate(ABC):
    """A pure test over a message's headers.

    Predicates must never raise: an absent header is simply not a match.
    Predicates compose with ``&``.
    """

    @abstractmethod
    def __call__(self, headers: Headers) -> bool:
        """
        Check whether the headers satisfy this predicate.

        Args:
            headers: Mapping of header name to value

        Returns:
            True if the predicate holds
        """
        pass

    def __and__(self, other: "HeaderPredicate") -> "HeaderPredicate":
        from mailtender.classifiers.patterns import AllOf

        return AllOf(self, other)
