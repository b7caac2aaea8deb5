"""
Validation primitives shared by elements, tools and the container.

Every entity that can be checked implements :class:`Validation`. ``validate``
returns a :class:`Status` on success and raises a :class:`StatusError`
otherwise. The helpers in this module collect errors over collections so a
caller sees every problem at once instead of the first one.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, List


class Status(Enum):
    NEW = "New"
    VALID = "Valid"
    SIMPLIFIED = "Simplified"
    SOLVED = "Solved"

    def __str__(self) -> str:
        return self.value


class StatusError(Exception):
    """Base class of every validation and solving failure."""

    def describe(self) -> str:
        return "Unknown Issue"

    def __str__(self) -> str:
        return self.describe()

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.args))


class UnknownError(StatusError):
    """Failure that could not be classified."""


class KnownError(StatusError):
    """Specific, actionable diagnostic."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def describe(self) -> str:
        return f"Known Issue: {self.message}"

    def __repr__(self) -> str:
        return f"Known({self.message!r})"


class MultipleErrors(StatusError):
    """Aggregate raised when more than one independent check fails."""

    def __init__(self, errors: Iterable[StatusError]) -> None:
        self.errors: List[StatusError] = list(errors)
        super().__init__(tuple(self.errors))

    def describe(self) -> str:
        return f"Multiple Issues: [{', '.join(repr(e) for e in self.errors)}]"

    def __repr__(self) -> str:
        return f"Multiple({self.errors!r})"


class Validation(ABC):
    """
    Capability implemented by everything the container checks.

    Implementers expose an integer ``id`` attribute used for duplicate
    detection.
    """

    id: int

    @abstractmethod
    def validate(self) -> Status:
        """Return ``Status.VALID`` or raise a :class:`StatusError`."""

    @abstractmethod
    def class_name(self) -> str:
        """Short label used in duplicate diagnostics."""


def get_all_internal_status_errors(items: Iterable[Validation]) -> List[StatusError]:
    """Run ``validate`` on every item and collect the failures."""
    errors: List[StatusError] = []
    for item in items:
        try:
            item.validate()
        except StatusError as exc:
            errors.append(exc)
    return errors


def check_duplicates(items: Iterable[Validation]) -> List[StatusError]:
    """
    Report every item whose id was already seen earlier in ``items``.

    Returns an empty list when there are no duplicates.
    """
    errors: List[StatusError] = []
    seen: set[int] = set()
    for item in items:
        if item.id in seen:
            errors.append(KnownError(f"Duplicate: {item.id}, {item.class_name()}"))
        seen.add(item.id)
    return errors


def check_weak_duplicates(ids: Iterable[int], class_of: Callable[[int], str]) -> List[StatusError]:
    """
    Duplicate check over plain id references (tool members).

    ``class_of`` resolves a referenced id to its class label for the message.
    """
    errors: List[StatusError] = []
    seen: set[int] = set()
    for ref in ids:
        if ref in seen:
            errors.append(KnownError(f"Duplicate: {ref}, {class_of(ref)}"))
        seen.add(ref)
    return errors


def resolve(errors: List[StatusError]) -> Status:
    """Zero errors is valid, one is raised as is, more are aggregated."""
    if not errors:
        return Status.VALID
    if len(errors) == 1:
        raise errors[0]
    raise MultipleErrors(errors)


def flatten(error: StatusError) -> List[StatusError]:
    """Expand nested :class:`MultipleErrors` into a flat list."""
    if isinstance(error, MultipleErrors):
        flat: List[StatusError] = []
        for inner in error.errors:
            flat.extend(flatten(inner))
        return flat
    return [error]
