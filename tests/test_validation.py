"""Tests for circuitcore.validation."""

from dataclasses import dataclass

import pytest

from circuitcore.validation import (
    KnownError,
    MultipleErrors,
    Status,
    StatusError,
    UnknownError,
    Validation,
    check_duplicates,
    check_weak_duplicates,
    flatten,
    get_all_internal_status_errors,
    resolve,
)


@dataclass
class Item(Validation):
    id: int
    error: str = ""

    def validate(self):
        if self.error:
            raise KnownError(self.error)
        return Status.VALID

    def class_name(self):
        return "Item"


class TestErrorStrings:
    def test_unknown(self):
        assert str(UnknownError()) == "Unknown Issue"

    def test_known(self):
        assert str(KnownError("No Sources")) == "Known Issue: No Sources"
        assert KnownError("No Sources").message == "No Sources"

    def test_multiple(self):
        error = MultipleErrors([KnownError("a"), KnownError("b")])
        assert str(error) == "Multiple Issues: [Known('a'), Known('b')]"

    def test_equality_compares_payload(self):
        assert KnownError("a") == KnownError("a")
        assert KnownError("a") != KnownError("b")
        assert KnownError("a") != UnknownError("a")
        assert MultipleErrors([KnownError("a")]) == MultipleErrors([KnownError("a")])

    def test_status_str(self):
        assert str(Status.VALID) == "Valid"


class TestHelpers:
    def test_collects_every_failure(self):
        items = [Item(1, "first"), Item(2), Item(3, "second")]
        errors = get_all_internal_status_errors(items)
        assert errors == [KnownError("first"), KnownError("second")]

    def test_check_duplicates(self):
        errors = check_duplicates([Item(1), Item(2), Item(1)])
        assert errors == [KnownError("Duplicate: 1, Item")]

    def test_check_duplicates_empty_when_unique(self):
        assert check_duplicates([Item(1), Item(2)]) == []

    def test_check_weak_duplicates(self):
        errors = check_weak_duplicates([4, 5, 4, 4], lambda _: "Element")
        assert errors == [KnownError("Duplicate: 4, Element"), KnownError("Duplicate: 4, Element")]

    def test_resolve_valid(self):
        assert resolve([]) is Status.VALID

    def test_resolve_single(self):
        with pytest.raises(KnownError) as exc:
            resolve([KnownError("only")])
        assert exc.value.message == "only"

    def test_resolve_multiple(self):
        with pytest.raises(MultipleErrors) as exc:
            resolve([KnownError("a"), KnownError("b")])
        assert exc.value.errors == [KnownError("a"), KnownError("b")]

    def test_flatten_nested(self):
        nested = MultipleErrors([KnownError("a"), MultipleErrors([KnownError("b"), UnknownError()])])
        assert flatten(nested) == [KnownError("a"), KnownError("b"), UnknownError()]
        assert flatten(KnownError("a")) == [KnownError("a")]

    def test_errors_are_status_errors(self):
        assert isinstance(MultipleErrors([]), StatusError)
