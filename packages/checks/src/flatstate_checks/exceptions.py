"""
Check failure hierarchy.

Every failed check raises a subclass of ``StateCheckError``.  It derives
from ``AssertionError`` so a failing check reports as a failed assertion
under pytest, and every error provides ``to_dict()`` for structured
reporting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def _subject(resource: str | None, address: str) -> str:
    if resource is None:
        return f'"{address}"'
    return f'"{resource}" "{address}"'


def _dump(attributes: Mapping[str, str]) -> str:
    return repr(dict(sorted(attributes.items())))


class StateCheckError(AssertionError):
    """Base exception for all state check failures."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidAddressError(ValueError):
    """An address argument could not be interpreted."""

    def __init__(self, message: str, address: object = None) -> None:
        self.address = address
        super().__init__(message)


class ResourceNotFoundError(StateCheckError):
    """The resource is absent from the snapshot."""

    def __init__(self, resource: str, module_path: str) -> None:
        self.resource = resource
        self.module_path = module_path
        super().__init__(f"Not found: {resource} in {module_path}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RESOURCE_NOT_FOUND",
            "resource": self.resource,
            "module_path": self.module_path,
        }


class NoPrimaryInstanceError(StateCheckError):
    """The resource exists but carries no primary instance."""

    def __init__(self, resource: str, module_path: str) -> None:
        self.resource = resource
        self.module_path = module_path
        super().__init__(f"No primary instance: {resource} in {module_path}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "NO_PRIMARY_INSTANCE",
            "resource": self.resource,
            "module_path": self.module_path,
        }


class NotACollectionError(StateCheckError):
    """
    No count marker exists at the resolved collection address.

    ``address`` is the address the caller asked for; ``collection`` is the
    concrete collection address whose marker was missing (they differ for
    depth addresses).
    """

    def __init__(
        self,
        address: str,
        *,
        resource: str | None = None,
        collection: str | None = None,
    ) -> None:
        self.address = address
        self.resource = resource
        self.collection = collection or address
        message = f"{_subject(resource, address)} does not appear to be a TypeSet"
        if self.collection != address:
            message += f" (no count marker for {self.collection!r})"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "NOT_A_COLLECTION",
            "resource": self.resource,
            "address": self.address,
            "collection": self.collection,
        }


class StateShapeError(StateCheckError):
    """The flattened state does not have the shape its markers declare."""


class InvalidCountError(StateShapeError):
    """The count marker value is not a decimal integer."""

    def __init__(
        self,
        address: str,
        raw_count: str,
        *,
        resource: str | None = None,
    ) -> None:
        self.address = address
        self.raw_count = raw_count
        self.resource = resource
        super().__init__(
            f"{_subject(resource, address)} has an invalid element count: "
            f"{raw_count!r}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_COUNT",
            "resource": self.resource,
            "address": self.address,
            "raw_count": self.raw_count,
        }


class CountMismatchError(StateShapeError):
    """The number of reconstructed elements disagrees with the count marker."""

    def __init__(
        self,
        address: str,
        expected: int,
        actual: int,
        attributes: Mapping[str, str],
        *,
        resource: str | None = None,
    ) -> None:
        self.address = address
        self.expected = expected
        self.actual = actual
        self.resource = resource
        self.attributes = dict(attributes)
        super().__init__(
            f"Expected the number of set items to be {expected}, got {actual}.\n"
            f"State: {_dump(attributes)}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "COUNT_MISMATCH",
            "resource": self.resource,
            "address": self.address,
            "expected": self.expected,
            "actual": self.actual,
        }


class NoMatchingElementError(StateCheckError):
    """
    No element of the set satisfies the request.

    ``expected`` is either the scalar value or the mapping of nested
    attribute/value pairs that was asked for.
    """

    def __init__(
        self,
        address: str,
        expected: str | Mapping[str, str],
        attributes: Mapping[str, str],
        *,
        resource: str | None = None,
    ) -> None:
        self.address = address
        self.resource = resource
        self.attributes = dict(attributes)
        subject = _subject(resource, address)
        if isinstance(expected, str):
            self.expected: str | dict[str, str] = expected
            message = f"{subject} has no element with value: {expected!r}"
        else:
            self.expected = dict(expected)
            message = (
                f"{subject} has no element with attr/value pairs: {self.expected!r}"
            )
        super().__init__(f"{message} in state: {_dump(attributes)}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "NO_MATCHING_ELEMENT",
            "resource": self.resource,
            "address": self.address,
            "expected": self.expected,
        }


class AggregateCheckError(StateCheckError):
    """Several composed checks failed; every failure is kept."""

    def __init__(self, errors: Sequence[StateCheckError]) -> None:
        self.errors = list(errors)
        lines = [f"{len(self.errors)} check(s) failed:"]
        lines.extend(f"  {i}: {err}" for i, err in enumerate(self.errors, start=1))
        super().__init__("\n".join(lines))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "AGGREGATE_CHECK_ERROR",
            "errors": [err.to_dict() for err in self.errors],
        }
