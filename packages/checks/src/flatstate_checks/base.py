"""Base class for state checks with composition support."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .exceptions import AggregateCheckError, StateCheckError

if TYPE_CHECKING:
    from .state import StateSnapshot


class StateCheck(ABC):
    """
    An assertion about a state snapshot.

    Calling a check with a snapshot returns ``None`` when it holds and raises
    a :class:`StateCheckError` when it does not.
    """

    @abstractmethod
    def check(self, snapshot: StateSnapshot) -> None:
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        ...

    def __call__(self, snapshot: StateSnapshot) -> None:
        self.check(snapshot)

    def is_satisfied_by(self, snapshot: StateSnapshot) -> bool:
        try:
            self.check(snapshot)
        except StateCheckError:
            return False
        return True

    def __and__(self, other: StateCheck) -> AllChecks:
        return AllChecks(self, other)

    def __or__(self, other: StateCheck) -> AnyCheck:
        return AnyCheck(self, other)


class AllChecks(StateCheck):
    """
    Every check must hold.

    Stops at the first failure unless ``aggregate`` is set, in which case
    all checks run and the failures are raised together.
    """

    def __init__(self, *checks: StateCheck, aggregate: bool = False) -> None:
        self.checks = checks
        self.aggregate = aggregate

    def check(self, snapshot: StateSnapshot) -> None:
        if not self.aggregate:
            for item in self.checks:
                item.check(snapshot)
            return

        errors: list[StateCheckError] = []
        for item in self.checks:
            try:
                item.check(snapshot)
            except StateCheckError as err:
                errors.append(err)
        if errors:
            raise AggregateCheckError(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": "and",
            "aggregate": self.aggregate,
            "checks": [item.to_dict() for item in self.checks],
        }


class AnyCheck(StateCheck):
    """At least one check must hold; otherwise the last failure is raised."""

    def __init__(self, *checks: StateCheck) -> None:
        if not checks:
            raise ValueError("AnyCheck requires at least one check")
        self.checks = checks

    def check(self, snapshot: StateSnapshot) -> None:
        *leading, last = self.checks
        for item in leading:
            try:
                item.check(snapshot)
            except StateCheckError:
                continue
            return
        last.check(snapshot)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": "or",
            "checks": [item.to_dict() for item in self.checks],
        }


def compose_checks(*checks: StateCheck, aggregate: bool = False) -> AllChecks:
    """Combine *checks* into one that requires all of them."""
    return AllChecks(*checks, aggregate=aggregate)
