"""
Set element checks against a resource in a state snapshot.

Usage::

    check = check_type_set_elem_nested_attrs(
        "aws_security_group.web",
        "ingress",
        {"from_port": "80", "protocol": "tcp"},
    )
    check(snapshot)  # raises StateCheckError on failure

Each check first validates that the resource exists, has a primary
instance and, for a literal address, that the attribute carries a count
marker.  Only then is the set scanned.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .address import LiteralAddress, parse_address
from .base import StateCheck
from .exceptions import (
    NoPrimaryInstanceError,
    NotACollectionError,
    ResourceNotFoundError,
)
from .matcher import match_set_elem_attr, match_set_elem_nested_attrs
from .options import DEFAULT_OPTIONS, FlatmapOptions

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .address import Address, AddressLike
    from .state import FlatState, StateSnapshot

logger = logging.getLogger("flatstate_checks.checks")


def lookup_resource(
    snapshot: StateSnapshot,
    name: str,
    *,
    options: FlatmapOptions = DEFAULT_OPTIONS,
) -> FlatState:
    """Return the primary instance attributes of resource *name*."""
    found = snapshot.lookup(name, options=options)
    if not found.exists:
        raise ResourceNotFoundError(name, snapshot.path)
    if not found.has_primary:
        raise NoPrimaryInstanceError(name, snapshot.path)
    return found.attributes


def validate_set_address(
    snapshot: StateSnapshot,
    name: str,
    address: Address,
    *,
    options: FlatmapOptions = DEFAULT_OPTIONS,
) -> FlatState:
    """
    Check the preconditions shared by every set check.

    Depth addresses have no fixed collection key, so their count markers
    are verified while the set is located.
    """
    state = lookup_resource(snapshot, name, options=options)
    if isinstance(address, LiteralAddress) and not state.has_count_marker(
        address.key
    ):
        raise NotACollectionError(address.key, resource=name)
    return state


class TypeSetElemAttrCheck(StateCheck):
    """A set attribute holds an element equal to ``value``."""

    def __init__(
        self,
        name: str,
        address: AddressLike,
        value: str,
        *,
        options: FlatmapOptions = DEFAULT_OPTIONS,
    ) -> None:
        self.name = name
        self.address = parse_address(address)
        self.value = value
        self.options = options

    def check(self, snapshot: StateSnapshot) -> None:
        state = validate_set_address(
            snapshot, self.name, self.address, options=self.options
        )
        ref = match_set_elem_attr(state, self.address, self.value, resource=self.name)
        logger.debug(
            "%s %s contains %r (element %s)",
            self.name,
            self.address.describe(),
            self.value,
            ref.element_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "check": "type_set_elem_attr",
            "resource": self.name,
            "address": self.address.model_dump(),
            "value": self.value,
        }


class TypeSetElemNestedAttrsCheck(StateCheck):
    """
    A set attribute holds an element carrying every pair in ``values``.

    Provide enough pairs to single out the intended element; extra
    attributes on an element are not compared.
    """

    def __init__(
        self,
        name: str,
        address: AddressLike,
        values: Mapping[str, str],
        *,
        options: FlatmapOptions = DEFAULT_OPTIONS,
    ) -> None:
        self.name = name
        self.address = parse_address(address)
        self.values = dict(values)
        self.options = options

    def check(self, snapshot: StateSnapshot) -> None:
        state = validate_set_address(
            snapshot, self.name, self.address, options=self.options
        )
        match = match_set_elem_nested_attrs(
            state, self.address, self.values, resource=self.name
        )
        logger.debug(
            "%s %s contains %r (element %s of %s)",
            self.name,
            self.address.describe(),
            self.values,
            match.element_id,
            match.collection,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "check": "type_set_elem_nested_attrs",
            "resource": self.name,
            "address": self.address.model_dump(),
            "values": dict(self.values),
        }


def check_type_set_elem_attr(
    name: str,
    address: AddressLike,
    value: str,
    *,
    options: FlatmapOptions = DEFAULT_OPTIONS,
) -> TypeSetElemAttrCheck:
    """Build a check that set *address* of resource *name* contains *value*."""
    return TypeSetElemAttrCheck(name, address, value, options=options)


def check_type_set_elem_nested_attrs(
    name: str,
    address: AddressLike,
    values: Mapping[str, str],
    *,
    options: FlatmapOptions = DEFAULT_OPTIONS,
) -> TypeSetElemNestedAttrsCheck:
    """Build a check that set *address* of resource *name* has an element
    matching all of *values*."""
    return TypeSetElemNestedAttrsCheck(name, address, values, options=options)
