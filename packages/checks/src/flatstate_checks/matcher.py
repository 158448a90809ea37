"""
Set element matching.

Both matchers work on a single :class:`FlatState` and either return the
matching element or raise.  Comparison is plain string equality.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from .address import parse_address, resolve_elements
from .exceptions import NoMatchingElementError
from .grouping import group_elements

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .address import AddressLike, ElementRef
    from .state import FlatState

logger = logging.getLogger("flatstate_checks.matcher")


class ElementMatch(NamedTuple):
    """The set element that satisfied a nested match."""

    collection: str
    element_id: str
    attributes: dict[str, str]


def match_set_elem_attr(
    state: FlatState,
    address: AddressLike,
    value: str,
    *,
    resource: str | None = None,
) -> ElementRef:
    """
    Find a scalar element of the addressed set equal to *value*.

    Only direct elements are considered: for ``tags`` the key ``tags.123``
    can match, ``tags.123.name`` cannot.  Stops at the first match.
    """
    target = parse_address(address)
    for ref in resolve_elements(state, target, resource=resource, direct_only=True):
        if ref.value == value:
            logger.debug(
                "Matched %r at %s element %s",
                value,
                ref.collection,
                ref.element_id,
            )
            return ref
    raise NoMatchingElementError(target.describe(), value, state, resource=resource)


def _count_matches(element: Mapping[str, str], values: Mapping[str, str]) -> int:
    return sum(
        1 for key, value in values.items() if key in element and element[key] == value
    )


def match_set_elem_nested_attrs(
    state: FlatState,
    address: AddressLike,
    values: Mapping[str, str],
    *,
    resource: str | None = None,
) -> ElementMatch:
    """
    Find an element of the addressed set holding every pair in *values*.

    Attributes the element has beyond *values* are ignored, so a request
    that is not specific enough may match an unintended element; the first
    element found wins.
    """
    target = parse_address(address)
    groups = group_elements(state, target, resource=resource)
    wanted = len(values)
    for collection, elements in groups.items():
        for element_id, element in elements.items():
            if _count_matches(element, values) == wanted:
                logger.debug(
                    "Matched %d attribute(s) at %s element %s",
                    wanted,
                    collection,
                    element_id,
                )
                return ElementMatch(collection, element_id, dict(element))
    raise NoMatchingElementError(target.describe(), values, state, resource=resource)
