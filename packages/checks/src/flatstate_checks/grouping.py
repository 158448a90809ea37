"""Reconstruction of set elements from flattened keys."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .address import LiteralAddress, resolve_elements
from .exceptions import CountMismatchError, InvalidCountError

if TYPE_CHECKING:
    from .address import Address
    from .state import FlatState

logger = logging.getLogger("flatstate_checks.grouping")

ElementGroups = dict[str, dict[str, str]]


def read_count(
    state: FlatState,
    collection: str,
    *,
    resource: str | None = None,
) -> int:
    """Return the declared element count of *collection*."""
    raw = state[state.options.count_key(collection)]
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidCountError(collection, raw, resource=resource)
    return int(raw)


def group_elements(
    state: FlatState,
    address: Address,
    *,
    resource: str | None = None,
) -> dict[str, ElementGroups]:
    """
    Group the keys of every addressed set by element identifier.

    Returns ``{collection: {element_id: {nested_path: value}}}``.  A literal
    address always yields exactly one collection, even when the set is
    empty.  For each collection, the number of groups must equal its count
    marker, otherwise :class:`CountMismatchError` is raised.
    """
    join = state.options.join
    collections: dict[str, ElementGroups] = {}
    if isinstance(address, LiteralAddress):
        collections[address.key] = {}

    for ref in resolve_elements(state, address, resource=resource):
        elements = collections.setdefault(ref.collection, {})
        elements.setdefault(ref.element_id, {})[join(ref.remainder)] = ref.value

    for collection, elements in collections.items():
        expected = read_count(state, collection, resource=resource)
        if len(elements) != expected:
            raise CountMismatchError(
                collection,
                expected,
                len(elements),
                state,
                resource=resource,
            )
        logger.debug("Reconstructed %d element(s) of %s", expected, collection)
    return collections
