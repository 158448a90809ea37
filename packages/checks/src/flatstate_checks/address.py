"""
Collection addressing.

Two address kinds locate a set inside a flattened state:

- :class:`LiteralAddress` names the collection by its full dotted key
  (``"tags"``, ``"rules.0.ports"``).
- :class:`DepthAddress` names the attribute and the 1-based segment depth at
  which it sits, leaving the leading segments free (``("ports", 3)`` matches
  ``rules.0.ports`` and ``rules.1.ports``).

Both resolve through :func:`resolve_elements` into :class:`ElementRef`
triples of collection address, element identifier and remainder path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import InvalidAddressError, NotACollectionError
from .options import DEFAULT_OPTIONS, FlatmapOptions

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .state import FlatState

logger = logging.getLogger("flatstate_checks.address")


class LiteralAddress(BaseModel):
    """Full dotted key of a collection attribute."""

    model_config = ConfigDict(frozen=True)

    key: str

    @field_validator("key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("address key must not be empty")
        return value

    def describe(self) -> str:
        return self.key


class DepthAddress(BaseModel):
    """
    Attribute name located at a fixed segment depth.

    ``depth`` counts segments from the start of the key, so the attribute
    occupies index ``depth - 1`` and the element identifier index ``depth``.
    ``parent``, when given, pins the leading ``depth - 1`` segments.
    """

    model_config = ConfigDict(frozen=True)

    attribute: str
    depth: int = Field(ge=1)
    parent: str | None = None

    @field_validator("attribute")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("attribute name must not be empty")
        return value

    @model_validator(mode="after")
    def _parent_fills_leading_segments(self) -> DepthAddress:
        problem = _parent_problem(self, DEFAULT_OPTIONS)
        if problem is not None:
            raise ValueError(problem)
        return self

    def describe(self) -> str:
        name = f"{self.parent}.{self.attribute}" if self.parent else self.attribute
        return f"{name} (depth {self.depth})"


Address = LiteralAddress | DepthAddress
AddressLike = str | tuple[str, int] | LiteralAddress | DepthAddress


def parse_address(value: AddressLike) -> Address:
    """
    Normalise an address argument.

    Accepts a dotted key, an ``(attribute, depth)`` tuple or an address
    object.
    """
    if isinstance(value, LiteralAddress | DepthAddress):
        return value
    try:
        if isinstance(value, str):
            return LiteralAddress(key=value)
        if isinstance(value, tuple) and len(value) == 2:
            attribute, depth = value
            if isinstance(depth, bool) or not isinstance(depth, int):
                raise InvalidAddressError(
                    f"Depth must be an integer, got {type(depth).__name__}",
                    address=value,
                )
            return DepthAddress(attribute=attribute, depth=depth)
    except ValidationError as exc:
        raise InvalidAddressError(
            f"Invalid address {value!r}: {exc.errors()[0]['msg']}",
            address=value,
        ) from exc
    raise InvalidAddressError(
        f"Expected a dotted key or an (attribute, depth) tuple, got {value!r}",
        address=value,
    )


class ElementRef(NamedTuple):
    """One flat key seen as part of a set element."""

    collection: str
    element_id: str
    remainder: tuple[str, ...]
    value: str


def resolve_elements(
    state: FlatState,
    address: Address,
    *,
    resource: str | None = None,
    direct_only: bool = False,
) -> Iterator[ElementRef]:
    """
    Yield every flat key that belongs to an element of the addressed set.

    Count-marker keys are never yielded.  A literal address without a count
    marker raises :class:`NotACollectionError`; so does a depth address
    when any collection it locates lacks one.

    With ``direct_only`` only keys sitting directly under an element
    identifier (empty remainder) are considered.  For a depth address this
    also keeps deeper keys that repeat the attribute name from locating
    collections of their own.
    """
    if isinstance(address, LiteralAddress):
        if not state.has_count_marker(address.key):
            raise NotACollectionError(address.key, resource=resource)
        return _scan_literal(state, address, direct_only=direct_only)
    return _scan_depth(state, address, resource=resource, direct_only=direct_only)


def _parent_problem(address: DepthAddress, options: FlatmapOptions) -> str | None:
    if address.parent is None:
        return None
    size = len(options.split(address.parent))
    if size == address.depth - 1:
        return None
    return (
        f"parent {address.parent!r} has {size} segment(s), "
        f"expected {address.depth - 1} for depth {address.depth}"
    )


def _scan_literal(
    state: FlatState, address: LiteralAddress, *, direct_only: bool
) -> Iterator[ElementRef]:
    options = state.options
    prefix = options.split(address.key)
    size = len(prefix)
    for entry in state.entries:
        segments = entry.segments
        if len(segments) <= size or segments[:size] != prefix:
            continue
        if direct_only and len(segments) != size + 1:
            continue
        element_id = segments[size]
        if element_id == options.count_marker:
            continue
        yield ElementRef(address.key, element_id, segments[size + 1 :], entry.value)


def _scan_depth(
    state: FlatState,
    address: DepthAddress,
    *,
    resource: str | None,
    direct_only: bool,
) -> Iterator[ElementRef]:
    options = state.options
    depth = address.depth
    problem = _parent_problem(address, options)
    if problem is not None:
        raise InvalidAddressError(problem, address=address)
    parent = None if address.parent is None else options.split(address.parent)

    refs: list[ElementRef] = []
    collections: set[str] = set()
    for entry in state.entries:
        segments = entry.segments
        if len(segments) <= depth or segments[depth - 1] != address.attribute:
            continue
        if direct_only and len(segments) != depth + 1:
            continue
        if parent is not None and segments[: depth - 1] != parent:
            continue
        element_id = segments[depth]
        if element_id == options.count_marker:
            continue
        collection = options.join(segments[:depth])
        collections.add(collection)
        refs.append(
            ElementRef(collection, element_id, segments[depth + 1 :], entry.value)
        )

    # Markers are verified for every located collection before any key is
    # returned.
    for collection in sorted(collections):
        if not state.has_count_marker(collection):
            raise NotACollectionError(
                address.describe(), resource=resource, collection=collection
            )
    logger.debug(
        "Located %d set(s) for %s: %s",
        len(collections),
        address.describe(),
        sorted(collections),
    )
    return iter(refs)
