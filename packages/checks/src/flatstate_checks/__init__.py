from .address import (
    Address,
    AddressLike,
    DepthAddress,
    ElementRef,
    LiteralAddress,
    parse_address,
    resolve_elements,
)
from .base import AllChecks, AnyCheck, StateCheck, compose_checks
from .checks import (
    TypeSetElemAttrCheck,
    TypeSetElemNestedAttrsCheck,
    check_type_set_elem_attr,
    check_type_set_elem_nested_attrs,
    lookup_resource,
    validate_set_address,
)
from .exceptions import (
    AggregateCheckError,
    CountMismatchError,
    InvalidAddressError,
    InvalidCountError,
    NoMatchingElementError,
    NoPrimaryInstanceError,
    NotACollectionError,
    ResourceNotFoundError,
    StateCheckError,
    StateShapeError,
)
from .grouping import group_elements, read_count
from .matcher import ElementMatch, match_set_elem_attr, match_set_elem_nested_attrs
from .options import DEFAULT_OPTIONS, FlatmapOptions
from .state import (
    FlatEntry,
    FlatState,
    InstanceState,
    ResourceLookup,
    ResourceState,
    StateSnapshot,
)

__all__ = [
    # State model
    "FlatEntry",
    "FlatState",
    "InstanceState",
    "ResourceState",
    "ResourceLookup",
    "StateSnapshot",
    "FlatmapOptions",
    "DEFAULT_OPTIONS",
    # Addressing
    "Address",
    "AddressLike",
    "LiteralAddress",
    "DepthAddress",
    "ElementRef",
    "parse_address",
    "resolve_elements",
    # Grouping / matching
    "group_elements",
    "read_count",
    "ElementMatch",
    "match_set_elem_attr",
    "match_set_elem_nested_attrs",
    # Checks
    "StateCheck",
    "AllChecks",
    "AnyCheck",
    "compose_checks",
    "TypeSetElemAttrCheck",
    "TypeSetElemNestedAttrsCheck",
    "check_type_set_elem_attr",
    "check_type_set_elem_nested_attrs",
    "lookup_resource",
    "validate_set_address",
    # Exceptions
    "StateCheckError",
    "StateShapeError",
    "ResourceNotFoundError",
    "NoPrimaryInstanceError",
    "NotACollectionError",
    "CountMismatchError",
    "InvalidCountError",
    "NoMatchingElementError",
    "AggregateCheckError",
    "InvalidAddressError",
]
