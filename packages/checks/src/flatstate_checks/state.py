"""
State snapshot model.

``FlatState`` holds the flattened attributes of one resource instance as
pre-split ``(segments, value)`` entries.  ``StateSnapshot`` groups
resources by identifier and is the accessor the checks read from.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from .options import DEFAULT_OPTIONS, FlatmapOptions


class FlatEntry(NamedTuple):
    """A single flattened attribute."""

    key: str
    segments: tuple[str, ...]
    value: str


class FlatState(Mapping[str, str]):
    """
    Read-only mapping of dotted keys to string values.

    Keys are split once on construction; consumers walk ``entries`` instead
    of re-splitting raw keys.  Iteration order carries no meaning.
    """

    __slots__ = ("_entries", "_index", "_options")

    def __init__(
        self,
        attributes: Mapping[str, str] | Iterable[tuple[str, str]] = (),
        *,
        options: FlatmapOptions = DEFAULT_OPTIONS,
    ) -> None:
        items = attributes.items() if isinstance(attributes, Mapping) else attributes
        index: dict[str, str] = {}
        for key, value in items:
            index[str(key)] = str(value)
        self._index = index
        self._options = options
        self._entries = tuple(
            FlatEntry(key, options.split(key), value) for key, value in index.items()
        )

    @property
    def entries(self) -> tuple[FlatEntry, ...]:
        return self._entries

    @property
    def options(self) -> FlatmapOptions:
        return self._options

    def __getitem__(self, key: str) -> str:
        return self._index[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"FlatState({dict(sorted(self._index.items()))!r})"

    def as_dict(self) -> dict[str, str]:
        return dict(self._index)

    def has_count_marker(self, address: str) -> bool:
        return self._options.count_key(address) in self._index


class InstanceState(BaseModel):
    """Attributes of a single resource instance."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)


class ResourceState(BaseModel):
    """A resource and its primary instance, if any."""

    model_config = ConfigDict(frozen=True)

    type: str = ""
    primary: InstanceState | None = None


class ResourceLookup(NamedTuple):
    exists: bool
    has_primary: bool
    attributes: FlatState


class StateSnapshot(BaseModel):
    """
    Resolved state of one module.

    Usage::

        snapshot = StateSnapshot.with_resource(
            "aws_security_group.web",
            {"ingress.#": "1", "ingress.0.from_port": "80"},
        )
        found = snapshot.lookup("aws_security_group.web")
    """

    model_config = ConfigDict(frozen=True)

    path: str = "root"
    resources: dict[str, ResourceState] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StateSnapshot:
        return cls.model_validate(dict(data))

    @classmethod
    def with_resource(
        cls,
        name: str,
        attributes: Mapping[str, str],
        *,
        type: str = "",  # noqa: A002
        id: str = "",  # noqa: A002
    ) -> StateSnapshot:
        """Build a snapshot holding a single resource with a primary instance."""
        primary = InstanceState(id=id, attributes=dict(attributes))
        return cls(resources={name: ResourceState(type=type, primary=primary)})

    def lookup(
        self,
        name: str,
        *,
        options: FlatmapOptions = DEFAULT_OPTIONS,
    ) -> ResourceLookup:
        resource = self.resources.get(name)
        if resource is None:
            return ResourceLookup(False, False, FlatState(options=options))
        if resource.primary is None:
            return ResourceLookup(True, False, FlatState(options=options))
        return ResourceLookup(
            True,
            True,
            FlatState(resource.primary.attributes, options=options),
        )
