"""Flatmap key conventions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class FlatmapOptions(BaseModel):
    """
    Conventions of the flattened key space.

    Defaults follow the Terraform flatmap format: segments joined by ``.``
    and collection sizes stored under ``<address>.#``.
    """

    model_config = ConfigDict(frozen=True)

    separator: str = "."
    count_marker: str = "#"

    @field_validator("separator", "count_marker")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    def split(self, key: str) -> tuple[str, ...]:
        return tuple(key.split(self.separator))

    def join(self, segments: tuple[str, ...] | list[str]) -> str:
        return self.separator.join(segments)

    def count_key(self, address: str) -> str:
        """Return the key holding the element count of *address*."""
        return f"{address}{self.separator}{self.count_marker}"


DEFAULT_OPTIONS = FlatmapOptions()
