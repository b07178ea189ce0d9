"""Element — one parsed IFC entity, enriched with heuristic quantities.

An EntityRecord is the raw ``#id=TYPE(params)`` parse unit; an Element is the
record after classification.  Both are immutable once created.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

PropertyValue = Union[str, float]


class EntityRecord(BaseModel):
    """A ``#id=TYPE(params)`` statement split into its parts."""

    model_config = ConfigDict(frozen=True)

    id: str
    """STEP instance id, kept as text so large ids keep their precision."""

    type: str
    """Entity keyword as written in the file, e.g. ``IFCWALL``."""

    params: tuple[str, ...] = ()
    """Top-level parameter tokens, each trimmed."""


class Element(BaseModel):
    """The in-memory representation of one entity used by all consumers."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    name: str
    level: str | None = None
    properties: Mapping[str, PropertyValue] = Field(default_factory=dict, validate_default=True)
    """Read-only; the same element is shared by every bucket that holds it."""

    params: tuple[str, ...] = ()
    material: str | None = None

    @field_validator("properties", mode="after")
    @classmethod
    def _freeze_properties(cls, value: Mapping[str, PropertyValue]) -> Mapping[str, PropertyValue]:
        return MappingProxyType(dict(value))

    @field_serializer("properties")
    def _dump_properties(self, value: Mapping[str, PropertyValue]) -> dict[str, PropertyValue]:
        return dict(value)

    def number(self, key: str) -> float:
        """Return a numeric property, or 0.0 when missing or non-numeric."""
        value = self.properties.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return 0.0

    def attribute(self, field: str) -> PropertyValue | None:
        """Look up *field* as an element attribute first, then as a property."""
        if field in type(self).model_fields and field not in ("properties", "params"):
            value = getattr(self, field)
        else:
            value = self.properties.get(field)
        if value is None or value == "":
            return None
        return value
