"""Aggregation buckets and the full building model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ifcquant.models.element import Element


class Quantity(BaseModel):
    """Running totals for all elements sharing one grouping key."""

    key: str
    count: int = 0
    total_area: float = 0.0
    total_volume: float = 0.0
    elements: list[Element] = Field(default_factory=list)

    def add(self, element: Element) -> None:
        """Fold *element* into this bucket."""
        self.count += 1
        self.total_area += element.number("area")
        self.total_volume += element.number("volume")
        self.elements.append(element)

    def summary(self) -> dict[str, Any]:
        """Return the totals without the member list."""
        return {
            "key": self.key,
            "count": self.count,
            "total_area": self.total_area,
            "total_volume": self.total_volume,
        }


class PivotRow(Quantity):
    """A pivot row bucket with one child bucket per column key."""

    children: dict[str, Quantity] = Field(default_factory=dict)


class Level(BaseModel):
    """A named storey from the fixed level list."""

    id: str
    name: str
    elevation: float = 0.0
    elements: list[Element] = Field(default_factory=list)


class QuantitySummary(BaseModel):
    """Quantities keyed by entity type and by level name."""

    by_type: dict[str, Quantity] = Field(default_factory=dict)
    by_level: dict[str, Quantity] = Field(default_factory=dict)


class BuildingModel(BaseModel):
    """Everything one parse pass produces.

    A new model is built on every load; nothing updates an existing one.
    """

    elements: list[Element] = Field(default_factory=list)
    levels: list[Level] = Field(default_factory=list)
    quantities: QuantitySummary = Field(default_factory=QuantitySummary)
    bytes_read: int = 0
    truncated: bool = False
