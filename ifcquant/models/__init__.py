"""Data models shared by the parser, aggregator, and exporters."""

from ifcquant.models.element import Element, EntityRecord, PropertyValue
from ifcquant.models.model import (
    BuildingModel,
    Level,
    PivotRow,
    Quantity,
    QuantitySummary,
)

__all__ = [
    "BuildingModel",
    "Element",
    "EntityRecord",
    "Level",
    "PivotRow",
    "PropertyValue",
    "Quantity",
    "QuantitySummary",
]
