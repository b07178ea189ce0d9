"""Derive heuristic properties for an entity from its declared type.

Each rule reads positional parameters: ``param[0]`` is the name and the next
two are dimensions.  Defaults apply whenever a token is missing or does not
parse.  Lengths are millimetres, areas square metres.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from ifcquant.models.element import Element, EntityRecord, PropertyValue
from ifcquant.parsing.record import extract_number, extract_string

logger = logging.getLogger(__name__)

# Placeholder ranges for types without a rule: value = low + span * r, r in [0, 1)
PLACEHOLDER_AREA = (1.0, 10.0)
PLACEHOLDER_VOLUME = (5.0, 20.0)

# Used in place of r when no random source is injected
_DETERMINISTIC_FRACTION = 0.5

_MM2_PER_M2 = 1_000_000


@dataclass(frozen=True)
class DimensionRule:
    """Positional extraction rule for one entity type."""

    first: str
    first_default: float
    second: str
    second_default: float
    area_from_product: bool = True


RULES: dict[str, DimensionRule] = {
    "IFCWALL": DimensionRule("height", 3000.0, "thickness", 200.0),
    "IFCDOOR": DimensionRule("width", 800.0, "height", 2100.0),
    "IFCWINDOW": DimensionRule("width", 1200.0, "height", 1500.0),
    "IFCSPACE": DimensionRule("area", 25.0, "volume", 75.0, area_from_product=False),
}


def _param(params: tuple[str, ...], index: int) -> str | None:
    return params[index] if index < len(params) else None


def _number_or(token: str | None, default: float) -> float:
    value = extract_number(token)
    return default if value is None else value


def element_name(record: EntityRecord) -> str:
    """First parameter as a string, or ``"{type}_{id}"``."""
    name = extract_string(_param(record.params, 0))
    if name is None:
        return f"{record.type}_{record.id}"
    return name


def synthesize_properties(
    record: EntityRecord,
    rng: random.Random | None = None,
) -> dict[str, PropertyValue]:
    """Return the property mapping for *record* according to :data:`RULES`.

    Types without a rule get placeholder area and volume.  Pass *rng* for
    varied demo values; without it the placeholders are the midpoints of
    their ranges so results are reproducible.
    """
    rule = RULES.get(record.type)
    if rule is None:
        r_area = rng.random() if rng is not None else _DETERMINISTIC_FRACTION
        r_volume = rng.random() if rng is not None else _DETERMINISTIC_FRACTION
        return {
            "area": PLACEHOLDER_AREA[0] + PLACEHOLDER_AREA[1] * r_area,
            "volume": PLACEHOLDER_VOLUME[0] + PLACEHOLDER_VOLUME[1] * r_volume,
        }

    first = _number_or(_param(record.params, 1), rule.first_default)
    second = _number_or(_param(record.params, 2), rule.second_default)
    properties: dict[str, PropertyValue] = {rule.first: first, rule.second: second}
    if rule.area_from_product:
        properties["area"] = first * second / _MM2_PER_M2
    return properties


def classify(
    record: EntityRecord,
    rng: random.Random | None = None,
    volume_overrides: dict[str, float] | None = None,
    level: str | None = None,
) -> Element:
    """Build the immutable :class:`Element` for *record*.

    *volume_overrides* maps STEP ids to measured volumes; a hit replaces the
    heuristic volume before the element is created.
    """
    properties = synthesize_properties(record, rng)
    if volume_overrides and record.id in volume_overrides:
        properties["volume"] = float(volume_overrides[record.id])

    return Element(
        id=record.id,
        type=record.type,
        name=element_name(record),
        level=level,
        properties=properties,
        params=record.params,
    )
