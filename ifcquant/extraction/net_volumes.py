"""Measured net volumes read with ifcopenshell.

Unlike the bounded text parser this opens the whole file and follows
relationships:

* ``IfcRelDefinesByProperties -> IfcElementQuantity -> IfcQuantityVolume``
  gives each related element its summed volume.
* ``IfcRelVoidsElement`` subtracts an opening's volume from its host.

The result maps STEP ids (as text, matching :attr:`Element.id`) to volumes and
is meant as ``volume_overrides`` for the pipeline.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

import ifcopenshell

logger = logging.getLogger(__name__)


def _definitions(rel: ifcopenshell.entity_instance) -> list[ifcopenshell.entity_instance]:
    """IFC4 allows a set of definitions where IFC2x3 has exactly one."""
    definition = rel.RelatingPropertyDefinition
    if definition is None:
        return []
    if isinstance(definition, (list, tuple)):
        return list(definition)
    return [definition]


def _quantity_volume(definition: ifcopenshell.entity_instance) -> float:
    total = 0.0
    for quantity in definition.Quantities or ():
        if quantity.is_a("IfcQuantityVolume") and quantity.VolumeValue is not None:
            total += float(quantity.VolumeValue)
    return total


def compute_net_volumes(ifc_path: str | Path) -> dict[str, float]:
    """Return ``{step_id: net_volume}`` for *ifc_path*.

    Any failure to open or walk the file is logged and yields an empty map so
    callers keep their heuristic volumes.
    """
    ifc_path = Path(ifc_path)
    try:
        ifc_file = ifcopenshell.open(str(ifc_path))
    except Exception:
        logger.warning("Could not open %s for net volumes", ifc_path, exc_info=True)
        return {}

    try:
        gross: dict[int, float] = defaultdict(float)
        for rel in ifc_file.by_type("IfcRelDefinesByProperties"):
            for definition in _definitions(rel):
                if not definition.is_a("IfcElementQuantity"):
                    continue
                volume = _quantity_volume(definition)
                if volume <= 0:
                    continue
                for obj in rel.RelatedObjects or ():
                    gross[obj.id()] += volume

        net = dict(gross)
        for rel in ifc_file.by_type("IfcRelVoidsElement"):
            host = rel.RelatingBuildingElement
            opening = rel.RelatedOpeningElement
            if host is None or opening is None:
                continue
            opening_volume = gross.get(opening.id(), 0.0)
            if opening_volume > 0:
                net[host.id()] = net.get(host.id(), 0.0) - opening_volume
    except Exception:
        logger.warning("Net volume lookup failed for %s", ifc_path, exc_info=True)
        return {}

    logger.info("Net volumes found for %d entities in %s", len(net), ifc_path)
    return {str(step_id): volume for step_id, volume in net.items()}
