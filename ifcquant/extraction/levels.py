"""Heuristic level assignment.

Elements are bucketed onto a small fixed list of levels.  The file's own
spatial structure (IfcBuildingStorey containment) is never consulted; this is
a display heuristic, not a storey lookup.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from ifcquant.config import DEFAULT_LEVELS
from ifcquant.models.element import Element
from ifcquant.models.model import Level

STRATEGIES = ("modulo", "random")


def default_levels() -> list[Level]:
    """Fresh, empty copies of :data:`~ifcquant.config.DEFAULT_LEVELS`."""
    return [
        Level(id=level_id, name=name, elevation=elevation)
        for level_id, name, elevation in DEFAULT_LEVELS
    ]


class LevelAssigner:
    """Pick a level name for the n-th parsed element.

    Parameters
    ----------
    levels:
        Candidate levels, in order.
    strategy:
        ``"modulo"`` cycles through the levels by element index.  ``"random"``
        draws from *rng* (a seeded :class:`random.Random` keeps it
        reproducible).
    """

    def __init__(
        self,
        levels: Sequence[Level],
        strategy: str = "modulo",
        rng: random.Random | None = None,
    ) -> None:
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown level strategy: {strategy!r}")
        if not levels:
            raise ValueError("At least one level is required")
        self.levels = list(levels)
        self.strategy = strategy
        self._rng = rng or random.Random()

    def assign(self, index: int) -> str:
        if self.strategy == "random":
            return self._rng.choice(self.levels).name
        return self.levels[index % len(self.levels)].name


def attach_elements(levels: Sequence[Level], elements: Sequence[Element]) -> list[Level]:
    """Return new levels holding their member elements, in element order."""
    members: dict[str, list[Element]] = {lvl.name: [] for lvl in levels}
    for element in elements:
        if element.level in members:
            members[element.level].append(element)
    return [
        Level(id=lvl.id, name=lvl.name, elevation=lvl.elevation, elements=members[lvl.name])
        for lvl in levels
    ]
