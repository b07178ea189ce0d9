"""Text -> records -> elements -> model.

Entry points: ``parse_content(text)`` for in-memory text and
``load_model(source)`` for a file or raw bytes read through the bounded
:class:`~ifcquant.parsing.reader.IncrementalReader`.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from ifcquant.config import ReaderSettings
from ifcquant.extraction.classifier import classify
from ifcquant.extraction.levels import LevelAssigner, attach_elements, default_levels
from ifcquant.models.element import Element, EntityRecord
from ifcquant.models.model import BuildingModel, Level, QuantitySummary
from ifcquant.parsing.reader import IncrementalReader, Source
from ifcquant.parsing.record import parse_record
from ifcquant.parsing.tokenizer import split_records
from ifcquant.quantities.aggregator import by_level, by_type

logger = logging.getLogger(__name__)


def parse_records(text: str, keep_tail: bool = True) -> list[EntityRecord]:
    """Tokenize *text* and keep every record with the entity shape."""
    records: list[EntityRecord] = []
    skipped = 0
    for chunk in split_records(text, keep_tail=keep_tail):
        try:
            record = parse_record(chunk)
        except Exception:
            logger.debug("Dropping record %.60r after parse error", chunk, exc_info=True)
            record = None
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped %d non-entity records", skipped)
    return records


def elements_from_records(
    records: Sequence[EntityRecord],
    *,
    rng: random.Random | None = None,
    assigner: LevelAssigner | None = None,
    volume_overrides: dict[str, float] | None = None,
) -> list[Element]:
    """Classify *records* in order; a record that fails is dropped."""
    elements: list[Element] = []
    for record in records:
        level = assigner.assign(len(elements)) if assigner is not None else None
        try:
            element = classify(record, rng, volume_overrides, level=level)
        except Exception:
            logger.debug("Dropping #%s (%s) after classify error", record.id, record.type, exc_info=True)
            continue
        elements.append(element)
    return elements


def parse_content(
    text: str,
    keep_tail: bool = True,
    *,
    rng: random.Random | None = None,
    assigner: LevelAssigner | None = None,
    volume_overrides: dict[str, float] | None = None,
) -> list[Element]:
    """Parse STEP *text* into elements."""
    records = parse_records(text, keep_tail=keep_tail)
    return elements_from_records(
        records, rng=rng, assigner=assigner, volume_overrides=volume_overrides,
    )


def build_model(
    elements: Sequence[Element],
    levels: Sequence[Level] | None = None,
    *,
    bytes_read: int = 0,
    truncated: bool = False,
) -> BuildingModel:
    """Assemble levels and quantities around already classified elements."""
    elements = list(elements)
    return BuildingModel(
        elements=elements,
        levels=attach_elements(levels if levels is not None else default_levels(), elements),
        quantities=QuantitySummary(by_type=by_type(elements), by_level=by_level(elements)),
        bytes_read=bytes_read,
        truncated=truncated,
    )


async def load_model(
    source: Source,
    *,
    settings: ReaderSettings | None = None,
    level_strategy: str = "modulo",
    rng: random.Random | None = None,
    volume_overrides: dict[str, float] | None = None,
) -> BuildingModel:
    """Read a bounded prefix of *source* and build its :class:`BuildingModel`.

    Raises :class:`~ifcquant.parsing.reader.NoEntitiesFoundError` when nothing
    parses and :class:`~ifcquant.parsing.reader.SourceReadError` on I/O
    failure.
    """
    levels = default_levels()

    def parse(text: str, keep_tail: bool) -> list[Element]:
        # a fresh assigner per window so re-reads restart the level cycle
        assigner = LevelAssigner(levels, strategy=level_strategy, rng=rng)
        return parse_content(
            text, keep_tail, rng=rng, assigner=assigner, volume_overrides=volume_overrides,
        )

    reader = IncrementalReader(settings)
    result = await reader.read(source, parse)
    model = build_model(
        result.elements, levels, bytes_read=result.bytes_read, truncated=result.truncated,
    )
    logger.info(
        "Model built: %d elements, %d types, %d levels",
        len(model.elements), len(model.quantities.by_type), len(model.levels),
    )
    return model
