"""CSV export of parsed elements.

Two layouts:

* ``entities_to_csv`` — one row per element, one column per property key.
* ``structural_params_to_csv`` — structural types only, raw parameters as
  ``Param_1..Param_N``.

Every field is double-quoted with embedded quotes doubled.  Bytes written to
disk carry a UTF-8 byte-order mark so spreadsheets pick the right encoding.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from pathlib import Path

from ifcquant.config import STRUCTURAL_TYPES
from ifcquant.models.element import Element, PropertyValue

logger = logging.getLogger(__name__)

UTF8_BOM = "\ufeff"


def _format_value(value: PropertyValue | None) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _render(rows: list[list[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue().rstrip("\n")


def _row_properties(element: Element) -> dict[str, PropertyValue]:
    return {"name": element.name, **element.properties}


def entities_to_csv(elements: Sequence[Element]) -> str:
    """Full-entity CSV: ``ID, Type`` then every property key seen.

    Keys are ordered by first appearance across *elements*; an element
    without a key gets an empty field.
    """
    if not elements:
        return ""

    keys: dict[str, None] = {}
    for element in elements:
        for key in _row_properties(element):
            keys.setdefault(key)

    rows = [["ID", "Type", *keys]]
    for element in elements:
        props = _row_properties(element)
        rows.append([
            element.id,
            element.type,
            *(_format_value(props.get(key)) for key in keys),
        ])
    return _render(rows)


def structural_params_to_csv(
    elements: Sequence[Element],
    types: frozenset[str] = STRUCTURAL_TYPES,
) -> str:
    """Raw parameters of structural elements, padded to the widest row."""
    selected = [e for e in elements if e.type in types]
    if not selected:
        return ""

    width = max(len(e.params) for e in selected)
    rows = [["ID", "Type", *(f"Param_{i + 1}" for i in range(width))]]
    for element in selected:
        params = list(element.params) + [""] * (width - len(element.params))
        rows.append([element.id, element.type, *params])

    logger.debug("Structural CSV: %d of %d elements", len(selected), len(elements))
    return _render(rows)


def to_csv_bytes(text: str) -> bytes:
    """Encode CSV *text* as UTF-8 with a leading byte-order mark."""
    return (UTF8_BOM + text).encode("utf-8")


def write_csv(path: str | Path, text: str) -> Path:
    """Write *text* to *path* as BOM-prefixed UTF-8 and return the path."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(to_csv_bytes(text))
    logger.info("Wrote CSV %s", p)
    return p
