"""Group elements into quantity buckets.

Every function here is a single ordered pass over its input: buckets are
created on first sight of a key and members keep input order.  When the
element set changes the caller rebuilds from scratch.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ifcquant.config import UNKNOWN_KEY
from ifcquant.models.element import Element
from ifcquant.models.model import PivotRow, Quantity


def _field_key(field: str) -> Callable[[Element], str]:
    def key(element: Element) -> str:
        value = element.attribute(field)
        if value is None:
            return UNKNOWN_KEY
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    return key


def aggregate(
    elements: Iterable[Element],
    key: str | Callable[[Element], str],
) -> dict[str, Quantity]:
    """Fold *elements* into buckets keyed by *key*.

    *key* is a field name (see :meth:`Element.attribute`) or a callable.
    """
    key_fn = _field_key(key) if isinstance(key, str) else key
    buckets: dict[str, Quantity] = {}
    for element in elements:
        bucket_key = key_fn(element)
        bucket = buckets.get(bucket_key)
        if bucket is None:
            bucket = buckets[bucket_key] = Quantity(key=bucket_key)
        bucket.add(element)
    return buckets


def by_type(elements: Iterable[Element]) -> dict[str, Quantity]:
    return aggregate(elements, "type")


def by_level(elements: Iterable[Element]) -> dict[str, Quantity]:
    return aggregate(elements, "level")


def build_pivot(
    elements: Iterable[Element],
    row_field: str = "type",
    col_field: str = "level",
) -> dict[str, PivotRow]:
    """Two-level grouping: row key, then column key.

    Row buckets total all their members; each child bucket totals the members
    that also share the column key.
    Either field may be an element attribute (``type``, ``level``,
    ``material``, ``name``) or any property key.
    """
    row_key = _field_key(row_field)
    col_key = _field_key(col_field)
    rows: dict[str, PivotRow] = {}
    for element in elements:
        rk = row_key(element)
        row = rows.get(rk)
        if row is None:
            row = rows[rk] = PivotRow(key=rk)
        row.add(element)

        ck = col_key(element)
        child = row.children.get(ck)
        if child is None:
            child = row.children[ck] = Quantity(key=ck)
        child.add(element)
    return rows


def build_hierarchy(elements: Iterable[Element]) -> dict[str, dict[str, list[Element]]]:
    """Type -> level -> elements tree."""
    tree: dict[str, dict[str, list[Element]]] = {}
    type_key = _field_key("type")
    level_key = _field_key("level")
    for element in elements:
        tree.setdefault(type_key(element), {}).setdefault(level_key(element), []).append(element)
    return tree
