"""Parse one ``#id=TYPE(params)`` record and pull scalars out of its tokens."""

from __future__ import annotations

import logging
import re

from ifcquant.models.element import EntityRecord
from ifcquant.parsing.tokenizer import split_params

logger = logging.getLogger(__name__)

_RECORD_RE = re.compile(r"^#(\d+)\s*=\s*(\w+)\s*\((.*)\)\s*;?\s*$", re.DOTALL)

# A quoted literal where '' stands for one literal quote
_STRING_RE = re.compile(r"'((?:[^']|'')*)'")

_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")
_FLOAT_PREFIX_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def parse_record(record: str) -> EntityRecord | None:
    """Return the record's id, type, and top-level params, or None.

    Header statements, comments, and anything else without the entity shape
    are not errors; they simply yield None.
    """
    match = _RECORD_RE.match(record.strip())
    if match is None:
        return None

    entity_id, entity_type, body = match.groups()
    return EntityRecord(
        id=entity_id,
        type=entity_type,
        params=tuple(split_params(body)),
    )


def extract_string(token: str | None) -> str | None:
    """Return the unescaped content of the first quoted literal in *token*.

    ``'O''Brien'`` gives ``O'Brien``.  References (``#12``), enumerations
    (``.T.``), and the ``$`` / ``*`` placeholders give None.
    """
    if not token:
        return None
    match = _STRING_RE.search(token)
    if match is None:
        return None
    return match.group(1).replace("''", "'")


def extract_number(token: str | None) -> float | None:
    """Lossy numeric read of *token*.

    Every character other than digits, ``.`` and ``-`` is dropped and the
    longest leading float of what remains is returned.  Embedded units
    survive, but ``#12`` reads as 12.0 and ``1.5E3`` as 1.53.
    """
    if not token:
        return None
    cleaned = _NON_NUMERIC_RE.sub("", token)
    match = _FLOAT_PREFIX_RE.match(cleaned)
    if match is None:
        return None
    return float(match.group(0))
