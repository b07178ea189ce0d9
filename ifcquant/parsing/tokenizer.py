"""Split STEP text into entity records and parameter lists into tokens.

Both splitters share one state machine: an in-string flag toggled by ``'``
(with ``''`` inside a string copied through as an escaped quote) and a
parenthesis depth counter that never drops below zero.  A separator only
counts outside strings at depth zero, so records may span lines and string
values may contain ``;``, ``,`` or ``)``.
"""

from __future__ import annotations

QUOTE = "'"
RECORD_TERMINATOR = ";"
PARAM_SEPARATOR = ","


def _split_top_level(text: str, separator: str) -> tuple[list[str], str]:
    """Split *text* on *separator* at depth zero outside strings.

    Returns the completed pieces (untrimmed, separator dropped) and the
    unterminated remainder.
    """
    pieces: list[str] = []
    buf: list[str] = []
    in_string = False
    depth = 0
    i = 0
    n = len(text)

    while i < n:
        char = text[i]

        if char == QUOTE:
            if in_string and i + 1 < n and text[i + 1] == QUOTE:
                buf.append(QUOTE + QUOTE)
                i += 2
                continue
            in_string = not in_string
        elif not in_string:
            if char == "(":
                depth += 1
            elif char == ")":
                depth = max(0, depth - 1)
            elif char == separator and depth == 0:
                pieces.append("".join(buf))
                buf = []
                i += 1
                continue

        buf.append(char)
        i += 1

    return pieces, "".join(buf)


def split_records(text: str, keep_tail: bool = True) -> list[str]:
    """Return the ``;``-terminated top-level records of *text*, trimmed.

    The terminator is not part of the record and blank records are dropped.
    A non-empty unterminated remainder is returned as a last record unless
    *keep_tail* is False, which the bounded reader uses when the text was cut
    off mid-file.
    """
    if not text:
        return []

    pieces, tail = _split_top_level(text, RECORD_TERMINATOR)
    records = [p.strip() for p in pieces if p.strip()]
    if keep_tail and tail.strip():
        records.append(tail.strip())
    return records


def split_params(body: str) -> list[str]:
    """Split a parameter list body on top-level commas.

    ``'W1',3000,(#1,#2)`` gives three tokens; a blank body gives none.
    """
    if not body.strip():
        return []

    pieces, tail = _split_top_level(body, PARAM_SEPARATOR)
    pieces.append(tail)
    return [p.strip() for p in pieces]
