"""Turn user-typed text into numeric matrices and vectors.

Two syntaxes are accepted after fraction expansion:

* a JSON array literal, e.g. ``[[0.75, 0.25], [0.2, 0.8]]`` or ``[1, 0]``;
* delimited text, rows separated by ``;`` or line breaks and columns by
  commas, e.g. ``3/4,1/4; 1/5,4/5``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, List

import numpy as np

from .errors import ParseError
from .literals import expand_fractions

logger = logging.getLogger(__name__)

_ROW_SEPARATOR = re.compile(r"[\r\n;]+")


def _prepare(text: Any, kind: str) -> str:
    if not isinstance(text, str) or not text.strip():
        raise ParseError(f"Empty input: the {kind} field is blank.")
    expanded = expand_fractions(text.strip())
    logger.debug("Expanded %s text %r -> %r", kind, text, expanded)
    return expanded


def _is_number(value: Any) -> bool:
    # JSON true/false decode to bool, which is an int subclass.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # integers beyond the float range
        return False


def _decode_literal(text: str, kind: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Malformed structured literal for {kind}: {exc.msg}.") from exc
    except ValueError as exc:
        # int literals past the interpreter's digit limit
        raise ParseError(f"Malformed structured literal for {kind}: {exc}.") from exc


def _parse_token(token: str) -> float:
    """Strict float conversion; raises ValueError for non-finite values too."""
    value = float(token.strip())
    if not math.isfinite(value):
        raise ValueError(token)
    return value


def _check_rectangular(rows: List[List[float]]) -> None:
    width = len(rows[0])
    for i, row in enumerate(rows, start=1):
        if len(row) != width:
            raise ParseError(
                f"Inconsistent row lengths: row 1 has {width} columns but row {i} has {len(row)}."
            )


def _matrix_from_literal(parsed: Any) -> List[List[float]]:
    if not isinstance(parsed, list) or not parsed:
        raise ParseError("Invalid matrix literal: expected a non-empty list of rows.")
    rows = []
    for i, row in enumerate(parsed, start=1):
        if not isinstance(row, list):
            raise ParseError(f"Invalid matrix literal: row {i} is not an array.")
        for j, value in enumerate(row, start=1):
            if not _is_number(value):
                raise ParseError(f"Invalid value {value!r} in row {i}, column {j}.")
        rows.append([float(v) for v in row])
    return rows


def _matrix_from_delimited(text: str) -> List[List[float]]:
    raw_rows = [r.strip() for r in _ROW_SEPARATOR.split(text)]
    raw_rows = [r for r in raw_rows if r]
    if not raw_rows:
        raise ParseError("Invalid matrix format: no rows found.")
    rows = []
    for i, raw in enumerate(raw_rows, start=1):
        try:
            rows.append([_parse_token(tok) for tok in raw.split(",")])
        except ValueError as exc:
            raise ParseError(f"Non-numeric value in row {i}: '{raw}'.") from exc
    return rows


def parse_matrix(text: str) -> np.ndarray:
    """
    Parse ``text`` into a 2-D float array.

    Raises:
        ParseError: on empty input, a malformed literal, a non-numeric
            token or rows of different length.
    """
    expanded = _prepare(text, "matrix")
    if expanded.startswith("["):
        rows = _matrix_from_literal(_decode_literal(expanded, "matrix"))
    else:
        rows = _matrix_from_delimited(expanded)
    _check_rectangular(rows)
    return np.array(rows, dtype=float)


def parse_vector(text: str) -> np.ndarray:
    """
    Parse ``text`` into a 1-D float array.

    Raises:
        ParseError: on empty input, a malformed literal or a non-numeric
            entry (the message names the offending token).
    """
    expanded = _prepare(text, "vector")
    if expanded.startswith("["):
        parsed = _decode_literal(expanded, "vector")
        if not isinstance(parsed, list) or not parsed:
            raise ParseError("Invalid vector literal: expected a non-empty flat list.")
        for j, value in enumerate(parsed, start=1):
            if not _is_number(value):
                raise ParseError(f"Vector contains non-numeric value {value!r} at position {j}.")
        return np.array(parsed, dtype=float)

    values = []
    for j, token in enumerate(expanded.split(","), start=1):
        try:
            values.append(_parse_token(token))
        except ValueError as exc:
            raise ParseError(
                f"Vector contains non-numeric value '{token.strip()}' at position {j}."
            ) from exc
    return np.array(values, dtype=float)
