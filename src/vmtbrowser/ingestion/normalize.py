"""Normalization helpers.

Centralizes strict numeric parsing of source text. Unlike a lenient
``float(x or 0)`` these never turn bad input into zero: the caller gets a
``ValueError`` and decides whether the row or the whole load is rejected.
"""

from __future__ import annotations

import math
import numbers
import re
from typing import Any

_WORD_RE = re.compile(r"\w\S*")


def strict_float(value: Any) -> float:
    """Convert *value* to a finite float or raise :class:`ValueError`.

    Accepts real numbers (numpy scalars included) and numeric strings
    (surrounding whitespace is ignored). Rejects ``None``, booleans, empty
    strings, text, NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, numbers.Real):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("empty value")
        try:
            result = float(text)
        except ValueError:
            raise ValueError(f"not a number: {value!r}") from None
    else:
        raise ValueError(f"not a number: {value!r}")
    if not math.isfinite(result):
        raise ValueError(f"not a finite number: {value!r}")
    return result


def strict_int(value: Any) -> int:
    """Like :func:`strict_float` but the value must be integral (``"35.0"`` is fine)."""
    result = strict_float(value)
    if not result.is_integer():
        raise ValueError(f"not an integer: {value!r}")
    return int(result)


def to_title_case(text: str) -> str:
    """``"NORTH READING"`` -> ``"North Reading"``.

    Only the first character of each word is upper-cased; the rest is
    lower-cased, so hyphenated names keep a single capital.
    """
    return _WORD_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)
