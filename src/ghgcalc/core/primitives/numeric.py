# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Numeric policy shared by every formula family.

- Blank or unparseable input coerces to 0.0, never raises.
- Division by zero (or a non-finite quotient) short-circuits to 0.0.
- Clamping to a declared domain replaces out-of-range values with the
  nearest bound.
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Any, Optional

import numpy as np

from .errors import InputParseError

logger = logging.getLogger(__name__)


def parse_number(raw: Any, strict: bool = False) -> float:
    """
    Parse user input into a float.

    Accepts ints, floats, numpy scalars and strings (surrounding whitespace
    and thousands separators are ignored). Blank, non-numeric, NaN and
    infinite input yields 0.0, or raises InputParseError when `strict`.

    Args:
        raw: Value as typed by the user or read from a snapshot
        strict: Raise instead of coercing to 0.0

    Returns:
        Finite float
    """
    value: Optional[float] = None
    if isinstance(raw, (Real, np.number)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if text:
            try:
                value = float(text)
            except ValueError:
                value = None

    if value is None or not math.isfinite(value):
        if strict:
            raise InputParseError(raw)
        if raw not in (None, ""):
            logger.debug(f"Coercing unparseable input {raw!r} to 0.0")
        return 0.0
    return value


def coerce_number(raw: Any) -> float:
    """Lenient parse: anything that is not a finite number becomes 0.0."""
    return parse_number(raw, strict=False)


def clamp(value: float, lower: Optional[float], upper: Optional[float]) -> float:
    """Clamp `value` into [lower, upper]; a None bound is open."""
    if lower is not None and value < lower:
        return float(lower)
    if upper is not None and value > upper:
        return float(upper)
    return value


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 for a zero denominator or a non-finite result."""
    if denominator == 0:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def percent_to_fraction(percent: float) -> float:
    """Convert a 0-100 percentage into a 0-1 fraction."""
    return percent / 100.0


def non_negative(value: float) -> float:
    return value if value > 0 else 0.0
