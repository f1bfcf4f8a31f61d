# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Monthly storage for one indicator on one entity.

A `TimeSeries` is a fixed 12-slot container: one float value, one free-text
data-source label and one opaque evidence handle per month. The fixed shape
is what guarantees at most one record per (entity, indicator, month).
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np
from pydantic import Field

from ..primitives.model import Model
from ..primitives.types import MonthNumber

MONTHS_PER_YEAR = 12
MONTHS = tuple(range(1, MONTHS_PER_YEAR + 1))


def month_index(month: int) -> int:
    """Convert a 1-based calendar month into an array index."""
    if isinstance(month, bool) or not isinstance(month, (int, np.integer)):
        raise TypeError(f"Month must be an int in 1..12, got {month!r}")
    if not 1 <= month <= MONTHS_PER_YEAR:
        raise ValueError(f"Month must be in 1..12, got {month}")
    return int(month) - 1


class MonthRecord(Model):
    """Read-only view of one monthly slot."""

    month: MonthNumber
    value: float = 0.0
    data_source: str = ""
    evidence: Optional[str] = Field(
        default=None, description="Opaque attachment handle; never interpreted."
    )


class TimeSeries:
    """
    Twelve monthly slots for one indicator.

    Values are stored in a float64 numpy array. Writes go through `set`,
    which only overwrites when the new value differs from the stored one and
    reports whether anything changed.
    """

    __slots__ = ("_values", "_data_sources", "_evidence")

    def __init__(self, fill: float = 0.0):
        self._values = np.full(MONTHS_PER_YEAR, float(fill), dtype=np.float64)
        self._data_sources: List[str] = [""] * MONTHS_PER_YEAR
        self._evidence: List[Optional[str]] = [None] * MONTHS_PER_YEAR

    @classmethod
    def from_lists(
        cls,
        values: Sequence[float],
        data_sources: Optional[Sequence[str]] = None,
        evidence: Optional[Sequence[Optional[str]]] = None,
    ) -> "TimeSeries":
        if len(values) != MONTHS_PER_YEAR:
            raise ValueError(
                f"Expected {MONTHS_PER_YEAR} monthly values, got {len(values)}"
            )
        series = cls()
        series._values[:] = np.asarray(values, dtype=np.float64)
        if data_sources is not None:
            if len(data_sources) != MONTHS_PER_YEAR:
                raise ValueError("Expected 12 data-source labels")
            series._data_sources = [str(s) for s in data_sources]
        if evidence is not None:
            if len(evidence) != MONTHS_PER_YEAR:
                raise ValueError("Expected 12 evidence handles")
            series._evidence = list(evidence)
        return series

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the 12 monthly values."""
        view = self._values.view()
        view.flags.writeable = False
        return view

    def get(self, month: int) -> float:
        return float(self._values[month_index(month)])

    def set(self, month: int, value: float) -> bool:
        """Store `value` for `month`; return True only if the stored value changed."""
        idx = month_index(month)
        value = float(value)
        if self._values[idx] == value:
            return False
        self._values[idx] = value
        return True

    def fill(self, value: float) -> bool:
        """Store `value` in all 12 months; return True if any month changed."""
        value = float(value)
        if bool(np.all(self._values == value)):
            return False
        self._values[:] = value
        return True

    def data_source(self, month: int) -> str:
        return self._data_sources[month_index(month)]

    def set_data_source(self, month: int, label: Optional[str]) -> None:
        self._data_sources[month_index(month)] = "" if label is None else str(label)

    def evidence(self, month: int) -> Optional[str]:
        return self._evidence[month_index(month)]

    def set_evidence(self, month: int, handle: Optional[str]) -> None:
        self._evidence[month_index(month)] = handle

    def record(self, month: int) -> MonthRecord:
        idx = month_index(month)
        return MonthRecord(
            month=month,
            value=float(self._values[idx]),
            data_source=self._data_sources[idx],
            evidence=self._evidence[idx],
        )

    def records(self) -> List[MonthRecord]:
        return [self.record(m) for m in MONTHS]

    def yearly_total(self) -> float:
        """Sum of the 12 monthly values, each month counted exactly once."""
        return math.fsum(self._values.tolist())

    def to_list(self) -> List[float]:
        return self._values.tolist()

    @property
    def data_sources(self) -> List[str]:
        return list(self._data_sources)

    @property
    def evidence_handles(self) -> List[Optional[str]]:
        return list(self._evidence)

    def __len__(self) -> int:
        return MONTHS_PER_YEAR

    def __repr__(self) -> str:
        return f"TimeSeries({self.to_list()})"
