# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for GHG Calc testing.

Helpers build small inventories and record published totals so tests can
assert on notification behaviour without wiring callbacks by hand.
"""

from __future__ import annotations

from typing import List, Optional

import pytest

from ghgcalc.core.entities import EntityArena
from ghgcalc.formulas import FormulaEvaluator
from ghgcalc.inventory import EmissionInventory
from ghgcalc.reference import default_catalog


class TotalRecorder:
    """Callable subscriber that keeps every total it receives."""

    def __init__(self):
        self.totals: List[float] = []

    def __call__(self, total: float) -> None:
        self.totals.append(total)

    @property
    def count(self) -> int:
        return len(self.totals)

    @property
    def last(self) -> Optional[float]:
        return self.totals[-1] if self.totals else None


def create_inventory(preset: str = "other", recorder: Optional[TotalRecorder] = None, **kwargs):
    """Create an inventory from a preset, optionally wired to a recorder."""
    return EmissionInventory.from_preset(preset, on_total_changed=recorder, **kwargs)


def fill_months(inventory: EmissionInventory, node_id: int, key: str, value: float) -> None:
    """Enter the same raw value in all 12 months."""
    inventory.set_values(node_id, key, [value] * 12)


@pytest.fixture
def recorder() -> TotalRecorder:
    return TotalRecorder()


@pytest.fixture
def inventory(recorder: TotalRecorder) -> EmissionInventory:
    return create_inventory("other", recorder)


@pytest.fixture
def evaluator() -> FormulaEvaluator:
    return FormulaEvaluator()


@pytest.fixture
def arena() -> EntityArena:
    return EntityArena(default_catalog())


@pytest.fixture
def arena_factory():
    """Factory for additional empty arenas within one test."""
    return lambda: EntityArena(default_catalog())
