# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Category and aggregation-rule definitions.

A category names which entities are summed (by entity type) and which of
their indicators is summed. A rule says how the category total enters the
grand total: multiplied once by its conversion factor (GWP, 44/12, a
molar-mass ratio) and by its sign.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import Field, field_validator

from ..core.primitives.enums import AggregationSign
from ..core.primitives.model import Model
from ..core.primitives.types import PositiveFloat


class CategoryDefinition(Model):
    """
    A group of entities whose yearly totals are summed.

    Attributes:
        key: Category identifier referenced by rules
        type_tags: Entity types belonging to the category
        indicator_key: Indicator summed across those entities
        label: Row label in summary tables
        gas: Gas the category total is expressed in (CO2, CH4, N2O, tCO2e...)
    """

    key: str
    type_tags: Tuple[str, ...]
    indicator_key: str
    label: str = ""
    gas: str = "CO2"

    @field_validator("type_tags")
    @classmethod
    def check_type_tags(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("A category needs at least one entity type")
        return v


class AggregationRule(Model):
    """
    How one category total enters the grand total.

    `conversion_factor` is the only place a unit conversion is applied; leaf
    formulas and category totals stay in the category's own gas units.
    """

    category_key: str
    conversion_factor: PositiveFloat = 1.0
    sign: AggregationSign = AggregationSign.ADDITIVE
    description: Optional[str] = Field(default=None)

    @property
    def is_subtractive(self) -> bool:
        return self.sign is AggregationSign.SUBTRACTIVE

    @property
    def weight(self) -> float:
        return int(self.sign) * self.conversion_factor
