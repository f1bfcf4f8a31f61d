# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Roll-ups: monthly -> yearly per entity, yearly -> category, categories ->
signed, factor-weighted grand total.

The engine only reads entity state. Category totals are always recomputed
from the arena's live node set, so a removed entity simply stops being
iterated and every total returns to exactly what it was before the entity
existed.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from ..core.indicators.series import MONTHS
from ..core.primitives.numeric import non_negative
from ..core.primitives.settings import CalculationSettings
from .rules import AggregationRule, CategoryDefinition

if TYPE_CHECKING:
    from ..core.entities.arena import EntityArena
    from ..core.entities.node import EntityNode

logger = logging.getLogger(__name__)


class AggregationEngine:
    """
    Aggregates entity series into category totals and a grand total.

    Example:
        ```python
        engine = AggregationEngine(
            categories=[CategoryDefinition(key="ch4", type_tags=("wastewater-stream",),
                                           indicator_key="ch4_emission", gas="CH4")],
            rules=[AggregationRule(category_key="ch4", conversion_factor=21)],
        )
        engine.grand_total({"ch4": 10.0})  # 210.0
        ```
    """

    def __init__(
        self,
        categories: Sequence[CategoryDefinition],
        rules: Sequence[AggregationRule],
        settings: Optional[CalculationSettings] = None,
    ):
        self.validate_rules(categories, rules)
        self.categories: Dict[str, CategoryDefinition] = {c.key: c for c in categories}
        self.rules: List[AggregationRule] = list(rules)
        self.settings = settings if settings is not None else CalculationSettings()

    @staticmethod
    def validate_rules(
        categories: Iterable[CategoryDefinition], rules: Iterable[AggregationRule]
    ) -> None:
        """Reject duplicate categories, duplicate rules and rules for unknown categories."""
        category_keys = [c.key for c in categories]
        duplicates = [k for k, n in Counter(category_keys).items() if n > 1]
        if duplicates:
            raise ValueError(f"Duplicate category keys: {duplicates}")

        rule_keys = [r.category_key for r in rules]
        duplicates = [k for k, n in Counter(rule_keys).items() if n > 1]
        if duplicates:
            raise ValueError(f"More than one rule for categories: {duplicates}")

        unknown = sorted(set(rule_keys) - set(category_keys))
        if unknown:
            raise ValueError(f"Rules reference undefined categories: {unknown}")

    # --- Per entity / per category ------------------------------------------

    @staticmethod
    def yearly_total(node: "EntityNode", indicator_key: str) -> float:
        """Sum of the 12 monthly values of one indicator."""
        return node.series_for(indicator_key).yearly_total()

    @classmethod
    def category_total(cls, nodes: Iterable["EntityNode"], indicator_key: str) -> float:
        """Sum of yearly totals across the given entities."""
        return math.fsum(cls.yearly_total(node, indicator_key) for node in nodes)

    def members(self, arena: "EntityArena", category_key: str) -> List["EntityNode"]:
        """Live entities belonging to a category."""
        return arena.live_nodes(self.categories[category_key].type_tags)

    def category_totals(self, arena: "EntityArena") -> Dict[str, float]:
        """Yearly total of every category, from the current live set."""
        return {
            key: self.category_total(self.members(arena, key), category.indicator_key)
            for key, category in self.categories.items()
        }

    def monthly_category_total(self, arena: "EntityArena", category_key: str) -> pd.Series:
        """Per-month category total, indexed by month 1..12."""
        category = self.categories[category_key]
        nodes = self.members(arena, category_key)
        values = [
            math.fsum(n.series_for(category.indicator_key).get(m) for n in nodes)
            for m in MONTHS
        ]
        return pd.Series(values, index=pd.Index(MONTHS, name="month"), name=category_key)

    def monthly_category_totals(self, arena: "EntityArena") -> pd.DataFrame:
        """Per-month totals of every category (rows: months, columns: categories)."""
        columns = {key: self.monthly_category_total(arena, key) for key in self.categories}
        frame = pd.DataFrame(columns, index=pd.Index(MONTHS, name="month"))
        return frame

    # --- Grand total ----------------------------------------------------------

    def contribution(self, rule: AggregationRule, category_total: float) -> float:
        """Signed, converted contribution of one category to the grand total."""
        if rule.is_subtractive and self.settings.clamp_subtractive_categories:
            clamped = non_negative(category_total)
            if clamped != category_total:
                logger.warning(
                    f"Subtractive category '{rule.category_key}' total {category_total} "
                    f"is negative; clamped to 0.0"
                )
            category_total = clamped
        return rule.weight * category_total

    def contributions(self, category_totals: Mapping[str, float]) -> Dict[str, float]:
        return {
            rule.category_key: self.contribution(
                rule, category_totals.get(rule.category_key, 0.0)
            )
            for rule in self.rules
        }

    def grand_total(
        self,
        category_totals: Mapping[str, float],
        rules: Optional[Sequence[AggregationRule]] = None,
    ) -> float:
        """
        Signed, factor-weighted sum of category totals.

        Each rule's conversion factor is applied exactly once here. Categories
        without a rule do not contribute; a rule whose category has no total
        contributes 0.

        Formula:
            sum over rules of sign x conversion_factor x category_totals[key]
        """
        rules = self.rules if rules is None else rules
        return math.fsum(
            self.contribution(rule, category_totals.get(rule.category_key, 0.0))
            for rule in rules
        )

    def total(self, arena: "EntityArena") -> float:
        """Grand total of the arena's current state."""
        return self.grand_total(self.category_totals(arena))
