# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import math

import pandas as pd
import pytest
from pydantic import ValidationError

from ghgcalc.aggregation import AggregationEngine, AggregationRule, CategoryDefinition
from ghgcalc.core.entities import EntityArena
from ghgcalc.core.primitives import AggregationSign, CalculationSettings

CH4 = CategoryDefinition(
    key="ch4", type_tags=("wastewater-stream",), indicator_key="ch4_emission", gas="CH4"
)
CARBONATE = CategoryDefinition(
    key="carbonate", type_tags=("carbonate-row",), indicator_key="co2_emission"
)
RECOVERY = CategoryDefinition(
    key="recovery", type_tags=("co2-recovery",), indicator_key="recovered_co2"
)


@pytest.fixture
def engine() -> AggregationEngine:
    return AggregationEngine(
        categories=[CH4, CARBONATE, RECOVERY],
        rules=[
            AggregationRule(category_key="ch4", conversion_factor=21),
            AggregationRule(category_key="carbonate"),
            AggregationRule(category_key="recovery", sign=AggregationSign.SUBTRACTIVE),
        ],
    )


class TestGrandTotal:
    def test_conversion_factor_applied_once(self, engine: AggregationEngine):
        assert engine.grand_total({"ch4": 10.0}) == 210.0

    def test_signed_sum(self, engine: AggregationEngine):
        total = engine.grand_total({"ch4": 1.0, "carbonate": 100.0, "recovery": 30.0})
        assert total == pytest.approx(21.0 + 100.0 - 30.0)

    def test_negative_subtractive_total_clamped(self, engine: AggregationEngine, caplog):
        with caplog.at_level(logging.WARNING):
            total = engine.grand_total({"carbonate": 100.0, "recovery": -50.0})
        assert total == 100.0
        assert "clamped" in caplog.text

    def test_subtractive_clamp_can_be_disabled(self):
        engine = AggregationEngine(
            [RECOVERY],
            [AggregationRule(category_key="recovery", sign=AggregationSign.SUBTRACTIVE)],
            CalculationSettings(clamp_subtractive_categories=False),
        )
        assert engine.grand_total({"recovery": -5.0}) == 5.0

    def test_explicit_rules(self, engine: AggregationEngine):
        rules = [AggregationRule(category_key="carbonate", conversion_factor=2)]
        assert engine.grand_total({"carbonate": 3.0, "ch4": 10.0}, rules) == 6.0

    def test_contributions(self, engine: AggregationEngine):
        contributions = engine.contributions({"ch4": 2.0, "carbonate": 5.0, "recovery": 1.0})
        assert contributions == {"ch4": 42.0, "carbonate": 5.0, "recovery": -1.0}


class TestValidateRules:
    def test_unknown_category(self):
        with pytest.raises(ValueError, match="undefined"):
            AggregationEngine([CH4], [AggregationRule(category_key="nope")])

    def test_duplicate_rule(self):
        rule = AggregationRule(category_key="ch4", conversion_factor=21)
        with pytest.raises(ValueError, match="More than one rule"):
            AggregationEngine([CH4], [rule, rule])

    def test_duplicate_category(self):
        with pytest.raises(ValueError, match="Duplicate"):
            AggregationEngine([CH4, CH4], [])

    def test_rule_validation(self):
        with pytest.raises(ValidationError):
            AggregationRule(category_key="x", conversion_factor=-1)
        with pytest.raises(ValidationError):
            CategoryDefinition(key="x", type_tags=(), indicator_key="y")


class TestArenaTotals:
    def test_yearly_total_equals_sum_of_months(self, arena: EntityArena):
        row = arena.add_child(None, "carbonate:CaCO3")
        for month in range(1, 13):
            arena.set_value(row, "consumption", month, month * 1.1)
        node = arena.get(row)
        monthly = [node.series["co2_emission"].get(m) for m in range(1, 13)]
        assert AggregationEngine.yearly_total(node, "co2_emission") == math.fsum(monthly)
        assert AggregationEngine.yearly_total(node, "consumption") == pytest.approx(1.1 * 78)

    def test_category_total_over_live_nodes(self, engine: AggregationEngine, arena: EntityArena):
        a = arena.add_child(None, "carbonate:CaCO3")
        b = arena.add_child(None, "carbonate:MgCO3")
        arena.set_value(a, "consumption", 1, 100)
        arena.set_value(b, "consumption", 2, 100)
        totals = engine.category_totals(arena)
        assert totals["carbonate"] == pytest.approx(43.97 + 52.2)
        assert totals["ch4"] == 0.0

        arena.remove_child(b)
        assert engine.category_totals(arena)["carbonate"] == pytest.approx(43.97)
        assert engine.total(arena) == pytest.approx(43.97)

    def test_monthly_category_totals(self, engine: AggregationEngine, arena: EntityArena):
        a = arena.add_child(None, "carbonate:CaCO3")
        arena.set_value(a, "consumption", 3, 100)
        frame = engine.monthly_category_totals(arena)
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["ch4", "carbonate", "recovery"]
        assert list(frame.index) == list(range(1, 13))
        assert frame.loc[3, "carbonate"] == pytest.approx(43.97)
        assert frame["carbonate"].sum() == pytest.approx(engine.category_totals(arena)["carbonate"])
