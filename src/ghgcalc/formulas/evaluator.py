# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Formula evaluation.

`FormulaEvaluator` runs one topological pass over an entity's calculated
indicators for one month. Every calculated value is written back through
`TimeSeries.set`, which only overwrites when the value actually differs, and
the keys whose stored value changed are returned so callers can skip
re-aggregation when nothing moved.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

from ..core.indicators.schema import EntitySchema, IndicatorDefinition, SchemaRegistry
from ..core.indicators.series import MONTHS
from ..core.primitives.settings import CalculationSettings
from .schemas import default_registry

if TYPE_CHECKING:
    from ..core.entities.node import EntityNode

logger = logging.getLogger(__name__)


class FormulaEvaluator:
    """
    Evaluates calculated indicators of entities against their schemas.

    Example:
        ```python
        evaluator = FormulaEvaluator()
        schema = evaluator.schema_for("carbonate-row")
        evaluator.evaluate(
            schema.get("co2_emission"),
            {"consumption": 1000, "purity": 0.95},
            {"emission_factor": 0.4397},
        )  # 417.715
        ```
    """

    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        settings: Optional[CalculationSettings] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings if settings is not None else CalculationSettings()

    def schema_for(self, type_tag: str) -> EntitySchema:
        return self.registry.get(type_tag)

    def evaluate(
        self,
        definition: IndicatorDefinition,
        inputs: Mapping[str, float],
        constants: Mapping[str, float],
    ) -> float:
        """
        Compute one calculated indicator from formula-unit inputs.

        Pure: the result depends only on the arguments. The declared leaf
        clamp is applied to the formula result. A formula that fails with an
        arithmetic or lookup error, or returns a non-finite value, yields 0.0
        unless `fail_on_error` is set.

        Args:
            definition: Calculated indicator definition
            inputs: Current-month values of `definition.formula.inputs`,
                percentages already divided by 100
            constants: Entity constants named by `definition.formula.constants`

        Returns:
            Clamped, finite result
        """
        formula = definition.formula
        if formula is None:
            raise ValueError(f"Indicator '{definition.key}' is not calculated")
        try:
            result = float(
                formula.fn(MappingProxyType(dict(inputs)), MappingProxyType(dict(constants)))
            )
        except (ArithmeticError, KeyError, TypeError, ValueError) as e:
            if self.settings.fail_on_error:
                logger.error(f"Formula for '{definition.key}' failed: {e}")
                raise
            logger.warning(f"Formula for '{definition.key}' failed ({e}); using 0.0")
            return 0.0
        if not math.isfinite(result):
            logger.debug(f"Non-finite result for '{definition.key}'; using 0.0")
            return 0.0
        return definition.apply_clamp(result)

    def formula_inputs(
        self, schema: EntitySchema, node: "EntityNode", definition: IndicatorDefinition, month: int
    ) -> Dict[str, float]:
        """Gather the current-month inputs of `definition` in formula units."""
        return {
            key: schema.get(key).to_formula_units(node.series[key].get(month))
            for key in definition.formula.inputs
        }

    def recompute_month(self, node: "EntityNode", month: int) -> List[str]:
        """
        Recompute every calculated indicator of `node` for `month`.

        Returns:
            Keys of calculated indicators whose stored value changed
        """
        schema = self.registry.get(node.type_tag)
        changed: List[str] = []
        for key in schema.calculated_order:
            definition = schema.get(key)
            constants = {
                name: node.constants.get(name, 0.0) for name in definition.formula.constants
            }
            value = self.evaluate(
                definition, self.formula_inputs(schema, node, definition, month), constants
            )
            if node.series[key].set(month, value):
                changed.append(key)
        if changed:
            logger.debug(f"Entity {node.id} month {month}: recomputed {changed}")
        return changed

    def recompute_all(self, node: "EntityNode") -> List[str]:
        """Recompute all 12 months; returns the keys that changed in any month."""
        changed: Dict[str, None] = {}
        for month in MONTHS:
            for key in self.recompute_month(node, month):
                changed[key] = None
        return list(changed)
