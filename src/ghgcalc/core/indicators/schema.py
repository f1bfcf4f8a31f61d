# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Static indicator descriptions.

An `IndicatorDefinition` describes one named, monthly field of an entity:
its unit, whether the caller enters it or a formula derives it, its value
domain and, for calculated fields, the formula and leaf clamp policy. An
`EntitySchema` groups the definitions one entity type owns and fixes the
evaluation order of its calculated fields (a topological order over formula
inputs, computed once when the schema is built).
"""

from __future__ import annotations

import logging
from graphlib import CycleError, TopologicalSorter
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import Field, PrivateAttr, model_validator

from ..primitives.enums import ClampPolicy, IndicatorKindEnum
from ..primitives.errors import DomainRangeError, UnknownIndicatorError
from ..primitives.model import Model
from ..primitives.numeric import clamp, non_negative, percent_to_fraction

logger = logging.getLogger(__name__)

Bounds = Tuple[Optional[float], Optional[float]]

FormulaFn = Callable[[Mapping[str, float], Mapping[str, float]], float]

_DEFAULT_BOUNDS: Dict[IndicatorKindEnum, Bounds] = {
    IndicatorKindEnum.QUANTITY: (0.0, None),
    IndicatorKindEnum.PERCENTAGE: (0.0, 100.0),
    IndicatorKindEnum.FRACTION: (0.0, 1.0),
    IndicatorKindEnum.FACTOR: (0.0, None),
    IndicatorKindEnum.EMISSION: (None, None),
}


class Formula(Model):
    """
    A pure function of same-entity indicator values and entity constants.

    `fn` receives two read-only mappings: `inputs` (current-month values of
    the indicators named in `inputs`, already in formula units, i.e.
    percentages divided by 100) and `constants` (entity-level constants such
    as GWP, molar mass or a default emission factor).
    """

    fn: FormulaFn
    inputs: Tuple[str, ...] = ()
    constants: Tuple[str, ...] = ()
    description: str = ""


class IndicatorDefinition(Model):
    """
    Static description of one indicator.

    Attributes:
        key: Identifier, unique within an entity type
        name: Human-readable label
        unit: Display unit (informational)
        kind: Value kind; fixes the default domain and percentage handling
        is_calculated: True when the value is produced by `formula`
        decimal_places: Display precision hint for external formatters
        default_value: Value pre-populated in all 12 months on creation
        formula: Present iff `is_calculated`
        domain: Explicit (lower, upper) bounds; None uses the kind default
        clamp: Leaf clamp applied to calculated results
    """

    key: str
    name: str = ""
    unit: str = ""
    kind: IndicatorKindEnum = IndicatorKindEnum.QUANTITY
    is_calculated: bool = False
    decimal_places: int = Field(default=2, ge=0)
    default_value: Optional[float] = None
    formula: Optional[Formula] = None
    domain: Optional[Bounds] = None
    clamp: ClampPolicy = ClampPolicy.NONE

    @model_validator(mode="after")
    def check_formula_consistency(self) -> "IndicatorDefinition":
        """Ensure formula, clamp and domain are consistent with `is_calculated`."""
        if self.is_calculated and self.formula is None:
            raise ValueError(f"Calculated indicator '{self.key}' requires a formula")
        if not self.is_calculated and self.formula is not None:
            raise ValueError(f"Raw indicator '{self.key}' must not declare a formula")
        if not self.is_calculated and self.clamp is not ClampPolicy.NONE:
            raise ValueError(
                f"Clamp policy only applies to calculated indicators ('{self.key}')"
            )
        if self.domain is not None:
            lower, upper = self.domain
            if lower is not None and upper is not None and lower > upper:
                raise ValueError(
                    f"Domain lower bound {lower} exceeds upper bound {upper} for '{self.key}'"
                )
        return self

    @property
    def bounds(self) -> Bounds:
        if self.domain is not None:
            return self.domain
        return _DEFAULT_BOUNDS[self.kind]

    @property
    def is_percentage(self) -> bool:
        return self.kind is IndicatorKindEnum.PERCENTAGE

    def constrain(self, value: float) -> float:
        """Clamp a raw value into the declared domain (recovered DomainRangeError)."""
        lower, upper = self.bounds
        clamped = clamp(value, lower, upper)
        if clamped != value:
            logger.warning(
                f"Value {value} for '{self.key}' outside [{lower}, {upper}]; clamped to {clamped}"
            )
        return clamped

    def check_domain(self, value: float) -> float:
        """Strict variant of `constrain` for input-widget validation."""
        lower, upper = self.bounds
        if clamp(value, lower, upper) != value:
            raise DomainRangeError(
                self.key,
                value,
                float("-inf") if lower is None else lower,
                float("inf") if upper is None else upper,
            )
        return value

    def to_formula_units(self, value: float) -> float:
        return percent_to_fraction(value) if self.is_percentage else value

    def apply_clamp(self, value: float) -> float:
        if self.clamp is ClampPolicy.NON_NEGATIVE:
            return non_negative(value)
        return value


class EntitySchema(Model):
    """
    The indicator set owned by one entity type.

    Attributes:
        type_tag: Entity type this schema describes (e.g. "fuel-item")
        label: Human-readable name of the entity type
        indicators: Ordered indicator definitions (display order)
        required_constants: Constants a custom entity must supply; missing
            ones default to 0.0 and flag the entity as needing a factor
        constant_defaults: Physical constants every entity of the type carries
            unless its template or the caller overrides them
        primary_indicator: Indicator reported as the entity's emission
    """

    type_tag: str
    label: str = ""
    indicators: Tuple[IndicatorDefinition, ...] = ()
    required_constants: Tuple[str, ...] = ()
    constant_defaults: Dict[str, float] = Field(default_factory=dict)
    primary_indicator: Optional[str] = None

    _by_key: Dict[str, IndicatorDefinition] = PrivateAttr(default_factory=dict)
    _order: Tuple[str, ...] = PrivateAttr(default=())

    @model_validator(mode="after")
    def build_evaluation_order(self) -> "EntitySchema":
        """Index indicators, validate formula references and order calculations."""
        by_key: Dict[str, IndicatorDefinition] = {}
        for definition in self.indicators:
            if definition.key in by_key:
                raise ValueError(
                    f"Duplicate indicator '{definition.key}' in schema '{self.type_tag}'"
                )
            by_key[definition.key] = definition

        known_constants = set(self.required_constants) | set(self.constant_defaults)
        graph: Dict[str, set] = {}
        for definition in self.indicators:
            if not definition.is_calculated:
                continue
            for input_key in definition.formula.inputs:
                if input_key not in by_key:
                    raise ValueError(
                        f"Formula of '{definition.key}' reads unknown indicator '{input_key}'"
                    )
            missing = set(definition.formula.constants) - known_constants
            if missing:
                raise ValueError(
                    f"Formula of '{definition.key}' reads undeclared constants {sorted(missing)}"
                )
            graph[definition.key] = {
                k for k in definition.formula.inputs if by_key[k].is_calculated
            }

        if self.primary_indicator is not None and self.primary_indicator not in by_key:
            raise ValueError(
                f"Primary indicator '{self.primary_indicator}' is not defined"
            )

        try:
            order = tuple(TopologicalSorter(graph).static_order())
        except CycleError as e:
            cycle = e.args[1]
            raise ValueError(
                f"Circular formula dependency in '{self.type_tag}': {' -> '.join(cycle)}"
            ) from e

        self._by_key = by_key
        self._order = order
        return self

    def get(self, key: str) -> IndicatorDefinition:
        try:
            return self._by_key[key]
        except KeyError:
            raise UnknownIndicatorError(self.type_tag, key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    @property
    def keys(self) -> List[str]:
        return [d.key for d in self.indicators]

    @property
    def raw_indicators(self) -> List[IndicatorDefinition]:
        return [d for d in self.indicators if not d.is_calculated]

    @property
    def calculated_order(self) -> Tuple[str, ...]:
        """Calculated indicator keys in dependency order."""
        return self._order

    @property
    def is_container(self) -> bool:
        """Containers (production lines, processes) own no indicators."""
        return not self.indicators


class SchemaRegistry:
    """
    Mapping from entity type tag to its schema.

    Several tags may share one schema (e.g. fuel inputs and fuel outputs of a
    process use the same combustion formula but land in different
    categories), registered through `aliases`.
    """

    def __init__(self, schemas: Iterable[EntitySchema] = ()):
        self._schemas: Dict[str, EntitySchema] = {}
        for schema in schemas:
            self.register(schema)

    def register(self, schema: EntitySchema, aliases: Iterable[str] = ()) -> None:
        aliases = tuple(aliases)
        for tag in (schema.type_tag, *aliases):
            if tag in self._schemas:
                raise ValueError(f"Schema for entity type '{tag}' already registered")
            self._schemas[tag] = schema
        logger.debug(f"Registered schema '{schema.type_tag}' (aliases: {list(aliases)})")

    def get(self, type_tag: str) -> EntitySchema:
        try:
            return self._schemas[type_tag]
        except KeyError:
            raise KeyError(
                f"No schema registered for entity type '{type_tag}'. "
                f"Known types: {sorted(self._schemas)}"
            ) from None

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._schemas

    @property
    def type_tags(self) -> List[str]:
        return list(self._schemas)
