# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
GHG Calc Core

Primitives (base model, enums, numeric policy, settings, errors) and the
indicator model (schemas and monthly series). The entity arena lives in
`ghgcalc.core.entities`; it depends on the formula layer, so it is imported
from there rather than re-exported here.
"""

from . import indicators, primitives
from .indicators import (
    MONTHS,
    MONTHS_PER_YEAR,
    EntitySchema,
    Formula,
    IndicatorDefinition,
    MonthRecord,
    SchemaRegistry,
    TimeSeries,
)
from .primitives import (
    AggregationSign,
    CalculatedIndicatorError,
    ClampPolicy,
    DomainRangeError,
    EngineSettings,
    EntityNotFoundError,
    EntityTypeTag,
    EquipmentNotFoundError,
    GHGCalcError,
    IndicatorKindEnum,
    InputParseError,
    Model,
    TemplateNotFoundError,
    UnknownIndicatorError,
)

__all__ = [
    "indicators",
    "primitives",
    "MONTHS",
    "MONTHS_PER_YEAR",
    "EntitySchema",
    "Formula",
    "IndicatorDefinition",
    "MonthRecord",
    "SchemaRegistry",
    "TimeSeries",
    "AggregationSign",
    "CalculatedIndicatorError",
    "ClampPolicy",
    "DomainRangeError",
    "EngineSettings",
    "EntityNotFoundError",
    "EntityTypeTag",
    "EquipmentNotFoundError",
    "GHGCalcError",
    "IndicatorKindEnum",
    "InputParseError",
    "Model",
    "TemplateNotFoundError",
    "UnknownIndicatorError",
]
