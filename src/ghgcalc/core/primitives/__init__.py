# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
GHG Calc Core Primitives

Essential building blocks shared by every part of the engine: the base model,
enums, constrained types, numeric policy, settings and the error taxonomy.
"""

from .enums import (
    AggregationSign,
    ClampPolicy,
    EntityTypeTag,
    FuelStateEnum,
    IndicatorKindEnum,
)
from .errors import (
    CalculatedIndicatorError,
    DomainRangeError,
    EntityNotFoundError,
    EquipmentNotFoundError,
    GHGCalcError,
    InputParseError,
    TemplateNotFoundError,
    UnknownIndicatorError,
)
from .model import Model
from .numeric import (
    clamp,
    coerce_number,
    non_negative,
    parse_number,
    percent_to_fraction,
    safe_divide,
)
from .settings import (
    CalculationSettings,
    EngineSettings,
    NotificationSettings,
    ReportingSettings,
)
from .types import FloatBetween0And1, MonthNumber, PositiveFloat, PositiveInt

__all__ = [
    # Core models
    "Model",
    # Settings
    "CalculationSettings",
    "EngineSettings",
    "NotificationSettings",
    "ReportingSettings",
    # Enums
    "AggregationSign",
    "ClampPolicy",
    "EntityTypeTag",
    "FuelStateEnum",
    "IndicatorKindEnum",
    # Errors
    "CalculatedIndicatorError",
    "DomainRangeError",
    "EntityNotFoundError",
    "EquipmentNotFoundError",
    "GHGCalcError",
    "InputParseError",
    "TemplateNotFoundError",
    "UnknownIndicatorError",
    # Numeric policy
    "clamp",
    "coerce_number",
    "non_negative",
    "parse_number",
    "percent_to_fraction",
    "safe_divide",
    # Types
    "FloatBetween0And1",
    "MonthNumber",
    "PositiveFloat",
    "PositiveInt",
]
