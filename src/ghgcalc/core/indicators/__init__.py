# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Indicator schemas and monthly time series.
"""

from .schema import (
    EntitySchema,
    Formula,
    FormulaFn,
    IndicatorDefinition,
    SchemaRegistry,
)
from .series import MONTHS, MONTHS_PER_YEAR, MonthRecord, TimeSeries, month_index

__all__ = [
    "EntitySchema",
    "Formula",
    "FormulaFn",
    "IndicatorDefinition",
    "SchemaRegistry",
    "MONTHS",
    "MONTHS_PER_YEAR",
    "MonthRecord",
    "TimeSeries",
    "month_index",
]
