# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Aggregation: categories, rules and the roll-up engine.
"""

from .engine import AggregationEngine
from .rules import AggregationRule, CategoryDefinition

__all__ = [
    "AggregationEngine",
    "AggregationRule",
    "CategoryDefinition",
]
