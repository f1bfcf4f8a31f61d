# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Formula families, default entity schemas and the evaluator that runs them.
"""

from . import families
from .evaluator import FormulaEvaluator
from .schemas import calculated, default_registry, raw

__all__ = [
    "families",
    "FormulaEvaluator",
    "calculated",
    "default_registry",
    "raw",
]
