# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ready-made category and rule sets for industry summary tables.
"""

from .presets import PRESETS, IndustryPreset, get_preset, list_presets

__all__ = [
    "PRESETS",
    "IndustryPreset",
    "get_preset",
    "list_presets",
]
