# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tabular (pandas) views of inventories for downstream display and export.
"""

from .summary import SUMMARY_COLUMNS, category_frame, monthly_frame, summary_frame

__all__ = [
    "SUMMARY_COLUMNS",
    "category_frame",
    "monthly_frame",
    "summary_frame",
]
