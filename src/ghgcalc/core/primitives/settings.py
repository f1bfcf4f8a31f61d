# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import Field

from .model import Model
from .types import PositiveFloat, PositiveInt


class CalculationSettings(Model):
    """
    Configuration settings for formula evaluation and aggregation.

    Usage Examples:
        # Default behaviour: every numeric failure degrades to 0.0
        calc_settings = CalculationSettings()

        # Surface formula bugs while developing a new formula family
        calc_settings = CalculationSettings(fail_on_error=True)
    """

    fail_on_error: bool = Field(
        default=False,
        description="If True, re-raise formula errors; otherwise, log and store 0.0.",
    )
    clamp_subtractive_categories: bool = Field(
        default=True,
        description=(
            "Clamp subtractive category totals (recovery, absorption, recycling) "
            "to >= 0 before the sign is applied, so a negative recovery can never "
            "increase the grand total."
        ),
    )


class NotificationSettings(Model):
    """Settings for publishing the grand total to external consumers."""

    tolerance: PositiveFloat = Field(
        default=0.0,
        description=(
            "Absolute difference below which a new total counts as unchanged. "
            "0.0 means any bit-level change is published."
        ),
    )


class ReportingSettings(Model):
    """Settings related to report generation."""

    decimal_places: PositiveInt = Field(
        default=4, description="Rounding applied to values in summary frames."
    )
    month_labels: bool = Field(
        default=False,
        description="Label month columns 'Jan'..'Dec' instead of 1..12.",
    )


class EngineSettings(Model):
    """Top-level settings for an emission inventory."""

    calculation: CalculationSettings = Field(default_factory=CalculationSettings)
    notification: NotificationSettings = Field(default_factory=NotificationSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
