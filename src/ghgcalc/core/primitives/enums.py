# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class IndicatorKindEnum(str, Enum):
    """
    Value kind of an indicator, which fixes its default domain and how the
    evaluator presents it to formulas.

    - QUANTITY: activity quantity or mass, domain [0, inf)
    - PERCENTAGE: entered as 0-100, divided by 100 before use in a formula
    - FRACTION: already fractional (e.g. mass fractions), domain [0, 1]
    - FACTOR: emission factor, calorific value or similar constant-like input
    - EMISSION: derived gas mass or CO2-equivalent mass
    """

    QUANTITY = "quantity"
    PERCENTAGE = "percentage"
    FRACTION = "fraction"
    FACTOR = "factor"
    EMISSION = "emission"


class ClampPolicy(str, Enum):
    """Leaf clamp policy declared on each calculated indicator."""

    NONE = "none"
    NON_NEGATIVE = "non_negative"


class AggregationSign(int, Enum):
    """
    Sign of a category in the grand total.

    Recovery, destruction, absorption and recycling categories are
    SUBTRACTIVE; everything else is ADDITIVE.
    """

    ADDITIVE = 1
    SUBTRACTIVE = -1


class FuelStateEnum(str, Enum):
    """Physical state of a fuel, which fixes its unit and default oxidation rate."""

    SOLID = "solid"
    LIQUID = "liquid"
    GAS = "gas"

    @property
    def unit(self) -> str:
        return "10^4 Nm3" if self is FuelStateEnum.GAS else "t"

    @property
    def default_oxidation_rate(self) -> float:
        return 99.0 if self is FuelStateEnum.GAS else 98.0


class EntityTypeTag(str, Enum):
    """Entity type tags understood by the default formula schemas."""

    PRODUCTION_LINE = "production-line"
    FUEL_ITEM = "fuel-item"
    FUEL_OUTPUT = "fuel-output"
    CARBONATE_ROW = "carbonate-row"
    CARBONATION_PRODUCT = "carbonation-product"
    CO2_RECOVERY = "co2-recovery"
    METHANE_RECOVERY = "methane-recovery"
    WASTEWATER_STREAM = "wastewater-stream"
    GAS_PRODUCT = "gas-product"
    REFRIGERANT_GAS = "refrigerant-gas"
    SHIELDING_GAS = "shielding-gas"
    PURCHASED_CO2 = "purchased-co2"
    NITRIC_ACID_LINE = "nitric-acid-line"
    PROCESS_MATERIAL = "process-material"
    CARBON_ANODE = "carbon-anode"
    ANODE_EFFECT = "anode-effect"
    OXALATE_PROCESS = "oxalate-process"
    UREA_TAIL_GAS = "urea-tail-gas"
    VEHICLE_FLEET = "vehicle-fleet"
    ELECTRICITY_HEAT = "electricity-heat"
    OTHER_SOURCE = "other-source"
