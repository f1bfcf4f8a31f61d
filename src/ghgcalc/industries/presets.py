# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Industry presets.

A preset is the category/rule set behind one industry's summary table.
Categories are expressed in their own gas units (t CO2, t CH4, t N2O or
t CO2e for mixed fluorinated gases); every unit conversion happens in the
rule's conversion factor, exactly once.

Mixed-gas categories (fluorinated gas production, equipment leaks) are
converted to CO2e per entity, because each gas has its own GWP, and enter
the grand total with factor 1.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from pydantic import model_validator

from ..aggregation.rules import AggregationRule, CategoryDefinition
from ..core.primitives.enums import AggregationSign, EntityTypeTag
from ..core.primitives.model import Model
from ..reference.tables import GWP

T = EntityTypeTag
SUB = AggregationSign.SUBTRACTIVE


class IndustryPreset(Model):
    """
    Categories and rules of one industry's summary.

    Attributes:
        key: Preset identifier used by `get_preset`
        name: Industry name
        categories: Category definitions in summary-table order
        rules: How each category enters the grand total
        indirect_categories: Categories excluded from the direct total
            (net purchased electricity and heat)
    """

    key: str
    name: str
    categories: Tuple[CategoryDefinition, ...]
    rules: Tuple[AggregationRule, ...]
    indirect_categories: Tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_indirect(self) -> "IndustryPreset":
        known = {c.key for c in self.categories}
        unknown = sorted(set(self.indirect_categories) - known)
        if unknown:
            raise ValueError(f"Indirect categories not defined: {unknown}")
        return self

    @property
    def direct_rules(self) -> List[AggregationRule]:
        return [r for r in self.rules if r.category_key not in self.indirect_categories]


def _category(
    key: str, label: str, type_tag: EntityTypeTag, indicator_key: str, gas: str = "CO2"
) -> CategoryDefinition:
    return CategoryDefinition(
        key=key, label=label, type_tags=(type_tag.value,), indicator_key=indicator_key, gas=gas
    )


FOSSIL_FUEL = _category("fossil_fuel", "Fossil fuel combustion", T.FUEL_ITEM, "co2_emission")
FUEL_OUTPUT = _category(
    "fuel_output", "Carbon exported in fuel products", T.FUEL_OUTPUT, "co2_emission"
)
CARBONATE = _category("carbonate", "Carbonate use", T.CARBONATE_ROW, "co2_emission")
CARBONATION = _category(
    "carbonation", "CO2 absorbed by carbonation", T.CARBONATION_PRODUCT, "co2_absorbed"
)
WASTEWATER_CH4 = _category(
    "wastewater_ch4", "Anaerobic wastewater treatment", T.WASTEWATER_STREAM, "ch4_emission", "CH4"
)
METHANE_RECOVERY = _category(
    "methane_recovery", "CH4 recovered and destroyed", T.METHANE_RECOVERY, "recovered_ch4", "CH4"
)
CO2_RECOVERY = _category("co2_recovery", "CO2 recovered", T.CO2_RECOVERY, "recovered_co2")
PURCHASED_CO2 = _category(
    "purchased_co2", "Purchased industrial CO2", T.PURCHASED_CO2, "co2_emission"
)
PROCESS_MATERIAL = _category(
    "process_material", "Process materials", T.PROCESS_MATERIAL, "co2_emission"
)
NITRIC_ACID = _category(
    "nitric_acid", "Nitric acid production", T.NITRIC_ACID_LINE, "n2o_emission", "N2O"
)
GAS_PRODUCTION = _category(
    "fluorinated_gas_production", "HFCs/PFCs/SF6 production", T.GAS_PRODUCT, "co2e_emission", "CO2e"
)
EQUIPMENT_LEAK = _category(
    "equipment_leak", "Gas leaked from equipment", T.REFRIGERANT_GAS, "co2e_emission", "CO2e"
)
WELDING = _category("welding", "Welding shielding gas", T.SHIELDING_GAS, "co2_emission")
OTHER_SOURCES = _category(
    "other_sources", "Other significant sources", T.OTHER_SOURCE, "emission", "CO2e"
)
CARBON_ANODE = _category(
    "carbon_anode", "Carbon anode consumption", T.CARBON_ANODE, "co2_emission"
)
ANODE_EFFECT = _category(
    "anode_effect", "Anode effect PFCs", T.ANODE_EFFECT, "co2e_emission", "CO2e"
)
OXALATE = _category("oxalate", "Oxalic acid use", T.OXALATE_PROCESS, "co2_emission")
UREA_TAIL_GAS = _category(
    "urea_tail_gas", "Urea exhaust after-treatment", T.UREA_TAIL_GAS, "co2_emission"
)
VEHICLE_CH4_N2O = _category(
    "vehicle_ch4_n2o", "Road vehicle CH4 and N2O", T.VEHICLE_FLEET, "co2e_emission", "CO2e"
)
ELECTRICITY_HEAT = _category(
    "electricity_heat", "Net purchased electricity and heat", T.ELECTRICITY_HEAT, "co2_emission"
)


def _rule(
    category: CategoryDefinition,
    factor: float = 1.0,
    sign: AggregationSign = AggregationSign.ADDITIVE,
) -> AggregationRule:
    return AggregationRule(category_key=category.key, conversion_factor=factor, sign=sign)


def _preset(
    key: str,
    name: str,
    rules: List[AggregationRule],
    categories: List[CategoryDefinition],
) -> IndustryPreset:
    indirect = (ELECTRICITY_HEAT.key,) if ELECTRICITY_HEAT in categories else ()
    return IndustryPreset(
        key=key,
        name=name,
        categories=tuple(categories),
        rules=tuple(rules),
        indirect_categories=indirect,
    )


CH4_GWP = GWP["CH4"]
N2O_GWP = GWP["N2O"]


OTHER = _preset(
    "other",
    "Other industries",
    categories=[
        FOSSIL_FUEL,
        CARBONATE,
        WASTEWATER_CH4,
        METHANE_RECOVERY,
        CO2_RECOVERY,
        OTHER_SOURCES,
        ELECTRICITY_HEAT,
    ],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(CARBONATE),
        _rule(WASTEWATER_CH4, CH4_GWP),
        _rule(METHANE_RECOVERY, CH4_GWP, SUB),
        _rule(CO2_RECOVERY, sign=SUB),
        _rule(OTHER_SOURCES),
        _rule(ELECTRICITY_HEAT),
    ],
)

FOOD = _preset(
    "food",
    "Food, tobacco, beverage and refined tea",
    categories=[
        FOSSIL_FUEL,
        CARBONATE,
        PURCHASED_CO2,
        WASTEWATER_CH4,
        METHANE_RECOVERY,
        ELECTRICITY_HEAT,
    ],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(CARBONATE),
        _rule(PURCHASED_CO2),
        _rule(WASTEWATER_CH4, CH4_GWP),
        _rule(METHANE_RECOVERY, CH4_GWP, SUB),
        _rule(ELECTRICITY_HEAT),
    ],
)

CHEMICAL = _preset(
    "chemical",
    "Chemical production",
    categories=[
        FOSSIL_FUEL,
        FUEL_OUTPUT,
        PROCESS_MATERIAL,
        CARBONATE,
        NITRIC_ACID,
        CARBONATION,
        CO2_RECOVERY,
        ELECTRICITY_HEAT,
    ],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(FUEL_OUTPUT, sign=SUB),
        _rule(PROCESS_MATERIAL),
        _rule(CARBONATE),
        _rule(NITRIC_ACID, N2O_GWP),
        _rule(CARBONATION, sign=SUB),
        _rule(CO2_RECOVERY, sign=SUB),
        _rule(ELECTRICITY_HEAT),
    ],
)

STEEL = _preset(
    "steel",
    "Iron and steel production",
    categories=[
        FOSSIL_FUEL,
        FUEL_OUTPUT,
        PROCESS_MATERIAL,
        CARBONATE,
        CO2_RECOVERY,
        ELECTRICITY_HEAT,
    ],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(FUEL_OUTPUT, sign=SUB),
        _rule(PROCESS_MATERIAL),
        _rule(CARBONATE),
        _rule(CO2_RECOVERY, sign=SUB),
        _rule(ELECTRICITY_HEAT),
    ],
)

CEMENT = _preset(
    "cement",
    "Cement production",
    categories=[FOSSIL_FUEL, PROCESS_MATERIAL, CARBONATE, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(PROCESS_MATERIAL),
        _rule(CARBONATE),
        _rule(ELECTRICITY_HEAT),
    ],
)

FLUORINE = _preset(
    "fluorine",
    "Fluorochemical production",
    categories=[FOSSIL_FUEL, CARBONATE, GAS_PRODUCTION, EQUIPMENT_LEAK, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(CARBONATE),
        _rule(GAS_PRODUCTION),
        _rule(EQUIPMENT_LEAK),
        _rule(ELECTRICITY_HEAT),
    ],
)

MACHINERY = _preset(
    "machinery",
    "Machinery and equipment manufacturing",
    categories=[FOSSIL_FUEL, EQUIPMENT_LEAK, WELDING, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(EQUIPMENT_LEAK),
        _rule(WELDING),
        _rule(ELECTRICITY_HEAT),
    ],
)

POWER_GRID = _preset(
    "power_grid",
    "Power grid",
    categories=[EQUIPMENT_LEAK, ELECTRICITY_HEAT],
    rules=[_rule(EQUIPMENT_LEAK), _rule(ELECTRICITY_HEAT)],
)


PAPER = _preset(
    "paper",
    "Pulp and paper",
    categories=[FOSSIL_FUEL, CARBONATE, WASTEWATER_CH4, METHANE_RECOVERY, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(CARBONATE),
        _rule(WASTEWATER_CH4, CH4_GWP),
        _rule(METHANE_RECOVERY, CH4_GWP, SUB),
        _rule(ELECTRICITY_HEAT),
    ],
)

COKING = _preset(
    "coking",
    "Coking",
    categories=[FOSSIL_FUEL, FUEL_OUTPUT, CO2_RECOVERY, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(FUEL_OUTPUT, sign=SUB),
        _rule(CO2_RECOVERY, sign=SUB),
        _rule(ELECTRICITY_HEAT),
    ],
)

POWER_PLANT = _preset(
    "power_plant",
    "Power generation",
    categories=[FOSSIL_FUEL, ELECTRICITY_HEAT],
    rules=[_rule(FOSSIL_FUEL), _rule(ELECTRICITY_HEAT)],
)

ALUMINUM = _preset(
    "aluminum",
    "Electrolytic aluminium",
    categories=[
        FOSSIL_FUEL,
        CARBON_ANODE,
        ANODE_EFFECT,
        CARBONATE,
        OTHER_SOURCES,
        ELECTRICITY_HEAT,
    ],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(CARBON_ANODE),
        _rule(ANODE_EFFECT),
        _rule(CARBONATE),
        _rule(OTHER_SOURCES),
        _rule(ELECTRICITY_HEAT),
    ],
)

NONFERROUS = _preset(
    "nonferrous",
    "Other nonferrous metal smelting",
    categories=[FOSSIL_FUEL, PROCESS_MATERIAL, CARBONATE, OXALATE, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(PROCESS_MATERIAL),
        _rule(CARBONATE),
        _rule(OXALATE),
        _rule(ELECTRICITY_HEAT),
    ],
)

MINING = _preset(
    "mining",
    "Mining",
    categories=[FOSSIL_FUEL, CARBONATE, CARBONATION, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(CARBONATE),
        _rule(CARBONATION, sign=SUB),
        _rule(ELECTRICITY_HEAT),
    ],
)

LAND_TRANSPORTATION = _preset(
    "land_transportation",
    "Land transportation",
    categories=[FOSSIL_FUEL, VEHICLE_CH4_N2O, UREA_TAIL_GAS, ELECTRICITY_HEAT],
    rules=[
        _rule(FOSSIL_FUEL),
        _rule(VEHICLE_CH4_N2O),
        _rule(UREA_TAIL_GAS),
        _rule(ELECTRICITY_HEAT),
    ],
)

PUBLIC_BUILDING = _preset(
    "public_building",
    "Public buildings",
    categories=[FOSSIL_FUEL, OTHER_SOURCES, ELECTRICITY_HEAT],
    rules=[_rule(FOSSIL_FUEL), _rule(OTHER_SOURCES), _rule(ELECTRICITY_HEAT)],
)


PRESETS: Dict[str, IndustryPreset] = {
    p.key: p
    for p in (
        OTHER,
        FOOD,
        CHEMICAL,
        STEEL,
        CEMENT,
        FLUORINE,
        MACHINERY,
        POWER_GRID,
        PAPER,
        COKING,
        POWER_PLANT,
        ALUMINUM,
        NONFERROUS,
        MINING,
        LAND_TRANSPORTATION,
        PUBLIC_BUILDING,
    )
}


def get_preset(key: str) -> IndustryPreset:
    try:
        return PRESETS[key]
    except KeyError:
        raise KeyError(
            f"Unknown industry preset '{key}'. Available: {sorted(PRESETS)}"
        ) from None


def list_presets() -> List[str]:
    return list(PRESETS)
