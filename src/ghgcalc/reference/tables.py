# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Default reference tables.

Published default values used by Chinese enterprise GHG accounting
guidelines: fuel properties, carbonate emission factors, GWP values and
molar masses, provincial grid factors, wastewater methane correction
factors, nitric-acid N2O generation factors and equipment constants.

Tables are module-level constants; `default_catalog()` turns them into an
immutable `ReferenceCatalog` once and caches it.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, List, Tuple

from ..core.primitives.enums import EntityTypeTag, FuelStateEnum
from .catalog import Equipment, ReferenceCatalog, Template

CARBON_TO_CO2 = 44.0 / 12.0
CO2_DENSITY = 19.77  # t / 10^4 Nm3 at standard conditions
CH4_DENSITY = 7.17  # t / 10^4 Nm3 at standard conditions
CO2_MOLAR_MASS = 44.0
METHANE_PRODUCING_CAPACITY = 0.25  # kg CH4 / kg COD
REFRIGERANT_LEAK_MOL_PER_FILL = 0.342
DEFAULT_HEAT_EMISSION_FACTOR = 0.11  # t CO2 / GJ
DEFAULT_GRID_EMISSION_FACTOR = 0.5366  # t CO2 / MWh
MG_TO_TONNE = 1e-9
UREA_CARBON_FRACTION = 12.0 / 60.0  # C in CO(NH2)2
OXALATE_CO2_FACTOR = 0.349  # t CO2 / t pure oxalic acid

# Aluminium smelting defaults
CARBON_ANODE_RATE = 0.411  # t C / t Al, net anode consumption
ANODE_SULFUR_CONTENT = 2.0  # %
ANODE_ASH_CONTENT = 0.4  # %
CF4_EMISSION_FACTOR = 0.034  # kg CF4 / t Al
C2F6_EMISSION_FACTOR = 0.0034  # kg C2F6 / t Al
CF4_DURATION_SLOPE = 0.143  # kg CF4 / t Al per anode-effect minute per cell-day
C2F6_TO_CF4_RATIO = 0.1

# Road transport GWPs (AR6), used for vehicle CH4 and N2O only
TRANSPORT_GWP: Dict[str, float] = {"CH4": 28, "N2O": 273}

# (id, name, state, net calorific value GJ/t or GJ/10^4 Nm3, carbon content tC/GJ)
FUELS: Tuple[Tuple[str, str, FuelStateEnum, float, float], ...] = (
    ("anthracite", "Anthracite", FuelStateEnum.SOLID, 22.867, 0.02749),
    ("bituminous", "Bituminous coal", FuelStateEnum.SOLID, 23.076, 0.02308),
    ("lignite", "Lignite", FuelStateEnum.SOLID, 14.759, 0.02797),
    ("gangue", "Coal gangue", FuelStateEnum.SOLID, 8.374, 0.02541),
    ("coal-slime", "Coal slime", FuelStateEnum.SOLID, 12.545, 0.02541),
    ("coke", "Coke", FuelStateEnum.SOLID, 28.435, 0.02942),
    ("petroleum-coke", "Petroleum coke", FuelStateEnum.SOLID, 32.500, 0.02750),
    ("crude-oil", "Crude oil", FuelStateEnum.LIQUID, 41.816, 0.02008),
    ("fuel-oil", "Fuel oil", FuelStateEnum.LIQUID, 41.816, 0.02110),
    ("gasoline", "Gasoline", FuelStateEnum.LIQUID, 43.070, 0.01890),
    ("diesel", "Diesel", FuelStateEnum.LIQUID, 42.652, 0.02020),
    ("kerosene", "Kerosene", FuelStateEnum.LIQUID, 43.070, 0.01960),
    ("lng", "Liquefied natural gas", FuelStateEnum.LIQUID, 51.498, 0.01720),
    ("lpg", "Liquefied petroleum gas", FuelStateEnum.LIQUID, 50.179, 0.01720),
    ("coal-tar", "Coal tar", FuelStateEnum.LIQUID, 33.453, 0.02200),
    ("refinery-gas", "Refinery dry gas", FuelStateEnum.LIQUID, 45.998, 0.01820),
    ("natural-gas", "Natural gas", FuelStateEnum.GAS, 389.310, 0.01532),
    ("blast-furnace-gas", "Blast furnace gas", FuelStateEnum.GAS, 33.000, 0.07080),
    ("converter-gas", "Converter gas", FuelStateEnum.GAS, 84.000, 0.04960),
    ("coke-oven-gas", "Coke oven gas", FuelStateEnum.GAS, 173.854, 0.01210),
)

# formula -> (name, t CO2 / t carbonate)
CARBONATES: Dict[str, Tuple[str, float]] = {
    "CaCO3": ("Calcium carbonate (limestone)", 0.4397),
    "MgCO3": ("Magnesium carbonate (magnesite)", 0.5220),
    "Na2CO3": ("Sodium carbonate (soda ash)", 0.4149),
    "NaHCO3": ("Sodium bicarbonate", 0.5237),
    "FeCO3": ("Iron carbonate (siderite)", 0.3799),
    "MnCO3": ("Manganese carbonate (rhodochrosite)", 0.3829),
    "BaCO3": ("Barium carbonate (witherite)", 0.2230),
    "Li2CO3": ("Lithium carbonate", 0.5955),
    "K2CO3": ("Potassium carbonate (potash)", 0.3184),
    "SrCO3": ("Strontium carbonate", 0.2980),
    "CaMg(CO3)2": ("Calcium magnesium carbonate (dolomite)", 0.4773),
}

# Carbonation products: (id, name, carbonate formula)
CARBONATION_PRODUCTS: Tuple[Tuple[str, str, str], ...] = (
    ("light-calcium-carbonate", "Light calcium carbonate", "CaCO3"),
    ("light-magnesium-carbonate", "Light magnesium carbonate", "MgCO3"),
    ("barium-carbonate", "Barium carbonate", "BaCO3"),
)

GWP: Dict[str, float] = {
    "CO2": 1,
    "CH4": 21,
    "N2O": 310,
    "HFC-23": 11700,
    "HFC-32": 650,
    "HFC-125": 2800,
    "HFC-134a": 1300,
    "HFC-143a": 3800,
    "HFC-152a": 140,
    "HFC-227ea": 2900,
    "HFC-236fa": 6300,
    "HFC-245fa": 1030,
    "SF6": 23900,
    "CF4": 6630,
    "C2F6": 11100,
}

MOLAR_MASS: Dict[str, float] = {
    "CO2": 44,
    "Ar": 39.95,
    "O2": 32,
    "He": 4,
    "HFC-23": 70,
    "HFC-32": 52,
    "HFC-125": 120,
    "HFC-134a": 102,
    "HFC-143a": 84,
    "HFC-152a": 66,
    "HFC-227ea": 170,
    "HFC-236fa": 152,
    "HFC-245fa": 134,
    "SF6": 146,
}

# Fluorinated gas production: (id, name, gas, leak rate as a fraction of output)
GAS_PRODUCTS: Tuple[Tuple[str, str, str, float], ...] = (
    ("hfc-32", "HFC-32", "HFC-32", 0.005),
    ("hfc-125", "HFC-125", "HFC-125", 0.005),
    ("hfc-134a", "HFC-134a", "HFC-134a", 0.005),
    ("hfc-143a", "HFC-143a", "HFC-143a", 0.005),
    ("hfc-152a", "HFC-152a", "HFC-152a", 0.005),
    ("hfc-227ea", "HFC-227ea", "HFC-227ea", 0.005),
    ("hfc-236fa", "HFC-236fa", "HFC-236fa", 0.005),
    ("hfc-245fa", "HFC-245fa", "HFC-245fa", 0.005),
    ("sf6-high-purity", "High-purity SF6 (>=99.999%)", "SF6", 0.08),
    ("sf6-standard", "Standard SF6 (<99.999%)", "SF6", 0.002),
)

# Gases charged into electrical and refrigeration equipment: (id, gwp, molar mass)
REFRIGERANTS: Dict[str, Tuple[float, float]] = {
    "SF6": (23500, 146.07),
    "HFCs": (1000, 102.03),
    "PFCs": (5000, 138.01),
}

# Nitric acid production processes: (id, name, t N2O / t HNO3)
NITRIC_ACID_PROCESSES: Tuple[Tuple[str, str, float], ...] = (
    ("high-pressure", "High-pressure process", 0.0139),
    ("medium-pressure", "Medium-pressure process", 0.0118),
    ("atmospheric", "Atmospheric-pressure process", 0.0097),
    ("dual-pressure", "Dual-pressure process", 0.0080),
    ("combined", "Combined process", 0.0075),
    ("low-pressure", "Low-pressure process", 0.0050),
)

# NOx/N2O tail-gas abatement: (id, name, N2O removal efficiency %)
N2O_ABATEMENT: Tuple[Tuple[str, str, float], ...] = (
    ("nscr", "Non-selective catalytic reduction (NSCR)", 85.0),
    ("scr", "Selective catalytic reduction (SCR)", 0.0),
    ("extended-absorption", "Extended absorption", 0.0),
)

# Combustion equipment: (id, name, carbon oxidation rate %)
COMBUSTION_EQUIPMENT: Tuple[Tuple[str, str, float], ...] = (
    ("coke-oven", "Coke oven (process heating)", 100.0),
    ("solid-fuel-boiler", "Solid-fuel boiler", 98.0),
    ("oil-fired-burner", "Oil-fired burner", 98.0),
    ("gas-fired-burner", "Gas-fired burner", 99.0),
)

# Process materials: (id, name, t CO2 per unit, unit)
PROCESS_MATERIALS: Tuple[Tuple[str, str, float, str], ...] = (
    ("portland-clinker", "Portland cement clinker", 0.535, "t"),
    ("white-portland-clinker", "White Portland cement clinker", 0.550, "t"),
    ("sulfoaluminate-clinker", "Sulfo(ferro)aluminate cement clinker", 0.413, "t"),
    ("aluminate-clinker", "Aluminate cement clinker", 0.292, "t"),
    ("semi-coke-reductant", "Semi-coke as reductant", 2.853, "t"),
    ("coke-reductant", "Coke as reductant", 2.862, "t"),
    ("anthracite-reductant", "Anthracite as reductant", 1.924, "t"),
    ("natural-gas-reductant", "Natural gas as reductant", 21.622, "10^4 Nm3"),
)

# Wastewater methane correction factors: (id, name, MCF)
WASTEWATER_MCF: Tuple[Tuple[str, str, float], ...] = (
    ("sea-river-lake", "Discharge to sea, river or lake", 0.1),
    ("aerobic-well-managed", "Aerobic treatment, well managed", 0.0),
    ("aerobic-overloaded", "Aerobic treatment, overloaded", 0.3),
    ("anaerobic-sludge-digester", "Anaerobic sludge digester", 0.8),
    ("anaerobic-reactor", "Anaerobic reactor", 0.8),
    ("shallow-anaerobic-lagoon", "Shallow anaerobic lagoon (<2 m)", 0.2),
    ("deep-anaerobic-lagoon", "Deep anaerobic lagoon (>2 m)", 0.8),
    ("food-manufacturing", "Food manufacturing (incl. brewing)", 0.7),
    ("tobacco-manufacturing", "Tobacco manufacturing", 0.3),
    ("beverage-tea-manufacturing", "Beverage and refined tea manufacturing", 0.5),
    ("paper-manufacturing", "Paper manufacturing", 0.5),
)

# Provincial grid emission factors, 2022 (t CO2 / MWh)
GRID_FACTORS_2022: Dict[str, float] = {
    "national": DEFAULT_GRID_EMISSION_FACTOR,
    "beijing": 0.558,
    "tianjin": 0.7041,
    "hebei": 0.7252,
    "shanxi": 0.7096,
    "inner-mongolia": 0.6849,
    "shanghai": 0.5849,
    "jiangsu": 0.5978,
    "zhejiang": 0.5153,
    "shandong": 0.641,
    "guangdong": 0.4403,
    "sichuan": 0.1404,
    "yunnan": 0.1073,
}

# Road vehicle CH4/N2O factors: (class id, name, emission standard, mg CH4/km, mg N2O/km)
VEHICLE_FACTORS: Tuple[Tuple[str, str, str, float, float], ...] = (
    ("car-gasoline", "Passenger car, gasoline", "china-1", 45, 38),
    ("car-gasoline", "Passenger car, gasoline", "china-2", 94, 24),
    ("car-gasoline", "Passenger car, gasoline", "china-3", 83, 12),
    ("car-gasoline", "Passenger car, gasoline", "china-4-plus", 57, 6),
    ("car-diesel", "Passenger car, diesel", "china-1", 18, 0),
    ("car-diesel", "Passenger car, diesel", "china-2", 6, 3),
    ("car-diesel", "Passenger car, diesel", "china-3", 7, 15),
    ("car-diesel", "Passenger car, diesel", "china-4-plus", 0, 15),
    ("car-lpg", "Passenger car, LPG", "china-1", 80, 38),
    ("car-lpg", "Passenger car, LPG", "china-2", 80, 23),
    ("car-lpg", "Passenger car, LPG", "china-3-plus", 80, 9),
    ("light-gasoline", "Other light vehicle, gasoline", "china-1", 45, 122),
    ("light-gasoline", "Other light vehicle, gasoline", "china-2", 94, 62),
    ("light-gasoline", "Other light vehicle, gasoline", "china-3", 83, 36),
    ("light-gasoline", "Other light vehicle, gasoline", "china-4-plus", 57, 16),
    ("light-diesel", "Other light vehicle, diesel", "china-1", 18, 0),
    ("light-diesel", "Other light vehicle, diesel", "china-2", 6, 3),
    ("light-diesel", "Other light vehicle, diesel", "china-3", 7, 15),
    ("light-diesel", "Other light vehicle, diesel", "china-4-plus", 0, 15),
    ("heavy-gasoline", "Heavy vehicle, gasoline", "all", 140, 6),
    ("heavy-diesel", "Heavy vehicle, diesel", "all", 175, 30),
    ("heavy-natural-gas", "Heavy vehicle, natural gas", "china-4-plus", 900, 0),
    ("heavy-natural-gas", "Heavy vehicle, natural gas", "other", 5400, 0),
)


def _fuel_templates() -> List[Template]:
    return [
        Template(
            template_id=f"fuel:{fuel_id}",
            type_tag=EntityTypeTag.FUEL_ITEM.value,
            name=name,
            indicator_defaults={
                "calorific_value": ncv,
                "carbon_content": cc,
                "oxidation_rate": state.default_oxidation_rate,
            },
            attributes={"state": state.value, "unit": state.unit},
        )
        for fuel_id, name, state, ncv, cc in FUELS
    ]


def _carbonate_templates() -> List[Template]:
    templates = [
        Template(
            template_id=f"carbonate:{formula}",
            type_tag=EntityTypeTag.CARBONATE_ROW.value,
            name=name,
            constants={"emission_factor": factor},
            attributes={"formula": formula},
        )
        for formula, (name, factor) in CARBONATES.items()
    ]
    for product_id, name, formula in CARBONATION_PRODUCTS:
        templates.append(
            Template(
                template_id=f"carbonation:{product_id}",
                type_tag=EntityTypeTag.CARBONATION_PRODUCT.value,
                name=name,
                constants={"emission_factor": CARBONATES[formula][1]},
                attributes={"formula": formula},
            )
        )
    return templates


def _gas_templates() -> List[Template]:
    templates = [
        Template(
            template_id=f"gas:{product_id}",
            type_tag=EntityTypeTag.GAS_PRODUCT.value,
            name=name,
            constants={"emission_rate": rate, "gwp": GWP[gas]},
            attributes={"gas": gas},
        )
        for product_id, name, gas, rate in GAS_PRODUCTS
    ]
    templates.extend(
        Template(
            template_id=f"refrigerant:{gas}",
            type_tag=EntityTypeTag.REFRIGERANT_GAS.value,
            name=gas,
            constants={"gwp": gwp, "molar_mass": molar_mass},
            attributes={"gas": gas},
        )
        for gas, (gwp, molar_mass) in REFRIGERANTS.items()
    )
    return templates


def _process_templates() -> List[Template]:
    templates = [
        Template(
            template_id=f"nitric:{process_id}",
            type_tag=EntityTypeTag.NITRIC_ACID_LINE.value,
            name=name,
            indicator_defaults={"n2o_factor": factor},
        )
        for process_id, name, factor in NITRIC_ACID_PROCESSES
    ]
    templates.extend(
        Template(
            template_id=f"material:{material_id}",
            type_tag=EntityTypeTag.PROCESS_MATERIAL.value,
            name=name,
            constants={"emission_factor": factor},
            attributes={"unit": unit},
        )
        for material_id, name, factor, unit in PROCESS_MATERIALS
    )
    templates.extend(
        Template(
            template_id=f"wastewater:{option_id}",
            type_tag=EntityTypeTag.WASTEWATER_STREAM.value,
            name=name,
            constants={"mcf": mcf},
        )
        for option_id, name, mcf in WASTEWATER_MCF
    )
    templates.extend(
        Template(
            template_id=f"grid:{region}",
            type_tag=EntityTypeTag.ELECTRICITY_HEAT.value,
            name=f"Purchased electricity and heat ({region})",
            constants={"grid_factor": factor},
        )
        for region, factor in GRID_FACTORS_2022.items()
    )
    templates.extend(
        [
            Template(
                template_id="co2-recovery:standard",
                type_tag=EntityTypeTag.CO2_RECOVERY.value,
                name="CO2 recovered for external supply or feedstock",
            ),
            Template(
                template_id="methane-recovery:standard",
                type_tag=EntityTypeTag.METHANE_RECOVERY.value,
                name="CH4 recovered for self-use, external supply or flaring",
            ),
            Template(
                template_id="purchased-co2:standard",
                type_tag=EntityTypeTag.PURCHASED_CO2.value,
                name="Purchased CO2 used as feedstock",
            ),
        ]
    )
    templates.extend(
        [
            Template(
                template_id="carbon-anode:standard",
                type_tag=EntityTypeTag.CARBON_ANODE.value,
                name="Carbon anode consumption",
                indicator_defaults={
                    "carbon_anode_rate": CARBON_ANODE_RATE,
                    "sulfur_content": ANODE_SULFUR_CONTENT,
                    "ash_content": ANODE_ASH_CONTENT,
                },
            ),
            Template(
                template_id="anode-effect:standard",
                type_tag=EntityTypeTag.ANODE_EFFECT.value,
                name="Electrolysis anode effect (CF4, C2F6)",
            ),
            Template(
                template_id="oxalate:standard",
                type_tag=EntityTypeTag.OXALATE_PROCESS.value,
                name="Oxalic acid use",
            ),
            Template(
                template_id="urea-tail-gas:standard",
                type_tag=EntityTypeTag.UREA_TAIL_GAS.value,
                name="Urea exhaust after-treatment",
            ),
        ]
    )
    return templates


def _vehicle_templates() -> List[Template]:
    return [
        Template(
            template_id=f"vehicle:{class_id}:{standard}",
            type_tag=EntityTypeTag.VEHICLE_FLEET.value,
            name=f"{name} ({standard})",
            constants={"ch4_factor": ch4, "n2o_factor": n2o},
            attributes={"vehicle_class": class_id, "standard": standard},
        )
        for class_id, name, standard, ch4, n2o in VEHICLE_FACTORS
    ]


def _equipment() -> List[Equipment]:
    fuel_tags = (EntityTypeTag.FUEL_ITEM.value, EntityTypeTag.FUEL_OUTPUT.value)
    items = [
        Equipment(
            equipment_id=f"combustion:{equipment_id}",
            name=name,
            indicator_key="oxidation_rate",
            value=rate,
            applies_to=fuel_tags,
        )
        for equipment_id, name, rate in COMBUSTION_EQUIPMENT
    ]
    items.extend(
        Equipment(
            equipment_id=f"abatement:{equipment_id}",
            name=name,
            indicator_key="removal_efficiency",
            value=efficiency,
            applies_to=(EntityTypeTag.NITRIC_ACID_LINE.value,),
        )
        for equipment_id, name, efficiency in N2O_ABATEMENT
    )
    return items


@lru_cache(maxsize=1)
def default_catalog() -> ReferenceCatalog:
    """Build the default catalog once; every caller shares the same instance."""
    return ReferenceCatalog(
        templates=[
            *_fuel_templates(),
            *_carbonate_templates(),
            *_gas_templates(),
            *_process_templates(),
            *_vehicle_templates(),
        ],
        equipment=_equipment(),
    )


def mixture_molar_mass(components: Dict[str, float]) -> float:
    """
    Mean molar mass of a gas mixture.

    Args:
        components: Gas name (a key of `MOLAR_MASS`) -> volume percentage (0-100)

    Returns:
        Sum of volume fraction x molar mass over the components
    """
    total = 0.0
    for gas, percent in components.items():
        if gas not in MOLAR_MASS:
            raise KeyError(f"No molar mass for gas '{gas}'")
        total += (percent / 100.0) * MOLAR_MASS[gas]
    return total
