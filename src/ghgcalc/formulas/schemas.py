# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Indicator schemas for the default entity types.

Each schema binds the formula families in `families` to the indicator keys an
entity type owns, and declares the leaf clamp policy of every calculated
indicator:

- NON_NEGATIVE: carbonation absorption, CO2 and CH4 recovery, wastewater
  CH4, refrigerant leak, shielding gas, nitric-acid N2O and the carbon
  anode factor. These are physical masses; recovery and absorption also
  feed subtractive categories.
- NONE: fuel combustion, carbonate decomposition, fluorinated gas production,
  purchased CO2, process materials, oxalic acid, urea after-treatment, anode
  effect PFCs, vehicle CH4/N2O and net electricity/heat. Their inputs are
  domain-clamped non-negative, except net energy, which is negative when a
  site exports more than it buys.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional, Sequence

from ..core.indicators.schema import (
    EntitySchema,
    Formula,
    FormulaFn,
    IndicatorDefinition,
    SchemaRegistry,
)
from ..core.primitives.enums import ClampPolicy, EntityTypeTag, IndicatorKindEnum
from ..reference.tables import (
    ANODE_ASH_CONTENT,
    ANODE_SULFUR_CONTENT,
    C2F6_EMISSION_FACTOR,
    C2F6_TO_CF4_RATIO,
    CARBON_ANODE_RATE,
    CF4_DURATION_SLOPE,
    CF4_EMISSION_FACTOR,
    CH4_DENSITY,
    CO2_DENSITY,
    DEFAULT_HEAT_EMISSION_FACTOR,
    GWP,
    METHANE_PRODUCING_CAPACITY,
    OXALATE_CO2_FACTOR,
    REFRIGERANT_LEAK_MOL_PER_FILL,
    TRANSPORT_GWP,
)
from . import families

Q = IndicatorKindEnum.QUANTITY
PCT = IndicatorKindEnum.PERCENTAGE
FRAC = IndicatorKindEnum.FRACTION
FACTOR = IndicatorKindEnum.FACTOR
EMISSION = IndicatorKindEnum.EMISSION


def _summary_line(fn: FormulaFn) -> str:
    doc = (fn.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else ""


def raw(
    key: str,
    name: str,
    unit: str = "",
    kind: IndicatorKindEnum = Q,
    default: Optional[float] = None,
    decimal_places: int = 2,
) -> IndicatorDefinition:
    """Shorthand for a user-entered indicator."""
    return IndicatorDefinition(
        key=key,
        name=name,
        unit=unit,
        kind=kind,
        default_value=default,
        decimal_places=decimal_places,
    )


def calculated(
    key: str,
    name: str,
    unit: str,
    fn: FormulaFn,
    inputs: Sequence[str] = (),
    constants: Sequence[str] = (),
    clamp: ClampPolicy = ClampPolicy.NONE,
    decimal_places: int = 4,
    kind: IndicatorKindEnum = EMISSION,
) -> IndicatorDefinition:
    """Shorthand for a formula-derived indicator."""
    return IndicatorDefinition(
        key=key,
        name=name,
        unit=unit,
        kind=kind,
        is_calculated=True,
        decimal_places=decimal_places,
        formula=Formula(
            fn=fn,
            inputs=tuple(inputs),
            constants=tuple(constants),
            description=_summary_line(fn),
        ),
        clamp=clamp,
    )


NON_NEGATIVE = ClampPolicy.NON_NEGATIVE


PRODUCTION_LINE = EntitySchema(
    type_tag=EntityTypeTag.PRODUCTION_LINE.value,
    label="Production line / process / unit",
)

FUEL = EntitySchema(
    type_tag=EntityTypeTag.FUEL_ITEM.value,
    label="Fossil fuel",
    indicators=(
        raw("consumption", "Consumption", "t or 10^4 Nm3"),
        raw("calorific_value", "Net calorific value", "GJ/t or GJ/10^4 Nm3", FACTOR, decimal_places=3),
        raw("carbon_content", "Carbon content per unit heat", "tC/GJ", FACTOR, decimal_places=5),
        raw("received_base_carbon", "Measured carbon content", "tC/t or tC/10^4 Nm3", FACTOR, default=0.0, decimal_places=4),
        raw("oxidation_rate", "Carbon oxidation rate", "%", PCT, default=98.0),
        calculated(
            "carbon_per_unit",
            "Carbon content per unit",
            "tC/t or tC/10^4 Nm3",
            families.carbon_per_unit,
            inputs=("calorific_value", "carbon_content"),
            kind=FACTOR,
        ),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.fuel_combustion_co2,
            inputs=("consumption", "received_base_carbon", "carbon_per_unit", "oxidation_rate"),
        ),
    ),
    primary_indicator="co2_emission",
)

CARBONATE = EntitySchema(
    type_tag=EntityTypeTag.CARBONATE_ROW.value,
    label="Carbonate consumed",
    indicators=(
        raw("consumption", "Consumption", "t"),
        raw("purity", "Purity", "%", PCT, default=100.0),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.carbonate_decomposition_co2,
            inputs=("consumption", "purity"),
            constants=("emission_factor",),
        ),
    ),
    required_constants=("emission_factor",),
    primary_indicator="co2_emission",
)

CARBONATION_PRODUCT = EntitySchema(
    type_tag=EntityTypeTag.CARBONATION_PRODUCT.value,
    label="Carbonation product",
    indicators=(
        raw("product_mass", "Product output", "t"),
        raw("carbonate_mass_fraction", "Carbonate mass fraction", "", FRAC, decimal_places=4),
        calculated(
            "co2_absorbed",
            "CO2 absorbed",
            "tCO2",
            families.carbonation_absorbed_co2,
            inputs=("product_mass", "carbonate_mass_fraction"),
            constants=("emission_factor",),
            clamp=NON_NEGATIVE,
        ),
    ),
    required_constants=("emission_factor",),
    primary_indicator="co2_absorbed",
)

CO2_RECOVERY = EntitySchema(
    type_tag=EntityTypeTag.CO2_RECOVERY.value,
    label="CO2 recovery",
    indicators=(
        raw("external_supply_volume", "Recovered for external supply", "10^4 Nm3"),
        raw("external_supply_concentration", "External supply CO2 concentration", "%", PCT),
        raw("raw_material_volume", "Recovered as feedstock", "10^4 Nm3"),
        raw("raw_material_concentration", "Feedstock CO2 concentration", "%", PCT),
        calculated(
            "recovered_co2",
            "CO2 recovered",
            "tCO2",
            families.recovered_co2,
            inputs=(
                "external_supply_volume",
                "external_supply_concentration",
                "raw_material_volume",
                "raw_material_concentration",
            ),
            constants=("co2_density",),
            clamp=NON_NEGATIVE,
        ),
    ),
    constant_defaults={"co2_density": CO2_DENSITY},
    primary_indicator="recovered_co2",
)

METHANE_RECOVERY = EntitySchema(
    type_tag=EntityTypeTag.METHANE_RECOVERY.value,
    label="CH4 recovery and destruction",
    indicators=(
        raw("self_use_volume", "Recovered for self-use", "Nm3"),
        raw("self_use_concentration", "Self-use CH4 concentration", "%", PCT),
        raw("self_use_oxidation_rate", "Self-use oxidation rate", "%", PCT, default=99.0),
        raw("external_supply_volume", "Recovered for external supply", "Nm3"),
        raw("external_supply_concentration", "External supply CH4 concentration", "%", PCT),
        raw("flare_volume", "Sent to flare", "Nm3"),
        raw("flare_concentration", "Flare gas CH4 concentration", "%", PCT),
        raw("flare_destruction_efficiency", "Flare destruction efficiency", "%", PCT, default=98.0),
        calculated(
            "self_use_ch4",
            "CH4 recovered for self-use",
            "tCH4",
            families.self_use_ch4,
            inputs=("self_use_volume", "self_use_concentration", "self_use_oxidation_rate"),
            constants=("ch4_density",),
            clamp=NON_NEGATIVE,
        ),
        calculated(
            "external_supply_ch4",
            "CH4 recovered for external supply",
            "tCH4",
            families.external_supply_ch4,
            inputs=("external_supply_volume", "external_supply_concentration"),
            constants=("ch4_density",),
            clamp=NON_NEGATIVE,
        ),
        calculated(
            "flare_destroyed_ch4",
            "CH4 destroyed by flare",
            "tCH4",
            families.flare_destroyed_ch4,
            inputs=("flare_volume", "flare_concentration", "flare_destruction_efficiency"),
            constants=("ch4_density",),
            clamp=NON_NEGATIVE,
        ),
        calculated(
            "recovered_ch4",
            "CH4 recovered and destroyed",
            "tCH4",
            families.total_recovered_ch4,
            inputs=("self_use_ch4", "external_supply_ch4", "flare_destroyed_ch4"),
            clamp=NON_NEGATIVE,
        ),
    ),
    constant_defaults={"ch4_density": CH4_DENSITY},
    primary_indicator="recovered_ch4",
)

WASTEWATER = EntitySchema(
    type_tag=EntityTypeTag.WASTEWATER_STREAM.value,
    label="Wastewater treatment",
    indicators=(
        raw("wastewater_volume", "Wastewater treated", "m3"),
        raw("inlet_cod", "Inlet COD concentration", "kg COD/m3", decimal_places=4),
        raw("outlet_cod", "Outlet COD concentration", "kg COD/m3", decimal_places=4),
        raw("removed_cod", "COD removed (measured)", "kg COD"),
        raw("sludge_cod", "COD removed as sludge", "kg COD"),
        calculated(
            "cod_removed",
            "COD removed",
            "kg COD",
            families.wastewater_cod_removed,
            inputs=("removed_cod", "wastewater_volume", "inlet_cod", "outlet_cod"),
            clamp=NON_NEGATIVE,
            kind=Q,
        ),
        calculated(
            "ch4_emission",
            "CH4 emission",
            "tCH4",
            families.wastewater_ch4,
            inputs=("cod_removed", "sludge_cod"),
            constants=("max_ch4_capacity", "mcf"),
            clamp=NON_NEGATIVE,
        ),
    ),
    required_constants=("mcf",),
    constant_defaults={"max_ch4_capacity": METHANE_PRODUCING_CAPACITY},
    primary_indicator="ch4_emission",
)

GAS_PRODUCT = EntitySchema(
    type_tag=EntityTypeTag.GAS_PRODUCT.value,
    label="Fluorinated gas production",
    indicators=(
        raw("production", "Production", "t"),
        calculated(
            "gas_emission",
            "By-product gas emitted",
            "t",
            families.by_product_gas,
            inputs=("production",),
            constants=("emission_rate",),
        ),
        calculated(
            "co2e_emission",
            "CO2-equivalent emission",
            "tCO2e",
            families.gas_co2e,
            inputs=("gas_emission",),
            constants=("gwp",),
        ),
    ),
    required_constants=("emission_rate", "gwp"),
    primary_indicator="co2e_emission",
)

REFRIGERANT = EntitySchema(
    type_tag=EntityTypeTag.REFRIGERANT_GAS.value,
    label="Gas in electrical and refrigeration equipment",
    indicators=(
        raw("initial_stock", "Opening stock", "t", decimal_places=4),
        raw("purchased", "Purchased", "t", decimal_places=4),
        raw("final_stock", "Closing stock", "t", decimal_places=4),
        raw("measured_charge", "Charged (measured)", "t", decimal_places=4),
        raw("container_mass_before", "Container mass before filling", "t", decimal_places=4),
        raw("container_mass_after", "Container mass after filling", "t", decimal_places=4),
        raw("fill_count", "Number of fills", "", decimal_places=0),
        calculated(
            "charged_amount",
            "Charged into equipment",
            "t",
            families.refrigerant_charged,
            inputs=("measured_charge", "container_mass_before", "container_mass_after", "fill_count"),
            constants=("leak_mol_per_fill", "molar_mass"),
            clamp=NON_NEGATIVE,
            kind=Q,
        ),
        calculated(
            "leaked_gas",
            "Gas leaked",
            "t",
            families.refrigerant_leaked,
            inputs=("initial_stock", "purchased", "final_stock", "charged_amount"),
            clamp=NON_NEGATIVE,
        ),
        calculated(
            "co2e_emission",
            "CO2-equivalent emission",
            "tCO2e",
            families.refrigerant_co2e,
            inputs=("leaked_gas",),
            constants=("gwp",),
            clamp=NON_NEGATIVE,
        ),
    ),
    required_constants=("gwp", "molar_mass"),
    constant_defaults={"leak_mol_per_fill": REFRIGERANT_LEAK_MOL_PER_FILL},
    primary_indicator="co2e_emission",
)

SHIELDING_GAS = EntitySchema(
    type_tag=EntityTypeTag.SHIELDING_GAS.value,
    label="Welding shielding gas",
    indicators=(
        raw("net_usage", "Net usage", "t", decimal_places=4),
        raw("co2_volume_fraction", "CO2 volume fraction", "%", PCT),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.shielding_gas_co2,
            inputs=("net_usage", "co2_volume_fraction"),
            constants=("mixture_molar_mass",),
            clamp=NON_NEGATIVE,
        ),
    ),
    required_constants=("mixture_molar_mass",),
    primary_indicator="co2_emission",
)

PURCHASED_CO2 = EntitySchema(
    type_tag=EntityTypeTag.PURCHASED_CO2.value,
    label="Purchased CO2 as feedstock",
    indicators=(
        raw("amount", "Purchased CO2", "t"),
        raw("loss_ratio", "Loss ratio", "%", PCT),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.purchased_co2_loss,
            inputs=("amount", "loss_ratio"),
        ),
    ),
    primary_indicator="co2_emission",
)

NITRIC_ACID = EntitySchema(
    type_tag=EntityTypeTag.NITRIC_ACID_LINE.value,
    label="Nitric acid production",
    indicators=(
        raw("production", "Nitric acid output", "t"),
        raw("n2o_factor", "N2O generation factor", "tN2O/t", FACTOR, decimal_places=4),
        raw("removal_efficiency", "N2O removal efficiency", "%", PCT, default=0.0),
        raw("abatement_usage", "Abatement usage rate", "%", PCT, default=100.0),
        calculated(
            "n2o_emission",
            "N2O emission",
            "tN2O",
            families.nitric_acid_n2o,
            inputs=("production", "n2o_factor", "removal_efficiency", "abatement_usage"),
            clamp=NON_NEGATIVE,
        ),
    ),
    primary_indicator="n2o_emission",
)

PROCESS_MATERIAL = EntitySchema(
    type_tag=EntityTypeTag.PROCESS_MATERIAL.value,
    label="Process material",
    indicators=(
        raw("quantity", "Quantity", "t"),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.process_material_co2,
            inputs=("quantity",),
            constants=("emission_factor",),
        ),
    ),
    required_constants=("emission_factor",),
    primary_indicator="co2_emission",
)

ELECTRICITY_HEAT = EntitySchema(
    type_tag=EntityTypeTag.ELECTRICITY_HEAT.value,
    label="Purchased and exported electricity and heat",
    indicators=(
        raw("purchased_electricity", "Purchased electricity", "MWh"),
        raw("exported_electricity", "Exported electricity", "MWh"),
        raw("purchased_heat", "Purchased heat", "GJ"),
        raw("exported_heat", "Exported heat", "GJ"),
        calculated(
            "net_electricity",
            "Net purchased electricity",
            "MWh",
            families.net_electricity,
            inputs=("purchased_electricity", "exported_electricity"),
            kind=Q,
        ),
        calculated(
            "net_heat",
            "Net purchased heat",
            "GJ",
            families.net_heat,
            inputs=("purchased_heat", "exported_heat"),
            kind=Q,
        ),
        calculated(
            "electricity_co2",
            "CO2 from net electricity",
            "tCO2",
            families.electricity_co2,
            inputs=("net_electricity",),
            constants=("grid_factor",),
        ),
        calculated(
            "heat_co2",
            "CO2 from net heat",
            "tCO2",
            families.heat_co2,
            inputs=("net_heat",),
            constants=("heat_factor",),
        ),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.energy_co2,
            inputs=("electricity_co2", "heat_co2"),
        ),
    ),
    required_constants=("grid_factor",),
    constant_defaults={"heat_factor": DEFAULT_HEAT_EMISSION_FACTOR},
    primary_indicator="co2_emission",
)

CARBON_ANODE = EntitySchema(
    type_tag=EntityTypeTag.CARBON_ANODE.value,
    label="Carbon anode consumption",
    indicators=(
        raw("aluminum_production", "Liquid aluminium output", "t"),
        raw("carbon_anode_rate", "Net anode consumption", "tC/tAl", FACTOR, default=CARBON_ANODE_RATE, decimal_places=3),
        raw("sulfur_content", "Anode sulfur content", "%", PCT, default=ANODE_SULFUR_CONTENT),
        raw("ash_content", "Anode ash content", "%", PCT, default=ANODE_ASH_CONTENT),
        calculated(
            "emission_factor",
            "CO2 per tonne of aluminium",
            "tCO2/tAl",
            families.carbon_anode_factor,
            inputs=("carbon_anode_rate", "sulfur_content", "ash_content"),
            clamp=NON_NEGATIVE,
            kind=FACTOR,
        ),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.carbon_anode_co2,
            inputs=("aluminum_production", "emission_factor"),
        ),
    ),
    primary_indicator="co2_emission",
)

ANODE_EFFECT = EntitySchema(
    type_tag=EntityTypeTag.ANODE_EFFECT.value,
    label="Anode effect PFC emission",
    indicators=(
        raw("aluminum_production", "Liquid aluminium output", "t"),
        raw("anode_effect_duration", "Anode effect duration", "min/cell-day", FACTOR, default=0.0, decimal_places=4),
        raw("cf4_factor", "CF4 emission factor", "kgCF4/tAl", FACTOR, default=CF4_EMISSION_FACTOR, decimal_places=4),
        raw("c2f6_factor", "C2F6 emission factor", "kgC2F6/tAl", FACTOR, default=C2F6_EMISSION_FACTOR, decimal_places=5),
        calculated(
            "effective_cf4_factor",
            "CF4 emission factor applied",
            "kgCF4/tAl",
            families.anode_effect_cf4_factor,
            inputs=("anode_effect_duration", "cf4_factor"),
            constants=("cf4_duration_slope",),
            kind=FACTOR,
        ),
        calculated(
            "effective_c2f6_factor",
            "C2F6 emission factor applied",
            "kgC2F6/tAl",
            families.anode_effect_c2f6_factor,
            inputs=("anode_effect_duration", "c2f6_factor", "effective_cf4_factor"),
            constants=("c2f6_to_cf4_ratio",),
            kind=FACTOR,
        ),
        calculated(
            "co2e_emission",
            "PFC emission",
            "tCO2e",
            families.anode_effect_co2e,
            inputs=("aluminum_production", "effective_cf4_factor", "effective_c2f6_factor"),
            constants=("cf4_gwp", "c2f6_gwp"),
        ),
    ),
    constant_defaults={
        "cf4_duration_slope": CF4_DURATION_SLOPE,
        "c2f6_to_cf4_ratio": C2F6_TO_CF4_RATIO,
        "cf4_gwp": GWP["CF4"],
        "c2f6_gwp": GWP["C2F6"],
    },
    primary_indicator="co2e_emission",
)

OXALATE = EntitySchema(
    type_tag=EntityTypeTag.OXALATE_PROCESS.value,
    label="Oxalic acid use",
    indicators=(
        raw("quantity", "Oxalic acid used", "t"),
        raw("purity", "Purity", "%", PCT, default=99.6),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.oxalate_co2,
            inputs=("quantity", "purity"),
            constants=("oxalate_co2_factor",),
        ),
    ),
    constant_defaults={"oxalate_co2_factor": OXALATE_CO2_FACTOR},
    primary_indicator="co2_emission",
)

UREA_TAIL_GAS = EntitySchema(
    type_tag=EntityTypeTag.UREA_TAIL_GAS.value,
    label="Urea exhaust after-treatment",
    indicators=(
        raw("urea_amount", "Urea solution used", "kg"),
        raw("urea_purity", "Urea mass fraction", "%", PCT, default=99.6),
        calculated(
            "co2_emission",
            "CO2 emission",
            "tCO2",
            families.urea_tail_gas_co2,
            inputs=("urea_amount", "urea_purity"),
            decimal_places=6,
        ),
    ),
    primary_indicator="co2_emission",
)

VEHICLE_FLEET = EntitySchema(
    type_tag=EntityTypeTag.VEHICLE_FLEET.value,
    label="Road vehicles (CH4 and N2O)",
    indicators=(
        raw("vehicle_count", "Vehicles", "", decimal_places=0),
        raw("distance", "Distance per vehicle", "km"),
        calculated(
            "ch4_emission",
            "CH4 emission",
            "tCH4",
            families.vehicle_ch4,
            inputs=("vehicle_count", "distance"),
            constants=("ch4_factor",),
            decimal_places=9,
        ),
        calculated(
            "n2o_emission",
            "N2O emission",
            "tN2O",
            families.vehicle_n2o,
            inputs=("vehicle_count", "distance"),
            constants=("n2o_factor",),
            decimal_places=9,
        ),
        calculated(
            "co2e_emission",
            "CH4 and N2O emission",
            "tCO2e",
            families.vehicle_co2e,
            inputs=("ch4_emission", "n2o_emission"),
            constants=("ch4_gwp", "n2o_gwp"),
            decimal_places=9,
        ),
    ),
    required_constants=("ch4_factor", "n2o_factor"),
    constant_defaults={"ch4_gwp": TRANSPORT_GWP["CH4"], "n2o_gwp": TRANSPORT_GWP["N2O"]},
    primary_indicator="co2e_emission",
)

OTHER_SOURCE = EntitySchema(
    type_tag=EntityTypeTag.OTHER_SOURCE.value,
    label="Other significant emission source",
    indicators=(raw("emission", "Emission", "tCO2e"),),
    primary_indicator="emission",
)


@lru_cache(maxsize=1)
def default_registry() -> SchemaRegistry:
    """Schemas for every `EntityTypeTag`; fuel outputs share the fuel schema."""
    registry = SchemaRegistry(
        [
            PRODUCTION_LINE,
            CARBONATE,
            CARBONATION_PRODUCT,
            CO2_RECOVERY,
            METHANE_RECOVERY,
            WASTEWATER,
            GAS_PRODUCT,
            REFRIGERANT,
            SHIELDING_GAS,
            PURCHASED_CO2,
            NITRIC_ACID,
            PROCESS_MATERIAL,
            ELECTRICITY_HEAT,
            CARBON_ANODE,
            ANODE_EFFECT,
            OXALATE,
            UREA_TAIL_GAS,
            VEHICLE_FLEET,
            OTHER_SOURCE,
        ]
    )
    registry.register(FUEL, aliases=(EntityTypeTag.FUEL_OUTPUT.value,))
    return registry
