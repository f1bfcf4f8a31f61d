# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Formula families.

Every function here is pure: it reads the current-month values of the
indicators named in its `Formula.inputs` and the entity constants named in
`Formula.constants`, and returns a float. Inputs arrive in formula units, so
percentage indicators are already fractions. Clamping is declared on the
indicator definition, not applied here; the only guard inside a family is
`safe_divide` for denominators that can legitimately be zero.

Units follow the accounting guidelines the tables come from: masses in t,
gas volumes in 10^4 Nm3 (recovery) or Nm3 (methane recovery), COD in kg.
"""

from __future__ import annotations

from typing import Mapping

from ..core.primitives.numeric import safe_divide
from ..reference.tables import (
    CARBON_TO_CO2,
    CO2_MOLAR_MASS,
    MG_TO_TONNE,
    UREA_CARBON_FRACTION,
)

Values = Mapping[str, float]


# --- Fossil fuel combustion ----------------------------------------------


def carbon_per_unit(inputs: Values, constants: Values) -> float:
    """Carbon content per unit of fuel (tC/t or tC/10^4 Nm3) = NCV x carbon per GJ."""
    return inputs["calorific_value"] * inputs["carbon_content"]


def fuel_combustion_co2(inputs: Values, constants: Values) -> float:
    """
    CO2 from burning a fuel.

    A measured received-base carbon content takes precedence over the
    NCV x carbon-per-GJ product when it is entered (non-zero).

    Formula:
        CO2 = consumption x carbon per unit x oxidation rate x 44/12
    """
    measured = inputs["received_base_carbon"]
    carbon = measured if measured > 0 else inputs["carbon_per_unit"]
    return inputs["consumption"] * carbon * inputs["oxidation_rate"] * CARBON_TO_CO2


# --- Carbonates ------------------------------------------------------------


def carbonate_decomposition_co2(inputs: Values, constants: Values) -> float:
    """CO2 = consumption x purity x emission factor."""
    return inputs["consumption"] * inputs["purity"] * constants["emission_factor"]


def carbonation_absorbed_co2(inputs: Values, constants: Values) -> float:
    """CO2 bound into a carbonate product = product mass x carbonate mass fraction x EF."""
    return (
        inputs["product_mass"]
        * inputs["carbonate_mass_fraction"]
        * constants["emission_factor"]
    )


# --- Recovery --------------------------------------------------------------


def recovered_co2(inputs: Values, constants: Values) -> float:
    """
    CO2 recovered as product for external supply or used as feedstock.

    Formula:
        (external volume x concentration + feedstock volume x concentration)
        x CO2 density (t / 10^4 Nm3)
    """
    volume = (
        inputs["external_supply_volume"] * inputs["external_supply_concentration"]
        + inputs["raw_material_volume"] * inputs["raw_material_concentration"]
    )
    return volume * constants["co2_density"]


def _ch4_mass(volume: float, *fractions: float, density: float) -> float:
    # Nm3 -> 10^4 Nm3 before applying the t / 10^4 Nm3 density
    mass = volume * density / 1e4
    for fraction in fractions:
        mass *= fraction
    return mass


def self_use_ch4(inputs: Values, constants: Values) -> float:
    return _ch4_mass(
        inputs["self_use_volume"],
        inputs["self_use_concentration"],
        inputs["self_use_oxidation_rate"],
        density=constants["ch4_density"],
    )


def external_supply_ch4(inputs: Values, constants: Values) -> float:
    return _ch4_mass(
        inputs["external_supply_volume"],
        inputs["external_supply_concentration"],
        density=constants["ch4_density"],
    )


def flare_destroyed_ch4(inputs: Values, constants: Values) -> float:
    return _ch4_mass(
        inputs["flare_volume"],
        inputs["flare_concentration"],
        inputs["flare_destruction_efficiency"],
        density=constants["ch4_density"],
    )


def total_recovered_ch4(inputs: Values, constants: Values) -> float:
    return (
        inputs["self_use_ch4"]
        + inputs["external_supply_ch4"]
        + inputs["flare_destroyed_ch4"]
    )


# --- Wastewater --------------------------------------------------------------


def wastewater_cod_removed(inputs: Values, constants: Values) -> float:
    """
    COD removed by treatment (kg).

    An entered removal amount wins; otherwise it is derived from the
    wastewater volume (m3) and inlet/outlet concentrations (kg/m3) when all
    three are known.
    """
    removed = inputs["removed_cod"]
    if removed > 0:
        return removed
    volume = inputs["wastewater_volume"]
    inlet = inputs["inlet_cod"]
    outlet = inputs["outlet_cod"]
    if volume > 0 and inlet > 0 and outlet > 0:
        return volume * (inlet - outlet)
    return 0.0


def wastewater_ch4(inputs: Values, constants: Values) -> float:
    """CH4 (t) = (COD removed - COD in sludge) x Bo x MCF / 1000."""
    degradable = inputs["cod_removed"] - inputs["sludge_cod"]
    return degradable * constants["max_ch4_capacity"] * constants["mcf"] / 1000.0


# --- Fluorinated gases -----------------------------------------------------------


def by_product_gas(inputs: Values, constants: Values) -> float:
    """Gas emitted while producing a fluorinated gas = production x emission rate."""
    return inputs["production"] * constants["emission_rate"]


def gas_co2e(inputs: Values, constants: Values) -> float:
    return inputs["gas_emission"] * constants["gwp"]


def refrigerant_charged(inputs: Values, constants: Values) -> float:
    """
    Gas charged into equipment (t).

    A measured charge wins; otherwise it is the container mass difference less
    the gas left in the hose after each fill (mol per fill x molar mass).
    """
    measured = inputs["measured_charge"]
    if measured > 0:
        return measured
    residual = (
        inputs["fill_count"] * constants["leak_mol_per_fill"] * constants["molar_mass"]
    ) / 1e6
    return inputs["container_mass_before"] - inputs["container_mass_after"] - residual


def refrigerant_leaked(inputs: Values, constants: Values) -> float:
    """Stock balance: opening stock + purchased - closing stock - charged."""
    return (
        inputs["initial_stock"]
        + inputs["purchased"]
        - inputs["final_stock"]
        - inputs["charged_amount"]
    )


def refrigerant_co2e(inputs: Values, constants: Values) -> float:
    return inputs["leaked_gas"] * constants["gwp"]


def shielding_gas_co2(inputs: Values, constants: Values) -> float:
    """
    CO2 released from welding shielding gas.

    Formula:
        net usage x CO2 volume fraction x 44 / mixture molar mass

    A mixture molar mass of zero (no factor supplied) yields 0.
    """
    return safe_divide(
        inputs["net_usage"] * inputs["co2_volume_fraction"] * CO2_MOLAR_MASS,
        constants["mixture_molar_mass"],
    )


# --- Chemical processes -----------------------------------------------------------


def purchased_co2_loss(inputs: Values, constants: Values) -> float:
    return inputs["amount"] * inputs["loss_ratio"]


def nitric_acid_n2o(inputs: Values, constants: Values) -> float:
    """N2O = production x generation factor x (1 - removal efficiency x usage rate)."""
    abated = inputs["removal_efficiency"] * inputs["abatement_usage"]
    return inputs["production"] * inputs["n2o_factor"] * (1.0 - abated)


def process_material_co2(inputs: Values, constants: Values) -> float:
    return inputs["quantity"] * constants["emission_factor"]


def oxalate_co2(inputs: Values, constants: Values) -> float:
    """CO2 from oxalic acid = quantity x 0.349 x purity."""
    return inputs["quantity"] * constants["oxalate_co2_factor"] * inputs["purity"]


def urea_tail_gas_co2(inputs: Values, constants: Values) -> float:
    """
    CO2 released by urea-based exhaust after-treatment (t).

    Formula:
        urea used (kg) x 12/60 x purity x 44/12 x 10^-3
    """
    carbon = inputs["urea_amount"] * UREA_CARBON_FRACTION * inputs["urea_purity"]
    return carbon * CARBON_TO_CO2 / 1000.0


# --- Aluminium smelting -----------------------------------------------------------


def carbon_anode_factor(inputs: Values, constants: Values) -> float:
    """
    CO2 per tonne of aluminium from anode consumption.

    Formula:
        net anode consumption x (1 - sulfur - ash) x 44/12
    """
    carbon_fraction = 1.0 - inputs["sulfur_content"] - inputs["ash_content"]
    return inputs["carbon_anode_rate"] * carbon_fraction * CARBON_TO_CO2


def carbon_anode_co2(inputs: Values, constants: Values) -> float:
    return inputs["aluminum_production"] * inputs["emission_factor"]


def anode_effect_cf4_factor(inputs: Values, constants: Values) -> float:
    """
    CF4 emission factor (kg/t Al).

    A recorded anode-effect duration wins: slope x duration. Otherwise the
    entered factor is used.
    """
    duration = inputs["anode_effect_duration"]
    if duration > 0:
        return constants["cf4_duration_slope"] * duration
    return inputs["cf4_factor"]


def anode_effect_c2f6_factor(inputs: Values, constants: Values) -> float:
    """C2F6 emission factor (kg/t Al); a fixed share of CF4 when duration is known."""
    if inputs["anode_effect_duration"] > 0:
        return constants["c2f6_to_cf4_ratio"] * inputs["effective_cf4_factor"]
    return inputs["c2f6_factor"]


def anode_effect_co2e(inputs: Values, constants: Values) -> float:
    """PFC emission (t CO2e) = production x (EF_CF4 x GWP_CF4 + EF_C2F6 x GWP_C2F6) / 1000."""
    per_tonne = (
        inputs["effective_cf4_factor"] * constants["cf4_gwp"]
        + inputs["effective_c2f6_factor"] * constants["c2f6_gwp"]
    )
    return inputs["aluminum_production"] * per_tonne / 1000.0


# --- Road vehicles -------------------------------------------------------------------


def vehicle_ch4(inputs: Values, constants: Values) -> float:
    """CH4 (t) = vehicles x distance per vehicle (km) x factor (mg/km) x 10^-9."""
    distance = inputs["vehicle_count"] * inputs["distance"]
    return distance * constants["ch4_factor"] * MG_TO_TONNE


def vehicle_n2o(inputs: Values, constants: Values) -> float:
    distance = inputs["vehicle_count"] * inputs["distance"]
    return distance * constants["n2o_factor"] * MG_TO_TONNE


def vehicle_co2e(inputs: Values, constants: Values) -> float:
    return (
        inputs["ch4_emission"] * constants["ch4_gwp"]
        + inputs["n2o_emission"] * constants["n2o_gwp"]
    )


# --- Purchased and exported energy ------------------------------------------------


def net_electricity(inputs: Values, constants: Values) -> float:
    return inputs["purchased_electricity"] - inputs["exported_electricity"]


def net_heat(inputs: Values, constants: Values) -> float:
    return inputs["purchased_heat"] - inputs["exported_heat"]


def electricity_co2(inputs: Values, constants: Values) -> float:
    return inputs["net_electricity"] * constants["grid_factor"]


def heat_co2(inputs: Values, constants: Values) -> float:
    return inputs["net_heat"] * constants["heat_factor"]


def energy_co2(inputs: Values, constants: Values) -> float:
    return inputs["electricity_co2"] + inputs["heat_co2"]
