# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Formula families with inputs already in formula units (percentages as fractions).
"""

from __future__ import annotations

import pytest

from ghgcalc.formulas import families


def test_fuel_combustion_uses_ncv_times_carbon_content():
    inputs = {
        "consumption": 100.0,
        "received_base_carbon": 0.0,
        "carbon_per_unit": 22.867 * 0.02749,
        "oxidation_rate": 0.98,
    }
    expected = 100.0 * 22.867 * 0.02749 * 0.98 * 44 / 12
    assert families.fuel_combustion_co2(inputs, {}) == pytest.approx(expected)


def test_fuel_combustion_prefers_measured_carbon():
    inputs = {
        "consumption": 10.0,
        "received_base_carbon": 0.8,
        "carbon_per_unit": 0.5,
        "oxidation_rate": 1.0,
    }
    assert families.fuel_combustion_co2(inputs, {}) == pytest.approx(10.0 * 0.8 * 44 / 12)


def test_carbonate_decomposition():
    inputs = {"consumption": 1000.0, "purity": 0.95}
    assert families.carbonate_decomposition_co2(inputs, {"emission_factor": 0.4397}) == pytest.approx(417.715)


def test_recovered_co2():
    inputs = {
        "external_supply_volume": 100.0,
        "external_supply_concentration": 0.5,
        "raw_material_volume": 50.0,
        "raw_material_concentration": 0.2,
    }
    assert families.recovered_co2(inputs, {"co2_density": 19.77}) == pytest.approx(1186.2)


def test_methane_recovery_components():
    constants = {"ch4_density": 7.17}
    assert families.self_use_ch4(
        {"self_use_volume": 10000.0, "self_use_concentration": 0.5, "self_use_oxidation_rate": 0.99},
        constants,
    ) == pytest.approx(7.17 * 0.5 * 0.99)
    assert families.external_supply_ch4(
        {"external_supply_volume": 20000.0, "external_supply_concentration": 0.25}, constants
    ) == pytest.approx(7.17 * 2 * 0.25)
    assert families.flare_destroyed_ch4(
        {"flare_volume": 10000.0, "flare_concentration": 1.0, "flare_destruction_efficiency": 0.98},
        constants,
    ) == pytest.approx(7.17 * 0.98)


class TestWastewater:
    def test_measured_removal_wins(self):
        inputs = {"removed_cod": 500.0, "wastewater_volume": 1000.0, "inlet_cod": 5.0, "outlet_cod": 1.0}
        assert families.wastewater_cod_removed(inputs, {}) == 500.0

    def test_removal_from_concentrations(self):
        inputs = {"removed_cod": 0.0, "wastewater_volume": 1000.0, "inlet_cod": 5.0, "outlet_cod": 1.0}
        assert families.wastewater_cod_removed(inputs, {}) == pytest.approx(4000.0)

    def test_incomplete_concentrations_give_zero(self):
        inputs = {"removed_cod": 0.0, "wastewater_volume": 1000.0, "inlet_cod": 5.0, "outlet_cod": 0.0}
        assert families.wastewater_cod_removed(inputs, {}) == 0.0

    def test_ch4(self):
        constants = {"max_ch4_capacity": 0.25, "mcf": 0.8}
        assert families.wastewater_ch4({"cod_removed": 4000.0, "sludge_cod": 0.0}, constants) == pytest.approx(0.8)
        assert families.wastewater_ch4({"cod_removed": 100.0, "sludge_cod": 500.0}, constants) < 0


class TestRefrigerant:
    def test_measured_charge_wins(self):
        inputs = {"measured_charge": 0.2, "container_mass_before": 5.0, "container_mass_after": 1.0, "fill_count": 3.0}
        assert families.refrigerant_charged(inputs, {"leak_mol_per_fill": 0.342, "molar_mass": 146.07}) == 0.2

    def test_charge_from_container_masses(self):
        inputs = {"measured_charge": 0.0, "container_mass_before": 5.0, "container_mass_after": 1.0, "fill_count": 10.0}
        residual = 10 * 0.342 * 146.07 / 1e6
        assert families.refrigerant_charged(
            inputs, {"leak_mol_per_fill": 0.342, "molar_mass": 146.07}
        ) == pytest.approx(4.0 - residual)

    def test_leak_balance(self):
        inputs = {"initial_stock": 1.0, "purchased": 0.5, "final_stock": 0.8, "charged_amount": 0.2}
        assert families.refrigerant_leaked(inputs, {}) == pytest.approx(0.5)


def test_shielding_gas_zero_molar_mass_is_zero():
    inputs = {"net_usage": 1.0, "co2_volume_fraction": 0.2}
    assert families.shielding_gas_co2(inputs, {"mixture_molar_mass": 0.0}) == 0.0
    assert families.shielding_gas_co2(inputs, {"mixture_molar_mass": 40.76}) == pytest.approx(0.2 * 44 / 40.76)


def test_nitric_acid_abatement():
    inputs = {"production": 1000.0, "n2o_factor": 0.0139, "removal_efficiency": 0.85, "abatement_usage": 1.0}
    assert families.nitric_acid_n2o(inputs, {}) == pytest.approx(1000 * 0.0139 * 0.15)


def test_net_energy_can_be_negative():
    inputs = {"purchased_electricity": 100.0, "exported_electricity": 150.0}
    assert families.net_electricity(inputs, {}) == -50.0
    assert families.electricity_co2({"net_electricity": -50.0}, {"grid_factor": 0.5}) == -25.0


def test_gas_production():
    gas = families.by_product_gas({"production": 1000.0}, {"emission_rate": 0.005})
    assert gas == pytest.approx(5.0)
    assert families.gas_co2e({"gas_emission": gas}, {"gwp": 650}) == pytest.approx(3250.0)


def test_oxalate_and_urea_tail_gas():
    assert families.oxalate_co2(
        {"quantity": 100.0, "purity": 0.996}, {"oxalate_co2_factor": 0.349}
    ) == pytest.approx(34.7604)
    urea = families.urea_tail_gas_co2({"urea_amount": 1000.0, "urea_purity": 0.996}, {})
    assert urea == pytest.approx(1000 * 0.2 * 0.996 * 44 / 12 / 1000)


class TestAluminium:
    def test_carbon_anode(self):
        inputs = {"carbon_anode_rate": 0.411, "sulfur_content": 0.02, "ash_content": 0.004}
        factor = families.carbon_anode_factor(inputs, {})
        assert factor == pytest.approx(0.411 * 0.976 * 44 / 12)
        co2 = families.carbon_anode_co2({"aluminum_production": 100.0, "emission_factor": factor}, {})
        assert co2 == pytest.approx(100 * factor)

    def test_anode_effect_duration_wins(self):
        constants = {"cf4_duration_slope": 0.143, "c2f6_to_cf4_ratio": 0.1}
        inputs = {"anode_effect_duration": 0.5, "cf4_factor": 0.034, "c2f6_factor": 0.0034}
        cf4 = families.anode_effect_cf4_factor(inputs, constants)
        assert cf4 == pytest.approx(0.0715)
        c2f6 = families.anode_effect_c2f6_factor({**inputs, "effective_cf4_factor": cf4}, constants)
        assert c2f6 == pytest.approx(0.00715)

    def test_anode_effect_entered_factors(self):
        constants = {"cf4_duration_slope": 0.143, "c2f6_to_cf4_ratio": 0.1}
        inputs = {"anode_effect_duration": 0.0, "cf4_factor": 0.034, "c2f6_factor": 0.0034}
        assert families.anode_effect_cf4_factor(inputs, constants) == 0.034
        assert families.anode_effect_c2f6_factor(
            {**inputs, "effective_cf4_factor": 0.034}, constants
        ) == 0.0034

    def test_pfc_co2e(self):
        inputs = {
            "aluminum_production": 1000.0,
            "effective_cf4_factor": 0.034,
            "effective_c2f6_factor": 0.0034,
        }
        co2e = families.anode_effect_co2e(inputs, {"cf4_gwp": 6630, "c2f6_gwp": 11100})
        assert co2e == pytest.approx(263.16)


def test_vehicle_ch4_n2o():
    inputs = {"vehicle_count": 10.0, "distance": 10000.0}
    constants = {"ch4_factor": 175, "n2o_factor": 30, "ch4_gwp": 28, "n2o_gwp": 273}
    ch4 = families.vehicle_ch4(inputs, constants)
    n2o = families.vehicle_n2o(inputs, constants)
    assert ch4 == pytest.approx(0.0175)
    assert n2o == pytest.approx(0.003)
    assert families.vehicle_co2e({"ch4_emission": ch4, "n2o_emission": n2o}, constants) == pytest.approx(1.309)
