# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end edit flows through `EmissionInventory`.
"""

from __future__ import annotations

import pytest

from ghgcalc.core.primitives import EngineSettings, TemplateNotFoundError
from ghgcalc.inventory import EmissionInventory
from ghgcalc.reference import mixture_molar_mass

from ..conftest import TotalRecorder, create_inventory, fill_months


class TestReferenceScenarios:
    def test_co2_recovery(self, inventory: EmissionInventory, recorder: TotalRecorder):
        node = inventory.add_child(None, "co2-recovery:standard")
        inventory.set_value(node, "external_supply_volume", 1, 100)
        inventory.set_value(node, "external_supply_concentration", 1, 50)
        inventory.set_value(node, "raw_material_volume", 1, 50)
        inventory.set_value(node, "raw_material_concentration", 1, 20)

        assert inventory.value(node, "recovered_co2", 1) == pytest.approx(1186.2)
        assert inventory.category_totals()["co2_recovery"] == pytest.approx(1186.2)
        assert inventory.grand_total() == pytest.approx(-1186.2)
        assert recorder.last == pytest.approx(-1186.2)

    def test_carbonate_row(self, inventory: EmissionInventory, recorder: TotalRecorder):
        row = inventory.add_child(None, "carbonate:CaCO3")
        inventory.set_value(row, "consumption", 1, 1000)
        inventory.set_value(row, "purity", 1, 95)

        assert inventory.value(row, "co2_emission", 1) == pytest.approx(417.715)
        assert inventory.grand_total() == pytest.approx(417.715)
        assert recorder.totals == [0.0, pytest.approx(439.7), pytest.approx(417.715)]

    def test_wastewater_ch4_converted_once(self, inventory: EmissionInventory):
        stream = inventory.add_child(None, "wastewater:anaerobic-reactor")
        inventory.set_value(stream, "removed_cod", 1, 50000)

        assert inventory.value(stream, "ch4_emission", 1) == pytest.approx(10.0)
        assert inventory.category_totals()["wastewater_ch4"] == pytest.approx(10.0)
        assert inventory.grand_total() == pytest.approx(210.0)

    def test_methane_recovery_offsets_wastewater(self, inventory: EmissionInventory):
        stream = inventory.add_child(None, "wastewater:anaerobic-reactor")
        inventory.set_value(stream, "removed_cod", 1, 50000)
        recovery = inventory.add_child(None, "methane-recovery:standard")
        inventory.set_value(recovery, "flare_volume", 1, 10000)
        inventory.set_value(recovery, "flare_concentration", 1, 100)

        recovered = 10000 * 7.17 / 1e4 * 0.98
        assert inventory.category_totals()["methane_recovery"] == pytest.approx(recovered)
        assert inventory.grand_total() == pytest.approx((10.0 - recovered) * 21)

    def test_nitric_acid_with_nscr(self, recorder: TotalRecorder):
        inventory = create_inventory("chemical", recorder)
        line = inventory.add_child(None, "nitric:high-pressure")
        inventory.set_equipment(line, "abatement:nscr")
        inventory.set_value(line, "production", 1, 1000)

        assert inventory.value(line, "n2o_emission", 1) == pytest.approx(2.085)
        assert inventory.grand_total() == pytest.approx(2.085 * 310)

    def test_sf6_leak(self):
        inventory = create_inventory("power_grid")
        gas = inventory.add_child(None, "refrigerant:SF6")
        inventory.set_value(gas, "initial_stock", 1, 1.0)
        inventory.set_value(gas, "final_stock", 1, 0.5)

        assert inventory.value(gas, "leaked_gas", 1) == pytest.approx(0.5)
        assert inventory.grand_total() == pytest.approx(11750.0)

    def test_welding_shielding_gas(self):
        inventory = create_inventory("machinery")
        molar_mass = mixture_molar_mass({"Ar": 80, "CO2": 20})
        gas = inventory.add_custom_child(
            None, "shielding-gas", {"mixture_molar_mass": molar_mass}, name="Ar/CO2 80/20"
        )
        inventory.set_value(gas, "net_usage", 1, 10)
        inventory.set_value(gas, "co2_volume_fraction", 1, 20)

        expected = 10 * 0.2 * 44 / molar_mass
        assert inventory.grand_total() == pytest.approx(expected)

    def test_other_sources_and_electricity(self, inventory: EmissionInventory):
        other = inventory.add_custom_child(None, "other-source", name="Lab CO2")
        inventory.set_value(other, "emission", 1, 5)
        grid = inventory.add_child(None, "grid:national")
        inventory.set_value(grid, "purchased_electricity", 1, 100)
        inventory.set_value(grid, "exported_electricity", 1, 20)

        assert inventory.direct_total() == pytest.approx(5.0)
        assert inventory.grand_total() == pytest.approx(5.0 + 80 * 0.5366)


class TestIndustryScenarios:
    def test_aluminium_smelter(self, recorder: TotalRecorder):
        inventory = create_inventory("aluminum", recorder)
        potline = inventory.add_group("Potline 1")
        anode = inventory.add_child(potline, "carbon-anode:standard")
        inventory.set_value(anode, "aluminum_production", 1, 1000)
        pfc = inventory.add_child(potline, "anode-effect:standard")
        inventory.set_value(pfc, "aluminum_production", 1, 1000)
        inventory.set_value(pfc, "anode_effect_duration", 1, 0.5)

        factor = 0.411 * (1 - 0.02 - 0.004) * 44 / 12
        assert inventory.value(anode, "emission_factor", 1) == pytest.approx(factor)
        assert inventory.value(pfc, "effective_cf4_factor", 1) == pytest.approx(0.0715)
        assert inventory.value(pfc, "effective_c2f6_factor", 1) == pytest.approx(0.00715)
        assert inventory.category_totals()["anode_effect"] == pytest.approx(553.41)
        assert inventory.grand_total() == pytest.approx(1000 * factor + 553.41)
        assert recorder.last == inventory.grand_total()

    def test_anode_effect_default_factors(self):
        inventory = create_inventory("aluminum")
        pfc = inventory.add_child(None, "anode-effect:standard")
        inventory.set_value(pfc, "aluminum_production", 1, 1000)
        assert inventory.grand_total() == pytest.approx(263.16)

    def test_nonferrous_oxalate(self):
        inventory = create_inventory("nonferrous")
        oxalate = inventory.add_child(None, "oxalate:standard")
        inventory.set_value(oxalate, "quantity", 1, 100)

        assert inventory.value(oxalate, "purity", 1) == 99.6
        assert inventory.category_totals()["oxalate"] == pytest.approx(34.7604)
        assert inventory.grand_total() == pytest.approx(34.7604)

    def test_land_transportation_fleet(self):
        inventory = create_inventory("land_transportation")
        trucks = inventory.add_child(None, "vehicle:heavy-diesel:all")
        inventory.set_value(trucks, "vehicle_count", 1, 10)
        inventory.set_value(trucks, "distance", 1, 10000)
        urea = inventory.add_child(None, "urea-tail-gas:standard")
        inventory.set_value(urea, "urea_amount", 1, 1000)

        urea_co2 = 1000 * 0.2 * 0.996 * 44 / 12 / 1000
        assert inventory.value(trucks, "ch4_emission", 1) == pytest.approx(0.0175)
        assert inventory.value(trucks, "n2o_emission", 1) == pytest.approx(0.003)
        assert inventory.category_totals()["vehicle_ch4_n2o"] == pytest.approx(1.309)
        assert inventory.category_totals()["urea_tail_gas"] == pytest.approx(urea_co2)
        assert inventory.grand_total() == pytest.approx(1.309 + urea_co2)

    def test_paper_mill_wastewater(self):
        inventory = create_inventory("paper")
        stream = inventory.add_child(None, "wastewater:anaerobic-reactor")
        inventory.set_value(stream, "removed_cod", 1, 50000)
        assert inventory.grand_total() == pytest.approx(210.0)

    def test_coking_subtracts_fuel_products(self):
        inventory = create_inventory("coking")
        coal = inventory.add_child(None, "fuel:coke")
        inventory.set_value(coal, "consumption", 1, 10)
        gas = inventory.add_custom_child(None, "fuel-output", name="Coke oven gas")
        inventory.set_value(gas, "consumption", 1, 10)
        inventory.set_value(gas, "received_base_carbon", 1, 0.5)
        inventory.set_value(gas, "oxidation_rate", 1, 100)

        burned = inventory.value(coal, "co2_emission", 1)
        exported = 10 * 0.5 * 44 / 12
        assert inventory.category_totals()["fuel_output"] == pytest.approx(exported)
        assert inventory.grand_total() == pytest.approx(burned - exported)


class TestNotification:
    def test_add_edit_remove_restores_total_exactly(
        self, inventory: EmissionInventory, recorder: TotalRecorder
    ):
        line = inventory.add_group("Kiln")
        base = inventory.add_child(line, "carbonate:CaCO3")
        fill_months(inventory, base, "consumption", 123.456)
        before = inventory.grand_total()
        before_category = inventory.category_totals()["carbonate"]

        extra = inventory.add_custom_child(line, "carbonate-row", {"emission_factor": 0.1234})
        fill_months(inventory, extra, "consumption", 77.7)
        inventory.set_value(extra, "purity", 5, 33)
        assert inventory.grand_total() != before

        assert inventory.remove_child(extra) == [extra]
        assert inventory.grand_total() == before
        assert inventory.category_totals()["carbonate"] == before_category
        assert recorder.last == before

    def test_removal_is_idempotent(self, inventory: EmissionInventory, recorder: TotalRecorder):
        row = inventory.add_child(None, "carbonate:CaCO3")
        inventory.set_value(row, "consumption", 1, 10)
        inventory.remove_child(row)
        count = recorder.count

        assert inventory.remove_child(row) == []
        assert recorder.count == count

    def test_unchanged_value_does_not_notify(
        self, inventory: EmissionInventory, recorder: TotalRecorder
    ):
        row = inventory.add_child(None, "carbonate:CaCO3")
        inventory.set_value(row, "consumption", 1, 10)
        count = recorder.count

        assert inventory.set_value(row, "consumption", 1, "10") == []
        assert recorder.count == count

    def test_edit_without_total_change_does_not_notify(
        self, inventory: EmissionInventory, recorder: TotalRecorder
    ):
        row = inventory.add_child(None, "carbonate:CaCO3")
        count = recorder.count
        # No consumption yet, so purity changes the row but not the total
        assert inventory.set_value(row, "purity", 1, 90) == ["purity"]
        assert recorder.count == count

    def test_set_values_publishes_once(
        self, inventory: EmissionInventory, recorder: TotalRecorder
    ):
        row = inventory.add_child(None, "carbonate:CaCO3")
        count = recorder.count
        changed = inventory.set_values(row, "consumption", list(range(1, 13)))

        assert changed == ["consumption", "co2_emission"]
        assert recorder.count == count + 1
        assert inventory.yearly_total(row, "co2_emission") == pytest.approx(78 * 0.4397)

    def test_set_values_requires_twelve(self, inventory: EmissionInventory):
        row = inventory.add_child(None, "carbonate:CaCO3")
        with pytest.raises(ValueError):
            inventory.set_values(row, "consumption", [1, 2, 3])

    def test_edit_from_callback_rejected(self, inventory: EmissionInventory):
        row = inventory.add_child(None, "carbonate:CaCO3")

        def reentrant(total):
            inventory.set_value(row, "consumption", 2, total)

        inventory.subscribe(reentrant)
        with pytest.raises(RuntimeError):
            inventory.set_value(row, "consumption", 1, 10)

        # The inventory stays usable afterwards
        inventory.notifier.unsubscribe(reentrant)
        inventory.set_value(row, "consumption", 3, 10)
        assert inventory.value(row, "consumption", 3) == 10.0

    def test_tolerance_from_settings(self, recorder: TotalRecorder):
        settings = EngineSettings.model_validate({"notification": {"tolerance": 1.0}})
        inventory = create_inventory("other", recorder, settings=settings)
        row = inventory.add_child(None, "carbonate:CaCO3")
        inventory.set_value(row, "consumption", 1, 1)
        assert recorder.totals == [0.0]


class TestEdits:
    def test_equipment_overwrites_oxidation_rate(
        self, inventory: EmissionInventory, recorder: TotalRecorder
    ):
        fuel = inventory.add_child(None, "fuel:coke")
        inventory.set_value(fuel, "consumption", 1, 10)
        inventory.set_value(fuel, "oxidation_rate", 1, 50)
        count = recorder.count

        inventory.set_equipment(fuel, "combustion:coke-oven")

        assert inventory.series(fuel, "oxidation_rate").to_list() == [100.0] * 12
        assert recorder.count == count + 1
        assert inventory.set_equipment(fuel, "combustion:coke-oven") == []
        assert recorder.count == count + 1

    def test_percentage_clamped(self, inventory: EmissionInventory):
        row = inventory.add_child(None, "carbonate:CaCO3")
        inventory.set_value(row, "consumption", 1, 1000)
        inventory.set_value(row, "purity", 1, 150)
        assert inventory.value(row, "purity", 1) == 100.0
        assert inventory.value(row, "co2_emission", 1) == pytest.approx(439.7)

    def test_missing_factor_contributes_zero(self, inventory: EmissionInventory):
        row = inventory.add_custom_child(None, "carbonate-row", name="Unknown mineral")
        inventory.set_value(row, "consumption", 1, 1000)

        assert inventory.value(row, "co2_emission", 1) == 0.0
        assert inventory.grand_total() == 0.0
        assert [n.id for n in inventory.needs_factor()] == [row]

    def test_unknown_template_leaves_state_untouched(
        self, inventory: EmissionInventory, recorder: TotalRecorder
    ):
        with pytest.raises(TemplateNotFoundError):
            inventory.add_child(None, "fuel:unobtainium")
        assert len(inventory.arena) == 0
        assert recorder.count == 0

    def test_evidence_does_not_notify(
        self, inventory: EmissionInventory, recorder: TotalRecorder
    ):
        row = inventory.add_child(None, "carbonate:CaCO3")
        count = recorder.count
        inventory.set_data_source(row, "consumption", 1, "Invoice")
        inventory.attach_evidence(row, "consumption", 1, "file-9")

        record = inventory.record(row, "consumption", 1)
        assert (record.data_source, record.evidence) == ("Invoice", "file-9")
        assert recorder.count == count


class TestSnapshotRoundTrip:
    def test_json_round_trip(self, recorder: TotalRecorder):
        inventory = create_inventory("chemical")
        line = inventory.add_group("Ammonia unit")
        fuel = inventory.add_child(line, "fuel:natural-gas")
        fill_months(inventory, fuel, "consumption", 12.5)
        inventory.set_equipment(fuel, "combustion:gas-fired-burner")
        nitric = inventory.add_child(line, "nitric:dual-pressure")
        inventory.set_value(nitric, "production", 6, 800)
        inventory.add_custom_child(line, "process-material", name="Unlisted feedstock")

        restored = EmissionInventory.from_json(inventory.to_json(), on_total_changed=recorder)

        assert restored.preset_key == "chemical"
        assert restored.grand_total() == inventory.grand_total()
        assert restored.category_totals() == inventory.category_totals()
        assert recorder.totals == [inventory.grand_total()]
        assert restored.get(fuel).equipment_id == "combustion:gas-fired-burner"
        assert len(restored.needs_factor()) == 1

    def test_snapshot_without_preset(self):
        inventory = EmissionInventory.from_preset("other")
        snapshot = inventory.snapshot().model_copy(update={"preset_key": None})
        with pytest.raises(ValueError):
            EmissionInventory.from_snapshot(snapshot)
