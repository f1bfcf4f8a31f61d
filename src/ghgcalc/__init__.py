# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
GHG Calc - Greenhouse-Gas Inventory Calculation Engine

Building blocks for industry-specific emission inventories: monthly indicator
series on a hierarchy of entities, declared formulas for derived indicators,
and signed, factor-weighted roll-ups into a single CO2-equivalent total.

Key Entry Points:
- ghgcalc.inventory.EmissionInventory - Edit flow, totals and notification
- ghgcalc.industries - Ready-made category/rule presets per industry
- ghgcalc.reference - Read-only reference catalog (fuels, gases, carbonates)
- ghgcalc.reporting - pandas views of series and summaries

Example Usage:
    ```python
    from ghgcalc.industries import get_preset
    from ghgcalc.inventory import EmissionInventory

    inventory = EmissionInventory.from_preset(
        get_preset("other"), on_total_changed=print
    )
    line = inventory.add_group("Line 1")
    row = inventory.add_child(line, "carbonate:CaCO3")
    inventory.set_value(row, "consumption", 1, "1000")
    inventory.set_value(row, "purity", 1, "95")
    ```
"""

# Add a NullHandler so applications that don't configure logging see no
# "No handlers could be found" warnings.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "aggregation",
    "core",
    "formulas",
    "industries",
    "inventory",
    "notifier",
    "reference",
    "reporting",
    "snapshot",
]


_LAZY_MODULES = {
    "aggregation": "ghgcalc.aggregation",
    "core": "ghgcalc.core",
    "formulas": "ghgcalc.formulas",
    "industries": "ghgcalc.industries",
    "inventory": "ghgcalc.inventory",
    "notifier": "ghgcalc.notifier",
    "reference": "ghgcalc.reference",
    "reporting": "ghgcalc.reporting",
    "snapshot": "ghgcalc.snapshot",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'ghgcalc' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
