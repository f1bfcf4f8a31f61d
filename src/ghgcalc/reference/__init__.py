# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Read-only reference data: templates, equipment and the default tables.
"""

from .catalog import Equipment, ReferenceCatalog, Template
from .tables import (
    CARBON_TO_CO2,
    CH4_DENSITY,
    CO2_DENSITY,
    CO2_MOLAR_MASS,
    DEFAULT_HEAT_EMISSION_FACTOR,
    GWP,
    METHANE_PRODUCING_CAPACITY,
    MOLAR_MASS,
    REFRIGERANT_LEAK_MOL_PER_FILL,
    default_catalog,
    mixture_molar_mass,
)

__all__ = [
    "Equipment",
    "ReferenceCatalog",
    "Template",
    "CARBON_TO_CO2",
    "CH4_DENSITY",
    "CO2_DENSITY",
    "CO2_MOLAR_MASS",
    "DEFAULT_HEAT_EMISSION_FACTOR",
    "GWP",
    "METHANE_PRODUCING_CAPACITY",
    "MOLAR_MASS",
    "REFRIGERANT_LEAK_MOL_PER_FILL",
    "default_catalog",
    "mixture_molar_mass",
]
