# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
pandas views of an inventory.

Reports only read totals the engine already computed and round them for
display; they never perform emission calculations of their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import pandas as pd

from ..core.indicators.series import MONTHS
from ..core.primitives.settings import ReportingSettings

if TYPE_CHECKING:
    from ..inventory import EmissionInventory

MONTH_LABELS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

SUMMARY_COLUMNS = [
    "category",
    "label",
    "gas",
    "category_total",
    "conversion_factor",
    "sign",
    "co2e",
]


def _settings(
    inventory: "EmissionInventory", settings: Optional[ReportingSettings]
) -> ReportingSettings:
    return settings if settings is not None else inventory.settings.reporting


def _month_index(settings: ReportingSettings) -> pd.Index:
    if settings.month_labels:
        return pd.Index(list(MONTH_LABELS), name="month")
    return pd.Index(MONTHS, name="month")


def monthly_frame(
    inventory: "EmissionInventory",
    node_id: int,
    keys: Optional[List[str]] = None,
    settings: Optional[ReportingSettings] = None,
) -> pd.DataFrame:
    """
    Monthly values of one entity's indicators.

    Args:
        inventory: Inventory holding the entity
        node_id: Entity id
        keys: Indicator keys to include; defaults to all, in schema order
        settings: Rounding and month labelling; defaults to the inventory's

    Returns:
        DataFrame indexed by month with one column per indicator and a final
        "Total" row holding the yearly totals
    """
    settings = _settings(inventory, settings)
    node = inventory.get(node_id)
    schema = inventory.evaluator.schema_for(node.type_tag)
    keys = schema.keys if keys is None else keys

    frame = pd.DataFrame(
        {key: node.series_for(key).to_list() for key in keys},
        index=_month_index(settings),
        columns=keys,
    )
    totals = pd.DataFrame(
        [[inventory.yearly_total(node_id, key) for key in keys]],
        index=pd.Index(["Total"], name="month"),
        columns=keys,
    )
    return pd.concat([frame, totals]).round(settings.decimal_places)


def category_frame(
    inventory: "EmissionInventory", settings: Optional[ReportingSettings] = None
) -> pd.DataFrame:
    """Monthly category totals (rows: months, columns: category keys)."""
    settings = _settings(inventory, settings)
    frame = inventory.aggregation.monthly_category_totals(inventory.arena)
    frame.index = _month_index(settings)
    return frame.round(settings.decimal_places)


def summary_frame(
    inventory: "EmissionInventory", settings: Optional[ReportingSettings] = None
) -> pd.DataFrame:
    """
    Category summary table.

    One row per rule with the category's yearly total in its own gas units,
    the conversion factor, the sign and the signed CO2e contribution,
    followed by the direct total (without purchased electricity and heat)
    and the grand total.
    """
    settings = _settings(inventory, settings)
    engine = inventory.aggregation
    totals = inventory.category_totals()
    contributions = engine.contributions(totals)

    rows = []
    for rule in engine.rules:
        category = engine.categories[rule.category_key]
        rows.append(
            {
                "category": category.key,
                "label": category.label or category.key,
                "gas": category.gas,
                "category_total": totals[category.key],
                "conversion_factor": rule.conversion_factor,
                "sign": int(rule.sign),
                "co2e": contributions[category.key],
            }
        )
    for key, label, value in (
        ("direct_total", "Total excluding electricity and heat", inventory.direct_total()),
        ("grand_total", "Total", inventory.grand_total()),
    ):
        rows.append(
            {
                "category": key,
                "label": label,
                "gas": "CO2e",
                "category_total": None,
                "conversion_factor": None,
                "sign": None,
                "co2e": value,
            }
        )

    frame = pd.DataFrame(rows, columns=SUMMARY_COLUMNS).set_index("category")
    frame["co2e"] = frame["co2e"].round(settings.decimal_places)
    frame["category_total"] = frame["category_total"].astype(float).round(
        settings.decimal_places
    )
    return frame
