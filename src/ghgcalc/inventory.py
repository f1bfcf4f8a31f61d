# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Emission inventory: the edit flow end to end.

Every edit follows one direction only:

1. the arena writes the raw value (or performs the structural change),
2. the evaluator recomputes the affected entity's calculated indicators,
3. the aggregation engine recomputes category totals and the grand total,
4. the notifier publishes the grand total if it changed.

Subscribers are informed once per settled edit. An edit issued from inside a
subscriber would restart the flow while it is still publishing, so it is
rejected with RuntimeError.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Union

from .aggregation.engine import AggregationEngine
from .aggregation.rules import AggregationRule, CategoryDefinition
from .core.entities.arena import EntityArena
from .core.entities.node import EntityNode
from .core.indicators.schema import SchemaRegistry
from .core.indicators.series import MONTHS_PER_YEAR, MonthRecord, TimeSeries
from .core.primitives.settings import EngineSettings
from .formulas.evaluator import FormulaEvaluator
from .industries.presets import IndustryPreset, get_preset
from .notifier import ChangeNotifier, TotalCallback
from .reference.catalog import ReferenceCatalog
from .snapshot import InventorySnapshot, capture, restore

logger = logging.getLogger(__name__)


class EmissionInventory:
    """
    Facade wiring arena, evaluator, aggregation and notification.

    Example:
        ```python
        inventory = EmissionInventory.from_preset("other", on_total_changed=print)
        line = inventory.add_group("Kiln 1")             # first total: 0.0
        row = inventory.add_child(line, "carbonate:CaCO3")
        inventory.set_value(row, "consumption", 1, 1000)  # 439.7 (purity 100%)
        inventory.set_value(row, "purity", 1, 95)         # 417.715
        inventory.remove_child(line)                      # 0.0
        ```
    """

    def __init__(
        self,
        categories: Sequence[CategoryDefinition],
        rules: Sequence[AggregationRule],
        catalog: Optional[ReferenceCatalog] = None,
        registry: Optional[SchemaRegistry] = None,
        settings: Optional[EngineSettings] = None,
        on_total_changed: Optional[TotalCallback] = None,
        indirect_categories: Sequence[str] = (),
        preset_key: Optional[str] = None,
    ):
        self.settings = settings if settings is not None else EngineSettings()
        self.evaluator = FormulaEvaluator(registry, self.settings.calculation)
        self.arena = EntityArena(catalog, self.evaluator)
        self.aggregation = AggregationEngine(categories, rules, self.settings.calculation)
        self.notifier = ChangeNotifier(
            on_total_changed, tolerance=self.settings.notification.tolerance
        )
        unknown = sorted(set(indirect_categories) - set(self.aggregation.categories))
        if unknown:
            raise ValueError(f"Indirect categories not defined: {unknown}")
        self.indirect_categories = tuple(indirect_categories)
        self.preset_key = preset_key
        self._publishing = False

    @classmethod
    def from_preset(
        cls, preset: Union[str, IndustryPreset], **kwargs
    ) -> "EmissionInventory":
        """Build an inventory from an industry preset (or its key)."""
        if isinstance(preset, str):
            preset = get_preset(preset)
        return cls(
            categories=preset.categories,
            rules=preset.rules,
            indirect_categories=preset.indirect_categories,
            preset_key=preset.key,
            **kwargs,
        )

    # --- Edit flow --------------------------------------------------------

    @contextmanager
    def _edit(self) -> Iterator[None]:
        if self._publishing:
            raise RuntimeError(
                "Inventory edited from inside a total-changed callback; "
                "defer the edit until the notification returns"
            )
        yield

    def _settle(self) -> bool:
        total = self.grand_total()
        self._publishing = True
        try:
            return self.notifier.publish(total)
        finally:
            self._publishing = False

    def subscribe(self, callback: TotalCallback) -> None:
        self.notifier.subscribe(callback)

    def add_group(
        self, name: str, parent_id: Optional[int] = None, type_tag: Optional[str] = None
    ) -> int:
        with self._edit():
            if type_tag is None:
                node_id = self.arena.add_group(name, parent_id)
            else:
                node_id = self.arena.add_group(name, parent_id, type_tag)
            self._settle()
            return node_id

    def add_child(
        self,
        parent_id: Optional[int],
        template_id: str,
        type_tag: Optional[str] = None,
        name: Optional[str] = None,
    ) -> int:
        with self._edit():
            node_id = self.arena.add_child(parent_id, template_id, type_tag, name)
            self._settle()
            return node_id

    def add_custom_child(
        self,
        parent_id: Optional[int],
        type_tag: str,
        constants: Optional[Mapping[str, object]] = None,
        name: Optional[str] = None,
        indicator_defaults: Optional[Mapping[str, object]] = None,
    ) -> int:
        with self._edit():
            node_id = self.arena.add_custom_child(
                parent_id, type_tag, constants, name, indicator_defaults
            )
            self._settle()
            return node_id

    def remove_child(self, node_id: int) -> List[int]:
        with self._edit():
            removed = self.arena.remove_child(node_id)
            if removed:
                self._settle()
            return removed

    def set_equipment(self, node_id: int, equipment_id: str) -> List[str]:
        with self._edit():
            changed = self.arena.set_equipment(node_id, equipment_id)
            if changed:
                self._settle()
            return changed

    def set_value(self, node_id: int, key: str, month: int, raw: object) -> List[str]:
        """
        Enter one raw monthly value.

        Returns:
            Keys whose stored value changed; empty when the value was already
            stored, in which case nothing is recomputed or published
        """
        with self._edit():
            changed = self.arena.set_value(node_id, key, month, raw)
            if changed:
                self._settle()
            return changed

    def set_values(self, node_id: int, key: str, values: Sequence[object]) -> List[str]:
        """Enter all 12 months of one raw indicator; publishes once."""
        if len(values) != MONTHS_PER_YEAR:
            raise ValueError(f"Expected {MONTHS_PER_YEAR} monthly values, got {len(values)}")
        with self._edit():
            changed: Dict[str, None] = {}
            for month, raw in enumerate(values, start=1):
                for key_changed in self.arena.set_value(node_id, key, month, raw):
                    changed[key_changed] = None
            if changed:
                self._settle()
            return list(changed)

    def set_data_source(
        self, node_id: int, key: str, month: int, label: Optional[str]
    ) -> None:
        self.arena.set_data_source(node_id, key, month, label)

    def attach_evidence(
        self, node_id: int, key: str, month: int, handle: Optional[str]
    ) -> None:
        self.arena.attach_evidence(node_id, key, month, handle)

    # --- Queries ----------------------------------------------------------

    def get(self, node_id: int) -> EntityNode:
        return self.arena.get(node_id)

    def children(self, parent_id: Optional[int] = None) -> List[EntityNode]:
        return self.arena.children(parent_id)

    def live_nodes(self, type_tags: Optional[Sequence[str]] = None) -> List[EntityNode]:
        return self.arena.live_nodes(type_tags)

    def series(self, node_id: int, key: str) -> TimeSeries:
        return self.arena.get(node_id).series_for(key)

    def value(self, node_id: int, key: str, month: int) -> float:
        return self.series(node_id, key).get(month)

    def record(self, node_id: int, key: str, month: int) -> MonthRecord:
        return self.series(node_id, key).record(month)

    def yearly_total(self, node_id: int, key: str) -> float:
        return self.aggregation.yearly_total(self.arena.get(node_id), key)

    def category_totals(self) -> Dict[str, float]:
        return self.aggregation.category_totals(self.arena)

    def grand_total(self) -> float:
        return self.aggregation.grand_total(self.category_totals())

    def direct_total(self) -> float:
        """Grand total excluding indirect categories (purchased electricity and heat)."""
        rules = [
            r for r in self.aggregation.rules if r.category_key not in self.indirect_categories
        ]
        return self.aggregation.grand_total(self.category_totals(), rules)

    def needs_factor(self) -> List[EntityNode]:
        """Custom entities computing with a defaulted (0.0) constant."""
        return [n for n in self.arena.live_nodes() if n.is_missing_factor]

    @property
    def last_published_total(self) -> Optional[float]:
        return self.notifier.last_value

    # --- Snapshot ---------------------------------------------------------

    def snapshot(self) -> InventorySnapshot:
        return capture(self.arena, self.preset_key)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.snapshot().to_json(indent=indent)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: InventorySnapshot,
        preset: Union[str, IndustryPreset, None] = None,
        **kwargs,
    ) -> "EmissionInventory":
        """
        Rebuild an inventory from a snapshot.

        The preset defaults to the one recorded in the snapshot. The restored
        grand total is published once so subscribers start in sync.
        """
        preset = preset if preset is not None else snapshot.preset_key
        if preset is None:
            raise ValueError("Snapshot has no preset; pass one explicitly")
        inventory = cls.from_preset(preset, **kwargs)
        restore(snapshot, inventory.arena)
        inventory._settle()
        return inventory

    @classmethod
    def from_json(
        cls, text: str, preset: Union[str, IndustryPreset, None] = None, **kwargs
    ) -> "EmissionInventory":
        return cls.from_snapshot(InventorySnapshot.from_json(text), preset, **kwargs)
