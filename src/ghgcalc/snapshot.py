# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
JSON snapshot of the entity tree.

A snapshot holds ids, parent links, provenance, resolved constants,
equipment selection and the raw indicator series (values, data-source labels
and evidence handles). It holds no functions and no calculated series:
calculated values are rebuilt by the evaluator on load, so a round trip
reproduces every calculated value and total exactly.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Union

from pydantic import Field, field_validator, model_validator

from .core.entities.arena import EntityArena
from .core.entities.node import EntityNode, Provenance
from .core.indicators.series import MONTHS_PER_YEAR, TimeSeries
from .core.primitives.model import Model
from .core.primitives.numeric import coerce_number

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SeriesSnapshot(Model):
    """
    Twelve monthly slots of one raw indicator as plain lists.

    Values are kept as written (a hand-edited file may hold blanks or text);
    they are parsed and clamped when the snapshot is restored.
    """

    values: List[Union[float, str, None]]
    data_sources: List[str] = Field(default_factory=lambda: [""] * MONTHS_PER_YEAR)
    evidence: List[Optional[str]] = Field(default_factory=lambda: [None] * MONTHS_PER_YEAR)

    @field_validator("values", "data_sources", "evidence")
    @classmethod
    def check_twelve_months(cls, v: list) -> list:
        if len(v) != MONTHS_PER_YEAR:
            raise ValueError(f"Expected {MONTHS_PER_YEAR} monthly entries, got {len(v)}")
        return v

    @classmethod
    def from_series(cls, series: TimeSeries) -> "SeriesSnapshot":
        return cls(
            values=series.to_list(),
            data_sources=series.data_sources,
            evidence=series.evidence_handles,
        )

    def to_series(self) -> TimeSeries:
        return TimeSeries.from_lists(
            [coerce_number(v) for v in self.values], self.data_sources, self.evidence
        )


class NodeSnapshot(Model):
    """One entity node without its calculated series."""

    id: int = Field(ge=1)
    type_tag: str
    name: str
    parent_id: Optional[int] = None
    provenance: Provenance
    constants: Dict[str, float] = Field(default_factory=dict)
    needs_factor: Tuple[str, ...] = ()
    equipment_id: Optional[str] = None
    series: Dict[str, SeriesSnapshot] = Field(default_factory=dict)


class InventorySnapshot(Model):
    """
    Serializable state of an inventory.

    Example:
        ```python
        text = inventory.snapshot().to_json()
        restored = EmissionInventory.from_json(text)
        restored.grand_total() == inventory.grand_total()  # True
        ```
    """

    version: int = SNAPSHOT_VERSION
    preset_key: Optional[str] = None
    next_id: int = Field(default=1, ge=1)
    nodes: List[NodeSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_tree(self) -> "InventorySnapshot":
        """Ids are unique and every parent appears before its children."""
        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"Duplicate entity id {node.id} in snapshot")
            if node.parent_id is not None and node.parent_id not in seen:
                raise ValueError(
                    f"Entity {node.id} references parent {node.parent_id} "
                    f"that does not precede it"
                )
            if node.id >= self.next_id:
                raise ValueError(f"Entity id {node.id} is not below next_id {self.next_id}")
            seen.add(node.id)
        return self

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "InventorySnapshot":
        return cls.model_validate_json(text)


def capture(arena: EntityArena, preset_key: Optional[str] = None) -> InventorySnapshot:
    """Snapshot the arena's live nodes (raw series only)."""
    nodes = []
    for node in arena.live_nodes():
        schema = arena.evaluator.schema_for(node.type_tag)
        nodes.append(
            NodeSnapshot(
                id=node.id,
                type_tag=node.type_tag,
                name=node.name,
                parent_id=node.parent_id,
                provenance=node.provenance,
                constants=dict(node.constants),
                needs_factor=node.needs_factor,
                equipment_id=node.equipment_id,
                series={
                    d.key: SeriesSnapshot.from_series(node.series[d.key])
                    for d in schema.raw_indicators
                },
            )
        )
    return InventorySnapshot(preset_key=preset_key, next_id=arena.next_id, nodes=nodes)


def restore(snapshot: InventorySnapshot, arena: EntityArena) -> EntityArena:
    """
    Rebuild nodes from `snapshot` into an empty `arena`.

    Stored raw values go through the same parse and domain clamp as an
    edit, so a blank or out-of-range entry cannot bypass them. Raw series
    missing from the snapshot start at the indicator default; calculated
    series are recomputed from the raw ones.
    """
    if len(arena):
        raise ValueError("Snapshots can only be restored into an empty arena")
    if snapshot.version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version {snapshot.version}")

    for item in snapshot.nodes:
        schema = arena.evaluator.schema_for(item.type_tag)
        series: Dict[str, TimeSeries] = {}
        for definition in schema.indicators:
            if definition.is_calculated:
                series[definition.key] = TimeSeries()
            else:
                series[definition.key] = TimeSeries(
                    fill=definition.constrain(definition.default_value or 0.0)
                )
        for key, stored in item.series.items():
            definition = schema.get(key)
            if definition.is_calculated:
                logger.debug(f"Ignoring stored calculated series '{key}' of entity {item.id}")
                continue
            values = [definition.constrain(coerce_number(v)) for v in stored.values]
            series[key] = TimeSeries.from_lists(values, stored.data_sources, stored.evidence)

        arena.restore(
            EntityNode(
                id=item.id,
                type_tag=item.type_tag,
                name=item.name,
                parent_id=item.parent_id,
                provenance=item.provenance,
                constants=dict(item.constants),
                series=series,
                needs_factor=tuple(item.needs_factor),
                equipment_id=item.equipment_id,
            )
        )
    arena.reserve_ids(snapshot.next_id)
    logger.debug(f"Restored {len(snapshot.nodes)} entities from snapshot")
    return arena
