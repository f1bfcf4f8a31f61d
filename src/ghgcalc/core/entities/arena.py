# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Integer-keyed arena of entity nodes.

The arena is the only owner of nodes. Parent/child links are ids, never object
references, so removing a node (and its descendants) leaves nothing behind to
special-case: aggregation always iterates the current live set.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ...formulas.evaluator import FormulaEvaluator
from ...reference.catalog import ReferenceCatalog
from ...reference.tables import default_catalog
from ..indicators.schema import EntitySchema
from ..indicators.series import TimeSeries
from ..primitives.enums import EntityTypeTag
from ..primitives.errors import (
    CalculatedIndicatorError,
    EntityNotFoundError,
)
from ..primitives.numeric import coerce_number
from .node import CustomProvenance, EntityNode, FixedProvenance

logger = logging.getLogger(__name__)


class EntityArena:
    """
    Owns every live `EntityNode` and performs the structural edits.

    Structural edits that produce or overwrite raw values (creation,
    equipment selection, raw writes) recompute the node's calculated
    indicators before returning, so the arena never exposes a node whose
    calculated series are stale.

    Example:
        ```python
        arena = EntityArena()
        line = arena.add_group("Kiln 1")
        row = arena.add_child(line, "carbonate:CaCO3")
        arena.set_value(row, "consumption", 1, 1000)
        arena.set_value(row, "purity", 1, 95)
        arena.get(row).series["co2_emission"].get(1)  # 417.715
        ```
    """

    def __init__(
        self,
        catalog: Optional[ReferenceCatalog] = None,
        evaluator: Optional[FormulaEvaluator] = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.evaluator = evaluator if evaluator is not None else FormulaEvaluator()
        self._nodes: Dict[int, EntityNode] = {}
        self._children: Dict[Optional[int], List[int]] = {None: []}
        self._next_id = 1

    # --- Lookup -----------------------------------------------------------

    @property
    def next_id(self) -> int:
        return self._next_id

    def get(self, node_id: int) -> EntityNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise EntityNotFoundError(node_id) from None

    def schema_of(self, node_id: int) -> EntitySchema:
        return self.evaluator.schema_for(self.get(node_id).type_tag)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[EntityNode]:
        return iter(self.live_nodes())

    def children(self, parent_id: Optional[int] = None) -> List[EntityNode]:
        """Direct children of `parent_id` (top-level nodes when None), in creation order."""
        if parent_id is not None:
            self.get(parent_id)
        return [self._nodes[i] for i in self._children.get(parent_id, [])]

    def descendants(self, node_id: int) -> List[EntityNode]:
        result: List[EntityNode] = []
        stack = list(reversed(self._children.get(node_id, [])))
        while stack:
            current = self._nodes[stack.pop()]
            result.append(current)
            stack.extend(reversed(self._children.get(current.id, [])))
        return result

    def live_nodes(self, type_tags: Optional[Iterable[str]] = None) -> List[EntityNode]:
        """Live nodes in id order, optionally restricted to some entity types."""
        nodes = [self._nodes[i] for i in sorted(self._nodes)]
        if type_tags is None:
            return nodes
        wanted = set(type_tags)
        return [n for n in nodes if n.type_tag in wanted]

    # --- Creation ---------------------------------------------------------

    def add_group(
        self,
        name: str,
        parent_id: Optional[int] = None,
        type_tag: str = EntityTypeTag.PRODUCTION_LINE.value,
    ) -> int:
        """Add a container node (production line, process, unit)."""
        schema = self.evaluator.schema_for(type_tag)
        if not schema.is_container:
            raise ValueError(f"Entity type '{type_tag}' is not a container")
        node = EntityNode(
            id=self._allocate_id(),
            type_tag=type_tag,
            name=name,
            parent_id=self._check_parent(parent_id),
            provenance=CustomProvenance(),
        )
        self._attach(node)
        return node.id

    def add_child(
        self,
        parent_id: Optional[int],
        template_id: str,
        type_tag: Optional[str] = None,
        name: Optional[str] = None,
    ) -> int:
        """
        Create a node from a reference template.

        Args:
            parent_id: Parent node, or None for a top-level entity
            template_id: Catalog key; unknown ids raise TemplateNotFoundError
            type_tag: Override the template's entity type with another tag
                backed by the same schema (e.g. a fuel used as a process output)
            name: Display name; defaults to the template name

        Returns:
            Id of the new node
        """
        template = self.catalog.template(template_id)
        parent_id = self._check_parent(parent_id)
        tag = type_tag or template.type_tag
        schema = self.evaluator.schema_for(tag)
        if schema is not self.evaluator.schema_for(template.type_tag):
            raise ValueError(
                f"Template '{template_id}' ({template.type_tag}) cannot create "
                f"entity type '{tag}'"
            )

        constants = {**schema.constant_defaults, **template.constants}
        node = EntityNode(
            id=self._allocate_id(),
            type_tag=tag,
            name=name or template.name,
            parent_id=parent_id,
            provenance=FixedProvenance(template_id=template_id),
            constants=constants,
            series=self._initial_series(schema, template.indicator_defaults),
            needs_factor=self._default_missing(schema, constants),
        )
        self._attach(node)
        self.evaluator.recompute_all(node)
        return node.id

    def add_custom_child(
        self,
        parent_id: Optional[int],
        type_tag: str,
        constants: Optional[Mapping[str, object]] = None,
        name: Optional[str] = None,
        indicator_defaults: Optional[Mapping[str, object]] = None,
    ) -> int:
        """
        Create a node with caller-supplied constants instead of a template.

        Required constants of the schema that the caller omits default to 0.0
        and are listed in `node.needs_factor`; the node still computes.
        """
        parent_id = self._check_parent(parent_id)
        schema = self.evaluator.schema_for(type_tag)
        if schema.is_container:
            raise ValueError(f"Use add_group for container type '{type_tag}'")

        supplied = {k: coerce_number(v) for k, v in (constants or {}).items()}
        resolved = {**schema.constant_defaults, **supplied}
        defaults = {k: coerce_number(v) for k, v in (indicator_defaults or {}).items()}
        node = EntityNode(
            id=self._allocate_id(),
            type_tag=type_tag,
            name=name or f"Custom {schema.label or type_tag}",
            parent_id=parent_id,
            provenance=CustomProvenance(constants=supplied),
            constants=resolved,
            series=self._initial_series(schema, defaults),
            needs_factor=self._default_missing(schema, resolved),
        )
        self._attach(node)
        if node.needs_factor:
            logger.warning(
                f"Custom entity {node.id} ({type_tag}) is missing {list(node.needs_factor)}; "
                f"defaulted to 0.0"
            )
        self.evaluator.recompute_all(node)
        return node.id

    def restore(self, node: EntityNode) -> None:
        """Re-insert a node rebuilt from a snapshot, keeping its id."""
        if node.id in self._nodes:
            raise ValueError(f"Entity id {node.id} already in use")
        if node.parent_id is not None and node.parent_id not in self._nodes:
            raise EntityNotFoundError(node.parent_id)
        self._attach(node)
        self._next_id = max(self._next_id, node.id + 1)
        if node.series:
            self.evaluator.recompute_all(node)

    def reserve_ids(self, next_id: int) -> None:
        """Never hand out ids below `next_id` (keeps ids stable across snapshots)."""
        self._next_id = max(self._next_id, next_id)

    # --- Removal ----------------------------------------------------------

    def remove_child(self, node_id: int) -> List[int]:
        """
        Remove a node and all of its descendants.

        Idempotent: removing an id that is not live is a no-op.

        Returns:
            Ids actually removed (empty on a repeated removal)
        """
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug(f"Entity {node_id} already removed")
            return []
        removed = [node_id, *(d.id for d in self.descendants(node_id))]
        self._children[node.parent_id].remove(node_id)
        for i in removed:
            del self._nodes[i]
            self._children.pop(i, None)
        logger.debug(f"Removed entities {removed}")
        return removed

    # --- Edits ------------------------------------------------------------

    def set_value(self, node_id: int, key: str, month: int, raw: object) -> List[str]:
        """
        Write one raw monthly value and recompute that month.

        The input is coerced (blank or unparseable -> 0.0) and clamped to the
        indicator's domain.

        Returns:
            Keys whose stored value changed: the raw key first (if it changed),
            then any calculated keys. Empty when nothing changed.
        """
        node = self.get(node_id)
        definition = self.evaluator.schema_for(node.type_tag).get(key)
        if definition.is_calculated:
            raise CalculatedIndicatorError(key)
        value = definition.constrain(coerce_number(raw))
        if not node.series_for(key).set(month, value):
            return []
        return [key, *self.evaluator.recompute_month(node, month)]

    def set_equipment(self, node_id: int, equipment_id: str) -> List[str]:
        """
        Select equipment for a node.

        Overwrites the equipment's indicator in all 12 months, discarding any
        values entered before, then recomputes every month.

        Returns:
            Keys whose stored value changed in any month
        """
        node = self.get(node_id)
        equipment = self.catalog.equipment(equipment_id)
        if equipment.applies_to and node.type_tag not in equipment.applies_to:
            raise ValueError(
                f"Equipment '{equipment_id}' does not apply to entity type '{node.type_tag}'"
            )
        schema = self.evaluator.schema_for(node.type_tag)
        if equipment.indicator_key not in schema:
            raise ValueError(
                f"Entity type '{node.type_tag}' has no indicator "
                f"'{equipment.indicator_key}' for equipment '{equipment_id}'"
            )
        definition = schema.get(equipment.indicator_key)
        if definition.is_calculated:
            raise CalculatedIndicatorError(equipment.indicator_key)

        node.equipment_id = equipment_id
        changed = []
        if node.series[definition.key].fill(definition.constrain(equipment.value)):
            changed.append(definition.key)
        for key in self.evaluator.recompute_all(node):
            if key not in changed:
                changed.append(key)
        logger.debug(f"Entity {node_id}: equipment '{equipment_id}' selected")
        return changed

    def set_data_source(self, node_id: int, key: str, month: int, label: Optional[str]) -> None:
        self.get(node_id).series_for(key).set_data_source(month, label)

    def attach_evidence(self, node_id: int, key: str, month: int, handle: Optional[str]) -> None:
        self.get(node_id).series_for(key).set_evidence(month, handle)

    # --- Internals --------------------------------------------------------

    def _allocate_id(self) -> int:
        node_id = self._next_id
        self._next_id += 1
        return node_id

    def _check_parent(self, parent_id: Optional[int]) -> Optional[int]:
        if parent_id is not None:
            self.get(parent_id)
        return parent_id

    def _attach(self, node: EntityNode) -> None:
        self._nodes[node.id] = node
        self._children.setdefault(node.parent_id, []).append(node.id)
        self._children.setdefault(node.id, [])
        logger.debug(f"Added {node!r}")

    @staticmethod
    def _initial_series(
        schema: EntitySchema, defaults: Mapping[str, float]
    ) -> Dict[str, TimeSeries]:
        series: Dict[str, TimeSeries] = {}
        for definition in schema.indicators:
            series[definition.key] = TimeSeries(
                fill=definition.constrain(definition.default_value or 0.0)
                if not definition.is_calculated
                else 0.0
            )
        for key, value in defaults.items():
            definition = schema.get(key)
            if definition.is_calculated:
                raise CalculatedIndicatorError(key)
            series[key].fill(definition.constrain(value))
        return series

    @staticmethod
    def _default_missing(schema: EntitySchema, constants: Dict[str, float]) -> Tuple[str, ...]:
        missing = tuple(k for k in schema.required_constants if k not in constants)
        for key in missing:
            constants[key] = 0.0
        return missing
