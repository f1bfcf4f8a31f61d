# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Read-only reference catalog.

Templates and equipment are static descriptions loaded once and passed by
reference into every inventory. The catalog never mutates after
construction; `with_templates` returns a new catalog instead.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import Field

from ..core.primitives.errors import EquipmentNotFoundError, TemplateNotFoundError
from ..core.primitives.model import Model

logger = logging.getLogger(__name__)


class Template(Model):
    """
    A reference-table entry an entity can be created from.

    Attributes:
        template_id: Catalog key (e.g. "fuel:anthracite", "carbonate:CaCO3")
        type_tag: Entity type created from this template
        name: Display name
        indicator_defaults: Raw indicator values pre-populated in all 12 months
        constants: Entity-level constants (GWP, molar mass, emission factor...)
        attributes: Free-form descriptive metadata (chemical formula, state...)
    """

    template_id: str
    type_tag: str
    name: str
    indicator_defaults: Dict[str, float] = Field(default_factory=dict)
    constants: Dict[str, float] = Field(default_factory=dict)
    attributes: Dict[str, str] = Field(default_factory=dict)


class Equipment(Model):
    """
    A selectable piece of equipment with one fixed indicator value.

    Selecting equipment on an entity overwrites `indicator_key` in all 12
    months with `value` (e.g. a combustion device's oxidation rate, or an
    abatement unit's N2O removal efficiency).
    """

    equipment_id: str
    name: str
    indicator_key: str
    value: float
    applies_to: Tuple[str, ...] = ()


class ReferenceCatalog:
    """
    Immutable lookup of templates and equipment.

    Example:
        ```python
        catalog = default_catalog()
        limestone = catalog.template("carbonate:CaCO3")
        limestone.constants["emission_factor"]  # 0.4397
        ```
    """

    def __init__(
        self,
        templates: Iterable[Template] = (),
        equipment: Iterable[Equipment] = (),
    ):
        template_map: Dict[str, Template] = {}
        for template in templates:
            if template.template_id in template_map:
                raise ValueError(f"Duplicate template id '{template.template_id}'")
            template_map[template.template_id] = template
        equipment_map: Dict[str, Equipment] = {}
        for item in equipment:
            if item.equipment_id in equipment_map:
                raise ValueError(f"Duplicate equipment id '{item.equipment_id}'")
            equipment_map[item.equipment_id] = item

        self._templates: Mapping[str, Template] = MappingProxyType(template_map)
        self._equipment: Mapping[str, Equipment] = MappingProxyType(equipment_map)
        logger.debug(
            f"Reference catalog loaded: {len(template_map)} templates, "
            f"{len(equipment_map)} equipment entries"
        )

    @property
    def templates(self) -> Mapping[str, Template]:
        return self._templates

    @property
    def equipment_entries(self) -> Mapping[str, Equipment]:
        return self._equipment

    def template(self, template_id: str) -> Template:
        try:
            return self._templates[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id) from None

    def has_template(self, template_id: str) -> bool:
        return template_id in self._templates

    def equipment(self, equipment_id: str) -> Equipment:
        try:
            return self._equipment[equipment_id]
        except KeyError:
            raise EquipmentNotFoundError(equipment_id) from None

    def templates_for(self, type_tag: str) -> List[Template]:
        return [t for t in self._templates.values() if t.type_tag == type_tag]

    def equipment_for(self, type_tag: str) -> List[Equipment]:
        return [
            e
            for e in self._equipment.values()
            if not e.applies_to or type_tag in e.applies_to
        ]

    def with_templates(
        self,
        templates: Iterable[Template] = (),
        equipment: Optional[Iterable[Equipment]] = None,
    ) -> "ReferenceCatalog":
        """Return a new catalog extended with additional entries."""
        return ReferenceCatalog(
            templates=[*self._templates.values(), *templates],
            equipment=[*self._equipment.values(), *(equipment or ())],
        )

    def __len__(self) -> int:
        return len(self._templates)
