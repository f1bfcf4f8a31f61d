# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Entity nodes and their provenance.

Provenance is a tagged variant resolved once at creation: a node either comes
from a reference template (`FixedProvenance`) or carries caller-declared
constants (`CustomProvenance`). Nothing downstream re-checks which one it is;
the resolved constants are stored on the node itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import Field

from ..indicators.series import TimeSeries
from ..primitives.errors import UnknownIndicatorError
from ..primitives.model import Model


class FixedProvenance(Model):
    """Node created from a reference-table template."""

    kind: Literal["fixed"] = "fixed"
    template_id: str


class CustomProvenance(Model):
    """Node created without a template; constants were supplied by the caller."""

    kind: Literal["custom"] = "custom"
    constants: Dict[str, float] = Field(default_factory=dict)


Provenance = Annotated[
    Union[FixedProvenance, CustomProvenance], Field(discriminator="kind")
]


@dataclass
class EntityNode:
    """
    One member of the entity hierarchy.

    Owns one `TimeSeries` per indicator of its schema; no other node ever
    holds a reference to these series. Container nodes (production lines)
    own none.
    """

    id: int
    type_tag: str
    name: str
    provenance: Union[FixedProvenance, CustomProvenance]
    parent_id: Optional[int] = None
    constants: Dict[str, float] = field(default_factory=dict)
    series: Dict[str, TimeSeries] = field(default_factory=dict)
    needs_factor: Tuple[str, ...] = ()
    equipment_id: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return isinstance(self.provenance, CustomProvenance)

    @property
    def template_id(self) -> Optional[str]:
        if isinstance(self.provenance, FixedProvenance):
            return self.provenance.template_id
        return None

    @property
    def is_missing_factor(self) -> bool:
        """True when a required constant was defaulted to 0 on creation."""
        return bool(self.needs_factor)

    def series_for(self, key: str) -> TimeSeries:
        try:
            return self.series[key]
        except KeyError:
            raise UnknownIndicatorError(self.type_tag, key) from None

    def __repr__(self) -> str:
        return (
            f"EntityNode(id={self.id}, type_tag={self.type_tag!r}, "
            f"name={self.name!r}, parent_id={self.parent_id})"
        )
