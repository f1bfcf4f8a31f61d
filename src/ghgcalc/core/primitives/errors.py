# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Exception taxonomy for the calculation engine.

Numeric problems (unparseable input, out-of-domain values, zero
denominators) are recovered inside the engine and never surface through
these classes on the normal edit path; `InputParseError` and
`DomainRangeError` exist for callers that explicitly ask for strict
validation (e.g. an input widget that wants to show a message).
Structural problems (unknown template, unknown entity, writing a
calculated indicator) are caller bugs and are raised.
"""

from __future__ import annotations


class GHGCalcError(Exception):
    """Base class for all engine errors."""


class InputParseError(GHGCalcError, ValueError):
    """Raised by strict parsing when input is blank or non-numeric."""

    def __init__(self, raw: object):
        self.raw = raw
        super().__init__(f"Cannot parse {raw!r} as a number")


class DomainRangeError(GHGCalcError, ValueError):
    """Raised by strict domain checks when a value lies outside its bounds."""

    def __init__(self, key: str, value: float, lower: float, upper: float):
        self.key = key
        self.value = value
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"Value {value} for '{key}' is outside its domain [{lower}, {upper}]"
        )


class TemplateNotFoundError(GHGCalcError, LookupError):
    """Raised when an entity is created from an unknown template id."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(
            f"Unknown template '{template_id}'; use a custom entity instead"
        )


class EquipmentNotFoundError(GHGCalcError, LookupError):
    """Raised when equipment is selected by an unknown id."""

    def __init__(self, equipment_id: str):
        self.equipment_id = equipment_id
        super().__init__(f"Unknown equipment '{equipment_id}'")


class EntityNotFoundError(GHGCalcError, KeyError):
    """Raised when an operation targets an entity id that is not live."""

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"No live entity with id {node_id}")


class UnknownIndicatorError(GHGCalcError, KeyError):
    """Raised when an indicator key is not part of an entity's schema."""

    def __init__(self, type_tag: str, key: str):
        self.type_tag = type_tag
        self.key = key
        super().__init__(f"Entity type '{type_tag}' has no indicator '{key}'")


class CalculatedIndicatorError(GHGCalcError, ValueError):
    """Raised when a caller tries to write a formula-derived indicator."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"Indicator '{key}' is calculated and cannot be set directly"
        )
