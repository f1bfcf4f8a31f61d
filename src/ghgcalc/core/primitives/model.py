# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable, slot-based models for static descriptions (indicator
    definitions, templates, rules, settings). Mutable runtime state such as
    entity series lives in the entity arena, outside of models.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Static descriptions are shared by reference
        slots=True,
        extra="forbid",  # Catches typos in definitions immediately
    )
