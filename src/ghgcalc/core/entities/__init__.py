# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Entity hierarchy: nodes, provenance and the arena that owns them.
"""

from .arena import EntityArena
from .node import CustomProvenance, EntityNode, FixedProvenance, Provenance

__all__ = [
    "CustomProvenance",
    "EntityArena",
    "EntityNode",
    "FixedProvenance",
    "Provenance",
]
