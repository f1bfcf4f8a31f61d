# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
GHG Calc test suite.

Unit tests mirror the package layout; integration tests run complete
inventories end to end.
"""
