# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from typing import Annotated

from pydantic import Field

# constrained types
PositiveInt = Annotated[int, Field(ge=0)]
PositiveFloat = Annotated[float, Field(ge=0)]
FloatBetween0And1 = Annotated[float, Field(ge=0, le=1)]
MonthNumber = Annotated[int, Field(ge=1, le=12)]
