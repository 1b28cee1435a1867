from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    # Halves round toward +inf (2.5 -> 3, -2.5 -> -2), unlike the builtin banker's rounding.
    return int(math.floor(value + 0.5))
