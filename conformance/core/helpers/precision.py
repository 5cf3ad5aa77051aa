from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any


def get_precision(a: Any) -> int:
    """
    Number of decimal places in `a`.

    Counts on the shortest repr of the float, so 90.995 is 3 places even though
    its binary value is not exactly 90.995. Non-numbers, booleans, integers and
    non-finite values are 0.
    """
    if isinstance(a, bool) or not isinstance(a, (int, float)):
        return 0
    if isinstance(a, int) or not math.isfinite(a):
        return 0
    try:
        exponent = Decimal(repr(a)).normalize().as_tuple().exponent
    except InvalidOperation:
        return 0
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0
