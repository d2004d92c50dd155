"""Value-for-money calculation"""

import math

# Value is expressed as score earned per this many currency units
PRICE_UNIT = 100.0


def compute_value(score: float, price: float) -> float:
    """
    Score earned per 100 units of price

    ``score / (price / 100)``, identical to ``score * 100 / price_min`` when
    the catalogue carries price ranges.

    Returns 0 for non-positive or non-finite inputs.
    """

    if not math.isfinite(score) or not math.isfinite(price) or price <= 0:
        return 0.0

    return score / (price / PRICE_UNIT)
