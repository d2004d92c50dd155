"""Popularity normalization for raw interaction counts"""

import math
from typing import Optional

# log10(count) - 1, so 100 -> 1, 10_000 -> 3, 1_000_000 -> 5
POPULARITY_OFFSET = 1.0
POPULARITY_CEILING = 5.0


def compute_popularity(raw_count: Optional[float]) -> float:
    """
    Compress an interaction or search-result count onto a 0-5 scale

    Args:
        raw_count: Raw interaction volume (may be missing)

    Returns:
        Popularity rating in [0, 5]; 0 for missing or non-positive counts
    """

    if raw_count is None:
        return 0.0

    try:
        count = float(raw_count)
    except (TypeError, ValueError):
        return 0.0

    if not math.isfinite(count) or count <= 0:
        return 0.0

    rating = math.log10(count) - POPULARITY_OFFSET
    return min(max(rating, 0.0), POPULARITY_CEILING)
