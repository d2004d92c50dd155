"""Analytics Classifier assigning priority tiers to gifts"""

from enum import IntEnum
from typing import Dict, Optional

from ..config import settings


class AnalyticsPriority(IntEnum):
    """Priority tiers, higher is more prominent"""

    STANDARD = 1
    HIGH_DEMAND = 2
    NICHE_FAVORITE = 3
    JUSTIFIED_PICK = 4
    SUSTAINED_DEMAND = 5


PRIORITY_LABELS: Dict[AnalyticsPriority, str] = {
    AnalyticsPriority.SUSTAINED_DEMAND: "sustained high demand",
    AnalyticsPriority.JUSTIFIED_PICK: "statistically justified pick",
    AnalyticsPriority.NICHE_FAVORITE: "niche favorite",
    AnalyticsPriority.HIGH_DEMAND: "high demand",
    AnalyticsPriority.STANDARD: "standard offering",
}


class ClassifierThresholds:
    """
    Cut-offs used by the decision list

    Args:
        value_p85: Corpus value percentile; None disables the value tier
        high_score: Score above which an item counts as high quality
        high_demand: Popularity above which demand is high
        low_demand: Popularity below which reach is niche
    """

    def __init__(
        self,
        value_p85: Optional[float] = None,
        high_score: float = 9.0,
        high_demand: int = None,
        low_demand: int = None
    ):
        self.value_p85 = value_p85
        self.high_score = high_score
        self.high_demand = high_demand if high_demand is not None else settings.HIGH_DEMAND_THRESHOLD
        self.low_demand = low_demand if low_demand is not None else settings.LOW_DEMAND_THRESHOLD

    def __repr__(self):
        return (
            f"<ClassifierThresholds(value_p85={self.value_p85}, high_score={self.high_score}, "
            f"high_demand={self.high_demand}, low_demand={self.low_demand})>"
        )


def classify(
    score: float,
    popularity: float,
    value: float,
    thresholds: ClassifierThresholds
) -> AnalyticsPriority:
    """
    Assign a priority tier; the first matching rule wins

    Args:
        score: Composite quality score
        popularity: Raw interaction count
        value: Value-for-money index
        thresholds: Corpus-derived cut-offs

    Returns:
        The priority tier
    """

    high_quality = score > thresholds.high_score

    if high_quality and popularity > thresholds.high_demand:
        return AnalyticsPriority.SUSTAINED_DEMAND

    if thresholds.value_p85 is not None and value >= thresholds.value_p85:
        return AnalyticsPriority.JUSTIFIED_PICK

    if high_quality and popularity < thresholds.low_demand:
        return AnalyticsPriority.NICHE_FAVORITE

    if popularity > thresholds.high_demand:
        return AnalyticsPriority.HIGH_DEMAND

    return AnalyticsPriority.STANDARD


def priority_label(priority: int) -> str:
    """Display label of a priority tier"""
    return PRIORITY_LABELS[AnalyticsPriority(priority)]
