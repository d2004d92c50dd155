"""
Gift Score Engine

Composite quality score from rating, recency, popularity and price:

    R   = (stars / 5) * 10                                  [0, 10]
    N   = 10 * exp(-days_since_added / 180)                 (0, 10]
    Pop = popularity component, formula dependent           [0, 10]

    score = (R*0.4 + N*0.35 + Pop*0.25) / log2(price)

Inputs are clamped, never rejected: stars to [0, 5], days and review counts
to >= 0, price to >= 1. A price of 1 has log2 == 0, so the weighted sum is
returned without a divisor.
"""

import math
from typing import Iterable, Optional

from ..schemas.gift import GiftItem, ScoreComponents, GiftEvaluation
from .popularity import compute_popularity
from .value import compute_value
from ..utils.logging import get_logger

logger = get_logger(__name__)

MAX_STARS = 5.0
NEWNESS_DECAY_DAYS = 180.0
COMPONENT_SCALE = 10.0

RATING_WEIGHT = 0.4
NEWNESS_WEIGHT = 0.35
POPULARITY_WEIGHT = 0.25

# Popularity index is 0-5, the score components are 0-10
INTERACTION_INDEX_SCALE = 2.0

# Sparse records fall back to a tenth of their price
PRICE_FALLBACK_RATIO = 0.10


def _finite(value: Optional[float], default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def review_popularity(reviews: float, max_reviews: float) -> float:
    """Log-scaled review count relative to the catalogue maximum, 0-10"""

    reviews = max(_finite(reviews), 0.0)
    max_reviews = max(_finite(max_reviews), 0.0)

    if max_reviews <= 0:
        return 0.0

    return (math.log10(reviews + 1) / math.log10(max_reviews + 1)) * COMPONENT_SCALE


def interaction_popularity(item_popularity: Optional[float]) -> float:
    """Popularity index (0-5) of an interaction count, stretched to 0-10"""
    return compute_popularity(item_popularity) * INTERACTION_INDEX_SCALE


def combine_components(
    stars: float,
    days_since_added: float,
    popularity: float,
    price: float,
    fallback: bool = False
) -> ScoreComponents:
    """
    Weight the rating, newness and popularity components and normalize by price

    Args:
        stars: Star rating, clamped to [0, 5]
        days_since_added: Listing age in days, clamped to >= 0
        popularity: Popularity component already on the 0-10 scale
        price: Item price, floored to 1
        fallback: Replace a non-positive score with 10% of the price

    Returns:
        All components plus the final score
    """

    stars = min(max(_finite(stars), 0.0), MAX_STARS)
    days = max(_finite(days_since_added), 0.0)
    popularity = min(max(_finite(popularity), 0.0), COMPONENT_SCALE)
    raw_price = _finite(price)
    safe_price = max(raw_price, 1.0)

    rating = (stars / MAX_STARS) * COMPONENT_SCALE
    newness = COMPONENT_SCALE * math.exp(-days / NEWNESS_DECAY_DAYS)

    weighted = (
        rating * RATING_WEIGHT
        + newness * NEWNESS_WEIGHT
        + popularity * POPULARITY_WEIGHT
    )

    log_price = math.log2(safe_price)
    score = weighted if log_price == 0 else weighted / log_price

    fallback_applied = False
    if fallback and score <= 0:
        score = raw_price * PRICE_FALLBACK_RATIO if raw_price > 0 else 0.0
        fallback_applied = True

    return ScoreComponents(
        rating=rating,
        newness=newness,
        popularity=popularity,
        weighted=weighted,
        score=score,
        fallback_applied=fallback_applied
    )


def compute_score(
    stars: float,
    days_since_added: float,
    reviews: float,
    max_reviews: float,
    price: float,
    fallback: bool = False
) -> ScoreComponents:
    """Review-based score: popularity from reviews against the catalogue maximum"""

    return combine_components(
        stars,
        days_since_added,
        review_popularity(reviews, max_reviews),
        price,
        fallback=fallback
    )


def compute_interaction_score(
    stars: float,
    days_since_added: float,
    item_popularity: Optional[float],
    price: float,
    fallback: bool = False
) -> ScoreComponents:
    """Interaction-index score: popularity from an external interaction count"""

    return combine_components(
        stars,
        days_since_added,
        interaction_popularity(item_popularity),
        price,
        fallback=fallback
    )


def evaluate_gift(
    stars: float,
    days_since_added: float,
    reviews: float,
    max_reviews: float,
    price: float
) -> GiftEvaluation:
    """Score and value in one call, with the price floored to 1"""

    components = compute_score(stars, days_since_added, reviews, max_reviews, price)
    effective_price = max(_finite(price), 1.0)

    return GiftEvaluation(
        **components.model_dump(),
        value=compute_value(components.score, effective_price),
        effective_price=effective_price
    )


class ScoreFormula:
    """Base class for score formula variants"""

    name = "base"

    def __init__(self, fallback: bool = False):
        self.fallback = fallback

    def popularity_component(self, item: GiftItem, max_reviews: int) -> float:
        """Popularity component on the 0-10 scale"""
        raise NotImplementedError

    def score(self, item: GiftItem, max_reviews: int = 0) -> ScoreComponents:
        """Score one catalogue item"""

        return combine_components(
            item.stars,
            item.days_since_added,
            self.popularity_component(item, max_reviews),
            item.price_min,
            fallback=self.fallback
        )

    def __repr__(self):
        return f"<{self.__class__.__name__}(fallback={self.fallback})>"


class ReviewBasedFormula(ScoreFormula):
    """Stars + reviews + scalar price"""

    name = "review"

    def popularity_component(self, item: GiftItem, max_reviews: int) -> float:
        return review_popularity(item.reviews or 0, max_reviews)


class InteractionIndexFormula(ScoreFormula):
    """Stars + external interaction volume + price range"""

    name = "interaction"

    def popularity_component(self, item: GiftItem, max_reviews: int) -> float:
        return interaction_popularity(item.item_popularity)


FORMULAS = {
    ReviewBasedFormula.name: ReviewBasedFormula,
    InteractionIndexFormula.name: InteractionIndexFormula,
}


def detect_formula(
    items: Iterable[GiftItem],
    preference: str = "auto",
    fallback: bool = False
) -> ScoreFormula:
    """
    Select the score formula for a catalogue

    An explicit preference wins. Otherwise the catalogue is review based when
    any item carries ``reviews``, interaction-index based when any item
    carries ``item_popularity``, and review based when it carries neither.

    Raises:
        ValueError: If the preference names no known formula
    """

    if preference != "auto":
        if preference not in FORMULAS:
            raise ValueError(f"Unknown score formula: {preference}")
        return FORMULAS[preference](fallback=fallback)

    has_reviews = False
    has_interactions = False
    for item in items:
        has_reviews = has_reviews or item.reviews is not None
        has_interactions = has_interactions or item.item_popularity is not None

    if has_reviews:
        formula = ReviewBasedFormula(fallback=fallback)
    elif has_interactions:
        formula = InteractionIndexFormula(fallback=fallback)
    else:
        formula = ReviewBasedFormula(fallback=fallback)

    logger.debug("Detected score formula", formula=formula.name)
    return formula
