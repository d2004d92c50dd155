"""Gift catalogue schemas"""

from pydantic import BaseModel, Field, AliasChoices, computed_field, field_validator, model_validator
from typing import Optional, List, Any


class GiftItem(BaseModel):
    """
    One catalogue entry as supplied by the corpus source

    Accepts both catalogue schemas: scalar ``price`` with ``reviews``, or a
    ``price_min``/``price_max`` range with ``item_popularity``. A scalar price
    is stored as a degenerate range.
    """

    id: int
    title: str = Field(..., min_length=1, validation_alias=AliasChoices("title", "name"))
    category: str = ""
    tags: List[str] = []
    price_min: float = 0.0
    price_max: float = 0.0
    stars: float = 0.0
    days_since_added: float = Field(
        default=0.0, validation_alias=AliasChoices("days_since_added", "daysSinceAdded")
    )
    reviews: Optional[int] = None
    item_popularity: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("item_popularity", "googleResults")
    )
    stock: Optional[bool] = None
    personalization: Optional[bool] = None
    url: Optional[str] = None
    query: Optional[str] = None

    class Config:
        frozen = True
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def normalize_price(cls, data: Any) -> Any:
        """Fold a scalar price or a one-sided range into price_min/price_max"""

        if not isinstance(data, dict):
            return data

        data = dict(data)
        scalar = data.pop("price", None)
        low = data.get("price_min")
        high = data.get("price_max")

        if low is None and high is None:
            low = high = scalar if scalar is not None else 0
        elif low is None:
            low = high
        elif high is None:
            high = low

        try:
            if float(low) > float(high):
                low, high = high, low
        except (TypeError, ValueError):
            pass  # left for field validation to reject

        data["price_min"] = low
        data["price_max"] = high
        return data

    @field_validator("stars", "days_since_added", mode="before")
    @classmethod
    def none_to_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @computed_field
    @property
    def price(self) -> float:
        """Representative price: the lower bound of the range"""
        return self.price_min

    @property
    def interaction_count(self) -> int:
        """Raw popularity signal: external interaction volume, else review count"""
        if self.item_popularity is not None:
            return self.item_popularity
        if self.reviews is not None:
            return self.reviews
        return 0


class ScoreComponents(BaseModel):
    """Score breakdown: rating (R), newness (N) and popularity (Pop) on a 0-10 scale"""

    rating: float
    newness: float
    popularity: float
    weighted: float
    score: float
    fallback_applied: bool = False


class GiftEvaluation(ScoreComponents):
    """Score breakdown merged with the value-for-money index"""

    value: float
    effective_price: float


class GiftRow(GiftItem):
    """A gift enriched with fields derived for one corpus snapshot"""

    score: float
    value: float
    pop_rating: float
    analytics_priority: int = Field(..., ge=1, le=5)
    analytics_label: str
    components: ScoreComponents


class RowSummary(BaseModel):
    """Averages over a result set"""

    count: int
    avg_price: float
    avg_score: float
    avg_value: float


class CorpusStatsResponse(BaseModel):
    """Corpus-wide aggregates of the loaded catalogue"""

    item_count: int
    formula: str
    max_reviews: int
    value_p85: Optional[float]
    high_score_threshold: float
    categories: List[str]
