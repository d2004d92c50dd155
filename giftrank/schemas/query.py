"""Query and sort schemas"""

from pydantic import BaseModel, Field
from typing import Optional, List, Union
from enum import Enum

from .gift import GiftRow, RowSummary


class SortKey(str, Enum):
    """Sortable row fields"""

    ID = "id"
    TITLE = "title"
    CATEGORY = "category"
    PRICE = "price"
    STARS = "stars"
    REVIEWS = "reviews"
    DAYS_SINCE_ADDED = "days_since_added"
    ITEM_POPULARITY = "item_popularity"
    SCORE = "score"
    VALUE = "value"
    POP_RATING = "pop_rating"
    ANALYTICS_PRIORITY = "analytics_priority"

    @classmethod
    def _missing_(cls, value):
        # Display-layer spellings
        aliases = {
            "name": cls.TITLE,
            "daysSinceAdded": cls.DAYS_SINCE_ADDED,
            "popRating": cls.POP_RATING,
            "analyticsPriority": cls.ANALYTICS_PRIORITY,
            "googleResults": cls.ITEM_POPULARITY,
        }
        return aliases.get(value)

    @property
    def is_text(self) -> bool:
        return self in (SortKey.TITLE, SortKey.CATEGORY)


class SortDirection(str, Enum):
    """Sort directions"""

    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class SortToggle(str, Enum):
    """Quick-sort shortcuts that override the column sort while active"""

    BEST_VALUE = "best_value"
    MOST_POPULAR = "most_popular"


class SortSpec(BaseModel):
    """The single source of truth for row ordering"""

    key: SortKey = SortKey.VALUE
    direction: SortDirection = SortDirection.DESC

    class Config:
        frozen = True


class GiftQuery(BaseModel):
    """
    Filter and sort parameters for one catalogue query

    Numeric filters accept raw strings; values that do not parse as finite
    numbers leave the filter inactive.
    """

    category: Optional[str] = None
    tag: Optional[str] = None
    search: str = ""
    sort: SortSpec = SortSpec()
    max_price: Optional[Union[float, str]] = None
    min_rating: Optional[Union[float, str]] = None
    in_stock_only: bool = False


class GiftQueryResponse(BaseModel):
    """Schema for a catalogue query response"""

    total: int = Field(..., description="Rows matching the filters")
    returned: int
    sort: SortSpec
    toggle: Optional[SortToggle] = None
    summary: RowSummary
    rows: List[GiftRow]
