"""Row Builder and Query Pipeline"""

import math
from functools import lru_cache
from typing import Any, List, Optional, Sequence

from pyuca import Collator

from ..config import settings
from ..schemas.gift import GiftItem, GiftRow, RowSummary
from ..schemas.query import GiftQuery, SortDirection, SortKey, SortSpec
from .classifier import ClassifierThresholds, classify, priority_label
from .corpus import Corpus
from .popularity import compute_popularity
from .scoring import ScoreFormula
from .value import compute_value
from ..utils.logging import get_logger

logger = get_logger(__name__)

TAG_SELECTOR_PREFIX = "tag:"


def build_row(
    item: GiftItem,
    formula: ScoreFormula,
    max_reviews: int,
    thresholds: ClassifierThresholds
) -> GiftRow:
    """Derive score, value, popularity rating and priority for one item"""

    components = formula.score(item, max_reviews)
    value = compute_value(components.score, item.price_min)
    priority = classify(components.score, item.interaction_count, value, thresholds)

    return GiftRow(
        **item.model_dump(),
        score=components.score,
        value=value,
        pop_rating=compute_popularity(item.interaction_count),
        analytics_priority=int(priority),
        analytics_label=priority_label(priority),
        components=components
    )


def build_rows(corpus: Corpus) -> List[GiftRow]:
    """Build a row for every catalogue item, in catalogue order"""

    thresholds = corpus.stats.thresholds()
    return [
        build_row(item, corpus.formula, corpus.stats.max_reviews, thresholds)
        for item in corpus.items
    ]


def parse_number(raw: Any) -> Optional[float]:
    """Finite float from user input, or None when the input is not numeric"""

    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None

    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None

    return number if math.isfinite(number) else None


def resolve_tag(query: GiftQuery) -> Optional[str]:
    """Tag filter from the explicit field or a ``tag:<id>`` category selector"""

    if query.tag:
        return query.tag
    if query.category and query.category.startswith(TAG_SELECTOR_PREFIX):
        return query.category[len(TAG_SELECTOR_PREFIX):] or None
    return None


def filter_rows(rows: Sequence[GiftRow], query: GiftQuery) -> List[GiftRow]:
    """
    Apply every active filter as a conjunction

    Args:
        rows: Built rows
        query: Filter parameters

    Returns:
        New list of rows that pass all active filters, in input order
    """

    result = list(rows)

    tag = resolve_tag(query)
    if tag:
        result = [row for row in result if tag in row.tags]
    elif query.category and query.category != settings.ALL_CATEGORY:
        result = [row for row in result if row.category == query.category]

    needle = query.search.strip().casefold()
    if needle:
        result = [
            row for row in result
            if needle in row.title.casefold() or needle in row.category.casefold()
        ]

    max_price = parse_number(query.max_price)
    if max_price is not None:
        result = [row for row in result if row.price_min <= max_price]

    min_rating = parse_number(query.min_rating)
    if min_rating is not None:
        result = [row for row in result if row.stars >= min_rating]

    if query.in_stock_only:
        result = [row for row in result if row.stock is not False]

    return result


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the Unicode collation table once
    return Collator()


def _text_key(value: str):
    return _collator().sort_key(value.casefold())


def sort_rows(rows: Sequence[GiftRow], spec: SortSpec) -> List[GiftRow]:
    """
    Stable sort by one key

    Text keys use Unicode collation (DUCET), numeric keys compare numerically and a
    missing number sorts as 0. Equal keys keep their input order in both
    directions.
    """

    field = spec.key.value

    if spec.key.is_text:
        def key(row):
            return _text_key(getattr(row, field) or "")
    else:
        def key(row):
            value = getattr(row, field)
            return 0 if value is None else value

    return sorted(rows, key=key, reverse=spec.direction is SortDirection.DESC)


def run_query(corpus: Corpus, query: GiftQuery) -> List[GiftRow]:
    """
    Build, filter and sort the catalogue

    Rows are built for the whole catalogue before filtering so that filters
    may use derived fields.
    """

    rows = build_rows(corpus)
    filtered = filter_rows(rows, query)
    ordered = sort_rows(filtered, query.sort)

    logger.debug(
        "Query executed",
        corpus_items=len(rows),
        matched=len(ordered),
        sort_key=query.sort.key.value,
        sort_direction=query.sort.direction.value
    )

    return ordered


def summarize_rows(rows: Sequence[GiftRow]) -> RowSummary:
    """Average price, score and value over a result set"""

    count = len(rows)
    if count == 0:
        return RowSummary(count=0, avg_price=0.0, avg_score=0.0, avg_value=0.0)

    return RowSummary(
        count=count,
        avg_price=sum(row.price_min for row in rows) / count,
        avg_score=sum(row.score for row in rows) / count,
        avg_value=sum(row.value for row in rows) / count
    )
