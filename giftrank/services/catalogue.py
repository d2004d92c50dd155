"""Catalogue maintenance: tagging, cleaning and data checks"""

import re
from collections import Counter
from typing import Any, Dict, List, Sequence

import pandas as pd

from ..schemas.gift import GiftItem
from .taxonomy import iter_tags, tags_for_item
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Titles that read like listicles rather than products
ARTICLE_PREFIXES = ("як ", "що ", "топ ", "ідеї", "варіанти", "поради", "вибрати", "обірати", "подарунки для")
MAX_TITLE_LENGTH = 120
MAX_TITLE_WORDS = 12
MIN_CAPS_TITLE_LENGTH = 10
MIN_PRICE_DIGITS = 2
MAX_PRICE_DIGITS = 6
MAX_VERBOSE_PRICE_LENGTH = 15
MAX_RECORDS_PER_URL = 5

_NON_DIGITS = re.compile(r"[^\d]")
_CURRENCY_WORDS = re.compile(r"ціна|грн", re.IGNORECASE)


def tag_items(items: Sequence[GiftItem]) -> List[GiftItem]:
    """Return copies of the items with taxonomy tags recomputed"""

    tagged = [item.model_copy(update={"tags": tags_for_item(item)}) for item in items]

    untagged = sum(1 for item in tagged if not item.tags)
    logger.info("Tagged catalogue", items=len(tagged), untagged=untagged)

    return tagged


def _is_article_title(title: str) -> bool:
    lowered = title.lower()
    if lowered.startswith(ARTICLE_PREFIXES):
        return True
    if len(title) > MAX_TITLE_LENGTH or len(title.split()) > MAX_TITLE_WORDS:
        return True
    return "?" in title


def _price_digits(raw_price: str) -> str:
    """Digits of a scraped price, or '' when the price is not a single value"""

    if "-" in raw_price:
        return ""
    if _CURRENCY_WORDS.search(raw_price) and len(raw_price) > MAX_VERBOSE_PRICE_LENGTH:
        return ""

    digits = _NON_DIGITS.sub("", raw_price)
    if not MIN_PRICE_DIGITS <= len(digits) <= MAX_PRICE_DIGITS:
        return ""
    return digits


def _score_of(record: Dict[str, Any]) -> float:
    try:
        return float(record.get("score") or 0)
    except (TypeError, ValueError):
        return 0.0


def clean_records(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Drop scraped records that are not usable products

    Removes article-like titles, all-caps titles, prices that are ranges or
    prose, records beyond the per-URL limit and duplicates by title + price.
    The survivors are ordered by score, highest first.
    """

    per_url = Counter()
    seen = set()
    cleaned = []

    for record in records:
        title = str(record.get("title") or "").strip()
        if not title or _is_article_title(title):
            continue

        raw_price = str(record.get("price") or "").replace("\n", " ").strip()
        digits = _price_digits(raw_price)
        if not digits:
            continue

        url = str(record.get("url") or "").lower()
        per_url[url] += 1
        if per_url[url] > MAX_RECORDS_PER_URL:
            continue

        duplicate_key = (title.lower(), digits)
        if duplicate_key in seen:
            continue
        seen.add(duplicate_key)

        if title == title.upper() and len(title) > MIN_CAPS_TITLE_LENGTH:
            continue

        cleaned.append(record)

    cleaned.sort(key=_score_of, reverse=True)

    logger.info(
        "Cleaned catalogue records",
        before=len(records),
        after=len(cleaned),
        removed=len(records) - len(cleaned)
    )

    return cleaned


def catalogue_frame(items: Sequence[GiftItem]) -> pd.DataFrame:
    """One row per item with the columns used by the data check"""

    return pd.DataFrame(
        [
            {
                "id": item.id,
                "title": item.title,
                "category": item.category,
                "price_min": item.price_min,
                "price_max": item.price_max,
                "interactions": item.interaction_count,
            }
            for item in items
        ],
        columns=["id", "title", "category", "price_min", "price_max", "interactions"]
    )


def summarize_catalogue(items: Sequence[GiftItem], top_n: int = 5) -> Dict[str, Any]:
    """
    Data check report over a catalogue

    Returns:
        Dictionary with item totals, category breakdown, price statistics,
        the most popular items, per-tag match counts and records missing a
        title, category or price.
    """

    df = catalogue_frame(items)

    priced = df[df["price_min"] > 0]["price_min"]
    ranged = df[df["price_min"] != df["price_max"]]

    top = df.sort_values("interactions", ascending=False, kind="stable").head(top_n)
    missing = df[(df["title"] == "") | (df["category"] == "") | (df["price_min"] <= 0)]

    return {
        "total_items": int(len(df)),
        "categories": {
            str(category): int(count)
            for category, count in df["category"].value_counts().items()
        },
        "price_range_items": int(len(ranged)),
        "price_min": float(priced.min()) if not priced.empty else None,
        "price_max": float(priced.max()) if not priced.empty else None,
        "price_avg": float(round(priced.mean())) if not priced.empty else None,
        "top_by_popularity": [
            {"id": int(row.id), "title": row.title, "interactions": int(row.interactions)}
            for row in top.itertuples()
        ],
        "tag_matches": {
            tag.id: sum(1 for item in items if tag.id in item.tags)
            for tag in iter_tags()
        },
        "missing_fields": [int(item_id) for item_id in missing["id"]],
    }
