"""Corpus loading and corpus-wide aggregates"""

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from pydantic import ValidationError

from ..config import settings
from ..errors import CorpusLoadError
from ..schemas.gift import GiftItem
from .classifier import ClassifierThresholds
from .scoring import ScoreFormula, detect_formula
from .value import compute_value
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HIGH_SCORE = 9.0


def percentile_at(values: Iterable[float], fraction: float) -> Optional[float]:
    """
    Element at index floor(n * fraction) of the ascending values

    Returns None for an empty sequence.
    """

    ordered = np.sort(np.asarray(list(values), dtype=float))
    if ordered.size == 0:
        return None

    index = min(int(np.floor(ordered.size * fraction)), ordered.size - 1)
    return float(ordered[index])


def interpolated_percentile(values: Iterable[float], fraction: float) -> Optional[float]:
    """
    Linearly interpolated percentile of the values

    Lies strictly below the maximum whenever the top value is unique and
    fraction < 1. Returns None for an empty sequence.
    """

    values = np.asarray(list(values), dtype=float)
    if values.size == 0:
        return None

    return float(np.percentile(values, fraction * 100))


class CorpusStats:
    """
    Aggregates computed once per catalogue load

    Attributes:
        max_reviews: Largest review count in the catalogue
        value_p85: Value percentile over items with a positive price
        high_score: Score cut-off for the high-quality classifier tiers
        categories: Sorted distinct category labels
    """

    def __init__(
        self,
        item_count: int = 0,
        max_reviews: int = 0,
        value_p85: Optional[float] = None,
        high_score: float = DEFAULT_HIGH_SCORE,
        categories: Sequence[str] = ()
    ):
        self.item_count = item_count
        self.max_reviews = max_reviews
        self.value_p85 = value_p85
        self.high_score = high_score
        self.categories = tuple(categories)

    @classmethod
    def from_items(
        cls,
        items: Sequence[GiftItem],
        formula: ScoreFormula,
        value_percentile: float = None,
        high_score_percentile: float = None,
        high_score_threshold: Optional[float] = None
    ) -> "CorpusStats":
        """Compute every aggregate in a single pass over the catalogue"""

        value_percentile = value_percentile if value_percentile is not None else settings.VALUE_PERCENTILE
        high_score_percentile = (
            high_score_percentile if high_score_percentile is not None else settings.HIGH_SCORE_PERCENTILE
        )
        if high_score_threshold is None:
            high_score_threshold = settings.HIGH_SCORE_THRESHOLD

        max_reviews = max((max(item.reviews or 0, 0) for item in items), default=0)

        scores = []
        priced_values = []
        for item in items:
            score = formula.score(item, max_reviews).score
            scores.append(score)
            if item.price_min > 0:
                priced_values.append(compute_value(score, item.price_min))

        if high_score_threshold is not None:
            high_score = high_score_threshold
        else:
            high_score = interpolated_percentile(scores, high_score_percentile)
            if high_score is None:
                high_score = DEFAULT_HIGH_SCORE

        return cls(
            item_count=len(items),
            max_reviews=max_reviews,
            value_p85=percentile_at(priced_values, value_percentile),
            high_score=high_score,
            categories=sorted({item.category for item in items if item.category})
        )

    def thresholds(self) -> ClassifierThresholds:
        """Classifier cut-offs for this catalogue"""
        return ClassifierThresholds(value_p85=self.value_p85, high_score=self.high_score)

    def __repr__(self):
        return (
            f"<CorpusStats(items={self.item_count}, max_reviews={self.max_reviews}, "
            f"value_p85={self.value_p85}, high_score={self.high_score})>"
        )


class Corpus:
    """Immutable catalogue snapshot: items, score formula and aggregates"""

    def __init__(self, items: Sequence[GiftItem], formula: ScoreFormula, stats: CorpusStats):
        self.items: Tuple[GiftItem, ...] = tuple(items)
        self.formula = formula
        self.stats = stats

    @classmethod
    def from_items(
        cls,
        items: Sequence[GiftItem],
        formula: Union[str, ScoreFormula] = None,
        fallback: bool = None,
        **stats_options
    ) -> "Corpus":
        """
        Build a snapshot from parsed items

        Args:
            items: Catalogue entries
            formula: Formula instance or name ('auto', 'review', 'interaction')
            fallback: Enable the price fallback for non-positive scores
            **stats_options: Forwarded to CorpusStats.from_items
        """

        items = tuple(items)
        if fallback is None:
            fallback = settings.SCORE_PRICE_FALLBACK

        if not isinstance(formula, ScoreFormula):
            formula = detect_formula(items, formula or settings.SCORE_FORMULA, fallback=fallback)

        stats = CorpusStats.from_items(items, formula, **stats_options)
        return cls(items, formula, stats)

    def get(self, item_id: int) -> Optional[GiftItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def __len__(self):
        return len(self.items)

    def __repr__(self):
        return f"<Corpus(items={len(self.items)}, formula='{self.formula.name}')>"


def parse_corpus(records: Any) -> List[GiftItem]:
    """
    Validate raw catalogue records

    Raises:
        CorpusLoadError: If the payload is not a list or a record is invalid
    """

    if not isinstance(records, list):
        raise CorpusLoadError(f"Catalogue must be a JSON array, got {type(records).__name__}")

    items = []
    for position, record in enumerate(records):
        try:
            items.append(GiftItem.model_validate(record))
        except ValidationError as e:
            raise CorpusLoadError(f"Invalid gift record at position {position}: {e}") from e

    seen = set()
    for item in items:
        if item.id in seen:
            raise CorpusLoadError(f"Duplicate gift id: {item.id}")
        seen.add(item.id)

    return items


def load_corpus(path: Union[str, Path] = None, **options) -> Corpus:
    """
    Load a catalogue JSON file and compute its aggregates

    Args:
        path: JSON array file; defaults to settings.CORPUS_PATH
        **options: Forwarded to Corpus.from_items

    Raises:
        CorpusLoadError: If the file cannot be read or parsed, or the
            configured score formula is unknown
    """

    path = Path(path or settings.CORPUS_PATH)
    logger.info("Loading gift catalogue", path=str(path))

    try:
        with path.open(encoding="utf-8") as fh:
            records = json.load(fh)
    except FileNotFoundError as e:
        raise CorpusLoadError(f"Catalogue file not found: {path}", path=str(path)) from e
    except (OSError, json.JSONDecodeError) as e:
        raise CorpusLoadError(f"Catalogue file unreadable: {e}", path=str(path)) from e

    try:
        items = parse_corpus(records)
    except CorpusLoadError as e:
        e.path = str(path)
        raise

    try:
        corpus = Corpus.from_items(items, **options)
    except ValueError as e:
        raise CorpusLoadError(f"Catalogue cannot be scored: {e}", path=str(path)) from e

    logger.info(
        "Gift catalogue loaded",
        path=str(path),
        items=len(corpus),
        formula=corpus.formula.name,
        value_p85=corpus.stats.value_p85
    )

    return corpus
