"""Scoring and ranking services"""

from .scoring import compute_score, ScoreFormula, ReviewBasedFormula, InteractionIndexFormula
from .value import compute_value
from .popularity import compute_popularity
from .classifier import classify, AnalyticsPriority, ClassifierThresholds
from .corpus import Corpus, CorpusStats, load_corpus
from .query import run_query
from .sorting import SortState

__all__ = [
    "compute_score",
    "ScoreFormula",
    "ReviewBasedFormula",
    "InteractionIndexFormula",
    "compute_value",
    "compute_popularity",
    "classify",
    "AnalyticsPriority",
    "ClassifierThresholds",
    "Corpus",
    "CorpusStats",
    "load_corpus",
    "run_query",
    "SortState",
]
