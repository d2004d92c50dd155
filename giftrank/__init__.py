"""Gift ranking engine: score, value and rank a gift catalogue."""

from .services.corpus import Corpus, load_corpus
from .services.query import run_query
from .schemas.query import GiftQuery, SortSpec

__all__ = ["Corpus", "load_corpus", "run_query", "GiftQuery", "SortSpec"]
