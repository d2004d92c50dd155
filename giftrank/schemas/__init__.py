"""Pydantic schemas for catalogue data and query validation"""

from .gift import GiftItem, GiftRow, ScoreComponents, GiftEvaluation, RowSummary, CorpusStatsResponse
from .query import GiftQuery, GiftQueryResponse, SortSpec, SortKey, SortDirection, SortToggle
from .taxonomy import TagResponse, TaxonomyGroupResponse

__all__ = [
    "GiftItem",
    "GiftRow",
    "ScoreComponents",
    "GiftEvaluation",
    "RowSummary",
    "CorpusStatsResponse",
    "GiftQuery",
    "GiftQueryResponse",
    "SortSpec",
    "SortKey",
    "SortDirection",
    "SortToggle",
    "TagResponse",
    "TaxonomyGroupResponse",
]
