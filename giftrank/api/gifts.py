"""Gift catalogue API endpoints"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from typing import Optional

from ..config import settings
from ..schemas.gift import GiftRow, CorpusStatsResponse
from ..schemas.query import GiftQuery, GiftQueryResponse, SortDirection, SortKey, SortSpec, SortToggle
from ..services.corpus import Corpus
from ..services.query import build_row, run_query, summarize_rows
from ..services.sorting import SortState
from ..utils.dependencies import get_corpus, install_corpus
from ..utils.logging import get_logger
from ..utils.metrics import record_query, track_query_time
from ..utils.rate_limit import limiter

logger = get_logger(__name__)

router = APIRouter()


@track_query_time
def execute_query(corpus: Corpus, query: GiftQuery):
    return run_query(corpus, query)


@router.get("/", response_model=GiftQueryResponse)
@limiter.limit(settings.RATE_LIMIT)
def query_gifts(
    request: Request,
    category: str = Query(settings.ALL_CATEGORY, description="Category label, 'All' or 'tag:<id>'"),
    tag: Optional[str] = Query(None, description="Taxonomy tag id"),
    search: str = Query("", description="Case-insensitive title or category substring"),
    sort_key: SortKey = SortKey.VALUE,
    sort_direction: SortDirection = SortDirection.DESC,
    toggle: Optional[SortToggle] = Query(None, description="Quick sort overriding the column sort"),
    max_price: Optional[str] = Query(None, description="Price ceiling; ignored unless numeric"),
    min_rating: Optional[str] = Query(None, description="Star floor; ignored unless numeric"),
    in_stock_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    corpus: Corpus = Depends(get_corpus)
):
    """
    Browse the catalogue

    Every gift is scored, filtered and stably sorted. A toggle
    (best_value, most_popular) replaces sort_key/sort_direction while set.
    """

    state = SortState(SortSpec(key=sort_key, direction=sort_direction))
    if toggle is not None:
        state.set_toggle(toggle)

    query = GiftQuery(
        category=category,
        tag=tag,
        search=search,
        sort=state.spec,
        max_price=max_price,
        min_rating=min_rating,
        in_stock_only=in_stock_only
    )

    rows = execute_query(corpus, query)
    page = rows[skip:skip + limit]

    record_query(query.sort.key.value, len(rows))

    return GiftQueryResponse(
        total=len(rows),
        returned=len(page),
        sort=query.sort,
        toggle=state.toggle,
        summary=summarize_rows(rows),
        rows=page
    )


@router.get("/stats", response_model=CorpusStatsResponse)
def get_stats(corpus: Corpus = Depends(get_corpus)):
    """Corpus-wide aggregates used by the classifier"""

    stats = corpus.stats
    return CorpusStatsResponse(
        item_count=stats.item_count,
        formula=corpus.formula.name,
        max_reviews=stats.max_reviews,
        value_p85=stats.value_p85,
        high_score_threshold=stats.high_score,
        categories=list(stats.categories)
    )


@router.post("/reload", response_model=CorpusStatsResponse)
def reload_gifts(request: Request):
    """Reload the catalogue from disk and swap it in"""

    corpus = install_corpus(request.app.state)
    if corpus is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=request.app.state.corpus_error
        )

    logger.info("Gift catalogue reloaded", items=len(corpus))
    return get_stats(corpus)


@router.get("/{gift_id}", response_model=GiftRow)
def get_gift(gift_id: int, corpus: Corpus = Depends(get_corpus)):
    """Get one gift with its score breakdown"""

    item = corpus.get(gift_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gift not found"
        )

    return build_row(item, corpus.formula, corpus.stats.max_reviews, corpus.stats.thresholds())
