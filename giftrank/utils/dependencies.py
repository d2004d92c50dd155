"""Catalogue dependencies for FastAPI"""

from fastapi import HTTPException, Request, status
from typing import Optional

from ..errors import CorpusLoadError
from ..services.corpus import Corpus, load_corpus
from .logging import get_logger
from .metrics import record_corpus_load

logger = get_logger(__name__)


def install_corpus(state, path: Optional[str] = None) -> Optional[Corpus]:
    """
    Load the catalogue and publish it on the application state

    The previous snapshot stays in place when loading fails, so queries never
    see a partially loaded catalogue.

    Args:
        state: FastAPI application state
        path: Catalogue file; defaults to settings.CORPUS_PATH

    Returns:
        The new corpus, or None if loading failed
    """
    try:
        corpus = load_corpus(path)
    except CorpusLoadError as e:
        logger.error("Gift catalogue load failed", error=str(e), path=e.path)
        record_corpus_load(False)
        state.corpus_error = str(e)
        return None

    state.corpus = corpus
    state.corpus_error = None
    record_corpus_load(True, len(corpus))
    return corpus


def get_corpus(request: Request) -> Corpus:
    """
    Current catalogue snapshot

    Raises:
        HTTPException: 503 if no catalogue has been loaded
    """
    corpus = getattr(request.app.state, "corpus", None)
    if corpus is None:
        detail = getattr(request.app.state, "corpus_error", None) or "Gift catalogue not loaded"
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail
        )

    return corpus
