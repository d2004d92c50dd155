"""
Gift Ranking Engine - Main FastAPI Application

Serves a read-only gift catalogue ranked by:
- Composite quality score (rating, newness, popularity, price)
- Value-for-money index
- Popularity rating
- Analytics priority tiers
"""

from fastapi import FastAPI, status, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import settings
from .api import api_router
from .utils.dependencies import install_corpus
from .utils.logging import setup_logging, get_logger, configure_uvicorn_logging
from .utils.metrics import setup_metrics
from .utils.rate_limit import limiter

# Setup structured logging
setup_logging(log_level=settings.LOG_LEVEL)
configure_uvicorn_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""

    # Startup
    logger.info("Starting Gift Ranking Engine", version=settings.VERSION)

    corpus = install_corpus(app.state)
    if corpus is not None:
        logger.info("Gift Ranking Engine started successfully", items=len(corpus))
    else:
        logger.warning("Gift catalogue unavailable - catalogue endpoints will return 503")

    yield

    # Shutdown
    logger.info("Shutting down Gift Ranking Engine")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    # Gift Ranking Engine API

    Browse, filter and rank a gift catalogue by value for money.

    ## Metrics

    - `score`: (R×0.4 + N×0.35 + Pop×0.25) / log2(price)
    - `value`: score per 100 units of price
    - `pop_rating`: log10 interaction count mapped onto 0–5
    - `analytics_priority`: 1–5 tier from score, popularity and the corpus value percentile

    ## Sorting

    Pick a column with `sort_key` and `sort_direction`, or set `toggle` to
    `best_value` or `most_popular` to override the column sort.
    """,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "gifts", "description": "Catalogue queries, gift details and corpus statistics"},
        {"name": "taxonomy", "description": "Tag groups used for filtering"},
    ]
)

app.state.corpus = None
app.state.corpus_error = None

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Setup Prometheus metrics
setup_metrics(app)

# Include routers
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests"""
    logger.info(
        "Request received",
        method=request.method,
        url=str(request.url),
        client=request.client.host if request.client else None
    )

    response = await call_next(request)

    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code
    )

    return response


@app.get("/", tags=["root"])
def root():
    """Root endpoint"""
    return {
        "message": "Gift Ranking Engine API",
        "version": settings.VERSION,
        "docs": "/docs",
        "status": "operational"
    }


@app.get("/health", tags=["root"], status_code=status.HTTP_200_OK)
def health_check(request: Request):
    """Health check endpoint"""

    corpus = request.app.state.corpus

    return {
        "status": "healthy" if corpus is not None else "degraded",
        "corpus": "loaded" if corpus is not None else "unavailable",
        "items": len(corpus) if corpus is not None else 0,
        "version": settings.VERSION
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "giftrank.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
