"""Prometheus metrics configuration"""

from prometheus_client import Counter, Histogram, Gauge, Info
from prometheus_fastapi_instrumentator import Instrumentator
from typing import Callable
import time
from functools import wraps

from ..config import settings

# Application info
app_info = Info('giftrank', 'Gift Ranking Engine Information')
app_info.info({
    'version': settings.VERSION,
    'service': 'giftrank'
})

# Query metrics
gift_queries_total = Counter(
    'gift_queries_total',
    'Total catalogue queries',
    ['sort_key']
)

gift_query_duration_seconds = Histogram(
    'gift_query_duration_seconds',
    'Time taken to build, filter and sort the catalogue'
)

gift_query_results = Histogram(
    'gift_query_results',
    'Rows returned per catalogue query',
    buckets=(0, 1, 5, 10, 25, 50, 100, 250, 500, 1000)
)

# Corpus metrics
corpus_items_gauge = Gauge(
    'corpus_items',
    'Number of gifts in the loaded catalogue'
)

corpus_loads_total = Counter(
    'corpus_loads_total',
    'Catalogue load attempts',
    ['status']
)


def setup_metrics(app):
    """
    Setup Prometheus metrics for FastAPI app

    Args:
        app: FastAPI application instance
    """
    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics"],
        env_var_name="ENABLE_METRICS",
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True
    )

    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    return instrumentator


def track_query_time(func: Callable):
    """
    Decorator to track catalogue query time

    Usage:
        @track_query_time
        def execute_query():
            pass
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            return func(*args, **kwargs)
        finally:
            gift_query_duration_seconds.observe(time.time() - start_time)

    return wrapper


def record_query(sort_key: str, result_count: int):
    """Record a completed catalogue query"""
    gift_queries_total.labels(sort_key=sort_key).inc()
    gift_query_results.observe(result_count)


def record_corpus_load(success: bool, item_count: int = 0):
    """Record a catalogue load attempt"""
    corpus_loads_total.labels(status="success" if success else "failure").inc()
    if success:
        corpus_items_gauge.set(item_count)
