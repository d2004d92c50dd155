import pytest
import structlog


@pytest.fixture(autouse=True)
def _restore_structlog_config():
    """Undo structlog configuration bound to a test's captured (later closed) stream"""
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)
