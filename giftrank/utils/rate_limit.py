"""Rate limiting utilities"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import settings

# In-process storage
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    storage_uri="memory://",
    strategy="fixed-window"
)
