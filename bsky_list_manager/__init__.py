"""
Bluesky List Copier - Create a curated Bluesky list from the accounts another user follows
"""

from .client import BlueskyClient
from .config import Settings
from .errors import (
    BlueskyError, APIError, AuthError, FetchError,
    CreateError, AddError
)
from .manager import BlueskyListManager
from .models import FollowedProfile, RecordRef, Session
from .rate_limiter import RateLimiter

__version__ = "0.1.0"
__all__ = [
    "BlueskyClient",
    "BlueskyListManager",
    "Settings",
    "RateLimiter",
    "Session",
    "FollowedProfile",
    "RecordRef",
    "BlueskyError",
    "APIError",
    "AuthError",
    "FetchError",
    "CreateError",
    "AddError"
]
