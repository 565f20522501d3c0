"""Ephemeral answer cache for askdad."""

from .models import AnswerRecord, CacheEntry
from .store import AnswerCache, new_token, utc_now
from .sweeper import CacheSweeper

__all__ = [
    "AnswerCache",
    "AnswerRecord",
    "CacheEntry",
    "CacheSweeper",
    "new_token",
    "utc_now",
]
