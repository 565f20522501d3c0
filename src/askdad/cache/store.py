"""In-memory answer cache keyed by opaque tokens.

Generated answers are stored once and fetched by token, possibly several
times, until their TTL runs out. Expired entries are misses even before
the periodic sweep removes them.
"""

import logging
import secrets
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from .models import AnswerRecord, CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=10)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_token() -> str:
    """Return a URL-safe token with 192 bits of randomness."""
    return secrets.token_urlsafe(24)


class AnswerCache:
    """Token to AnswerRecord table with a fixed TTL.

    All table access goes through a single lock; critical sections are
    plain dict operations, so request handlers never wait on I/O here.

    Example:
        cache = AnswerCache()
        token = cache.store("Step 1: loosen the lug nuts.", mode="coach")
        record = cache.lookup(token)  # AnswerRecord, or None once expired
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utc_now,
        token_factory: Callable[[], str] = new_token,
    ) -> None:
        """Initialize an empty cache.

        Args:
            ttl: Lifetime of each entry
            clock: Returns the current time; injectable for tests
            token_factory: Returns a fresh token candidate

        Raises:
            ValueError: If ttl is not positive
        """
        if ttl <= timedelta(0):
            raise ValueError(f"ttl must be positive, got {ttl}")

        self.ttl = ttl
        self._clock = clock
        self._token_factory = token_factory
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def store(self, text: str, mode: str = "default") -> str:
        """Store generated text and return the token that resolves to it."""
        now = self._clock()
        record = AnswerRecord(
            text=text, mode=mode, created_at=now, expires_at=now + self.ttl
        )
        return self.store_record(record)

    def store_record(self, record: AnswerRecord) -> str:
        """Insert an already-built record under a fresh token."""
        with self._lock:
            token = self._token_factory()
            while token in self._entries:
                token = self._token_factory()
            self._entries[token] = CacheEntry(token=token, record=record)

        logger.debug(f"Stored answer {token[:6]}... (mode={record.mode})")
        return token

    def lookup(self, token: str) -> AnswerRecord | None:
        """Return the record for token, or None if unknown or expired."""
        with self._lock:
            entry = self._entries.get(token)

        if entry is None or entry.record.is_expired(self._clock()):
            return None
        return entry.record

    def sweep(self, now: datetime | None = None) -> int:
        """Remove every entry whose expiry is at or before now.

        Returns:
            Number of entries removed
        """
        now = now or self._clock()
        with self._lock:
            expired = [
                token
                for token, entry in self._entries.items()
                if entry.record.expires_at <= now
            ]
            for token in expired:
                del self._entries[token]

        if expired:
            logger.debug(f"Swept {len(expired)} expired answers")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._entries
