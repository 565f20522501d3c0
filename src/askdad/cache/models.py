"""Data models for the answer cache."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AnswerRecord:
    """Generated answer waiting to be spoken.

    Attributes:
        text: Generated answer text
        mode: Delivery mode label selecting the persona and voice profile
        created_at: When the answer was stored
        expires_at: When the answer stops being fetchable
    """

    text: str
    mode: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class CacheEntry:
    """Token and the record it resolves to."""

    token: str
    record: AnswerRecord
