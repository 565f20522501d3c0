"""Delivery gateway: from a cached answer to a streaming audio response."""

import logging

from ..cache.models import AnswerRecord
from ..personas import VoiceSettings, resolve_persona
from .relay import SpeechRelay, SpeechStream
from .shaping import DEFAULT_MAX_CHARS, prepare_for_speech

logger = logging.getLogger(__name__)


class DeliveryGateway:
    """Shapes an answer for its persona and opens the vendor speech stream."""

    def __init__(
        self,
        relay: SpeechRelay,
        max_chars: int = DEFAULT_MAX_CHARS,
        pacing: bool = True,
    ) -> None:
        self.relay = relay
        self.max_chars = max_chars
        self.pacing = pacing

    def prepare(self, record: AnswerRecord) -> tuple[str, VoiceSettings]:
        """Return the shaped text and voice settings for record."""
        persona = resolve_persona(record.mode)
        shaped = prepare_for_speech(
            record.text,
            max_chars=self.max_chars,
            pacing=self.pacing,
            step_style=persona.step_style,
        )
        return shaped, persona.voice

    async def open_stream(self, record: AnswerRecord) -> SpeechStream:
        """Start streaming speech for record.

        Raises:
            ConfigurationError: If speech credentials are missing
            SpeechRelayError: If the vendor stream cannot be established
        """
        shaped, settings = self.prepare(record)
        logger.info(f"Streaming speech ({len(shaped)} chars, mode={record.mode})")
        return await self.relay.open_stream(shaped, settings)

    async def aclose(self) -> None:
        await self.relay.aclose()
