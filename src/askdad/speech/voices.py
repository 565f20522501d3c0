"""ElevenLabs voice catalog, used to pick ELEVENLABS_VOICE_ID."""

import asyncio
import os
from dataclasses import dataclass

from elevenlabs.client import ElevenLabs

from ..errors import ConfigurationError, SpeechRelayError


@dataclass
class VoiceInfo:
    """Information about an available voice.

    Args:
        voice_id: Unique identifier for the voice
        name: Human-readable name of the voice
        category: Optional voice category (e.g., "premade", "cloned")
    """

    voice_id: str
    name: str
    category: str | None = None

    def __post_init__(self) -> None:
        """Validate voice information."""
        if not self.voice_id or not self.voice_id.strip():
            raise ValueError("voice_id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("name cannot be empty")


async def list_voices(api_key: str | None = None) -> list[VoiceInfo]:
    """Get the voices available to the configured ElevenLabs account.

    Args:
        api_key: ElevenLabs API key. If not provided, reads from
                ELEVENLABS_API_KEY environment variable.

    Returns:
        List of VoiceInfo objects

    Raises:
        ConfigurationError: If no API key is available
        SpeechRelayError: If the API call fails
    """
    api_key = api_key or os.getenv("ELEVENLABS_API_KEY")
    if not api_key:
        raise ConfigurationError(
            "ElevenLabs API key not found. Set ELEVENLABS_API_KEY environment variable."
        )

    # Run synchronous voice listing in thread
    def _sync_get_voices() -> list[VoiceInfo]:
        client = ElevenLabs(api_key=api_key)
        response = client.voices.get_all()
        return [
            VoiceInfo(
                voice_id=voice.voice_id,
                name=voice.name,
                category=getattr(voice, "category", None),
            )
            for voice in response.voices
        ]

    try:
        return await asyncio.to_thread(_sync_get_voices)
    except Exception as e:
        raise SpeechRelayError(f"Failed to list voices: {e}", original_error=e) from e
