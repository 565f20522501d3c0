"""Unit tests for the ElevenLabs voice catalog."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from askdad.errors import ConfigurationError, SpeechRelayError
from askdad.speech.voices import VoiceInfo, list_voices


class TestVoiceInfo:
    """Test VoiceInfo validation."""

    def test_empty_voice_id_rejected(self) -> None:
        """Test that an empty voice_id raises ValueError."""
        with pytest.raises(ValueError, match="voice_id cannot be empty"):
            VoiceInfo(voice_id=" ", name="Dad")

    def test_empty_name_rejected(self) -> None:
        """Test that an empty name raises ValueError."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            VoiceInfo(voice_id="v1", name="")


class TestListVoices:
    """Test list_voices error handling."""

    @pytest.mark.asyncio
    async def test_no_api_key(self) -> None:
        """Test that a missing key raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="ElevenLabs API key not found"):
            await list_voices()

    @pytest.mark.asyncio
    async def test_returns_voice_infos(self) -> None:
        """Test that SDK voices are converted to VoiceInfo."""
        client = MagicMock()
        client.voices.get_all.return_value = SimpleNamespace(
            voices=[SimpleNamespace(voice_id="v1", name="Dad", category="premade")]
        )

        with patch("askdad.speech.voices.ElevenLabs", return_value=client) as sdk:
            voices = await list_voices(api_key="test_key")

        sdk.assert_called_once_with(api_key="test_key")
        assert voices == [VoiceInfo(voice_id="v1", name="Dad", category="premade")]

    @pytest.mark.asyncio
    async def test_sdk_failure_wrapped(self) -> None:
        """Test that SDK errors become SpeechRelayError."""
        client = MagicMock()
        client.voices.get_all.side_effect = Exception("401 Unauthorized")

        with patch("askdad.speech.voices.ElevenLabs", return_value=client):
            with pytest.raises(SpeechRelayError, match="Failed to list voices"):
                await list_voices(api_key="bad_key")
