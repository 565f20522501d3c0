"""Pytest configuration and fixtures for askdad tests."""

import dataclasses
import json
import sys
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from askdad.answers.generator import AnswerGenerator
from askdad.cache.store import AnswerCache
from askdad.config import AskDadConfig, load_config
from askdad.speech.gateway import DeliveryGateway
from askdad.speech.relay import SpeechRelay

FAKE_AUDIO = b"ID3" + b"\x00" * 64 + b"fake-mpeg-frames"


class FakeClock:
    """Manually advanced clock for deterministic expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def completion(text: str | None) -> SimpleNamespace:
    """Build an object shaped like an OpenAI chat completion response."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))]
    )


def mock_openai_client(*texts: str | None) -> MagicMock:
    """Return a mock AsyncOpenAI client answering with texts in order.

    With a single text, every call returns it.
    """
    client = MagicMock()
    if len(texts) == 1:
        client.chat.completions.create = AsyncMock(return_value=completion(texts[0]))
    else:
        client.chat.completions.create = AsyncMock(
            side_effect=[completion(text) for text in texts]
        )
    return client


class AudioVendor:
    """httpx.MockTransport handler standing in for the ElevenLabs API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: (
            httpx.Response(
                200, headers={"content-type": "audio/mpeg"}, content=FAKE_AUDIO
            )
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    """Keep real credentials and overrides out of every test."""
    for name in (
        "OPENAI_API_KEY",
        "ELEVENLABS_API_KEY",
        "ELEVENLABS_VOICE_ID",
        "ASKDAD_HOST",
        "ASKDAD_PORT",
        "PORT",
        "ASKDAD_PUBLIC_URL",
        "ASKDAD_CACHE_TTL",
        "ASKDAD_SWEEP_INTERVAL",
        "ASKDAD_LLM_MODEL",
        "ASKDAD_SPEECH_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> AnswerCache:
    return AnswerCache(ttl=timedelta(minutes=10), clock=clock)


@pytest.fixture
def audio_vendor() -> AudioVendor:
    return AudioVendor()


@pytest.fixture
def relay(audio_vendor: AudioVendor) -> SpeechRelay:
    return SpeechRelay(
        api_key="test_eleven_key",
        voice_id="voice123",
        transport=httpx.MockTransport(audio_vendor),
    )


@pytest.fixture
def gateway(relay: SpeechRelay) -> DeliveryGateway:
    return DeliveryGateway(relay)


@pytest.fixture
def app_config(tmp_path) -> AskDadConfig:
    """Default config with a fixed public URL and credentials present."""
    config = load_config(tmp_path / "config.toml")
    return dataclasses.replace(
        config,
        server=dataclasses.replace(config.server, public_url="https://askdad.test"),
        credentials=dataclasses.replace(
            config.credentials,
            openai_api_key="test_openai_key",
            elevenlabs_api_key="test_eleven_key",
            elevenlabs_voice_id="voice123",
        ),
    )


@pytest.fixture
def generator() -> AnswerGenerator:
    client = mock_openai_client(
        "Hey champ, you've got this!\n"
        "1. Loosen the lug nuts.\n"
        "2. Jack up the car.\n"
        "3. Swap the tire and tighten.\n"
        "Proud of you."
    )
    return AnswerGenerator(client=client)


@pytest.fixture
def make_openai_client() -> Callable[..., MagicMock]:
    return mock_openai_client


@pytest.fixture
def fake_audio() -> bytes:
    return FAKE_AUDIO
