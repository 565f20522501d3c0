"""Streaming relay to the ElevenLabs text-to-speech API."""

import logging
from collections.abc import AsyncIterator

import httpx

from ..errors import ConfigurationError, SpeechRelayError
from ..personas import VoiceSettings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"
DEFAULT_CONTENT_TYPE = "audio/mpeg"


class SpeechStream:
    """An established vendor audio stream, ready to be forwarded.

    The vendor response has already answered with a success status when
    this object exists; iter_bytes() relays the body and always closes it.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self.status_code = response.status_code
        self.content_type = response.headers.get("content-type", DEFAULT_CONTENT_TYPE)

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield audio chunks as they arrive from the vendor.

        A transport error after the first byte ends the stream quietly:
        the caller's headers are already committed, so there is nothing
        left to report to it.
        """
        sent = 0
        try:
            async for chunk in self._response.aiter_bytes():
                sent += len(chunk)
                yield chunk
        except httpx.HTTPError as e:
            logger.error(f"Speech stream broke after {sent} bytes: {e!r}")
        finally:
            await self._response.aclose()
            logger.debug(f"Speech stream closed after {sent} bytes")

    async def aclose(self) -> None:
        await self._response.aclose()


class SpeechRelay:
    """Client for the ElevenLabs streaming text-to-speech endpoint.

    Example:
        relay = SpeechRelay(api_key="...", voice_id="...")
        stream = await relay.open_stream("Step 1: ...", VoiceSettings())
        async for chunk in stream.iter_bytes():
            ...
        await relay.aclose()
    """

    def __init__(
        self,
        api_key: str | None,
        voice_id: str | None,
        model_id: str = "eleven_turbo_v2_5",
        base_url: str = DEFAULT_BASE_URL,
        optimize_streaming_latency: int = 3,
        timeout: float = 60.0,
        connect_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the relay. No connection is made until open_stream().

        Args:
            api_key: ElevenLabs API key (None reports a configuration error on use)
            voice_id: ElevenLabs voice ID (None reports a configuration error on use)
            model_id: ElevenLabs model ID to use
            base_url: ElevenLabs API base URL
            optimize_streaming_latency: Vendor latency optimization level (0-4)
            timeout: Read/write/pool timeout in seconds
            connect_timeout: Connect timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.base_url = base_url.rstrip("/")
        self.optimize_streaming_latency = optimize_streaming_latency
        self.timeout = httpx.Timeout(timeout, connect=connect_timeout)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.voice_id)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def open_stream(self, text: str, settings: VoiceSettings) -> SpeechStream:
        """Start synthesis and return once the vendor has accepted the request.

        Args:
            text: Shaped text to synthesize
            settings: Voice tuning for this delivery mode

        Returns:
            SpeechStream whose body has not been read yet

        Raises:
            ConfigurationError: If API key or voice ID is missing
            SpeechRelayError: If the request fails or the vendor rejects it
        """
        if not self.configured:
            raise ConfigurationError(
                "Missing ELEVENLABS_API_KEY or ELEVENLABS_VOICE_ID in the environment."
            )

        client = self._get_client()
        request = client.build_request(
            "POST",
            f"/text-to-speech/{self.voice_id}/stream",
            headers={
                "xi-api-key": self.api_key or "",
                "Content-Type": "application/json",
                "Accept": DEFAULT_CONTENT_TYPE,
            },
            json={
                "text": text,
                "model_id": self.model_id,
                "optimize_streaming_latency": self.optimize_streaming_latency,
                "voice_settings": settings.to_payload(),
            },
        )

        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs request failed: {e!r}")
            raise SpeechRelayError(
                f"Failed to reach ElevenLabs: {e}", original_error=e
            ) from e

        if not response.is_success:
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError:
                body = ""
            finally:
                await response.aclose()
            logger.error(f"ElevenLabs error: {response.status_code} {body[:500]}")
            raise SpeechRelayError(
                f"ElevenLabs TTS failed with status {response.status_code}",
                status_code=response.status_code,
            )

        return SpeechStream(response)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
