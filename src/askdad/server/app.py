"""FastAPI application factory for the askdad backend."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..answers.generator import AnswerGenerator
from ..cache.store import AnswerCache
from ..cache.sweeper import CacheSweeper
from ..config import AskDadConfig, load_config
from ..errors import ConfigurationError, InputValidationError, SpeechRelayError
from ..speech.gateway import DeliveryGateway
from ..speech.relay import SpeechRelay
from .routes import router

logger = logging.getLogger(__name__)


def build_gateway(config: AskDadConfig) -> DeliveryGateway:
    relay = SpeechRelay(
        api_key=config.credentials.elevenlabs_api_key,
        voice_id=config.credentials.elevenlabs_voice_id,
        model_id=config.speech.model_id,
        base_url=config.speech.base_url,
        optimize_streaming_latency=config.speech.optimize_streaming_latency,
        timeout=config.speech.timeout_seconds,
        connect_timeout=config.speech.connect_timeout_seconds,
    )
    return DeliveryGateway(
        relay, max_chars=config.speech.max_chars, pacing=config.speech.pacing
    )


def build_generator(config: AskDadConfig) -> AnswerGenerator:
    return AnswerGenerator(
        api_key=config.credentials.openai_api_key,
        model=config.llm.model,
        timeout=config.llm.timeout_seconds,
        joke_attempts=config.llm.joke_attempts,
    )


def create_app(
    config: AskDadConfig | None = None,
    cache: AnswerCache | None = None,
    generator: AnswerGenerator | None = None,
    gateway: DeliveryGateway | None = None,
) -> FastAPI:
    """Build the askdad app.

    Collaborators not passed in are built from config. Tests pass their
    own cache (with a fake clock), generator and gateway.

    Args:
        config: Loaded configuration (defaults to load_config())
        cache: Answer cache shared by all requests
        generator: Answer generator (OpenAI)
        gateway: Delivery gateway (shaping + ElevenLabs relay)

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = load_config()
    if cache is None:
        cache = AnswerCache(ttl=timedelta(seconds=config.cache.ttl_seconds))
    if generator is None:
        generator = build_generator(config)
    if gateway is None:
        gateway = build_gateway(config)
    sweeper = CacheSweeper(cache, interval=config.cache.sweep_interval_seconds)

    if not generator.configured:
        logger.warning("OPENAI_API_KEY not set: /ask and /homework-help will fail")
    if not gateway.relay.configured:
        logger.warning("ElevenLabs credentials not set: /audio streaming will fail")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()
            await gateway.aclose()
            await generator.aclose()

    app = FastAPI(title="Ask Dad Backend", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.cache = cache
    app.state.generator = generator
    app.state.gateway = gateway
    app.state.sweeper = sweeper

    # Last added runs outermost: CORS must wrap the catch-all's 500 reply
    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"{request.method} {request.url.path} crashed")
            return JSONResponse(status_code=500, content={"error": "Server error"})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ConfigurationError)
    async def configuration_error(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        logger.error(f"Configuration error on {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"error": str(exc)})

    @app.exception_handler(SpeechRelayError)
    async def speech_relay_error(
        request: Request, exc: SpeechRelayError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=502,
            content={"error": "ElevenLabs TTS failed", "vendorStatus": exc.status_code},
        )

    @app.exception_handler(InputValidationError)
    async def input_validation_error(
        request: Request, exc: InputValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    app.include_router(router)
    return app
