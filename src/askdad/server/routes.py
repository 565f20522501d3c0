"""HTTP routes for asking Dad and streaming the spoken answer."""

import logging
import platform

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from ..answers.generator import AnswerGenerator
from ..cache.store import AnswerCache
from ..config import AskDadConfig
from ..errors import InputValidationError
from ..personas import HOMEWORK_MODE, JOKE_MODE, normalize_mode
from ..speech.gateway import DeliveryGateway
from .schemas import (
    AnswerResponse,
    AskRequest,
    CreateAudioRequest,
    CreateAudioResponse,
    HomeworkRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_config(request: Request) -> AskDadConfig:
    return request.app.state.config


def get_cache(request: Request) -> AnswerCache:
    return request.app.state.cache


def get_generator(request: Request) -> AnswerGenerator:
    return request.app.state.generator


def get_gateway(request: Request) -> DeliveryGateway:
    return request.app.state.gateway


def build_audio_url(request: Request, token: str) -> str:
    """Return the fully-qualified URL that streams audio for token."""
    public_url = request.app.state.config.server.public_url
    if public_url:
        return f"{public_url}/audio/{token}"
    return str(request.url_for("stream_audio", token=token))


@router.get("/")
async def root() -> dict:
    return {"message": "Ask Dad backend alive", "status": "running"}


@router.get("/health")
async def health() -> dict:
    return {"ok": True}


@router.get("/debug-env")
async def debug_env(config: AskDadConfig = Depends(get_config)) -> dict:
    credentials = config.credentials
    return {
        "hasOpenAI": bool(credentials.openai_api_key),
        "hasElevenKey": bool(credentials.elevenlabs_api_key),
        "hasElevenVoice": bool(credentials.elevenlabs_voice_id),
        "python": platform.python_version(),
    }


@router.post("/ask", response_model=AnswerResponse)
async def ask(
    body: AskRequest,
    request: Request,
    cache: AnswerCache = Depends(get_cache),
    generator: AnswerGenerator = Depends(get_generator),
) -> AnswerResponse:
    mode = normalize_mode(body.mode)
    logger.info(f"/ask received (mode={mode}, history={len(body.history)})")

    if mode != JOKE_MODE and not body.question.strip():
        raise InputValidationError("Missing question")

    answer = await generator.answer(body.question, mode=mode, history=body.history)
    token = cache.store(answer, mode=mode)
    return AnswerResponse(answer=answer, audio_url=build_audio_url(request, token))


@router.post("/homework-help", response_model=AnswerResponse)
async def homework_help(
    body: HomeworkRequest,
    request: Request,
    config: AskDadConfig = Depends(get_config),
    cache: AnswerCache = Depends(get_cache),
    generator: AnswerGenerator = Depends(get_generator),
) -> AnswerResponse:
    question = (body.question or "").strip()
    image = (body.image_base64 or "").strip()
    logger.info(f"/homework-help received (image={len(image)} chars)")

    max_image = config.homework.max_image_bytes
    if len(image) > max_image:
        raise InputValidationError(
            f"Image too large: {len(image)} bytes encoded, limit is {max_image}.",
            status_code=413,
        )
    if not question and not image:
        raise InputValidationError("Send a question, a photo, or both.")

    answer = await generator.homework(question or None, image or None)
    token = cache.store(answer, mode=HOMEWORK_MODE)
    return AnswerResponse(answer=answer, audio_url=build_audio_url(request, token))


@router.post("/audio", response_model=CreateAudioResponse)
async def create_audio(
    body: CreateAudioRequest,
    request: Request,
    cache: AnswerCache = Depends(get_cache),
) -> CreateAudioResponse:
    if not body.text.strip():
        raise InputValidationError("Missing text")

    token = cache.store(body.text, mode=normalize_mode(body.mode))
    return CreateAudioResponse(
        token=token, audio_url=build_audio_url(request, token)
    )


@router.get("/audio/{token}", name="stream_audio")
async def stream_audio(
    token: str,
    cache: AnswerCache = Depends(get_cache),
    gateway: DeliveryGateway = Depends(get_gateway),
):
    record = cache.lookup(token)
    if record is None:
        return JSONResponse(
            status_code=404, content={"error": "Audio expired or not found."}
        )

    stream = await gateway.open_stream(record)
    return StreamingResponse(
        stream.iter_bytes(),
        media_type=stream.content_type,
        headers={"Cache-Control": "no-store"},
        background=BackgroundTask(stream.aclose),
    )
