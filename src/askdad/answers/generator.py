"""Answer generation through the OpenAI chat completions API."""

import logging
import re
from typing import Any

import openai
from openai import AsyncOpenAI

from ..errors import ConfigurationError, GenerationError
from ..personas import HOMEWORK_MODE, JOKE_MODE, normalize_mode, resolve_persona

logger = logging.getLogger(__name__)

BUSY_FALLBACK = "Dad brain is busy right now. Try again in a minute."
BLANK_FALLBACK = "…Dad blanked. Try again."
JOKE_FALLBACK = "I'd tell you a new one… but my joke drawer's stuck. Try again."

JOKE_HISTORY_LIMIT = 15

ANSWER_INSTRUCTIONS = (
    "Answer like Dad:\n"
    "- 1 short warm opener\n"
    "- then numbered steps\n"
    "- then 1 encouraging line\n"
    "- keep it concise\n"
)

JOKE_INSTRUCTIONS = (
    "Create ONE brand-new dad joke.\n"
    "Rules:\n"
    "- Not a famous classic.\n"
    "- One-liner or two short lines max.\n"
    '- No preface like "Sure!"\n'
    "- No quotes.\n"
)

JOKE_RETRY_INSTRUCTION = (
    "Your last joke matched the recent list. Generate a completely different "
    "one with a different setup/punchline."
)

HOMEWORK_INSTRUCTIONS = (
    "Help with this homework like Dad:\n"
    "- say what the problem is asking\n"
    "- then numbered steps, one idea each\n"
    "- then check the answer\n"
    "- keep it short enough to listen to\n"
)

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[^\w\s]")


def normalize_joke(text: str | None) -> str:
    """Case-fold and strip punctuation so near-identical jokes compare equal."""
    text = _WHITESPACE.sub(" ", str(text or "").lower())
    return _PUNCTUATION.sub("", text).strip()


def is_repeated_joke(joke: str, history: list[str] | None = None) -> bool:
    normalized = normalize_joke(joke)
    return any(normalize_joke(previous) == normalized for previous in history or [])


def image_data_url(image_base64: str) -> str:
    """Wrap raw base64 image data in a data: URL, leaving data URLs untouched."""
    payload = image_base64.strip()
    if payload.startswith("data:"):
        return payload
    return f"data:image/jpeg;base64,{payload}"


class AnswerGenerator:
    """Generates persona answers, jokes and homework help.

    Upstream failures never reach the caller as errors: they become a
    warm in-persona fallback line. A missing API key is the exception and
    raises ConfigurationError before any request is made.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4.1-mini",
        timeout: float = 30.0,
        joke_attempts: int = 3,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            api_key: OpenAI API key. Without it (and without client) every
                    call raises ConfigurationError.
            model: Chat completion model
            timeout: Request timeout in seconds
            joke_attempts: Attempts to find a joke outside the history
            client: Pre-built client (tests inject a mock here)
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.joke_attempts = joke_attempts
        self._client = client
        self._owns_client = client is None

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError(
                    "Backend missing OPENAI_API_KEY. Add it to the environment."
                )
            self._client = AsyncOpenAI(
                api_key=self.api_key, timeout=self.timeout, max_retries=0
            )
        return self._client

    async def _complete(
        self, messages: list[dict[str, Any]], temperature: float
    ) -> str:
        """Run one chat completion and return its text.

        Raises:
            ConfigurationError: If no API key is configured
            GenerationError: If the API call fails
        """
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                messages=messages,
            )
        except openai.APIStatusError as e:
            logger.error(f"OpenAI error: {e.status_code} {e.message}")
            raise GenerationError(
                f"OpenAI request failed: {e.message}",
                status_code=e.status_code,
                original_error=e,
            ) from e
        except openai.OpenAIError as e:
            logger.error(f"OpenAI request failed: {e!r}")
            raise GenerationError(
                f"OpenAI request failed: {e}", original_error=e
            ) from e

        choices = response.choices or []
        text = choices[0].message.content if choices else None
        return (text or "").strip() or BLANK_FALLBACK

    async def answer(
        self,
        question: str,
        mode: str | None = None,
        history: list[str] | None = None,
    ) -> str:
        """Answer a question in the persona selected by mode.

        In joke mode, history is the caller's list of recent jokes to avoid.
        """
        mode = normalize_mode(mode)
        if mode == JOKE_MODE:
            return await self.joke(history or [])

        persona = resolve_persona(mode)
        messages = [
            {"role": "system", "content": persona.system_prompt},
            {
                "role": "user",
                "content": f"Question: {question}\n\n{ANSWER_INSTRUCTIONS}",
            },
        ]
        try:
            return await self._complete(messages, persona.temperature)
        except GenerationError:
            return BUSY_FALLBACK

    async def joke(self, history: list[str]) -> str:
        """Tell a dad joke that is not in history.

        Retries with an amended instruction on a repeat, and falls back to
        a canned line once the attempt budget is spent.
        """
        persona = resolve_persona(JOKE_MODE)
        recent = [joke for joke in history if joke][-JOKE_HISTORY_LIMIT:]

        messages: list[dict[str, Any]] = [
            {"role": "system", "content": persona.system_prompt}
        ]
        if recent:
            avoid = "\n- ".join(recent)
            messages.append(
                {
                    "role": "system",
                    "content": f"Avoid repeating any of these recent jokes:\n- {avoid}",
                }
            )
        messages.append({"role": "user", "content": JOKE_INSTRUCTIONS})

        for attempt in range(1, self.joke_attempts + 1):
            try:
                joke = await self._complete(list(messages), persona.temperature)
            except GenerationError:
                return BUSY_FALLBACK

            if not is_repeated_joke(joke, history):
                return joke

            logger.info(f"Joke attempt {attempt} repeated history, retrying")
            messages.append({"role": "system", "content": JOKE_RETRY_INSTRUCTION})

        return JOKE_FALLBACK

    async def homework(
        self, question: str | None = None, image_base64: str | None = None
    ) -> str:
        """Walk through a homework problem given as text, a photo, or both."""
        persona = resolve_persona(HOMEWORK_MODE)
        prompt = f"Question: {question}\n\n" if question else ""
        if image_base64:
            prompt += "The problem is in the attached photo.\n\n"
        prompt += HOMEWORK_INSTRUCTIONS

        content: str | list[dict[str, Any]] = prompt
        if image_base64:
            content = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": image_data_url(image_base64)},
                },
            ]

        messages = [
            {"role": "system", "content": persona.system_prompt},
            {"role": "user", "content": content},
        ]
        try:
            return await self._complete(messages, persona.temperature)
        except GenerationError:
            return BUSY_FALLBACK

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None
