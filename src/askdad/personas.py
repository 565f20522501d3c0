"""Delivery modes: prompt style and voice tuning per persona.

Each mode maps to one Persona record. Request assembly and the speech
relay look personas up here instead of branching on the mode themselves.
"""

from dataclasses import dataclass
from typing import Any, Literal

StepStyle = Literal["step", "ordinal"]

DEFAULT_MODE = "default"
JOKE_MODE = "dadjokes"
HOMEWORK_MODE = "homework"


@dataclass(frozen=True)
class VoiceSettings:
    """ElevenLabs voice generation settings.

    Args:
        stability: Voice stability (0.0-1.0)
        similarity_boost: Voice similarity boost (0.0-1.0)
        style: Voice style exaggeration (0.0-1.0)
        use_speaker_boost: Whether to use speaker boost
    """

    stability: float = 0.3
    similarity_boost: float = 0.88
    style: float = 0.45
    use_speaker_boost: bool = True

    def __post_init__(self) -> None:
        """Validate voice settings."""
        if not 0.0 <= self.stability <= 1.0:
            raise ValueError("stability must be between 0.0 and 1.0")
        if not 0.0 <= self.similarity_boost <= 1.0:
            raise ValueError("similarity_boost must be between 0.0 and 1.0")
        if not 0.0 <= self.style <= 1.0:
            raise ValueError("style must be between 0.0 and 1.0")

    def to_payload(self) -> dict[str, Any]:
        return {
            "stability": self.stability,
            "similarity_boost": self.similarity_boost,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost,
        }


@dataclass(frozen=True)
class Persona:
    """Everything that varies by delivery mode."""

    name: str
    system_prompt: str
    voice: VoiceSettings
    temperature: float = 0.8
    step_style: StepStyle = "step"


PERSONAS: dict[str, Persona] = {
    DEFAULT_MODE: Persona(
        name=DEFAULT_MODE,
        system_prompt=(
            'You are "Ask Dad": supportive, practical, step-by-step, '
            "warm and slightly funny."
        ),
        voice=VoiceSettings(stability=0.3, similarity_boost=0.88, style=0.45),
    ),
    "coach": Persona(
        name="coach",
        system_prompt=(
            'You are "Dad Coach": upbeat, direct, motivating, short steps, '
            "confidence-building. No fluff."
        ),
        voice=VoiceSettings(stability=0.28, similarity_boost=0.85, style=0.55),
    ),
    "soft": Persona(
        name="soft",
        system_prompt=(
            'You are "Soft Dad": warm, reassuring, patient, gentle humor, '
            "helps regulate emotions, small steps."
        ),
        voice=VoiceSettings(stability=0.35, similarity_boost=0.9, style=0.35),
    ),
    "tough": Persona(
        name="tough",
        system_prompt=(
            'You are "No-Nonsense Dad": practical, blunt (not rude), safety-first, '
            "step-by-step, checks for tools/materials."
        ),
        voice=VoiceSettings(stability=0.4, similarity_boost=0.88, style=0.25),
    ),
    "funny": Persona(
        name="funny",
        system_prompt=(
            'You are "Goofy Dad": playful, corny jokes sprinkled in, '
            "still helpful and step-by-step."
        ),
        voice=VoiceSettings(stability=0.25, similarity_boost=0.82, style=0.65),
    ),
    JOKE_MODE: Persona(
        name=JOKE_MODE,
        system_prompt=(
            "You only tell ONE original dad joke per request. "
            "Must be new, not a classic from a known list. Short."
        ),
        voice=VoiceSettings(stability=0.22, similarity_boost=0.8, style=0.75),
        temperature=1.1,
    ),
    HOMEWORK_MODE: Persona(
        name=HOMEWORK_MODE,
        system_prompt=(
            'You are "Homework Dad": a patient tutor. Explain how to solve the '
            "problem one step at a time, check the work, and make sure the kid "
            "understands why each step works instead of just handing over the answer."
        ),
        voice=VoiceSettings(stability=0.45, similarity_boost=0.88, style=0.3),
        temperature=0.4,
        step_style="ordinal",
    ),
}

MODE_ALIASES = {"joke": JOKE_MODE, "jokes": JOKE_MODE}


def normalize_mode(mode: str | None) -> str:
    """Map a client-supplied mode label to a known persona key."""
    key = (mode or "").strip().lower()
    key = MODE_ALIASES.get(key, key)
    return key if key in PERSONAS else DEFAULT_MODE


def resolve_persona(mode: str | None) -> Persona:
    """Return the persona for mode, falling back to the default persona."""
    return PERSONAS[normalize_mode(mode)]


def resolve_voice_profile(mode: str | None) -> VoiceSettings:
    """Return the voice tuning for mode, falling back to the default profile."""
    return resolve_persona(mode).voice
