"""Text shaping for speech synthesis.

Generated answers are written to be read. prepare_for_speech rewrites
them to be heard: symbols become words, list markers become spoken
transitions, and optional "..." pauses slow the synthesized cadence.
Every step is a pure string transform, and running it on already-shaped
text changes nothing.
"""

import re

from ..personas import StepStyle

DEFAULT_MAX_CHARS = 1600
PAUSE = "..."
TRUNCATION_SUFFIX = " ..."

_EMOJI = re.compile(
    "["
    "\U0001f000-\U0001faff"
    "\u2600-\u27bf"
    "\ue000-\uf8ff"
    "\ufe0f\u200d"
    "]"
)

_BOLD = re.compile(r"(\*\*|__)(.+?)\1")
_ITALIC = re.compile(r"(?<![\w*])\*(?!\s)([^*\n]+?)(?<!\s)\*(?![\w*])")
_UNDERSCORE_ITALIC = re.compile(r"(?<!\w)_(?!\s)([^_\n]+?)(?<!\s)_(?!\w)")
_HEADING = re.compile(r"(?m)^[ \t]*#{1,6}[ \t]+")
_BACKTICKS = re.compile(r"`+")

_BLANK_LINES = re.compile(r"\n[ \t]*(?:\n[ \t]*)+")
_NUMBERED_ITEM = re.compile(r"(?m)^[ \t]*(\d+)[.)][ \t]+")
_BULLET_ITEM = re.compile(r"(?m)^[ \t]*[-*•][ \t]+")

_SPACED_MINUS = re.compile(r"(?<=\d)[ \t]+-[ \t]+(?=\d)")
_DIGIT_TIMES = re.compile(r"(?<=\d)[ \t]*\*[ \t]*(?=\d)")
_DIGIT_OVER = re.compile(r"(?<=\d)[ \t]*/[ \t]*(?=\d)")

SPOKEN_SYMBOLS = {
    "<=": "is less than or equal to",
    ">=": "is greater than or equal to",
    "!=": "does not equal",
    "≠": "does not equal",
    "≈": "is about",
    "≤": "is less than or equal to",
    "≥": "is greater than or equal to",
    "=": "equals",
    "+": "plus",
    "±": "plus or minus",
    "−": "minus",
    "×": "times",
    "÷": "divided by",
    "%": "percent",
    "<": "is less than",
    ">": "is greater than",
    "√": "square root of",
    "^": "to the power of",
    "π": "pi",
    "°": "degrees",
    "&": "and",
}
_SYMBOL = re.compile(
    "|".join(re.escape(s) for s in sorted(SPOKEN_SYMBOLS, key=len, reverse=True))
)

_SPACES = re.compile(r"[ \t]+")
_SPACES_AROUND_NEWLINE = re.compile(r"[ \t]*\n[ \t]*")

_CONJUNCTION = re.compile(r"(?<!\.\.\.) +(and|but|so)(?= )", re.IGNORECASE)
_SENTENCE_END = re.compile(r"(?<!\.)([.!?])(?!\.) +(?!\.\.\.)")
_NEWLINES = re.compile(r" *\n+ *")

ORDINALS = (
    "First",
    "Second",
    "Third",
    "Fourth",
    "Fifth",
    "Sixth",
    "Seventh",
    "Eighth",
    "Ninth",
    "Tenth",
)


def strip_markup(text: str) -> str:
    """Remove emoji and markdown emphasis that TTS would read aloud."""
    text = _EMOJI.sub("", text)
    text = _BOLD.sub(r"\2", text)
    text = _ITALIC.sub(r"\1", text)
    text = _UNDERSCORE_ITALIC.sub(r"\1", text)
    text = _HEADING.sub("", text)
    return _BACKTICKS.sub("", text)


def spoken_transition(number: int, step_style: StepStyle = "step") -> str:
    """Return the phrase that replaces list item `number`."""
    if step_style == "ordinal" and 1 <= number <= len(ORDINALS):
        return f"{ORDINALS[number - 1]}:"
    return f"Step {number}:"


def convert_list_markers(text: str, step_style: StepStyle = "step") -> str:
    text = _NUMBERED_ITEM.sub(
        lambda m: spoken_transition(int(m.group(1)), step_style) + " ", text
    )
    return _BULLET_ITEM.sub("", text)


def speak_symbols(text: str) -> str:
    """Replace math and symbol characters with spoken words."""
    text = _SPACED_MINUS.sub(" minus ", text)
    text = _DIGIT_TIMES.sub(" times ", text)
    text = _DIGIT_OVER.sub(" over ", text)
    text = _SYMBOL.sub(lambda m: f" {SPOKEN_SYMBOLS[m.group(0)]} ", text)
    return text.replace("*", "")


def normalize_whitespace(text: str) -> str:
    text = text.replace("\r", "")
    text = _BLANK_LINES.sub("\n", text)
    text = _SPACES.sub(" ", text)
    return _SPACES_AROUND_NEWLINE.sub("\n", text).strip()


def add_pacing(text: str) -> str:
    """Insert pause markers around conjunctions, sentence ends and line breaks."""
    text = _CONJUNCTION.sub(rf" {PAUSE} \1", text)
    text = _SENTENCE_END.sub(rf"\1 {PAUSE} ", text)
    text = _NEWLINES.sub(f" {PAUSE} ", text)
    return _SPACES.sub(" ", text).strip()


def truncate(text: str, max_chars: int) -> str:
    """Cut text to at most max_chars, marking the cut with a trailing pause."""
    if len(text) <= max_chars:
        return text
    if max_chars <= len(TRUNCATION_SUFFIX):
        return text[:max_chars]
    return text[: max_chars - len(TRUNCATION_SUFFIX)].rstrip() + TRUNCATION_SUFFIX


def prepare_for_speech(
    text: str,
    *,
    max_chars: int = DEFAULT_MAX_CHARS,
    pacing: bool = True,
    step_style: StepStyle = "step",
) -> str:
    """Shape generated text for speech synthesis.

    Args:
        text: Generated answer text
        max_chars: Upper bound on the returned length
        pacing: Insert "..." pauses to slow the synthesized cadence
        step_style: "step" renders list items as "Step 1:", "ordinal" as "First:"

    Returns:
        Shaped text, never longer than max_chars

    Raises:
        ValueError: If max_chars is less than 1
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be at least 1, got {max_chars}")

    shaped = strip_markup(text or "")
    shaped = normalize_whitespace(shaped)
    shaped = convert_list_markers(shaped, step_style)
    shaped = speak_symbols(shaped)
    shaped = normalize_whitespace(shaped)

    if pacing:
        shaped = add_pacing(shaped)
    else:
        shaped = shaped.replace("\n", " ")

    return truncate(shaped, max_chars)
