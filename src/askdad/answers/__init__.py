"""Answer generation for askdad."""

from .generator import AnswerGenerator, is_repeated_joke, normalize_joke

__all__ = ["AnswerGenerator", "is_repeated_joke", "normalize_joke"]
