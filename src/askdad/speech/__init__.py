"""Speech shaping and streaming synthesis."""

from .gateway import DeliveryGateway
from .relay import SpeechRelay, SpeechStream
from .shaping import prepare_for_speech

__all__ = ["DeliveryGateway", "SpeechRelay", "SpeechStream", "prepare_for_speech"]
