"""Editable surface -> Document."""

from .encoder import Encoder, encode
from .marks import MarkResolver
from .special import SpecialBlockDetector, escape_payload, unescape_payload

__all__ = [
    "Encoder",
    "encode",
    "MarkResolver",
    "SpecialBlockDetector",
    "escape_payload",
    "unescape_payload",
]
