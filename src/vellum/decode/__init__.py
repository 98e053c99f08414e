"""Inline micro-syntax -> render nodes."""

from .inline import decode, decode_span, parse

__all__ = ["decode", "decode_span", "parse"]
