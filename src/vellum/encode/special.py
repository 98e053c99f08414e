"""Recognize container elements that carry special-purpose markers."""

from __future__ import annotations

import logging
from urllib.parse import quote, unquote

from ..core.model import Block, ButtonBlock, CodeBlock, FileBlock, ImageBlock
from ..core.ports import KeyGenerator
from ..core.surface import ElementNode

logger = logging.getLogger(__name__)

SNIPPET_ATTR = "data-snippet"
MARKUP_ATTR = "data-markup"
FILE_URL_ATTR = "data-file-url"
FILE_NAME_ATTR = "data-file-name"
FILE_SIZE_ATTR = "data-file-size"
BUTTON_URL_ATTR = "data-button-url"
ASSET_ATTR = "data-asset-ref"

MARKER_ATTRS = (
    SNIPPET_ATTR,
    MARKUP_ATTR,
    FILE_URL_ATTR,
    BUTTON_URL_ATTR,
    ASSET_ATTR,
)


def escape_payload(payload: str) -> str:
    """Escape a code payload for storage in an attribute value."""
    return quote(payload, safe="")


def unescape_payload(value: str) -> str:
    return unquote(value)


class SpecialBlockDetector:
    def __init__(self, keys: KeyGenerator):
        self.keys = keys

    def detect(self, el: ElementNode) -> Block | None:
        """Return the dedicated block for a marked container, or None."""
        if el.get(SNIPPET_ATTR) is not None:
            return CodeBlock(
                key=self.keys.new_key(),
                kind="scripted",
                payload=unescape_payload(el.get(SNIPPET_ATTR) or ""),
            )
        if el.get(MARKUP_ATTR) is not None:
            return CodeBlock(
                key=self.keys.new_key(),
                kind="markup",
                payload=unescape_payload(el.get(MARKUP_ATTR) or ""),
            )
        if el.get(FILE_URL_ATTR) and el.get(FILE_NAME_ATTR) and el.get(FILE_SIZE_ATTR):
            try:
                size = float(el.get(FILE_SIZE_ATTR) or "")
            except ValueError:
                logger.debug("Ignoring file marker with bad size %r", el.get(FILE_SIZE_ATTR))
                return None
            return FileBlock(
                key=self.keys.new_key(),
                url=el.get(FILE_URL_ATTR) or "",
                name=el.get(FILE_NAME_ATTR) or "",
                size_mb=size,
            )
        if el.get(BUTTON_URL_ATTR):
            return ButtonBlock(
                key=self.keys.new_key(),
                text=el.text_content(),
                url=el.get(BUTTON_URL_ATTR) or "",
            )
        if el.get(ASSET_ATTR):
            return ImageBlock(key=self.keys.new_key(), asset_ref=el.get(ASSET_ATTR) or "")
        return None
