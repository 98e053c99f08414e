"""Document -> render tree -> HTML."""

from .excerpt import preview_text
from .html import to_html
from .renderer import DocumentRenderer, PassthroughAssets, render

__all__ = ["DocumentRenderer", "PassthroughAssets", "preview_text", "render", "to_html"]
