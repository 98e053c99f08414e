"""Editor-side helpers: reopening documents and normalizing pasted content."""

from .loader import load_surface
from .paste import paste_to_text, video_element, youtube_embed_url

__all__ = ["load_surface", "paste_to_text", "video_element", "youtube_embed_url"]
