"""Normalize content pasted into the editor."""

import re

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment

from ..core.surface import ElementNode

_YOUTUBE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\s?#]+)")


def _pasted_text(node) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return str(node)
    if not isinstance(node, Tag):
        return ""
    if node.name in ("script", "style"):
        return ""
    if node.name == "br":
        return "\n"
    if node.name == "a" and node.get("href"):
        return f"[{node.get_text()}]({node['href']})"
    inner = "".join(_pasted_text(c) for c in node.children)
    if node.name in ("p", "div"):
        return inner + "\n\n"
    return inner


def paste_to_text(markup: str) -> str:
    """Plain text for pasted HTML.

    Links become ``[text](href)``, line breaks stay, paragraphs end with a
    blank line. More than two consecutive newlines collapse to two.
    """
    soup = BeautifulSoup(markup or "", "html.parser")
    text = _pasted_text(soup)
    return re.sub(r"\n{3,}", "\n\n", text)


def youtube_embed_url(url: str) -> str | None:
    """Embed URL for a YouTube watch or short link, None for anything else."""
    m = _YOUTUBE.search(url or "")
    if not m:
        return None
    return f"https://www.youtube.com/embed/{m.group(1)}"


def video_element(url: str) -> ElementNode | None:
    """The frame element the editor inserts for a video link."""
    src = youtube_embed_url(url)
    if src is None:
        return None
    return ElementNode(tag="iframe", attrs={"src": src, "allowfullscreen": ""})
