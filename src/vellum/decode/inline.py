"""Recursive-descent parser for the inline micro-syntax of one text run.

Grammar, tried in this order at every position (longest token first)::

    [text](url)                 link, text taken literally
    **...**                     strong, content parsed recursively
    *...*                       emphasis, content parsed recursively
    <div ...>...</div>          restricted raw containers; only class and
    <span ...>...</span>        style survive, same-name nesting is counted
    <img src=".." alt=".." />   media, click to enlarge
    <iframe src="..">..</iframe> framed embed, body dropped
    <button href="..">label</button>  call to action, label literal
    \\n                          line break
    anything else               literal text

Nothing here raises on bad input: a token that does not close degrades to
its literal characters.
"""

from __future__ import annotations

import html
import re

from ..core.model import Span
from ..core.nodes import (
    Button,
    Container,
    Emphasis,
    Frame,
    LineBreak,
    Link,
    Media,
    Node,
    Raw,
    Strong,
    Text,
)
from ..core.utils import parse_style

CONTAINER_TAGS = ("div", "span")

_LINK = re.compile(r"\[([^\[\]\n]+)\]\(([^()\s]+)\)")
_CONTAINER_OPEN = re.compile(r"<(div|span)(\s[^<>]*)?>", re.IGNORECASE)
_CONTAINER_TAG = re.compile(r"<(/?)(div|span)(?:\s[^<>]*)?>", re.IGNORECASE)
IMG_TAG = re.compile(r"<img(\s[^<>]*?)?\s*/?>", re.IGNORECASE)
IFRAME_OPEN = re.compile(r"<iframe(\s[^<>]*)?>", re.IGNORECASE)
_IFRAME_CLOSE = re.compile(r"</iframe\s*>", re.IGNORECASE)
_BUTTON_OPEN = re.compile(r"<button(\s[^<>]*)?>", re.IGNORECASE)
_BUTTON_CLOSE = re.compile(r"</button\s*>", re.IGNORECASE)
_ATTR = re.compile(r"""([a-zA-Z_:][-\w:.]*)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_CLASS_TOKEN = re.compile(r"^[\w-]+$")
_TOKEN_START = re.compile(r"[\[*<\n]")


def parse_attrs(source: str | None) -> dict[str, str]:
    if not source:
        return {}
    out: dict[str, str] = {}
    for m in _ATTR.finditer(source):
        value = m.group(2) if m.group(2) is not None else m.group(3)
        out[m.group(1).lower()] = html.unescape(value)
    return out


def find_close(text: str, name: str, start: int, end: int) -> tuple[int, int] | None:
    """Locate the ``</name>`` closing the tag opened just before ``start``.

    Nested ``<name>`` openers raise the depth and must be closed first; tags
    with a different name are ignored.
    """
    depth = 0
    for m in _CONTAINER_TAG.finditer(text, start, end):
        if m.group(2).lower() != name:
            continue
        if m.group(1):
            if depth == 0:
                return m.start(), m.end()
            depth -= 1
        else:
            depth += 1
    return None


def _push_text(nodes: list[Node], text: str) -> None:
    if not text:
        return
    if nodes and isinstance(nodes[-1], Text):
        nodes[-1] = Text(nodes[-1].text + text)
    else:
        nodes.append(Text(text))


def parse(text: str, start: int = 0, end: int | None = None) -> tuple[list[Node], int]:
    """Parse ``text[start:end]`` into render nodes.

    Returns the nodes and the index where parsing stopped, which is always
    ``end``: every rule consumes at least one character.
    """
    if end is None:
        end = len(text)
    nodes: list[Node] = []
    i = start
    while i < end:
        ch = text[i]

        if ch == "[":
            m = _LINK.match(text, i, end)
            if m:
                nodes.append(Link(href=m.group(2), children=[Text(m.group(1))]))
                i = m.end()
                continue

        elif ch == "*":
            if text.startswith("**", i) and i + 1 < end:
                close = text.find("**", i + 2, end)
                if close > i + 2:
                    inner, _ = parse(text, i + 2, close)
                    nodes.append(Strong(children=inner))
                    i = close + 2
                else:
                    _push_text(nodes, "**")
                    i += 2
                continue
            close = text.find("*", i + 1, end)
            if close > i + 1:
                inner, _ = parse(text, i + 1, close)
                nodes.append(Emphasis(children=inner))
                i = close + 1
                continue

        elif ch == "<":
            consumed = _parse_tag(text, i, end, nodes)
            if consumed > i:
                i = consumed
                continue

        elif ch == "\n":
            nodes.append(LineBreak())
            i += 1
            continue

        # Literal run up to the next possible token
        m = _TOKEN_START.search(text, i + 1, end)
        stop = m.start() if m else end
        _push_text(nodes, text[i:stop])
        i = stop

    return nodes, end


def _parse_tag(text: str, i: int, end: int, nodes: list[Node]) -> int:
    """Try the tag rules at ``i``; return the new cursor, or ``i`` if none matched."""
    m = _CONTAINER_OPEN.match(text, i, end)
    if m:
        name = m.group(1).lower()
        close = find_close(text, name, m.end(), end)
        if close is None:
            # Unmatched opener stays visible as typed
            _push_text(nodes, m.group(0))
            return m.end()
        attrs = parse_attrs(m.group(2))
        classes = [c for c in attrs.get("class", "").split() if _CLASS_TOKEN.match(c)]
        inner, _ = parse(text, m.end(), close[0])
        nodes.append(
            Container(
                tag=name,
                class_name=" ".join(classes),
                style=parse_style(attrs.get("style")),
                children=inner,
            )
        )
        return close[1]

    m = IMG_TAG.match(text, i, end)
    if m:
        attrs = parse_attrs(m.group(1))
        if attrs.get("src"):
            nodes.append(Media(src=attrs["src"], alt=attrs.get("alt", "")))
            return m.end()
        return i

    m = IFRAME_OPEN.match(text, i, end)
    if m:
        attrs = parse_attrs(m.group(1))
        close_m = _IFRAME_CLOSE.search(text, m.end(), end)
        if attrs.get("src") and close_m:
            nodes.append(Frame(src=attrs["src"]))
            return close_m.end()
        return i

    m = _BUTTON_OPEN.match(text, i, end)
    if m:
        attrs = parse_attrs(m.group(1))
        close_m = _BUTTON_CLOSE.search(text, m.end(), end)
        if attrs.get("href") and close_m:
            nodes.append(Button(href=attrs["href"], label=text[m.end():close_m.start()]))
            return close_m.end()
        return i

    return i


def decode(text: str) -> list[Node]:
    nodes, _ = parse(text)
    return nodes


def decode_span(span: Span) -> list[Node]:
    """Decode one span; sentinel spans come back as a single raw node."""
    if span.is_raw:
        return [Raw(span.text)]
    return decode(span.text)
