"""Serialize a render tree to HTML."""

import html

from ..core.nodes import (
    Button,
    Container,
    Emphasis,
    ErrorPanel,
    FileCard,
    Figure,
    Frame,
    LineBreak,
    Link,
    ListGroup,
    Media,
    Node,
    Raw,
    ScriptResult,
    Section,
    Strong,
    Text,
    Underline,
)
from ..core.utils import format_style, is_safe_url

_EXTERNAL = 'target="_blank" rel="noopener noreferrer"'


def _esc(value: str) -> str:
    return html.escape(value, quote=True)


def _href(url: str) -> str:
    return _esc(url) if is_safe_url(url) else "#"


def to_html(nodes: list[Node]) -> str:
    return "".join(node_html(n) for n in nodes)


def node_html(node: Node) -> str:
    if isinstance(node, Text):
        return html.escape(node.text, quote=False)
    if isinstance(node, LineBreak):
        return "<br>"
    if isinstance(node, Strong):
        return f"<strong>{to_html(node.children)}</strong>"
    if isinstance(node, Emphasis):
        return f"<em>{to_html(node.children)}</em>"
    if isinstance(node, Underline):
        return f"<u>{to_html(node.children)}</u>"
    if isinstance(node, Link):
        return f'<a href="{_href(node.href)}" {_EXTERNAL}>{to_html(node.children)}</a>'
    if isinstance(node, Container):
        attrs = ""
        if node.class_name:
            attrs += f' class="{_esc(node.class_name)}"'
        if node.style:
            attrs += f' style="{_esc(format_style(node.style))}"'
        return f"<{node.tag}{attrs}>{to_html(node.children)}</{node.tag}>"
    if isinstance(node, Media):
        img = f'<img src="{_href(node.src)}" alt="{_esc(node.alt)}" loading="lazy">'
        if node.enlargeable:
            return f'<a href="{_href(node.src)}" class="zoomable" data-enlarge>{img}</a>'
        return img
    if isinstance(node, Frame):
        return (
            f'<div class="embed-frame" style="position: relative; padding-bottom: {node.aspect_ratio}%">'
            f'<iframe src="{_href(node.src)}" allowfullscreen></iframe></div>'
        )
    if isinstance(node, Button):
        return f'<div class="cta"><a class="button" href="{_href(node.href)}" {_EXTERNAL}>{_esc(node.label)}</a></div>'
    if isinstance(node, Raw) and node.target:
        return f'<a href="{_href(node.target)}" class="zoomable" data-enlarge>{node.markup}</a>'
    if isinstance(node, (Raw, ScriptResult)):
        return node.markup
    if isinstance(node, Section):
        return f"<{node.tag}>{to_html(node.children)}</{node.tag}>"
    if isinstance(node, ListGroup):
        tag = "ol" if node.ordered else "ul"
        return f"<{tag}>{to_html(list(node.items))}</{tag}>"
    if isinstance(node, Figure):
        return f"<figure>{node_html(node.media)}</figure>"
    if isinstance(node, FileCard):
        return (
            f'<a class="file-card" href="{_href(node.url)}" download>'
            f"{_esc(node.name)} <small>({node.size_mb:.1f} MB)</small></a>"
        )
    if isinstance(node, ErrorPanel):
        return (
            f'<div class="render-error" role="alert"><h4>{_esc(node.title)}</h4>'
            f"<pre>{_esc(node.detail)}</pre></div>"
        )
    return ""
