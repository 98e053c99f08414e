"""Document -> editable surface, for reopening saved content in the editor.

The surface is built so that encoding it again gives back a structurally
equal document (keys aside).
"""

from __future__ import annotations

from ..adapters.html_surface import parse_surface
from ..core.model import (
    EM,
    STRONG,
    UNDERLINE,
    ButtonBlock,
    CodeBlock,
    Document,
    FileBlock,
    ImageBlock,
    Span,
    TextBlock,
)
from ..core.surface import ElementNode, SurfaceNode, TextNode
from ..encode.special import (
    ASSET_ATTR,
    BUTTON_URL_ATTR,
    FILE_NAME_ATTR,
    FILE_SIZE_ATTR,
    FILE_URL_ATTR,
    MARKUP_ATTR,
    SNIPPET_ATTR,
    escape_payload,
)

_MARK_TAGS = {STRONG: "strong", EM: "em", UNDERLINE: "u"}


def load_surface(body: Document | str | None) -> ElementNode:
    """Build the editable surface for a stored body.

    A legacy plain-text body opens as a single paragraph, newlines as line breaks.
    """
    if body is None:
        body = ""
    if isinstance(body, str):
        return _legacy_surface(body)

    children: list[SurfaceNode] = []
    for block in body.blocks:
        node = _block_node(block)
        if isinstance(block, TextBlock) and block.list_item:
            list_tag = "ol" if block.list_item == "number" else "ul"
            prev = children[-1] if children else None
            if isinstance(prev, ElementNode) and prev.tag == list_tag:
                children[-1] = ElementNode(
                    tag=list_tag, attrs=prev.attrs, children=prev.children + (node,)
                )
                continue
            node = ElementNode(tag=list_tag, children=(node,))
        children.append(node)
    return ElementNode(tag="div", attrs={"contenteditable": "true"}, children=tuple(children))


def _legacy_surface(text: str) -> ElementNode:
    kids: list[SurfaceNode] = []
    for i, line in enumerate(text.split("\n")):
        if i:
            kids.append(ElementNode(tag="br"))
        if line:
            kids.append(TextNode(line))
    paragraph = ElementNode(tag="p", children=tuple(kids))
    return ElementNode(tag="div", attrs={"contenteditable": "true"}, children=(paragraph,))


def _block_node(block) -> ElementNode:
    if isinstance(block, TextBlock):
        if block.list_item:
            tag = "li"
        elif block.style == "normal":
            tag = "p"
        else:
            tag = block.style
        return ElementNode(tag=tag, children=tuple(_span_node(block, s) for s in block.children))
    if isinstance(block, ImageBlock):
        return ElementNode(tag="div", attrs={ASSET_ATTR: block.asset_ref, "contenteditable": "false"})
    if isinstance(block, FileBlock):
        return ElementNode(
            tag="div",
            attrs={
                FILE_URL_ATTR: block.url,
                FILE_NAME_ATTR: block.name,
                FILE_SIZE_ATTR: repr(block.size_mb),
                "contenteditable": "false",
            },
            children=(TextNode(block.name),),
        )
    if isinstance(block, CodeBlock):
        attr = SNIPPET_ATTR if block.kind == "scripted" else MARKUP_ATTR
        return ElementNode(
            tag="div",
            attrs={attr: escape_payload(block.payload), "contenteditable": "false"},
        )
    if isinstance(block, ButtonBlock):
        return ElementNode(
            tag="div",
            attrs={BUTTON_URL_ATTR: block.url, "contenteditable": "false"},
            children=(TextNode(block.text),),
        )
    raise TypeError(f"Unknown block type {type(block).__name__}")


def _span_node(block: TextBlock, span: Span) -> SurfaceNode:
    node: SurfaceNode
    if span.is_raw:
        embedded = parse_surface(span.text).children
        if len(embedded) == 1 and isinstance(embedded[0], ElementNode):
            node = embedded[0]
        else:
            node = TextNode(span.text)
    elif span.text == "\n":
        node = ElementNode(tag="br")
    else:
        node = TextNode(span.text)
    # marks are stored innermost first
    for mark in span.marks:
        if mark in _MARK_TAGS:
            node = ElementNode(tag=_MARK_TAGS[mark], children=(node,))
            continue
        d = block.mark_def(mark)
        if d is not None and d.type == "link":
            node = ElementNode(tag="a", attrs={"href": d.href}, children=(node,))
    return node
