"""Editable surface -> Document.

The walk is recursive and returns, for every node, an ordered list of
*items*: either inline ``Span`` runs or finished blocks. Block-level
elements flatten the spans below them into one ``TextBlock``; generic
containers either collapse into a special block, pass their children's
blocks through, or wrap their inline content in an implicit paragraph.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Union

from ..adapters.idgen import HexId
from ..core.model import (
    INTRINSIC_MARKS,
    RAW_MARK,
    Block,
    Document,
    Span,
    TextBlock,
    placeholder_document,
)
from ..core.ports import KeyGenerator
from ..core.surface import ElementNode, SurfaceNode, TextNode
from .marks import ActiveMarks, MarkResolver
from .special import MARKER_ATTRS, SpecialBlockDetector

logger = logging.getLogger(__name__)

BLOCK_STYLES = {
    "p": "normal",
    "pre": "normal",
    "li": "normal",
    "h1": "h1",
    "h2": "h2",
    "h3": "h3",
    "h4": "h4",
    "h5": "h5",
    "h6": "h6",
    "blockquote": "blockquote",
}
LIST_TAGS = {"ul": "bullet", "ol": "number"}
CONTAINER_TAGS = {
    "div", "section", "article", "main", "aside", "header", "footer",
    "nav", "figure", "body", "html",
}

Item = Union[Span, Block]


@dataclass(frozen=True)
class _Context:
    marks: ActiveMarks = ()
    list_kind: str | None = None


def image_embed(el: ElementNode) -> str:
    """Minimal embed string for an already-hosted image."""
    parts = [f'src="{html.escape(el.get("src") or "", quote=True)}"']
    parts.append(f'alt="{html.escape(el.get("alt") or "", quote=True)}"')
    if el.get("class"):
        parts.append(f'class="{html.escape(el.get("class") or "", quote=True)}"')
    parts.append(f'loading="{html.escape(el.get("loading") or "lazy", quote=True)}"')
    return f"<img {' '.join(parts)} />"


def frame_embed(el: ElementNode) -> str:
    return f'<iframe src="{html.escape(el.get("src") or "", quote=True)}"></iframe>'


class Encoder:
    def __init__(self, keys: KeyGenerator | None = None):
        self.keys = keys or HexId()

    def encode(self, root: SurfaceNode) -> Document:
        marks = MarkResolver(self.keys)
        detector = SpecialBlockDetector(self.keys)
        walker = _Walk(self.keys, marks, detector)

        if isinstance(root, TextNode):
            items = walker.walk(root, _Context())
        else:
            items = walker.container(root, _Context())
        blocks = walker.as_blocks(items, _Context())

        out: list[Block] = []
        for block in blocks:
            if isinstance(block, TextBlock):
                spans = tuple(s for s in block.children if _valid_span(s, marks))
                if not spans:
                    logger.debug("Dropping text block %s with no valid spans", block.key)
                    continue
                block = TextBlock(
                    key=block.key,
                    children=spans,
                    style=block.style,
                    list_item=block.list_item,
                    mark_defs=marks.defs_for(spans),
                )
            out.append(block)

        if not out:
            logger.debug("Surface encoded to no blocks; using placeholder")
            return placeholder_document(self.keys.new_key())
        return Document(blocks=tuple(out))


def encode(root: SurfaceNode, keys: KeyGenerator | None = None) -> Document:
    return Encoder(keys).encode(root)


def _valid_span(span: object, marks: MarkResolver) -> bool:
    if not isinstance(span, Span) or not isinstance(span.text, str):
        return False
    # Def-backed marks must point at a definition created in this run.
    return all(m in INTRINSIC_MARKS or m == RAW_MARK or marks.is_defined(m) for m in span.marks)


class _Walk:
    def __init__(self, keys: KeyGenerator, marks: MarkResolver, detector: SpecialBlockDetector):
        self.keys = keys
        self.marks = marks
        self.detector = detector
        # keys of spans that came from <br>
        self.breaks: set[str] = set()

    def span(self, text: str, ctx: _Context) -> Span:
        return Span(
            key=self.keys.new_key(),
            text=text,
            marks=self.marks.leaf_marks(ctx.marks),
        )

    def children(self, el: ElementNode, ctx: _Context) -> list[Item]:
        items: list[Item] = []
        for child in el.children:
            items.extend(self.walk(child, ctx))
        return items

    def walk(self, node: SurfaceNode, ctx: _Context) -> list[Item]:
        if isinstance(node, TextNode):
            return [self.span(node.text, ctx)]

        tag = node.tag
        if tag == "br":
            span = self.span("\n", ctx)
            self.breaks.add(span.key)
            return [span]
        if tag == "img":
            return [self.raw_block(image_embed(node), ctx)]
        if tag == "iframe":
            return [self.raw_block(frame_embed(node), ctx)]
        if self.marks.is_mark_element(node):
            special = self.detector.detect(node)
            if special is not None:
                return [special]
            # Decorations apply below; the element keeps its own block role.
            ctx = _Context(self.marks.enter(node, ctx.marks), ctx.list_kind)
        if tag in BLOCK_STYLES:
            return self.text_block(node, ctx)
        if tag in LIST_TAGS:
            inner = _Context(marks=ctx.marks, list_kind=LIST_TAGS[tag])
            return list(self.as_blocks(self.children(node, inner), inner))
        if tag in CONTAINER_TAGS or self._has_marker(node):
            return self.container(node, ctx)
        # Unknown or purely presentational tag: keep what is inside.
        return self.children(node, ctx)

    @staticmethod
    def _has_marker(el: ElementNode) -> bool:
        return any(el.get(a) is not None for a in MARKER_ATTRS)

    def container(self, el: ElementNode, ctx: _Context) -> list[Item]:
        special = self.detector.detect(el)
        if special is not None:
            return [special]
        items = self.children(el, ctx)
        if any(not isinstance(i, Span) for i in items):
            return list(self.as_blocks(items, ctx))
        return [self.implicit_block(items, ctx)]

    def text_block(self, el: ElementNode, ctx: _Context) -> list[Item]:
        """One TextBlock for the element, followed by blocks that cannot be flattened.

        Nested list items and special blocks keep their own identity.
        """
        style = BLOCK_STYLES[el.tag]
        list_item = None
        if el.tag == "li":
            list_item = ctx.list_kind or "bullet"
        spans: list[Span] = []
        trailing: list[Item] = []
        for item in self.children(el, _Context(marks=ctx.marks)):
            if isinstance(item, Span):
                spans.append(item)
            elif isinstance(item, TextBlock) and not item.list_item:
                spans.extend(item.children)
            else:
                trailing.append(item)
        if not spans:
            spans.append(self.span("", _Context()))
        block = TextBlock(
            key=self.keys.new_key(),
            children=tuple(spans),
            style=style,
            list_item=list_item,
        )
        return [block, *trailing]

    def raw_block(self, embed: str, ctx: _Context) -> TextBlock:
        marks = (RAW_MARK,) + self.marks.leaf_marks(ctx.marks)
        return TextBlock(
            key=self.keys.new_key(),
            children=(Span(key=self.keys.new_key(), text=embed, marks=marks),),
        )

    def implicit_block(self, spans: list[Item], ctx: _Context) -> TextBlock:
        children = tuple(s for s in spans if isinstance(s, Span))
        if not children:
            children = (self.span("", _Context()),)
        return TextBlock(
            key=self.keys.new_key(),
            children=children,
            list_item=ctx.list_kind,
        )

    def as_blocks(self, items: list[Item], ctx: _Context) -> list[Block]:
        """Pass blocks through; wrap runs of loose inline spans between them."""
        if not any(not isinstance(i, Span) for i in items):
            if not items or self.is_layout_whitespace(items):
                return []
            return [self.implicit_block(items, ctx)]

        out: list[Block] = []
        run: list[Span] = []
        for item in items:
            if isinstance(item, Span):
                run.append(item)
                continue
            if run and not self.is_layout_whitespace(run):
                out.append(self.implicit_block(list(run), ctx))
            run = []
            out.append(item)
        if run and not self.is_layout_whitespace(run):
            out.append(self.implicit_block(list(run), ctx))
        return out

    def is_layout_whitespace(self, spans: list) -> bool:
        # Indentation between block elements, not content. Explicit line breaks stay.
        return all(
            isinstance(s, Span) and not s.marks and not s.text.strip() and s.key not in self.breaks
            for s in spans
        )
