"""Document -> render tree."""

from __future__ import annotations

import logging
from itertools import groupby

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
    legacy_document,
)
from ..core.nodes import (
    Button,
    Emphasis,
    ErrorPanel,
    FileCard,
    Figure,
    Frame,
    Link,
    ListGroup,
    Media,
    Node,
    Notify,
    Raw,
    ScriptResult,
    Section,
    Strong,
    Underline,
)
from ..core.ports import AssetResolver, Sandbox
from ..decode.inline import IFRAME_OPEN, IMG_TAG, decode, parse_attrs

logger = logging.getLogger(__name__)

HEADING_STYLES = {"h1", "h2", "h3", "h4", "h5", "h6", "blockquote"}


class PassthroughAssets(AssetResolver):
    """Asset references that already are URLs."""

    def url_for(self, asset_ref: str, width: int | None = None) -> str:
        return asset_ref


class DocumentRenderer:
    def __init__(
        self,
        on_image: Notify | None = None,
        on_link: Notify | None = None,
        sandbox: Sandbox | None = None,
        assets: AssetResolver | None = None,
        aspect_ratio: float = 56.25,
        image_width: int | None = 1200,
    ):
        self.on_image = on_image
        self.on_link = on_link
        self.sandbox = sandbox
        self.assets = assets or PassthroughAssets()
        self.aspect_ratio = aspect_ratio
        self.image_width = image_width

    def render(self, body: Document | str | None) -> list[Node]:
        """Render a document, or a legacy plain-text body."""
        if body is None:
            body = ""
        if isinstance(body, str):
            body = legacy_document(body)

        out: list[Node] = []
        for block in body.blocks:
            node = self.render_block(block)
            if isinstance(node, Section) and node.tag == "li":
                ordered = block.list_item == "number"
                prev = out[-1] if out else None
                if isinstance(prev, ListGroup) and prev.ordered == ordered:
                    prev.items.append(node)
                else:
                    out.append(ListGroup(ordered=ordered, items=[node]))
                continue
            out.append(node)
        return out

    def render_block(self, block) -> Node:
        if isinstance(block, TextBlock):
            return self.render_text(block)
        if isinstance(block, ImageBlock):
            src = self.assets.url_for(block.asset_ref, self.image_width)
            return Figure(media=Media(src=src, alt="", on_activate=self.on_image))
        if isinstance(block, FileBlock):
            return FileCard(
                url=block.url, name=block.name, size_mb=block.size_mb, on_activate=self.on_link
            )
        if isinstance(block, ButtonBlock):
            return Button(href=block.url, label=block.text, on_activate=self.on_link)
        if isinstance(block, CodeBlock):
            return self.render_code(block)
        return ErrorPanel(title="Unsupported block", detail=type(block).__name__)

    def render_code(self, block: CodeBlock) -> Node:
        if block.kind == "markup":
            return Raw(block.payload)
        if self.sandbox is None:
            return ErrorPanel(
                title="Scripted content unavailable",
                detail="No sandbox is configured for scripted blocks.",
            )
        try:
            return ScriptResult(self.sandbox.evaluate(block.payload))
        except Exception as e:
            # One failing snippet must not take the rest of the article down
            logger.warning("Scripted block %s failed: %s", block.key, e)
            return ErrorPanel(title="Scripted content failed", detail=str(e) or type(e).__name__)

    def render_text(self, block: TextBlock) -> Section:
        if block.list_item:
            tag = "li"
        elif block.style in HEADING_STYLES:
            tag = block.style
        else:
            tag = "p"
        children: list[Node] = []
        # Adjacent spans with equal marks read as one run of text
        for (marks, raw), group in groupby(block.children, key=lambda s: (s.marks, s.is_raw)):
            spans = list(group)
            if raw:
                linked = any(block.mark_def(m) is not None for m in marks)
                for s in spans:
                    node = self.render_raw(s, enlargeable=not linked)
                    children.extend(self.wrap_marks(block, marks, [node]))
                continue
            text = "".join(s.text for s in spans)
            children.extend(self.wrap_marks(block, marks, self.bind(decode(text))))
        return Section(tag=tag, children=children, style=block.style)

    def render_raw(self, span: Span, enlargeable: bool = True) -> Node:
        m = IFRAME_OPEN.match(span.text)
        if m:
            src = parse_attrs(m.group(1)).get("src", "")
            return Frame(src=src, aspect_ratio=self.aspect_ratio)
        m = IMG_TAG.match(span.text)
        target = parse_attrs(m.group(1)).get("src") if m and enlargeable else None
        return Raw(span.text, target=target, on_activate=self.on_image if target else None)

    def wrap_marks(self, block: TextBlock, marks: tuple[str, ...], nodes: list[Node]) -> list[Node]:
        for key in marks:
            d = block.mark_def(key)
            if d is not None and d.type == "link":
                nodes = [Link(href=d.href, children=nodes, on_activate=self.on_link)]
        if STRONG in marks:
            nodes = [Strong(children=nodes)]
        if EM in marks:
            nodes = [Emphasis(children=nodes)]
        if UNDERLINE in marks:
            nodes = [Underline(children=nodes)]
        return nodes

    def bind(self, nodes: list[Node]) -> list[Node]:
        """Attach the notification callbacks to activatable inline nodes."""
        for n in nodes:
            if isinstance(n, Media):
                n.on_activate = self.on_image
            elif isinstance(n, (Link, Button)):
                n.on_activate = self.on_link
            children = getattr(n, "children", None)
            if children:
                self.bind(children)
        return nodes


def render(body: Document | str | None, **kwargs) -> list[Node]:
    return DocumentRenderer(**kwargs).render(body)
