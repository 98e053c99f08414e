from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

MarkKey = str

STYLES = ("normal", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote")
LIST_KINDS = ("bullet", "number")

# Intrinsic marks need no MarkDef.
STRONG = "strong"
EM = "em"
UNDERLINE = "underline"
INTRINSIC_MARKS = frozenset({STRONG, EM, UNDERLINE})

# Private sentinel: the span text is trusted raw markup produced by the encoder.
RAW_MARK = "vellum.raw"


@dataclass(frozen=True)
class MarkDef:
    key: str
    href: str
    type: str = "link"


@dataclass(frozen=True)
class Span:
    key: str
    text: str
    marks: tuple[MarkKey, ...] = ()

    @property
    def is_raw(self) -> bool:
        return RAW_MARK in self.marks


@dataclass(frozen=True)
class TextBlock:
    key: str
    children: tuple[Span, ...]
    style: str = "normal"  # one of STYLES
    list_item: str | None = None  # "bullet" | "number"
    mark_defs: tuple[MarkDef, ...] = ()

    def mark_def(self, key: MarkKey) -> MarkDef | None:
        for d in self.mark_defs:
            if d.key == key:
                return d
        return None

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.children)


@dataclass(frozen=True)
class ImageBlock:
    key: str
    asset_ref: str


@dataclass(frozen=True)
class FileBlock:
    key: str
    url: str
    name: str
    size_mb: float


@dataclass(frozen=True)
class CodeBlock:
    key: str
    kind: str  # "scripted" | "markup"
    payload: str


@dataclass(frozen=True)
class ButtonBlock:
    key: str
    text: str
    url: str


Block = Union[TextBlock, ImageBlock, FileBlock, CodeBlock, ButtonBlock]


@dataclass(frozen=True)
class Document:
    blocks: tuple[Block, ...]

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def has_code(self) -> bool:
        return any(isinstance(b, CodeBlock) for b in self.blocks)


@dataclass
class Article:
    id: str
    title: str = ""
    slug: str = ""
    published_at: str | None = None
    link: str | None = None
    # Either a structured Document or a legacy plain-text body.
    body: Document | str = field(default="")


def placeholder_document(key: str = "placeholder") -> Document:
    """The single empty paragraph used instead of an empty document."""
    return Document(
        blocks=(TextBlock(key=key, children=(Span(key=f"{key}-span", text=""),)),)
    )


def legacy_document(text: str) -> Document:
    """Wrap a legacy plain-text body in a one-block document.

    Used at render time only; the result is never persisted.
    """
    return Document(
        blocks=(TextBlock(key="legacy", children=(Span(key="legacy-span", text=text),)),)
    )


def canonical(doc: Document) -> list[tuple]:
    """Key-free structural shape of a document.

    Two documents with equal shapes differ only in opaque key identity.
    Def-backed marks are replaced by what they point to.
    """
    out: list[tuple] = []
    for block in doc.blocks:
        if isinstance(block, TextBlock):
            spans = []
            for span in block.children:
                marks = []
                for m in span.marks:
                    d = block.mark_def(m)
                    marks.append((d.type, d.href) if d else m)
                spans.append((span.text, tuple(marks)))
            out.append(("block", block.style, block.list_item, tuple(spans)))
        elif isinstance(block, ImageBlock):
            out.append(("image", block.asset_ref))
        elif isinstance(block, FileBlock):
            out.append(("file", block.url, block.name, block.size_mb))
        elif isinstance(block, CodeBlock):
            out.append(("code", block.kind, block.payload))
        elif isinstance(block, ButtonBlock):
            out.append(("button", block.text, block.url))
    return out
