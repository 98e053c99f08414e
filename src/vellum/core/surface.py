"""Editable-surface tree: what a rich-text editor widget holds."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class TextNode:
    text: str


@dataclass(frozen=True)
class ElementNode:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict, hash=False)
    children: tuple["SurfaceNode", ...] = ()

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name, default)

    def text_content(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, TextNode):
                parts.append(child.text)
            else:
                parts.append(child.text_content())
        return "".join(parts)


SurfaceNode = Union[TextNode, ElementNode]


def element(tag: str, *children: SurfaceNode | str, **attrs: str) -> ElementNode:
    """Shorthand constructor; plain strings become text nodes."""
    kids = tuple(TextNode(c) if isinstance(c, str) else c for c in children)
    return ElementNode(tag=tag, attrs={k.rstrip("_").replace("_", "-"): v for k, v in attrs.items()}, children=kids)
