"""Render tree handed to the presentation layer.

Inline nodes come out of the inline decoder; block nodes are added by the
renderer. Activatable nodes (links, media, buttons) carry a bound callback
that the presentation layer fires on click; nodes never navigate themselves.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Union

Notify = Callable[[str], None]


@dataclass
class Text:
    text: str


@dataclass
class LineBreak:
    pass


@dataclass
class Strong:
    children: list[Node] = field(default_factory=list)


@dataclass
class Emphasis:
    children: list[Node] = field(default_factory=list)


@dataclass
class Underline:
    children: list[Node] = field(default_factory=list)


@dataclass
class Link:
    href: str
    children: list[Node] = field(default_factory=list)
    on_activate: Notify | None = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        return plain_text(self.children)

    def activate(self) -> None:
        if self.on_activate is not None:
            self.on_activate(self.href)


@dataclass
class Container:
    """A restricted raw ``div``/``span`` with class and style only."""
    tag: str
    class_name: str = ""
    style: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)


@dataclass
class Media:
    src: str
    alt: str = ""
    enlargeable: bool = True
    on_activate: Notify | None = field(default=None, compare=False, repr=False)

    def activate(self) -> None:
        if self.enlargeable and self.on_activate is not None:
            self.on_activate(self.src)


@dataclass
class Frame:
    """Embedded player inside a fixed aspect-ratio wrapper."""
    src: str
    aspect_ratio: float = 56.25  # padding-bottom percentage, 16:9


@dataclass
class Button:
    href: str
    label: str
    on_activate: Notify | None = field(default=None, compare=False, repr=False)

    def activate(self) -> None:
        if self.on_activate is not None:
            self.on_activate(self.href)


@dataclass
class Raw:
    """Trusted markup injected without parsing.

    ``target`` is set when the markup is an image the reader may enlarge.
    """
    markup: str
    target: str | None = None
    on_activate: Notify | None = field(default=None, compare=False, repr=False)

    def activate(self) -> None:
        if self.target and self.on_activate is not None:
            self.on_activate(self.target)


# Block level


@dataclass
class Section:
    tag: str  # p, h1..h6, blockquote, li
    children: list[Node] = field(default_factory=list)
    style: str = "normal"


@dataclass
class ListGroup:
    ordered: bool
    items: list[Section] = field(default_factory=list)


@dataclass
class Figure:
    media: Media


@dataclass
class FileCard:
    url: str
    name: str
    size_mb: float
    on_activate: Notify | None = field(default=None, compare=False, repr=False)

    def activate(self) -> None:
        if self.on_activate is not None:
            self.on_activate(self.url)


@dataclass
class ScriptResult:
    """Markup returned by the sandbox for a scripted block."""
    markup: str


@dataclass
class ErrorPanel:
    title: str
    detail: str


Node = Union[
    Text, LineBreak, Strong, Emphasis, Underline, Link, Container, Media,
    Frame, Button, Raw, Section, ListGroup, Figure, FileCard, ScriptResult,
    ErrorPanel,
]


def plain_text(nodes: list[Node]) -> str:
    """Visible text of a node list (line breaks become newlines)."""
    parts: list[str] = []
    for n in nodes:
        if isinstance(n, Text):
            parts.append(n.text)
        elif isinstance(n, LineBreak):
            parts.append("\n")
        elif isinstance(n, Button):
            parts.append(n.label)
        elif isinstance(n, (Strong, Emphasis, Underline, Link, Container, Section)):
            parts.append(plain_text(n.children))
        elif isinstance(n, ListGroup):
            parts.append(plain_text(list(n.items)))
    return "".join(parts)
