"""Read an editor's HTML into a surface tree and write it back."""

import html

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from ..core.surface import ElementNode, SurfaceNode, TextNode

# Tags that never carry article content
_NOISE_TAGS = {"script", "style", "noscript", "head", "title", "meta", "link"}
_SKIPPED_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)
VOID_TAGS = {"br", "img", "hr", "wbr", "input", "source"}


def _attrs(tag: Tag) -> dict[str, str]:
    out: dict[str, str] = {}
    for name, value in tag.attrs.items():
        # bs4 hands multi-valued attributes (class, rel) back as lists
        out[name] = " ".join(value) if isinstance(value, list) else str(value)
    return out


def _convert(node: Tag) -> ElementNode:
    children: list[SurfaceNode] = []
    for child in node.children:
        if isinstance(child, _SKIPPED_STRINGS):
            continue
        if isinstance(child, NavigableString):
            children.append(TextNode(str(child)))
        elif isinstance(child, Tag):
            if child.name in _NOISE_TAGS:
                continue
            children.append(_convert(child))
    return ElementNode(tag=node.name.lower(), attrs=_attrs(node), children=tuple(children))


def parse_surface(markup: str, root_tag: str = "div") -> ElementNode:
    """Parse an HTML fragment (e.g. a contenteditable ``innerHTML``).

    The fragment's top-level nodes become the children of a synthetic
    ``root_tag`` element standing for the editable region itself.
    """
    soup = BeautifulSoup(markup or "", "html.parser")
    body = soup.find("body")
    top = body if isinstance(body, Tag) else soup
    root = _convert(top)
    return ElementNode(tag=root_tag, attrs={}, children=root.children)


def surface_to_html(node: SurfaceNode, include_root: bool = False) -> str:
    """Serialize a surface tree; by default only the root's contents."""
    if isinstance(node, TextNode):
        return html.escape(node.text, quote=False)
    if not include_root:
        return "".join(surface_to_html(c, include_root=True) for c in node.children)
    attrs = "".join(
        f' {name}="{html.escape(value, quote=True)}"' for name, value in node.attrs.items()
    )
    if node.tag in VOID_TAGS:
        return f"<{node.tag}{attrs}>"
    inner = "".join(surface_to_html(c, include_root=True) for c in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
