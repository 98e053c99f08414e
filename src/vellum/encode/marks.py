"""Active inline decorations during the surface walk."""

from __future__ import annotations

from ..core.model import EM, RAW_MARK, STRONG, UNDERLINE, MarkDef, MarkKey, Span
from ..core.ports import KeyGenerator
from ..core.surface import ElementNode
from ..core.utils import parse_style

MARK_TAGS: dict[str, MarkKey] = {
    "b": STRONG,
    "strong": STRONG,
    "i": EM,
    "em": EM,
    "u": UNDERLINE,
    "ins": UNDERLINE,
}

ActiveMarks = tuple[MarkKey, ...]  # outermost first


def _style_marks(style: dict[str, str]) -> list[MarkKey]:
    # Editors that style with CSS instead of tags, e.g. <span style="font-weight: bold">
    marks = []
    weight = style.get("font-weight", "")
    if weight == "bold" or weight.isdigit() and int(weight) >= 600:
        marks.append(STRONG)
    if style.get("font-style") == "italic":
        marks.append(EM)
    if "underline" in style.get("text-decoration", ""):
        marks.append(UNDERLINE)
    return marks


class MarkResolver:
    """Tracks link definitions for one encode run and derives span marks.

    The active marks are an immutable tuple handed down the recursion;
    entering a decorating element returns a new tuple and never touches the
    caller's. The raw sentinel can never come out of an element.
    """

    def __init__(self, keys: KeyGenerator):
        self.keys = keys
        self._defs: dict[str, MarkDef] = {}

    def is_mark_element(self, el: ElementNode) -> bool:
        if el.tag in MARK_TAGS:
            return True
        if el.tag == "a" and el.get("href"):
            return True
        return bool(el.get("style")) and bool(_style_marks(parse_style(el.get("style"))))

    def enter(self, el: ElementNode, active: ActiveMarks) -> ActiveMarks:
        added: list[MarkKey] = []
        if el.tag in MARK_TAGS:
            added.append(MARK_TAGS[el.tag])
        elif el.tag == "a" and el.get("href"):
            d = MarkDef(key=self.keys.new_key(), href=el.get("href") or "")
            self._defs[d.key] = d
            added.append(d.key)
        if el.get("style"):
            added.extend(_style_marks(parse_style(el.get("style"))))
        return active + tuple(m for m in added if m != RAW_MARK)

    @staticmethod
    def leaf_marks(active: ActiveMarks) -> tuple[MarkKey, ...]:
        """Innermost decoration first, each mark once."""
        out: list[MarkKey] = []
        for m in reversed(active):
            if m not in out:
                out.append(m)
        return tuple(out)

    def defs_for(self, spans: tuple[Span, ...] | list[Span]) -> tuple[MarkDef, ...]:
        """The link definitions actually referenced by ``spans``, in first-use order."""
        seen: list[MarkDef] = []
        for span in spans:
            for m in span.marks:
                d = self._defs.get(m)
                if d is not None and d not in seen:
                    seen.append(d)
        return tuple(seen)

    def is_defined(self, mark: MarkKey) -> bool:
        return mark in self._defs
