"""Persisted wire shape of a Document.

TextBlock:
    {"_type": "block", "_key", "style", "listItem"?, "children": [...], "markDefs": [...]}
Span:
    {"_type": "span", "_key", "text", "marks": [...]}
Siblings: "image", "file", "code", "button".
"""

from typing import Any

from ..errors import DocumentFormatError
from .model import (
    RAW_MARK,
    ButtonBlock,
    CodeBlock,
    Document,
    FileBlock,
    ImageBlock,
    MarkDef,
    Span,
    TextBlock,
    placeholder_document,
)


def document_to_wire(doc: Document) -> list[dict[str, Any]]:
    return [block_to_wire(b) for b in doc.blocks]


def block_to_wire(block: Any) -> dict[str, Any]:
    if isinstance(block, TextBlock):
        out: dict[str, Any] = {
            "_type": "block",
            "_key": block.key,
            "style": block.style,
        }
        if block.list_item:
            out["listItem"] = block.list_item
        out["children"] = [
            {"_type": "span", "_key": s.key, "text": s.text, "marks": list(s.marks)}
            for s in block.children
        ]
        out["markDefs"] = [
            {"_type": d.type, "_key": d.key, "href": d.href} for d in block.mark_defs
        ]
        return out
    if isinstance(block, ImageBlock):
        return {
            "_type": "image",
            "_key": block.key,
            "asset": {"_type": "reference", "_ref": block.asset_ref},
        }
    if isinstance(block, FileBlock):
        return {
            "_type": "file",
            "_key": block.key,
            "url": block.url,
            "name": block.name,
            "sizeMb": block.size_mb,
        }
    if isinstance(block, CodeBlock):
        return {
            "_type": "code",
            "_key": block.key,
            "kind": block.kind,
            "payload": block.payload,
        }
    if isinstance(block, ButtonBlock):
        return {"_type": "button", "_key": block.key, "text": block.text, "url": block.url}
    raise DocumentFormatError(f"Cannot serialize {type(block).__name__}")


def document_from_wire(data: Any, trusted: bool = True) -> Document:
    """Build a Document from its wire shape.

    Unknown block types are skipped. With ``trusted=False`` the sentinel raw
    mark is stripped from every span, so untrusted input cannot smuggle raw
    markup past the inline grammar.
    """
    if not isinstance(data, list):
        raise DocumentFormatError("Document body must be a list of blocks")
    blocks = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise DocumentFormatError(f"Block {i} is not a mapping")
        block = _block_from_wire(item, i, trusted)
        if block is not None:
            blocks.append(block)
    if not blocks:
        return placeholder_document()
    return Document(blocks=tuple(blocks))


def _block_from_wire(item: dict[str, Any], index: int, trusted: bool) -> Any:
    kind = item.get("_type")
    key = str(item.get("_key") or f"block-{index}")
    if kind == "block":
        spans = []
        for j, child in enumerate(item.get("children") or []):
            # Spans without text are invalid and dropped.
            if not isinstance(child, dict) or not isinstance(child.get("text"), str):
                continue
            raw_marks = child.get("marks") or []
            if not isinstance(raw_marks, list):
                raise DocumentFormatError(f"Span {j} of block {key} has marks that are not a list")
            marks = tuple(str(m) for m in raw_marks)
            if not trusted:
                marks = tuple(m for m in marks if m != RAW_MARK)
            spans.append(
                Span(key=str(child.get("_key") or f"{key}-{j}"), text=child["text"], marks=marks)
            )
        if not spans:
            return None
        defs = tuple(
            MarkDef(key=str(d["_key"]), href=str(d.get("href", "")), type=str(d.get("_type", "link")))
            for d in item.get("markDefs") or []
            if isinstance(d, dict) and d.get("_key")
        )
        return TextBlock(
            key=key,
            children=tuple(spans),
            style=str(item.get("style") or "normal"),
            list_item=item.get("listItem"),
            mark_defs=defs,
        )
    if kind == "image":
        asset = item.get("asset") or {}
        ref = asset.get("_ref") if isinstance(asset, dict) else None
        if not ref:
            raise DocumentFormatError(f"Image block {key} has no asset reference")
        return ImageBlock(key=key, asset_ref=str(ref))
    if kind == "file":
        try:
            size = float(item.get("sizeMb") or 0)
        except (TypeError, ValueError) as e:
            raise DocumentFormatError(f"File block {key} has a bad size") from e
        return FileBlock(key=key, url=str(item.get("url", "")), name=str(item.get("name", "")), size_mb=size)
    if kind == "code":
        code_kind = item.get("kind")
        if code_kind not in ("scripted", "markup"):
            raise DocumentFormatError(f"Code block {key} has unknown kind {code_kind!r}")
        return CodeBlock(key=key, kind=code_kind, payload=str(item.get("payload", "")))
    if kind == "button":
        return ButtonBlock(key=key, text=str(item.get("text", "")), url=str(item.get("url", "")))
    return None
