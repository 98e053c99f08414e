"""Tests for the document model and its persisted wire shape."""

import pytest

from vellum.core.model import (
    RAW_MARK,
    ButtonBlock,
    CodeBlock,
    Document,
    FileBlock,
    ImageBlock,
    MarkDef,
    Span,
    TextBlock,
    canonical,
    placeholder_document,
)
from vellum.core.wire import document_from_wire, document_to_wire
from vellum.errors import DocumentFormatError


def _sample() -> Document:
    return Document(blocks=(
        TextBlock(
            key="b1",
            children=(Span("s1", "Hello "), Span("s2", "world", ("strong", "m1"))),
            mark_defs=(MarkDef("m1", "https://example.com"),),
        ),
        TextBlock(key="b2", children=(Span("s3", "item"),), list_item="bullet"),
        ImageBlock(key="b3", asset_ref="image-abc-800x600-jpg"),
        FileBlock(key="b4", url="https://cdn/x.pdf", name="x.pdf", size_mb=1.5),
        CodeBlock(key="b5", kind="markup", payload="<b>hi</b>"),
        ButtonBlock(key="b6", text="Order", url="https://shop"),
    ))


def test_wire_shape():
    """Test the persisted field names."""
    wire = document_to_wire(_sample())
    
    assert wire[0]["_type"] == "block"
    assert wire[0]["_key"] == "b1"
    assert wire[0]["style"] == "normal"
    assert "listItem" not in wire[0]
    assert wire[0]["children"][1] == {
        "_type": "span", "_key": "s2", "text": "world", "marks": ["strong", "m1"]
    }
    assert wire[0]["markDefs"] == [{"_type": "link", "_key": "m1", "href": "https://example.com"}]
    assert wire[1]["listItem"] == "bullet"
    assert wire[2]["asset"] == {"_type": "reference", "_ref": "image-abc-800x600-jpg"}
    assert wire[3]["sizeMb"] == 1.5
    assert wire[4]["kind"] == "markup"
    assert wire[5]["_type"] == "button"


def test_wire_round_trip():
    """Test a document survives its wire shape unchanged."""
    doc = _sample()
    assert document_from_wire(document_to_wire(doc)) == doc


def test_from_wire_drops_invalid_spans():
    """Test spans without text are dropped, and blocks left without spans."""
    data = [
        {"_type": "block", "_key": "a", "children": [
            {"_type": "span", "_key": "x", "marks": []},
            {"_type": "span", "_key": "y", "text": "kept", "marks": []},
        ]},
        {"_type": "block", "_key": "b", "children": [{"_type": "span", "text": None}]},
    ]
    doc = document_from_wire(data)
    
    assert len(doc) == 1
    assert doc.blocks[0].text == "kept"


def test_from_wire_empty_gives_placeholder():
    """Test an empty list reads as the placeholder paragraph."""
    assert canonical(document_from_wire([])) == canonical(placeholder_document())


def test_from_wire_skips_unknown_types():
    """Test unknown block types are ignored."""
    data = [
        {"_type": "carousel", "_key": "c"},
        {"_type": "block", "_key": "a", "children": [{"_type": "span", "_key": "s", "text": "hi"}]},
    ]
    doc = document_from_wire(data)
    assert [type(b) for b in doc.blocks] == [TextBlock]


def test_from_wire_untrusted_strips_raw_mark():
    """Test untrusted input cannot carry the raw sentinel."""
    data = [{"_type": "block", "_key": "a", "children": [
        {"_type": "span", "_key": "s", "text": "<script>x</script>", "marks": [RAW_MARK, "em"]},
    ]}]
    
    assert document_from_wire(data).blocks[0].children[0].is_raw
    span = document_from_wire(data, trusted=False).blocks[0].children[0]
    assert not span.is_raw
    assert span.marks == ("em",)


def test_from_wire_rejects_bad_shapes():
    """Test malformed persisted data raises DocumentFormatError."""
    with pytest.raises(DocumentFormatError):
        document_from_wire({"_type": "block"})
    with pytest.raises(DocumentFormatError):
        document_from_wire(["not a block"])
    with pytest.raises(DocumentFormatError):
        document_from_wire([{"_type": "code", "_key": "c", "kind": "shell", "payload": ""}])
    with pytest.raises(DocumentFormatError):
        document_from_wire([{"_type": "image", "_key": "i"}])


def test_canonical_ignores_keys():
    """Test canonical shapes compare link targets, not mark keys."""
    a = Document(blocks=(TextBlock(
        key="b1", children=(Span("s1", "x", ("m1",)),), mark_defs=(MarkDef("m1", "/a"),)
    ),))
    b = Document(blocks=(TextBlock(
        key="zz", children=(Span("q", "x", ("k9",)),), mark_defs=(MarkDef("k9", "/a"),)
    ),))
    assert a != b
    assert canonical(a) == canonical(b)
    assert canonical(a) == [("block", "normal", None, (("x", (("link", "/a"),)),))]


def test_document_has_code():
    """Test code block detection."""
    assert _sample().has_code
    assert not placeholder_document().has_code


def test_from_wire_rejects_string_marks():
    """Test a marks value that is not a list is rejected, not split into characters."""
    data = [{"_type": "block", "_key": "a", "children": [
        {"_type": "span", "_key": "s", "text": "x", "marks": "strong"},
    ]}]
    with pytest.raises(DocumentFormatError):
        document_from_wire(data)
