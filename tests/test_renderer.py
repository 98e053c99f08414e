"""Tests for rendering documents to a render tree and HTML."""

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
)
from vellum.core.nodes import (
    Button,
    ErrorPanel,
    FileCard,
    Figure,
    Frame,
    Link,
    ListGroup,
    Media,
    Raw,
    ScriptResult,
    Section,
    Strong,
    Text,
)
from vellum.render import DocumentRenderer, render, to_html


class EchoSandbox:
    def evaluate(self, payload: str) -> str:
        return f"<output>{payload}</output>"


class BrokenSandbox:
    def evaluate(self, payload: str) -> str:
        raise RuntimeError("boom")


def _doc(*blocks) -> Document:
    return Document(blocks=tuple(blocks))


def _para(*spans, key="b", **kwargs) -> TextBlock:
    return TextBlock(key=key, children=tuple(spans), **kwargs)


def test_hello_bold_world():
    """Test a paragraph with a bold span."""
    doc = _doc(_para(Span("s1", "Hello "), Span("s2", "world", ("strong",))))
    nodes = render(doc)
    
    assert nodes == [Section(tag="p", children=[Text("Hello "), Strong([Text("world")])])]
    assert to_html(nodes) == "<p>Hello <strong>world</strong></p>"


def test_legacy_string_body():
    """Test plain-text bodies render as one paragraph with line breaks."""
    assert to_html(render("Line1\nLine2")) == "<p>Line1<br>Line2</p>"


def test_none_body():
    """Test a missing body renders an empty paragraph."""
    assert to_html(render(None)) == "<p></p>"


def test_span_text_is_decoded():
    """Test span text goes through the inline micro-syntax."""
    doc = _doc(_para(Span("s", "a *b* [c](/d)")))
    assert to_html(render(doc)) == (
        '<p>a <em>b</em> <a href="/d" target="_blank" rel="noopener noreferrer">c</a></p>'
    )


def test_adjacent_spans_with_equal_marks_join():
    """Test syntax split across equally marked spans still decodes."""
    doc = _doc(_para(Span("s1", "**bo"), Span("s2", "ld**")))
    assert to_html(render(doc)) == "<p><strong>bold</strong></p>"


def test_link_mark_wraps_text():
    """Test def-backed marks become links that notify on activation."""
    clicked = []
    doc = _doc(_para(
        Span("s", "site", ("m1", "strong")),
        mark_defs=(MarkDef("m1", "https://example.com"),),
    ))
    nodes = DocumentRenderer(on_link=clicked.append).render(doc)
    
    strong = nodes[0].children[0]
    assert isinstance(strong, Strong)
    link = strong.children[0]
    assert isinstance(link, Link)
    assert link.text == "site"
    link.activate()
    assert clicked == ["https://example.com"]


def test_unknown_mark_is_ignored():
    """Test marks without a definition render as plain text."""
    doc = _doc(_para(Span("s", "x", ("nope",))))
    assert to_html(render(doc)) == "<p>x</p>"


def test_headings():
    """Test block styles choose the element."""
    doc = _doc(_para(Span("s", "T"), style="h3"), _para(Span("q", "Q"), key="c", style="blockquote"))
    assert to_html(render(doc)) == "<h3>T</h3><blockquote>Q</blockquote>"


def test_list_items_are_grouped():
    """Test consecutive items of one kind share a list."""
    doc = _doc(
        _para(Span("1", "a"), key="1", list_item="bullet"),
        _para(Span("2", "b"), key="2", list_item="bullet"),
        _para(Span("3", "c"), key="3", list_item="number"),
        _para(Span("4", "d"), key="4"),
    )
    nodes = render(doc)
    
    assert [type(n) for n in nodes] == [ListGroup, ListGroup, Section]
    assert not nodes[0].ordered
    assert len(nodes[0].items) == 2
    assert nodes[1].ordered
    assert to_html(nodes) == "<ul><li>a</li><li>b</li></ul><ol><li>c</li></ol><p>d</p>"


def test_raw_span_is_not_parsed():
    """Test sentinel spans are injected as-is."""
    doc = _doc(_para(Span("s", "<b>*x*</b>", (RAW_MARK,))))
    assert to_html(render(doc)) == "<p><b>*x*</b></p>"


def test_raw_image_is_enlargeable():
    """Test raw image embeds notify the image callback."""
    seen = []
    doc = _doc(_para(Span("s", '<img src="/cat.jpg" alt="" loading="lazy" />', (RAW_MARK,))))
    nodes = DocumentRenderer(on_image=seen.append).render(doc)
    
    raw = nodes[0].children[0]
    assert isinstance(raw, Raw)
    raw.activate()
    assert seen == ["/cat.jpg"]


def test_raw_iframe_gets_aspect_wrapper():
    """Test raw frame embeds render inside the aspect-ratio wrapper."""
    doc = _doc(_para(Span("s", '<iframe src="https://www.youtube.com/embed/x"></iframe>', (RAW_MARK,))))
    nodes = DocumentRenderer(aspect_ratio=75.0).render(doc)
    
    assert nodes[0].children == [Frame(src="https://www.youtube.com/embed/x", aspect_ratio=75.0)]
    assert "padding-bottom: 75.0%" in to_html(nodes)


def test_inline_media_callbacks():
    """Test media decoded from text are bound to the image callback."""
    seen = []
    doc = _doc(_para(Span("s", 'x <img src="/a.png" alt="a" />')))
    nodes = DocumentRenderer(on_image=seen.append).render(doc)
    
    media = nodes[0].children[1]
    assert isinstance(media, Media)
    media.activate()
    assert seen == ["/a.png"]


def test_image_block():
    """Test image blocks resolve their asset reference."""
    class Sized:
        def url_for(self, asset_ref, width=None):
            return f"https://cdn/{asset_ref}?w={width}"
    
    nodes = DocumentRenderer(assets=Sized(), image_width=600).render(_doc(ImageBlock("i", "img-1")))
    
    assert isinstance(nodes[0], Figure)
    assert nodes[0].media.src == "https://cdn/img-1?w=600"


def test_file_and_button_blocks():
    """Test file cards and call-to-action buttons."""
    clicked = []
    doc = _doc(
        FileBlock("f", "https://cdn/menu.pdf", "menu.pdf", 2.0),
        ButtonBlock("b", "Order", "https://shop"),
    )
    nodes = DocumentRenderer(on_link=clicked.append).render(doc)
    
    assert isinstance(nodes[0], FileCard)
    assert isinstance(nodes[1], Button)
    nodes[0].activate()
    nodes[1].activate()
    assert clicked == ["https://cdn/menu.pdf", "https://shop"]
    html = to_html(nodes)
    assert "menu.pdf <small>(2.0 MB)</small>" in html
    assert '<a class="button" href="https://shop"' in html


def test_markup_code_block_is_raw():
    """Test raw-markup blocks are injected without parsing."""
    nodes = render(_doc(CodeBlock("c", "markup", "<hr/>")))
    assert nodes == [Raw("<hr/>")]


def test_scripted_block_uses_sandbox():
    """Test scripted blocks are evaluated by the sandbox."""
    nodes = DocumentRenderer(sandbox=EchoSandbox()).render(_doc(CodeBlock("c", "scripted", "x")))
    assert nodes == [ScriptResult("<output>x</output>")]


def test_scripted_failure_is_isolated():
    """Test one failing snippet does not stop the rest of the document."""
    doc = _doc(
        _para(Span("s", "before"), key="1"),
        CodeBlock("c", "scripted", "throw"),
        _para(Span("t", "after"), key="2"),
    )
    nodes = DocumentRenderer(sandbox=BrokenSandbox()).render(doc)
    
    assert isinstance(nodes[1], ErrorPanel)
    assert nodes[1].detail == "boom"
    html = to_html(nodes)
    assert html.startswith("<p>before</p>")
    assert html.endswith("<p>after</p>")
    assert 'role="alert"' in html


def test_scripted_without_sandbox():
    """Test scripted blocks show a panel when nothing can run them."""
    nodes = render(_doc(CodeBlock("c", "scripted", "x")))
    assert isinstance(nodes[0], ErrorPanel)


def test_html_escapes_text_and_filters_links():
    """Test text is escaped and unsafe link schemes are neutralized."""
    doc = _doc(_para(Span("s", "<script>x</script> [go](javascript:void0)")))
    html = to_html(render(doc))
    
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert 'href="javascript' not in html
    assert 'href="#"' in html


def test_raw_image_html_is_enlargeable():
    """Test raw image embeds get the same enlarge wrapper as decoded media."""
    doc = _doc(_para(Span("s", '<img src="/cat.jpg" alt="" loading="lazy" />', (RAW_MARK,))))
    html = to_html(render(doc))
    
    assert html == (
        '<p><a href="/cat.jpg" class="zoomable" data-enlarge>'
        '<img src="/cat.jpg" alt="" loading="lazy" /></a></p>'
    )


def test_linked_raw_image():
    """Test a linked raw image renders inside its link and is not enlargeable."""
    clicked = []
    doc = _doc(_para(
        Span("s", '<img src="/e.jpg" alt="" loading="lazy" />', (RAW_MARK, "m1")),
        mark_defs=(MarkDef("m1", "https://farm.example"),),
    ))
    nodes = DocumentRenderer(on_link=clicked.append).render(doc)
    
    link = nodes[0].children[0]
    assert isinstance(link, Link)
    assert isinstance(link.children[0], Raw)
    assert link.children[0].target is None
    link.activate()
    assert clicked == ["https://farm.example"]
    assert to_html(nodes) == (
        '<p><a href="https://farm.example" target="_blank" rel="noopener noreferrer">'
        '<img src="/e.jpg" alt="" loading="lazy" /></a></p>'
    )
