from ..core.model import Document, TextBlock


def preview_text(body: Document | str | None, max_length: int = 160) -> str:
    """Plain-text teaser of an article body.

    Text blocks are joined with a single space; raw embeds are skipped.
    The result is cut at ``max_length`` characters and gets a trailing
    ellipsis when something was cut. ``max_length=0`` returns everything.
    """
    if body is None:
        text = ""
    elif isinstance(body, str):
        text = body
    else:
        text = " ".join(
            "".join(s.text for s in b.children if not s.is_raw)
            for b in body.blocks
            if isinstance(b, TextBlock)
        )
    if not max_length or len(text) <= max_length:
        return text
    return f"{text[:max_length]}…"
