import io
from typing import Any

import yaml

from ..core.model import Article, Document
from ..core.ports import ArticleCodec
from ..core.wire import document_from_wire, document_to_wire
from ..errors import DocumentFormatError


class YamlArticleCodec(ArticleCodec):
    """
    One YAML mapping per article:

        id: 3f9a...
        title: Spring market
        slug: spring-market
        publishedAt: '2024-05-01'
        body: [...]        # wire-shape blocks, or a legacy plain string
    """

    def decode(self, text: str, id: str) -> Article:
        try:
            data = yaml.safe_load(io.StringIO(text)) or {}
        except yaml.YAMLError as e:
            raise DocumentFormatError(f"Article {id} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise DocumentFormatError(f"Article {id} must be a mapping")

        raw_body = data.get("body")
        body: Document | str
        if raw_body is None:
            body = ""
        elif isinstance(raw_body, str):
            # Legacy body: kept as-is, normalized only when rendered
            body = raw_body
        else:
            body = document_from_wire(raw_body)

        published = data.get("publishedAt")
        return Article(
            id=id,
            title=str(data.get("title") or ""),
            slug=str(data.get("slug") or ""),
            published_at=str(published) if published is not None else None,
            link=data.get("link"),
            body=body,
        )

    def encode(self, article: Article) -> str:
        data: dict[str, Any] = {"id": article.id, "title": article.title}
        if article.slug:
            data["slug"] = article.slug
        if article.published_at:
            data["publishedAt"] = article.published_at
        if article.link:
            data["link"] = article.link
        if isinstance(article.body, Document):
            data["body"] = document_to_wire(article.body)
        else:
            data["body"] = article.body
        buf = io.StringIO()
        yaml.safe_dump(data, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue()
