import logging
from collections.abc import Iterable

from ..encode.encoder import Encoder
from ..errors import ArticleNotFoundError, UntrustedContentError
from .model import Article, CodeBlock, Document
from .ports import ArticleCodec, StorageStrategy
from .surface import SurfaceNode
from .utils import slugify

logger = logging.getLogger(__name__)


class Archive:
    """Article store: storage + codec, plus the save path for edited surfaces.

    Code blocks (scripted snippets and raw markup) run or render unescaped,
    so only roles listed in ``trusted_roles`` may save documents holding them.
    """

    def __init__(
        self,
        storage: StorageStrategy,
        codec: ArticleCodec,
        encoder: Encoder | None = None,
        trusted_roles: Iterable[str] = ("admin",),
    ):
        self.storage = storage
        self.codec = codec
        self.encoder = encoder or Encoder()
        self.trusted_roles = frozenset(trusted_roles)

    def get(self, id: str) -> Article | None:
        raw = self.storage.read_raw(id)
        if raw is None:
            return None
        return self.codec.decode(raw, id)

    def require(self, id: str) -> Article:
        article = self.get(id)
        if article is None:
            raise ArticleNotFoundError(id)
        return article

    def put(self, article: Article) -> None:
        contents = self.codec.encode(article)
        self.storage.write_raw(article.id, contents)

    def delete(self, id: str) -> None:
        self.storage.delete_raw(id)

    def list_ids(self) -> Iterable[str]:
        return self.storage.list_all_ids()

    def check_authoring(self, doc: Document, role: str | None) -> None:
        kinds = sorted({b.kind for b in doc.blocks if isinstance(b, CodeBlock)})
        if kinds and role not in self.trusted_roles:
            raise UntrustedContentError(role, kinds)

    def save(
        self,
        id: str,
        surface: SurfaceNode,
        role: str | None = None,
        title: str | None = None,
        published_at: str | None = None,
    ) -> Article:
        """Encode an edited surface and persist it as the article body.

        Metadata not given is kept from the stored article, if any.
        """
        doc = self.encoder.encode(surface)
        self.check_authoring(doc, role)

        article = self.get(id) or Article(id=id)
        if title is not None:
            article.title = title
            article.slug = slugify(title)
        if published_at is not None:
            article.published_at = published_at
        article.body = doc
        self.put(article)
        logger.info("Saved article %s (%d blocks)", id, len(doc))
        return article
