from typing import Protocol, Iterable
from .model import Article


class StorageStrategy(Protocol):
    """
    Flat store: one directory, one file per article.
    """

    def read_raw(self, id: str) -> str | None:
        pass

    def write_raw(self, id: str, contents: str) -> None:
        pass

    def delete_raw(self, id: str) -> None:
        pass

    def list_all_ids(self) -> Iterable[str]:
        pass


class ArticleCodec(Protocol):
    """
    Round-trip an article (metadata + body) to and from its stored text.
    """

    def decode(self, text: str, id: str) -> Article:
        pass

    def encode(self, article: Article) -> str:
        pass


class KeyGenerator(Protocol):
    def new_key(self) -> str:
        pass


class Sandbox(Protocol):
    """
    Evaluates a scripted snippet and returns renderable markup.
    Raises on failure; the renderer isolates the failure to one block.
    """

    def evaluate(self, payload: str) -> str:
        pass


class AssetResolver(Protocol):
    """
    Turn a stored asset reference into a URL the presentation layer can load.
    """

    def url_for(self, asset_ref: str, width: int | None = None) -> str:
        pass
