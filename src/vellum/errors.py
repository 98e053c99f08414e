"""Exception hierarchy for vellum.

Content problems (malformed inline syntax, unknown tags) never raise; these
errors cover the storage and authoring boundaries only.
"""


class VellumError(Exception):
    """Base exception for all vellum errors."""


class DocumentFormatError(VellumError):
    """Persisted document data does not match the wire shape."""


class ArticleNotFoundError(VellumError):
    def __init__(self, article_id: str):
        super().__init__(f"Article {article_id} not found")
        self.article_id = article_id


class UntrustedContentError(VellumError):
    """Code blocks were submitted by a role that may not author them."""

    def __init__(self, role: str | None, kinds: list[str]):
        super().__init__(
            f"Role {role or '<none>'!r} may not save {', '.join(kinds)} blocks"
        )
        self.role = role
        self.kinds = kinds
