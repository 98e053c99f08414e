"""FastAPI application for the vellum local JSON API."""

import logging
import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from ..adapters.html_surface import parse_surface, surface_to_html
from ..core.model import Document
from ..core.wire import document_to_wire
from ..decode.inline import decode
from ..editor.loader import load_surface
from ..editor.paste import paste_to_text
from ..errors import ArticleNotFoundError, DocumentFormatError, UntrustedContentError
from ..render.excerpt import preview_text
from ..render.html import to_html

logger = logging.getLogger(__name__)


class SaveRequest(BaseModel):
    html: str
    title: str | None = None
    published_at: str | None = None


class PreviewRequest(BaseModel):
    text: str


class PasteRequest(BaseModel):
    html: str


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with archive and config
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Vellum API",
        description="Local JSON API for a vellum article store",
        version="0.1.0",
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")

        async def author_role(auth: None = Depends(verify_token)) -> str | None:
            """Holders of the bearer token author as the configured token role."""
            return runtime.config.authoring.token_role
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

        async def author_role() -> str | None:
            """Anonymous callers are never trusted."""
            return None

    def require(article_id: str) -> Any:
        try:
            return runtime.archive.require(article_id)
        except ArticleNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except DocumentFormatError as e:
            logger.warning("Unreadable article %s: %s", article_id, e)
            raise HTTPException(status_code=422, detail=str(e)) from e

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": "0.1.0"}

    @app.get("/articles")
    async def list_articles(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """List article ids."""
        return {"ids": list(runtime.archive.list_ids())}

    @app.get("/articles/{article_id}")
    async def get_article(article_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get article metadata and stored body."""
        article = require(article_id)
        body: Any = article.body
        if isinstance(body, Document):
            body = document_to_wire(body)
        return {
            "id": article.id,
            "title": article.title,
            "slug": article.slug,
            "publishedAt": article.published_at,
            "body": body,
        }

    @app.get("/articles/{article_id}/html")
    async def render_article(article_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Render the article body to HTML."""
        article = require(article_id)
        return {"id": article.id, "html": to_html(runtime.renderer().render(article.body))}

    @app.get("/articles/{article_id}/surface")
    async def editor_surface(article_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Editor HTML for loading the article into a contenteditable region."""
        article = require(article_id)
        return {"id": article.id, "html": surface_to_html(load_surface(article.body))}

    @app.get("/articles/{article_id}/excerpt")
    async def excerpt(
        article_id: str,
        length: int | None = Query(None, ge=1, description="Maximum length"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Plain-text preview of the article."""
        article = require(article_id)
        max_length = length or runtime.config.render.excerpt_length
        return {"id": article.id, "excerpt": preview_text(article.body, max_length)}

    @app.put("/articles/{article_id}")
    async def save_article(
        article_id: str, req: SaveRequest, role: str | None = Depends(author_role)
    ) -> dict[str, Any]:
        """Encode editor HTML and store it as the article body."""
        try:
            article = runtime.archive.save(
                article_id,
                parse_surface(req.html),
                role=role,
                title=req.title,
                published_at=req.published_at,
            )
        except UntrustedContentError as e:
            raise HTTPException(status_code=403, detail=str(e)) from e
        except DocumentFormatError as e:
            logger.warning("Unreadable article %s: %s", article_id, e)
            raise HTTPException(status_code=422, detail=str(e)) from e
        return {
            "id": article.id,
            "slug": article.slug,
            "body": document_to_wire(article.body),
        }

    @app.delete("/articles/{article_id}")
    async def delete_article(article_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        require(article_id)
        runtime.archive.delete(article_id)
        return {"id": article_id, "deleted": True}

    @app.post("/preview")
    async def preview(req: PreviewRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Render one inline text run, as the editor's live preview does."""
        return {"html": to_html(decode(req.text))}

    @app.post("/paste")
    async def paste(req: PasteRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Turn pasted HTML into the plain text inserted at the caret."""
        return {"text": paste_to_text(req.html)}

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
