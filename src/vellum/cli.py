"""CLI for vellum - rich-text article content pipeline."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.html_surface import parse_surface, surface_to_html
from .core.model import Article, Document, placeholder_document
from .core.utils import slugify
from .core.wire import document_to_wire
from .decode.inline import decode
from .editor.loader import load_surface
from .render.excerpt import preview_text
from .render.html import to_html
from .runtime import build_runtime

logger = logging.getLogger("vellum")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def cmd_new(args: argparse.Namespace, rt: Any) -> int:
    """Create a new, empty article."""
    aid = rt.keys.new_key()
    article = Article(
        id=aid,
        title=args.title or "",
        slug=slugify(args.title or ""),
        published_at=args.date,
        body=placeholder_document(rt.keys.new_key()),
    )
    rt.archive.put(article)
    if not args.quiet:
        print(aid)
    return 0


def cmd_ls(args: argparse.Namespace, rt: Any) -> int:
    """List article ids."""
    ids = list(rt.archive.list_ids())
    if args.json:
        items = []
        for aid in ids:
            a = rt.archive.get(aid)
            items.append({"id": aid, "title": a.title if a else ""})
        print(json.dumps(items, indent=2, ensure_ascii=False))
        return 0
    for aid in ids:
        if args.with_titles:
            a = rt.archive.get(aid)
            print(f"{aid}\t{a.title if a else ''}")
        else:
            print(aid)
    return 0


def cmd_show(args: argparse.Namespace, rt: Any) -> int:
    """Print the stored body (wire shape, or the legacy string)."""
    article = rt.archive.require(args.id)
    body: Any = article.body
    if isinstance(body, Document):
        body = document_to_wire(body)
    out = {
        "id": article.id,
        "title": article.title,
        "slug": article.slug,
        "publishedAt": article.published_at,
        "body": body,
    }
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


def cmd_save(args: argparse.Namespace, rt: Any) -> int:
    """Encode an editor HTML file and save it as the article body."""
    surface = parse_surface(_read_input(args.file))
    article = rt.archive.save(args.id, surface, role=args.role, title=args.title)
    if not args.quiet:
        blocks = len(article.body) if isinstance(article.body, Document) else 1
        print(f"Saved {article.id} ({blocks} blocks)")
    return 0


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Render an article body to HTML."""
    article = rt.archive.require(args.id)
    print(to_html(rt.renderer().render(article.body)))
    return 0


def cmd_edit_html(args: argparse.Namespace, rt: Any) -> int:
    """Print the editor surface HTML for an article."""
    article = rt.archive.require(args.id)
    print(surface_to_html(load_surface(article.body)))
    return 0


def cmd_excerpt(args: argparse.Namespace, rt: Any) -> int:
    """Print the preview text of an article."""
    article = rt.archive.require(args.id)
    length = args.length if args.length is not None else rt.config.render.excerpt_length
    print(preview_text(article.body, length))
    return 0


def cmd_preview(args: argparse.Namespace, rt: Any) -> int:
    """Render one inline text run, as the live preview does."""
    text = _read_input("-") if args.text == "-" else args.text
    print(to_html(decode(text)))
    return 0


def cmd_rm(args: argparse.Namespace, rt: Any) -> int:
    """Delete an article."""
    rt.archive.require(args.id)
    if not args.yes:
        print(f"Refusing to delete {args.id} without --yes", file=sys.stderr)
        return 1
    rt.archive.delete(args.id)
    if not args.quiet:
        print(f"Deleted {args.id}")
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start the local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install vellum[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1
    
    token_arg = args.token
    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg
    
    app = create_app(rt, token=token, enable_cors=args.cors)
    print(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vellum", description="vellum article content CLI"
    )
    parser.add_argument(
        "--version", action="version", version=f"vellum {__version__}"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/vellum.toml, store/vellum.toml)",
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Path to article store directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    
    subparsers = parser.add_subparsers(dest="cmd", required=True)
    
    parser_new = subparsers.add_parser("new", help="Create a new article")
    parser_new.add_argument("--title", help="Article title")
    parser_new.add_argument("--date", help="Publication date (YYYY-MM-DD)")
    
    parser_ls = subparsers.add_parser("ls", help="List articles")
    parser_ls.add_argument(
        "--with-titles", dest="with_titles", action="store_true",
        help="Print id and title (tab-separated)"
    )
    
    parser_show = subparsers.add_parser("show", help="Print stored article as JSON")
    parser_show.add_argument("id", help="Article ID")
    
    parser_save = subparsers.add_parser("save", help="Encode editor HTML into an article")
    parser_save.add_argument("id", help="Article ID")
    parser_save.add_argument("file", help="HTML file from the editor ('-' for stdin)")
    parser_save.add_argument("--role", default=None, help="Author role")
    parser_save.add_argument("--title", default=None, help="Set the article title")
    
    parser_render = subparsers.add_parser("render", help="Render an article to HTML")
    parser_render.add_argument("id", help="Article ID")
    
    parser_edit_html = subparsers.add_parser("edit-html", help="Print editor HTML for an article")
    parser_edit_html.add_argument("id", help="Article ID")
    
    parser_excerpt = subparsers.add_parser("excerpt", help="Print article preview text")
    parser_excerpt.add_argument("id", help="Article ID")
    parser_excerpt.add_argument("--length", type=int, default=None, help="Maximum length")
    
    parser_preview = subparsers.add_parser("preview", help="Render inline text ('-' for stdin)")
    parser_preview.add_argument("text", help="Text to render")
    
    parser_rm = subparsers.add_parser("rm", help="Delete an article")
    parser_rm.add_argument("id", help="Article ID")
    parser_rm.add_argument("--yes", action="store_true", help="Skip confirmation")
    
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API")
    parser_serve.add_argument("--host", default="127.0.0.1")
    parser_serve.add_argument("--port", type=int, default=8765)
    parser_serve.add_argument(
        "--token", default="auto", help="Bearer token ('auto' to generate, 'none' to disable)"
    )
    parser_serve.add_argument("--cors", action="store_true", help="Enable CORS")
    
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    rt = build_runtime(store_path=args.store, config_path=args.config)
    setup_logging("DEBUG" if args.verbose else rt.config.logging.level)
    
    handlers = {
        "new": cmd_new,
        "ls": cmd_ls,
        "show": cmd_show,
        "save": cmd_save,
        "render": cmd_render,
        "edit-html": cmd_edit_html,
        "excerpt": cmd_excerpt,
        "preview": cmd_preview,
        "rm": cmd_rm,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            logger.debug("Command %s failed", args.cmd, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
