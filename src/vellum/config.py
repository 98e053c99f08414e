"""Configuration loader for vellum.toml."""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


@dataclass
class StoreConfig:
    """Article store configuration."""
    root: Path
    suffix: str = ".yaml"


@dataclass
class KeysConfig:
    """Block/span key generation configuration."""
    bytes: int = 6


@dataclass
class RenderConfig:
    """Renderer configuration."""
    aspect_ratio: float = 56.25
    image_width: int = 1200
    excerpt_length: int = 160


@dataclass
class AuthoringConfig:
    """Who may save scripted and raw-markup blocks."""
    trusted_roles: list[str] = field(default_factory=lambda: ["admin"])
    # role of API callers holding the bearer token
    token_role: str = "admin"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class VellumConfig:
    """Complete vellum configuration."""
    store: StoreConfig
    keys: KeysConfig
    render: RenderConfig
    authoring: AuthoringConfig
    logging: LoggingConfig


def load_config(config_path: Path | None = None, store_path: Path | None = None) -> VellumConfig:
    """
    Load configuration from vellum.toml.
    
    Search order:
    1. config_path (if provided)
    2. cwd/vellum.toml
    3. store_path/vellum.toml
    
    Args:
        config_path: Explicit path to config file
        store_path: Article store root for fallback search
    
    Returns:
        VellumConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}
    
    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "vellum.toml")
    if store_path:
        search_paths.append(store_path / "vellum.toml")
    
    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break
    
    store_data = toml_data.get("store", {})
    store_config = StoreConfig(
        root=Path(store_data.get("root", store_path or Path("./articles"))),
        suffix=store_data.get("suffix", ".yaml"),
    )
    
    keys_data = toml_data.get("keys", {})
    keys_config = KeysConfig(bytes=keys_data.get("bytes", 6))
    
    render_data = toml_data.get("render", {})
    render_config = RenderConfig(
        aspect_ratio=float(render_data.get("aspect_ratio", 56.25)),
        image_width=render_data.get("image_width", 1200),
        excerpt_length=render_data.get("excerpt_length", 160),
    )
    
    authoring_data = toml_data.get("authoring", {})
    authoring_config = AuthoringConfig(
        trusted_roles=list(authoring_data.get("trusted_roles", ["admin"])),
        token_role=str(authoring_data.get("token_role", "admin")),
    )
    
    logging_data = toml_data.get("logging", {})
    logging_config = LoggingConfig(level=str(logging_data.get("level", "WARNING")).upper())
    
    return VellumConfig(
        store=store_config,
        keys=keys_config,
        render=render_config,
        authoring=authoring_config,
        logging=logging_config,
    )
