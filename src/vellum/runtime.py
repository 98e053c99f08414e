"""Runtime wiring helper for CLI and API applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.idgen import HexId
from .adapters.yaml_codec import YamlArticleCodec
from .config import VellumConfig, load_config
from .core.archive import Archive
from .core.ports import Sandbox
from .encode.encoder import Encoder
from .render.renderer import DocumentRenderer


@dataclass
class Runtime:
    """Container for all wired components."""
    archive: Archive
    keys: HexId
    config: VellumConfig
    sandbox: Sandbox | None = None

    def renderer(self, on_image=None, on_link=None) -> DocumentRenderer:
        return DocumentRenderer(
            on_image=on_image,
            on_link=on_link,
            sandbox=self.sandbox,
            aspect_ratio=self.config.render.aspect_ratio,
            image_width=self.config.render.image_width,
        )


def build_runtime(
    store_path: Path | None = None,
    config_path: Path | None = None,
    sandbox: Sandbox | None = None,
) -> Runtime:
    """Build and wire all components for an article store."""
    config = load_config(config_path=config_path, store_path=store_path)
    
    # CLI args win over config values
    if store_path is None:
        store_path = config.store.root
    
    keys = HexId(nbytes=config.keys.bytes)
    storage = FsStorage(store_path, suffix=config.store.suffix)
    archive = Archive(
        storage,
        YamlArticleCodec(),
        encoder=Encoder(keys),
        trusted_roles=config.authoring.trusted_roles,
    )
    
    return Runtime(archive=archive, keys=keys, config=config, sandbox=sandbox)
