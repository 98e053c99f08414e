from pathlib import Path
from typing import Iterable
from ..core.ports import StorageStrategy


class FsStorage(StorageStrategy):
    def __init__(self, root: Path, suffix: str = ".yaml"):
        self.root = root
        self.suffix = suffix

    def _path(self, id: str) -> Path:
        return self.root / f"{id}{self.suffix}"

    def read_raw(self, id: str) -> str | None:
        p = self._path(id)
        return p.read_text(encoding="utf-8") if p.exists() else None

    def write_raw(self, id: str, contents: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so a reader never sees a half-written article
        tmp = self._path(id).with_suffix(self.suffix + ".tmp")
        try:
            tmp.write_text(contents, encoding="utf-8")
            tmp.replace(self._path(id))
        except Exception:
            if tmp.exists():
                tmp.unlink()
            raise

    def delete_raw(self, id: str) -> None:
        p = self._path(id)
        if p.exists():
            p.unlink()

    def list_all_ids(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        return sorted(p.name[: -len(self.suffix)] for p in self.root.glob(f"*{self.suffix}"))
