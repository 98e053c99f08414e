import secrets

from ..core.ports import KeyGenerator


class HexId(KeyGenerator):
    def __init__(self, nbytes: int = 6):  # 6 bytes -> 12 hex chars
        self.nbytes = nbytes

    def new_key(self) -> str:
        return secrets.token_hex(self.nbytes)


class SequentialKeys(KeyGenerator):
    """Predictable keys (``k1``, ``k2`` ...) for fixtures and diffs."""

    def __init__(self, prefix: str = "k"):
        self.prefix = prefix
        self._n = 0

    def new_key(self) -> str:
        self._n += 1
        return f"{self.prefix}{self._n}"
