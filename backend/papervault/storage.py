import logging, os
from typing import Dict, Optional, Protocol

from .config import DATA_DIR
from .errors import StoreUnavailable

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Byte-oriented store the registry is persisted in.

    Empty bytes from get_data means the key is absent. There is no listing,
    no delete and no atomicity across keys.
    """

    def is_available(self) -> bool: ...

    def get_data(self, key: str) -> bytes: ...

    def set_data(self, key: str, value: bytes) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, bytes]] = None, available: bool = True):
        self.data: Dict[str, bytes] = dict(initial or {})
        self.available = available

    def is_available(self) -> bool:
        return self.available

    def get_data(self, key: str) -> bytes:
        if not self.available:
            raise StoreUnavailable(f"store unavailable reading {key!r}", operation="get")
        return self.data.get(key, b"")

    def set_data(self, key: str, value: bytes) -> None:
        if not self.available:
            raise StoreUnavailable(f"store unavailable writing {key!r}", operation="set")
        self.data[key] = bytes(value)


class FileStore:
    """One file per key under a data directory; file name is the key's hex."""

    def __init__(self, data_dir: str = DATA_DIR):
        self.data_dir = data_dir

    def _path(self, key: str) -> str:
        os.makedirs(self.data_dir, exist_ok=True)
        return os.path.join(self.data_dir, f"{key.encode('utf-8').hex()}.bin")

    def is_available(self) -> bool:
        try:
            os.makedirs(self.data_dir, exist_ok=True)
        except OSError:
            return False
        return os.access(self.data_dir, os.R_OK | os.W_OK)

    def get_data(self, key: str) -> bytes:
        try:
            p = self._path(key)
            if not os.path.exists(p):
                return b""
            with open(p, "rb") as f:
                return f.read()
        except OSError as e:
            raise StoreUnavailable(f"read failed for {key!r}: {e}", operation="get") from e

    def set_data(self, key: str, value: bytes) -> None:
        try:
            p = self._path(key)
            tmp = p + ".tmp"
            with open(tmp, "wb") as f:
                f.write(bytes(value))
            os.replace(tmp, p)
        except OSError as e:
            raise StoreUnavailable(f"write failed for {key!r}: {e}", operation="set") from e
        _logger.debug("wrote %d bytes to %s", len(value), key)
