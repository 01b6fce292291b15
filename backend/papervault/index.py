import logging
from typing import List

from .canonical import canonical_json_bytes, parse_json_bytes
from .config import INDEX_KEY
from .storage import KeyValueStore

_logger = logging.getLogger(__name__)


class IndexManager:
    """Ordered, duplicate-free list of paper ids kept as one JSON array blob.

    append is a plain read-modify-write: two sessions appending at the same
    time race and the later write wins.
    """

    def __init__(self, store: KeyValueStore, key: str = INDEX_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[str]:
        raw = self.store.get_data(self.key)
        if not raw:
            return []
        try:
            ids = parse_json_bytes(raw)
        except (UnicodeDecodeError, ValueError) as e:
            _logger.warning("index %s unreadable, treating as empty: %s", self.key, e)
            return []
        if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
            _logger.warning("index %s is not a list of ids, treating as empty", self.key)
            return []
        seen = set()
        out = []
        for i in ids:
            if i not in seen:
                seen.add(i)
                out.append(i)
        return out

    def append(self, paper_id: str) -> List[str]:
        ids = self.load()
        if paper_id in ids:
            return ids
        ids.append(paper_id)
        self.store.set_data(self.key, canonical_json_bytes(ids))
        _logger.debug("index %s now holds %d ids", self.key, len(ids))
        return ids
