import logging, secrets, string, time
from typing import Callable, List, Optional

from .cipher import PlaceholderCipher
from .codec import decode_paper, encode_paper
from .config import RECORD_PREFIX
from .errors import DecodeError, NotFoundError, StoreUnavailable
from .index import IndexManager
from .models import Paper, PaperDraft, PaperStatus
from .storage import KeyValueStore

_logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
ID_SUFFIX_LEN = 7
CONTENT_ID_RANGE = 10**6

# fields a mutation transform may change
MUTABLE_FIELDS = {"status", "citations"}

Transform = Callable[[Paper], Paper]


def new_paper_id(clock: Callable[[], float] = time.time) -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(ID_SUFFIX_LEN))
    return f"{int(clock() * 1000)}-{suffix}"


def new_content_id() -> int:
    return secrets.randbelow(CONTENT_ID_RANGE)


class RegistrySync:
    """Keeps the paper index and the per-paper blobs consistent in a KeyValueStore.

    Every list_papers call is a full re-read: index first, then one get per id.
    Writes go record first, index second, so a reader that trusts the index
    never sees an id without a record (barring concurrent writers).
    """

    def __init__(self, store: KeyValueStore, index: Optional[IndexManager] = None,
                 cipher: Optional[PlaceholderCipher] = None, record_prefix: str = RECORD_PREFIX,
                 clock: Callable[[], float] = time.time,
                 id_factory: Optional[Callable[[], str]] = None,
                 content_id_factory: Callable[[], int] = new_content_id):
        self.store = store
        self.index = index or IndexManager(store)
        self.cipher = cipher or PlaceholderCipher()
        self.record_prefix = record_prefix
        self.clock = clock
        self.id_factory = id_factory or (lambda: new_paper_id(self.clock))
        self.content_id_factory = content_id_factory

    def record_key(self, paper_id: str) -> str:
        return f"{self.record_prefix}{paper_id}"

    # -------------------------------------------------
    # reads
    # -------------------------------------------------
    def list_papers(self) -> List[Paper]:
        if not self.store.is_available():
            _logger.warning("store unavailable, returning empty snapshot")
            return []
        try:
            ids = self.index.load()
        except StoreUnavailable as e:
            _logger.warning("index read failed, returning empty snapshot: %s", e)
            return []

        papers: List[Paper] = []
        for pid in ids:
            try:
                raw = self.store.get_data(self.record_key(pid))
            except StoreUnavailable as e:
                _logger.warning("skipping %s: %s", pid, e)
                continue
            if not raw:
                _logger.warning("skipping %s: indexed but no record stored", pid)
                continue
            try:
                papers.append(decode_paper(pid, raw))
            except DecodeError as e:
                _logger.warning("skipping %s: %s", pid, e)
        # sorted() is stable, so equal timestamps keep index order
        return sorted(papers, key=lambda p: p.created_at, reverse=True)

    def get(self, paper_id: str, operation: str = "get") -> Paper:
        raw = self.store.get_data(self.record_key(paper_id))
        if not raw:
            raise NotFoundError("paper not found", paper_id=paper_id, operation=operation)
        return decode_paper(paper_id, raw)

    # -------------------------------------------------
    # writes
    # -------------------------------------------------
    def create(self, draft: PaperDraft, owner: str) -> str:
        pid = self.id_factory()
        paper = Paper(
            id=pid,
            title=draft.title,
            abstract=draft.abstract,
            category=draft.category,
            encrypted_content_id=self.cipher.encode(self.content_id_factory()),
            price=draft.price,
            owner=owner,
            created_at=int(self.clock()),
            status=PaperStatus.PENDING,
            citations=0,
        )
        self.store.set_data(self.record_key(pid), encode_paper(paper))
        self.index.append(pid)
        _logger.info("created paper %s owner=%s", pid, owner)
        return pid

    def mutate(self, paper_id: str, transform: Transform, operation: str = "mutate") -> Paper:
        old = self.get(paper_id, operation=operation)
        new = transform(old)
        before = old.model_dump(exclude=MUTABLE_FIELDS)
        after = new.model_dump(exclude=MUTABLE_FIELDS)
        if before != after:
            changed = sorted(k for k in before if before[k] != after.get(k))
            raise ValueError(f"{operation} may only change status/citations, not {changed}")
        self.store.set_data(self.record_key(paper_id), encode_paper(new))
        _logger.info("%s %s: status=%s citations=%d", operation, paper_id, new.status.value, new.citations)
        return new

    def publish(self, paper_id: str) -> Paper:
        return self.mutate(paper_id, set_status(PaperStatus.PUBLISHED), operation="publish")

    def reject(self, paper_id: str) -> Paper:
        return self.mutate(paper_id, set_status(PaperStatus.REJECTED), operation="reject")

    def cite(self, paper_id: str) -> Paper:
        return self.mutate(paper_id, add_citation, operation="cite")


def set_status(status: PaperStatus) -> Transform:
    def _apply(p: Paper) -> Paper:
        return p.model_copy(update={"status": status})
    return _apply


def add_citation(p: Paper) -> Paper:
    return p.model_copy(update={"citations": p.citations + 1})
