import re

import pytest

from conftest import make_draft
from papervault.cipher import PlaceholderCipher
from papervault.errors import NotFoundError, StoreUnavailable
from papervault.models import PaperStatus
from papervault.storage import MemoryStore
from papervault.sync import RegistrySync, new_paper_id


def test_new_paper_id_shape():
    pid = new_paper_id(lambda: 1_700_000_000.5)
    assert re.fullmatch(r"1700000000500-[0-9a-z]{7}", pid)
    assert len({new_paper_id() for _ in range(200)}) == 200


def test_create_writes_record_then_index(registry, store, clock):
    pid = registry.create(make_draft(), owner="0xOwner")
    assert pid == "p1"
    assert "paper_p1" in store.data
    assert store.data["paper_keys"] == b'["p1"]'
    p = registry.get(pid)
    assert p.status == PaperStatus.PENDING
    assert p.citations == 0
    assert p.created_at == int(clock.now)
    assert p.owner == "0xOwner"
    assert 0 <= PlaceholderCipher().decode(p.encrypted_content_id) < 10**6


def test_list_sorted_newest_first_with_stable_ties(registry, clock):
    a = registry.create(make_draft(title="a"), owner="0x1")
    b = registry.create(make_draft(title="b"), owner="0x1")
    clock.advance(10)
    c = registry.create(make_draft(title="c"), owner="0x1")
    d = registry.create(make_draft(title="d"), owner="0x1")
    assert [p.id for p in registry.list_papers()] == [c, d, a, b]


def test_list_skips_corrupt_and_missing_records(registry, store):
    good1 = registry.create(make_draft(), owner="0x1")
    bad = registry.create(make_draft(), owner="0x1")
    good2 = registry.create(make_draft(), owner="0x1")
    store.data[registry.record_key(bad)] = b"{broken"
    registry.index.append("ghost")
    ids = [p.id for p in registry.list_papers()]
    assert sorted(ids) == sorted([good1, good2])


def test_list_ignores_orphan_records(registry, store):
    registry.create(make_draft(), owner="0x1")
    store.data["paper_orphan"] = store.data["paper_p1"]
    assert [p.id for p in registry.list_papers()] == ["p1"]


def test_list_degrades_to_empty_when_store_unavailable(registry, store):
    registry.create(make_draft(), owner="0x1")
    store.available = False
    assert registry.list_papers() == []


def test_list_returns_fresh_copy(registry):
    registry.create(make_draft(), owner="0x1")
    first = registry.list_papers()
    first.clear()
    assert len(registry.list_papers()) == 1


def test_mutate_missing_raises_not_found(registry):
    with pytest.raises(NotFoundError) as ei:
        registry.cite("nope")
    assert ei.value.paper_id == "nope"
    assert ei.value.operation == "cite"


def test_mutate_rejects_changes_outside_status_and_citations(registry):
    pid = registry.create(make_draft(), owner="0x1")
    with pytest.raises(ValueError):
        registry.mutate(pid, lambda p: p.model_copy(update={"title": "hijacked"}))
    assert registry.get(pid).title == "On Lattices"


def test_named_mutations(registry):
    pid = registry.create(make_draft(), owner="0x1")
    assert registry.cite(pid).citations == 1
    assert registry.cite(pid).citations == 2
    assert registry.publish(pid).status == PaperStatus.PUBLISHED
    assert registry.get(pid).citations == 2


def test_create_surfaces_store_failure():
    reg = RegistrySync(MemoryStore(available=False))
    with pytest.raises(StoreUnavailable):
        reg.create(make_draft(), owner="0x1")


class _FlakyStore(MemoryStore):
    def __init__(self, failing_key):
        super().__init__()
        self.failing_key = failing_key

    def get_data(self, key):
        if key == self.failing_key:
            raise StoreUnavailable(f"timeout reading {key!r}", operation="get")
        return super().get_data(key)


def test_list_contains_store_error_to_one_record(clock):
    store = _FlakyStore("paper_p2")
    ids = iter(["p1", "p2", "p3"])
    reg = RegistrySync(store, clock=clock, id_factory=lambda: next(ids))
    for _ in range(3):
        reg.create(make_draft(), owner="0x1")
    assert [p.id for p in reg.list_papers()] == ["p1", "p3"]
