import itertools

import pytest
from eth_account import Account

from papervault.desk import PaperDesk
from papervault.models import PaperDraft
from papervault.storage import MemoryStore
from papervault.sync import RegistrySync


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def registry(store, clock):
    counter = itertools.count(1)
    return RegistrySync(store, clock=clock, id_factory=lambda: f"p{next(counter)}")


@pytest.fixture
def desk(registry):
    return PaperDesk(registry)


@pytest.fixture
def owner():
    return Account.create()


@pytest.fixture
def stranger():
    return Account.create()


def make_draft(**overrides) -> PaperDraft:
    fields = {"title": "On Lattices", "abstract": "We study lattices.", "category": "Physics", "price": 0.1}
    fields.update(overrides)
    return PaperDraft(**fields)
