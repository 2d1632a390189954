import os
import threading
import uuid
from typing import Dict, List, Optional, Sequence, Set

import pytest
from dotenv import load_dotenv

from uuidharvest.core.contracts import ResolvedPair
from uuidharvest.counters import HarvestCounters

load_dotenv()

# ---- mode & env flags -------------------------------------------------------


def _truthy(s: str | None) -> bool:
    return str(s).strip().lower() in {"1", "true", "yes", "on"}


LIVE = _truthy(os.getenv("UUIDHARVEST_LIVE_TESTS"))

# Well-known fixtures used across the suite.
STEVE_ID = uuid.UUID("8667ba71-b85a-4004-af54-457a9734eed7")
ALEX_ID = uuid.UUID("6ab43178-89fd-4905-97f6-0f67d9d76fd9")
NOTCH_ID = uuid.UUID("069a79f4-44e9-4726-a5be-fca90e38aaf5")


# =============================================================================
# MOCK HELPERS (used when UUIDHARVEST_LIVE_TESTS is NOT set)
# =============================================================================


class FakeResolver:
    """
    Stands in for HttpBatchResolver: answers from a fixed name table and
    records every batch it was handed. Counter handling mirrors the real
    resolver (requests once per call, resolved once per hit).
    """

    def __init__(
        self,
        table: Dict[str, uuid.UUID],
        counters: Optional[HarvestCounters] = None,
        fail_on: Set[str] = frozenset(),
    ) -> None:
        # keys are matched case-insensitively, values keep the table's casing
        self._table = {k.lower(): (v, k) for k, v in table.items()}
        self.counters = counters or HarvestCounters()
        self.fail_on = set(fail_on)
        self.batches: List[List[str]] = []
        self._lock = threading.Lock()

    def resolve(self, names: Sequence[str]) -> List[ResolvedPair]:
        with self._lock:
            self.batches.append(list(names))
        self.counters.requests.incr()
        if self.fail_on.intersection(names):
            return []
        out = [
            ResolvedPair(*self._table[n.lower()])
            for n in names
            if n.lower() in self._table
        ]
        self.counters.resolved.incr(len(out))
        return out

    @property
    def submitted(self) -> List[str]:
        return [n for b in self.batches for n in b]


class ListSink:
    def __init__(self) -> None:
        self.items: List[ResolvedPair] = []

    def put(self, item: ResolvedPair) -> None:
        self.items.append(item)


class _Resp:
    def __init__(self, status=200, text="", json_obj=None):
        self.status_code = status
        self.text = text
        self._json = json_obj

    def json(self):
        if isinstance(self._json, Exception):
            raise self._json
        return self._json


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def counters() -> HarvestCounters:
    return HarvestCounters()


@pytest.fixture
def mojang_table() -> Dict[str, uuid.UUID]:
    """Steve and Alex exist, Notch is deliberately missing."""
    return {"Steve": STEVE_ID, "Alex": ALEX_ID}


@pytest.fixture
def fake_resolver(mojang_table, counters) -> FakeResolver:
    return FakeResolver(mojang_table, counters)


# =============================================================================
# PYTEST MARKER HANDLING
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "live: test requires live API access")


def pytest_runtest_setup(item: pytest.Item) -> None:
    if "live" in item.keywords and not LIVE:
        pytest.skip("live test skipped (UUIDHARVEST_LIVE_TESTS not enabled)")
