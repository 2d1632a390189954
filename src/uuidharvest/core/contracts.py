from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import NamedTuple


class ResolvedPair(NamedTuple):
    """One lookup hit: the player's UUID and the name the service returned."""

    id: uuid.UUID
    name: str


@dataclass(frozen=True)
class CounterSnapshot:
    requests: int = 0  # lookup calls issued, failed ones included
    found: int = 0  # accepted and written to the output file
    resolved: int = 0  # every UUID the service returned


@dataclass(frozen=True)
class HarvestResult:
    counters: CounterSnapshot
    workers: int = 0
    candidates: int = 0
    expansions: int = 0
