from __future__ import annotations

from typing import List, Protocol, Sequence

from .contracts import ResolvedPair


class BatchResolver(Protocol):
    """
    Resolves up to MAX_BATCH_SIZE names in one remote call.
    Implementations must be safe to call from many worker threads at once
    and must not raise on transport failure.
    """

    def resolve(self, names: Sequence[str]) -> List[ResolvedPair]: ...


class PairSink(Protocol):
    """Write end of the worker -> aggregator channel."""

    def put(self, item: ResolvedPair) -> None: ...
