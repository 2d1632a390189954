from __future__ import annotations

import threading
from typing import Iterator, List, Optional, Sequence, TypeVar

from .config import GROUP_SIZE, MAX_BATCH_SIZE
from .core.interfaces import BatchResolver, PairSink

T = TypeVar("T")


def chunked(seq: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Consecutive slices of at most `size` items; the last may be shorter."""
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    for i in range(0, len(seq), size):
        yield seq[i : i + size]


def partition(candidates: Sequence[T], workers: int) -> List[Sequence[T]]:
    """
    Split into clamp(workers, 1, len(candidates)) contiguous slices whose
    sizes differ by at most one. No candidates -> no slices.
    """
    total = len(candidates)
    if total == 0:
        return []
    n = min(max(1, int(workers)), total)
    base, extra = divmod(total, n)
    out: List[Sequence[T]] = []
    start = 0
    for i in range(n):
        end = start + base + (1 if i < extra else 0)
        out.append(candidates[start:end])
        start = end
    return out


def expand(words: Sequence[str], suffixes: Sequence[str]) -> List[str]:
    """Every word with every suffix appended, word-major."""
    return [f"{w}{s}" for w in words for s in suffixes]


def run_worker(
    part: Sequence[str],
    suffixes: Sequence[str],
    resolver: BatchResolver,
    sink: PairSink,
    stop: Optional[threading.Event] = None,
) -> None:
    """
    Resolve one partition. Suffix expansion happens GROUP_SIZE candidates at
    a time to keep the expanded list small; each batch's hits go to the sink
    as soon as the lookup returns.

    `stop` is set when the run is already lost (output file unwritable or
    the caller interrupted); the worker then returns before its next lookup.
    """
    for group in chunked(part, GROUP_SIZE):
        for batch in chunked(expand(group, suffixes), MAX_BATCH_SIZE):
            if stop is not None and stop.is_set():
                return
            for pair in resolver.resolve(batch):
                sink.put(pair)
