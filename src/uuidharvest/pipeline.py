from __future__ import annotations

import queue
import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from .aggregator import END, Aggregator
from .config import DEFAULT_THREADS, STATUS_INTERVAL_S
from .core.contracts import HarvestResult, ResolvedPair
from .core.interfaces import BatchResolver
from .counters import HarvestCounters
from .ignore import IgnoreIndex
from .progress import ProgressReporter, StatusLine
from .resolver import HttpBatchResolver, make_session
from .worker import partition, run_worker


def run_harvest(
    candidates: Sequence[str],
    suffixes: Sequence[str],
    *,
    output_path: Path,
    ignore: Optional[IgnoreIndex] = None,
    threads: int = DEFAULT_THREADS,
    print_ignored: bool = False,
    resolver: Optional[BatchResolver] = None,
    counters: Optional[HarvestCounters] = None,
    status: Optional[StatusLine] = None,
    status_interval: float = STATUS_INTERVAL_S,
    debug: bool = False,
) -> HarvestResult:
    """
    Public entry: resolve every candidate x suffix and append new UUIDs to
    `output_path`.

    Wiring:
      workers (one per partition) --queue--> aggregator --> output file
      progress reporter redraws the status line until the run is done.

    Pass `counters` together with a custom `resolver` unless the resolver
    exposes its own as `resolver.counters`.

    The output file is opened before any worker starts. An OSError from it
    is re-raised here once the workers have wound down; lookup failures
    never surface.
    """
    suffixes = list(suffixes)
    if counters is None:
        # An injected resolver already reports into its own counters.
        counters = getattr(resolver, "counters", None) or HarvestCounters()
    status = status or StatusLine(counters)
    parts = partition(candidates, threads)
    if resolver is None:
        resolver = HttpBatchResolver(
            counters, session=make_session(len(parts)), debug=debug
        )

    channel: "queue.Queue[Optional[ResolvedPair]]" = queue.Queue()
    aggregator = Aggregator(
        ignore if ignore is not None else IgnoreIndex(),
        output_path,
        counters,
        status,
        print_ignored=print_ignored,
    )
    aggregator.open()

    stop = threading.Event()
    failures: List[BaseException] = []

    def _aggregate() -> None:
        try:
            aggregator.run(channel)
        except OSError as e:
            failures.append(e)
            stop.set()
            print(f"[pipeline] output write failed: {e}", file=sys.stderr)

    agg_thread = threading.Thread(
        target=_aggregate, name="uuidharvest-aggregator"
    )
    agg_thread.start()

    reporter = ProgressReporter(status, interval=status_interval)
    reporter.start()

    workers = [
        threading.Thread(
            target=run_worker,
            args=(part, suffixes, resolver, channel, stop),
            name=f"uuidharvest-worker-{i}",
        )
        for i, part in enumerate(parts)
    ]
    try:
        for t in workers:
            t.start()
        for t in workers:
            t.join()
    except BaseException:
        # Interrupted: let workers finish their current lookup, then drain.
        stop.set()
        raise
    finally:
        for t in workers:
            if t.ident is not None:
                t.join()
        channel.put(END)
        agg_thread.join()
        reporter.stop()
        status.finish()

    if failures:
        raise failures[0]

    return HarvestResult(
        counters=counters.snapshot(),
        workers=len(parts),
        candidates=len(candidates),
        expansions=len(candidates) * len(suffixes),
    )
