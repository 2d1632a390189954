from __future__ import annotations

import os
import queue
from pathlib import Path
from typing import Optional, TextIO

from .core.contracts import ResolvedPair
from .counters import HarvestCounters
from .ignore import IgnoreIndex
from .progress import StatusLine

# Put on the channel once every worker has returned.
END = None


class Aggregator:
    """
    Sole consumer of worker output and sole writer of the output file.

    Pairs are handled one at a time in arrival order: ignored ones are
    (optionally) shown in gray and dropped; the rest bump `found`, are shown,
    and appended to the output file. Each line is flushed and fsynced before
    the next pair is taken, so a crash loses at most the pair in hand.
    """

    def __init__(
        self,
        ignore: IgnoreIndex,
        output_path: Path,
        counters: HarvestCounters,
        status: StatusLine,
        *,
        print_ignored: bool = False,
    ) -> None:
        self._ignore = ignore
        self._output_path = Path(output_path)
        self._counters = counters
        self._status = status
        self._print_ignored = bool(print_ignored)
        self._fh: Optional[TextIO] = None

    def handle(self, pair: ResolvedPair, fh: TextIO) -> bool:
        """Process one pair; return True when it was written out."""
        if pair.id in self._ignore:
            if self._print_ignored:
                self._status.pair(pair, ignored=True)
                self._status.render()
            return False

        self._counters.found.incr()
        self._status.pair(pair)
        self._status.render()

        fh.write(f"{pair.id}\n")
        fh.flush()
        os.fsync(fh.fileno())
        return True

    def open(self) -> None:
        """Open (creating if needed) the output file for appending."""
        if self._fh is None:
            self._fh = self._output_path.open("a", encoding="utf-8")

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def run(self, source: "queue.Queue[Optional[ResolvedPair]]") -> int:
        """
        Drain `source` until END, then close the output file. Returns the
        number of lines written. OSError from the output file propagates.
        """
        self.open()
        written = 0
        try:
            while True:
                pair = source.get()
                if pair is END:
                    break
                if self.handle(pair, self._fh):
                    written += 1
        finally:
            self.close()
        return written
