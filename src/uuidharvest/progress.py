from __future__ import annotations

import threading
from typing import Optional

import typer

from .config import STATUS_INTERVAL_S
from .core.contracts import CounterSnapshot, ResolvedPair
from .counters import HarvestCounters

# Erase the current terminal line and return the cursor to column 0.
CLEAR_LINE = "\x1b[2K\r"
IGNORED_COLOR = 241  # 256-color gray


def format_status(snap: CounterSnapshot) -> str:
    return f"reqs: {snap.requests} | found: {snap.found} ({snap.resolved} total)"


class StatusLine:
    """
    The single overwritten progress line on stderr, plus the `uuid:name`
    lines that scroll above it. Each render is one write + flush.
    """

    def __init__(
        self, counters: HarvestCounters, *, color: Optional[bool] = None
    ) -> None:
        self._counters = counters
        self._color = color

    def render(self) -> None:
        typer.echo(
            CLEAR_LINE + format_status(self._counters.snapshot()),
            err=True,
            nl=False,
            color=self._color,
        )

    def pair(self, pair: ResolvedPair, *, ignored: bool = False) -> None:
        text = f"{pair.id}:{pair.name}"
        if ignored:
            text = typer.style(text, fg=IGNORED_COLOR)
        typer.echo(CLEAR_LINE + text, err=True, color=self._color)

    def finish(self) -> None:
        """Leave the last status on screen and move to a fresh line."""
        self.render()
        typer.echo("", err=True, color=self._color)


class ProgressReporter:
    """Redraws the status line every `interval` seconds until stopped."""

    def __init__(
        self, status: StatusLine, interval: float = STATUS_INTERVAL_S
    ) -> None:
        self._status = status
        self._interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _loop(self) -> None:
        while not self._stop.is_set():
            self._status.render()
            self._stop.wait(self._interval)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._loop, name="uuidharvest-progress", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
