from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .config import DEFAULT_THREADS
from .errors import HarvestError
from .ignore import load_ignore_index
from .pipeline import run_harvest
from .wordlist import load_suffixes, load_wordlist

app = typer.Typer(
    help="uuidharvest: bulk-resolve Minecraft names to UUIDs",
    add_completion=False,
)


@app.command()
def harvest(
    wordlist_path: Path = typer.Option(
        ...,
        "-w",
        "--wordlist-path",
        help="File to pull the names from. Non-name characters are dropped.",
    ),
    output_path: Path = typer.Option(
        ..., "-o", "--output", help="Where to append found UUIDs."
    ),
    threads: int = typer.Option(
        DEFAULT_THREADS, "-t", "--threads", help="Parallel lookup workers."
    ),
    ignored: Optional[Path] = typer.Option(
        None,
        "-i",
        "--ignored",
        help="UUIDs to skip if found (e.g. an existing UUID dump).",
    ),
    ignored_truncation: Optional[int] = typer.Option(
        None,
        "-r",
        "--ignored-truncation",
        help="Compare ignored UUIDs on this many leading hex digits only.",
    ),
    suffixes: Optional[Path] = typer.Option(
        None,
        "-s",
        "--suffixes",
        help="Suffixes to append to each name; bare names are dropped "
        "unless the file has an empty line.",
    ),
    print_ignored: bool = typer.Option(
        False, "-a", "--print-ignored", help="Show ignored UUIDs in gray."
    ),
    debug: bool = typer.Option(False, help="Verbose lookup diagnostics"),
):
    """Look up every name (x suffix) and append newly found UUIDs."""
    try:
        if output_path.exists():
            typer.echo(
                "warn: output file already exists, found uuids will be appended.",
                err=True,
            )
        typer.echo("parsing wordlist", err=True)
        names = load_wordlist(wordlist_path)
        sufs = load_suffixes(suffixes)
        if not sufs:
            typer.echo("warn: suffix list is empty, nothing to look up.", err=True)
        typer.echo(f"loaded {len(names)} names", err=True)

        typer.echo("parsing ignored uuids", err=True)
        ignore = load_ignore_index(
            ignored, ignored_truncation if ignored is not None else None
        )
        typer.echo(f"{len(ignore)} uuids ignored", err=True)

        typer.echo("spawning tasks", err=True)
        res = run_harvest(
            names,
            sufs,
            output_path=output_path,
            ignore=ignore,
            threads=threads,
            print_ignored=print_ignored,
            debug=debug,
        )
    except (HarvestError, OSError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    c = res.counters
    typer.echo(
        f"done: {c.requests} requests, {c.found} new uuids "
        f"({c.resolved} resolved) from {res.expansions} names "
        f"across {res.workers} workers",
        err=True,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    app()
