from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from .errors import ConfigError

# Characters Minecraft allows in a player name.
ALLOWED_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz1234567890_"
)
MIN_NAME_LEN = 3
MAX_NAME_LEN = 15


def normalize_name(raw: str) -> Optional[str]:
    """
    Drop every character that can't appear in a name, then lower-case.
    Returns None when what's left is too short or too long.
    """
    name = "".join(c for c in raw if c in ALLOWED_CHARS)
    if not MIN_NAME_LEN <= len(name) <= MAX_NAME_LEN:
        return None
    return name.lower()


def normalize_names(lines: Iterable[str]) -> List[str]:
    """Normalized, deduplicated and sorted candidate names."""
    return sorted(
        {n for n in (normalize_name(line) for line in lines) if n is not None}
    )


def split_lines(text: str) -> List[str]:
    """
    Split on line feeds only, dropping a trailing carriage return. Form
    feeds and other separators str.splitlines() honours stay in the line.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _read_lines(path: Path, what: str) -> List[str]:
    try:
        return split_lines(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read {what} {path}: {e}") from e


def load_wordlist(path: Path) -> List[str]:
    return normalize_names(_read_lines(path, "wordlist"))


def load_suffixes(path: Optional[Path]) -> List[str]:
    """
    Suffixes are taken verbatim, one per line. Without a file the only
    suffix is "" (names are looked up as-is); with a file, bare names are
    only tried if the file has an empty line.
    """
    if path is None:
        return [""]
    return _read_lines(path, "suffix list")
