from __future__ import annotations

import uuid
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from .errors import ConfigError, IgnoreListError
from .wordlist import split_lines

_HEX_DIGITS = 32
_ALL_BITS = (1 << 128) - 1


def truncation_mask(width: int) -> int:
    """
    Mask keeping the leading `width` hex digits (nibbles) of a 128-bit value.

        mask = ALL_BITS ^ ((1 << (128 - 4 * width)) - 1)

    width=8 keeps the top 32 bits, width=32 keeps everything.
    """
    if not 1 <= width <= _HEX_DIGITS:
        raise IgnoreListError(
            f"truncation width must be between 1 and {_HEX_DIGITS}, got {width}"
        )
    return _ALL_BITS ^ ((1 << (128 - 4 * width)) - 1)


def _parse_entry(raw: str, *, padded: bool) -> uuid.UUID:
    text = raw.strip()
    if padded:
        # Truncated dumps carry only the leading digits; pad them back out.
        text = text.replace("-", "")
        if len(text) > _HEX_DIGITS:
            raise ValueError("too many hex digits")
        text = text + "0" * (_HEX_DIGITS - len(text))
    return uuid.UUID(text)


class IgnoreIndex:
    """
    Read-only set of UUIDs that should not be reported again.

    With a truncation width, stored entries and queries are both reduced to
    their leading `width` hex digits (bitwise, not by slicing the text), so
    any UUID sharing that prefix with an ignored entry counts as ignored.
    """

    def __init__(
        self, ids: Iterable[uuid.UUID] = (), truncation: Optional[int] = None
    ) -> None:
        self._mask = (
            truncation_mask(truncation) if truncation is not None else None
        )
        self.truncation = truncation
        self._ids: FrozenSet[int] = frozenset(self._key(u) for u in ids)

    @classmethod
    def from_lines(
        cls, lines: Iterable[str], truncation: Optional[int] = None
    ) -> "IgnoreIndex":
        """Parse one UUID per line; blank lines are skipped."""
        if truncation is not None:
            truncation_mask(truncation)  # validate before parsing
        ids = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                ids.append(_parse_entry(line, padded=truncation is not None))
            except ValueError as e:
                raise IgnoreListError(
                    f"line {lineno}: not a valid uuid: {line.strip()!r}"
                ) from e
        return cls(ids, truncation=truncation)

    def _key(self, u: uuid.UUID) -> int:
        return u.int & self._mask if self._mask is not None else u.int

    def contains(self, u: uuid.UUID) -> bool:
        return self._key(u) in self._ids

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._ids)


def load_ignore_index(
    path: Optional[Path], truncation: Optional[int] = None
) -> IgnoreIndex:
    """Load the ignore file, or return an empty index when none is given."""
    if path is None:
        return IgnoreIndex()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read ignore list {path}: {e}") from e
    return IgnoreIndex.from_lines(split_lines(text), truncation=truncation)
