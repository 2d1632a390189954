from __future__ import annotations


class HarvestError(Exception):
    """Base class for errors raised by uuidharvest."""


class ConfigError(HarvestError):
    """Bad input before any lookup starts (unreadable file, bad option)."""


class IgnoreListError(ConfigError):
    """Malformed entry in the ignore list, or an invalid truncation width."""


class BatchTooLargeError(HarvestError):
    """A caller handed the resolver more names than one lookup may carry."""
