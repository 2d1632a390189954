"""
uuidharvest
===========
Bulk-resolve candidate Minecraft player names to UUIDs through a batch
lookup service, skipping UUIDs that are already known and appending the new
ones to an output file as they are found.

Typical usage:
    from uuidharvest.pipeline import run_harvest
    from uuidharvest.wordlist import load_wordlist
"""

__version__ = '0.1.0'
