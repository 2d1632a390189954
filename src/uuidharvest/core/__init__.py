"""
Core exports for uuidharvest.
"""

from .contracts import CounterSnapshot, HarvestResult, ResolvedPair
from .interfaces import BatchResolver, PairSink

__all__ = [
    "ResolvedPair",
    "CounterSnapshot",
    "HarvestResult",
    "BatchResolver",
    "PairSink",
]
