"""
Exceptions raised by the sequencing simulator.

Molecules too short to yield a read are skipped, never raised.
"""

from typing import Optional


class SimulationError(Exception):
    """Base class for simulator errors"""


class OversampleError(SimulationError, ValueError):
    """More molecules were requested than the pool holds"""

    def __init__(self, requested: int, available: int, context: Optional[str] = None):
        self.requested = requested
        self.available = available
        msg = (
            f"Cannot sample {requested} molecules without replacement "
            f"from a pool of {available}"
        )
        if context:
            msg = f"{msg} ({context})"
        super().__init__(msg)


class InvalidIntervalError(SimulationError, ValueError):
    """A view falls outside the bounds of its genome sequence"""

    def __init__(self, seqid: int, start: int, stop: int, reason: str):
        self.seqid = seqid
        self.start = start
        self.stop = stop
        super().__init__(
            f"Invalid interval on sequence {seqid}: [{start}, {stop}] ({reason})"
        )
