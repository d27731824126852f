# xtrace_shiviz/model/record.py

from __future__ import annotations
from dataclasses import dataclass

from .vector_clock import VectorClock


@dataclass(frozen=True, slots=True)
class LogRecord:
    """One ShiViz entry: the emitting node, its vector clock and the event text."""

    node_id: str
    clock: VectorClock
    label: str

    def to_shiviz(self) -> str:
        return f"{self.node_id} {self.clock.serialize()}\n{self.label}\n"
