# xtrace_shiviz/model/event.py

"""
TraceEvent
==========

Immutable record of one X-Trace report. Only the fields relevant to
ShiViz conversion are kept; the timestamps and the agent tag are carried
along but never consulted by the causal engine.

An event lives on exactly one node: the timeline named by its process
name concatenated with its thread id.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True, slots=True)
class TraceEvent:
    event_id: str
    process_name: str
    thread_id: int
    label: str = ""
    parents: Tuple[str, ...] = field(default_factory=tuple)
    timestamp: int = 0
    hrt: int = 0
    agent: str = ""

    @property
    def node_id(self) -> str:
        """Timeline identity, e.g. process 'namenode' thread 12 -> 'namenode12'."""
        return f"{self.process_name}{self.thread_id}"

    def is_root(self) -> bool:
        return not self.parents

    def __str__(self) -> str:
        return f"{self.event_id}@{self.node_id}"


@dataclass(frozen=True, slots=True)
class XTrace:
    """A single X-Trace (v4): an identifier plus its reports in file order."""

    trace_id: str
    events: Tuple[TraceEvent, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.events)

    def node_ids(self) -> List[str]:
        """Distinct node ids in order of first appearance."""
        seen: Dict[str, None] = {}
        for event in self.events:
            seen.setdefault(event.node_id, None)
        return list(seen)

    def event_index(self) -> Dict[str, TraceEvent]:
        """EventID -> event. The last report wins when ids repeat."""
        index: Dict[str, TraceEvent] = {}
        for event in self.events:
            index[event.event_id] = event
        return index
