# xtrace_shiviz/model/vector_clock.py

"""
Immutable Mattern–Fidge vector clock keyed by node id.

Supports:
  •  Lookup, single-entry set and increment (each returning a new clock).
  •  Join (merge) to fold in the causal history of another event.
  •  Component-wise ordering (≤) and concurrency detection (‖).
  •  Deterministic JSON serialization for the ShiViz log.
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional


@dataclass(frozen=True, slots=True)
class VectorClock:
    clock: Mapping[str, int]

    def __post_init__(self) -> None:
        # Own a private copy so callers can never alias a finalized clock.
        object.__setattr__(self, "clock", dict(self.clock))

    @classmethod
    def empty(cls) -> VectorClock:
        return cls({})

    def get(self, node: str) -> Optional[int]:
        """Return the entry for `node`, or None if the node was never ticked."""
        return self.clock.get(node)

    def nodes(self) -> List[str]:
        return sorted(self.clock)

    def set(self, node: str, value: int) -> VectorClock:
        """Return a copy of this clock with `node` set to `value`."""
        if value < 0:
            raise ValueError(f"Vector clock entries must be non-negative, got {node}={value}")
        updated = dict(self.clock)
        updated[node] = value
        return VectorClock(updated)

    def increment(self, node: str) -> VectorClock:
        """Return a copy of this clock with `node` advanced by one (1 if absent)."""
        current = self.clock.get(node)
        return self.set(node, 1 if current is None else current + 1)

    def merge(self, other: VectorClock) -> VectorClock:
        """
        Component-wise maximum (⊔) of two vector clocks.
        Entries missing on one side take the other side's value.
        """
        merged = dict(other.clock)
        for node, ticks in self.clock.items():
            merged[node] = max(ticks, merged.get(node, ticks))
        return VectorClock(merged)

    join = merge

    def serialize(self) -> str:
        """
        Compact JSON object with node ids in sorted order, e.g. {"A0":2,"B0":1}.
        """
        ordered: Dict[str, int] = {node: self.clock[node] for node in sorted(self.clock)}
        return json.dumps(ordered, separators=(",", ":"), ensure_ascii=False)

    def leq(self, other: VectorClock) -> bool:
        """
        Component-wise ≤ comparison.
        Missing entries are treated as 0.
        """
        return all(ts <= other.clock.get(p, 0) for p, ts in self.clock.items())

    def concurrent(self, other: VectorClock) -> bool:
        """
        True if neither self ≤ other nor other ≤ self.
        """
        return not self.leq(other) and not other.leq(self)

    def __le__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, VectorClock):
            return NotImplemented
        return self.leq(other)

    def __lt__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, VectorClock):
            return NotImplemented
        return self.leq(other) and self.clock != other.clock

    def __ge__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, VectorClock):
            return NotImplemented
        return other.leq(self)

    def __gt__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, VectorClock):
            return NotImplemented
        return other.leq(self) and self.clock != other.clock

    def __eq__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, VectorClock):
            return NotImplemented
        return self.clock == other.clock

    def __hash__(self) -> int:
        """
        Stable, order-independent hash based on sorted items.
        """
        return hash(tuple(sorted(self.clock.items())))

    def __str__(self) -> str:
        return self.serialize()

    __repr__ = __str__
