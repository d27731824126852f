# xtrace_shiviz/core/causal_sorter.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Linearization of X-Trace reports so every parent precedes its children

"""Causal sorting of trace events.

X-Trace reports are not stored in causal order; the only ordering
information is each report's list of parent event ids. CausalSorter turns
such a collection into a sequence in which every event appears strictly
after all of its parents.

Two strategies are provided:

    scan  Deferred retry. Input is consumed in file order; an event whose
          parents have all been emitted is emitted immediately, otherwise
          it is parked on a waiting list. Every emission re-scans the
          waiting list (until a pass releases nothing). Promoted entries
          stay in the list and are skipped by position on later passes.
          O(n^2) worst case, but its output order is the reference order.

    kahn  Ready queue with per-event pending-parent counters. O(n + e).
          Root events enter the queue in input order; every other event
          joins it when its last parent is emitted (FIFO). Output is
          deterministic but may interleave differently from ``scan``.

Every input report ends up either in the returned order or in
``dropped``, even when several reports share an event id.

An event that references a parent absent from the trace can never be
emitted, and neither can anything that depends on it. Such events are not
an error: they are collected in ``CausalSorter.dropped`` so callers can
report them.
"""

from __future__ import annotations
from collections import deque
from typing import Deque, Dict, Iterable, List, Set

from xtrace_shiviz.model.event import TraceEvent
from xtrace_shiviz.utils.logger import get_logger

logger = get_logger()

SORT_STRATEGIES = ("scan", "kahn")


def all_parents_seen(event: TraceEvent, seen: Set[str]) -> bool:
    """True if every parent of `event` has already been emitted."""
    return all(parent in seen for parent in event.parents)


class CausalSorter:
    """Orders trace events so that parents always precede children.

    Attributes:
        strategy: Either "scan" or "kahn".
        dropped: Events left out of the last ``sort`` call, in input order.
    """

    def __init__(self, strategy: str = "scan") -> None:
        if strategy not in SORT_STRATEGIES:
            raise ValueError(
                f"Unknown sort strategy {strategy!r}; expected one of {', '.join(SORT_STRATEGIES)}"
            )
        self.strategy = strategy
        self.dropped: List[TraceEvent] = []

    def sort(self, events: Iterable[TraceEvent]) -> List[TraceEvent]:
        """Return the causally ordered subset of `events`.

        Args:
            events: Trace events in arbitrary order

        Returns:
            Events whose whole ancestry is present in the input, parents first
        """
        events = list(events)
        if self.strategy == "kahn":
            ordered = self._sort_kahn(events)
        else:
            ordered = self._sort_scan(events)

        logger.debug(
            f"Causal sort ({self.strategy}): {len(ordered)} of {len(events)} events ordered"
        )
        return ordered

    def _sort_scan(self, events: List[TraceEvent]) -> List[TraceEvent]:
        ordered: List[TraceEvent] = []
        seen: Set[str] = set()
        waiting: List[TraceEvent] = []
        # Positions in `waiting`; reports may share an event id.
        promoted: Set[int] = set()

        for event in events:
            if all_parents_seen(event, seen):
                ordered.append(event)
                seen.add(event.event_id)
                self._release_waiting(waiting, promoted, ordered, seen)
            else:
                waiting.append(event)

        self.dropped = [
            event for position, event in enumerate(waiting) if position not in promoted
        ]
        return ordered

    @staticmethod
    def _release_waiting(
        waiting: List[TraceEvent],
        promoted: Set[int],
        ordered: List[TraceEvent],
        seen: Set[str],
    ) -> None:
        progress = True
        while progress:
            progress = False
            for position, event in enumerate(waiting):
                # Already promoted on an earlier pass.
                if position in promoted:
                    continue
                if all_parents_seen(event, seen):
                    ordered.append(event)
                    seen.add(event.event_id)
                    promoted.add(position)
                    progress = True

    def _sort_kahn(self, events: List[TraceEvent]) -> List[TraceEvent]:
        known: Set[str] = {event.event_id for event in events}
        pending: List[int] = []
        children: Dict[str, List[int]] = {}
        ready: Deque[int] = deque()

        for position, event in enumerate(events):
            parents = set(event.parents)
            if not parents.issubset(known):
                # Unresolvable parent: keep the counter above zero forever.
                pending.append(len(parents) + 1)
            else:
                pending.append(len(parents))
            for parent in parents:
                children.setdefault(parent, []).append(position)
            if pending[position] == 0:
                ready.append(position)

        ordered: List[TraceEvent] = []
        emitted: Set[int] = set()
        released: Set[str] = set()
        while ready:
            position = ready.popleft()
            event = events[position]
            ordered.append(event)
            emitted.add(position)
            if event.event_id in released:
                continue
            released.add(event.event_id)
            for child in children.get(event.event_id, ()):
                pending[child] -= 1
                if pending[child] == 0:
                    ready.append(child)

        self.dropped = [event for position, event in enumerate(events) if position not in emitted]
        return ordered


def sort_events(events: Iterable[TraceEvent], strategy: str = "scan") -> List[TraceEvent]:
    """Convenience wrapper: causally sort `events`, discarding the drop list."""
    return CausalSorter(strategy).sort(events)
