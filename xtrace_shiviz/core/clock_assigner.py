# xtrace_shiviz/core/clock_assigner.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Vector clock construction over causally sorted X-Trace events

"""Vector clock assignment.

Events must be fed in causal order (see ``CausalSorter``). For each event
the assigner:

1. starts from a copy of the clock of its local predecessor, the parent
   living on the same node, or from an empty clock if there is none;
2. ticks the event's own node entry;
3. merges the clocks of every other parent;
4. finalizes the clock and keeps it for the event's descendants.

A plain tick is not enough when one node's timeline is reached through
causally disjoint branches (a fork whose branches both come back to the
node, or baggage carried across threads). Two branches could then tick the
node to the same value, or a late branch could tick it backwards. The
assigner therefore keeps a per-node watermark, the highest tick ever given
out on that node, and never hands out a value at or below it.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Optional

from xtrace_shiviz.exceptions import CausalOrderError
from xtrace_shiviz.model.event import TraceEvent, XTrace
from xtrace_shiviz.model.record import LogRecord
from xtrace_shiviz.model.vector_clock import VectorClock
from xtrace_shiviz.utils.logger import get_logger

logger = get_logger()


class ClockAssigner:
    """Assigns vector clocks to causally ordered events.

    One instance covers one conversion run: it owns the table of finalized
    clocks and the per-node watermarks, both discarded with the instance.

    Args:
        node_of: EventID -> NodeID for every event of the trace, including
            events that will not be assigned (needed to recognise the local
            predecessor among an event's parents).
    """

    def __init__(self, node_of: Mapping[str, str]) -> None:
        self._node_of: Dict[str, str] = dict(node_of)
        self._clocks: Dict[str, VectorClock] = {}
        self._max_ticks: Dict[str, int] = {}

    @classmethod
    def for_trace(cls, trace: XTrace) -> ClockAssigner:
        return cls({eid: event.node_id for eid, event in trace.event_index().items()})

    def watermark(self, node_id: str) -> Optional[int]:
        """Highest tick assigned so far on `node_id`, or None."""
        return self._max_ticks.get(node_id)

    def clock_of(self, event_id: str) -> Optional[VectorClock]:
        """Finalized clock of `event_id`, or None if it was not assigned yet."""
        return self._clocks.get(event_id)

    def assign(self, event: TraceEvent) -> LogRecord:
        """Compute, store and return the record for the next event in causal order.

        Raises:
            CausalOrderError: If a parent of `event` has no finalized clock
        """
        node = event.node_id
        local_parent = self._local_predecessor(event)

        if local_parent is None:
            vc = VectorClock.empty()
        else:
            vc = self._finalized(local_parent, event)

        vc = self._tick(vc, node)

        for parent in event.parents:
            if parent != local_parent:
                vc = vc.merge(self._finalized(parent, event))

        self._clocks[event.event_id] = vc
        logger.record_emitted(event.event_id, node, vc.serialize())
        return LogRecord(node_id=node, clock=vc, label=event.label)

    def assign_all(self, events: Iterable[TraceEvent]) -> List[LogRecord]:
        return [self.assign(event) for event in events]

    def _local_predecessor(self, event: TraceEvent) -> Optional[str]:
        node = event.node_id
        local = [parent for parent in event.parents if self._node_of.get(parent) == node]
        if not local:
            return None
        if len(set(local)) > 1:
            # First match is the predecessor; the others are merged as ordinary parents.
            logger.warning(
                f"Event {event.event_id} has {len(set(local))} parents on its own node "
                f"{node} ({', '.join(local)}); using {local[0]} as local predecessor"
            )
        return local[0]

    def _tick(self, vc: VectorClock, node: str) -> VectorClock:
        current = vc.get(node)
        max_ticks = self._max_ticks.get(node)

        if current is None:
            if max_ticks is None:
                vc = vc.increment(node)
            else:
                # A branch rejoining this node jumps past ticks given out elsewhere.
                vc = vc.set(node, max_ticks + 1)
        else:
            if max_ticks is not None and current < max_ticks:
                vc = vc.set(node, max_ticks)
            vc = vc.increment(node)

        self._max_ticks[node] = vc.get(node)
        return vc

    def _finalized(self, parent: str, event: TraceEvent) -> VectorClock:
        try:
            return self._clocks[parent]
        except KeyError:
            raise CausalOrderError(
                f"Event {event.event_id} references parent {parent} before it was assigned a clock"
            ) from None
