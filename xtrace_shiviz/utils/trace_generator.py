# xtrace_shiviz/utils/trace_generator.py

import argparse
import json
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from xtrace_shiviz.model.event import TraceEvent, XTrace


def generate_trace(
        num_events: int,
        processes: Sequence[str] = ("client", "server"),
        threads_per_process: int = 1,
        message_prob: float = 0.3,
        fork_prob: float = 0.1,
        dangling: int = 0,
        shuffle: bool = True,
        seed: Optional[int] = None,
        trace_id: str = "synthetic",
) -> XTrace:
    """
    Builds a random, causally valid X-Trace.

    Args:
        num_events: Number of events to generate (excluding dangling ones).
        processes: Process names; each gets `threads_per_process` threads,
                   node ids are process name + thread index.
        threads_per_process: Threads per process.
        message_prob: Chance that an event also depends on an earlier event
                      of another node (a cross-node message).
        fork_prob: Chance that an event branches off an older event of its
                   own node instead of the latest one. Branches rejoin the
                   node later, which exercises watermark handling.
        dangling: Extra events whose parent is not part of the trace.
        shuffle: Shuffle report order so the input is not causally sorted.
        seed: Seed for reproducible traces.
        trace_id: Identifier stored on the trace.
    """
    if not processes or threads_per_process < 1:
        raise ValueError("At least one process with one thread is required.")

    rng = random.Random(seed)
    nodes = [(p, t) for p in processes for t in range(threads_per_process)]

    # Events generated so far, per node, in creation order.
    per_node: Dict[str, List[TraceEvent]] = {f"{p}{t}": [] for p, t in nodes}
    events: List[TraceEvent] = []

    for i in range(1, num_events + 1):
        process, thread = rng.choice(nodes)
        node = f"{process}{thread}"
        parents: List[str] = []

        local_history = per_node[node]
        if local_history:
            if len(local_history) > 1 and rng.random() < fork_prob:
                parents.append(rng.choice(local_history[:-1]).event_id)
            else:
                parents.append(local_history[-1].event_id)

        others = [e for n, hist in per_node.items() if n != node for e in hist]
        if others and rng.random() < message_prob:
            parents.append(rng.choice(others).event_id)

        event = TraceEvent(
            event_id=f"e{i}",
            process_name=process,
            thread_id=thread,
            label=f"{node} event {i}",
            parents=tuple(parents),
            timestamp=i,
            hrt=i * 1000,
            agent=process,
        )
        local_history.append(event)
        events.append(event)

    for j in range(1, dangling + 1):
        process, thread = rng.choice(nodes)
        events.append(TraceEvent(
            event_id=f"d{j}",
            process_name=process,
            thread_id=thread,
            label=f"dangling {j}",
            parents=(f"missing{j}",),
        ))

    if shuffle:
        rng.shuffle(events)

    return XTrace(trace_id=trace_id, events=tuple(events))


def trace_to_json(trace: XTrace) -> Dict[str, Any]:
    """Encodes a trace in the X-Trace v4 JSON layout read by trace_reader."""
    return {
        "id": trace.trace_id,
        "reports": [
            {
                "ProcessName": e.process_name,
                "ThreadID": e.thread_id,
                "Label": e.label,
                "EventID": e.event_id,
                "ParentEventID": list(e.parents),
                "Timestamp": e.timestamp,
                "HRT": e.hrt,
                "Agent": e.agent,
            }
            for e in trace.events
        ],
    }


def write_trace_file(traces: Sequence[XTrace], filename: Union[str, Path]) -> None:
    """Writes traces as a JSON array."""
    with open(filename, "w", encoding="utf-8") as f:
        json.dump([trace_to_json(t) for t in traces], f, indent=2)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate a synthetic X-Trace JSON file.")
    parser.add_argument("output", type=Path, help="Path for the generated trace file.")
    parser.add_argument("-n", "--events", type=int, default=50, help="Number of events.")
    parser.add_argument("-p", "--processes", nargs="+", default=["client", "server"])
    parser.add_argument("--threads", type=int, default=1, help="Threads per process.")
    parser.add_argument("--message-prob", type=float, default=0.3)
    parser.add_argument("--fork-prob", type=float, default=0.1)
    parser.add_argument("--dangling", type=int, default=0)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    trace = generate_trace(
        args.events,
        processes=args.processes,
        threads_per_process=args.threads,
        message_prob=args.message_prob,
        fork_prob=args.fork_prob,
        dangling=args.dangling,
        seed=args.seed,
    )
    write_trace_file([trace], args.output)
    print(f"Generated trace with {len(trace)} events: {args.output}")
