"""Sinks that record flow events for the editor, the binder and the API."""

from pathlib import Path
from typing import Protocol

from flowstudio.models.flow_event import FlowEvent, FlowEventType

EVENTS_FILENAME = "flow_events.jsonl"


class EventSink(Protocol):
    """Anything an ``EventEmitter`` can hand finished flow events to."""

    def append(self, event: FlowEvent) -> None: ...


class ListSink:
    """Keeps events in memory, in emission order.

    Used by tests and by in-process callers that want to inspect what a
    graph edit or a binder submit produced.
    """

    def __init__(self) -> None:
        self.events: list[FlowEvent] = []

    def __len__(self) -> int:
        return len(self.events)

    def append(self, event: FlowEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    def of_type(self, *event_types: FlowEventType) -> list[FlowEvent]:
        """Events whose type is one of ``event_types``."""
        return [e for e in self.events if e.event_type in event_types]

    def for_node(self, node_id: str) -> list[FlowEvent]:
        """Events that name ``node_id`` as their node."""
        return [e for e in self.events if e.node_id == node_id]

    def rejections(self) -> list[str]:
        """Messages of every rejected connection, oldest first."""
        return [e.payload["message"] for e in self.of_type(FlowEventType.edge_rejected)]


class FileSink:
    """Appends events to a JSONL file shared by every flow.

    Each line is one ``FlowEvent``; ``read`` can pull a single flow's
    history back out by its ``flow_id``.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def for_directory(cls, directory: Path | str) -> "FileSink":
        """Sink writing to the standard events file inside ``directory``."""
        return cls(Path(directory) / EVENTS_FILENAME)

    def append(self, event: FlowEvent) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(event.model_dump_json() + "\n")

    def read(self, flow_id: str | None = None) -> list[FlowEvent]:
        """Load the events written so far, optionally for one flow only."""
        if not self.path.exists():
            return []
        with self.path.open(encoding="utf-8") as f:
            events = [FlowEvent.model_validate_json(line) for line in f if line.strip()]
        if flow_id is None:
            return events
        return [e for e in events if e.flow_id == flow_id]

    def flow_ids(self) -> list[str]:
        """Ids of the flows with recorded events, in first-seen order."""
        return list(dict.fromkeys(e.flow_id for e in self.read()))
