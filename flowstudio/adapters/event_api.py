"""Event emission API shared by the graph and the binder."""

from typing import Any

from flowstudio.adapters.sinks import EventSink
from flowstudio.models.flow_event import FlowEvent, FlowEventType
from flowstudio.utils.identifiers import generate_event_id, utc_timestamp


class EventEmitter:
    """Stamps ids, timestamps and sequence numbers onto flow events."""

    def __init__(self, flow_id: str, event_sink: EventSink) -> None:
        self.flow_id = flow_id
        self.event_sink = event_sink
        self._sequence = 0

    def _next_sequence(self) -> int:
        """Get the next sequence number."""
        seq = self._sequence
        self._sequence += 1
        return seq

    def emit(
        self,
        event_type: FlowEventType,
        payload: dict[str, Any] | None = None,
        node_id: str | None = None,
    ) -> FlowEvent:
        """Emit a flow event with the given parameters."""
        event = FlowEvent(
            event_id=generate_event_id(),
            flow_id=self.flow_id,
            timestamp=utc_timestamp(),
            sequence=self._next_sequence(),
            event_type=event_type,
            node_id=node_id,
            payload=payload or {},
        )
        self.event_sink.append(event)
        return event

    def emit_node(self, event_type: FlowEventType, node_id: str, node_type: str) -> FlowEvent:
        """Emit a node_added or node_removed event."""
        return self.emit(event_type, {"node_type": node_type}, node_id=node_id)

    def emit_edge(
        self,
        event_type: FlowEventType,
        source: str,
        target: str,
        edge_id: str | None = None,
        message: str | None = None,
        suggestion: str | None = None,
    ) -> FlowEvent:
        """Emit an edge_added or edge_rejected event."""
        payload: dict[str, Any] = {"source": source, "target": target}
        if edge_id:
            payload["edge_id"] = edge_id
        if message:
            payload["message"] = message
        if suggestion:
            payload["suggestion"] = suggestion
        return self.emit(event_type, payload)

    def emit_inputs_invalid(self, errors: dict[str, str]) -> FlowEvent:
        """Emit an inputs_invalid event carrying every field error."""
        return self.emit(FlowEventType.inputs_invalid, {"errors": dict(errors)})

    def emit_execution_failed(self, error: BaseException) -> FlowEvent:
        """Emit an execution_failed event for a collaborator error."""
        return self.emit(
            FlowEventType.execution_failed,
            {"error_type": type(error).__name__, "message": str(error)},
        )
