"""
Flow event models for structured events emitted while editing and binding.

Events are the observability record of the core: graph mutations, rejected
connections and binder state transitions all end up in an event sink.
"""

from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, model_validator


class FlowEventType(str, Enum):
    """Types of events a flow can emit."""

    node_added = "node_added"
    node_removed = "node_removed"
    edge_added = "edge_added"
    edge_rejected = "edge_rejected"
    inputs_invalid = "inputs_invalid"
    execution_started = "execution_started"
    execution_completed = "execution_completed"
    execution_failed = "execution_failed"


class FlowEvent(BaseModel):
    """A structured event describing what happened to a flow."""

    model_config = {"extra": "forbid"}

    event_id: str  # UUID for deduping
    flow_id: str
    timestamp: str
    sequence: int | None = None  # monotonic ordering within an emitter

    event_type: FlowEventType
    node_id: str | None = None

    payload: dict[str, Any]

    @model_validator(mode="after")
    def validate_payload_invariants(self) -> Self:
        """Validate payload structure based on event_type."""
        payload = self.payload
        event_type = self.event_type

        if event_type in (FlowEventType.node_added, FlowEventType.node_removed):
            self._validate_node_event(payload)
        elif event_type in (FlowEventType.edge_added, FlowEventType.edge_rejected):
            self._validate_edge_event(payload)
        elif event_type == FlowEventType.inputs_invalid:
            self._validate_inputs_invalid(payload)
        elif event_type == FlowEventType.execution_failed:
            self._validate_execution_failed(payload)

        return self

    def _validate_node_event(self, payload: dict) -> None:
        """node events require the node id and its type."""
        if self.node_id is None:
            raise ValueError(f"{self.event_type.value} event must carry a node_id")
        if "node_type" not in payload:
            raise ValueError(f"{self.event_type.value} payload must contain 'node_type'")

    def _validate_edge_event(self, payload: dict) -> None:
        """edge events require source and target."""
        if "source" not in payload:
            raise ValueError(f"{self.event_type.value} payload must contain 'source'")
        if "target" not in payload:
            raise ValueError(f"{self.event_type.value} payload must contain 'target'")
        if self.event_type == FlowEventType.edge_rejected and "message" not in payload:
            raise ValueError("edge_rejected payload must contain 'message'")

    def _validate_inputs_invalid(self, payload: dict) -> None:
        """inputs_invalid requires a non-empty errors dict."""
        errors = payload.get("errors")
        if not isinstance(errors, dict) or not errors:
            raise ValueError("inputs_invalid payload must contain a non-empty 'errors' dict")

    def _validate_execution_failed(self, payload: dict) -> None:
        """execution_failed requires error_type and message."""
        if "error_type" not in payload:
            raise ValueError("execution_failed payload must contain 'error_type'")
        if "message" not in payload:
            raise ValueError("execution_failed payload must contain 'message'")
