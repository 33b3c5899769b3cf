"""Suggestion and connection-check result models."""

from typing import Any

from flowstudio.models.flow_node import FlowModel, NodeType


class FlowSuggestion(FlowModel):
    """A candidate follow-on node proposed for a source node.

    Higher ``priority`` is more strongly recommended.
    """

    node_type: NodeType
    reason: str
    priority: int
    auto_connect: bool = False
    default_config: dict[str, Any] | None = None
    source_node_id: str | None = None  # set by flow-completion suggestions


class ConnectionResult(FlowModel):
    """Outcome of checking a candidate edge.

    An invalid result blocks edge creation. A valid result may still carry
    an advisory ``suggestion``, which is informational only.
    """

    valid: bool
    message: str | None = None
    suggestion: str | None = None
