"""Editor-side flow graph: owns nodes and edges and their structural invariants.

Every mutation either applies fully or leaves the graph untouched and
reports why through a ``GraphResult``; nothing here raises on an expected
failure. Edges are only added after the ``ConnectionValidator`` accepts them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from flowstudio.adapters.event_api import EventEmitter
from flowstudio.analysis.connection_validator import ConnectionValidator
from flowstudio.analysis.default_rules import DEFAULT_RULE_SET
from flowstudio.analysis.rule_set import RuleSet
from flowstudio.analysis.traversal import is_reachable, topological_order
from flowstudio.models.flow_event import FlowEventType
from flowstudio.models.flow_node import (
    BaseNode,
    NodeData,
    NodeType,
    Position,
    build_node,
    default_node_data,
)
from flowstudio.models.prompt_flow import FlowEdge, PromptFlow
from flowstudio.models.suggestion import ConnectionResult, FlowSuggestion
from flowstudio.utils.identifiers import IdProvider, generate_flow_id, utc_timestamp, uuid_id_provider

# horizontal offset for nodes created from a suggestion
SUGGESTION_OFFSET_X = 250.0

STRUCTURAL = "structural"
CONNECTION = "connection"
DATA = "data"


@dataclass
class GraphResult:
    """Outcome of a graph mutation."""

    ok: bool
    error_type: str | None = None  # "structural", "connection" or "data"
    message: str | None = None
    node: BaseNode | None = None
    edge: FlowEdge | None = None
    connection: ConnectionResult | None = None

    @classmethod
    def structural(cls, message: str) -> GraphResult:
        return cls(ok=False, error_type=STRUCTURAL, message=message)


class FlowGraph:
    """Mutable graph behind the flow editor.

    Usage:
        graph = FlowGraph(name="Summarize topics")
        var = graph.add_node(NodeType.variable, data={"name": "topics"}).node
        prompt = graph.add_node(NodeType.prompt).node
        result = graph.add_edge(var.id, prompt.id)
        flow = graph.to_flow()
    """

    def __init__(
        self,
        flow_id: str | None = None,
        name: str = "",
        description: str | None = None,
        rule_set: RuleSet = DEFAULT_RULE_SET,
        id_provider: IdProvider = uuid_id_provider,
        emitter: EventEmitter | None = None,
    ) -> None:
        self.flow_id = flow_id or generate_flow_id()
        self.name = name
        self.description = description
        self.updated_at = utc_timestamp()
        self.validator = ConnectionValidator(rule_set)
        self.emitter = emitter
        self._id_provider = id_provider
        self._nodes: dict[str, BaseNode] = {}
        self._edges: dict[str, FlowEdge] = {}
        self._extra: dict[str, Any] = {}

    @classmethod
    def from_flow(cls, flow: PromptFlow, **kwargs: Any) -> FlowGraph:
        """Load a parsed flow document as-is (cycles included)."""
        graph = cls(flow_id=flow.id, name=flow.name, description=flow.description, **kwargs)
        graph._nodes = {node.id: node for node in flow.nodes}
        graph._edges = {edge.id: edge for edge in flow.edges}
        graph._extra = dict(flow.model_extra or {})
        graph.updated_at = flow.updated_at
        return graph

    def to_flow(self) -> PromptFlow:
        """Snapshot the graph as a flow document."""
        return PromptFlow(
            id=self.flow_id,
            name=self.name,
            description=self.description,
            nodes=list(self._nodes.values()),
            edges=list(self._edges.values()),
            updated_at=self.updated_at,
            **self._extra,
        )

    # --- queries ---

    @property
    def nodes(self) -> list[BaseNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[FlowEdge]:
        return list(self._edges.values())

    def get_node(self, node_id: str) -> BaseNode | None:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> FlowEdge | None:
        return self._edges.get(edge_id)

    def incoming(self, node_id: str) -> list[FlowEdge]:
        return [edge for edge in self._edges.values() if edge.target == node_id]

    def outgoing(self, node_id: str) -> list[FlowEdge]:
        return [edge for edge in self._edges.values() if edge.source == node_id]

    def has_path(self, start: str, goal: str) -> bool:
        """True if ``goal`` is reachable from ``start`` over existing edges."""
        return is_reachable(self._edges.values(), start, goal)

    def topological_order(self) -> list[str] | None:
        """Execution order of node ids, or None while the graph has a cycle."""
        return topological_order(list(self._nodes), self._edges.values())

    # --- node mutations ---

    def add_node(
        self,
        node_type: NodeType | str,
        position: Position | None = None,
        data: NodeData | dict | None = None,
    ) -> GraphResult:
        """Create a node with a fresh id; ``data`` defaults to the editor defaults."""
        node_type = NodeType(node_type)
        node_id = self._id_provider(node_type.value)
        if data is None:
            data = default_node_data(node_type)
        try:
            node = build_node(node_type, node_id, position, data)
        except (ValidationError, TypeError) as e:
            return GraphResult(ok=False, error_type=DATA, message=str(e))
        return self.insert_node(node)

    def insert_node(self, node: BaseNode) -> GraphResult:
        """Insert a fully built node (paste or load path)."""
        if node.id in self._nodes:
            return GraphResult.structural(f"duplicate node id: {node.id}")
        self._nodes[node.id] = node
        self._touch()
        if self.emitter:
            self.emitter.emit_node(FlowEventType.node_added, node.id, node.type)
        return GraphResult(ok=True, node=node)

    def remove_node(self, node_id: str) -> GraphResult:
        """Remove a node and every edge touching it."""
        node = self._nodes.pop(node_id, None)
        if node is None:
            return GraphResult.structural(f"node not found: {node_id}")
        self._edges = {
            edge_id: edge
            for edge_id, edge in self._edges.items()
            if edge.source != node_id and edge.target != node_id
        }
        self._touch()
        if self.emitter:
            self.emitter.emit_node(FlowEventType.node_removed, node.id, node.type)
        return GraphResult(ok=True, node=node)

    def update_node_data(self, node_id: str, **changes: Any) -> GraphResult:
        """Property-panel edit: merge ``changes`` into the node's data and re-validate.

        Keys may use either python or wire (camelCase) names.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return GraphResult.structural(f"node not found: {node_id}")

        data_cls = type(node.data)
        merged = node.data.model_dump(by_alias=True)
        for key, value in changes.items():
            field = data_cls.model_fields.get(key)
            merged[field.alias if field and field.alias else key] = value
        try:
            data = data_cls.model_validate(merged)
        except ValidationError as e:
            return GraphResult(ok=False, error_type=DATA, message=str(e))

        updated = node.model_copy(update={"data": data})
        self._nodes[node_id] = updated
        self._touch()
        return GraphResult(ok=True, node=updated)

    def move_node(self, node_id: str, position: Position) -> GraphResult:
        node = self._nodes.get(node_id)
        if node is None:
            return GraphResult.structural(f"node not found: {node_id}")
        updated = node.model_copy(update={"position": position})
        self._nodes[node_id] = updated
        self._touch()
        return GraphResult(ok=True, node=updated)

    # --- edge mutations ---

    def add_edge(
        self,
        source_id: str,
        target_id: str,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> GraphResult:
        """Add an edge if the connection validator accepts it.

        A rejected edge is not added; the validator's result comes back on
        ``GraphResult.connection``.
        """
        source = self._nodes.get(source_id)
        target = self._nodes.get(target_id)
        if source is None:
            return GraphResult.structural(f"source node not found: {source_id}")
        if target is None:
            return GraphResult.structural(f"target node not found: {target_id}")

        for edge in self._edges.values():
            if (edge.source, edge.target, edge.source_handle, edge.target_handle) == (
                source_id, target_id, source_handle, target_handle
            ):
                return GraphResult.structural(f"connection already exists: {edge.id}")

        connection = self.validator.validate(
            source, target, self._edges.values(), source_handle, target_handle
        )
        if not connection.valid:
            if self.emitter:
                self.emitter.emit_edge(
                    FlowEventType.edge_rejected,
                    source_id,
                    target_id,
                    message=connection.message,
                )
            return GraphResult(
                ok=False,
                error_type=CONNECTION,
                message=connection.message,
                connection=connection,
            )

        edge = FlowEdge(
            id=self._id_provider("edge"),
            source=source_id,
            target=target_id,
            source_handle=source_handle,
            target_handle=target_handle,
        )
        if edge.id in self._edges:
            return GraphResult.structural(f"duplicate edge id: {edge.id}")
        self._edges[edge.id] = edge
        self._touch()
        if self.emitter:
            self.emitter.emit_edge(
                FlowEventType.edge_added,
                source_id,
                target_id,
                edge_id=edge.id,
                suggestion=connection.suggestion,
            )
        return GraphResult(ok=True, edge=edge, connection=connection)

    def remove_edge(self, edge_id: str) -> GraphResult:
        edge = self._edges.pop(edge_id, None)
        if edge is None:
            return GraphResult.structural(f"edge not found: {edge_id}")
        self._touch()
        return GraphResult(ok=True, edge=edge)

    # --- suggestions ---

    def apply_suggestion(self, source_id: str, suggestion: FlowSuggestion) -> GraphResult:
        """Create the suggested node next to ``source_id`` and connect it if asked.

        The node is kept even if the automatic connection is rejected; the
        rejection is reported on ``GraphResult.connection``.
        """
        source = self._nodes.get(source_id)
        if source is None:
            return GraphResult.structural(f"node not found: {source_id}")

        data = default_node_data(suggestion.node_type).model_dump(by_alias=True)
        data.update(suggestion.default_config or {})
        position = Position(x=source.position.x + SUGGESTION_OFFSET_X, y=source.position.y)

        added = self.add_node(suggestion.node_type, position, data)
        if not added.ok or not suggestion.auto_connect:
            return added

        connected = self.add_edge(source_id, added.node.id)
        return GraphResult(
            ok=True,
            node=added.node,
            edge=connected.edge,
            connection=connected.connection,
            message=None if connected.ok else connected.message,
        )

    def _touch(self) -> None:
        self.updated_at = utc_timestamp()
