"""PromptFlow document model: the save/load serialization unit.

For the data models, we choose pydantic: the structural invariants of a
flow (unique node ids, no dangling edges) are checked when a document is
parsed, so a ``PromptFlow`` instance is always structurally sound.
Acyclicity is deliberately not enforced here; see ``validate_flow``.
"""

from typing import Self

from pydantic import ConfigDict, Field, model_validator

from flowstudio.models.flow_node import BaseNode, FlowModel, FlowNode
from flowstudio.utils.identifiers import utc_timestamp


class FlowEdge(FlowModel):
    """A directed connection between two nodes."""

    model_config = ConfigDict(extra="allow")

    id: str
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None


class PromptFlow(FlowModel):
    """A named graph of nodes and edges."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    description: str | None = None
    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[FlowEdge] = Field(default_factory=list)
    updated_at: str = Field(default_factory=utc_timestamp)

    @model_validator(mode="after")
    def validate_structure(self) -> Self:
        """Node ids are unique and every edge points at existing nodes."""
        seen: set[str] = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"duplicate node id: {node.id}")
            seen.add(node.id)

        edge_ids: set[str] = set()
        for edge in self.edges:
            if edge.id in edge_ids:
                raise ValueError(f"duplicate edge id: {edge.id}")
            edge_ids.add(edge.id)
            if edge.source not in seen:
                raise ValueError(f"edge {edge.id} references missing source node: {edge.source}")
            if edge.target not in seen:
                raise ValueError(f"edge {edge.id} references missing target node: {edge.target}")
        return self

    def get_node(self, node_id: str) -> BaseNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to the wire document (camelCase keys)."""
        return self.model_dump_json(by_alias=True, indent=indent)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "PromptFlow":
        """Parse a wire document.

        Raises:
            pydantic.ValidationError: malformed document or broken invariants.
        """
        return cls.model_validate_json(raw)
