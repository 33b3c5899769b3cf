"""Editor-side flow graph."""

from flowstudio.graph.flow_graph import FlowGraph, GraphResult

__all__ = [
    "FlowGraph",
    "GraphResult",
]
