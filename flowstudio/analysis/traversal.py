"""Reachability and ordering over flow edges."""

from collections import deque
from typing import Iterable, Sequence

from flowstudio.models.prompt_flow import FlowEdge


def build_adjacency(edges: Iterable[FlowEdge]) -> dict[str, list[str]]:
    """Map each source node id to its targets, in edge order."""
    adjacency: dict[str, list[str]] = {}
    for edge in edges:
        adjacency.setdefault(edge.source, []).append(edge.target)
    return adjacency


def is_reachable(edges: Iterable[FlowEdge], start: str, goal: str) -> bool:
    """BFS from ``start``; True when ``goal`` can be reached over ``edges``.

    O(V+E). A node always reaches itself.
    """
    if start == goal:
        return True
    adjacency = build_adjacency(edges)
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for nxt in adjacency.get(current, ()):
            if nxt == goal:
                return True
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return False


def would_create_cycle(edges: Iterable[FlowEdge], source: str, target: str) -> bool:
    """Adding source -> target closes a cycle iff target already reaches source."""
    return is_reachable(edges, target, source)


def _kahn(node_ids: Sequence[str], edges: list[FlowEdge]) -> list[str]:
    """Kahn's algorithm, ties broken by node order; partial when cyclic."""
    indegree = {node_id: 0 for node_id in node_ids}
    for edge in edges:
        if edge.target in indegree:
            indegree[edge.target] += 1
    adjacency = build_adjacency(edges)

    ready = deque(node_id for node_id in node_ids if indegree[node_id] == 0)
    order: list[str] = []
    while ready:
        current = ready.popleft()
        order.append(current)
        for nxt in adjacency.get(current, ()):
            if nxt not in indegree:
                continue
            indegree[nxt] -= 1
            if indegree[nxt] == 0:
                ready.append(nxt)
    return order


def topological_order(node_ids: Sequence[str], edges: Iterable[FlowEdge]) -> list[str] | None:
    """Execution order for an acyclic flow. None if the graph has a cycle."""
    order = _kahn(node_ids, list(edges))
    if len(order) != len(set(node_ids)):
        return None
    return order


def find_cycle_nodes(node_ids: Sequence[str], edges: Iterable[FlowEdge]) -> list[str]:
    """Node ids left over after Kahn's algorithm: members of, or downstream of, a cycle."""
    done = set(_kahn(node_ids, list(edges)))
    return [node_id for node_id in node_ids if node_id not in done]
