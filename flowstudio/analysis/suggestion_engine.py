"""Proposes ranked follow-on nodes for a source node."""

from typing import Sequence

from flowstudio.analysis.default_rules import DEFAULT_RULE_SET
from flowstudio.analysis.rule_set import RuleSet
from flowstudio.models.flow_node import BaseNode, NodeType
from flowstudio.models.prompt_flow import PromptFlow
from flowstudio.models.suggestion import FlowSuggestion


def rank_suggestions(suggestions: list[FlowSuggestion], limit: int) -> list[FlowSuggestion]:
    """Sort by descending priority and keep the top ``limit``.

    Ties keep the order the rules emitted them in (``sorted`` is stable).
    """
    return sorted(suggestions, key=lambda s: -s.priority)[:max(limit, 0)]


class SuggestionEngine:
    """Context-menu suggestion engine driven by an injected ``RuleSet``.

    Usage:
        engine = SuggestionEngine()
        engine.suggest(prompt_node, flow.nodes)
    """

    def __init__(self, rule_set: RuleSet = DEFAULT_RULE_SET) -> None:
        self.rule_set = rule_set

    def suggest(
        self,
        source: BaseNode,
        existing_nodes: Sequence[BaseNode] = (),
        limit: int | None = None,
    ) -> list[FlowSuggestion]:
        """Ranked suggestions for ``source``; empty for types without rules."""
        rule = self.rule_set.suggestion_rules.get(NodeType(source.type))
        if rule is None:
            return []
        suggestions = rule(source, existing_nodes, self.rule_set.heuristics)
        return rank_suggestions(suggestions, limit if limit is not None else self.rule_set.max_suggestions)

    def suggest_flow_completion(self, flow: PromptFlow) -> list[FlowSuggestion]:
        """Suggest an Output node for every terminal node that is not already one.

        A terminal node has no outgoing edges.
        """
        sources = {edge.source for edge in flow.edges}
        suggestions: list[FlowSuggestion] = []
        for node in flow.nodes:
            if node.id in sources or node.type == NodeType.output:
                continue
            suggestions.append(FlowSuggestion(
                node_type=NodeType.output,
                reason=f"Complete the flow by outputting results from {node.data.label or node.id}",
                priority=60,
                auto_connect=True,
                source_node_id=node.id,
            ))
        return suggestions
