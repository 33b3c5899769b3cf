"""Whole-flow validation run before a flow is handed off for execution.

Structural invariants are already guaranteed by ``PromptFlow``; this pass
reports what the editor tolerates but execution does not (cycles,
incompatible pairs, unconfigured nodes) plus best-practice warnings.
"""

from flowstudio.analysis.default_rules import DEFAULT_RULE_SET
from flowstudio.analysis.rule_set import RuleSet
from flowstudio.analysis.traversal import find_cycle_nodes, topological_order
from flowstudio.analysis.variable_resolver import resolve_variables
from flowstudio.models.flow_node import (
    ConditionalNode,
    ForEachNode,
    NodeType,
    VariableReference,
)
from flowstudio.models.flow_variable import VariableProvenance
from flowstudio.models.prompt_flow import PromptFlow
from flowstudio.models.validation import FlowValidationResult, IssueType, ValidationIssue


def _connection_errors(flow: PromptFlow, rule_set: RuleSet) -> list[ValidationIssue]:
    errors: list[ValidationIssue] = []
    nodes = {node.id: node for node in flow.nodes}

    for edge in flow.edges:
        if edge.source == edge.target:
            errors.append(ValidationIssue(
                node_id=edge.source,
                message=f"Edge {edge.id} is a self-loop",
                type=IssueType.connection,
            ))
            continue
        source, target = nodes[edge.source], nodes[edge.target]
        for rule in rule_set.compatibility_rules:
            if rule.applies_to(source, target) and not rule.check(
                source, target, edge.source_handle, edge.target_handle
            ):
                errors.append(ValidationIssue(
                    node_id=edge.source,
                    message=f"Edge {edge.id}: {rule.message}",
                    type=IssueType.connection,
                ))
                break

    node_ids = [node.id for node in flow.nodes]
    cyclic = find_cycle_nodes(node_ids, [e for e in flow.edges if e.source != e.target])
    if cyclic:
        errors.append(ValidationIssue(
            message=f"Flow contains a circular dependency involving: {', '.join(cyclic)}",
            type=IssueType.logic,
        ))
    return errors


def _data_errors(flow: PromptFlow) -> list[ValidationIssue]:
    errors: list[ValidationIssue] = []
    for node in flow.nodes:
        if isinstance(node, ForEachNode) and not node.data.source_variable.strip():
            errors.append(ValidationIssue(
                node_id=node.id,
                message="For-each node has no source variable",
                type=IssueType.data,
            ))
        elif isinstance(node, ConditionalNode):
            left = node.data.condition.left_operand
            if isinstance(left, VariableReference):
                left = left.name
            if not left.strip():
                errors.append(ValidationIssue(
                    node_id=node.id,
                    message="Conditional node has no left operand",
                    type=IssueType.data,
                ))
    return errors


def _warnings(flow: PromptFlow) -> list[ValidationIssue]:
    warnings: list[ValidationIssue] = []

    if flow.nodes and not any(node.type == NodeType.output for node in flow.nodes):
        warnings.append(ValidationIssue(
            message="Flow has no output node",
            type=IssueType.best_practice,
        ))

    if len(flow.nodes) > 1:
        connected = {e.source for e in flow.edges} | {e.target for e in flow.edges}
        for node in flow.nodes:
            if node.id not in connected:
                warnings.append(ValidationIssue(
                    node_id=node.id,
                    message="Node is not connected to the rest of the flow",
                    type=IssueType.best_practice,
                ))

    for variable in resolve_variables(flow):
        if variable.provenance == VariableProvenance.template_placeholder:
            warnings.append(ValidationIssue(
                message=f"Placeholder '{{{{{variable.name}}}}}' is not declared by any variable node",
                type=IssueType.best_practice,
            ))
    return warnings


def validate_flow(flow: PromptFlow, rule_set: RuleSet = DEFAULT_RULE_SET) -> FlowValidationResult:
    """Validate ``flow`` for execution; errors block, warnings inform."""
    errors = _connection_errors(flow, rule_set) + _data_errors(flow)
    warnings = _warnings(flow)
    order = topological_order([node.id for node in flow.nodes], flow.edges)
    return FlowValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        execution_order=order,
    )
