"""Discover the variables a flow needs before it can run.

Resolution walks the flow in three fixed passes; the first pass to see a
name wins:

1. Variable nodes, with their declared type and default.
2. Variable references declared on Prompt nodes (string, required).
3. ``{{name}}`` placeholders found anywhere in node data (string, required).

Nodes, dict keys and list items are visited in document order, so resolving
an unchanged flow always yields the same list.
"""

from flowstudio.models.flow_node import PromptNode, VariableNode
from flowstudio.models.flow_variable import FlowVariable, VariableProvenance
from flowstudio.models.prompt_flow import PromptFlow
from flowstudio.utils.templating import find_placeholders, iter_strings


def resolve_variables(flow: PromptFlow) -> list[FlowVariable]:
    """Return the ordered, de-duplicated variables of ``flow``."""
    resolved: dict[str, FlowVariable] = {}

    for node in flow.nodes:
        if not isinstance(node, VariableNode):
            continue
        data = node.data
        name = data.name.strip()
        if not name or name in resolved:
            continue
        resolved[name] = FlowVariable(
            name=name,
            type=data.type,
            default_value=data.default_value,
            required=not data.default_value,
            description=data.description,
            provenance=VariableProvenance.variable_node,
        )

    for node in flow.nodes:
        if not isinstance(node, PromptNode):
            continue
        for ref in node.data.variables:
            name = ref.name.strip()
            if not name or name in resolved:
                continue
            resolved[name] = FlowVariable(
                name=name,
                required=True,
                description=f"Variable referenced in {node.data.label or node.id}",
                provenance=VariableProvenance.prompt_reference,
            )

    for node in flow.nodes:
        data = node.data.model_dump(mode="json", by_alias=True)
        for text in iter_strings(data):
            for name in find_placeholders(text):
                if name in resolved:
                    continue
                resolved[name] = FlowVariable(
                    name=name,
                    required=True,
                    description="Template variable",
                    provenance=VariableProvenance.template_placeholder,
                )

    return list(resolved.values())
