"""The stock rule set: connection advice, compatibility table and suggestion rules.

Suggestion default configs use the editor's wire keys (camelCase) so they
can be dropped straight into a new node's data.
"""

from typing import Any, Sequence

from flowstudio.analysis.rule_set import (
    CompatibilityRule,
    ConnectionRule,
    RuleSet,
    SuggestionHeuristics,
)
from flowstudio.models.flow_node import (
    BaseNode,
    NodeType,
    OutputFormat,
    PromptNode,
    TransformNode,
    VariableNode,
)
from flowstudio.models.suggestion import FlowSuggestion


# --- Heuristics ---


def is_list_output_prompt(node: PromptNode, heuristics: SuggestionHeuristics) -> bool:
    """Prompt content or metadata implies list-shaped output."""
    if node.data.expected_format == OutputFormat.structured_list:
        return True
    content = (node.data.content or "").lower()
    return any(keyword in content for keyword in heuristics.list_keywords)


def is_analysis_prompt(node: PromptNode, heuristics: SuggestionHeuristics) -> bool:
    """Prompt content implies classification or analysis."""
    content = (node.data.content or "").lower()
    return any(keyword in content for keyword in heuristics.analysis_keywords)


def is_list_variable(node: VariableNode, heuristics: SuggestionHeuristics) -> bool:
    """The variable's name or default value looks like a collection."""
    name = (node.data.name or "").lower()
    if any(marker in name for marker in heuristics.collection_name_markers):
        return True

    default = node.data.default_value
    if isinstance(default, (list, tuple)):
        return True
    if isinstance(default, str):
        if default.startswith("[") and default.endswith("]"):
            return True
        if "," in default and len(default.split(",")) > 2:
            return True
    return False


def is_list_transform(node: TransformNode, heuristics: SuggestionHeuristics) -> bool:
    """The transform splits its input into items."""
    if node.data.transform_type in heuristics.split_transform_types:
        return True
    code = node.data.code or ""
    return any(marker in code for marker in heuristics.split_code_markers)


# --- Per-type suggestion rules ---

_SPLIT_LIST_CODE = (
    "// Split list output into individual items\n"
    "const items = input.split('\\n').filter(item => item.trim());\n"
    "return items.map(item => ({ value: item.trim(), index: items.indexOf(item) }));"
)


def suggest_after_prompt(
    source: BaseNode, existing: Sequence[BaseNode], heuristics: SuggestionHeuristics
) -> list[FlowSuggestion]:
    if not isinstance(source, PromptNode):
        return []
    suggestions: list[FlowSuggestion] = []

    if is_list_output_prompt(source, heuristics):
        suggestions.append(FlowSuggestion(
            node_type=NodeType.for_each,
            reason="Iterate over each item in the generated list",
            priority=95,
            auto_connect=True,
            default_config={
                "label": "Process Each Item",
                "sourceVariable": "result",
                "itemVariable": "item",
                "iterationMode": "sequential",
            },
        ))
        suggestions.append(FlowSuggestion(
            node_type=NodeType.transform,
            reason="Parse and split the list output into individual items",
            priority=90,
            auto_connect=True,
            default_config={
                "label": "Split List",
                "transformType": "custom",
                "code": _SPLIT_LIST_CODE,
            },
        ))
        suggestions.append(FlowSuggestion(
            node_type=NodeType.conditional,
            reason="Apply conditional logic to each list item",
            priority=85,
            default_config={
                "label": "Filter List Items",
                "condition": {
                    "leftOperand": "item.length",
                    "operator": "greater_than",
                    "rightOperand": "0",
                },
            },
        ))

    if is_analysis_prompt(source, heuristics):
        suggestions.append(FlowSuggestion(
            node_type=NodeType.conditional,
            reason="Branch based on analysis results (positive/negative, categories, etc.)",
            priority=80,
            auto_connect=True,
        ))

    # output is always an option
    suggestions.append(FlowSuggestion(
        node_type=NodeType.output,
        reason="Format and display the prompt results",
        priority=70,
        auto_connect=True,
        default_config={"label": "Display Results", "format": "text"},
    ))
    return suggestions


def suggest_after_variable(
    source: BaseNode, existing: Sequence[BaseNode], heuristics: SuggestionHeuristics
) -> list[FlowSuggestion]:
    if not isinstance(source, VariableNode):
        return []
    name = source.data.name
    suggestions: list[FlowSuggestion] = []

    if is_list_variable(source, heuristics):
        suggestions.append(FlowSuggestion(
            node_type=NodeType.for_each,
            reason="Iterate over each item in this list/array variable",
            priority=95,
            auto_connect=True,
            default_config={
                "label": f"Process Each {name or 'Item'}",
                "sourceVariable": name or "list",
                "itemVariable": "item",
                "iterationMode": "sequential",
            },
        ))

    suggestions.append(FlowSuggestion(
        node_type=NodeType.prompt,
        reason="Use this variable to personalize or parameterize a prompt",
        priority=95,
        auto_connect=True,
        default_config={
            "label": "Dynamic Prompt",
            "content": f"Please analyze the following: {{{{{name or 'input'}}}}}",
        },
    ))
    suggestions.append(FlowSuggestion(
        node_type=NodeType.conditional,
        reason="Apply conditional logic based on variable value",
        priority=80,
        default_config={
            "label": "Check Variable",
            "condition": {
                "leftOperand": name or "input",
                "operator": "exists",
                "rightOperand": "true",
            },
        },
    ))
    return suggestions


def suggest_after_conditional(
    source: BaseNode, existing: Sequence[BaseNode], heuristics: SuggestionHeuristics
) -> list[FlowSuggestion]:
    return [
        FlowSuggestion(
            node_type=NodeType.prompt,
            reason="Create different prompts for each conditional branch",
            priority=85,
            default_config={"label": "Branch-Specific Prompt"},
        ),
        FlowSuggestion(
            node_type=NodeType.transform,
            reason="Apply different transformations based on condition results",
            priority=80,
            default_config={"label": "Conditional Transform"},
        ),
        FlowSuggestion(
            node_type=NodeType.output,
            reason="Output different results for each condition",
            priority=75,
            default_config={"label": "Conditional Output"},
        ),
    ]


def suggest_after_transform(
    source: BaseNode, existing: Sequence[BaseNode], heuristics: SuggestionHeuristics
) -> list[FlowSuggestion]:
    if not isinstance(source, TransformNode):
        return []
    suggestions: list[FlowSuggestion] = []

    if is_list_transform(source, heuristics):
        suggestions.append(FlowSuggestion(
            node_type=NodeType.conditional,
            reason="Apply conditional logic to each transformed item",
            priority=85,
            auto_connect=True,
        ))
        suggestions.append(FlowSuggestion(
            node_type=NodeType.prompt,
            reason="Process each item with a specialized prompt",
            priority=80,
            auto_connect=True,
            default_config={"label": "Process Item", "content": "Analyze this item: {{item}}"},
        ))

    suggestions.append(FlowSuggestion(
        node_type=NodeType.output,
        reason="Display the transformed results",
        priority=70,
        auto_connect=True,
    ))
    return suggestions


# --- Connection rules ---


def _expects_structured_list(source: BaseNode, target: BaseNode) -> bool:
    return isinstance(source, PromptNode) and source.data.expected_format == OutputFormat.structured_list


DEFAULT_CONNECTION_RULES: tuple[ConnectionRule, ...] = (
    # most specific first: the first matching rule wins
    ConnectionRule(
        source_type=NodeType.prompt,
        target_type=NodeType.transform,
        condition=_expects_structured_list,
        suggestion="Split list into individual items for processing",
    ),
    ConnectionRule(
        source_type=NodeType.prompt,
        target_type=NodeType.conditional,
        suggestion="Add conditional logic to branch based on prompt output",
    ),
    ConnectionRule(
        source_type=NodeType.prompt,
        target_type=NodeType.transform,
        suggestion="Transform the prompt output format or extract specific data",
    ),
    ConnectionRule(
        source_type=NodeType.prompt,
        target_type=NodeType.output,
        suggestion="Output the prompt result directly",
    ),
    ConnectionRule(
        source_type=NodeType.variable,
        target_type=NodeType.prompt,
        suggestion="Use variable as input to customize the prompt",
    ),
    ConnectionRule(
        source_type=NodeType.transform,
        target_type=NodeType.conditional,
        suggestion="Apply conditional logic to transformed data",
    ),
)


# --- Compatibility table ---


def _never(*_: Any) -> bool:
    return False


def _branch_handle(source: BaseNode, target: BaseNode, source_handle: str | None, target_handle: str | None) -> bool:
    return source_handle is None or source_handle in ("true", "false")


DEFAULT_COMPATIBILITY_RULES: tuple[CompatibilityRule, ...] = (
    CompatibilityRule(
        source_type=NodeType.output,
        target_type=None,
        check=_never,
        message="Output nodes are terminal and cannot feed other nodes",
        suggestion="Connect from the node that produces the result instead",
    ),
    CompatibilityRule(
        source_type=None,
        target_type=NodeType.variable,
        check=_never,
        message="Variable nodes are flow inputs and cannot receive connections",
        suggestion="Reference the variable with {{name}} in the downstream node instead",
    ),
    CompatibilityRule(
        source_type=NodeType.conditional,
        target_type=None,
        check=_branch_handle,
        message="Conditional nodes connect through their 'true' or 'false' handle",
    ),
)


DEFAULT_RULE_SET = RuleSet(
    connection_rules=DEFAULT_CONNECTION_RULES,
    compatibility_rules=DEFAULT_COMPATIBILITY_RULES,
    suggestion_rules={
        NodeType.prompt: suggest_after_prompt,
        NodeType.variable: suggest_after_variable,
        NodeType.conditional: suggest_after_conditional,
        NodeType.transform: suggest_after_transform,
    },
    heuristics=SuggestionHeuristics(),
    max_suggestions=5,
)
