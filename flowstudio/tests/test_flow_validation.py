"""Tests for whole-flow validation."""

from flowstudio.analysis.flow_validation import validate_flow
from flowstudio.models.flow_node import (
    Condition,
    ConditionalNode,
    ConditionalNodeData,
    ForEachNode,
    ForEachNodeData,
    OutputNode,
    PromptNode,
    PromptNodeData,
    VariableNode,
    VariableNodeData,
)
from flowstudio.models.prompt_flow import FlowEdge, PromptFlow
from flowstudio.models.validation import IssueType


def _linear_flow() -> PromptFlow:
    return PromptFlow(
        id="flow-1",
        nodes=[
            VariableNode(id="v", data=VariableNodeData(name="topic", default_value="tides")),
            PromptNode(id="p", data=PromptNodeData(content="Explain {{topic}}")),
            OutputNode(id="o"),
        ],
        edges=[
            FlowEdge(id="e1", source="v", target="p"),
            FlowEdge(id="e2", source="p", target="o"),
        ],
    )


class TestValidFlow:
    def test_linear_flow_is_valid(self):
        result = validate_flow(_linear_flow())

        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.execution_order == ["v", "p", "o"]


class TestErrors:
    """Errors block execution."""

    def test_cycle_is_a_logic_error(self):
        flow = PromptFlow(
            id="f",
            nodes=[PromptNode(id="a"), PromptNode(id="b"), PromptNode(id="c"), OutputNode(id="o")],
            edges=[
                FlowEdge(id="e1", source="a", target="b"),
                FlowEdge(id="e2", source="b", target="c"),
                FlowEdge(id="e3", source="c", target="a"),
                FlowEdge(id="e4", source="c", target="o"),
            ],
        )
        result = validate_flow(flow)

        assert result.is_valid is False
        assert [e.type for e in result.errors] == [IssueType.logic]
        assert "a, b, c" in result.errors[0].message
        assert result.execution_order is None

    def test_self_loop_in_document(self):
        flow = PromptFlow(
            id="f",
            nodes=[PromptNode(id="a")],
            edges=[FlowEdge(id="loop", source="a", target="a")],
        )
        result = validate_flow(flow)

        assert result.is_valid is False
        assert result.errors[0].type == IssueType.connection
        assert result.errors[0].node_id == "a"

    def test_incompatible_edge_in_document(self):
        flow = PromptFlow(
            id="f",
            nodes=[OutputNode(id="o"), PromptNode(id="p")],
            edges=[FlowEdge(id="e1", source="o", target="p")],
        )
        errors = validate_flow(flow).errors
        assert [e.type for e in errors] == [IssueType.connection]
        assert errors[0].message.startswith("Edge e1:")

    def test_for_each_needs_source_variable(self):
        flow = PromptFlow(id="f", nodes=[ForEachNode(id="each"), OutputNode(id="o")])
        errors = validate_flow(flow).errors
        assert [(e.node_id, e.type) for e in errors] == [("each", IssueType.data)]

    def test_conditional_needs_left_operand(self):
        flow = PromptFlow(
            id="f",
            nodes=[
                ConditionalNode(id="c1"),
                ConditionalNode(id="c2", data=ConditionalNodeData(condition=Condition(left_operand="score"))),
                ForEachNode(id="each", data=ForEachNodeData(source_variable="rows")),
                OutputNode(id="o"),
            ],
        )
        errors = validate_flow(flow).errors
        assert [e.node_id for e in errors] == ["c1"]


class TestWarnings:
    """Warnings never block execution."""

    def test_missing_output(self):
        flow = PromptFlow(id="f", nodes=[PromptNode(id="p")])
        result = validate_flow(flow)

        assert result.is_valid is True
        assert [w.message for w in result.warnings] == ["Flow has no output node"]

    def test_disconnected_nodes(self):
        flow = PromptFlow(id="f", nodes=[PromptNode(id="p"), OutputNode(id="o")])
        warnings = validate_flow(flow).warnings
        assert [w.node_id for w in warnings] == ["p", "o"]
        assert all(w.type == IssueType.best_practice for w in warnings)

    def test_undeclared_placeholder(self):
        flow = _linear_flow()
        flow.nodes[1].data.content = "Explain {{topic}} to a {{audience}}"

        warnings = validate_flow(flow).warnings
        assert len(warnings) == 1
        assert "{{audience}}" in warnings[0].message

    def test_empty_flow(self):
        result = validate_flow(PromptFlow(id="empty"))
        assert result.is_valid is True
        assert result.warnings == []
        assert result.execution_order == []
