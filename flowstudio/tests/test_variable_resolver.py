"""Tests for variable discovery across a flow."""

from flowstudio.analysis.variable_resolver import resolve_variables
from flowstudio.models.flow_node import (
    OutputNode,
    OutputNodeData,
    PromptNode,
    PromptNodeData,
    TemplateNode,
    TemplateNodeData,
    VariableNode,
    VariableNodeData,
    VariableReference,
    VariableType,
)
from flowstudio.models.flow_variable import VariableProvenance
from flowstudio.models.prompt_flow import PromptFlow


def _flow() -> PromptFlow:
    return PromptFlow(
        id="flow-1",
        nodes=[
            VariableNode(id="v1", data=VariableNodeData(name="topic", default_value="rivers")),
            VariableNode(id="v2", data=VariableNodeData(name="count", type=VariableType.number)),
            PromptNode(
                id="p1",
                data=PromptNodeData(
                    label="Writer",
                    content="Write {{count}} lines about {{topic}} in a {{ style }} voice",
                    variables=[VariableReference(name="topic"), VariableReference(name="tone")],
                ),
            ),
            OutputNode(id="o1", data=OutputNodeData(template="{{result}} ({{style}})")),
        ],
    )


class TestResolution:
    """Test the three resolution passes and their precedence."""

    def test_order_and_provenance(self):
        """Variable nodes first, then prompt references, then placeholders."""
        variables = resolve_variables(_flow())

        assert [v.name for v in variables] == ["topic", "count", "tone", "style", "result"]
        assert [v.provenance for v in variables] == [
            VariableProvenance.variable_node,
            VariableProvenance.variable_node,
            VariableProvenance.prompt_reference,
            VariableProvenance.template_placeholder,
            VariableProvenance.template_placeholder,
        ]

    def test_variable_node_wins_over_later_passes(self):
        """A name declared by a variable node keeps its declared type and default."""
        topic, count = resolve_variables(_flow())[:2]

        assert topic.default_value == "rivers"
        assert topic.required is False
        assert count.type == VariableType.number
        assert count.required is True

    def test_prompt_reference_description(self):
        tone = resolve_variables(_flow())[2]
        assert tone.type == VariableType.string
        assert tone.required is True
        assert tone.description == "Variable referenced in Writer"

    def test_placeholder_description(self):
        style = resolve_variables(_flow())[3]
        assert style.description == "Template variable"
        assert style.required is True

    def test_idempotent(self):
        """Resolving an unchanged flow twice yields the same ordered list."""
        flow = _flow()
        assert resolve_variables(flow) == resolve_variables(flow)

    def test_completeness(self):
        """Count = declared variables + undeclared references + undeclared placeholders."""
        variables = resolve_variables(_flow())
        names = [v.name for v in variables]

        assert len(variables) == 2 + 1 + 2
        assert len(names) == len(set(names))


class TestEdgeCases:
    def test_empty_flow(self):
        assert resolve_variables(PromptFlow(id="empty")) == []

    def test_blank_variable_name_skipped(self):
        flow = PromptFlow(id="f", nodes=[VariableNode(id="v", data=VariableNodeData(name="  "))])
        assert resolve_variables(flow) == []

    def test_nested_placeholders_found(self):
        """Placeholders inside nested data structures are discovered."""
        flow = PromptFlow(
            id="f",
            nodes=[
                TemplateNode(
                    id="t",
                    data=TemplateNodeData(variables={"intro": {"text": "Hi {{name}}"}, "tags": ["{{tag}}"]}),
                ),
            ],
        )
        assert [v.name for v in resolve_variables(flow)] == ["name", "tag"]

    def test_prompt_label_falls_back_to_id(self):
        flow = PromptFlow(
            id="f",
            nodes=[PromptNode(id="p9", data=PromptNodeData(variables=[VariableReference(name="x")]))],
        )
        assert resolve_variables(flow)[0].description == "Variable referenced in p9"
