"""Tests for candidate edge checks."""

from flowstudio.analysis.connection_validator import (
    CYCLE_MESSAGE,
    SELF_LOOP_MESSAGE,
    ConnectionValidator,
)
from flowstudio.analysis.rule_set import RuleSet
from flowstudio.models.flow_node import (
    ConditionalNode,
    OutputFormat,
    OutputNode,
    PromptNode,
    PromptNodeData,
    TransformNode,
    VariableNode,
)
from flowstudio.models.prompt_flow import FlowEdge


class TestStructuralChecks:
    """Test self-loop and cycle detection."""

    def setup_method(self):
        self.validator = ConnectionValidator()
        self.a = PromptNode(id="a")
        self.b = PromptNode(id="b")
        self.c = PromptNode(id="c")
        self.edges = [
            FlowEdge(id="e1", source="a", target="b"),
            FlowEdge(id="e2", source="b", target="c"),
        ]

    def test_self_loop_invalid(self):
        result = self.validator.validate(self.a, self.a)
        assert result.valid is False
        assert result.message == SELF_LOOP_MESSAGE

    def test_self_loop_checked_before_compatibility(self):
        output = OutputNode(id="o")
        assert self.validator.validate(output, output).message == SELF_LOOP_MESSAGE

    def test_three_node_cycle_invalid(self):
        """C -> A closes A -> B -> C."""
        result = self.validator.validate(self.c, self.a, self.edges)
        assert result.valid is False
        assert result.message == CYCLE_MESSAGE

    def test_forward_edge_valid(self):
        assert self.validator.validate(self.a, self.c, self.edges).valid is True


class TestCompatibility:
    """Test the default compatibility table."""

    def setup_method(self):
        self.validator = ConnectionValidator()

    def test_output_cannot_be_a_source(self):
        result = self.validator.validate(OutputNode(id="o"), PromptNode(id="p"))
        assert result.valid is False
        assert "terminal" in result.message

    def test_variable_cannot_be_a_target(self):
        result = self.validator.validate(PromptNode(id="p"), VariableNode(id="v"))
        assert result.valid is False
        assert result.suggestion is not None

    def test_conditional_branch_handles(self):
        cond, prompt = ConditionalNode(id="c"), PromptNode(id="p")
        assert self.validator.validate(cond, prompt, source_handle="true").valid is True
        assert self.validator.validate(cond, prompt, source_handle="false").valid is True
        assert self.validator.validate(cond, prompt).valid is True
        assert self.validator.validate(cond, prompt, source_handle="maybe").valid is False

    def test_unrestricted_pair_is_compatible(self):
        result = self.validator.validate(TransformNode(id="t"), OutputNode(id="o"))
        assert result.valid is True
        assert result.suggestion is None

    def test_empty_rule_set_allows_everything_but_loops(self):
        validator = ConnectionValidator(RuleSet())
        assert validator.validate(OutputNode(id="o"), VariableNode(id="v")).valid is True
        assert validator.validate(OutputNode(id="o"), OutputNode(id="o")).valid is False


class TestAdvisories:
    """Test the non-blocking connection suggestions."""

    def setup_method(self):
        self.validator = ConnectionValidator()

    def test_prompt_to_output(self):
        result = self.validator.validate(PromptNode(id="p"), OutputNode(id="o"))
        assert result.valid is True
        assert result.suggestion == "Output the prompt result directly"

    def test_structured_list_prompt_to_transform(self):
        """The conditional rule applies only when the prompt expects a list."""
        listy = PromptNode(id="p", data=PromptNodeData(expected_format=OutputFormat.structured_list))
        plain = PromptNode(id="q")
        transform = TransformNode(id="t")

        assert self.validator.validate(listy, transform).suggestion == (
            "Split list into individual items for processing"
        )
        assert self.validator.validate(plain, transform).suggestion == (
            "Transform the prompt output format or extract specific data"
        )

    def test_variable_to_prompt(self):
        result = self.validator.validate(VariableNode(id="v"), PromptNode(id="p"))
        assert result.valid is True
        assert result.suggestion == "Use variable as input to customize the prompt"
