"""Node models for the prompt-flow authoring layer.

A node is a tagged union over eight variants keyed by its ``type``
discriminant. Each variant pairs the literal type with its own data class,
so code that receives a ``PromptNode`` gets a ``PromptNodeData`` without
any casting.

Wire names are camelCase (the editor's JSON document); Python attributes
are snake_case. Unknown keys are kept so documents round-trip exactly.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class FlowModel(BaseModel):
    """Base for every model that travels in the PromptFlow JSON document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NodeType(str, Enum):
    """Types of nodes that can be placed on a flow."""

    prompt = "prompt"
    variable = "variable"
    conditional = "conditional"
    transform = "transform"
    output = "output"
    for_each = "for_each"
    template = "template"
    llm_call = "llm_call"


class VariableType(str, Enum):
    """Declared value type of a flow variable."""

    string = "string"
    number = "number"
    boolean = "boolean"
    json = "json"


class OutputFormat(str, Enum):
    """Expected shape of a prompt's output."""

    text = "text"
    json = "json"
    markdown = "markdown"
    structured_list = "structured_list"


class ConditionOperator(str, Enum):
    equals = "equals"
    contains = "contains"
    greater_than = "greater_than"
    less_than = "less_than"
    exists = "exists"


class IterationMode(str, Enum):
    """How a ForEach body is expected to run.

    sequential: strictly ordered, later iterations may see earlier state.
    parallel: independent iterations, results reassembled by input index.
    """

    sequential = "sequential"
    parallel = "parallel"


class Position(FlowModel):
    x: float = 0.0
    y: float = 0.0


class VariableReference(FlowModel):
    """A reference to a variable by name, optionally pinned to a node."""

    name: str
    node_id: str | None = None


class ValidationRule(FlowModel):
    """Editor-side input rule attached to a variable node."""

    type: Literal["required", "minLength", "maxLength", "pattern", "custom"]
    value: Any = None
    message: str


# --- Node data variants ---


class NodeData(FlowModel):
    """Fields shared by every node payload."""

    model_config = ConfigDict(extra="allow")

    label: str = ""
    description: str | None = None


class PromptParameters(FlowModel):
    temperature: float = 0.7
    max_tokens: int = 1000
    top_p: float = 1.0


class PromptNodeData(NodeData):
    content: str = ""
    model: str = "gpt-3.5-turbo"
    system_message: str | None = None
    parameters: PromptParameters = Field(default_factory=PromptParameters)
    variables: list[VariableReference] = Field(default_factory=list)
    expected_format: OutputFormat | None = None


class VariableNodeData(NodeData):
    name: str = ""
    type: VariableType = VariableType.string
    default_value: Any = None
    validation: list[ValidationRule] | None = None


class Condition(FlowModel):
    left_operand: str | VariableReference = ""
    operator: ConditionOperator = ConditionOperator.equals
    right_operand: str | VariableReference = ""


class ConditionalNodeData(NodeData):
    condition: Condition = Field(default_factory=Condition)


class TransformNodeData(NodeData):
    # open set: format, split, filter, map, custom, ...
    transform_type: str = "format"
    code: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)


class OutputNodeData(NodeData):
    format: str = "text"
    template: str | None = None


class ForEachNodeData(NodeData):
    source_variable: str = ""
    item_variable: str = "item"
    iteration_mode: IterationMode = IterationMode.sequential
    item_properties: list[str] = Field(default_factory=list)


class TemplateNodeData(NodeData):
    template_id: str = ""
    variables: dict[str, Any] = Field(default_factory=dict)


class LLMCallNodeData(NodeData):
    provider: str = "openai"
    model: str = "gpt-3.5-turbo"
    prompt: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)


# --- Node variants ---


class BaseNode(FlowModel):
    """Fields shared by every node variant."""

    model_config = ConfigDict(extra="allow")

    id: str
    position: Position = Field(default_factory=Position)


class PromptNode(BaseNode):
    type: Literal["prompt"] = "prompt"
    data: PromptNodeData = Field(default_factory=PromptNodeData)


class VariableNode(BaseNode):
    type: Literal["variable"] = "variable"
    data: VariableNodeData = Field(default_factory=VariableNodeData)


class ConditionalNode(BaseNode):
    type: Literal["conditional"] = "conditional"
    data: ConditionalNodeData = Field(default_factory=ConditionalNodeData)


class TransformNode(BaseNode):
    type: Literal["transform"] = "transform"
    data: TransformNodeData = Field(default_factory=TransformNodeData)


class OutputNode(BaseNode):
    type: Literal["output"] = "output"
    data: OutputNodeData = Field(default_factory=OutputNodeData)


class ForEachNode(BaseNode):
    type: Literal["for_each"] = "for_each"
    data: ForEachNodeData = Field(default_factory=ForEachNodeData)


class TemplateNode(BaseNode):
    type: Literal["template"] = "template"
    data: TemplateNodeData = Field(default_factory=TemplateNodeData)


class LLMCallNode(BaseNode):
    type: Literal["llm_call"] = "llm_call"
    data: LLMCallNodeData = Field(default_factory=LLMCallNodeData)


FlowNode = Annotated[
    Union[
        PromptNode,
        VariableNode,
        ConditionalNode,
        TransformNode,
        OutputNode,
        ForEachNode,
        TemplateNode,
        LLMCallNode,
    ],
    Field(discriminator="type"),
]

NODE_CLASSES: dict[NodeType, type[BaseNode]] = {
    NodeType.prompt: PromptNode,
    NodeType.variable: VariableNode,
    NodeType.conditional: ConditionalNode,
    NodeType.transform: TransformNode,
    NodeType.output: OutputNode,
    NodeType.for_each: ForEachNode,
    NodeType.template: TemplateNode,
    NodeType.llm_call: LLMCallNode,
}

_node_adapter: TypeAdapter = TypeAdapter(FlowNode)


def parse_node(raw: Any) -> BaseNode:
    """Validate a raw dict into the matching node variant.

    Raises:
        pydantic.ValidationError: unknown ``type`` or malformed ``data``.
    """
    return _node_adapter.validate_python(raw)


def data_class_for(node_type: NodeType | str) -> type[NodeData]:
    """Return the payload class used by ``node_type``."""
    node_cls = NODE_CLASSES[NodeType(node_type)]
    return node_cls.model_fields["data"].annotation


def build_node(
    node_type: NodeType | str,
    node_id: str,
    position: Position | None = None,
    data: NodeData | dict | None = None,
) -> BaseNode:
    """Build a node of ``node_type``; ``data`` may be a dict of wire or python names."""
    node_cls = NODE_CLASSES[NodeType(node_type)]
    data_cls = data_class_for(node_type)
    if data is None:
        payload = data_cls()
    elif isinstance(data, data_cls):
        payload = data
    elif isinstance(data, NodeData):
        raise TypeError(
            f"{type(data).__name__} cannot be used as data for a {NodeType(node_type).value} node"
        )
    else:
        payload = data_cls.model_validate(data)
    return node_cls(id=node_id, position=position or Position(), data=payload)


def default_node_data(node_type: NodeType | str) -> NodeData:
    """Editor defaults for a freshly dropped node of ``node_type``."""
    node_type = NodeType(node_type)
    base = {
        "label": f"{node_type.value.capitalize()} Node",
        "description": f"A {node_type.value} node",
    }
    defaults: dict[NodeType, dict[str, Any]] = {
        NodeType.prompt: {"content": "Enter your prompt here..."},
        NodeType.variable: {"name": "variable1", "type": "string", "defaultValue": ""},
        NodeType.conditional: {},
        NodeType.transform: {"transformType": "format", "parameters": {}},
        NodeType.output: {"format": "text", "template": "{{result}}"},
        NodeType.for_each: {
            "sourceVariable": "",
            "itemVariable": "item",
            "iterationMode": "sequential",
            "itemProperties": [],
        },
        NodeType.template: {"templateId": "template1", "variables": {}},
        NodeType.llm_call: {"prompt": "Your prompt here..."},
    }
    return data_class_for(node_type).model_validate({**base, **defaults[node_type]})
