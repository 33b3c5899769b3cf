"""Core data models for flowstudio."""

from flowstudio.models.flow_node import (
    NODE_CLASSES,
    BaseNode,
    Condition,
    ConditionalNode,
    ConditionalNodeData,
    ConditionOperator,
    FlowModel,
    FlowNode,
    ForEachNode,
    ForEachNodeData,
    IterationMode,
    LLMCallNode,
    LLMCallNodeData,
    NodeData,
    NodeType,
    OutputFormat,
    OutputNode,
    OutputNodeData,
    Position,
    PromptNode,
    PromptNodeData,
    PromptParameters,
    TemplateNode,
    TemplateNodeData,
    TransformNode,
    TransformNodeData,
    ValidationRule,
    VariableNode,
    VariableNodeData,
    VariableReference,
    VariableType,
    build_node,
    data_class_for,
    default_node_data,
    parse_node,
)
from flowstudio.models.prompt_flow import FlowEdge, PromptFlow
from flowstudio.models.flow_variable import FlowVariable, VariableProvenance
from flowstudio.models.suggestion import ConnectionResult, FlowSuggestion
from flowstudio.models.validation import FlowValidationResult, IssueType, ValidationIssue
from flowstudio.models.flow_event import FlowEvent, FlowEventType

__all__ = [
    # Nodes
    "NODE_CLASSES",
    "BaseNode",
    "Condition",
    "ConditionalNode",
    "ConditionalNodeData",
    "ConditionOperator",
    "FlowModel",
    "FlowNode",
    "ForEachNode",
    "ForEachNodeData",
    "IterationMode",
    "LLMCallNode",
    "LLMCallNodeData",
    "NodeData",
    "NodeType",
    "OutputFormat",
    "OutputNode",
    "OutputNodeData",
    "Position",
    "PromptNode",
    "PromptNodeData",
    "PromptParameters",
    "TemplateNode",
    "TemplateNodeData",
    "TransformNode",
    "TransformNodeData",
    "ValidationRule",
    "VariableNode",
    "VariableNodeData",
    "VariableReference",
    "VariableType",
    "build_node",
    "data_class_for",
    "default_node_data",
    "parse_node",
    # Flow document
    "FlowEdge",
    "PromptFlow",
    # Derived
    "FlowVariable",
    "VariableProvenance",
    "ConnectionResult",
    "FlowSuggestion",
    "FlowValidationResult",
    "IssueType",
    "ValidationIssue",
    # Events
    "FlowEvent",
    "FlowEventType",
]
