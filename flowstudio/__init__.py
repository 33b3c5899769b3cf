"""flowstudio - prompt-flow graph authoring, analysis and variable binding."""

from flowstudio.models.flow_node import (
    BaseNode,
    FlowNode,
    NodeType,
    Position,
    VariableType,
    default_node_data,
    parse_node,
)
from flowstudio.models.prompt_flow import FlowEdge, PromptFlow
from flowstudio.models.flow_variable import FlowVariable
from flowstudio.models.suggestion import ConnectionResult, FlowSuggestion
from flowstudio.models.flow_event import FlowEvent, FlowEventType
from flowstudio.analysis.connection_validator import ConnectionValidator
from flowstudio.analysis.default_rules import DEFAULT_RULE_SET
from flowstudio.analysis.flow_validation import validate_flow
from flowstudio.analysis.rule_set import RuleSet
from flowstudio.analysis.suggestion_engine import SuggestionEngine
from flowstudio.analysis.variable_resolver import resolve_variables
from flowstudio.graph.flow_graph import FlowGraph, GraphResult
from flowstudio.execution.binder import BinderState, BindingResult, ExecutionVariableBinder
from flowstudio.adapters.event_api import EventEmitter
from flowstudio.adapters.sinks import FileSink, ListSink
from flowstudio.sdk.flow_client import FlowClient, FlowClientError

__all__ = [
    # Flow document
    "BaseNode",
    "FlowNode",
    "NodeType",
    "Position",
    "VariableType",
    "default_node_data",
    "parse_node",
    "FlowEdge",
    "PromptFlow",
    # Derived
    "FlowVariable",
    "ConnectionResult",
    "FlowSuggestion",
    # Events
    "FlowEvent",
    "FlowEventType",
    "EventEmitter",
    "FileSink",
    "ListSink",
    # Core components
    "ConnectionValidator",
    "DEFAULT_RULE_SET",
    "RuleSet",
    "SuggestionEngine",
    "resolve_variables",
    "validate_flow",
    "FlowGraph",
    "GraphResult",
    "BinderState",
    "BindingResult",
    "ExecutionVariableBinder",
    # SDK
    "FlowClient",
    "FlowClientError",
]
