"""Flow analysis: variables, connections, suggestions and validation."""

from flowstudio.analysis.connection_validator import ConnectionValidator
from flowstudio.analysis.default_rules import DEFAULT_RULE_SET
from flowstudio.analysis.flow_validation import validate_flow
from flowstudio.analysis.rule_set import (
    CompatibilityRule,
    ConnectionRule,
    RuleSet,
    SuggestionHeuristics,
)
from flowstudio.analysis.suggestion_engine import SuggestionEngine
from flowstudio.analysis.variable_resolver import resolve_variables

__all__ = [
    "CompatibilityRule",
    "ConnectionRule",
    "ConnectionValidator",
    "DEFAULT_RULE_SET",
    "RuleSet",
    "SuggestionEngine",
    "SuggestionHeuristics",
    "resolve_variables",
    "validate_flow",
]
