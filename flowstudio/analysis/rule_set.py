"""Immutable rule configuration consumed by the validator and suggestion engine.

A ``RuleSet`` is passed in explicitly; nothing reads module-level state, so
alternate rule sets can be swapped in for tests or per-deployment tuning.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from flowstudio.models.flow_node import BaseNode, NodeType
from flowstudio.models.suggestion import FlowSuggestion


@dataclass(frozen=True)
class ConnectionRule:
    """Advisory text attached to a (source type, target type) connection."""

    source_type: NodeType
    target_type: NodeType
    suggestion: str
    condition: Callable[[BaseNode, BaseNode], bool] | None = None

    def matches(self, source: BaseNode, target: BaseNode) -> bool:
        if source.type != self.source_type or target.type != self.target_type:
            return False
        return self.condition is None or self.condition(source, target)


@dataclass(frozen=True)
class CompatibilityRule:
    """Restricts a node pair; ``None`` on either side matches any type.

    ``check(source, target, source_handle, target_handle)`` returns False
    when the pair is incompatible.
    """

    source_type: NodeType | None
    target_type: NodeType | None
    check: Callable[[BaseNode, BaseNode, str | None, str | None], bool]
    message: str
    suggestion: str | None = None

    def applies_to(self, source: BaseNode, target: BaseNode) -> bool:
        if self.source_type is not None and source.type != self.source_type:
            return False
        if self.target_type is not None and target.type != self.target_type:
            return False
        return True


@dataclass(frozen=True)
class SuggestionHeuristics:
    """Keyword lists behind the suggestion heuristics (all lowercase)."""

    list_keywords: tuple[str, ...] = ("list", "items", "bullet", "numbered")
    analysis_keywords: tuple[str, ...] = ("analyze", "sentiment", "classify", "categorize")
    collection_name_markers: tuple[str, ...] = ("list", "array", "items")
    split_code_markers: tuple[str, ...] = ("split", "map")
    split_transform_types: tuple[str, ...] = ("split",)


SuggestionRule = Callable[[BaseNode, Sequence[BaseNode], SuggestionHeuristics], list[FlowSuggestion]]


@dataclass(frozen=True)
class RuleSet:
    connection_rules: tuple[ConnectionRule, ...] = ()
    compatibility_rules: tuple[CompatibilityRule, ...] = ()
    suggestion_rules: Mapping[NodeType, SuggestionRule] = field(
        default_factory=lambda: MappingProxyType({})
    )
    heuristics: SuggestionHeuristics = field(default_factory=SuggestionHeuristics)
    max_suggestions: int = 5

    def __post_init__(self) -> None:
        # freeze whatever container the caller handed in
        object.__setattr__(self, "connection_rules", tuple(self.connection_rules))
        object.__setattr__(self, "compatibility_rules", tuple(self.compatibility_rules))
        object.__setattr__(
            self, "suggestion_rules", MappingProxyType(dict(self.suggestion_rules))
        )

    def replace(self, **changes) -> RuleSet:
        """Return a copy with some parts swapped out."""
        return dataclasses.replace(self, **changes)

    def find_connection_rule(self, source: BaseNode, target: BaseNode) -> ConnectionRule | None:
        """First matching connection rule, in declaration order."""
        for rule in self.connection_rules:
            if rule.matches(source, target):
                return rule
        return None
