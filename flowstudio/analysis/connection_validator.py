"""Decides whether a candidate edge may be added to a flow."""

from typing import Iterable

from flowstudio.analysis.default_rules import DEFAULT_RULE_SET
from flowstudio.analysis.rule_set import RuleSet
from flowstudio.analysis.traversal import would_create_cycle
from flowstudio.models.flow_node import BaseNode
from flowstudio.models.prompt_flow import FlowEdge
from flowstudio.models.suggestion import ConnectionResult

SELF_LOOP_MESSAGE = "self-loop not permitted."
CYCLE_MESSAGE = "This connection would create a circular dependency"


class ConnectionValidator:
    """Checks a candidate edge, short-circuiting on the first failure.

    1. self-loop
    2. cycle introduction (reachability from target back to source)
    3. compatibility table
    4. advisory connection rule

    Never raises; the caller gets a ``ConnectionResult`` either way.
    """

    def __init__(self, rule_set: RuleSet = DEFAULT_RULE_SET) -> None:
        self.rule_set = rule_set

    def validate(
        self,
        source: BaseNode,
        target: BaseNode,
        edges: Iterable[FlowEdge] = (),
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> ConnectionResult:
        if source.id == target.id:
            return ConnectionResult(valid=False, message=SELF_LOOP_MESSAGE)

        if would_create_cycle(edges, source.id, target.id):
            return ConnectionResult(valid=False, message=CYCLE_MESSAGE)

        for rule in self.rule_set.compatibility_rules:
            if not rule.applies_to(source, target):
                continue
            if not rule.check(source, target, source_handle, target_handle):
                return ConnectionResult(
                    valid=False,
                    message=rule.message,
                    suggestion=rule.suggestion,
                )

        rule = self.rule_set.find_connection_rule(source, target)
        if rule:
            return ConnectionResult(valid=True, suggestion=rule.suggestion)
        return ConnectionResult(valid=True)
