"""Whole-flow validation report."""

from enum import Enum

from pydantic import Field

from flowstudio.models.flow_node import FlowModel


class IssueType(str, Enum):
    # errors
    connection = "connection"
    data = "data"
    logic = "logic"
    # warnings
    best_practice = "best_practice"
    performance = "performance"


class ValidationIssue(FlowModel):
    node_id: str | None = None
    message: str
    type: IssueType


class FlowValidationResult(FlowModel):
    """Errors block execution, warnings do not."""

    is_valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    execution_order: list[str] | None = None  # topological order when acyclic
