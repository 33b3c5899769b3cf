"""Derived variable model produced by the variable resolver.

Flow variables are recomputed on every resolution pass and never persisted.
"""

from enum import Enum
from typing import Any

from flowstudio.models.flow_node import FlowModel, VariableType


class VariableProvenance(str, Enum):
    """Where a resolved variable was discovered."""

    variable_node = "variable_node"
    prompt_reference = "prompt_reference"
    template_placeholder = "template_placeholder"


class FlowVariable(FlowModel):
    """An input the flow needs before it can be executed."""

    name: str
    type: VariableType = VariableType.string
    default_value: Any = None
    required: bool
    description: str | None = None
    provenance: VariableProvenance
