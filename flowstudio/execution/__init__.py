"""Pre-execution variable binding."""

from flowstudio.execution.binder import (
    BinderState,
    BindingResult,
    ExecutionCollaborator,
    ExecutionVariableBinder,
    InputKind,
    VariableInput,
    coerce_value,
    collect_in_order,
)

__all__ = [
    "BinderState",
    "BindingResult",
    "ExecutionCollaborator",
    "ExecutionVariableBinder",
    "InputKind",
    "VariableInput",
    "coerce_value",
    "collect_in_order",
]
