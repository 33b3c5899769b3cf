"""
Pre-execution variable binding.

The binder turns the resolved variables of a flow into input fields,
validates every field at once and hands a fully typed value map to an
execution collaborator. Only ``submit`` is asynchronous; everything else
runs synchronously on the caller's loop.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence

from flowstudio.adapters.event_api import EventEmitter
from flowstudio.analysis.variable_resolver import resolve_variables
from flowstudio.models.flow_event import FlowEventType
from flowstudio.models.flow_node import VariableType
from flowstudio.models.flow_variable import FlowVariable
from flowstudio.models.prompt_flow import PromptFlow

TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


class BinderState(str, Enum):
    idle = "idle"
    validating = "validating"
    invalid = "invalid"
    valid = "valid"
    executing = "executing"
    completed = "completed"
    failed = "failed"


class InputKind(str, Enum):
    """Input widget used for a variable's declared type."""

    text = "text"
    number = "number"
    checkbox = "checkbox"
    json = "json"  # multi-line JSON text


INPUT_KINDS: dict[VariableType, InputKind] = {
    VariableType.string: InputKind.text,
    VariableType.number: InputKind.number,
    VariableType.boolean: InputKind.checkbox,
    VariableType.json: InputKind.json,
}


@dataclass
class VariableInput:
    """One rendered input field."""

    name: str
    kind: InputKind
    value: Any
    required: bool
    description: str | None = None
    error: str | None = None


@dataclass
class BindingResult:
    """Outcome of ``ExecutionVariableBinder.submit``."""

    ok: bool
    state: BinderState
    errors: dict[str, str] = field(default_factory=dict)
    values: dict[str, Any] | None = None
    result: Any = None
    message: str | None = None
    discarded: bool = False  # binder was closed while the call was in flight


class ExecutionCollaborator(Protocol):
    """Runs a flow with a fully typed variable map."""

    async def __call__(self, variables: dict[str, Any]) -> Any: ...


def initial_value(variable: FlowVariable) -> Any:
    """Starting value for a field: the default, or the type's empty value."""
    default = variable.default_value
    if variable.type == VariableType.json:
        if default in (None, ""):
            return "{}"
        return default if isinstance(default, str) else json.dumps(default)
    if default not in (None, ""):
        return default
    if variable.type == VariableType.number:
        return 0
    if variable.type == VariableType.boolean:
        return False
    return ""


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def parse_number(value: Any) -> int | float:
    """Parse a numeric field value.

    Raises:
        ValueError: if the value is not numeric.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if "_" in text:
            raise ValueError(f"not a number: {value!r}")
        try:
            return int(text)
        except ValueError:
            number = float(text)
    if math.isnan(number):
        raise ValueError(f"not a number: {value!r}")
    return number


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json(text: str) -> Any:
    """Parse JSON text the way a browser's JSON.parse would.

    Raises:
        ValueError: malformed text, NaN/Infinity constants, or nesting too deep to decode.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError:
        raise ValueError("JSON is nested too deeply") from None


def parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    return bool(value)


def coerce_value(variable_type: VariableType, value: Any) -> Any:
    """Convert a validated field value to its declared type."""
    if variable_type == VariableType.number:
        return 0 if _is_empty(value) else parse_number(value)
    if variable_type == VariableType.boolean:
        return parse_boolean(value)
    if variable_type == VariableType.json:
        if _is_empty(value):
            return {}
        return parse_json(value) if isinstance(value, str) else value
    return "" if value is None else value


def field_error(variable: FlowVariable, value: Any) -> str | None:
    """Return the error message for one field, or None if it is acceptable."""
    if _is_empty(value):
        return f"{variable.name} is required" if variable.required else None
    if variable.type == VariableType.number:
        try:
            parse_number(value)
        except (TypeError, ValueError):
            return f"{variable.name} must be a valid number"
    elif variable.type == VariableType.json and isinstance(value, str):
        try:
            parse_json(value)
        except ValueError:
            return f"{variable.name} must be valid JSON"
    return None


class ExecutionVariableBinder:
    """Collects, validates and coerces variable values for one flow run.

    Usage:
        binder = ExecutionVariableBinder.from_flow(flow)
        binder.set_value("topics", "a, b, c")
        result = await binder.submit(run_flow)
        if not result.ok:
            show(result.errors)
    """

    def __init__(
        self,
        variables: Sequence[FlowVariable],
        emitter: EventEmitter | None = None,
    ) -> None:
        self.variables = list(variables)
        self.emitter = emitter
        self.state = BinderState.idle
        self.values: dict[str, Any] = {v.name: initial_value(v) for v in self.variables}
        self.errors: dict[str, str] = {}
        self._by_name = {v.name: v for v in self.variables}
        self._closed = False

    @classmethod
    def from_flow(cls, flow: PromptFlow, emitter: EventEmitter | None = None) -> "ExecutionVariableBinder":
        return cls(resolve_variables(flow), emitter=emitter)

    @property
    def closed(self) -> bool:
        return self._closed

    def inputs(self) -> list[VariableInput]:
        """Render one input field per variable, in resolution order."""
        return [
            VariableInput(
                name=v.name,
                kind=INPUT_KINDS[v.type],
                value=self.values[v.name],
                required=v.required,
                description=v.description,
                error=self.errors.get(v.name),
            )
            for v in self.variables
        ]

    def set_value(self, name: str, value: Any) -> None:
        """Set a field value and clear that field's error.

        Raises:
            KeyError: if ``name`` is not one of the bound variables.
        """
        if name not in self._by_name:
            raise KeyError(f"unknown variable: {name}")
        self.values[name] = value
        self.errors.pop(name, None)
        if self.state == BinderState.invalid:
            self.state = BinderState.idle

    def validate(self) -> dict[str, str]:
        """Check every field and return the full error map (empty when valid)."""
        executing = self.state == BinderState.executing
        if not executing:
            self.state = BinderState.validating

        errors: dict[str, str] = {}
        for variable in self.variables:
            message = field_error(variable, self.values.get(variable.name))
            if message:
                errors[variable.name] = message
        self.errors = errors

        if not executing:
            self.state = BinderState.invalid if errors else BinderState.valid
        return dict(errors)

    def coerce(self) -> dict[str, Any]:
        """Typed value map; only meaningful after a clean ``validate()``."""
        return {
            v.name: coerce_value(v.type, self.values.get(v.name))
            for v in self.variables
        }

    async def submit(self, executor: ExecutionCollaborator) -> BindingResult:
        """Validate, coerce and dispatch to ``executor``.

        Field errors and re-submission while executing come back as a failed
        ``BindingResult`` and the executor is not called. An exception raised
        by the executor is re-raised unchanged after the state moves to
        ``failed``.
        """
        if self.state == BinderState.executing:
            return BindingResult(
                ok=False, state=self.state, message="execution already in progress"
            )
        if self._closed:
            return BindingResult(ok=False, state=self.state, message="binder is closed")

        errors = self.validate()
        if errors:
            if self.emitter:
                self.emitter.emit_inputs_invalid(errors)
            return BindingResult(ok=False, state=self.state, errors=errors)

        values = self.coerce()
        self.state = BinderState.executing
        if self.emitter:
            self.emitter.emit(FlowEventType.execution_started, {"variables": list(values)})

        try:
            result = await executor(values)
        except Exception as e:
            self.state = BinderState.failed
            if self._closed:
                return BindingResult(ok=False, state=self.state, values=values, discarded=True)
            if self.emitter:
                self.emitter.emit_execution_failed(e)
            raise

        self.state = BinderState.completed
        if self._closed:
            return BindingResult(ok=False, state=self.state, values=values, discarded=True)
        if self.emitter:
            self.emitter.emit(FlowEventType.execution_completed)
        return BindingResult(ok=True, state=self.state, values=values, result=result)

    def close(self) -> None:
        """Soft cancellation: an in-flight call keeps running but its outcome is dropped."""
        self._closed = True


def collect_in_order(results_by_index: Mapping[int, Any]) -> list[Any]:
    """Reassemble parallel ForEach results into input order.

    Raises:
        ValueError: if the indexes are not exactly ``0..n-1``.
    """
    expected = set(range(len(results_by_index)))
    if set(results_by_index) != expected:
        missing = sorted(expected - set(results_by_index))
        raise ValueError(f"results are not indexed 0..{len(results_by_index) - 1}; missing {missing}")
    return [results_by_index[i] for i in range(len(results_by_index))]
