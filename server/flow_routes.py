"""API routes for flow analysis.

Every endpoint is stateless: the client posts the whole PromptFlow document
and gets the analysis back. Nothing is stored server-side.
"""

import os
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import Field

from flowstudio.adapters.event_api import EventEmitter
from flowstudio.adapters.sinks import FileSink
from flowstudio.analysis.connection_validator import ConnectionValidator
from flowstudio.analysis.flow_validation import validate_flow
from flowstudio.analysis.suggestion_engine import SuggestionEngine
from flowstudio.analysis.variable_resolver import resolve_variables
from flowstudio.execution.binder import ExecutionVariableBinder
from flowstudio.models.flow_node import BaseNode, FlowModel
from flowstudio.models.flow_variable import FlowVariable
from flowstudio.models.prompt_flow import PromptFlow
from flowstudio.models.suggestion import ConnectionResult, FlowSuggestion
from flowstudio.models.validation import FlowValidationResult

# max suggestions returned when the request does not ask for a limit
SUGGESTION_LIMIT = int(os.getenv("SUGGESTION_LIMIT", "5"))
# when set, bind requests append their events to <dir>/flow_events.jsonl
FLOW_EVENTS_DIR = os.getenv("FLOW_EVENTS_DIR")

router = APIRouter(prefix="/flows")


class ConnectionCheckRequest(FlowModel):
    """request body for checking a candidate edge."""

    flow: PromptFlow
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None


class SuggestionRequest(FlowModel):
    flow: PromptFlow
    node_id: str
    limit: int | None = Field(default=None, ge=0)


class BindRequest(FlowModel):
    """request body for validating and coercing execution inputs."""

    flow: PromptFlow
    values: dict[str, Any] = {}


class BindResponse(FlowModel):
    ok: bool
    errors: dict[str, str] = {}
    values: dict[str, Any] | None = None


def _require_node(flow: PromptFlow, node_id: str) -> BaseNode:
    node = flow.get_node(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")
    return node


def _event_emitter(flow_id: str) -> EventEmitter | None:
    if not FLOW_EVENTS_DIR:
        return None
    return EventEmitter(flow_id, FileSink.for_directory(FLOW_EVENTS_DIR))


@router.post("/validate")
def validate(flow: PromptFlow) -> FlowValidationResult:
    """validate a whole flow: errors block execution, warnings do not."""
    return validate_flow(flow)


@router.post("/variables")
def variables(flow: PromptFlow) -> list[FlowVariable]:
    """list the variables the flow needs before it can run."""
    return resolve_variables(flow)


@router.post("/connections/validate")
def validate_connection(request: ConnectionCheckRequest) -> ConnectionResult:
    """check a candidate edge against the flow's existing edges."""
    source = _require_node(request.flow, request.source)
    target = _require_node(request.flow, request.target)
    return ConnectionValidator().validate(
        source,
        target,
        request.flow.edges,
        request.source_handle,
        request.target_handle,
    )


@router.post("/suggestions")
def suggestions(request: SuggestionRequest) -> list[FlowSuggestion]:
    """ranked follow-on node suggestions for one node."""
    node = _require_node(request.flow, request.node_id)
    return SuggestionEngine().suggest(
        node, request.flow.nodes, limit=SUGGESTION_LIMIT if request.limit is None else request.limit
    )


@router.post("/completion")
def completion(flow: PromptFlow) -> list[FlowSuggestion]:
    """output suggestions for every terminal node."""
    return SuggestionEngine().suggest_flow_completion(flow)


@router.post("/bind")
def bind(request: BindRequest) -> BindResponse:
    """validate and coerce execution inputs without running the flow.

    Values for unknown variable names are rejected with a 422.
    """
    emitter = _event_emitter(request.flow.id)
    binder = ExecutionVariableBinder.from_flow(request.flow, emitter=emitter)
    for name, value in request.values.items():
        try:
            binder.set_value(name, value)
        except KeyError:
            raise HTTPException(status_code=422, detail=f"Unknown variable: {name}")

    errors = binder.validate()
    if errors:
        if emitter:
            emitter.emit_inputs_invalid(errors)
        return BindResponse(ok=False, errors=errors)
    return BindResponse(ok=True, values=binder.coerce())
