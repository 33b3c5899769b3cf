"""Client SDK for the flow analysis API.

lets agent code or scripts validate a flow they built locally with one call
result = FlowClient().validate(flow)
"""

from __future__ import annotations

from typing import Any

import httpx

from flowstudio.models.flow_variable import FlowVariable
from flowstudio.models.prompt_flow import PromptFlow
from flowstudio.models.suggestion import ConnectionResult, FlowSuggestion
from flowstudio.models.validation import FlowValidationResult


class FlowClientError(Exception):
    """Exception raised when a flow API call fails."""
    pass


class FlowClient:
    """Call the stateless flow endpoints of a flowstudio server."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Base URL of the flowstudio server
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _post(self, path: str, body: dict[str, Any]) -> Any:
        url = f"{self.base_url}/api/flows{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(url, json=body)

                if response.status_code == 404:
                    raise FlowClientError(f"Not found ({path}): {response.text}")

                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            raise FlowClientError(
                f"Server rejected {path} with status {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.RequestError as e:
            raise FlowClientError(
                f"Failed to connect to server at {self.base_url}: {e}"
            ) from e

    def validate(self, flow: PromptFlow) -> FlowValidationResult:
        data = self._post("/validate", flow.to_dict())
        return FlowValidationResult.model_validate(data)

    def variables(self, flow: PromptFlow) -> list[FlowVariable]:
        data = self._post("/variables", flow.to_dict())
        return [FlowVariable.model_validate(item) for item in data]

    def validate_connection(
        self,
        flow: PromptFlow,
        source: str,
        target: str,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> ConnectionResult:
        """Check a candidate edge between two nodes of ``flow``.

        Raises:
            FlowClientError: if either node is unknown or the server is unreachable.
        """
        body = {
            "flow": flow.to_dict(),
            "source": source,
            "target": target,
            "sourceHandle": source_handle,
            "targetHandle": target_handle,
        }
        return ConnectionResult.model_validate(self._post("/connections/validate", body))

    def suggestions(self, flow: PromptFlow, node_id: str, limit: int | None = None) -> list[FlowSuggestion]:
        body = {"flow": flow.to_dict(), "nodeId": node_id, "limit": limit}
        return [FlowSuggestion.model_validate(item) for item in self._post("/suggestions", body)]

    def completion(self, flow: PromptFlow) -> list[FlowSuggestion]:
        return [FlowSuggestion.model_validate(item) for item in self._post("/completion", flow.to_dict())]

    def bind(self, flow: PromptFlow, values: dict[str, Any]) -> dict[str, Any]:
        """Validate and coerce input values on the server.

        Returns:
            ``{"ok": bool, "errors": {...}, "values": {...} | None}``
        """
        return self._post("/bind", {"flow": flow.to_dict(), "values": values})
