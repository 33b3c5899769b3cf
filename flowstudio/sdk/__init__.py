"""Client SDK for the flowstudio server."""

from flowstudio.sdk.flow_client import FlowClient, FlowClientError

__all__ = [
    "FlowClient",
    "FlowClientError",
]
