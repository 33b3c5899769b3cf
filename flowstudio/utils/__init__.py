"""Utility functions for flowstudio."""

from flowstudio.utils.identifiers import (
    CounterIdProvider,
    IdProvider,
    generate_event_id,
    generate_flow_id,
    utc_timestamp,
    uuid_id_provider,
)
from flowstudio.utils.templating import (
    find_placeholders,
    substitute_variables,
)

__all__ = [
    "CounterIdProvider",
    "IdProvider",
    "generate_event_id",
    "generate_flow_id",
    "utc_timestamp",
    "uuid_id_provider",
    "find_placeholders",
    "substitute_variables",
]
