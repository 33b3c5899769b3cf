"""Adapters for emitting and storing flow events."""

from flowstudio.adapters.event_api import EventEmitter
from flowstudio.adapters.sinks import EventSink, FileSink, ListSink

__all__ = [
    "EventEmitter",
    "EventSink",
    "FileSink",
    "ListSink",
]
