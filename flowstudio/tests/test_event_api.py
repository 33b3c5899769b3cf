"""Tests for event emission and sinks."""

import json

from flowstudio.adapters.event_api import EventEmitter
from flowstudio.adapters.sinks import FileSink, ListSink
from flowstudio.models.flow_event import FlowEventType


class TestEventEmitter:
    """Test id, sequence and payload stamping."""

    def setup_method(self):
        self.sink = ListSink()
        self.emitter = EventEmitter("flow-1", self.sink)

    def test_sequence_is_monotonic(self):
        self.emitter.emit_node(FlowEventType.node_added, "a", "prompt")
        self.emitter.emit_node(FlowEventType.node_added, "b", "output")
        self.emitter.emit(FlowEventType.execution_started)

        assert [e.sequence for e in self.sink.events] == [0, 1, 2]
        assert {e.flow_id for e in self.sink.events} == {"flow-1"}
        assert len({e.event_id for e in self.sink.events}) == 3

    def test_edge_payload_only_carries_given_fields(self):
        added = self.emitter.emit_edge(FlowEventType.edge_added, "a", "b", edge_id="e1")
        rejected = self.emitter.emit_edge(
            FlowEventType.edge_rejected, "b", "b", message="self-loop not permitted."
        )

        assert added.payload == {"source": "a", "target": "b", "edge_id": "e1"}
        assert rejected.payload == {"source": "b", "target": "b", "message": "self-loop not permitted."}

    def test_inputs_invalid_copies_errors(self):
        errors = {"topic": "topic is required"}
        event = self.emitter.emit_inputs_invalid(errors)
        errors.clear()
        assert event.payload["errors"] == {"topic": "topic is required"}

    def test_execution_failed(self):
        event = self.emitter.emit_execution_failed(TimeoutError("provider timed out"))
        assert event.payload == {"error_type": "TimeoutError", "message": "provider timed out"}

    def test_clear(self):
        self.emitter.emit(FlowEventType.execution_completed)
        self.sink.clear()
        assert self.sink.events == []


class TestFileSink:
    """Test JSONL persistence of events."""

    def test_writes_one_json_object_per_line(self, tmp_path):
        path = tmp_path / "events" / "flow_events.jsonl"
        emitter = EventEmitter("flow-1", FileSink(path))
        emitter.emit_node(FlowEventType.node_added, "a", "prompt")
        emitter.emit_inputs_invalid({"topic": "topic is required"})

        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["event_type"] == "node_added"
        assert json.loads(lines[1])["payload"]["errors"] == {"topic": "topic is required"}

    def test_read_back(self, tmp_path):
        sink = FileSink(tmp_path / "flow_events.jsonl")
        assert sink.read() == []

        EventEmitter("flow-1", sink).emit_edge(FlowEventType.edge_added, "a", "b")
        events = sink.read()

        assert len(events) == 1
        assert events[0].event_type == FlowEventType.edge_added
        assert events[0].payload["target"] == "b"

    def test_read_one_flow(self, tmp_path):
        sink = FileSink.for_directory(tmp_path / "events")
        EventEmitter("flow-1", sink).emit_node(FlowEventType.node_added, "a", "prompt")
        EventEmitter("flow-2", sink).emit(FlowEventType.execution_started)
        EventEmitter("flow-1", sink).emit(FlowEventType.execution_completed)

        assert sink.path == tmp_path / "events" / "flow_events.jsonl"
        assert sink.flow_ids() == ["flow-1", "flow-2"]
        assert [e.event_type for e in sink.read("flow-1")] == [
            FlowEventType.node_added,
            FlowEventType.execution_completed,
        ]
        assert len(sink.read()) == 3
        assert sink.read("flow-3") == []


class TestListSink:
    """Test in-memory filtering of a flow's events."""

    def setup_method(self):
        self.sink = ListSink()
        emitter = EventEmitter("flow-1", self.sink)
        emitter.emit_node(FlowEventType.node_added, "p", "prompt")
        emitter.emit_node(FlowEventType.node_added, "o", "output")
        emitter.emit_edge(FlowEventType.edge_added, "p", "o", edge_id="e1")
        emitter.emit_edge(FlowEventType.edge_rejected, "o", "o", message="self-loop not permitted.")
        emitter.emit_node(FlowEventType.node_removed, "p", "prompt")

    def test_len(self):
        assert len(self.sink) == 5

    def test_of_type(self):
        edges = self.sink.of_type(FlowEventType.edge_added, FlowEventType.edge_rejected)
        assert [e.sequence for e in edges] == [2, 3]
        assert self.sink.of_type(FlowEventType.execution_failed) == []

    def test_for_node(self):
        assert [e.event_type for e in self.sink.for_node("p")] == [
            FlowEventType.node_added,
            FlowEventType.node_removed,
        ]

    def test_rejections(self):
        assert self.sink.rejections() == ["self-loop not permitted."]
