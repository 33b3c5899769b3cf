"""Tests for the flow API routes."""

import pytest
from fastapi.testclient import TestClient

from server import flow_routes
from server.app import app


def _topics_flow() -> dict:
    return {
        "id": "flow-1",
        "name": "Topic digest",
        "nodes": [
            {
                "id": "topics",
                "type": "variable",
                "position": {"x": 0, "y": 0},
                "data": {"name": "topics", "type": "string", "defaultValue": "a,b,c"},
            },
            {
                "id": "count",
                "type": "variable",
                "position": {"x": 0, "y": 100},
                "data": {"name": "count", "type": "number"},
            },
            {
                "id": "summarize",
                "type": "prompt",
                "position": {"x": 250, "y": 0},
                "data": {"label": "Summarize", "content": "Give {{count}} points on {{topics}} for {{audience}}"},
            },
        ],
        "edges": [
            {"id": "e1", "source": "topics", "target": "summarize"},
            {"id": "e2", "source": "count", "target": "summarize"},
        ],
    }


@pytest.fixture
def client():
    return TestClient(app)


class TestAnalysisRoutes:
    def test_health(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_validate(self, client):
        response = client.post("/api/flows/validate", json=_topics_flow())
        body = response.json()

        assert response.status_code == 200
        assert body["isValid"] is True
        assert body["executionOrder"] == ["topics", "count", "summarize"]
        messages = [w["message"] for w in body["warnings"]]
        assert "Flow has no output node" in messages

    def test_variables(self, client):
        response = client.post("/api/flows/variables", json=_topics_flow())
        body = response.json()

        assert [v["name"] for v in body] == ["topics", "count", "audience"]
        assert body[0]["defaultValue"] == "a,b,c"
        assert body[0]["required"] is False
        assert body[2]["provenance"] == "template_placeholder"

    def test_malformed_flow_is_422(self, client):
        flow = _topics_flow()
        flow["edges"].append({"id": "e3", "source": "summarize", "target": "ghost"})
        assert client.post("/api/flows/validate", json=flow).status_code == 422


class TestConnectionRoute:
    def test_self_loop_rejected(self, client):
        response = client.post(
            "/api/flows/connections/validate",
            json={"flow": _topics_flow(), "source": "summarize", "target": "summarize"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "valid": False,
            "message": "self-loop not permitted.",
            "suggestion": None,
        }

    def test_cycle_rejected(self, client):
        """summarize -> topics would close topics -> summarize."""
        response = client.post(
            "/api/flows/connections/validate",
            json={"flow": _topics_flow(), "source": "summarize", "target": "topics"},
        )
        body = response.json()
        assert body["valid"] is False
        assert body["message"] == "This connection would create a circular dependency"

    def test_advisory(self, client):
        response = client.post(
            "/api/flows/connections/validate",
            json={"flow": _topics_flow(), "source": "topics", "target": "summarize"},
        )
        body = response.json()
        assert body["valid"] is True
        assert body["suggestion"] == "Use variable as input to customize the prompt"

    def test_unknown_node_is_404(self, client):
        response = client.post(
            "/api/flows/connections/validate",
            json={"flow": _topics_flow(), "source": "topics", "target": "ghost"},
        )
        assert response.status_code == 404
        assert "ghost" in response.json()["detail"]


class TestSuggestionRoutes:
    def test_topics_scenario(self, client):
        response = client.post(
            "/api/flows/suggestions",
            json={"flow": _topics_flow(), "nodeId": "topics"},
        )
        body = response.json()

        assert response.status_code == 200
        assert body[0]["nodeType"] == "for_each"
        assert body[0]["priority"] == 95
        assert body[0]["autoConnect"] is True

    def test_limit(self, client):
        response = client.post(
            "/api/flows/suggestions",
            json={"flow": _topics_flow(), "nodeId": "topics", "limit": 1},
        )
        assert len(response.json()) == 1

    def test_zero_limit(self, client):
        response = client.post(
            "/api/flows/suggestions",
            json={"flow": _topics_flow(), "nodeId": "topics", "limit": 0},
        )
        assert response.status_code == 200
        assert response.json() == []

    def test_negative_limit_is_422(self, client):
        response = client.post(
            "/api/flows/suggestions",
            json={"flow": _topics_flow(), "nodeId": "topics", "limit": -1},
        )
        assert response.status_code == 422

    def test_unknown_node_is_404(self, client):
        response = client.post(
            "/api/flows/suggestions",
            json={"flow": _topics_flow(), "nodeId": "ghost"},
        )
        assert response.status_code == 404

    def test_completion(self, client):
        body = client.post("/api/flows/completion", json=_topics_flow()).json()
        assert [s["sourceNodeId"] for s in body] == ["summarize"]
        assert body[0]["nodeType"] == "output"


class TestBindRoute:
    def test_reports_every_error(self, client):
        response = client.post(
            "/api/flows/bind",
            json={"flow": _topics_flow(), "values": {"count": "many"}},
        )
        body = response.json()

        assert response.status_code == 200
        assert body["ok"] is False
        assert body["errors"] == {
            "count": "count must be a valid number",
            "audience": "audience is required",
        }
        assert body["values"] is None

    def test_coerces_values(self, client):
        response = client.post(
            "/api/flows/bind",
            json={"flow": _topics_flow(), "values": {"count": "3", "audience": "students"}},
        )
        body = response.json()

        assert body["ok"] is True
        assert body["values"] == {"topics": "a,b,c", "count": 3, "audience": "students"}

    def test_unknown_variable_is_422(self, client):
        response = client.post(
            "/api/flows/bind",
            json={"flow": _topics_flow(), "values": {"nope": 1}},
        )
        assert response.status_code == 422

    def test_writes_events_when_configured(self, client, tmp_path, monkeypatch):
        monkeypatch.setattr(flow_routes, "FLOW_EVENTS_DIR", str(tmp_path))
        client.post("/api/flows/bind", json={"flow": _topics_flow(), "values": {}})

        lines = (tmp_path / "flow_events.jsonl").read_text().splitlines()
        assert len(lines) == 1
        assert '"inputs_invalid"' in lines[0]
