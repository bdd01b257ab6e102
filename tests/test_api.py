"""
Tests: FastAPI endpoints.

Run with:
    pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from backend.main import create_app
from models.matchmaker import SemanticSearchEngine


@pytest.fixture
def client(catalogue, stub_embedder):
    engine = SemanticSearchEngine(stub_embedder, threshold=0.75, max_workers=2)
    return TestClient(create_app(catalogue=catalogue, engine=engine))


class TestCatalogueEndpoints:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["standards_loaded"] == 3
        assert body["requirements_loaded"] == 5

    def test_list_requirements(self, client):
        resp = client.get("/api/requirements")
        assert resp.status_code == 200
        assert [r["reference_id"] for r in resp.json()][:2] == ["SEC-001", "PRV-002"]

    def test_list_standards(self, client):
        resp = client.get("/api/requirements/standards")
        assert [s["id"] for s in resp.json()] == ["SEC", "PRV", "SECX"]

    def test_get_requirement(self, client):
        resp = client.get("/api/requirements/PRV-002")
        assert resp.status_code == 200
        assert resp.json()["category"] == "Access"

    def test_get_requirement_missing(self, client):
        resp = client.get("/api/requirements/NOPE")
        assert resp.status_code == 404
        assert "NOPE" in resp.json()["detail"]

    def test_get_standard(self, client):
        assert client.get("/api/requirements/standards/PRV").json()["ref_id"] == "GDPR-32"

    def test_get_standard_missing(self, client):
        assert client.get("/api/requirements/standards/NOPE").status_code == 404


class TestSearchEndpoint:
    def test_ranked_results(self, client):
        resp = client.get("/api/requirements/search", params={"query": "Encrypt data at rest"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total_matches"] == 2
        assert [r["reference_id"] for r in body["results"]] == ["SEC-001", "PRV-005"]

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_is_bad_request(self, client, query):
        resp = client.get("/api/requirements/search", params={"query": query})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Query cannot be empty."

    def test_missing_query_is_bad_request(self, client):
        assert client.get("/api/requirements/search").status_code == 400

    def test_no_match_is_not_found(self, client):
        resp = client.get("/api/requirements/search", params={"query": "quantum teleportation"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "No matching requirements found."

    def test_embedder_failure_is_server_error(self, catalogue):
        class BrokenEmbedder:
            def embed(self, normalized_text):
                raise RuntimeError("model not loaded")

        engine = SemanticSearchEngine(BrokenEmbedder(), threshold=0.75, max_workers=1)
        client = TestClient(create_app(catalogue=catalogue, engine=engine))
        resp = client.get("/api/requirements/search", params={"query": "anything"})
        assert resp.status_code == 500
        assert "model not loaded" in resp.json()["detail"]


class TestTrainingSetEndpoint:
    def test_default_sample(self, client):
        resp = client.post("/api/requirements/training-set", json={})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total_records"] == 4
        assert body["unmatched"] == 1
        assert body["label_map"] == {"ISO-27001": 1, "GDPR-32": 2}

    def test_sample_size(self, client):
        body = client.post("/api/requirements/training-set", json={"sample_size": 1}).json()
        assert body["total_records"] == 1
        assert body["label_map"] == {"ISO-27001": 1}

    def test_negative_sample_size_rejected(self, client):
        resp = client.post("/api/requirements/training-set", json={"sample_size": -3})
        assert resp.status_code == 422
