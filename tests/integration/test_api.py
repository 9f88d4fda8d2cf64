"""
API integration tests.

Drives the FastAPI app through TestClient with the pipeline dependency
replaced by one whose scanner reads in-process fetchers.
"""

import inspect

import pytest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

import app as app_module
from app import app, get_pipeline
from src.config import ScannerSettings
from src.pipeline.prospect_pipeline import ProspectPipeline
from src.scanners.network_scanner import NetworkScanner


LINKEDIN_URL = "https://linkedin.com/in/anasouza"
UNKNOWN_ID = "6f1c0d4e-0000-4000-8000-000000000000"


def recent_records():
    now = datetime.now(timezone.utc)
    texts = [
        "Today we announce our new ERP rollout. Great success!",
        "Our manual invoicing is slow, a real problem.",
        "Looking for a quote on cloud migration",
    ]
    return [
        {
            "id": f"li-{i}",
            "postedAt": (now - timedelta(days=i + 1)).isoformat(),
            "text": text,
            "link": f"https://linkedin.com/posts/anasouza_{i}",
        }
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def client():
    records = recent_records()

    async def fetch(url):
        return list(records)

    scanner = NetworkScanner(
        settings=ScannerSettings(rate_limit_per_second=100),
        fetchers={"linkedin": fetch},
    )
    pipeline = ProspectPipeline(scanner=scanner)

    app.dependency_overrides[get_pipeline] = lambda: pipeline
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def resolve(client, **payload):
    body = {"name": "Ana Souza", "linkedin_url": LINKEDIN_URL}
    body.update(payload)
    return client.post("/identity/resolve", json=body)


# =============================================================================
# Health Tests
# =============================================================================

class TestHealth:
    """Tests for health endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_alias(self, client):
        assert client.get("/health").json()["service"] == "prospect-persona-intel"


# =============================================================================
# Identity Endpoint Tests
# =============================================================================

class TestResolveEndpoint:
    """Tests for POST /identity/resolve."""

    def test_resolve(self, client):
        response = resolve(client)
        body = response.json()

        assert response.status_code == 200
        assert body["summary"]["confirmed"] == 1
        assert body["summary"]["total"] == 6
        assert body["person"]["name"] == "Ana Souza"

    def test_missing_name_is_400(self, client):
        response = client.post("/identity/resolve", json={"company": "Acme"})

        assert response.status_code == 400
        assert "Name is required" in response.json()["detail"]

    def test_bad_url_is_400(self, client):
        response = resolve(client, linkedin_url="not a url")
        assert response.status_code == 400

    def test_unknown_person_id_is_404(self, client):
        response = resolve(client, person_id=UNKNOWN_ID)
        assert response.status_code == 404


# =============================================================================
# Persona Endpoint Tests
# =============================================================================

class TestAnalyzeEndpoint:
    """Tests for POST /persona/analyze."""

    def test_analyze(self, client):
        person_id = resolve(client).json()["person"]["person_id"]

        response = client.post("/persona/analyze", json={"person_id": person_id})
        body = response.json()

        assert response.status_code == 200
        assert body["stats"]["total_posts"] == 3
        assert "ERP" in body["persona"]["topics"]
        assert body["persona"]["channel_preference"] == ["linkedin"]

    def test_missing_person_id_is_400(self, client):
        response = client.post("/persona/analyze", json={})
        assert response.status_code == 400

    def test_invalid_window_is_400(self, client):
        person_id = resolve(client).json()["person"]["person_id"]
        response = client.post(
            "/persona/analyze", json={"person_id": person_id, "window_months": 0}
        )
        assert response.status_code == 400

    def test_no_confirmed_profiles_is_409(self, client):
        person_id = client.post(
            "/identity/resolve", json={"name": "Ana Souza"}
        ).json()["person"]["person_id"]

        response = client.post("/persona/analyze", json={"person_id": person_id})

        assert response.status_code == 409
        assert response.json()["detail"]["precondition"] == "confirmed_profiles_exist"


# =============================================================================
# Playbook Endpoint Tests
# =============================================================================

class TestPlaybookEndpoint:
    """Tests for POST /playbook/generate."""

    def test_generate(self, client):
        person_id = resolve(client).json()["person"]["person_id"]
        client.post("/persona/analyze", json={"person_id": person_id})

        response = client.post(
            "/playbook/generate", json={"person_id": person_id, "vendor": "olv"}
        )
        playbook = response.json()["playbook"]

        assert response.status_code == 200
        assert playbook["vendor"] == "OLV"
        assert playbook["opening"].startswith("Ana, ")
        assert playbook["service_packages"][0] == "360° Diagnostic + Implementation Roadmap"

    def test_without_persona_is_409(self, client):
        person_id = resolve(client).json()["person"]["person_id"]

        response = client.post("/playbook/generate", json={"person_id": person_id})

        assert response.status_code == 409
        assert response.json()["detail"]["precondition"] == "persona_exists"

    def test_unknown_person_is_404(self, client):
        response = client.post("/playbook/generate", json={"person_id": UNKNOWN_ID})
        assert response.status_code == 404

    def test_blank_vendor_is_400(self, client):
        person_id = resolve(client).json()["person"]["person_id"]
        client.post("/persona/analyze", json={"person_id": person_id})

        response = client.post(
            "/playbook/generate", json={"person_id": person_id, "vendor": "  "}
        )
        assert response.status_code == 400


# =============================================================================
# Handler Tests
# =============================================================================

class TestHandlerKinds:
    """Store-bound handlers run in FastAPI's threadpool, not on the event loop."""

    @pytest.mark.parametrize("handler", ["resolve_identity", "generate_playbook"])
    def test_blocking_handlers_are_sync(self, handler):
        assert not inspect.iscoroutinefunction(getattr(app_module, handler))

    def test_analyze_is_async(self):
        assert inspect.iscoroutinefunction(app_module.analyze_persona)
