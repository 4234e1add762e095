import pytest
from fastapi.testclient import TestClient

from trustlens_agent.errors import CredentialMissing, NetworkFailure, Unauthorized
from trustlens_agent.main import app, get_orchestrator
from trustlens_agent.orchestrator import AnalysisOrchestrator


@pytest.fixture
def client_for(fake_engine_factory):
    def _make(**engine_kwargs):
        orchestrator = AnalysisOrchestrator(fake_engine_factory(**engine_kwargs))
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def test_healthz(client_for):
    assert client_for().get("/healthz").json() == {"ok": True}


def test_tiers_listed_highest_first(client_for):
    tiers = client_for().get("/tiers").json()
    assert [t["range_label"] for t in tiers] == ["95–100", "90–94", "85–89", "80–84", "50–79", "0–49"]


def test_analyze_returns_result_with_tier(client_for):
    client = client_for(text='{"trust_score": 82, "verdict": "Suspicious", "reasons": ["New seller"]}')

    res = client.post("/analyze", json={"url": "shop.example.com/item"})

    assert res.status_code == 200
    data = res.json()
    assert data["trust_score"] == 82
    assert data["url"] == "https://shop.example.com/item"
    assert data["reasons"] == ["New seller"]
    assert set(data["breakdown"]) == {"reviews", "sentiment", "price", "seller", "description"}
    assert data["tier"]["label"] == "Risky (Warning)"


def test_analyze_hides_recoverable_failures(client_for):
    res = client_for(error=NetworkFailure("down")).post("/analyze", json={"url": "amazon.com/x"})
    assert res.status_code == 200
    assert res.json()["verdict"] == "Genuine"


@pytest.mark.parametrize(
    "payload, engine_kwargs, status",
    [
        ({"url": "localhost"}, {"text": "{}"}, 400),
        ({"url": "amazon.com/x"}, {"error": CredentialMissing()}, 503),
        ({"url": "amazon.com/x"}, {"error": Unauthorized()}, 502),
        ({"url": ""}, {"text": "{}"}, 422),
    ],
)
def test_analyze_error_statuses(client_for, payload, engine_kwargs, status):
    res = client_for(**engine_kwargs).post("/analyze", json=payload)
    assert res.status_code == status
