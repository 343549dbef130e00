import pytest
from fastapi.testclient import TestClient

from api.dependencies import (
    get_candidate_provider,
    get_matching_engine,
    get_matching_service,
    get_parse_cache,
    get_request_parser,
)
from api.router import limiter
from main import app
from services.candidates import InMemoryCandidateProvider
from services.matching.engine import MatchingEngine
from services.matching.service import MatchingService
from services.parse_cache import MemoryParseCache
from services.parsing.engine import ParserEngine
from services.parsing.request_parser import RequestParser
from services.parsing.strategy_manager import StrategyManager

client = TestClient(app)

CANDIDATE_RECORDS = [
    {"id": "c1", "Name": "Olga", "Grade": "Senior", "Country": "Russia", "English": "C1", "Java": "High"},
    {"id": "c2", "Name": "Pavel", "Grade": "Junior", "Country": "Belarus", "English": "A2"},
]


class FakeRecognizer:
    ready = True

    def ensure_ready(self):
        pass

    def group(self, text):
        return {"technology": ["Java"], "skill": ["SQL"]}


@pytest.fixture(autouse=True)
def overrides():
    cache = MemoryParseCache(max_entries=10)
    parser = RequestParser(ParserEngine(StrategyManager(FakeRecognizer())), cache)
    provider = InMemoryCandidateProvider(CANDIDATE_RECORDS)
    engine = MatchingEngine()

    app.dependency_overrides[get_parse_cache] = lambda: cache
    app.dependency_overrides[get_request_parser] = lambda: parser
    app.dependency_overrides[get_candidate_provider] = lambda: provider
    app.dependency_overrides[get_matching_engine] = lambda: engine
    app.dependency_overrides[get_matching_service] = lambda: MatchingService(parser, provider, engine)
    limiter.enabled = False
    yield cache
    app.dependency_overrides.clear()
    limiter.enabled = True


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["strategies"] == ["standard", "flexible", "hybrid", "nlp"]
    assert data["default_strategy"] == "standard"
    assert data["cache_enabled"] is True
    assert data["candidate_count"] == 2


def test_parse(sample_request):
    response = client.post("/parse", json={"text": sample_request})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["strategy_name"] == "standard"
    assert data["data"]["id"] == "R-12345"
    assert data["data"]["levels"] == ["Senior+", "Lead"]
    assert data["data"]["deadline"] == "2025-03-15"
    assert data["data"]["skills"]["required"] == ["Java"]


def test_parse_with_strategy(sample_request):
    response = client.post("/parse", json={"text": sample_request, "strategy": "flexible"})
    assert response.json()["strategy_name"] == "flexible"


def test_parse_unknown_strategy_is_a_failed_result():
    response = client.post("/parse", json={"text": "hello", "strategy": "standrd"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert 'did you mean "standard"' in data["error"]


def test_parse_rejects_empty_text():
    response = client.post("/parse", json={"text": ""})
    assert response.status_code == 422


def test_match_inline_candidates():
    response = client.post("/match", json={
        "requirements": {"levels": ["Senior"]},
        "candidates": [{"id": "x1", "Grade": "Senior"}, {"id": "x2", "Grade": "Intern"}],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["total_candidates"] == 2
    assert data["matches"][0]["candidate_summary"]["id"] == "x1"
    assert data["matches"][0]["breakdown"]["level"]["score"] == 25


@pytest.mark.parametrize("record", [
    {"id": "x1", "skills": "Java"},
    {"id": "x1", "languages": 5},
    "x1",
])
def test_match_rejects_malformed_candidate(record):
    response = client.post("/match", json={"requirements": {}, "candidates": [record]})
    assert response.status_code == 422


def test_match_directory_candidates():
    response = client.post("/match", json={
        "requirements": {"language_requirements": [{"language": "English", "level": "B2"}]},
        "max_results": 1,
    })
    data = response.json()
    assert data["total_candidates"] == 2
    assert len(data["matches"]) == 1
    assert data["matches"][0]["candidate_summary"]["id"] == "c1"


def test_match_rejects_large_max_results():
    response = client.post("/match", json={"requirements": {}, "max_results": 101})
    assert response.status_code == 422


def test_match_request(sample_request):
    response = client.post("/match/request", json={"text": sample_request})
    assert response.status_code == 200
    data = response.json()
    assert data["error"] is None
    assert data["matches"][0]["candidate_summary"]["id"] == "c1"


def test_cache_stats_and_clear(overrides, sample_request):
    client.post("/parse", json={"text": sample_request})
    stats = client.get("/cache/stats").json()
    assert stats["enabled"] is True
    assert stats["stats"]["writes"] == 1

    cleared = client.delete("/cache").json()
    assert cleared["stats"]["entries"] == 0
    assert len(overrides) == 0


def test_cache_disabled():
    app.dependency_overrides[get_parse_cache] = lambda: None
    response = client.get("/cache/stats")
    assert response.json() == {"enabled": False, "stats": {}}
