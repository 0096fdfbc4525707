# tests/test_api.py

import datetime
import pytest
from fastapi.testclient import TestClient

import main
from ai import gemini
from core.models import Budget, TripPreferences

client = TestClient(main.app)

PREFS = {
    "location": "Delhi",
    "duration": 3,
    "budget": {"min": 5000, "max": 20000, "currency": "INR"},
    "interests": ["culture"],
    "travelStyle": "cultural",
    "groupSize": 2,
    "accommodationType": "hotel",
    "transportation": "public",
}


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    for var in ("GEMINI_API_KEY", "GOOGLE_MAPS_API_KEY", "OPENWEATHER_API_KEY", "GOOGLE_SERVICE_ACCOUNT_FILE"):
        monkeypatch.delenv(var, raising=False)


def _mock_itinerary_dict():
    prefs = TripPreferences("Delhi", 2, Budget(1000, 5000), start_date=datetime.date(2024, 5, 1))
    return gemini.generate_mock_itinerary(prefs).to_dict()


def test_health():
    assert client.get("/").json()["status"] == "ok"


# ──────────────────────────────────────────────────────────────────────────────
# /api/generate-itinerary
# ──────────────────────────────────────────────────────────────────────────────
def test_generate_success():
    r = client.post("/api/generate-itinerary", json={"preferences": PREFS})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert len(body["itinerary"]["days"]) == 3
    assert body["itinerary"]["totalBudget"] == 20000
    assert body["itinerary"]["days"][0]["transportation"]["mode"] == "Metro/Bus"


@pytest.mark.parametrize("missing", ["location", "duration", "budget"])
def test_generate_missing_fields(missing):
    prefs = {k: v for k, v in PREFS.items() if k != missing}
    r = client.post("/api/generate-itinerary", json={"preferences": prefs})
    assert r.status_code == 400
    assert r.json()["detail"] == "Missing required fields: location, duration, and budget are required"


def test_generate_budget_order():
    prefs = dict(PREFS, budget={"min": 20000, "max": 20000})
    r = client.post("/api/generate-itinerary", json={"preferences": prefs})
    assert r.status_code == 400
    assert r.json()["detail"] == "Minimum budget must be less than maximum budget"


def test_generate_duration_range():
    r = client.post("/api/generate-itinerary", json={"preferences": dict(PREFS, duration=31)})
    assert r.status_code == 400
    assert r.json()["detail"] == "Duration must be between 1 and 30 days"


def test_generate_bad_enum_is_400():
    r = client.post("/api/generate-itinerary", json={"preferences": dict(PREFS, travelStyle="space")})
    assert r.status_code == 400


def test_generate_group_size_limit():
    r = client.post("/api/generate-itinerary", json={"preferences": dict(PREFS, groupSize=21)})
    assert r.status_code == 400


def test_generate_service_error_is_500(monkeypatch):
    def boom(prefs):
        raise RuntimeError("model exploded")

    monkeypatch.setattr(gemini, "generate_itinerary", boom)
    r = client.post("/api/generate-itinerary", json={"preferences": PREFS})
    assert r.status_code == 500
    assert r.json()["detail"] == "model exploded"


def test_generate_get_not_allowed():
    assert client.get("/api/generate-itinerary").status_code == 405


# ──────────────────────────────────────────────────────────────────────────────
# /api/optimize-itinerary
# ──────────────────────────────────────────────────────────────────────────────
def test_optimize_requires_itinerary():
    r = client.post("/api/optimize-itinerary", json={"conditions": {"weather": "rain"}})
    assert r.status_code == 400
    assert r.json()["detail"] == "Itinerary is required"


def test_optimize_requires_conditions():
    r = client.post("/api/optimize-itinerary", json={"itinerary": _mock_itinerary_dict()})
    assert r.status_code == 400
    assert r.json()["detail"] == "Conditions are required"


def test_optimize_invalid_structure():
    r = client.post("/api/optimize-itinerary",
                    json={"itinerary": {"id": "x", "days": "nope"}, "conditions": {"weather": "rain"}})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid itinerary structure"


def test_optimize_without_model_echoes_itinerary():
    itin = _mock_itinerary_dict()
    r = client.post("/api/optimize-itinerary", json={"itinerary": itin, "conditions": {"weather": "rain"}})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["itinerary"]["id"] == itin["id"]
    assert len(body["itinerary"]["days"]) == 2


def test_optimize_accepts_empty_conditions():
    itin = _mock_itinerary_dict()
    r = client.post("/api/optimize-itinerary", json={"itinerary": itin, "conditions": {}})
    assert r.status_code == 200
    assert r.json()["itinerary"]["id"] == itin["id"]


def test_optimize_rejects_non_object_days():
    r = client.post("/api/optimize-itinerary",
                    json={"itinerary": {"id": "x", "days": [None]}, "conditions": {}})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid itinerary structure"


def test_optimize_single_event_string(monkeypatch):
    seen = {}

    def fake_optimize(itinerary, conditions):
        seen["events"] = conditions.events
        return itinerary

    monkeypatch.setattr(gemini, "optimize_itinerary", fake_optimize)
    r = client.post("/api/optimize-itinerary",
                    json={"itinerary": _mock_itinerary_dict(), "conditions": {"events": "Holi"}})
    assert r.status_code == 200
    assert seen["events"] == ["Holi"]


def test_optimize_get_not_allowed():
    assert client.get("/api/optimize-itinerary").status_code == 405


# ──────────────────────────────────────────────────────────────────────────────
# /api/places/search
# ──────────────────────────────────────────────────────────────────────────────
def test_places_requires_query():
    r = client.get("/api/places/search")
    assert r.status_code == 400
    assert r.json()["detail"] == 'Query parameter "q" is required'


@pytest.mark.parametrize("lat", ["abc", "nan", "inf"])
def test_places_bad_coordinates(lat):
    r = client.get("/api/places/search", params={"q": "cafe", "lat": lat, "lng": "77"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid latitude or longitude values"


@pytest.mark.parametrize("radius", ["-5", "far"])
def test_places_bad_radius(radius):
    r = client.get("/api/places/search", params={"q": "cafe", "radius": radius})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid radius value"


def test_places_default_search():
    r = client.get("/api/places/search", params={"q": "cafe", "lat": "28.6", "lng": "77.2"})
    assert r.status_code == 200
    body = r.json()
    assert body["radius"] == 5000
    assert body["location"] == {"lat": 28.6, "lng": 77.2}
    assert body["type"] is None
    assert len(body["places"]) == 3


def test_places_restaurant_without_location():
    r = client.get("/api/places/search", params={"q": "thai", "type": "restaurant", "radius": "1000"})
    assert r.status_code == 200
    body = r.json()
    assert body["location"] is None
    assert body["radius"] == 1000
    assert all(p["types"] == ["restaurant"] for p in body["places"])


def test_places_post_not_allowed():
    assert client.post("/api/places/search").status_code == 405


# ──────────────────────────────────────────────────────────────────────────────
# Weather, events, export
# ──────────────────────────────────────────────────────────────────────────────
def test_weather_with_activity():
    r = client.get("/api/weather", params={"location": "Delhi", "activity": "outdoor"})
    assert r.status_code == 200
    body = r.json()
    assert body["weather"]["temperature"] == 25
    assert body["analysis"]["suitable"] is True
    assert "High UV index - use sunscreen and seek shade" not in body["recommendations"]


def test_weather_forecast_days():
    r = client.get("/api/weather", params={"location": "Delhi", "days": 4})
    assert len(r.json()["weather"]["forecast"]) == 4


def test_events_search_free():
    today = datetime.date.today()
    r = client.get("/api/events", params={
        "location": "Delhi",
        "startDate": today.isoformat(),
        "endDate": (today + datetime.timedelta(days=7)).isoformat(),
        "maxPrice": 0,
    })
    assert r.status_code == 200
    assert [e["id"] for e in r.json()["events"]] == ["event_3"]


def test_events_recommendations():
    today = datetime.date.today()
    r = client.get("/api/events/recommendations", params={
        "location": "Delhi",
        "interests": "food, wine",
        "startDate": today.isoformat(),
        "endDate": (today + datetime.timedelta(days=7)).isoformat(),
    })
    assert [e["id"] for e in r.json()["events"]][0] == "event_2"


def test_events_missing_dates_is_400():
    assert client.get("/api/events", params={"location": "Delhi"}).status_code == 400


def test_export_returns_workbook():
    r = client.post("/api/export-itinerary", json={"itinerary": _mock_itinerary_dict()})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
    assert r.content[:2] == b"PK"


def test_export_requires_itinerary():
    r = client.post("/api/export-itinerary", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "Itinerary is required"


def test_share_without_smtp_is_500(monkeypatch):
    for var in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS"):
        monkeypatch.delenv(var, raising=False)
    r = client.post("/api/share-itinerary",
                    json={"itinerary": _mock_itinerary_dict(), "email": "a@example.com"})
    assert r.status_code == 500
    assert r.json()["detail"] == "SMTP settings are not configured"
