# tests/test_maps.py

import pytest
import requests
from services import maps as msvc


class Resp:
    def __init__(self, data):
        self.data = data

    def raise_for_status(self):
        pass

    def json(self):
        return self.data


@pytest.fixture
def no_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)


@pytest.fixture
def with_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "test-key")


def test_mock_places_without_key(no_key):
    places = msvc.search_places("temple", {"lat": 10.0, "lng": 20.0})
    assert [p.place_id for p in places] == ["mock_place_1", "mock_place_2", "mock_place_3"]
    assert places[0].name == "Temple Place 1"
    assert places[0].coordinates.lat == pytest.approx(10.001)


def test_mock_restaurants_without_key(no_key):
    places = msvc.search_restaurants({"lat": 0, "lng": 0}, cuisine="thai")
    assert all(p.types == ["restaurant"] for p in places)


def test_nearby_search_request(monkeypatch, with_key):
    calls = []

    def fake_get(url, params=None, timeout=None, **kwargs):
        calls.append((url, params))
        return Resp({
            "status": "OK",
            "results": [{
                "place_id": "abc",
                "name": "Red Fort",
                "vicinity": "Netaji Subhash Marg",
                "geometry": {"location": {"lat": 28.65, "lng": 77.24}},
                "rating": 4.5,
                "types": ["tourist_attraction"],
                "photos": [{"photo_reference": "ph1"}],
            }],
        })

    monkeypatch.setattr(msvc.requests, "get", fake_get)
    places = msvc.search_nearby_attractions({"lat": 28.6, "lng": 77.2}, radius=2000)

    url, params = calls[0]
    assert url.endswith("/place/nearbysearch/json")
    assert params["location"] == "28.6,77.2"
    assert params["radius"] == 2000
    assert params["type"] == "tourist_attraction"
    assert params["key"] == "test-key"

    place = places[0]
    assert place.place_id == "abc"
    assert place.address == "Netaji Subhash Marg"
    assert place.photos == ["ph1"]
    assert place.to_dict()["coordinates"] == {"lat": 28.65, "lng": 77.24}


def test_google_error_status(monkeypatch, with_key):
    monkeypatch.setattr(msvc.requests, "get",
                        lambda *a, **k: Resp({"status": "REQUEST_DENIED", "error_message": "bad key"}))
    with pytest.raises(RuntimeError, match="Failed to search places"):
        msvc.search_places("cafe")


def test_geocode_with_google(monkeypatch, with_key):
    monkeypatch.setattr(msvc.requests, "get", lambda *a, **k: Resp({
        "status": "OK",
        "results": [{"geometry": {"location": {"lat": 48.85, "lng": 2.35}}}],
    }))
    assert msvc.geocode_address("Paris") == (48.85, 2.35)


def test_geocode_with_nominatim(monkeypatch, no_key):
    seen = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        seen["url"] = url
        seen["headers"] = headers
        return Resp([{"lat": "19.07", "lon": "72.87"}])

    monkeypatch.setattr(msvc.requests, "get", fake_get)
    assert msvc.geocode_address("Mumbai") == (19.07, 72.87)
    assert "nominatim" in seen["url"]
    assert "User-Agent" in seen["headers"]


def test_geocode_no_result(monkeypatch, no_key):
    monkeypatch.setattr(msvc.requests, "get", lambda *a, **k: Resp([]))
    assert msvc.geocode_address("Nowhere") is None


def test_geocode_failure(monkeypatch, no_key):
    def boom(*a, **k):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(msvc.requests, "get", boom)
    with pytest.raises(RuntimeError, match="Failed to geocode address"):
        msvc.geocode_address("Mumbai")
