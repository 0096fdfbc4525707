"""
services/maps.py
----------------
Places search and geocoding through the Google Maps web services.
- Recherche par mot-clé, attractions et restaurants via Places Nearby Search
- Géocodage via Google Geocoding, ou Nominatim (OpenStreetMap) sans clé
- Sans GOOGLE_MAPS_API_KEY, la recherche renvoie des lieux factices
"""

from __future__ import annotations
import os
import logging
from typing import Dict, List, Optional, Tuple

import requests
from core.models import Coordinates, Place

logger = logging.getLogger(__name__)

_BASE = "https://maps.googleapis.com/maps/api"
_NOMINATIM = "https://nominatim.openstreetmap.org/search"


# ──────────────────────────────────────────────────────────────────────────────
# Helpers internes
# ──────────────────────────────────────────────────────────────────────────────
def _key() -> Optional[str]:
    return os.getenv("GOOGLE_MAPS_API_KEY") or None


def _latlng(location: Dict[str, float]) -> str:
    return f"{location['lat']},{location['lng']}"


def _req(endpoint: str, **params) -> dict:
    """
    Appel générique.
    - Ajoute la clé `key`
    - Lève une RuntimeError si Google renvoie un statut d'erreur
    """
    params["key"] = _key()
    r = requests.get(f"{_BASE}/{endpoint}/json", params=params, timeout=10)
    r.raise_for_status()
    data = r.json()
    status = data.get("status", "OK")
    if status not in ("OK", "ZERO_RESULTS"):
        raise RuntimeError(f"Google Maps {status}: {data.get('error_message', '')}")
    return data


def _to_place(item: dict) -> Place:
    loc = item.get("geometry", {}).get("location", {})
    return Place(
        place_id=item.get("place_id", ""),
        name=item.get("name", ""),
        address=item.get("vicinity") or item.get("formatted_address", ""),
        coordinates=Coordinates(lat=loc.get("lat", 0), lng=loc.get("lng", 0)),
        rating=item.get("rating", 0),
        price_level=item.get("price_level"),
        types=item.get("types", []),
        photos=[p.get("photo_reference", "") for p in item.get("photos", [])],
    )


def _mock_places(label: str, location: Optional[Dict[str, float]], kind: str) -> List[Place]:
    center = location or {"lat": 0.0, "lng": 0.0}
    return [
        Place(
            place_id=f"mock_{kind}_{i}",
            name=f"{label.title()} {kind.replace('_', ' ').title()} {i}",
            address=f"{i}00 Main Street",
            coordinates=Coordinates(center["lat"] + i * 0.001, center["lng"] + i * 0.001),
            rating=4.0 + i / 10,
            types=[kind],
        )
        for i in range(1, 4)
    ]


def _nearby(label: str, location: Optional[Dict[str, float]], kind: str, error: str, **params) -> List[Place]:
    if not _key():
        logger.info("GOOGLE_MAPS_API_KEY not set, returning mock %s results", kind)
        return _mock_places(label, location, kind)
    try:
        data = _req("place/nearbysearch",
                    location=_latlng(location or {"lat": 0, "lng": 0}), **params)
    except Exception as exc:
        logger.exception(error)
        raise RuntimeError(error) from exc
    return [_to_place(p) for p in data.get("results", [])]


# ──────────────────────────────────────────────────────────────────────────────
# Fonctions publiques
# ──────────────────────────────────────────────────────────────────────────────
def search_places(query: str,
                  location: Optional[Dict[str, float]] = None,
                  radius: int = 5000) -> List[Place]:
    return _nearby(query, location, "place", "Failed to search places",
                   radius=radius, keyword=query)


def search_nearby_attractions(location: Dict[str, float],
                              radius: int = 10000,
                              type: str = "tourist_attraction") -> List[Place]:
    return _nearby("nearby", location, type, "Failed to search nearby attractions",
                   radius=radius, type=type)


def search_restaurants(location: Dict[str, float],
                       radius: int = 5000,
                       cuisine: Optional[str] = None) -> List[Place]:
    params = {"radius": radius, "type": "restaurant"}
    if cuisine:
        params["keyword"] = cuisine
    return _nearby(cuisine or "local", location, "restaurant", "Failed to search restaurants",
                   **params)


def geocode_address(address: str) -> Optional[Tuple[float, float]]:
    """
    Convertit une adresse en (latitude, longitude).
    Google Geocoding si une clé est configurée, sinon Nominatim.
    """
    try:
        if _key():
            results = _req("geocode", address=address).get("results", [])
            if not results:
                return None
            loc = results[0]["geometry"]["location"]
            return (float(loc["lat"]), float(loc["lng"]))

        # Nominatim exige un User-Agent explicite
        headers = {"User-Agent": "trip-planner/1.0 (contact@example.com)"}
        r = requests.get(_NOMINATIM, params={"q": address, "format": "json", "limit": 1},
                         headers=headers, timeout=10)
        r.raise_for_status()
        results = r.json()
        if not results:
            return None
        return (float(results[0]["lat"]), float(results[0]["lon"]))
    except Exception as exc:
        logger.exception("Error geocoding %s", address)
        raise RuntimeError("Failed to geocode address") from exc
