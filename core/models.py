# core/models.py

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

CURRENCIES = ("INR", "USD", "EUR")
TRAVEL_STYLES = ("budget", "luxury", "adventure", "cultural", "wellness")
ACCOMMODATION_TYPES = ("hotel", "hostel", "homestay", "resort")
TRANSPORT_MODES = ("public", "private", "mixed")
ACTIVITY_CATEGORIES = ("sightseeing", "adventure", "cultural", "food", "shopping", "entertainment")
TIME_SLOTS = ("morning", "afternoon", "evening", "night")
EVENT_CATEGORIES = ("festival", "concert", "exhibition", "sports", "cultural", "food", "other")


def _num(value: Any, default: float = 0) -> float:
    try:
        return float(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def _iso(value: Optional[dt.date]) -> str:
    return value.isoformat() if value else ""


def _date(value: Any) -> Optional[dt.date]:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and value:
        try:
            return dt.date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _datetime(value: Any) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return dt.datetime.now(dt.timezone.utc)


# ──────────────────────────────────────────────────────────────────────────────
# Trip preferences (input to generation)
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class Budget:
    min: float
    max: float
    currency: str = "INR"


@dataclass
class TripPreferences:
    location: str
    duration: int
    budget: Budget
    interests: List[str] = field(default_factory=list)
    travel_style: str = "budget"
    group_size: int = 1
    accommodation_type: str = "hotel"
    transportation: str = "mixed"
    start_date: Optional[dt.date] = None

    @property
    def start(self) -> dt.date:
        return self.start_date or dt.date.today()

    @property
    def end(self) -> dt.date:
        return self.start + dt.timedelta(days=self.duration)


# ──────────────────────────────────────────────────────────────────────────────
# Itinerary
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class Coordinates:
    lat: float = 0.0
    lng: float = 0.0

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "Coordinates":
        d = d or {}
        return cls(lat=_num(d.get("lat")), lng=_num(d.get("lng")))


@dataclass
class Activity:
    id: str
    name: str
    description: str = ""
    category: str = "sightseeing"
    duration: float = 0
    cost: float = 0
    location_name: str = ""
    coordinates: Coordinates = field(default_factory=Coordinates)
    rating: float = 0
    booking_required: bool = False
    time_slot: str = "morning"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "duration": self.duration,
            "cost": self.cost,
            "location": {"name": self.location_name, "coordinates": self.coordinates.to_dict()},
            "rating": self.rating,
            "bookingRequired": self.booking_required,
            "timeSlot": self.time_slot,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Activity":
        loc = d.get("location") or {}
        if isinstance(loc, str):
            loc = {"name": loc}
        return cls(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            description=d.get("description", ""),
            category=d.get("category", "sightseeing"),
            duration=_num(d.get("duration")),
            cost=_num(d.get("cost")),
            location_name=loc.get("name", ""),
            coordinates=Coordinates.from_dict(loc.get("coordinates")),
            rating=_num(d.get("rating")),
            booking_required=bool(d.get("bookingRequired", False)),
            time_slot=d.get("timeSlot", "morning"),
        )


@dataclass
class Meal:
    name: str = ""
    cost: float = 0
    location: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "cost": self.cost, "location": self.location}

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "Meal":
        d = d or {}
        return cls(name=d.get("name", ""), cost=_num(d.get("cost")), location=d.get("location", ""))


@dataclass
class Transportation:
    mode: str = ""
    cost: float = 0
    duration: float = 0

    def to_dict(self) -> dict:
        return {"mode": self.mode, "cost": self.cost, "duration": self.duration}

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "Transportation":
        d = d or {}
        return cls(mode=d.get("mode", ""), cost=_num(d.get("cost")), duration=_num(d.get("duration")))


@dataclass
class DayItinerary:
    day: int
    date: Optional[dt.date]
    activities: List[Activity] = field(default_factory=list)
    total_cost: float = 0
    total_duration: float = 0
    transportation: Transportation = field(default_factory=Transportation)
    breakfast: Meal = field(default_factory=Meal)
    lunch: Meal = field(default_factory=Meal)
    dinner: Meal = field(default_factory=Meal)

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "date": _iso(self.date),
            "activities": [a.to_dict() for a in self.activities],
            "totalCost": self.total_cost,
            "totalDuration": self.total_duration,
            "transportation": self.transportation.to_dict(),
            "meals": {
                "breakfast": self.breakfast.to_dict(),
                "lunch": self.lunch.to_dict(),
                "dinner": self.dinner.to_dict(),
            },
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DayItinerary":
        meals = d.get("meals") or {}
        return cls(
            day=int(_num(d.get("day"))),
            date=_date(d.get("date")),
            activities=[Activity.from_dict(a) for a in d.get("activities") or []],
            total_cost=_num(d.get("totalCost")),
            total_duration=_num(d.get("totalDuration")),
            transportation=Transportation.from_dict(d.get("transportation")),
            breakfast=Meal.from_dict(meals.get("breakfast")),
            lunch=Meal.from_dict(meals.get("lunch")),
            dinner=Meal.from_dict(meals.get("dinner")),
        )


@dataclass
class Accommodation:
    name: str = ""
    type: str = ""
    cost: float = 0
    location: str = ""
    rating: float = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "cost": self.cost,
            "location": self.location,
            "rating": self.rating,
        }

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "Accommodation":
        d = d or {}
        return cls(
            name=d.get("name", ""),
            type=d.get("type", ""),
            cost=_num(d.get("cost")),
            location=d.get("location", ""),
            rating=_num(d.get("rating")),
        )


@dataclass
class Itinerary:
    id: str
    title: str
    location: str
    start_date: Optional[dt.date]
    end_date: Optional[dt.date]
    total_days: int
    total_budget: float
    days: List[DayItinerary] = field(default_factory=list)
    accommodation: Accommodation = field(default_factory=Accommodation)
    summary: str = ""
    actual_cost: float = 0
    user_id: str = ""
    created_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    updated_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "location": self.location,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "totalDays": self.total_days,
            "totalBudget": self.total_budget,
            "actualCost": self.actual_cost,
            "days": [d.to_dict() for d in self.days],
            "accommodation": self.accommodation.to_dict(),
            "summary": self.summary,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Itinerary":
        days = [DayItinerary.from_dict(x) for x in d.get("days") or []]
        return cls(
            id=str(d.get("id", "")),
            user_id=d.get("userId") or "",
            title=d.get("title", ""),
            location=d.get("location", ""),
            start_date=_date(d.get("startDate")),
            end_date=_date(d.get("endDate")),
            total_days=int(_num(d.get("totalDays"), len(days))),
            total_budget=_num(d.get("totalBudget")),
            actual_cost=_num(d.get("actualCost"), sum(x.total_cost for x in days)),
            days=days,
            accommodation=Accommodation.from_dict(d.get("accommodation")),
            summary=d.get("summary", ""),
            created_at=_datetime(d.get("createdAt")),
            updated_at=_datetime(d.get("updatedAt")),
        )


@dataclass
class OptimizationConditions:
    weather: Optional[str] = None
    events: List[str] = field(default_factory=list)
    availability: Dict[str, bool] = field(default_factory=dict)


# ──────────────────────────────────────────────────────────────────────────────
# Weather
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class ForecastDay:
    date: dt.date
    temp_min: float
    temp_max: float
    condition: str
    description: str
    precipitation: float = 0

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "temperature": {"min": self.temp_min, "max": self.temp_max},
            "condition": self.condition,
            "description": self.description,
            "precipitation": self.precipitation,
        }


@dataclass
class WeatherData:
    location: str
    temperature: float
    condition: str
    description: str = ""
    humidity: float = 0
    wind_speed: float = 0   # km/h
    visibility: float = 0   # km
    uv_index: float = 0
    forecast: List[ForecastDay] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "temperature": self.temperature,
            "condition": self.condition,
            "description": self.description,
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
            "visibility": self.visibility,
            "uvIndex": self.uv_index,
            "forecast": [f.to_dict() for f in self.forecast],
        }


@dataclass
class WeatherConditions:
    suitable: bool
    recommendations: List[str] = field(default_factory=list)
    alternative_activities: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "suitable": self.suitable,
            "recommendations": self.recommendations,
            "alternativeActivities": self.alternative_activities,
        }


# ──────────────────────────────────────────────────────────────────────────────
# Local events
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class PriceRange:
    min: float
    max: float
    currency: str = "INR"


@dataclass
class LocalEvent:
    id: str
    name: str
    description: str
    date: dt.date
    start_time: str
    end_time: str
    venue: str
    address: str
    coordinates: Coordinates
    category: str
    price: PriceRange
    organizer: str
    tags: List[str] = field(default_factory=list)
    capacity: Optional[int] = None
    website: Optional[str] = None
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "date": self.date.isoformat(),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": {
                "name": self.venue,
                "address": self.address,
                "coordinates": self.coordinates.to_dict(),
            },
            "category": self.category,
            "price": {"min": self.price.min, "max": self.price.max, "currency": self.price.currency},
            "capacity": self.capacity,
            "organizer": self.organizer,
            "website": self.website,
            "imageUrl": self.image_url,
            "tags": self.tags,
        }


@dataclass
class EventSearchParams:
    location: str
    start_date: dt.date
    end_date: dt.date
    category: Optional[str] = None
    price_range: Optional[PriceRange] = None
    radius_km: Optional[float] = None


# ──────────────────────────────────────────────────────────────────────────────
# Maps
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class Place:
    place_id: str
    name: str
    address: str
    coordinates: Coordinates
    rating: float = 0
    price_level: Optional[int] = None
    types: List[str] = field(default_factory=list)
    photos: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "placeId": self.place_id,
            "name": self.name,
            "address": self.address,
            "coordinates": self.coordinates.to_dict(),
            "rating": self.rating,
            "priceLevel": self.price_level,
            "types": self.types,
            "photos": self.photos,
        }
