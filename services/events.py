# services/events.py

import logging
import datetime as dt
from core.models import Coordinates, EventSearchParams, LocalEvent, PriceRange

logger = logging.getLogger(__name__)


def _catalogue() -> list[LocalEvent]:
    """
    Retourne les événements factices de démonstration, datés par rapport à
    aujourd'hui. À remplacer plus tard par Eventbrite / Facebook Events.
    """
    today = dt.date.today()
    return [
        LocalEvent(
            id="event_1",
            name="Cultural Heritage Festival",
            description="A celebration of local culture with traditional music, dance, and food.",
            date=today + dt.timedelta(days=2),
            start_time="10:00",
            end_time="18:00",
            venue="City Center Plaza",
            address="123 Main Street, City Center",
            coordinates=Coordinates(28.6139, 77.2090),
            category="cultural",
            price=PriceRange(0, 500, "INR"),
            capacity=1000,
            organizer="City Cultural Society",
            website="https://example.com/heritage-festival",
            tags=["culture", "heritage", "music", "dance", "food"],
        ),
        LocalEvent(
            id="event_2",
            name="Food & Wine Tasting",
            description="Experience local cuisine and wines from the region.",
            date=today + dt.timedelta(days=3),
            start_time="19:00",
            end_time="22:00",
            venue="Grand Hotel Ballroom",
            address="456 Hotel Street, Downtown",
            coordinates=Coordinates(28.6140, 77.2091),
            category="food",
            price=PriceRange(1500, 2500, "INR"),
            capacity=100,
            organizer="Local Restaurant Association",
            website="https://example.com/food-wine-tasting",
            tags=["food", "wine", "tasting", "gourmet"],
        ),
        LocalEvent(
            id="event_3",
            name="Art Exhibition Opening",
            description="Contemporary art exhibition featuring local and international artists.",
            date=today + dt.timedelta(days=1),
            start_time="18:00",
            end_time="21:00",
            venue="Modern Art Gallery",
            address="789 Art District, Cultural Quarter",
            coordinates=Coordinates(28.6141, 77.2092),
            category="exhibition",
            price=PriceRange(0, 0, "INR"),
            capacity=200,
            organizer="Modern Art Gallery",
            website="https://example.com/art-exhibition",
            tags=["art", "exhibition", "contemporary", "culture"],
        ),
    ]


def search_events(params: EventSearchParams) -> list[LocalEvent]:
    events = [e for e in _catalogue() if params.start_date <= e.date <= params.end_date]

    if params.category:
        events = [e for e in events if e.category == params.category]

    if params.price_range:
        lo, hi = params.price_range.min, params.price_range.max
        events = [e for e in events if e.price.min >= lo and e.price.max <= hi]

    logger.debug("%d events for %s between %s and %s",
                 len(events), params.location, params.start_date, params.end_date)
    return events


def get_events_for_date(location: str, date: dt.date) -> list[LocalEvent]:
    return search_events(EventSearchParams(location, date, date))


def get_events_by_category(location: str, category: str,
                           start: dt.date, end: dt.date) -> list[LocalEvent]:
    return search_events(EventSearchParams(location, start, end, category=category))


def get_free_events(location: str, start: dt.date, end: dt.date) -> list[LocalEvent]:
    return search_events(EventSearchParams(location, start, end, price_range=PriceRange(0, 0)))


def recommend_events(events: list[LocalEvent], interests: list[str]) -> list[LocalEvent]:
    """
    Rank events by interest relevance: +1 for each interest found in the
    tags, +2 when an interest names the category. Events scoring zero are
    dropped; equal scores keep their catalogue order.
    """
    scored = []
    for event in events:
        score = 0
        for interest in interests:
            wanted = interest.lower()
            if wanted in event.tags:
                score += 1
            if event.category == wanted:
                score += 2
        if score > 0:
            scored.append((score, event))

    scored.sort(key=lambda x: x[0], reverse=True)
    return [event for _, event in scored]


def get_event_recommendations(location: str, interests: list[str],
                              start: dt.date, end: dt.date) -> list[LocalEvent]:
    return recommend_events(search_events(EventSearchParams(location, start, end)), interests)


def get_event_by_id(event_id: str) -> LocalEvent | None:
    today = dt.date.today()
    events = search_events(EventSearchParams("", today, today + dt.timedelta(days=30)))
    return next((e for e in events if e.id == event_id), None)
