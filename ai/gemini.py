# ai/gemini.py
# ------------------------------------------------------------------------------
import os
import json
import logging
import random
import textwrap
import time
import uuid
import datetime as dt

import google.generativeai as genai
from core.models import (
    Accommodation,
    Activity,
    Budget,
    Coordinates,
    DayItinerary,
    Itinerary,
    Meal,
    OptimizationConditions,
    Transportation,
    TripPreferences,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-pro"


# ──────────────────────────────────────────────────────────────────────────────
# Helper: configured Gemini model, or None when no key is set
# ──────────────────────────────────────────────────────────────────────────────
def _get_model():
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        return None
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(os.getenv("GEMINI_MODEL", DEFAULT_MODEL))


def _new_itinerary_id() -> str:
    return f"itinerary_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


# ──────────────────────────────────────────────────────────────────────────────
# Prompt template – create a *new* itinerary
# ──────────────────────────────────────────────────────────────────────────────
_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    You are an expert travel planner. Create a detailed, personalized itinerary
    for a trip with the following requirements:

    Trip details:
    - Location: {location}
    - Dates: {start} → {end} ({duration} days)
    - Budget: {budget_min} - {budget_max} {currency}
    - Group size: {group_size} people
    - Travel style: {travel_style}
    - Interests: {interests}
    - Accommodation type: {accommodation_type}
    - Transportation: {transportation}

    Requirements:
    1. A day-by-day plan with specific activities, timings and costs.
    2. Breakfast, lunch and dinner recommendations with local restaurants.
    3. Transportation between locations.
    4. Realistic cost estimates; the total must stay within the budget range.
    5. A mix of popular attractions and hidden gems that fit the interests.
    6. Booking requirements and best times to visit.

    Answer in **JSON** only:
    {{
      "title": "Trip title",
      "summary": "Brief trip summary",
      "accommodation": {{"name": "...", "type": "hotel", "cost": 0, "location": "...", "rating": 4.5}},
      "days": [
        {{
          "day": 1,
          "date": "YYYY-MM-DD",
          "activities": [
            {{
              "id": "unique_id",
              "name": "...",
              "description": "...",
              "category": "sightseeing|adventure|cultural|food|shopping|entertainment",
              "duration": 2,
              "cost": 100,
              "location": {{"name": "...", "coordinates": {{"lat": 0, "lng": 0}}}},
              "rating": 4.5,
              "bookingRequired": true,
              "timeSlot": "morning|afternoon|evening|night"
            }}
          ],
          "totalCost": 500,
          "totalDuration": 8,
          "transportation": {{"mode": "taxi|bus|metro|walking", "cost": 50, "duration": 1}},
          "meals": {{
            "breakfast": {{"name": "...", "cost": 50, "location": "..."}},
            "lunch": {{"name": "...", "cost": 100, "location": "..."}},
            "dinner": {{"name": "...", "cost": 150, "location": "..."}}
          }}
        }}
      ]
    }}
    """
)

_OPTIMIZE_TEMPLATE = textwrap.dedent(
    """\
    You are an expert travel planner. Optimize the following itinerary based
    on real-time conditions.

    Current itinerary (JSON):
    {itinerary_json}

    Real-time conditions:
    - Weather: {weather}
    - Local events: {events}
    - Activity availability: {availability}

    Constraints:
    * Adjust activities to the weather.
    * Include or avoid local events as appropriate.
    * Replace unavailable activities with suitable alternatives.
    * Keep the same budget, duration and overall structure.

    Return the **full** optimized itinerary in the exact same JSON schema.
    """
)


def build_itinerary_prompt(prefs: TripPreferences) -> str:
    """Return the generation prompt for Gemini."""
    return _PROMPT_TEMPLATE.format(
        location=prefs.location,
        start=prefs.start.isoformat(),
        end=prefs.end.isoformat(),
        duration=prefs.duration,
        budget_min=prefs.budget.min,
        budget_max=prefs.budget.max,
        currency=prefs.budget.currency,
        group_size=prefs.group_size,
        travel_style=prefs.travel_style,
        interests=", ".join(prefs.interests),
        accommodation_type=prefs.accommodation_type,
        transportation=prefs.transportation,
    )


def build_optimization_prompt(itinerary: Itinerary, conditions: OptimizationConditions) -> str:
    return _OPTIMIZE_TEMPLATE.format(
        itinerary_json=json.dumps(itinerary.to_dict(), indent=2, ensure_ascii=False),
        weather=conditions.weather or "Normal conditions",
        events=", ".join(conditions.events) or "No special events",
        availability=json.dumps(conditions.availability),
    )


# ──────────────────────────────────────────────────────────────────────────────
# Response parsing
# ──────────────────────────────────────────────────────────────────────────────
def extract_json(text: str) -> dict:
    """
    Return the first JSON object embedded in a free-text model answer.

    Every "{" is tried as a start position in order; the first one that
    decodes to a dict wins, anything after it is ignored.
    """
    decoder = json.JSONDecoder()
    cleaned = text.strip().strip("`")
    pos = cleaned.find("{")
    while pos != -1:
        try:
            obj, _ = decoder.raw_decode(cleaned, pos)
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict):
            return obj
        pos = cleaned.find("{", pos + 1)
    raise ValueError("No valid JSON found in AI response")


def parse_itinerary_response(text: str, prefs: TripPreferences) -> Itinerary:
    data = extract_json(text)
    if not isinstance(data.get("days"), list):
        raise ValueError("AI response has no 'days' list")

    days = [DayItinerary.from_dict(d) for d in data["days"]]
    return Itinerary(
        id=_new_itinerary_id(),
        title=data.get("title") or f"{prefs.location} Adventure",
        location=prefs.location,
        start_date=prefs.start,
        end_date=prefs.end,
        total_days=prefs.duration,
        total_budget=prefs.budget.max,
        actual_cost=sum(d.total_cost for d in days),
        days=days,
        accommodation=Accommodation.from_dict(data.get("accommodation")),
        summary=data.get("summary", ""),
    )


# ──────────────────────────────────────────────────────────────────────────────
# Mock itinerary (no model configured, or the model failed)
# ──────────────────────────────────────────────────────────────────────────────
def generate_mock_itinerary(prefs: TripPreferences) -> Itinerary:
    days = []
    for i in range(1, prefs.duration + 1):
        days.append(
            DayItinerary(
                day=i,
                date=prefs.start + dt.timedelta(days=i - 1),
                activities=[
                    Activity(
                        id=f"activity_{i}_1",
                        name=f"Morning Activity - Day {i}",
                        description="Explore local attractions and cultural sites",
                        category="sightseeing",
                        duration=3,
                        cost=random.randint(200, 699),
                        location_name=f"{prefs.location} City Center",
                        coordinates=Coordinates(28.6139, 77.2090),
                        rating=4.5,
                        booking_required=False,
                        time_slot="morning",
                    ),
                    Activity(
                        id=f"activity_{i}_2",
                        name=f"Afternoon Experience - Day {i}",
                        description="Local food tour and cultural immersion",
                        category="food",
                        duration=2,
                        cost=random.randint(150, 449),
                        location_name=f"Local Market, {prefs.location}",
                        coordinates=Coordinates(28.6140, 77.2091),
                        rating=4.2,
                        booking_required=True,
                        time_slot="afternoon",
                    ),
                ],
                total_cost=random.randint(500, 1299),
                total_duration=8,
                transportation=Transportation(
                    mode="Metro/Bus" if prefs.transportation == "public" else "Taxi",
                    cost=random.randint(100, 299),
                    duration=1,
                ),
                breakfast=Meal("Local Cafe", 150, "Hotel Area"),
                lunch=Meal("Traditional Restaurant", 300, "City Center"),
                dinner=Meal("Fine Dining", 500, "Downtown"),
            )
        )

    if prefs.accommodation_type == "hotel":
        stay_name = "Grand Hotel"
    else:
        stay_name = f"Cozy {prefs.accommodation_type}"

    return Itinerary(
        id=_new_itinerary_id(),
        title=f"{prefs.location} Adventure - {prefs.duration} Days",
        location=prefs.location,
        start_date=prefs.start,
        end_date=prefs.end,
        total_days=prefs.duration,
        total_budget=prefs.budget.max,
        actual_cost=sum(d.total_cost for d in days),
        days=days,
        accommodation=Accommodation(
            name=stay_name,
            type=prefs.accommodation_type,
            cost=random.randint(1000, 2999),
            location=f"{prefs.location} City Center",
            rating=4.3,
        ),
        summary=(
            f"A wonderful {prefs.duration}-day adventure in {prefs.location} featuring "
            f"{', '.join(prefs.interests)} experiences. Perfect for {prefs.travel_style} "
            f"travelers with a budget of {prefs.budget.currency} {prefs.budget.max:,.0f}."
        ),
    )


# ──────────────────────────────────────────────────────────────────────────────
# Generate itinerary from scratch
# ──────────────────────────────────────────────────────────────────────────────
def generate_itinerary(prefs: TripPreferences) -> Itinerary:
    model = _get_model()
    if model is None:
        logger.info("GEMINI_API_KEY not set, using mock itinerary for %s", prefs.location)
        return generate_mock_itinerary(prefs)

    try:
        resp = model.generate_content(build_itinerary_prompt(prefs))
        return parse_itinerary_response(resp.text, prefs)
    except Exception:
        logger.exception("Itinerary generation failed, falling back to mock itinerary")
        return generate_mock_itinerary(prefs)


# ──────────────────────────────────────────────────────────────────────────────
# Optimize an existing itinerary against real-time conditions
# ──────────────────────────────────────────────────────────────────────────────
def optimize_itinerary(itinerary: Itinerary, conditions: OptimizationConditions) -> Itinerary:
    """
    Ask Gemini to adapt an itinerary to weather, events and availability.
    Identity and creation time are carried over from the input itinerary.
    Without a configured model the itinerary comes back unchanged.
    """
    model = _get_model()
    if model is None:
        logger.info("GEMINI_API_KEY not set, returning itinerary %s unchanged", itinerary.id)
        return itinerary

    prefs = TripPreferences(
        location=itinerary.location,
        duration=itinerary.total_days,
        budget=Budget(min=0, max=itinerary.total_budget),
        start_date=itinerary.start_date,
    )
    try:
        resp = model.generate_content(build_optimization_prompt(itinerary, conditions))
        optimized = parse_itinerary_response(resp.text, prefs)
    except Exception as exc:
        logger.exception("Itinerary optimization failed for %s", itinerary.id)
        raise RuntimeError("Failed to optimize itinerary") from exc

    optimized.id = itinerary.id
    optimized.user_id = itinerary.user_id
    optimized.created_at = itinerary.created_at
    optimized.updated_at = dt.datetime.now(dt.timezone.utc)
    return optimized
