# main.py

import os
import math
import logging
import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from dotenv import load_dotenv

from core.models import (
    Budget,
    EventSearchParams,
    Itinerary,
    OptimizationConditions,
    PriceRange,
    TripPreferences,
)
from services import events as esvc, maps as msvc, mailer, sheets as ss, weather as wsvc
from ai import gemini

# Charge les variables d'environnement (.env)
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AI Trip Planner API",
    version="1.0.0",
    description="Itinerary generation with Gemini, weather, local events and places search.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # malformed requests are client errors, reported as 400 rather than 422
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# ──────────────────────────────────────────────────────────────────────────────
# Request schemas
# ──────────────────────────────────────────────────────────────────────────────
class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BudgetIn(_CamelModel):
    min: float
    max: float
    currency: Literal["INR", "USD", "EUR"] = "INR"


class PreferencesIn(_CamelModel):
    location: Optional[str] = None
    duration: Optional[int] = None
    budget: Optional[BudgetIn] = None
    start_date: Optional[dt.date] = None
    group_size: int = Field(1, ge=1, le=20)
    interests: List[str] = []
    travel_style: Literal["budget", "luxury", "adventure", "cultural", "wellness"] = "budget"
    accommodation_type: Literal["hotel", "hostel", "homestay", "resort"] = "hotel"
    transportation: Literal["public", "private", "mixed"] = "mixed"


class GenerateRequest(_CamelModel):
    preferences: Optional[PreferencesIn] = None


class ExportRequest(_CamelModel):
    itinerary: Optional[Dict[str, Any]] = None
    email: Optional[EmailStr] = None
    include_weather: bool = False


class ShareRequest(_CamelModel):
    itinerary: Optional[Dict[str, Any]] = None
    email: EmailStr


def _to_preferences(p: Optional[PreferencesIn]) -> TripPreferences:
    if p is None or not p.location or not p.duration or p.budget is None:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: location, duration, and budget are required",
        )
    if p.budget.min >= p.budget.max:
        raise HTTPException(status_code=400, detail="Minimum budget must be less than maximum budget")
    if p.duration < 1 or p.duration > 30:
        raise HTTPException(status_code=400, detail="Duration must be between 1 and 30 days")

    return TripPreferences(
        location=p.location,
        duration=p.duration,
        budget=Budget(min=p.budget.min, max=p.budget.max, currency=p.budget.currency),
        interests=list(p.interests),
        travel_style=p.travel_style,
        group_size=p.group_size,
        accommodation_type=p.accommodation_type,
        transportation=p.transportation,
        start_date=p.start_date,
    )


def _to_itinerary(raw: Any) -> Itinerary:
    if not raw:
        raise HTTPException(status_code=400, detail="Itinerary is required")
    if (not isinstance(raw, dict) or not raw.get("id") or not isinstance(raw.get("days"), list)
            or not all(isinstance(d, dict) for d in raw["days"])):
        raise HTTPException(status_code=400, detail="Invalid itinerary structure")
    return Itinerary.from_dict(raw)


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────
@app.get("/", tags=["Health"])
def read_root():
    return {"status": "ok", "message": "AI Trip Planner API is running"}


@app.post("/api/generate-itinerary")
def generate_itinerary_endpoint(req: GenerateRequest):
    try:
        prefs = _to_preferences(req.preferences)
        itin = gemini.generate_itinerary(prefs)
        return {"success": True, "itinerary": itin.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error generating itinerary")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/optimize-itinerary")
def optimize_itinerary_endpoint(payload: Optional[Dict[str, Any]] = Body(None)):
    try:
        payload = payload or {}
        raw_itin = payload.get("itinerary")
        raw_cond = payload.get("conditions")
        if not raw_itin:
            raise HTTPException(status_code=400, detail="Itinerary is required")
        if raw_cond is None:
            raise HTTPException(status_code=400, detail="Conditions are required")
        itin = _to_itinerary(raw_itin)
        if not isinstance(raw_cond, dict):
            raise HTTPException(status_code=400, detail="Conditions are required")

        events = raw_cond.get("events")
        conditions = OptimizationConditions(
            weather=raw_cond.get("weather"),
            events=[events] if isinstance(events, str) else list(events or []),
            availability=dict(raw_cond.get("availability") or {}),
        )
        optimized = gemini.optimize_itinerary(itin, conditions)
        return {"success": True, "itinerary": optimized.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error optimizing itinerary")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/places/search")
def search_places_endpoint(
    q: Optional[str] = None,
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius: Optional[str] = None,
    type: Optional[str] = None,
):
    try:
        if not q:
            raise HTTPException(status_code=400, detail='Query parameter "q" is required')

        location = None
        if lat and lng:
            try:
                location = {"lat": float(lat), "lng": float(lng)}
            except ValueError:
                location = None
            if location is None or not all(math.isfinite(v) for v in location.values()):
                raise HTTPException(status_code=400, detail="Invalid latitude or longitude values")

        try:
            search_radius = int(radius) if radius else 5000
        except ValueError:
            search_radius = -1
        if search_radius < 0:
            raise HTTPException(status_code=400, detail="Invalid radius value")

        if type == "restaurant":
            places = msvc.search_restaurants(location or {"lat": 0, "lng": 0}, search_radius, q)
        elif type == "attraction":
            places = msvc.search_nearby_attractions(
                location or {"lat": 0, "lng": 0}, search_radius, "tourist_attraction"
            )
        else:
            places = msvc.search_places(q, location, search_radius)

        return {
            "success": True,
            "places": [p.to_dict() for p in places],
            "query": q,
            "location": location,
            "radius": search_radius,
            "type": type,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error searching places")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/weather")
def weather_endpoint(
    location: str,
    days: Optional[int] = Query(None, ge=1, le=30),
    activity: Optional[str] = None,
):
    try:
        weather = wsvc.get_weather_forecast(location, days) if days else wsvc.get_current_weather(location)
        body = {
            "success": True,
            "weather": weather.to_dict(),
            "recommendations": wsvc.get_weather_based_recommendations(weather),
        }
        if activity:
            body["analysis"] = wsvc.analyze_weather_conditions(weather, activity).to_dict()
        return body
    except Exception as e:
        logger.exception("Error fetching weather for %s", location)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/events")
def events_endpoint(
    location: str,
    start_date: dt.date = Query(..., alias="startDate"),
    end_date: dt.date = Query(..., alias="endDate"),
    category: Optional[Literal["festival", "concert", "exhibition", "sports", "cultural", "food", "other"]] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
):
    price_range = None
    if min_price is not None or max_price is not None:
        price_range = PriceRange(
            min=min_price if min_price is not None else 0,
            max=max_price if max_price is not None else float("inf"),
        )
    params = EventSearchParams(location, start_date, end_date, category=category, price_range=price_range)
    found = esvc.search_events(params)
    return {"success": True, "events": [e.to_dict() for e in found]}


@app.get("/api/events/recommendations")
def event_recommendations_endpoint(
    location: str,
    interests: str,
    start_date: dt.date = Query(..., alias="startDate"),
    end_date: dt.date = Query(..., alias="endDate"),
):
    wanted = [i.strip() for i in interests.split(",") if i.strip()]
    found = esvc.get_event_recommendations(location, wanted, start_date, end_date)
    return {"success": True, "events": [e.to_dict() for e in found]}


@app.post("/api/export-itinerary")
def export_itinerary_endpoint(req: ExportRequest):
    try:
        itin = _to_itinerary(req.itinerary)
        weather = None
        if req.include_weather:
            weather = wsvc.get_weather_forecast(itin.location, max(itin.total_days, 1))
        wb_info = ss.generate_workbook(itin, weather, req.email)
        headers = {"X-Gsheet-Url": wb_info["gsheet_url"]} if wb_info["gsheet_url"] else None
        return FileResponse(
            wb_info["local_file"],
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=os.path.basename(wb_info["local_file"]),
            headers=headers,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error exporting itinerary")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/share-itinerary")
def share_itinerary_endpoint(req: ShareRequest):
    try:
        itin = _to_itinerary(req.itinerary)
        wb_info = ss.generate_workbook(itin, share_with=req.email)
        mailer.send_itinerary_email(
            req.email, itin,
            attachment_path=wb_info["local_file"],
            gsheet_url=wb_info["gsheet_url"],
        )
        return {"success": True, "message": "Itinerary sent", "gsheetUrl": wb_info["gsheet_url"]}
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error sharing itinerary")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
