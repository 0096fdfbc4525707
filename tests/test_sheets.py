# tests/test_sheets.py

import datetime
import os
import pandas as pd
from ai import gemini
from core.models import Budget, TripPreferences
from services import sheets as ss
from services import weather as wsvc


def _itinerary():
    prefs = TripPreferences(
        location="Goa",
        duration=3,
        budget=Budget(10000, 30000),
        interests=["beach"],
        start_date=datetime.date(2024, 12, 1),
    )
    return gemini.generate_mock_itinerary(prefs)


def test_frames_one_row_per_activity_and_meal():
    frames = ss.itinerary_frames(_itinerary())
    assert set(frames) == {"Itinerary", "Meals"}
    assert len(frames["Itinerary"]) == 6
    assert len(frames["Meals"]) == 9
    assert frames["Itinerary"].iloc[0]["date"] == "2024-12-01"


def test_workbook_without_sharing(monkeypatch):
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    itin = _itinerary()
    weather = wsvc.get_weather_forecast("Goa", 3)

    info = ss.generate_workbook(itin, weather)
    try:
        assert info["gsheet_url"] is None
        xls = pd.ExcelFile(info["local_file"])
        assert xls.sheet_names == ["Itinerary", "Meals", "Weather"]
        assert len(xls.parse("Weather")) == 3
    finally:
        os.remove(info["local_file"])


def test_share_needs_service_account(monkeypatch):
    monkeypatch.delenv("GOOGLE_SERVICE_ACCOUNT_FILE", raising=False)
    info = ss.generate_workbook(_itinerary(), share_with="someone@example.com")
    try:
        assert info["gsheet_url"] is None
        assert info["local_file"].endswith(".xlsx")
    finally:
        os.remove(info["local_file"])
