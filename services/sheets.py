# services/sheets.py

from __future__ import annotations
import os, logging, tempfile

import pandas as pd
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.models import Itinerary, WeatherData

logger = logging.getLogger(__name__)

SHEET_NAMES = ["Itinerary", "Meals", "Weather"]


def _create_gsheet_with_tabs(xlsx_path: str, share_with: str) -> str | None:
    """
    1) Crée un Google Sheet avec un onglet par feuille du XLSX
    2) Copie le contenu du XLSX dans ces onglets
    3) Partage la feuille avec l'e-mail `share_with`
    Retourne l'URL web du Google Sheet ou None si échec / non configuré.
    """
    sa_file = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE")
    if not sa_file or not os.path.exists(sa_file):
        return None

    scopes = [
        "https://www.googleapis.com/auth/drive",
        "https://www.googleapis.com/auth/spreadsheets",
    ]
    creds = Credentials.from_service_account_file(sa_file, scopes=scopes)
    xls = pd.ExcelFile(xlsx_path)
    tabs = [name for name in SHEET_NAMES if name in xls.sheet_names]

    try:
        sheets_service = build("sheets", "v4", credentials=creds)
        spreadsheet_body = {
            "properties": {"title": os.path.splitext(os.path.basename(xlsx_path))[0]},
            "sheets": [{"properties": {"title": name}} for name in tabs],
        }
        spreadsheet = sheets_service.spreadsheets().create(
            body=spreadsheet_body, fields="spreadsheetId"
        ).execute()
        sheet_id: str = spreadsheet["spreadsheetId"]
        web_url = f"https://docs.google.com/spreadsheets/d/{sheet_id}"

        for sheet_name in tabs:
            df = xls.parse(sheet_name).fillna("")
            values = [df.columns.tolist()] + df.values.tolist()

            sheets_service.spreadsheets().values().append(
                spreadsheetId=sheet_id,
                range=f"{sheet_name}!A1",
                valueInputOption="RAW",
                body={"values": values},
            ).execute()

        drive_service = build("drive", "v3", credentials=creds)
        drive_service.permissions().create(
            fileId=sheet_id,
            body={"type": "user", "role": "writer", "emailAddress": share_with},
            sendNotificationEmail=True,
        ).execute()

        return web_url

    except HttpError:
        logger.exception("Google Sheets export failed for %s", xlsx_path)
        return None


def itinerary_frames(itin: Itinerary, weather: WeatherData | None = None) -> dict[str, pd.DataFrame]:
    activity_rows = [
        {
            "day": d.day,
            "date": d.date.isoformat() if d.date else "",
            "time_slot": a.time_slot,
            "activity": a.name,
            "category": a.category,
            "duration_h": a.duration,
            "cost": a.cost,
            "location": a.location_name,
            "booking_required": a.booking_required,
        }
        for d in itin.days
        for a in d.activities
    ]
    meal_rows = [
        {"day": d.day, "meal": label, "name": meal.name, "cost": meal.cost, "location": meal.location}
        for d in itin.days
        for label, meal in (("breakfast", d.breakfast), ("lunch", d.lunch), ("dinner", d.dinner))
    ]
    frames = {
        "Itinerary": pd.DataFrame(activity_rows, columns=[
            "day", "date", "time_slot", "activity", "category",
            "duration_h", "cost", "location", "booking_required",
        ]),
        "Meals": pd.DataFrame(meal_rows, columns=["day", "meal", "name", "cost", "location"]),
    }
    if weather is not None:
        frames["Weather"] = pd.DataFrame(
            [
                {
                    "date": f.date.isoformat(),
                    "condition": f.condition,
                    "description": f.description,
                    "temp_min": f.temp_min,
                    "temp_max": f.temp_max,
                    "precipitation": f.precipitation,
                }
                for f in weather.forecast
            ],
            columns=["date", "condition", "description", "temp_min", "temp_max", "precipitation"],
        )
    return frames


def generate_workbook(itin: Itinerary,
                      weather: WeatherData | None = None,
                      share_with: str | None = None) -> dict:
    """
    Construit en local un XLSX (Itinerary, Meals et éventuellement Weather),
    puis tente de l'uploader dans Google Sheets si `share_with` est fourni.
    Renvoie {"local_file": <chemin>, "gsheet_url": <URL ou None>}.
    """
    tmp_dir = tempfile.gettempdir()
    first_day = itin.start_date.isoformat() if itin.start_date else "undated"
    base_name = f"itinerary_{first_day}_{itin.id}"
    xlsx_path = os.path.join(tmp_dir, f"{base_name}.xlsx")

    with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
        for name, df in itinerary_frames(itin, weather).items():
            df.to_excel(writer, sheet_name=name, index=False)

    gsheet_url = _create_gsheet_with_tabs(xlsx_path, share_with) if share_with else None
    return {"local_file": xlsx_path, "gsheet_url": gsheet_url}
