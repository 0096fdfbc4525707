# core/i18n.py

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

DEFAULT_LANGUAGE = "en"

LANGUAGES: List[Dict[str, str]] = [
    {"code": "en", "name": "English", "nativeName": "English"},
    {"code": "hi", "name": "Hindi", "nativeName": "हिन्दी"},
    {"code": "ta", "name": "Tamil", "nativeName": "தமிழ்"},
    {"code": "bn", "name": "Bengali", "nativeName": "বাংলা"},
]

_INDIAN_LANGUAGES = ("hi", "ta", "bn")

_HINDI_MONTHS = [
    "जनवरी", "फ़रवरी", "मार्च", "अप्रैल", "मई", "जून",
    "जुलाई", "अगस्त", "सितंबर", "अक्तूबर", "नवंबर", "दिसंबर",
]

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "nav.home": "Home",
        "nav.plan": "Plan Trip",
        "tripPlanner.title": "AI Trip Planner",
        "tripPlanner.generating": "Generating your itinerary...",
        "itinerary.title": "Your Itinerary",
        "itinerary.summary": "Trip Summary",
        "itinerary.activities": "Activities",
        "itinerary.transportation": "Transportation",
        "itinerary.meals": "Meals",
        "itinerary.weather": "Weather",
        "itinerary.events": "Local Events",
        "booking.totalAmount": "Total Amount",
        "common.loading": "Loading...",
        "common.error": "Error",
        "common.download": "Download",
    },
    "hi": {
        "nav.home": "होम",
        "nav.plan": "यात्रा योजना",
        "tripPlanner.title": "एआई यात्रा योजनाकार",
        "tripPlanner.generating": "आपकी यात्रा योजना बनाई जा रही है...",
        "itinerary.title": "आपकी यात्रा योजना",
        "itinerary.summary": "यात्रा सारांश",
        "itinerary.activities": "गतिविधियाँ",
        "itinerary.transportation": "परिवहन",
        "itinerary.meals": "भोजन",
        "itinerary.weather": "मौसम",
        "itinerary.events": "स्थानीय कार्यक्रम",
        "booking.totalAmount": "कुल राशि",
        "common.loading": "लोड हो रहा है...",
        "common.error": "त्रुटि",
        "common.download": "डाउनलोड",
    },
    "ta": {
        "nav.home": "வீடு",
        "nav.plan": "பயணம் திட்டமிடு",
        "tripPlanner.title": "AI பயண திட்டமிடுபவர்",
        "itinerary.title": "உங்கள் பயணத் திட்டம்",
        "itinerary.activities": "செயல்பாடுகள்",
        "itinerary.transportation": "போக்குவரத்து",
        "itinerary.meals": "உணவு",
        "booking.totalAmount": "மொத்த தொகை",
        "common.loading": "ஏற்றுகிறது...",
        "common.error": "பிழை",
    },
    "bn": {
        "nav.home": "হোম",
        "nav.plan": "ভ্রমণ পরিকল্পনা",
        "tripPlanner.title": "এআই ভ্রমণ পরিকল্পনাকারী",
        "itinerary.title": "আপনার ভ্রমণসূচি",
        "itinerary.activities": "কার্যক্রম",
        "itinerary.transportation": "পরিবহন",
        "itinerary.meals": "খাবার",
        "booking.totalAmount": "মোট পরিমাণ",
        "common.loading": "লোড হচ্ছে...",
        "common.error": "ত্রুটি",
    },
}


def _indian_grouping(amount: float) -> str:
    # 1500 -> 1,500 ; 150000 -> 1,50,000
    negative = amount < 0
    whole, _, frac = f"{abs(amount):.2f}".partition(".")
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    text = ",".join(groups + [tail]) if groups else tail
    if frac.strip("0"):
        text += "." + frac.rstrip("0")
    return ("-" if negative else "") + text


def _western_grouping(amount: float) -> str:
    if float(amount).is_integer():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}".rstrip("0")


class Translator:
    """Language selection and string lookup for one caller (request, CLI run)."""

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        self.language = DEFAULT_LANGUAGE
        self.set_language(language)

    def set_language(self, language: str) -> None:
        self.language = language if language in TRANSLATIONS else DEFAULT_LANGUAGE

    def get_current_language(self) -> str:
        return self.language

    def t(self, key: str) -> str:
        return TRANSLATIONS[self.language].get(key) or TRANSLATIONS[DEFAULT_LANGUAGE].get(key) or key

    @staticmethod
    def get_available_languages() -> List[Dict[str, str]]:
        return [dict(lang) for lang in LANGUAGES]

    @staticmethod
    def is_rtl(language: str) -> bool:
        return False

    def format_currency(self, amount: float, currency: str = "INR") -> str:
        if self.language in _INDIAN_LANGUAGES:
            return f"₹{_indian_grouping(amount)}"
        return f"{currency} {_western_grouping(amount)}"

    def format_date(self, date: dt.date, language: Optional[str] = None) -> str:
        language = language or self.language
        if language == "en":
            return f"{date.strftime('%B')} {date.day}, {date.year}"
        return f"{date.day} {_HINDI_MONTHS[date.month - 1]} {date.year}"
