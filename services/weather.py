import os, logging, random, datetime as dt, requests
from core.models import ForecastDay, WeatherConditions, WeatherData

logger = logging.getLogger(__name__)

_BASE_URL = "https://api.openweathermap.org/data/2.5"

_MOCK_CONDITIONS = ["Clear", "Partly Cloudy", "Cloudy", "Rain", "Sunny"]


def _api_key() -> str | None:
    return os.getenv("OPENWEATHER_API_KEY") or None


def _get(endpoint: str, location: str, api_key: str) -> dict:
    params = {
        "q": location,
        "units": "metric",
        "appid": api_key,
    }
    r = requests.get(f"{_BASE_URL}/{endpoint}", params=params, timeout=10)
    r.raise_for_status()
    return r.json()


def _group_forecast(slots: list[dict]) -> list[ForecastDay]:
    # Regrouper par jour
    buckets: dict[dt.date, list] = {}
    for s in slots:
        d = dt.datetime.fromtimestamp(s["dt"]).date()
        buckets.setdefault(d, []).append(s)

    days: list[ForecastDay] = []
    for day, lst in buckets.items():
        temps = [v["main"]["temp"] for v in lst]
        pivot = max(lst, key=lambda v: v.get("pop", 0))  # créneau le + pluvieux
        days.append(
            ForecastDay(
                date=day,
                temp_min=round(min(temps)),
                temp_max=round(max(temps)),
                condition=pivot["weather"][0]["main"],
                description=pivot["weather"][0]["description"],
                precipitation=round(pivot.get("pop", 0) * 100),
            )
        )
    return sorted(days, key=lambda f: f.date)


def _mock_weather(location: str) -> WeatherData:
    today = dt.date.today()
    return WeatherData(
        location=location,
        temperature=25,
        condition="Clear",
        description="Clear sky",
        humidity=65,
        wind_speed=12,
        visibility=10,
        uv_index=6,
        forecast=[
            ForecastDay(today + dt.timedelta(days=1), 20, 28, "Partly Cloudy",
                        "Partly cloudy with some sun", 10),
            ForecastDay(today + dt.timedelta(days=2), 18, 26, "Rain",
                        "Light rain expected", 80),
        ],
    )


def get_current_weather(location: str) -> WeatherData:
    """
    Current conditions plus the grouped 5-day forecast from OpenWeather.
    Falls back to a fixed snapshot when OPENWEATHER_API_KEY is not set.
    """
    api_key = _api_key()
    if not api_key:
        logger.info("OPENWEATHER_API_KEY not set, using mock weather for %s", location)
        return _mock_weather(location)

    try:
        now = _get("weather", location, api_key)
        slots = _get("forecast", location, api_key)["list"]
    except (requests.RequestException, KeyError, ValueError) as exc:
        logger.exception("Error fetching weather data for %s", location)
        raise RuntimeError("Failed to fetch weather data") from exc

    today = dt.date.today()
    return WeatherData(
        location=location,
        temperature=round(now["main"]["temp"]),
        condition=now["weather"][0]["main"],
        description=now["weather"][0]["description"],
        humidity=now["main"].get("humidity", 0),
        wind_speed=round(now.get("wind", {}).get("speed", 0) * 3.6, 1),
        visibility=round(now.get("visibility", 0) / 1000, 1),
        uv_index=0,  # not part of the 2.5 weather endpoint
        forecast=[f for f in _group_forecast(slots) if f.date > today],
    )


def get_weather_forecast(location: str, days: int) -> WeatherData:
    """Snapshot with exactly ``days`` forecast entries, starting tomorrow."""
    weather = get_current_weather(location)
    today = dt.date.today()

    if _api_key():
        # OpenWeather only covers five days; pad the tail with the last known day
        known = {f.date: f for f in weather.forecast}
        forecast = []
        last = weather.forecast[-1] if weather.forecast else None
        for i in range(1, days + 1):
            d = today + dt.timedelta(days=i)
            f = known.get(d)
            if f is None and last is not None:
                f = ForecastDay(d, last.temp_min, last.temp_max, last.condition,
                                last.description, last.precipitation)
            if f is not None:
                forecast.append(f)
        weather.forecast = forecast
        return weather

    weather.forecast = [
        ForecastDay(
            date=today + dt.timedelta(days=i),
            temp_min=random.randint(15, 24),
            temp_max=random.randint(25, 39),
            condition=random.choice(_MOCK_CONDITIONS),
            description="Weather description",
            precipitation=random.randint(0, 99),
        )
        for i in range(1, days + 1)
    ]
    return weather


# ──────────────────────────────────────────────────────────────────────────────
# Activity suitability
# ──────────────────────────────────────────────────────────────────────────────
def analyze_weather_conditions(weather: WeatherData, activity_type: str) -> WeatherConditions:
    recommendations: list[str] = []
    alternatives: list[str] = []
    suitable = True

    kind = activity_type.lower()
    raining = "rain" in weather.condition.lower()

    if kind in ("outdoor", "sightseeing"):
        if raining:
            suitable = False
            recommendations += ["Bring an umbrella or raincoat", "Consider indoor alternatives"]
            alternatives += ["Museums", "Indoor markets", "Art galleries"]
        if weather.temperature < 10:
            recommendations += ["Dress warmly", "Consider hot beverages"]
        if weather.temperature > 35:
            recommendations += [
                "Stay hydrated",
                "Avoid peak sun hours (12-3 PM)",
                "Wear sunscreen and hat",
            ]

    elif kind in ("adventure", "hiking"):
        if raining:
            suitable = False
            recommendations += ["Trails may be slippery", "Consider postponing or indoor activities"]
            alternatives += ["Indoor rock climbing", "Museums", "Shopping"]
        if weather.wind_speed > 20:
            recommendations.append("High winds may affect safety")
            alternatives += ["Indoor activities", "City tours"]

    elif kind in ("beach", "water sports"):
        if weather.temperature < 20:
            suitable = False
            recommendations.append("Water may be too cold")
            alternatives += ["Beach walking", "Beachside restaurants", "Spa treatments"]
        if weather.wind_speed > 15:
            recommendations.append("Strong winds may affect water activities")

    elif kind in ("food tour", "shopping"):
        if raining:
            recommendations.append("Bring an umbrella")

    else:
        if raining:
            recommendations.append("Bring rain protection")
        if weather.temperature < 15:
            recommendations.append("Dress warmly")
        if weather.temperature > 30:
            recommendations.append("Stay hydrated and use sunscreen")

    return WeatherConditions(suitable, recommendations, alternatives)


_CONDITION_ADVICE = {
    "clear": ["Perfect day for outdoor photography", "Great weather for walking tours"],
    "sunny": ["Perfect day for outdoor photography", "Great weather for walking tours"],
    "partly cloudy": ["Good weather for outdoor activities with some shade"],
    "cloudy": ["Comfortable weather for extended outdoor activities"],
    "rain": [
        "Consider indoor activities and cultural sites",
        "Perfect weather for cozy cafes and restaurants",
    ],
}


def get_weather_based_recommendations(weather: WeatherData) -> list[str]:
    recommendations: list[str] = []

    if weather.temperature < 10:
        recommendations.append("Perfect weather for indoor activities like museums and cafes")
        recommendations.append("Consider hot chocolate or warm beverages")
    elif weather.temperature > 35:
        recommendations.append("Great weather for early morning or evening activities")
        recommendations.append("Consider water activities or air-conditioned venues")
    else:
        recommendations.append("Ideal weather for outdoor activities and sightseeing")

    recommendations += _CONDITION_ADVICE.get(weather.condition.lower(), [])

    if weather.uv_index > 6:
        recommendations.append("High UV index - use sunscreen and seek shade")

    return recommendations
