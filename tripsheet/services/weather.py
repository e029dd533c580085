"""
Weather Service - Hourly forecast for a day's location (Open-Meteo, keyless).
"""
import logging
from typing import Optional

import httpx

from ..config import settings
from ..models.itinerary import EventCategory, ItineraryDay
from ..models.session import HourlyForecast, WeatherLocation

logger = logging.getLogger(__name__)


def weather_location(day: ItineraryDay) -> WeatherLocation:
    """Prefer the day's lodging when it has coordinates, else the day itself."""
    for event in day.events:
        if event.category == EventCategory.STAY and event.details.coordinates:
            return WeatherLocation(
                name=event.activity,
                lat=event.details.coordinates.lat,
                lng=event.details.coordinates.lng,
            )

    return WeatherLocation(
        name=day.location,
        lat=day.coordinates.lat if day.coordinates else None,
        lng=day.coordinates.lng if day.coordinates else None,
    )


def describe_weather_code(code: int) -> str:
    """Bucket a WMO weather code."""
    if code <= 1:
        return "clear"
    if code <= 3:
        return "cloudy"
    if code <= 67:
        return "rain"
    if code <= 77:
        return "snow"
    return "storm"


async def fetch_hourly_forecast(
    lat: Optional[float],
    lng: Optional[float],
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[HourlyForecast]:
    """
    Fetch today's hourly temperature and weather code.

    No request is made without coordinates. Failures are logged and
    return None; weather is never worth failing a page over.
    """
    if not lat or not lng:
        return None

    params = {
        "latitude": lat,
        "longitude": lng,
        "hourly": "temperature_2m,weathercode",
        "timezone": "auto",
        "forecast_days": 1,
    }

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        close_client = True

    try:
        response = await client.get(settings.weather_base_url, params=params)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            logger.error(f"Unexpected weather response: {type(payload).__name__}")
            return None
        return HourlyForecast.model_validate(payload.get("hourly") or {})
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Failed to fetch weather: {e}")
        return None
    finally:
        if close_client:
            await client.aclose()
