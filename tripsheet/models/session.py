"""
Session models - UI-side state that is not part of the itinerary itself.
"""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .itinerary import PaymentMethod, TrafficStatus, coerce_number, parse_enum


class SessionState(str, Enum):
    """Current state of the session."""
    IDLE = "idle"  # Nothing requested yet
    LOADING = "loading"  # Fetch + extraction in flight
    READY = "ready"  # A trip is loaded
    FAILED = "failed"  # Last load failed; a previous trip may still be held


class NavigationTip(BaseModel):
    """Heads-up for the next stop of the selected day."""
    next_location: str
    estimated_time: Optional[str] = None
    estimated_arrival: Optional[str] = None
    distance: Optional[str] = None
    traffic_status: TrafficStatus = TrafficStatus.NORMAL


class WeatherLocation(BaseModel):
    """Where to look up the weather for a day."""
    name: str
    lat: Optional[float] = None
    lng: Optional[float] = None

    def has_coordinates(self) -> bool:
        # 0.0 is treated as absent, matching how sheets leave blanks
        return bool(self.lat) and bool(self.lng)


class HourlyForecast(BaseModel):
    """Hourly series for the current day."""
    time: list[str] = Field(default_factory=list)
    temperature_2m: list[float] = Field(default_factory=list)
    weathercode: list[int] = Field(default_factory=list)


class ExpenseEdit(BaseModel):
    """An expense edit as typed into the detail view."""
    event_id: str
    amount_per_person: float = 0.0
    method: Optional[PaymentMethod] = None  # None keeps the event's current method
    people_count: int = 0

    @field_validator("amount_per_person", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("people_count", mode="before")
    @classmethod
    def _parse_people_count(cls, value: Any) -> int:
        return int(coerce_number(value))

    @field_validator("method", mode="before")
    @classmethod
    def _parse_method(cls, value: Any) -> Optional[PaymentMethod]:
        return parse_enum(PaymentMethod, value, None)
