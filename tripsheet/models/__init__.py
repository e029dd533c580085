"""Data models for tripsheet."""
from .itinerary import (
    Trip,
    ItineraryDay,
    ItineraryEvent,
    LocationDetails,
    Expense,
    EventCategory,
    PaymentMethod,
    TrafficStatus,
)
from .ledger import ExpenseSummary, ExpenseLineItem
from .session import SessionState, NavigationTip, WeatherLocation, HourlyForecast, ExpenseEdit

__all__ = [
    "Trip",
    "ItineraryDay",
    "ItineraryEvent",
    "LocationDetails",
    "Expense",
    "EventCategory",
    "PaymentMethod",
    "TrafficStatus",
    "ExpenseSummary",
    "ExpenseLineItem",
    "SessionState",
    "NavigationTip",
    "WeatherLocation",
    "HourlyForecast",
    "ExpenseEdit",
]
