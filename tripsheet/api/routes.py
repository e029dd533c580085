"""
API Routes for tripsheet.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..models.itinerary import PaymentMethod
from ..services.session_controller import SessionController, get_session_controller
from ..services.weather import describe_weather_code, fetch_hourly_forecast


router = APIRouter(prefix="/api", tags=["tripsheet"])


# Request Models
class LoadRequest(BaseModel):
    sheet_id: Optional[str] = None
    anchor_date: Optional[date] = None
    length_days: Optional[int] = None


class SelectDayRequest(BaseModel):
    index: int


class ExpenseUpdateRequest(BaseModel):
    amount_per_person: float
    method: PaymentMethod
    people_count: int = 0
    debounce: bool = False


def _require_trip(controller: SessionController):
    if controller.trip is None:
        raise HTTPException(status_code=409, detail="No itinerary loaded yet")


def _require_event(controller: SessionController, event_id: str):
    _require_trip(controller)
    if event_id not in controller.trip.event_ids():
        raise HTTPException(status_code=404, detail="Event not found")


# Endpoints

@router.post("/trip/load")
async def load_trip(request: LoadRequest):
    """Fetch and extract the sheet. Load errors come back in the body, not as HTTP errors."""
    controller = get_session_controller()
    await controller.load(request.sheet_id, request.anchor_date, request.length_days)
    return controller.to_display_dict()


@router.get("/trip")
async def get_trip():
    """Get the current trip and session state."""
    return get_session_controller().to_display_dict()


@router.post("/trip/select-day")
async def select_day(request: SelectDayRequest):
    controller = get_session_controller()
    _require_trip(controller)
    try:
        controller.select_day(request.index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"selectedDayIndex": controller.selected_day_index}


@router.get("/trip/navigation")
async def get_navigation_tip():
    """Next-stop tip for the selected day."""
    controller = get_session_controller()
    _require_trip(controller)
    tip = controller.navigation_tip()
    return {"tip": tip.model_dump(mode="json") if tip else None}


@router.get("/trip/weather")
async def get_weather():
    """Hourly forecast for the selected day's location."""
    controller = get_session_controller()
    _require_trip(controller)
    location = controller.weather_location()
    if location is None or not location.has_coordinates():
        return {"location": location.model_dump() if location else None, "forecast": None}

    forecast = await fetch_hourly_forecast(location.lat, location.lng)
    return {
        "location": location.model_dump(),
        "forecast": forecast.model_dump() if forecast else None,
        "conditions": [describe_weather_code(code) for code in forecast.weathercode] if forecast else [],
    }


@router.post("/events/{event_id}/open")
async def open_event(event_id: str):
    controller = get_session_controller()
    _require_event(controller, event_id)
    controller.open_event_detail(event_id)
    return {"event": controller.open_event.model_dump(mode="json", by_alias=True)}


@router.get("/events/open")
async def get_open_event():
    controller = get_session_controller()
    event = controller.open_event
    return {"event": event.model_dump(mode="json", by_alias=True) if event else None}


@router.delete("/events/open")
async def close_event():
    get_session_controller().close_event_detail()
    return {"event": None}


@router.put("/events/{event_id}/expense")
async def update_event_expense(event_id: str, request: ExpenseUpdateRequest):
    """Update one event's expense, immediately or through the debounce timer."""
    controller = get_session_controller()
    _require_event(controller, event_id)

    if request.debounce:
        controller.queue_expense_edit(
            event_id, request.amount_per_person, request.method, request.people_count
        )
        return {"queued": True}

    controller.edit_expense(event_id, request.amount_per_person, request.method, request.people_count)
    found = [event for _, event in controller.trip.iter_events() if event.id == event_id]
    return {
        "queued": False,
        "expense": found[0].expense.model_dump(mode="json", by_alias=True),
    }


@router.get("/expenses/summary")
async def get_expense_summary():
    """Cash / card / grand totals plus the line items."""
    controller = get_session_controller()
    _require_trip(controller)
    return controller.expense_summary().to_display_dict()
