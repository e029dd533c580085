"""
Session Controller - Owns the current trip and everything the views read.

The controller makes all decisions about state:
- When a load starts, succeeds or fails
- Which day is selected and which event is open for editing
- How an expense edit reaches the ledger

Views never change the trip directly. Every edit goes through the ledger,
the held trip is replaced wholesale, and listeners are notified.
"""
import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Optional

from .extractor import ItineraryExtractor, get_extractor
from .ledger import aggregate, find_event, recompute_totals, update_expense
from .navigation import next_stop_tip
from .sheet_source import fetch_sheet_csv
from .weather import weather_location
from ..config import settings
from ..errors import TripLoadError
from ..models.itinerary import ItineraryDay, ItineraryEvent, Trip
from ..models.ledger import ExpenseSummary
from ..models.session import ExpenseEdit, NavigationTip, SessionState, WeatherLocation

logger = logging.getLogger(__name__)

Listener = Callable[["SessionController"], None]


class ExpenseEditDebouncer:
    """
    Coalesces rapid expense edits into one write.

    Each submit cancels the armed timer and starts a new one; only the
    last edit is applied once the delay passes without another submit.
    """

    def __init__(self, apply: Callable[[ExpenseEdit], Any], delay: float):
        self._apply = apply
        self.delay = delay
        self._task: Optional[asyncio.Task] = None
        self._pending: Optional[ExpenseEdit] = None

    @property
    def pending(self) -> Optional[ExpenseEdit]:
        return self._pending

    def submit(self, edit: ExpenseEdit) -> None:
        """Arm (or re-arm) the timer with the latest values. Needs a running loop."""
        self.cancel()
        self._pending = edit
        self._task = asyncio.get_running_loop().create_task(self._fire_later())

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay)
        edit, self._pending = self._pending, None
        self._task = None
        if edit is None:
            return
        try:
            self._apply(edit)
        except Exception:
            # the task is never awaited
            logger.exception(f"Debounced expense edit for {edit.event_id} failed")

    def cancel(self) -> None:
        """Drop the pending edit."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._pending = None

    def flush(self) -> bool:
        """Apply the pending edit now. Returns whether there was one."""
        edit = self._pending
        self.cancel()
        if edit is None:
            return False
        self._apply(edit)
        return True


class SessionController:
    """Single owner of the current Trip and the UI selection."""

    def __init__(
        self,
        extractor: Optional[ItineraryExtractor] = None,
        fetch_csv: Callable[[str], Awaitable[str]] = fetch_sheet_csv,
        debounce_seconds: Optional[float] = None,
    ):
        self._extractor = extractor
        self._fetch_csv = fetch_csv

        self.state = SessionState.IDLE
        self.trip: Optional[Trip] = None
        self.error: Optional[str] = None
        self.selected_day_index = 0
        self.open_event: Optional[ItineraryEvent] = None

        self._generation = 0
        self._listeners: list[Listener] = []
        self._debouncer = ExpenseEditDebouncer(
            self._apply_edit,
            settings.expense_debounce_seconds if debounce_seconds is None else debounce_seconds,
        )

    # Notifications

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    # Loading

    async def load(
        self,
        sheet_id: Optional[str] = None,
        anchor_date: Optional[date] = None,
        length_days: Optional[int] = None,
    ) -> SessionState:
        """
        Fetch the sheet, extract it and hold the resulting trip.

        Failures never raise past this method: the state becomes FAILED,
        ``error`` holds the message and the previous trip is kept. A
        response that finishes after a newer load started is discarded.
        """
        self._generation += 1
        generation = self._generation

        self.state = SessionState.LOADING
        self.error = None
        self._notify()

        try:
            csv_text = await self._fetch_csv(sheet_id or settings.sheet_id)
            extractor = self._extractor or get_extractor()
            trip = await extractor.extract(csv_text, anchor_date or settings.trip_anchor_date, length_days)
        except TripLoadError as e:
            return self._fail(generation, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error while loading trip: {e}")
            return self._fail(generation, "An unexpected error occurred.")

        if generation != self._generation:
            logger.info(f"Discarding stale load result (request {generation}, latest {self._generation})")
            return self.state

        self._debouncer.cancel()
        self.trip = recompute_totals(trip)
        self.selected_day_index = 0
        self.open_event = self._lookup(self.open_event.id) if self.open_event else None
        self.state = SessionState.READY
        logger.info(f"Trip ready: '{self.trip.trip_title}', {len(self.trip.days)} days")
        self._notify()
        return self.state

    def _fail(self, generation: int, message: str) -> SessionState:
        if generation != self._generation:
            logger.info(f"Discarding stale load failure (request {generation}): {message}")
            return self.state
        logger.error(f"Trip load failed: {message}")
        self.state = SessionState.FAILED
        self.error = message
        self._notify()
        return self.state

    # Expense edits

    def edit_expense(self, event_id: str, amount_per_person: Any, method: Any, people_count: Any) -> bool:
        """
        Apply an expense edit right away.

        The open detail event, if it is the edited one, is refreshed from
        the new trip before listeners hear about it.

        Returns:
            False when there is no trip or no event with ``event_id``
        """
        if self.trip is None:
            return False

        updated = update_expense(self.trip, event_id, amount_per_person, method, people_count)
        if updated is self.trip:
            return False

        self.trip = updated
        if self.open_event is not None:
            self.open_event = self._lookup(self.open_event.id)
        self._notify()
        return True

    def queue_expense_edit(self, event_id: str, amount_per_person: Any, method: Any, people_count: Any) -> None:
        """Debounced edit; only the last values within the window are written."""
        edit = ExpenseEdit(
            event_id=event_id,
            amount_per_person=amount_per_person,
            method=method,
            people_count=people_count,
        )
        pending = self._debouncer.pending
        if pending is not None and pending.event_id != event_id:
            self._debouncer.flush()
        self._debouncer.submit(edit)

    def flush_pending_edits(self) -> bool:
        return self._debouncer.flush()

    def _apply_edit(self, edit: ExpenseEdit):
        self.edit_expense(edit.event_id, edit.amount_per_person, edit.method, edit.people_count)

    # Selection

    def select_day(self, index: int):
        if self.trip is None or not 0 <= index < len(self.trip.days):
            raise IndexError(f"No day at index {index}")
        self.selected_day_index = index
        self._notify()

    def open_event_detail(self, event_id: str) -> bool:
        """Open an event for editing. Returns False for an unknown id."""
        event = self._lookup(event_id)
        if event is None:
            return False
        pending = self._debouncer.pending
        if pending is not None and pending.event_id != event_id:
            self._debouncer.flush()
            event = self._lookup(event_id)
        self.open_event = event
        self._notify()
        return True

    def close_event_detail(self):
        """Close the detail view, writing any edit still waiting on the timer."""
        self._debouncer.flush()
        self.open_event = None
        self._notify()

    # Derived views

    def _lookup(self, event_id: str) -> Optional[ItineraryEvent]:
        if self.trip is None:
            return None
        found = find_event(self.trip, event_id)
        return found[2] if found else None

    def selected_day(self) -> Optional[ItineraryDay]:
        if self.trip is None or not self.trip.days:
            return None
        return self.trip.days[min(self.selected_day_index, len(self.trip.days) - 1)]

    def expense_summary(self) -> Optional[ExpenseSummary]:
        return aggregate(self.trip) if self.trip is not None else None

    def navigation_tip(self) -> Optional[NavigationTip]:
        day = self.selected_day()
        return next_stop_tip(day) if day else None

    def weather_location(self) -> Optional[WeatherLocation]:
        day = self.selected_day()
        return weather_location(day) if day else None

    def to_display_dict(self) -> dict:
        """Snapshot of the session for the API."""
        return {
            "state": self.state.value,
            "error": self.error,
            "selectedDayIndex": self.selected_day_index,
            "openEventId": self.open_event.id if self.open_event else None,
            "trip": self.trip.to_wire() if self.trip else None,
        }


# Global session controller instance
session_controller: Optional[SessionController] = None


def get_session_controller() -> SessionController:
    """Get or create the global session controller."""
    global session_controller
    if session_controller is None:
        session_controller = SessionController()
    return session_controller
