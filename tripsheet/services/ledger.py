"""
Expense Ledger - Pure functions over a Trip.

Nothing here mutates its input or keeps state. An edit returns a new Trip
that shares every untouched day and event with the old one; only the
path down to the edited event is rebuilt.
"""
import logging
from typing import Any, Optional

from ..models.itinerary import (
    ItineraryEvent,
    PaymentMethod,
    Trip,
    coerce_number,
    parse_enum,
)
from ..models.ledger import ExpenseLineItem, ExpenseSummary

logger = logging.getLogger(__name__)


def coerce_amount(value: Any) -> float:
    """Per-person amount; missing or non-numeric counts as 0."""
    return coerce_number(value)


def resolve_people_count(people_count: Any, participants: int) -> int:
    """People sharing an expense; missing, zero or negative falls back to the headcount."""
    count = int(coerce_number(people_count))
    return count if count > 0 else participants


def find_event(trip: Trip, event_id: str) -> Optional[tuple[int, int, ItineraryEvent]]:
    """
    Locate an event by id.

    Days are scanned in order and the first match wins.

    Returns:
        (day_index, event_index, event) or None when no event has that id
    """
    for day_index, day in enumerate(trip.days):
        for event_index, event in enumerate(day.events):
            if event.id == event_id:
                return day_index, event_index, event
    return None


def _replace_event(trip: Trip, day_index: int, event_index: int, event: ItineraryEvent) -> Trip:
    day = trip.days[day_index]
    events = list(day.events)
    events[event_index] = event
    days = list(trip.days)
    days[day_index] = day.model_copy(update={"events": events})
    return trip.model_copy(update={"days": days})


def update_expense(
    trip: Trip,
    event_id: str,
    amount_per_person: Any,
    method: Any,
    people_count: Any,
) -> Trip:
    """
    Set one event's expense and recompute its total.

    Currency and the estimate flag are kept. The stored people count is
    the resolved one, so ``total == amount_per_person * people_count``
    always holds for the written expense.

    Returns:
        A new Trip, or the very same ``trip`` object when no event has
        ``event_id``.
    """
    found = find_event(trip, event_id)
    if found is None:
        logger.warning(f"Expense update ignored, no event with id {event_id!r}")
        return trip

    day_index, event_index, event = found
    amount = coerce_amount(amount_per_person)
    people = resolve_people_count(people_count, trip.participants)
    expense = event.expense.model_copy(update={
        "amount_per_person": amount,
        "method": parse_enum(PaymentMethod, method, event.expense.method),
        "people_count": people,
        "total": amount * people,
    })
    return _replace_event(trip, day_index, event_index, event.model_copy(update={"expense": expense}))


def recompute_totals(trip: Trip) -> Trip:
    """
    Rewrite every stored total from amount x resolved people count.

    Returns the same ``trip`` object when every total is already right.
    """
    days = list(trip.days)
    changed = False
    for day_index, day in enumerate(trip.days):
        events = list(day.events)
        day_changed = False
        for event_index, event in enumerate(day.events):
            expense = event.expense
            total = expense.amount_per_person * resolve_people_count(expense.people_count, trip.participants)
            if expense.total != total:
                events[event_index] = event.model_copy(
                    update={"expense": expense.model_copy(update={"total": total})}
                )
                day_changed = True
        if day_changed:
            days[day_index] = day.model_copy(update={"events": events})
            changed = True

    if not changed:
        return trip
    return trip.model_copy(update={"days": days})


def aggregate(trip: Trip) -> ExpenseSummary:
    """
    Trip-wide totals grouped by settlement method.

    Totals are recomputed here; stored ``total`` fields are never read.
    Events with no positive per-person amount are left out.
    """
    cash_total = 0.0
    card_total = 0.0
    line_items = []

    for day, event in trip.iter_events():
        amount = coerce_amount(event.expense.amount_per_person)
        if amount <= 0:
            continue
        total = amount * resolve_people_count(event.expense.people_count, trip.participants)
        if event.expense.method == PaymentMethod.CASH:
            cash_total += total
        elif event.expense.method == PaymentMethod.CARD:
            card_total += total
        line_items.append(ExpenseLineItem(event=event, day_title=day.day_title, total=total))

    return ExpenseSummary(
        cash_total=cash_total,
        card_total=card_total,
        grand_total=cash_total + card_total,
        line_items=line_items,
    )
