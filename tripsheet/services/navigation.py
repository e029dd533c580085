"""
Navigation tip for the next stop of a day.
"""
from typing import Optional

from ..models.itinerary import ItineraryDay, TrafficStatus
from ..models.session import NavigationTip


def next_stop_tip(day: ItineraryDay) -> Optional[NavigationTip]:
    """Tip for the day's second event; None when there is nothing to drive to."""
    if len(day.events) < 2:
        return None

    next_event = day.events[1]
    return NavigationTip(
        next_location=next_event.activity,
        estimated_time=next_event.estimated_travel_time,
        estimated_arrival=next_event.estimated_arrival_time,
        distance=next_event.distance,
        traffic_status=next_event.traffic_status or TrafficStatus.NORMAL,
    )
