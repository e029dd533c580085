"""Tests for the itinerary schema."""
import pytest
from pydantic import ValidationError

from tripsheet.models.itinerary import (
    Coordinates,
    EventCategory,
    Expense,
    ItineraryEvent,
    PaymentMethod,
    TrafficStatus,
    Trip,
)


class TestTripParsing:
    """Parsing loose extraction output into the typed trip."""

    def test_parses_wire_payload(self, trip):
        assert trip.trip_title == "東北紅葉秘湯旅"
        assert trip.year == "2025"
        assert trip.participants == 6
        assert len(trip.days) == 2
        assert [day.date for day in trip.days] == ["2025-10-28", "2025-10-29"]

    def test_nested_details(self, trip):
        flight = trip.days[0].events[0]
        assert flight.details.transport_info.flight_number == "IT250"

        stay = trip.days[1].events[0]
        assert stay.details.onsen.has_private_bath is True
        assert stay.details.rooms[0].name == "本陣"
        assert stay.details.coordinates.lat == pytest.approx(39.8036)

        dinner = trip.days[0].events[1]
        assert dinner.details.popular_dishes[0].translated == "Beef tongue set"
        assert dinner.details.rooms is None

    def test_category_is_case_insensitive(self, trip):
        assert trip.days[0].events[1].category == EventCategory.FOOD

    def test_unknown_category_falls_back_to_other(self):
        event = ItineraryEvent.model_validate(
            {"id": "x", "time": "10:00", "activity": "Somewhere", "category": "SHOPPING"}
        )
        assert event.category == EventCategory.OTHER

    def test_traffic_status(self, trip):
        assert trip.days[0].events[1].traffic_status == TrafficStatus.MODERATE

        event = ItineraryEvent.model_validate(
            {"id": "x", "time": "10:00", "activity": "A", "trafficStatus": "gridlock"}
        )
        assert event.traffic_status is None

    def test_missing_sub_records_get_defaults(self):
        event = ItineraryEvent.model_validate(
            {"id": "x", "time": "10:00", "activity": "A", "details": None, "notes": None}
        )
        assert event.details.address is None
        assert event.expense.amount_per_person == 0
        assert event.notes == ""

    def test_missing_id_is_rejected(self):
        with pytest.raises(ValidationError):
            ItineraryEvent.model_validate({"time": "10:00", "activity": "A"})

    def test_day_requires_date(self, sample_payload):
        del sample_payload["days"][0]["date"]
        with pytest.raises(ValidationError):
            Trip.model_validate(sample_payload)

    def test_day_events_default_to_empty(self, sample_payload):
        sample_payload["days"][1]["events"] = None
        trip = Trip.model_validate(sample_payload)
        assert trip.days[1].events == []

    @pytest.mark.parametrize("participants", [0, -2, None, "many"])
    def test_headcount_defaults_to_six(self, sample_payload, participants):
        sample_payload["participants"] = participants
        assert Trip.model_validate(sample_payload).participants == 6

    def test_models_are_frozen(self, trip):
        with pytest.raises(ValidationError):
            trip.days[0].events[0].activity = "changed"


class TestExpenseParsing:
    """Loose numeric and enum handling on expenses."""

    def test_non_numeric_amount_is_zero(self):
        assert Expense.model_validate({"amountPerPerson": "tbd"}).amount_per_person == 0

    def test_amount_with_thousands_separator(self):
        assert Expense.model_validate({"amountPerPerson": "3,000"}).amount_per_person == 3000

    def test_method_parsing(self):
        assert Expense.model_validate({"method": "card"}).method == PaymentMethod.CARD
        assert Expense.model_validate({"method": "PayPay"}).method == PaymentMethod.CASH

    def test_defaults(self):
        expense = Expense.model_validate({})
        assert expense.currency == "JPY"
        assert expense.people_count == 0
        assert expense.is_estimate is False

    def test_is_estimate_from_string(self):
        assert Expense.model_validate({"isEstimate": "false"}).is_estimate is False
        assert Expense.model_validate({"isEstimate": "true"}).is_estimate is True


class TestSerialization:
    """Wire format round-trips."""

    def test_round_trip(self, trip):
        assert Trip.model_validate_json(trip.model_dump_json(by_alias=True)) == trip

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_coordinates_must_be_finite(self, value):
        with pytest.raises(ValidationError):
            Coordinates(lat=value, lng=140.1)

    def test_wire_uses_camel_case(self, trip):
        wire = trip.to_wire()
        assert "tripTitle" in wire
        expense = wire["days"][0]["events"][1]["expense"]
        assert expense["amountPerPerson"] == 3000
        assert expense["method"] == "CASH"
