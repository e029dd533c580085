"""
Itinerary models - The typed shape of an extracted trip.

Every extraction result and every read/write from the API goes through
these models. Attributes are snake_case in Python and camelCase on the
wire (``tripTitle``, ``amountPerPerson``...). Models are frozen: an edit
always builds a new object with ``model_copy``.
"""
import math
from enum import Enum
from typing import Annotated, Any, Iterator, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


DEFAULT_PARTICIPANTS = 6


class EventCategory(str, Enum):
    """Closed set of itinerary event categories."""
    TRANSPORT = "TRANSPORT"
    FOOD = "FOOD"
    ACTIVITY = "ACTIVITY"
    STAY = "STAY"
    OTHER = "OTHER"


class PaymentMethod(str, Enum):
    """How an expense is settled."""
    CASH = "CASH"
    CARD = "CARD"


class TrafficStatus(str, Enum):
    """Three-level traffic estimate for the leg leading to an event."""
    NORMAL = "normal"
    MODERATE = "moderate"
    CONGESTED = "congested"


def coerce_number(value: Any) -> float:
    """Loose numeric parse: anything non-numeric (or NaN) counts as 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def parse_enum(enum_cls: type[Enum], value: Any, fallback: Optional[Enum]) -> Optional[Enum]:
    """Match a loose value against an enum's values, case-insensitively."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted or member.name.lower() == wanted:
                return member
    return fallback


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


# Free text that the extraction backend may send as null
Text = Annotated[str, BeforeValidator(_none_to_empty)]


class SchemaModel(BaseModel):
    """Base for all itinerary models."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        coerce_numbers_to_str=True,
        allow_inf_nan=False,
    )


class Coordinates(SchemaModel):
    lat: float
    lng: float


class RoomInfo(SchemaModel):
    """A room type offered by a lodging."""
    name: Text = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None


class OnsenDetails(SchemaModel):
    """Hot-spring facts for a lodging."""
    has_private_bath: Optional[bool] = Field(None, description="貸切風呂 available")
    has_open_air: Optional[bool] = Field(None, description="露天風呂 available")
    bath_name: Optional[str] = None
    hours: Optional[str] = None
    gender_swap: Optional[str] = None
    private_bath_fee: Optional[str] = None


class HotelActivity(SchemaModel):
    name: Text = ""
    description: Text = ""
    image_url: Optional[str] = None


class Dish(SchemaModel):
    """A popular dish, original name plus translation."""
    original: Text = ""
    translated: Text = ""


class TransportInfo(SchemaModel):
    departure_terminal: Optional[str] = None
    arrival_terminal: Optional[str] = None
    flight_number: Optional[str] = None


class CarRentalInfo(SchemaModel):
    model: Optional[str] = None
    company: Optional[str] = None
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None


class LocationDetails(SchemaModel):
    """
    Category-specific facts about the place an event happens at.

    Everything is optional; which sub-records are present decides what a
    client renders.
    """
    japanese_name: Optional[str] = None
    hiragana: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    opening_hours: Optional[str] = None
    holidays: Optional[str] = None
    last_order: Optional[str] = None

    reservation_url: Optional[str] = None
    tabelog_url: Optional[str] = None
    website_url: Optional[str] = None

    is_reserved: Optional[bool] = None

    # Stay
    rooms: Optional[list[RoomInfo]] = None
    room_type: Optional[str] = Field(None, description="Fallback for data without a room list")
    meal_plan: Optional[str] = Field(None, description="e.g. 素泊, 一泊二食")
    onsen: Optional[OnsenDetails] = None
    hotel_activities: Optional[list[HotelActivity]] = None

    # Food
    popular_dishes: Optional[list[Dish]] = None

    # Transport
    transport_info: Optional[TransportInfo] = None
    car_rental: Optional[CarRentalInfo] = None

    coordinates: Optional[Coordinates] = None


class Expense(SchemaModel):
    """
    Per-event expense.

    ``total`` is display data only; the ledger recomputes it on every
    write and never trusts the stored value.
    """
    amount_per_person: float = 0.0
    currency: str = "JPY"
    method: PaymentMethod = PaymentMethod.CASH
    is_estimate: bool = False
    people_count: int = Field(0, description="0 means unset, use the trip headcount")
    total: float = 0.0

    @field_validator("amount_per_person", "total", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("people_count", mode="before")
    @classmethod
    def _parse_people_count(cls, value: Any) -> int:
        return int(coerce_number(value))

    @field_validator("method", mode="before")
    @classmethod
    def _parse_method(cls, value: Any) -> PaymentMethod:
        return parse_enum(PaymentMethod, value, PaymentMethod.CASH)

    @field_validator("currency", mode="before")
    @classmethod
    def _parse_currency(cls, value: Any) -> str:
        return value or "JPY"

    @field_validator("is_estimate", mode="before")
    @classmethod
    def _parse_is_estimate(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return bool(value)


class ItineraryEvent(SchemaModel):
    """A single scheduled activity, meal, stay or transport leg."""
    id: str = Field(..., min_length=1, description="Stable identifier, unique within the trip")
    time: str = Field(..., description="Start time HH:MM")
    end_time: Optional[str] = None
    activity: str = Field(..., description="Short place or shop name, never a sentence")
    location: Text = ""
    notes: Text = ""
    category: EventCategory = EventCategory.OTHER
    emoji: Optional[str] = None
    details: LocationDetails = Field(default_factory=LocationDetails)
    expense: Expense = Field(default_factory=Expense)

    # Navigation hints
    estimated_travel_time: Optional[str] = Field(None, description="e.g. '45 min'")
    estimated_arrival_time: Optional[str] = Field(None, description="HH:MM")
    distance: Optional[str] = Field(None, description="e.g. '12 km'")
    traffic_status: Optional[TrafficStatus] = None

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, value: Any) -> EventCategory:
        return parse_enum(EventCategory, value, EventCategory.OTHER)

    @field_validator("traffic_status", mode="before")
    @classmethod
    def _parse_traffic(cls, value: Any) -> Optional[TrafficStatus]:
        return parse_enum(TrafficStatus, value, None)

    @field_validator("details", "expense", mode="before")
    @classmethod
    def _default_sub_record(cls, value: Any) -> Any:
        return {} if value is None else value


class ItineraryDay(SchemaModel):
    """One calendar day of the trip."""
    date: str = Field(..., min_length=1)
    day_of_week: Text = Field("", description="3-letter uppercase, e.g. TUE")
    day_number: Text = Field("", description="Day of month, e.g. '28'")
    day_title: Text = ""
    summary: Text = ""
    location: Text = ""
    image_keyword: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    events: list[ItineraryEvent] = Field(default_factory=list)

    @field_validator("events", mode="before")
    @classmethod
    def _default_events(cls, value: Any) -> Any:
        return [] if value is None else value


class Trip(SchemaModel):
    """Complete trip: ordered days, each with ordered events."""
    trip_title: str = Field(..., description="Title of the trip")
    year: Text = ""
    month: Text = Field("", description="Month label, e.g. 'OCT'")
    participants: int = Field(DEFAULT_PARTICIPANTS, gt=0, description="Traveler headcount")
    days: list[ItineraryDay]

    @field_validator("participants", mode="before")
    @classmethod
    def _parse_participants(cls, value: Any) -> int:
        count = int(coerce_number(value))
        return count if count > 0 else DEFAULT_PARTICIPANTS

    def iter_events(self) -> Iterator[tuple[ItineraryDay, ItineraryEvent]]:
        """Yield (day, event) pairs in day order, then event order."""
        for day in self.days:
            for event in day.events:
                yield day, event

    def event_ids(self) -> list[str]:
        return [event.id for _, event in self.iter_events()]

    def to_wire(self) -> dict:
        """Camel-cased, JSON-ready dictionary."""
        return self.model_dump(mode="json", by_alias=True)
