"""
Extraction prompts - Calendar mapping, instruction text and output schema.
"""
from datetime import date, timedelta

from pydantic import BaseModel

from ..models.itinerary import Trip


WEEKDAY_ABBREVIATIONS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")
MONTH_ABBREVIATIONS = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)


class CalendarDay(BaseModel):
    """Absolute date for one relative trip day."""
    day_index: int
    date: date
    day_number: str
    day_of_week: str


def build_calendar(anchor_date: date, length_days: int) -> list[CalendarDay]:
    """Map Day 1..N onto real dates starting at ``anchor_date``."""
    calendar = []
    for offset in range(max(length_days, 1)):
        current = anchor_date + timedelta(days=offset)
        calendar.append(CalendarDay(
            day_index=offset + 1,
            date=current,
            day_number=str(current.day),
            day_of_week=WEEKDAY_ABBREVIATIONS[current.weekday()],
        ))
    return calendar


def month_label(anchor_date: date) -> str:
    return MONTH_ABBREVIATIONS[anchor_date.month - 1]


def _format_calendar(calendar: list[CalendarDay]) -> str:
    lines = []
    previous_month = calendar[0].date.month
    for entry in calendar:
        line = f"   - **Day {entry.day_index}**: {entry.date.isoformat()} = {entry.day_number} ({entry.day_of_week})"
        if entry.date.month != previous_month:
            line += f" [{month_label(entry.date)}]"
            previous_month = entry.date.month
        lines.append(line)
    return "\n".join(lines)


SYSTEM_PROMPT = "You are a travel expert. Output JSON only. Use {language} for descriptions."


INSTRUCTION_TEMPLATE = """You are an expert travel assistant. Analyze the following CSV travel itinerary for a group trip of {participants} people.

Your task is to convert this raw data into a rich, structured JSON itinerary.

CRITICAL INSTRUCTIONS:
1. **Dates & Calendar**:
   The trip starts on **{anchor}**.
{calendar}
   - 'date': the ISO date shown above for that day.
   - 'dayNumber': Just the digit (e.g., "28", "1").
   - 'dayOfWeek': 3-letter UPPERCASE English abbreviation (e.g., TUE, WED).
   - 'year': "{year}". 'month': "{month}" (primary month).
   - 'participants': {participants} unless the sheet says otherwise.

2. **Activity Titles**:
   - 'activity' MUST be the concise official name of the location or shop.
   - Do NOT use sentences. Move descriptions to 'notes'.

3. **Japanese Data**:
   - 'japaneseName' (Kanji) and 'hiragana' (reading) are MANDATORY for all Japanese locations.

4. **Business Info (Restaurants & Spots)**:
   - MANDATORY for FOOD and ACTIVITY venues: extract or estimate 'openingHours', 'holidays' (regular closing days) and 'lastOrder' (restaurants).
   - 'phoneNumber' whenever available. It is crucial for in-car navigation.

5. **Navigation**:
   - 'estimatedTravelTime' and 'distance' from the previous event.
   - 'estimatedArrivalTime': previous event's end time plus travel time (format HH:MM).
   - 'trafficStatus': realistic traffic for the location and time: 'normal', 'moderate' or 'congested'.

6. **Hotels & Onsen (STAY)**:
   - 'rooms': extract distinct room types.
   - 'mealPlan': specific meal info (e.g., "素泊", "一泊二食").
   - 'onsen': look for 貸切 (private bath, with fee) and 露天 (open-air), plus bath hours.

7. **Restaurants (FOOD)**:
   - 'popularDishes': original name and translated name pairs.
   - 'reservationUrl' when the sheet has one.
   - 'tabelogUrl': if not provided, generate a search URL.

8. **Expenses**:
   - 'amountPerPerson' in the sheet's currency, 'method' CASH or CARD, 'isEstimate' true when guessed.
   - Leave 'peopleCount' 0 when the sheet does not say how many people share it.

9. **Identifiers**:
   - Every event needs an 'id' unique across the whole trip (e.g., "d1-e1").

CSV Data:
```csv
{csv_text}
```"""


def build_instruction(
    csv_text: str,
    anchor_date: date,
    length_days: int,
    participants: int,
) -> str:
    """Instruction text for one extraction call."""
    calendar = build_calendar(anchor_date, length_days)
    return INSTRUCTION_TEMPLATE.format(
        participants=participants,
        anchor=anchor_date.strftime("%Y-%m-%d"),
        calendar=_format_calendar(calendar),
        year=anchor_date.year,
        month=month_label(anchor_date),
        csv_text=csv_text,
    )


def build_system_prompt(language: str) -> str:
    return SYSTEM_PROMPT.format(language=language)


def itinerary_output_schema() -> dict:
    """JSON Schema of the Trip model, camelCased as on the wire."""
    return Trip.model_json_schema(by_alias=True)
