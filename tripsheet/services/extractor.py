"""
Itinerary Extractor - Turns raw sheet text into a Trip.
"""
import logging
from collections import Counter
from datetime import date
from typing import Optional

from pydantic import ValidationError

from .llm_client import get_llm_client, parse_json_response
from .prompts import build_instruction, build_system_prompt, itinerary_output_schema
from ..config import settings
from ..errors import DataFormatError, EmptyResultError
from ..models.itinerary import Trip

logger = logging.getLogger(__name__)


class ItineraryExtractor:
    """Extracts a structured Trip from free-form tabular text."""

    def __init__(self, llm=None):
        self.llm = llm or get_llm_client()

    async def extract(
        self,
        csv_text: str,
        anchor_date: date,
        length_days: Optional[int] = None,
        participants: Optional[int] = None,
    ) -> Trip:
        """
        Extract a trip from CSV text.

        Makes exactly one call to the LLM; retrying is up to the caller.
        Expense totals are not checked here (see ``ledger.recompute_totals``).

        Args:
            csv_text: Raw sheet export
            anchor_date: Real date of Day 1
            length_days: Number of days to lay out in the calendar
            participants: Default headcount to suggest

        Returns:
            The parsed Trip

        Raises:
            EmptyResultError: The LLM returned no text
            DataFormatError: The text is not a valid itinerary
        """
        instruction = build_instruction(
            csv_text,
            anchor_date,
            length_days or settings.trip_length_days,
            participants or settings.default_participants,
        )

        text = await self.llm.generate(
            build_system_prompt(settings.output_language),
            instruction,
            itinerary_output_schema(),
        )

        if not text or not text.strip():
            raise EmptyResultError("No data returned from AI.")

        return self.parse(text)

    def parse(self, text: str) -> Trip:
        """Parse LLM output as a Trip."""
        try:
            payload = parse_json_response(text)
        except ValueError as e:
            logger.error(f"Failed to parse AI response: {e}")
            raise DataFormatError("Failed to parse itinerary data.") from e

        try:
            trip = Trip.model_validate(payload)
        except ValidationError as e:
            logger.error(f"AI response does not match the itinerary schema: {e.error_count()} errors")
            raise DataFormatError(
                f"Failed to parse itinerary data: {e.error_count()} invalid field(s)."
            ) from e

        duplicates = [event_id for event_id, count in Counter(trip.event_ids()).items() if count > 1]
        if duplicates:
            logger.warning(f"Extracted trip has duplicate event ids: {duplicates}")

        logger.info(f"Extracted trip '{trip.trip_title}' with {len(trip.days)} days")
        return trip


# Global extractor instance
extractor: Optional[ItineraryExtractor] = None


def get_extractor() -> ItineraryExtractor:
    """Get or create the global extractor."""
    global extractor
    if extractor is None:
        extractor = ItineraryExtractor()
    return extractor
