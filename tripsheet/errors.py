"""
Error taxonomy for loading a trip.
Every failure that can happen between "load requested" and "trip ready".
"""


class TripLoadError(Exception):
    """Base class for failures surfaced to the user as a load error."""

    default_message = "An unexpected error occurred."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class SourceUnavailable(TripLoadError):
    """The source spreadsheet could not be fetched (network or not found)."""

    default_message = "Failed to fetch sheet."


class EmptyResultError(TripLoadError):
    """The extraction capability returned no payload at all."""

    default_message = "No data returned from AI."


class DataFormatError(TripLoadError):
    """The extraction payload is not parseable as an itinerary."""

    default_message = "Failed to parse itinerary data."


class MissingCredential(TripLoadError):
    """No access key is configured for the extraction capability."""

    default_message = "API Key is missing."


class ExtractionFailed(TripLoadError):
    """The extraction capability call itself failed."""

    default_message = "Extraction service request failed."
