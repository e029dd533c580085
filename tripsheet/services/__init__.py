"""Services for tripsheet."""
from .llm_client import StructuredLLMClient
from .extractor import ItineraryExtractor
from .session_controller import SessionController, ExpenseEditDebouncer
from . import ledger

__all__ = [
    "StructuredLLMClient",
    "ItineraryExtractor",
    "SessionController",
    "ExpenseEditDebouncer",
    "ledger",
]
